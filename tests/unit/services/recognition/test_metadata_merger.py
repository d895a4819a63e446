"""Unit tests for MetadataMerger."""

from unittest.mock import MagicMock

import pytest

from anisub.core.domain import AnimeInfo, RecognitionResult, SeriesDetail
from anisub.core.exceptions import AIError
from anisub.infrastructure.ai.api_client import APIResponse, OpenAIClient
from anisub.infrastructure.ai.filename_classifier import LLMFilenameClassifier
from anisub.services.recognition.metadata_merger import MetadataMerger


@pytest.fixture
def detail():
    return SeriesDetail(id=400602, name='葬送のフリーレン', name_localized='葬送的芙莉莲', year=2023)


@pytest.fixture
def merger(mock_classifier, no_sleep):
    return MetadataMerger(mock_classifier, delay=0.5, sleep=no_sleep)


class TestOverlay:
    """Tests for MetadataMerger.overlay()."""

    def test_title_and_year_replaced_rest_kept(self, detail):
        info = AnimeInfo('Frieren', season=1, episode=7, resolution='1080p', group='LoliHouse')

        merged = MetadataMerger.overlay(info, detail)

        assert merged.title == '葬送的芙莉莲'
        assert merged.year == 2023
        assert (merged.episode, merged.resolution, merged.group) == (7, '1080p', 'LoliHouse')

    def test_unknown_year_keeps_recognized_year(self):
        info = AnimeInfo('Frieren', year=2024)
        merged = MetadataMerger.overlay(info, SeriesDetail(id=1, name='Frieren'))
        assert merged.year == 2024
        assert merged.title == 'Frieren'


class TestApply:
    """Tests for MetadataMerger.apply()."""

    def test_each_video_reports_pending_then_result(self, merger, detail, make_video, make_subtitle):
        files = [make_video('a [01].mkv'), make_subtitle('a [01].ass'), make_video('a [02].mkv')]
        updates = []

        results = merger.apply(detail, files, on_update=updates.append)

        assert [r.file.name for r in results] == ['a [01].mkv', 'a [02].mkv']
        assert [u.loading for u in updates] == [True, False, True, False]
        assert all(r.info.title == '葬送的芙莉莲' for r in results)

    def test_waits_between_calls(self, merger, detail, make_video, no_sleep):
        merger.apply(detail, [make_video('a.mkv'), make_video('b.mkv'), make_video('c.mkv')])
        assert no_sleep.call_count == 2

    def test_failure_is_isolated(self, merger, mock_classifier, detail, make_video):
        good = AnimeInfo('Frieren', episode=3)
        mock_classifier.classify.side_effect = [AIError('LLM 请求失败: 502'), good]

        results = merger.apply(detail, [make_video('a.mkv'), make_video('b.mkv')])

        assert results[0].error == 'LLM 请求失败: 502'
        assert results[0].info is None
        assert results[1].info.title == '葬送的芙莉莲'
        assert results[1].info.episode == 3

    def test_malformed_replies_do_not_stop_later_files(
        self, detail, make_video, settings_store, no_sleep
    ):
        api_client = MagicMock(spec=OpenAIClient)
        api_client.call.side_effect = [
            APIResponse(success=True, content='{"title": "A", "language_tags": 5}'),
            APIResponse(success=True, content='{"season": 1e999, "episode": "02"}'),
            APIResponse(success=True, content='{"title": "A", "episode": 3}'),
        ]
        classifier = LLMFilenameClassifier(api_client=api_client, settings_store=settings_store)
        merger = MetadataMerger(classifier, delay=0.5, sleep=no_sleep)
        updates = []

        results = merger.apply(
            detail,
            [make_video('a [01].mkv'), make_video('a [02].mkv'), make_video('a [03].mkv')],
            on_update=updates.append
        )

        assert [u.loading for u in updates] == [True, False] * 3
        assert all(r.is_terminal for r in results)
        assert [r.info.episode for r in results] == [0, 2, 3]
        assert results[1].info.season == 1

    def test_pending_keeps_previous_info(self, merger, detail, make_video):
        video = make_video('a.mkv')
        previous = RecognitionResult.succeeded(video, AnimeInfo('Old'))
        updates = []

        merger.apply(detail, [video], on_update=updates.append, existing={video.path: previous})

        assert updates[0].loading is True
        assert updates[0].info.title == 'Old'


class TestMergeExisting:
    """Tests for merging without new classifier calls."""

    def test_only_terminal_results_with_info_change(self, detail, make_video):
        ok = RecognitionResult.succeeded(make_video('a.mkv'), AnimeInfo('a', episode=1))
        failed = RecognitionResult.failed(make_video('b.mkv'), 'boom')
        loading = RecognitionResult.pending(make_video('c.mkv'))

        merged = MetadataMerger.merge_existing([ok, failed, loading], detail)

        assert merged[0].info.title == '葬送的芙莉莲'
        assert merged[0].info.episode == 1
        assert merged[1] is failed
        assert merged[2] is loading


class TestPreviewName:
    """Tests for preview rendering."""

    def test_preview_uses_file_extension(self, merger, make_video):
        result = RecognitionResult.succeeded(
            make_video('x.MKV'),
            AnimeInfo('葬送的芙莉莲', season=1, episode=5, year=2023)
        )
        assert merger.preview_name(result) == '葬送的芙莉莲 (2023) - S01E05.mkv'

    def test_no_info_no_preview(self, merger, make_video):
        assert merger.preview_name(RecognitionResult.failed(make_video('x.mkv'), 'e')) is None
