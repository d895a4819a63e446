"""Unit tests for EpisodeAligner."""

import pytest

from anisub.core.domain import EpisodeAlignmentRow
from anisub.services.rename.episode_aligner import EpisodeAligner, episode_sort_key
from anisub.services.rename.episode_extractor import EpisodeKeyExtractor

from tests.fixtures.test_data import FRIEREN_SUBTITLES, FRIEREN_VIDEOS, NON_EPISODE_FILES


@pytest.fixture
def extractor():
    return EpisodeKeyExtractor()


@pytest.fixture
def aligner(extractor):
    return EpisodeAligner(extractor)


class TestAlign:
    """Tests for EpisodeAligner.align()."""

    def test_rows_pair_by_episode(self, aligner, extractor, make_video, make_subtitle):
        videos = [make_video(n) for n in FRIEREN_VIDEOS]
        subtitles = [make_subtitle(n) for n in FRIEREN_SUBTITLES]

        rows = aligner.align(videos, subtitles, extractor.default_matcher)

        assert [r.episode for r in rows] == ['01', '02', '03']
        assert rows[0].is_paired
        assert rows[1].is_missing_subtitle
        assert rows[2].subtitle.name == FRIEREN_SUBTITLES[1]

    def test_missing_lists_video_only_keys(self, aligner, extractor, make_video, make_subtitle):
        videos = [make_video(f'Show [{k}].mkv') for k in ('01', '02', '03')]
        subtitles = [make_subtitle(f'Show [{k}].srt') for k in ('01', '03')]

        rows = aligner.align(videos, subtitles, extractor.default_matcher)

        assert aligner.missing(rows) == ['02']
        assert len(aligner.pairs(rows)) == 2

    def test_align_is_idempotent(self, aligner, extractor, make_video, make_subtitle):
        videos = [make_video(n) for n in FRIEREN_VIDEOS]
        subtitles = [make_subtitle(n) for n in FRIEREN_SUBTITLES]
        matcher = extractor.default_matcher

        first = aligner.align(videos, subtitles, matcher)
        second = aligner.align(videos, subtitles, matcher)

        assert first == second

    def test_files_without_key_are_excluded(self, aligner, extractor, make_video):
        videos = [make_video(n) for n in NON_EPISODE_FILES[:1]]
        videos.append(make_video('Show [04].mkv'))

        rows = aligner.align(videos, [], extractor.default_matcher)

        assert [r.episode for r in rows] == ['04']

    def test_rows_sort_numerically(self, aligner, extractor, make_video):
        matcher = extractor.compile(r'E(\d+)')
        videos = [make_video(f'Show E{k}.mkv') for k in ('10', '9', '100')]

        rows = aligner.align(videos, [], matcher)

        assert [r.episode for r in rows] == ['9', '10', '100']

    def test_different_widths_do_not_pair(self, aligner, extractor, make_video, make_subtitle):
        matcher = extractor.compile(r'E(\d+)')
        rows = aligner.align(
            [make_video('Show E1.mkv')],
            [make_subtitle('Show E01.srt')],
            matcher
        )

        assert [r.episode for r in rows] == ['1', '01']
        assert aligner.missing(rows) == ['1']
        assert aligner.orphans(rows) == ['01']


class TestDuplicates:
    """Tests for repeated episode keys on one side."""

    def test_first_occurrence_wins(self, aligner, extractor, make_video):
        first = make_video('[A] Show [01].mkv')
        second = make_video('[B] Show [01].mkv')

        rows = aligner.align([first, second], [], extractor.default_matcher)

        assert len(rows) == 1
        assert rows[0].video is first
        assert aligner.duplicates([first, second], extractor.default_matcher) == [second]


class TestHelpers:
    """Tests for row and key helpers."""

    def test_row_needs_one_side(self):
        with pytest.raises(ValueError):
            EpisodeAlignmentRow(episode='01')

    def test_non_numeric_keys_sort_last(self):
        keys = ['SP', '02', '1', '01']
        assert sorted(keys, key=episode_sort_key) == ['01', '1', '02', 'SP']
