"""Unit tests for SeriesTitleInferrer."""

import pytest

from anisub.core.domain import AnimeInfo, InferredTitle
from anisub.core.exceptions import AIError, TitleInferenceError
from anisub.services.recognition.title_inferrer import SeriesTitleInferrer

from tests.fixtures.test_data import FRIEREN_VIDEOS


def _by_name(mapping):
    """Classifier side effect returning per-name results."""
    def classify(filename):
        value = mapping[filename]
        if isinstance(value, Exception):
            raise value
        return value
    return classify


@pytest.fixture
def videos(make_video):
    return [make_video(n) for n in FRIEREN_VIDEOS]


class TestSelectSample:
    """Tests for sample selection."""

    def test_prefers_videos(self, make_video, make_subtitle):
        files = [make_subtitle('a very long subtitle name.ass'), make_video('v.mkv')]
        assert SeriesTitleInferrer.select_sample(files, 5) == [files[1]]

    def test_falls_back_to_any_file(self, make_subtitle):
        files = [make_subtitle('a.ass'), make_subtitle('abc.ass')]
        assert [f.name for f in SeriesTitleInferrer.select_sample(files, 5)] == ['abc.ass', 'a.ass']

    def test_longest_names_first_ties_keep_order(self, make_video):
        files = [make_video('aa.mkv'), make_video('bbbb.mkv'), make_video('cc.mkv')]
        sample = SeriesTitleInferrer.select_sample(files, 2)
        assert [f.name for f in sample] == ['bbbb.mkv', 'aa.mkv']


class TestInfer:
    """Tests for per-file inference."""

    def test_majority_title_wins(self, mock_classifier, no_sleep, videos):
        mock_classifier.classify.side_effect = _by_name({
            FRIEREN_VIDEOS[0]: AnimeInfo('Sousou no Frieren', confidence=0.8),
            FRIEREN_VIDEOS[1]: AnimeInfo('SOUSOU NO FRIEREN', confidence=0.9),
            FRIEREN_VIDEOS[2]: AnimeInfo('Frieren', confidence=0.99),
        })
        inferrer = SeriesTitleInferrer(mock_classifier, delay=0.5, sleep=no_sleep)

        result = inferrer.infer(videos)

        assert result.title.casefold() == 'sousou no frieren'
        assert result.confidence == pytest.approx(2 / 3)

    def test_waits_between_calls(self, mock_classifier, no_sleep, videos):
        inferrer = SeriesTitleInferrer(mock_classifier, delay=0.5, sleep=no_sleep)

        inferrer.infer(videos)

        assert mock_classifier.classify.call_count == 3
        assert no_sleep.call_count == 2
        no_sleep.assert_called_with(0.5)

    def test_tie_goes_to_higher_confidence(self, mock_classifier, no_sleep, make_video):
        files = [make_video('first.mkv'), make_video('other.mkv')]
        mock_classifier.classify.side_effect = _by_name({
            'first.mkv': AnimeInfo('Low', confidence=0.2),
            'other.mkv': AnimeInfo('High', confidence=0.7),
        })

        result = SeriesTitleInferrer(mock_classifier, sleep=no_sleep).infer(files)

        assert result == InferredTitle(title='High', confidence=0.5)

    def test_failures_are_skipped(self, mock_classifier, no_sleep, videos):
        mock_classifier.classify.side_effect = _by_name({
            FRIEREN_VIDEOS[0]: AIError('timeout'),
            FRIEREN_VIDEOS[1]: AnimeInfo('Sousou no Frieren', confidence=0.9),
            FRIEREN_VIDEOS[2]: AnimeInfo('   '),
        })

        result = SeriesTitleInferrer(mock_classifier, sleep=no_sleep).infer(videos)

        assert result.title == 'Sousou no Frieren'
        assert result.confidence == 1.0
        assert mock_classifier.classify.call_count == 3

    def test_all_failures_raise(self, mock_classifier, no_sleep, videos):
        mock_classifier.classify.side_effect = AIError('down')

        with pytest.raises(TitleInferenceError) as exc_info:
            SeriesTitleInferrer(mock_classifier, sleep=no_sleep).infer(videos)

        assert len(exc_info.value.sample) == 3

    def test_empty_sample_raises(self, mock_classifier):
        with pytest.raises(TitleInferenceError):
            SeriesTitleInferrer(mock_classifier).infer([])
        mock_classifier.classify.assert_not_called()

    def test_limit_caps_calls(self, mock_classifier, no_sleep, make_video):
        files = [make_video(f'Show [{k:02d}].mkv') for k in range(1, 9)]

        SeriesTitleInferrer(mock_classifier, sleep=no_sleep).infer(files, limit=5)

        assert mock_classifier.classify.call_count == 5


class TestInferBatch:
    """Tests for single-call inference."""

    def test_one_call_with_sample_names(self, mock_classifier, no_sleep, videos):
        mock_classifier.classify_batch.return_value = InferredTitle(' 葬送的芙莉莲 ', 0.95)

        result = SeriesTitleInferrer(mock_classifier, sleep=no_sleep).infer_batch(videos)

        assert result == InferredTitle('葬送的芙莉莲', 0.95)
        mock_classifier.classify_batch.assert_called_once()
        assert sorted(mock_classifier.classify_batch.call_args.args[0]) == sorted(FRIEREN_VIDEOS)
        mock_classifier.classify.assert_not_called()
        no_sleep.assert_not_called()

    def test_falls_back_without_batch_support(self, mock_classifier, no_sleep, videos):
        mock_classifier.supports_batch = False

        result = SeriesTitleInferrer(mock_classifier, sleep=no_sleep).infer_batch(videos)

        assert result.title == 'Sousou no Frieren'
        mock_classifier.classify_batch.assert_not_called()
        assert mock_classifier.classify.call_count == 3

    def test_call_failure_is_wrapped(self, mock_classifier, videos):
        mock_classifier.classify_batch.side_effect = AIError('bad gateway')

        with pytest.raises(TitleInferenceError) as exc_info:
            SeriesTitleInferrer(mock_classifier).infer_batch(videos)

        assert 'bad gateway' in exc_info.value.message

    def test_blank_title_raises(self, mock_classifier, videos):
        mock_classifier.classify_batch.return_value = InferredTitle('', 0.5)

        with pytest.raises(TitleInferenceError):
            SeriesTitleInferrer(mock_classifier).infer_batch(videos)

    def test_empty_files_raise(self, mock_classifier):
        with pytest.raises(TitleInferenceError):
            SeriesTitleInferrer(mock_classifier).infer_batch([])
