"""Unit tests for FileClassifier."""

import pytest

from anisub.core.domain import FileInfo
from anisub.services.rename.episode_extractor import EpisodeKeyExtractor
from anisub.services.rename.file_classifier import (
    FileClassifier,
    get_extension,
    natural_sort_key,
)


@pytest.fixture
def classifier():
    return FileClassifier()


class TestClassify:
    """Tests for FileClassifier.classify()."""

    def test_classify_drops_unknown_extensions(self, classifier):
        files = classifier.classify(['a.mkv', 'b.srt', 'c.jpg'])

        assert files == [
            FileInfo(name='a.mkv', path='a.mkv', is_video=True),
            FileInfo(name='b.srt', path='b.srt', is_video=False),
        ]

    def test_extension_is_case_insensitive(self, classifier):
        files = classifier.classify(['/media/Show [01].MKV', '/media/Show [01].ASS'])
        assert [f.is_video for f in files] == [True, False]

    def test_name_is_taken_from_either_separator(self, classifier):
        files = classifier.classify(['D:\\Anime\\Show [01].mp4', '/srv/Show [01].vtt'])
        assert [f.name for f in files] == ['Show [01].mp4', 'Show [01].vtt']
        assert files[0].path == 'D:\\Anime\\Show [01].mp4'

    def test_dotfile_has_no_extension(self, classifier):
        assert classifier.classify(['.mkv']) == []
        assert get_extension('.mkv') == ''

    def test_split_preserves_order(self, classifier):
        files = classifier.classify(['b.srt', 'a.mkv', 'c.ass', 'd.mp4'])
        videos, subtitles = classifier.split(files)
        assert [f.name for f in videos] == ['a.mkv', 'd.mp4']
        assert [f.name for f in subtitles] == ['b.srt', 'c.ass']


class TestMerge:
    """Tests for FileClassifier.merge()."""

    def test_merge_dedups_by_path_later_wins(self, classifier):
        old = FileInfo(name='ep2.srt', path='/x/ep2.srt', is_video=False)
        new = FileInfo(name='ep2.srt', path='/x/ep2.srt', is_video=True)
        other = FileInfo(name='ep10.srt', path='/x/ep10.srt', is_video=False)

        merged = classifier.merge([old, other], [new])

        assert len(merged) == 2
        assert merged[0] is new
        assert merged[1] is other

    def test_merge_sorts_numerically(self, classifier):
        files = [
            FileInfo(name=name, path=f'/x/{name}', is_video=True)
            for name in ['ep10.mkv', 'EP1.mkv', 'ep2.mkv']
        ]
        merged = classifier.merge([], files)
        assert [f.name for f in merged] == ['EP1.mkv', 'ep2.mkv', 'ep10.mkv']

    def test_merge_does_not_modify_inputs(self, classifier):
        existing = [FileInfo(name='b.mkv', path='/b.mkv', is_video=True)]
        incoming = [FileInfo(name='a.mkv', path='/a.mkv', is_video=True)]
        classifier.merge(existing, incoming)
        assert [f.name for f in existing] == ['b.mkv']

    def test_natural_sort_key_orders_digit_runs(self):
        names = ['Show 10', 'Show 9', 'show 1']
        assert sorted(names, key=natural_sort_key) == ['show 1', 'Show 9', 'Show 10']


class TestFilterDirectoryImport:
    """Tests for dropping unpairable subtitles on directory import."""

    def test_unpairable_subtitles_are_dropped(self, classifier):
        matcher = EpisodeKeyExtractor().default_matcher
        files = classifier.classify([
            '/d/Show [01].mkv',
            '/d/Show [02].mkv',
            '/d/Show [01].ass',
            '/d/Show [05].ass',
            '/d/Fonts.txt',
        ])

        kept = classifier.filter_directory_import(files, matcher)

        assert [f.name for f in kept] == ['Show [01].mkv', 'Show [02].mkv', 'Show [01].ass']

    def test_videos_without_key_are_kept(self, classifier):
        matcher = EpisodeKeyExtractor().default_matcher
        files = classifier.classify(['/d/NCOP.mkv', '/d/NCOP.ass'])

        kept = classifier.filter_directory_import(files, matcher)

        assert [f.name for f in kept] == ['NCOP.mkv']
