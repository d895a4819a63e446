"""
File classifier module.

Provides file classification based on file extensions, plus the
deduplicate-and-sort merge used to maintain the working set.
"""

import logging
import re
from typing import Iterable, List, Set, Tuple

from anisub.core.domain import FileInfo, split_parent
from anisub.services.rename.episode_extractor import EpisodeKeyExtractor, EpisodeMatcher

logger = logging.getLogger(__name__)


# File extension categories (lowercase, without dot)
VIDEO_EXTENSIONS: Set[str] = {
    'mp4', 'mkv', 'avi', 'mov', 'wmv', 'flv', 'webm', 'm4v', 'rmvb', '3gp'
}

SUBTITLE_EXTENSIONS: Set[str] = {
    'srt', 'ass', 'ssa', 'sub', 'idx', 'vtt', 'txt', 'smi', 'sbv', 'dfxp'
}

_DIGITS = re.compile(r'(\d+)')


def natural_sort_key(name: str) -> Tuple:
    """
    Sort key comparing digit runs by value and text case-insensitively.

    "ep2" sorts before "ep10".
    """
    parts = _DIGITS.split(name.casefold())
    return tuple(
        (0, int(part), part) if part.isdigit() else (1, 0, part)
        for part in parts
    )


def get_extension(filename: str) -> str:
    """Return the lowercased extension without the dot ('' when absent)."""
    name = split_parent(filename)[1]
    index = name.rfind('.')
    if index <= 0:
        return ''
    return name[index + 1:].lower()


class FileClassifier:
    """
    File classifier service.

    Classifies paths into videos and subtitles by extension and maintains
    deduplicated, naturally sorted file lists.
    """

    def __init__(
        self,
        video_extensions: Set[str] = VIDEO_EXTENSIONS,
        subtitle_extensions: Set[str] = SUBTITLE_EXTENSIONS,
        extractor: EpisodeKeyExtractor | None = None
    ):
        """
        Initialize the file classifier.

        Args:
            video_extensions: Set of video file extensions.
            subtitle_extensions: Set of subtitle file extensions.
            extractor: Episode key extractor used for directory imports.
        """
        self._video_extensions = video_extensions
        self._subtitle_extensions = subtitle_extensions
        self._extractor = extractor or EpisodeKeyExtractor()

    def is_video(self, filename: str) -> bool:
        """Check if a filename is a video file."""
        return get_extension(filename) in self._video_extensions

    def is_subtitle(self, filename: str) -> bool:
        """Check if a filename is a subtitle file."""
        return get_extension(filename) in self._subtitle_extensions

    def is_known(self, filename: str) -> bool:
        """Check if a filename is either a video or a subtitle."""
        return self.is_video(filename) or self.is_subtitle(filename)

    def classify(self, paths: Iterable[str]) -> List[FileInfo]:
        """
        Turn raw paths into FileInfo records.

        Paths whose extension is neither video nor subtitle are dropped.

        Args:
            paths: Raw path strings.

        Returns:
            FileInfo records in input order.
        """
        result: List[FileInfo] = []
        dropped = 0

        for path in paths:
            name = split_parent(path)[1]
            if self.is_video(name):
                result.append(FileInfo(name=name, path=path, is_video=True))
            elif self.is_subtitle(name):
                result.append(FileInfo(name=name, path=path, is_video=False))
            else:
                dropped += 1

        logger.debug(
            f'📂 Classified {len(result)} files, dropped {dropped} unknown'
        )
        return result

    def split(self, files: Iterable[FileInfo]) -> Tuple[List[FileInfo], List[FileInfo]]:
        """Split files into (videos, subtitles), preserving order."""
        videos: List[FileInfo] = []
        subtitles: List[FileInfo] = []
        for f in files:
            (videos if f.is_video else subtitles).append(f)
        return videos, subtitles

    def merge(
        self,
        existing: Iterable[FileInfo],
        incoming: Iterable[FileInfo]
    ) -> List[FileInfo]:
        """
        Merge two file lists.

        Deduplicates by path (the later record wins) and sorts by name with
        natural, case-insensitive ordering.

        Args:
            existing: Current list.
            incoming: Newly added records.

        Returns:
            A new list; the inputs are not modified.
        """
        by_path: dict[str, FileInfo] = {}
        for f in existing:
            by_path[f.path] = f
        for f in incoming:
            by_path[f.path] = f

        return sorted(by_path.values(), key=lambda f: (natural_sort_key(f.name), f.path))

    def filter_directory_import(
        self,
        files: Iterable[FileInfo],
        matcher: EpisodeMatcher
    ) -> List[FileInfo]:
        """
        Drop subtitles that cannot pair with any video of the same import.

        Subtitles without an episode key, or whose key does not occur among
        the imported videos' keys, are excluded.

        Args:
            files: Files found in one directory.
            matcher: Active episode matcher.

        Returns:
            Videos plus pairable subtitles, in input order.
        """
        files = list(files)
        video_keys = {
            key for key in (
                self._extractor.extract(matcher, f.name) for f in files if f.is_video
            ) if key is not None
        }

        kept: List[FileInfo] = []
        for f in files:
            if f.is_video:
                kept.append(f)
                continue
            key = self._extractor.extract(matcher, f.name)
            if key is not None and key in video_keys:
                kept.append(f)
            else:
                logger.debug(f'跳过无法配对的字幕: {f.name}')

        return kept
