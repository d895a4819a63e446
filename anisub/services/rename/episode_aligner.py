"""
Episode aligner module.

Builds the key-sorted video/subtitle alignment table.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from anisub.core.domain import EpisodeAlignmentRow, EpisodeKey, FileInfo
from anisub.services.rename.episode_extractor import EpisodeKeyExtractor, EpisodeMatcher

logger = logging.getLogger(__name__)


def episode_sort_key(key: EpisodeKey) -> Tuple:
    """
    Order keys by numeric value.

    Keys with equal value ("1", "01") fall back to text order; non-numeric
    keys sort after numeric ones.
    """
    try:
        return (0, int(key), key)
    except ValueError:
        return (1, 0, key)


class EpisodeAligner:
    """
    Episode aligner service.

    Pairs videos and subtitles by episode key. Alignment is pure: the same
    inputs always give structurally identical rows.
    """

    def __init__(self, extractor: EpisodeKeyExtractor | None = None):
        """
        Initialize the aligner.

        Args:
            extractor: Episode key extractor.
        """
        self._extractor = extractor or EpisodeKeyExtractor()

    def index_by_episode(
        self,
        files: Iterable[FileInfo],
        matcher: EpisodeMatcher
    ) -> Dict[EpisodeKey, FileInfo]:
        """
        Map episode keys to files.

        Files without a key are excluded. The first file seen for a key is
        authoritative; later ones are duplicates.
        """
        index: Dict[EpisodeKey, FileInfo] = {}
        for f in files:
            key = self._extractor.extract(matcher, f.name)
            if key is None:
                continue
            if key in index:
                logger.debug(f'重复剧集 {key}: 忽略 {f.name}')
                continue
            index[key] = f
        return index

    def align(
        self,
        videos: Iterable[FileInfo],
        subtitles: Iterable[FileInfo],
        matcher: EpisodeMatcher
    ) -> List[EpisodeAlignmentRow]:
        """
        Build the alignment table.

        Args:
            videos: Video files.
            subtitles: Subtitle files.
            matcher: Active episode matcher.

        Returns:
            One row per distinct key, sorted numerically by key.
        """
        video_index = self.index_by_episode(videos, matcher)
        subtitle_index = self.index_by_episode(subtitles, matcher)

        keys = sorted(set(video_index) | set(subtitle_index), key=episode_sort_key)
        rows = [
            EpisodeAlignmentRow(
                episode=key,
                video=video_index.get(key),
                subtitle=subtitle_index.get(key)
            )
            for key in keys
        ]

        logger.debug(
            f'🔗 Aligned {len(rows)} episodes '
            f'({sum(1 for r in rows if r.is_paired)} paired)'
        )
        return rows

    @staticmethod
    def missing(rows: Iterable[EpisodeAlignmentRow]) -> List[EpisodeKey]:
        """Return keys of rows that have a video but no subtitle."""
        return [row.episode for row in rows if row.is_missing_subtitle]

    @staticmethod
    def orphans(rows: Iterable[EpisodeAlignmentRow]) -> List[EpisodeKey]:
        """Return keys of rows that have a subtitle but no video."""
        return [row.episode for row in rows if row.video is None]

    @staticmethod
    def pairs(rows: Iterable[EpisodeAlignmentRow]) -> List[EpisodeAlignmentRow]:
        """Return the rows that have both sides."""
        return [row for row in rows if row.is_paired]

    def duplicates(
        self,
        files: Iterable[FileInfo],
        matcher: EpisodeMatcher
    ) -> List[FileInfo]:
        """Return files excluded from alignment because their key repeats."""
        seen: set[EpisodeKey] = set()
        result: List[FileInfo] = []
        for f in files:
            key = self._extractor.extract(matcher, f.name)
            if key is None:
                continue
            if key in seen:
                result.append(f)
            else:
                seen.add(key)
        return result
