"""
Filename formatter module.

Provides target-name construction for subtitles and preview names for
recognized episodes.
"""

import logging
import re

from anisub.core.domain import AnimeInfo, FileInfo
from anisub.core.exceptions import PlanningError

logger = logging.getLogger(__name__)


class FilenameFormatter:
    """
    Filename formatter service.

    Builds subtitle names that follow their video's stem and Plex/Jellyfin
    style preview names for recognized episodes.
    """

    # Default format templates
    TV_FORMAT = '{title}{year} - S{season:02d}E{episode:02d}{extension}'
    SPECIAL_FORMAT = '{title}{year} - {special}{episode:02d}{extension}'

    def __init__(
        self,
        tv_format: str | None = None,
        special_format: str | None = None
    ):
        """
        Initialize the filename formatter.

        Args:
            tv_format: Format template for regular episodes.
            special_format: Format template for special episodes.
        """
        self._tv_format = tv_format or self.TV_FORMAT
        self._special_format = special_format or self.SPECIAL_FORMAT

    @staticmethod
    def normalize_suffix(suffix: str | None) -> str:
        """
        Strip whitespace and surrounding dots from a suffix.

        Raises:
            PlanningError: The suffix contains a path separator.
        """
        if not suffix:
            return ''
        if '/' in suffix or '\\' in suffix:
            raise PlanningError(
                f'Suffix must not contain path separators: {suffix}',
                'INVALID_SUFFIX',
                {'suffix': suffix}
            )
        return suffix.strip().strip('.')

    def format_subtitle(
        self,
        video: FileInfo,
        subtitle: FileInfo,
        suffix: str | None = None
    ) -> str:
        """
        Format a subtitle filename to match its video file.

        Args:
            video: The paired video.
            subtitle: The subtitle being renamed.
            suffix: Optional language/release tag; empty omits the segment.

        Returns:
            ``video_stem[.suffix].subtitle_ext`` with the extension lowercased.

        Example:
            >>> formatter.format_subtitle(video('Show.[07].mkv'), sub('Show.[07].SRT'), 'chs')
            'Show.[07].chs.srt'
        """
        sfx = self.normalize_suffix(suffix)
        extension = subtitle.extension

        parts = [video.stem]
        if sfx:
            parts.append(sfx)
        parts.append(extension)
        return '.'.join(parts)

    def format_recognized(self, info: AnimeInfo, extension: str = '') -> str:
        """
        Format a preview name from recognized metadata.

        Args:
            info: Recognized (possibly merged) metadata.
            extension: File extension with or without the dot; may be empty.

        Returns:
            Formatted filename.

        Example:
            >>> formatter.format_recognized(AnimeInfo('Frieren', 1, 5, year=2023), 'mkv')
            'Frieren (2023) - S01E05.mkv'
        """
        ext = ''
        if extension:
            ext = extension if extension.startswith('.') else f'.{extension}'

        year_str = f' ({info.year})' if info.year else ''
        template = self._special_format if info.special_type else self._tv_format

        return template.format(
            title=self._sanitize_title(info.title),
            year=year_str,
            season=info.season,
            episode=info.episode,
            special=info.special_type or '',
            extension=ext
        )

    def _sanitize_title(self, title: str) -> str:
        """
        Sanitize a title for use in filenames.

        Args:
            title: Original title.

        Returns:
            Sanitized title safe for filesystem use.
        """
        if not title:
            return ''

        # Remove characters invalid in Windows/Unix filenames
        sanitized = re.sub(r'[<>:"/\\|?*]', '', title)

        # Replace multiple spaces with single space
        sanitized = re.sub(r'\s+', ' ', sanitized)

        sanitized = sanitized.strip()

        # Truncate if too long (preserve reasonable length)
        if len(sanitized) > 150:
            sanitized = sanitized[:150].rsplit(' ', 1)[0]

        return sanitized
