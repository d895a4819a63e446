"""
Episode key extractor module.

Compiles user-supplied episode patterns and extracts episode keys from
filenames.
"""

import logging
import re
from dataclasses import dataclass

from anisub.core.domain import EpisodeKey, split_parent
from anisub.core.exceptions import PatternCompileError

logger = logging.getLogger(__name__)


# Two digits in square brackets, e.g. "[07]"
DEFAULT_PATTERN = r'\[(\d{2})\]'

# Named, swappable presets (ordered as offered to users)
PRESET_PATTERNS: dict[str, str] = {
    # [07]
    'bracketed': DEFAULT_PATTERN,
    # 07 not adjacent to other digits
    'bare': r'(?:^|[^0-9])(\d{2})(?!\d)',
    # S01E07
    'season_episode': r'S\d{1,2}E(\d{2})',
    # E07 / EP07 / ep07
    'ep_prefix': r'[Ee][Pp]?(\d{2})',
    # 第07集 / 第07话
    'cjk': r'第(\d{2})[集话]',
}


@dataclass(frozen=True)
class EpisodeMatcher:
    """
    Compiled episode pattern.

    Attributes:
        source: The pattern source the matcher was compiled from.
        regex: Compiled expression; group 1 is the episode key.
    """
    source: str
    regex: re.Pattern


class EpisodeKeyExtractor:
    """
    Episode key extractor.

    Turns pattern sources into matchers and applies them to file names.
    Extraction is a pure function of (filename, pattern).
    """

    DEFAULT_PATTERN = DEFAULT_PATTERN
    PRESET_PATTERNS = PRESET_PATTERNS

    def __init__(self):
        """Initialize the extractor with the default matcher pre-compiled."""
        self._default_matcher = self.compile(self.DEFAULT_PATTERN)

    @property
    def default_matcher(self) -> EpisodeMatcher:
        return self._default_matcher

    def compile(self, pattern_source: str) -> EpisodeMatcher:
        """
        Compile an episode pattern.

        Args:
            pattern_source: Regular expression whose group 1 is the episode key.

        Returns:
            EpisodeMatcher for the pattern.

        Raises:
            PatternCompileError: If the pattern is empty, invalid, or has no
                capture group.
        """
        if not pattern_source:
            raise PatternCompileError(
                'Episode pattern is empty',
                pattern=pattern_source,
                reason='empty'
            )

        try:
            regex = re.compile(pattern_source)
        except re.error as e:
            raise PatternCompileError(
                f'Invalid episode pattern: {e}',
                pattern=pattern_source,
                reason=str(e)
            ) from e

        if regex.groups < 1:
            raise PatternCompileError(
                'Episode pattern needs a capture group',
                pattern=pattern_source,
                reason='no capture group'
            )

        return EpisodeMatcher(source=pattern_source, regex=regex)

    def compile_or_default(
        self,
        pattern_source: str | None
    ) -> tuple[EpisodeMatcher, bool]:
        """
        Compile a pattern, falling back to the default one.

        Preset names are accepted in place of a pattern.

        Returns:
            (matcher, valid) where ``valid`` is False when the input was
            rejected and the default matcher was substituted.
        """
        source = self.resolve_preset(pattern_source or '')
        try:
            return self.compile(source), True
        except PatternCompileError as e:
            logger.warning(
                f'⚠️ 剧集正则无效，回退到默认正则 {self.DEFAULT_PATTERN}: {e.message}'
            )
            return self._default_matcher, False

    def extract(self, matcher: EpisodeMatcher, filename: str) -> EpisodeKey | None:
        """
        Extract the episode key from a filename.

        Only the file name is searched; any directory part is ignored. Group
        1 is returned verbatim, so "01" and "1" are distinct keys.

        Args:
            matcher: Compiled episode matcher.
            filename: File name or path.

        Returns:
            The episode key, or None when the pattern does not match.
        """
        name = split_parent(filename)[1]
        match = matcher.regex.search(name)
        if not match:
            return None
        return match.group(1)

    def resolve_preset(self, name_or_pattern: str) -> str:
        """Return the preset pattern for a preset name, else the input itself."""
        return self.PRESET_PATTERNS.get(name_or_pattern, name_or_pattern)
