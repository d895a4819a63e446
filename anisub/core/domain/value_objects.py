"""
Value objects module.

Contains immutable value objects representing domain concepts without identity.
Value objects are compared by their attributes, not by identity.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

# 不同模型对同一字段使用的键名
_TITLE_KEYS = ('title', 'anime_title', 'anime_clean_title')


def _to_int(value: Any, default: int = 0) -> int:
    """Convert loose numeric values ('05', 5.0, None) to int."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    if isinstance(value, int):
        return value
    match = re.search(r'\d+', str(value))
    return int(match.group(0)) if match else default


def _to_float(value: Any, default: float = 0.0) -> float:
    """Convert loose numeric values to float."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _to_text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


@dataclass(frozen=True)
class AnimeInfo:
    """
    Structured metadata recognized from one filename.

    Attributes:
        title: Series title.
        season: Season number (1 when unknown).
        episode: Episode number (0 when unknown).
        special_type: Special episode tag (SP, OVA, ...), if any.
        resolution: Resolution marker such as '1080p'.
        codec: Video codec such as 'HEVC'.
        group: Release or fansub group.
        language_tags: Subtitle language tags such as ('chs', 'jpn').
        confidence: Classifier confidence in [0, 1].
        year: Air year, when known.
    """
    title: str
    season: int = 1
    episode: int = 0
    special_type: Optional[str] = None
    resolution: str = ''
    codec: str = ''
    group: str = ''
    language_tags: Tuple[str, ...] = ()
    confidence: float = 0.0
    year: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnimeInfo':
        """
        Build from a classifier payload.

        LLMs return loosely typed JSON (episode as "05", missing keys), so
        every field is coerced rather than validated.
        """
        title = ''
        for key in _TITLE_KEYS:
            title = _to_text(data.get(key))
            if title:
                break

        tags = data.get('language_tags') or []
        if isinstance(tags, str):
            tags = [t for t in re.split(r'[,\s/]+', tags) if t]
        elif not isinstance(tags, (list, tuple)):
            tags = []

        confidence = min(max(_to_float(data.get('confidence')), 0.0), 1.0)
        year = data.get('year')

        return cls(
            title=title,
            season=_to_int(data.get('season'), 1),
            episode=_to_int(data.get('episode')),
            special_type=_to_text(data.get('special_type')) or None,
            resolution=_to_text(data.get('resolution')),
            codec=_to_text(data.get('codec')),
            group=_to_text(data.get('group')),
            language_tags=tuple(_to_text(t) for t in tags if _to_text(t)),
            confidence=confidence,
            year=_to_int(year) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation."""
        return {
            'title': self.title,
            'season': self.season,
            'episode': self.episode,
            'special_type': self.special_type,
            'resolution': self.resolution,
            'codec': self.codec,
            'group': self.group,
            'language_tags': list(self.language_tags),
            'confidence': self.confidence,
            'year': self.year,
        }


@dataclass(frozen=True)
class InferredTitle:
    """
    Series title inferred from a sample of filenames.

    Attributes:
        title: Best candidate title.
        confidence: Agreement or classifier confidence in [0, 1].
    """
    title: str
    confidence: float = 0.0


@dataclass(frozen=True)
class SeriesCandidate:
    """
    One metadata search hit.

    Attributes:
        id: Service-side identifier.
        name: Original series name.
        name_localized: Localized (e.g. Chinese) name, if any.
        type: Service subject type code.
        date: Air date string as returned by the service.
    """
    id: int
    name: str
    name_localized: Optional[str] = None
    type: Optional[int] = None
    date: Optional[str] = None

    @property
    def display_name(self) -> str:
        """Return the localized name when present."""
        return self.name_localized or self.name


@dataclass(frozen=True)
class SeriesDetail:
    """
    Detailed series record from the metadata service.

    Attributes:
        id: Service-side identifier.
        name: Original series name.
        name_localized: Localized name, if any.
        cover_url: Cover image URL.
        episode_count: Number of episodes.
        year: First air year.
    """
    id: int
    name: str
    name_localized: Optional[str] = None
    cover_url: Optional[str] = None
    episode_count: Optional[int] = None
    year: Optional[int] = None

    @property
    def display_title(self) -> str:
        """Canonical title used when overlaying recognition results."""
        return self.name_localized or self.name


@dataclass(frozen=True)
class PlanConflict:
    """
    A pair that could not be planned because its target name is taken.

    Attributes:
        episode: Episode key of the rejected pair.
        target_name: The colliding target file name.
        source_path: Subtitle that would have been renamed.
    """
    episode: str
    target_name: str
    source_path: str


@dataclass(frozen=True)
class RenameReport:
    """
    Result of executing a rename plan.

    Attributes:
        success: Whether every entry was applied.
        message: Human-readable summary.
        renamed_names: New names, positionally matching the applied entries.
    """
    success: bool
    message: str
    renamed_names: List[str] = field(default_factory=list)

    @property
    def renamed_count(self) -> int:
        return len(self.renamed_names)
