"""
Entities module.

Contains domain entities that have identity and lifecycle.
Entities are compared by their identity, not by their attributes.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from anisub.core.domain.value_objects import AnimeInfo, PlanConflict

EpisodeKey = str


def split_parent(path: str) -> tuple[str, str]:
    """
    Split a path into (parent including trailing separator, name).

    Both '/' and '\\' count as separators regardless of the host OS.
    """
    index = max(path.rfind('/'), path.rfind('\\'))
    if index < 0:
        return '', path
    return path[:index + 1], path[index + 1:]


def has_directory(path: str) -> bool:
    """Return True when the path carries a directory component."""
    return '/' in path or '\\' in path


@dataclass(frozen=True)
class FileInfo:
    """
    A video or subtitle file in the working set.

    Identity is the path; the rename flow replaces instances wholesale.

    Attributes:
        name: File name without directory.
        path: Absolute (or caller-supplied) path.
        is_video: True for videos, False for subtitles.
    """
    name: str
    path: str
    is_video: bool

    @property
    def stem(self) -> str:
        """Return the name without its final extension."""
        index = self.name.rfind('.')
        return self.name[:index] if index > 0 else self.name

    @property
    def extension(self) -> str:
        """Return the final extension, lower-cased, without the dot."""
        index = self.name.rfind('.')
        return self.name[index + 1:].lower() if index > 0 else ''

    @property
    def parent(self) -> str:
        """Return the parent directory with its trailing separator."""
        return split_parent(self.path)[0]

    def renamed(self, new_name: str) -> 'FileInfo':
        """Return a copy carrying the post-rename name and path."""
        return replace(self, name=new_name, path=self.parent + new_name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FileInfo':
        return cls(
            name=str(data.get('name', '')),
            path=str(data.get('path', '')),
            is_video=bool(data.get('is_video', False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'path': self.path, 'is_video': self.is_video}


@dataclass(frozen=True)
class EpisodeAlignmentRow:
    """
    One episode's video/subtitle pairing state.

    Attributes:
        episode: Episode key shared by both sides.
        video: Video carrying the key, if any.
        subtitle: Subtitle carrying the key, if any.
    """
    episode: EpisodeKey
    video: Optional[FileInfo] = None
    subtitle: Optional[FileInfo] = None

    def __post_init__(self) -> None:
        if self.video is None and self.subtitle is None:
            raise ValueError(f'Alignment row {self.episode!r} has neither video nor subtitle')

    @property
    def is_paired(self) -> bool:
        return self.video is not None and self.subtitle is not None

    @property
    def is_missing_subtitle(self) -> bool:
        return self.video is not None and self.subtitle is None


@dataclass(frozen=True)
class RenamePlanEntry:
    """
    One proposed subtitle rename, not yet applied.

    Attributes:
        source_path: Current subtitle path.
        target_name: New subtitle file name (no directory).
        video_ref_path: Path of the video the name was derived from.
    """
    source_path: str
    target_name: str
    video_ref_path: str

    @property
    def target_path(self) -> str:
        """Return the full target path inside the source directory."""
        return split_parent(self.source_path)[0] + self.target_name


@dataclass(frozen=True)
class RenamePlan:
    """
    Rename plan derived from alignment rows.

    Attributes:
        entries: Entries in row order.
        skipped: Episode keys that had a video but no subtitle.
        conflicts: Pairs rejected because their target name was taken.
    """
    entries: List[RenamePlanEntry] = field(default_factory=list)
    skipped: List[EpisodeKey] = field(default_factory=list)
    conflicts: List[PlanConflict] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class RecognitionResult:
    """
    Recognition state for one file.

    Created as loading when a request is issued and replaced exactly once by
    a terminal result (info or error). A metadata overlay may later replace
    the terminal result again.

    Attributes:
        file: The recognized file.
        info: Recognized metadata, when available.
        loading: True while the classification request is in flight.
        error: Error message of a failed request.
    """
    file: FileInfo
    info: Optional[AnimeInfo] = None
    loading: bool = False
    error: Optional[str] = None

    @classmethod
    def pending(cls, file: FileInfo, previous: Optional['RecognitionResult'] = None) -> 'RecognitionResult':
        """Start a request, keeping any earlier info visible."""
        info = previous.info if previous else None
        return cls(file=file, info=info, loading=True, error=None)

    @classmethod
    def succeeded(cls, file: FileInfo, info: AnimeInfo) -> 'RecognitionResult':
        return cls(file=file, info=info, loading=False, error=None)

    @classmethod
    def failed(cls, file: FileInfo, error: str) -> 'RecognitionResult':
        return cls(file=file, info=None, loading=False, error=error)

    @property
    def is_terminal(self) -> bool:
        return not self.loading

    def merged(self, title: str, year: Optional[int] = None) -> 'RecognitionResult':
        """
        Overlay a canonical title (and year) onto the held info.

        All other info fields are kept; the result is non-loading and
        error-free afterwards.
        """
        info = self.info or AnimeInfo(title=title)
        changes: Dict[str, Any] = {'title': title}
        if year is not None:
            changes['year'] = year
        return RecognitionResult(file=self.file, info=replace(info, **changes))
