"""
Domain layer module.

Contains value objects and entities that represent the core business concepts.
"""

from anisub.core.domain.entities import (
    EpisodeAlignmentRow,
    EpisodeKey,
    FileInfo,
    RecognitionResult,
    RenamePlan,
    RenamePlanEntry,
    has_directory,
    split_parent,
)
from anisub.core.domain.value_objects import (
    AnimeInfo,
    InferredTitle,
    PlanConflict,
    RenameReport,
    SeriesCandidate,
    SeriesDetail,
)

__all__ = [
    # Value Objects
    'AnimeInfo',
    'InferredTitle',
    'PlanConflict',
    'RenameReport',
    'SeriesCandidate',
    'SeriesDetail',
    # Entities
    'EpisodeKey',
    'FileInfo',
    'EpisodeAlignmentRow',
    'RenamePlanEntry',
    'RenamePlan',
    'RecognitionResult',
    # Helpers
    'split_parent',
    'has_directory',
]
