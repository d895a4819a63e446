"""
Rename services module.

Contains the episode alignment and subtitle rename engine.
"""

from anisub.services.rename.episode_aligner import EpisodeAligner
from anisub.services.rename.episode_extractor import EpisodeKeyExtractor, EpisodeMatcher
from anisub.services.rename.file_classifier import FileClassifier
from anisub.services.rename.filename_formatter import FilenameFormatter
from anisub.services.rename.rename_executor import RenameExecutor
from anisub.services.rename.rename_planner import RenamePlanner, resolve_suffix
from anisub.services.rename.rename_service import RenameService

__all__ = [
    'EpisodeKeyExtractor',
    'EpisodeMatcher',
    'FileClassifier',
    'EpisodeAligner',
    'FilenameFormatter',
    'RenamePlanner',
    'RenameExecutor',
    'RenameService',
    'resolve_suffix',
]
