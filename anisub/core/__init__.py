"""
Core layer module.

Contains domain models, interfaces, configuration and exception definitions.
"""

from anisub.core.exceptions import (
    AIError,
    AIResponseParseError,
    AniSubError,
    ConfigError,
    FileOperationError,
    MetadataError,
    ParseError,
    PatternCompileError,
    PlanCountMismatchError,
    PlanningError,
    TitleInferenceError,
)

__all__ = [
    # Exceptions
    'AniSubError',
    'ConfigError',
    'PatternCompileError',
    'PlanningError',
    'PlanCountMismatchError',
    'FileOperationError',
    'AIError',
    'AIResponseParseError',
    'MetadataError',
    'ParseError',
    'TitleInferenceError',
]
