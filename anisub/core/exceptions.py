"""
Exceptions module.

Contains the exception hierarchy for the anisub application.
All custom exceptions inherit from AniSubError for consistent handling.
"""

from typing import Any, Dict, List, Optional


class AniSubError(Exception):
    """
    Base exception for all anisub errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
        context: Additional context information for debugging.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or 'UNKNOWN_ERROR'
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.context:
            return f'[{self.code}] {self.message} - Context: {self.context}'
        return f'[{self.code}] {self.message}'


# Configuration exceptions

class ConfigError(AniSubError):
    """Base exception for configuration errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'CONFIG_ERROR', context)


class PatternCompileError(ConfigError):
    """
    Exception raised when an episode pattern cannot be used.

    Raised for syntactically invalid expressions and for expressions
    without a capture group (group 1 carries the episode key).

    Attributes:
        pattern: The rejected pattern source.
        reason: Why the pattern was rejected.
    """

    def __init__(
        self,
        message: str,
        pattern: Optional[str] = None,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if pattern is not None:
            ctx['pattern'] = pattern
        if reason:
            ctx['reason'] = reason
        super().__init__(message, 'PATTERN_COMPILE_ERROR', ctx)
        self.pattern = pattern
        self.reason = reason


# Planning exceptions

class PlanningError(AniSubError):
    """Base exception for rename planning errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'PLANNING_ERROR', context)


class PlanCountMismatchError(PlanningError):
    """
    Exception raised when planned entries do not account for every pair.

    Attributes:
        expected: Number of complete video/subtitle pairs.
        actual: Number of entries (plus conflicts) produced.
    """

    def __init__(
        self,
        expected: int,
        actual: int,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        ctx['expected'] = expected
        ctx['actual'] = actual
        super().__init__(
            f'Planned {actual} entries for {expected} pairs',
            'PLAN_COUNT_MISMATCH',
            ctx
        )
        self.expected = expected
        self.actual = actual


# File operation exceptions

class FileOperationError(AniSubError):
    """
    Base exception for file operation errors.

    Attributes:
        path: The path the operation was applied to.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if path:
            ctx['path'] = path
        super().__init__(message, code or 'FILE_OPERATION_ERROR', ctx)
        self.path = path


# AI-related exceptions

class AIError(AniSubError):
    """Base exception for LLM classifier errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'AI_ERROR', context)


class AIResponseParseError(AIError):
    """
    Exception raised when an LLM response cannot be parsed.

    Attributes:
        raw_response: The raw response that failed to parse.
    """

    def __init__(
        self,
        message: str,
        raw_response: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if raw_response:
            ctx['raw_response'] = raw_response[:500]  # Truncate for logging
        super().__init__(message, 'AI_PARSE_ERROR', ctx)
        self.raw_response = raw_response


# Metadata exceptions

class MetadataError(AniSubError):
    """Exception raised when the metadata service fails."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'METADATA_ERROR', context)


# Parse exceptions

class ParseError(AniSubError):
    """Base exception for parsing errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code or 'PARSE_ERROR', context)


class TitleInferenceError(ParseError):
    """
    Exception raised when no series title can be inferred from a sample.

    Attributes:
        sample: File names that were inspected.
    """

    def __init__(
        self,
        message: str = 'Could not infer a series title',
        sample: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        ctx = context or {}
        if sample:
            ctx['sample_size'] = len(sample)
        super().__init__(message, 'TITLE_INFERENCE_ERROR', ctx)
        self.sample = list(sample or [])


def describe_error(error: Any) -> str:
    """
    Coerce an arbitrary error payload into a short message.

    External services hand back exceptions, dicts or plain strings; none of
    them is guaranteed to be well-formed.
    """
    if isinstance(error, AniSubError):
        return error.message
    if error is None:
        return 'Unknown error'
    try:
        text = str(error)
    except Exception:
        text = repr(error)
    return text[:500] or error.__class__.__name__
