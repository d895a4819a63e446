"""
Interfaces module.

Contains abstract base classes defining the contracts for adapters, plus
the boundary request/response data classes.
"""

from anisub.core.interfaces.adapters import (
    DirectoryPickResult,
    IFilenameClassifier,
    IFileSystem,
    IMetadataClient,
    LLMResponse,
    RenameRequest,
    RenameResponse,
)

__all__ = [
    # Boundary Data Classes
    'RenameRequest',
    'RenameResponse',
    'LLMResponse',
    'DirectoryPickResult',
    # Adapter Interfaces
    'IFilenameClassifier',
    'IMetadataClient',
    'IFileSystem',
]
