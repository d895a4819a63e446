"""
Infrastructure file system module.

Contains the local file system adapter.
"""

from anisub.infrastructure.filesystem.local_filesystem import LocalFileSystem

__all__ = [
    'LocalFileSystem',
]
