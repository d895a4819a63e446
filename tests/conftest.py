"""
Test configuration and fixtures for AniSub tests.

This module provides:
- Factories for FileInfo test records
- Mock objects for the file system, classifier and metadata service
- An isolated settings store per test
"""

import sys
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from anisub.core.config import SettingsStore  # noqa: E402
from anisub.core.domain import AnimeInfo, FileInfo  # noqa: E402
from anisub.core.interfaces import IFilenameClassifier, IFileSystem, IMetadataClient  # noqa: E402


# ==================== File Records ====================

@pytest.fixture
def make_video() -> Callable[..., FileInfo]:
    """Build a video FileInfo under /media/show."""
    def _make(name: str, directory: str = '/media/show/') -> FileInfo:
        return FileInfo(name=name, path=directory + name, is_video=True)
    return _make


@pytest.fixture
def make_subtitle() -> Callable[..., FileInfo]:
    """Build a subtitle FileInfo under /media/show."""
    def _make(name: str, directory: str = '/media/show/') -> FileInfo:
        return FileInfo(name=name, path=directory + name, is_video=False)
    return _make


# ==================== Mock Adapters ====================

@pytest.fixture
def mock_filesystem():
    """
    In-memory file system mock.

    ``mock.existing`` holds the paths present on "disk"; rename moves a path
    inside the set.
    """
    mock = MagicMock(spec=IFileSystem)
    mock.existing = set()

    def rename(old_path: str, new_name: str) -> str:
        new_path = old_path.rsplit('/', 1)[0] + '/' + new_name
        mock.existing.discard(old_path)
        mock.existing.add(new_path)
        return new_path

    mock.exists.side_effect = lambda path: path in mock.existing
    mock.rename.side_effect = rename
    mock.list_directory.return_value = []
    return mock


@pytest.fixture
def mock_classifier():
    """Filename classifier returning a fixed title."""
    mock = MagicMock(spec=IFilenameClassifier)
    mock.classify.return_value = AnimeInfo(title='Sousou no Frieren', episode=1, confidence=0.9)
    mock.supports_batch = True
    return mock


@pytest.fixture
def mock_metadata_client():
    """Metadata client with no results."""
    mock = MagicMock(spec=IMetadataClient)
    mock.search_series.return_value = []
    return mock


@pytest.fixture
def no_sleep() -> MagicMock:
    """Wait primitive that records calls instead of sleeping."""
    return MagicMock()


# ==================== Settings ====================

@pytest.fixture
def settings_path(tmp_path) -> Path:
    return tmp_path / 'anime-renamer' / 'settings.json'


@pytest.fixture
def settings_store(settings_path) -> SettingsStore:
    """Settings store backed by a temporary file."""
    return SettingsStore(str(settings_path))

