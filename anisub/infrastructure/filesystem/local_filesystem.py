"""
Local file system adapter module.

Implements the IFileSystem primitives on top of the host OS.
"""

import logging
import os
from typing import Iterable, List, Optional

from anisub.core.domain import FileInfo
from anisub.core.exceptions import FileOperationError
from anisub.core.interfaces import DirectoryPickResult, IFileSystem
from anisub.services.rename.file_classifier import FileClassifier

logger = logging.getLogger(__name__)


class LocalFileSystem(IFileSystem):
    """
    Local file system adapter.

    Renames files in place and lists known video/subtitle files.
    """

    def __init__(self, classifier: Optional[FileClassifier] = None):
        """
        Initialize the adapter.

        Args:
            classifier: Extension classifier used to filter listings.
        """
        self._classifier = classifier or FileClassifier()

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def rename(self, old_path: str, new_name: str) -> str:
        """
        Rename a file inside its own directory.

        Args:
            old_path: Current file path.
            new_name: New file name (no directory).

        Returns:
            The new path.

        Raises:
            FileOperationError: If the source is missing or the OS call fails.
        """
        if os.sep in new_name or (os.altsep and os.altsep in new_name):
            raise FileOperationError(
                f'New name must not contain a directory: {new_name}',
                path=old_path
            )

        new_path = os.path.join(os.path.dirname(old_path), new_name)
        try:
            os.rename(old_path, new_path)
        except OSError as e:
            raise FileOperationError(
                f'Rename failed: {e}',
                path=old_path,
                context={'new_name': new_name}
            ) from e

        logger.debug(f'✏️ 重命名: {old_path} -> {new_path}')
        return new_path

    def resolve_paths(self, paths: Iterable[str]) -> List[FileInfo]:
        """
        Resolve dropped or picked paths into FileInfo records.

        Missing paths, directories and unknown extensions are skipped.
        """
        existing = [p for p in paths if os.path.isfile(p)]
        return self._classifier.classify(existing)

    def list_directory(self, path: str) -> List[FileInfo]:
        """
        List known video/subtitle files directly inside a directory.

        Sub-directories are not descended into.

        Raises:
            FileOperationError: If the directory cannot be read.
        """
        try:
            with os.scandir(path) as it:
                file_paths = [entry.path for entry in it if entry.is_file()]
        except OSError as e:
            raise FileOperationError(
                f'Failed to scan directory: {e}',
                path=path
            ) from e

        files = self._classifier.classify(file_paths)
        logger.info(f'📂 扫描目录 {path}: 找到 {len(files)} 个文件')
        return files

    def pick_directory(self, path: Optional[str]) -> DirectoryPickResult:
        """
        Load a chosen directory.

        Args:
            path: Chosen directory, or None when the choice was canceled.

        Returns:
            DirectoryPickResult with the directory's files.
        """
        if not path:
            return DirectoryPickResult(files=[], canceled=True)
        return DirectoryPickResult(files=self.list_directory(path), canceled=False)
