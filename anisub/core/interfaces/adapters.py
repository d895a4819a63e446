"""
Adapter interfaces module.

Contains abstract base classes defining contracts for external service
adapters, plus the request/response data classes exchanged with them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from anisub.core.domain import (
    AnimeInfo,
    FileInfo,
    InferredTitle,
    SeriesCandidate,
    SeriesDetail,
)


@dataclass
class RenameRequest:
    """
    Batched subtitle rename request.

    ``video_files[i]`` names the video whose stem ``subtitle_files[i]`` takes.

    Attributes:
        video_files: Paired video descriptors.
        subtitle_files: Paired subtitle descriptors.
        suffix: Language/release tag inserted before the extension.
    """
    video_files: List[FileInfo] = field(default_factory=list)
    subtitle_files: List[FileInfo] = field(default_factory=list)
    suffix: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RenameRequest':
        return cls(
            video_files=[FileInfo.from_dict(v) for v in data.get('video_files', [])],
            subtitle_files=[FileInfo.from_dict(s) for s in data.get('subtitle_files', [])],
            suffix=str(data.get('suffix') or ''),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'video_files': [v.to_dict() for v in self.video_files],
            'subtitle_files': [s.to_dict() for s in self.subtitle_files],
            'suffix': self.suffix,
        }


@dataclass
class RenameResponse:
    """
    Batched subtitle rename response.

    Attributes:
        success: Whether every subtitle was renamed.
        message: Human-readable summary.
        renamed_files: New subtitle names, positionally matching the request.
    """
    success: bool
    message: str
    renamed_files: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'message': self.message,
            'renamed_files': list(self.renamed_files),
        }


@dataclass
class LLMResponse:
    """
    Envelope returned by the filename classification boundary.

    Attributes:
        success: Whether classification succeeded.
        data: Recognized info (single) or inferred title (batch).
        error: Error message when unsuccessful.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.data
        if isinstance(data, AnimeInfo):
            data = data.to_dict()
        elif isinstance(data, InferredTitle):
            data = {'title': data.title, 'confidence': data.confidence}
        return {'success': self.success, 'data': data, 'error': self.error}


@dataclass
class DirectoryPickResult:
    """
    Result of choosing a directory.

    Attributes:
        files: Files found directly inside the directory.
        canceled: True when no directory was chosen.
    """
    files: List[FileInfo] = field(default_factory=list)
    canceled: bool = False


class IFilenameClassifier(ABC):
    """
    Filename classifier interface.

    Defines the contract for recognizing structured metadata in filenames.
    """

    @abstractmethod
    def classify(self, filename: str) -> AnimeInfo:
        """
        Recognize one filename.

        Args:
            filename: File name (no directory).

        Returns:
            Recognized metadata.

        Raises:
            AIError: When the classifier fails or returns garbage.
        """
        pass

    def classify_batch(self, filenames: List[str]) -> InferredTitle:
        """
        Infer one series title for a batch of filenames in a single call.

        Raises:
            AIError: When the classifier fails.
            NotImplementedError: When the classifier has no batch mode.
        """
        raise NotImplementedError(f'{self.__class__.__name__} does not support batch calls')

    @property
    def supports_batch(self) -> bool:
        """Return True when ``classify_batch`` is implemented."""
        return type(self).classify_batch is not IFilenameClassifier.classify_batch


class IMetadataClient(ABC):
    """
    Metadata client interface.

    Defines the contract for searching series in an external catalogue.
    """

    @abstractmethod
    def search_series(self, query: str, limit: int = 10) -> List[SeriesCandidate]:
        """
        Search for series by name.

        Args:
            query: Free-text query.
            limit: Maximum number of candidates.

        Returns:
            Candidates, possibly empty.

        Raises:
            MetadataError: When the service fails.
        """
        pass

    @abstractmethod
    def get_series_detail(self, series_id: int) -> SeriesDetail:
        """
        Get details for one series.

        Raises:
            MetadataError: When the service fails.
        """
        pass


class IFileSystem(ABC):
    """
    File system interface.

    Defines the primitives the rename engine needs.
    """

    @abstractmethod
    def rename(self, old_path: str, new_name: str) -> str:
        """
        Rename a file inside its own directory.

        Returns:
            The new path.

        Raises:
            FileOperationError: When the rename fails.
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True when the path exists."""
        pass

    @abstractmethod
    def list_directory(self, path: str) -> List[FileInfo]:
        """
        List known video/subtitle files directly inside a directory.

        Raises:
            FileOperationError: When the directory cannot be read.
        """
        pass
