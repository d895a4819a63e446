"""
Recognition service module.

Holds the per-file recognition results and coordinates filename
classification, title inference, metadata search and merging.
"""

import logging
import threading
import time
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from anisub.core.domain import (
    FileInfo,
    InferredTitle,
    RecognitionResult,
    SeriesCandidate,
    SeriesDetail,
)
from anisub.core.exceptions import AniSubError, describe_error
from anisub.core.interfaces import IFilenameClassifier, IMetadataClient
from anisub.services.recognition.metadata_merger import MetadataMerger
from anisub.services.recognition.title_inferrer import SeriesTitleInferrer

logger = logging.getLogger(__name__)


class RecognitionService:
    """
    Recognition service.

    The file list and the results map (keyed by path) are replaced as a
    whole under a lock on every change.
    """

    def __init__(
        self,
        classifier: IFilenameClassifier,
        metadata_client: IMetadataClient,
        inferrer: Optional[SeriesTitleInferrer] = None,
        merger: Optional[MetadataMerger] = None,
        delay: float = 0.5,
        search_limit: int = 10,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the recognition service.

        Args:
            classifier: External filename classifier.
            metadata_client: External metadata service.
            inferrer: Series title inferrer.
            merger: Metadata merger.
            delay: Seconds between classifier calls in bulk analysis.
            search_limit: Default number of search candidates.
            sleep: Wait primitive.
        """
        self._classifier = classifier
        self._metadata_client = metadata_client
        self._inferrer = inferrer or SeriesTitleInferrer(classifier, delay=delay, sleep=sleep)
        self._merger = merger or MetadataMerger(classifier, delay=delay, sleep=sleep)
        self._delay = delay
        self._search_limit = search_limit
        self._sleep = sleep

        self._lock = threading.Lock()
        self._files: List[FileInfo] = []
        self._results: Dict[str, RecognitionResult] = {}

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def files(self) -> List[FileInfo]:
        with self._lock:
            return list(self._files)

    @property
    def results(self) -> Dict[str, RecognitionResult]:
        with self._lock:
            return dict(self._results)

    def result_for(self, path: str) -> Optional[RecognitionResult]:
        with self._lock:
            return self._results.get(path)

    def add_files(self, files: Iterable[FileInfo]) -> int:
        """
        Append files, ignoring paths already present.

        Returns:
            Number of files added.
        """
        with self._lock:
            known = {f.path for f in self._files}
            added = []
            for f in files:
                if f.path not in known:
                    known.add(f.path)
                    added.append(f)
            self._files = self._files + added
        return len(added)

    def clear(self) -> None:
        with self._lock:
            self._files = []
            self._results = {}

    def _store(self, result: RecognitionResult) -> None:
        with self._lock:
            results = dict(self._results)
            results[result.file.path] = result
            self._results = results

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def analyze(self, file: FileInfo) -> Optional[RecognitionResult]:
        """
        Classify one video file.

        Returns:
            The terminal result, or None for non-video files.
        """
        if not file.is_video:
            logger.warning(f'⚠️ 只能识别视频文件: {file.name}')
            return None

        self._store(RecognitionResult.pending(file, self.result_for(file.path)))

        try:
            result = RecognitionResult.succeeded(file, self._classifier.classify(file.name))
        except AniSubError as e:
            logger.error(f'❌ 识别失败: {file.name}: {describe_error(e)}')
            result = RecognitionResult.failed(file, describe_error(e))

        self._store(result)
        return result

    def analyze_all(self) -> List[RecognitionResult]:
        """Classify every video in order, waiting between calls."""
        videos = [f for f in self.files if f.is_video]
        if not videos:
            logger.warning('⚠️ 没有视频文件需要识别')
            return []

        results: List[RecognitionResult] = []
        for index, f in enumerate(videos):
            if index > 0 and self._delay > 0:
                self._sleep(self._delay)
            result = self.analyze(f)
            if result is not None:
                results.append(result)
        return results

    # ------------------------------------------------------------------
    # Series lookup
    # ------------------------------------------------------------------

    def infer_title(self, batch: bool = False) -> InferredTitle:
        """
        Infer the series title of the current files.

        Raises:
            TitleInferenceError: If no title could be inferred.
        """
        files = self.files
        if batch:
            return self._inferrer.infer_batch(files)
        return self._inferrer.infer(files)

    def search(self, query: str, limit: Optional[int] = None) -> List[SeriesCandidate]:
        """
        Search the metadata service.

        Raises:
            MetadataError: If the service fails.
        """
        return self._metadata_client.search_series(query, limit or self._search_limit)

    def suggest(self, batch: bool = False) -> Tuple[InferredTitle, List[SeriesCandidate]]:
        """
        Infer a title and search for it.

        Every candidate is returned; picking one is left to the caller.
        """
        inferred = self.infer_title(batch=batch)
        return inferred, self.search(inferred.title)

    def get_detail(self, series_id: int) -> SeriesDetail:
        return self._metadata_client.get_series_detail(series_id)

    def apply_series(
        self,
        series: int | SeriesDetail,
        reclassify: bool = True
    ) -> List[RecognitionResult]:
        """
        Overlay a series onto the recognition results.

        Args:
            series: Subject id or an already fetched detail.
            reclassify: Classify every video again before overlaying; when
                False only results already held are updated.

        Returns:
            The updated results.
        """
        detail = series if isinstance(series, SeriesDetail) else self.get_detail(series)

        if not reclassify:
            merged = self._merger.merge_existing(self.results.values(), detail)
            for result in merged:
                self._store(result)
            return merged

        return self._merger.apply(
            detail,
            self.files,
            on_update=self._store,
            existing=self.results
        )

    def preview_names(self) -> Dict[str, Optional[str]]:
        """Preview names for every file that has a result, by path."""
        return {
            path: self._merger.preview_name(result)
            for path, result in self.results.items()
        }
