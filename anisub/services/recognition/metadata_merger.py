"""
Metadata merger module.

Overlays a chosen series' canonical title and year onto per-file
recognition results.
"""

import logging
import time
from dataclasses import replace
from typing import Callable, Iterable, List, Mapping, Optional

from anisub.core.domain import AnimeInfo, FileInfo, RecognitionResult, SeriesDetail
from anisub.core.exceptions import AniSubError, describe_error
from anisub.core.interfaces import IFilenameClassifier
from anisub.services.rename.filename_formatter import FilenameFormatter

logger = logging.getLogger(__name__)

ResultCallback = Callable[[RecognitionResult], None]


class MetadataMerger:
    """
    Metadata merger.

    ``apply`` re-classifies every video and overlays the series detail.
    Failures stay on their own result; later files are still processed.
    """

    def __init__(
        self,
        classifier: IFilenameClassifier,
        formatter: Optional[FilenameFormatter] = None,
        delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the merger.

        Args:
            classifier: External filename classifier.
            formatter: Formatter used for preview names.
            delay: Seconds to wait between two classifier calls.
            sleep: Wait primitive.
        """
        self._classifier = classifier
        self._formatter = formatter or FilenameFormatter()
        self._delay = delay
        self._sleep = sleep

    @staticmethod
    def overlay(info: AnimeInfo, detail: SeriesDetail) -> AnimeInfo:
        """Replace title (and year, when known) keeping every other field."""
        year = detail.year if detail.year is not None else info.year
        return replace(info, title=detail.display_title, year=year)

    def apply(
        self,
        detail: SeriesDetail,
        files: Iterable[FileInfo],
        on_update: Optional[ResultCallback] = None,
        existing: Optional[Mapping[str, RecognitionResult]] = None
    ) -> List[RecognitionResult]:
        """
        Classify every video and overlay the series detail.

        Each file is reported through ``on_update`` twice: once as loading
        and once with its terminal result.

        Args:
            detail: Chosen series.
            files: Files in the working set; non-videos are ignored.
            on_update: Called with each state change.
            existing: Current results by path, kept visible while loading.

        Returns:
            Terminal results in file order.
        """
        videos = [f for f in files if f.is_video]
        results: List[RecognitionResult] = []
        failed = 0

        for index, f in enumerate(videos):
            if index > 0 and self._delay > 0:
                self._sleep(self._delay)

            previous = existing.get(f.path) if existing else None
            if on_update:
                on_update(RecognitionResult.pending(f, previous))

            try:
                info = self._classifier.classify(f.name)
                result = RecognitionResult.succeeded(f, self.overlay(info, detail))
            except AniSubError as e:
                failed += 1
                logger.warning(f'⚠️ 识别失败: {f.name}: {describe_error(e)}')
                result = RecognitionResult.failed(f, describe_error(e))

            if on_update:
                on_update(result)
            results.append(result)

        logger.info(
            f'✅ 已应用条目 {detail.display_title}: '
            f'{len(results) - failed} 成功, {failed} 失败'
        )
        return results

    @staticmethod
    def merge_existing(
        results: Iterable[RecognitionResult],
        detail: SeriesDetail
    ) -> List[RecognitionResult]:
        """
        Overlay the detail onto results already held, without new calls.

        Results without info (loading or failed) are returned unchanged.
        """
        return [
            r.merged(detail.display_title, detail.year) if r.info is not None and not r.loading else r
            for r in results
        ]

    def preview_name(
        self,
        result: RecognitionResult,
        extension: Optional[str] = None
    ) -> Optional[str]:
        """
        Render the rename preview for one result.

        Args:
            result: Recognition result.
            extension: Extension to append; defaults to the file's own.

        Returns:
            Formatted name, or None when the result has no info.
        """
        if result.info is None:
            return None
        ext = result.file.extension if extension is None else extension
        return self._formatter.format_recognized(result.info, ext)
