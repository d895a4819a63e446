"""
Series title inferrer module.

Infers one canonical series title from a sample of filenames using the
external filename classifier.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List

from anisub.core.domain import FileInfo, InferredTitle
from anisub.core.exceptions import AniSubError, TitleInferenceError, describe_error
from anisub.core.interfaces import IFilenameClassifier

logger = logging.getLogger(__name__)

# Sample sizes for the per-file and the single-call mode
PER_FILE_SAMPLE_SIZE = 5
BATCH_SAMPLE_SIZE = 10


@dataclass
class _TitleGroup:
    title: str
    count: int = 0
    confidences: List[float] = field(default_factory=list)

    @property
    def mean_confidence(self) -> float:
        if not self.confidences:
            return 0.0
        return sum(self.confidences) / len(self.confidences)


class SeriesTitleInferrer:
    """
    Series title inferrer.

    Per-file mode classifies each sampled name sequentially, waiting
    ``delay`` seconds between calls, and votes on the returned titles.
    Batch mode sends the whole sample in one call and trusts its answer.
    """

    def __init__(
        self,
        classifier: IFilenameClassifier,
        delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize the inferrer.

        Args:
            classifier: External filename classifier.
            delay: Seconds to wait between two classifier calls.
            sleep: Wait primitive.
        """
        self._classifier = classifier
        self._delay = delay
        self._sleep = sleep

    @staticmethod
    def select_sample(files: Iterable[FileInfo], limit: int) -> List[FileInfo]:
        """
        Pick the files to send to the classifier.

        Videos are preferred; without videos any file is used. The longest
        names win, ties keep input order.
        """
        files = list(files)
        pool = [f for f in files if f.is_video] or files
        ranked = sorted(enumerate(pool), key=lambda item: (-len(item[1].name), item[0]))
        return [f for _, f in ranked[:max(limit, 0)]]

    def infer(
        self,
        files: Iterable[FileInfo],
        limit: int = PER_FILE_SAMPLE_SIZE
    ) -> InferredTitle:
        """
        Infer the title by classifying each sampled file.

        Titles are grouped case-insensitively; the largest group wins, ties
        go to the higher mean confidence, then to the group seen first. The
        winning group's first spelling is returned, with its share of the
        successful calls as confidence.

        Raises:
            TitleInferenceError: If the sample is empty or no call produced
                a title.
        """
        sample = self.select_sample(files, limit)
        names = [f.name for f in sample]
        if not sample:
            raise TitleInferenceError('No files to infer a title from')

        groups: Dict[str, _TitleGroup] = {}
        successes = 0

        for index, f in enumerate(sample):
            if index > 0 and self._delay > 0:
                self._sleep(self._delay)

            try:
                info = self._classifier.classify(f.name)
            except AniSubError as e:
                logger.warning(f'⚠️ 识别失败，跳过 {f.name}: {describe_error(e)}')
                continue

            title = info.title.strip()
            if not title:
                logger.debug(f'识别结果无标题: {f.name}')
                continue

            successes += 1
            group = groups.setdefault(title.casefold(), _TitleGroup(title=title))
            group.count += 1
            group.confidences.append(info.confidence)

        if not groups:
            raise TitleInferenceError(sample=names)

        best = max(groups.values(), key=lambda g: (g.count, g.mean_confidence))
        confidence = best.count / successes
        logger.info(
            f'🎯 推断标题: {best.title} '
            f'({best.count}/{successes}, {len(groups)} 个候选)'
        )
        return InferredTitle(title=best.title, confidence=confidence)

    def infer_batch(
        self,
        files: Iterable[FileInfo],
        limit: int = BATCH_SAMPLE_SIZE
    ) -> InferredTitle:
        """
        Infer the title with a single classifier call.

        Falls back to per-file mode when the classifier has no batch call.

        Raises:
            TitleInferenceError: If the sample is empty, the call fails or
                the returned title is blank.
        """
        files = list(files)
        if not self._classifier.supports_batch:
            logger.info('ℹ️ 识别器不支持批量调用，改为逐个识别')
            return self.infer(files)

        sample = self.select_sample(files, limit)
        names = [f.name for f in sample]
        if not sample:
            raise TitleInferenceError('No files to infer a title from')

        try:
            inferred = self._classifier.classify_batch(names)
        except AniSubError as e:
            raise TitleInferenceError(
                f'Could not infer a series title: {describe_error(e)}',
                sample=names
            ) from e

        title = inferred.title.strip()
        if not title:
            raise TitleInferenceError(sample=names)

        logger.info(f'🎯 批量推断标题: {title} (置信度 {inferred.confidence:.2f})')
        return InferredTitle(title=title, confidence=inferred.confidence)
