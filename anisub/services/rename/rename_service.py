"""
Rename service module.

Holds the video/subtitle working set and coordinates classification,
alignment, planning and execution of subtitle renames.
"""

import logging
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from anisub.core.config import AppConfig, SettingsStore
from anisub.core.domain import (
    EpisodeAlignmentRow,
    EpisodeKey,
    FileInfo,
    RenamePlan,
    RenameReport,
)
from anisub.core.exceptions import PlanningError, describe_error
from anisub.core.interfaces import IFileSystem, RenameRequest, RenameResponse
from anisub.services.rename.episode_aligner import EpisodeAligner
from anisub.services.rename.episode_extractor import EpisodeKeyExtractor, EpisodeMatcher
from anisub.services.rename.file_classifier import FileClassifier
from anisub.services.rename.rename_executor import RenameExecutor
from anisub.services.rename.rename_planner import RenamePlanner

logger = logging.getLogger(__name__)


class RenameService:
    """
    Rename service.

    Owns two collections (videos, subtitles). Every mutation reads the
    current list, computes a new one and swaps it in under a lock, so
    readers always see a complete list.

    The active episode pattern follows the settings store: a saved
    ``episode_regex`` is recompiled immediately, falling back to the
    default pattern when it is invalid.
    """

    def __init__(
        self,
        filesystem: IFileSystem,
        extractor: Optional[EpisodeKeyExtractor] = None,
        classifier: Optional[FileClassifier] = None,
        aligner: Optional[EpisodeAligner] = None,
        planner: Optional[RenamePlanner] = None,
        executor: Optional[RenameExecutor] = None,
        settings_store: Optional[SettingsStore] = None
    ):
        """
        Initialize the rename service.

        Args:
            filesystem: File system adapter.
            extractor: Episode key extractor.
            classifier: File classifier.
            aligner: Episode aligner.
            planner: Rename planner.
            executor: Rename executor.
            settings_store: Settings store to follow for pattern changes.
        """
        self._filesystem = filesystem
        self._extractor = extractor or EpisodeKeyExtractor()
        self._classifier = classifier or FileClassifier(extractor=self._extractor)
        self._aligner = aligner or EpisodeAligner(self._extractor)
        self._planner = planner or RenamePlanner()
        self._executor = executor or RenameExecutor(filesystem)

        self._lock = threading.Lock()
        self._videos: List[FileInfo] = []
        self._subtitles: List[FileInfo] = []

        pattern = (
            settings_store.current.episode_regex if settings_store
            else self._extractor.DEFAULT_PATTERN
        )
        self._matcher, self._pattern_valid = self._extractor.compile_or_default(pattern)

        self._unsubscribe = None
        if settings_store is not None:
            self._unsubscribe = settings_store.subscribe(self._on_settings_saved)

    # ------------------------------------------------------------------
    # Pattern
    # ------------------------------------------------------------------

    @property
    def matcher(self) -> EpisodeMatcher:
        return self._matcher

    @property
    def pattern_valid(self) -> bool:
        """False when the last supplied pattern was rejected."""
        return self._pattern_valid

    def set_pattern(self, pattern_source: Optional[str]) -> bool:
        """
        Switch the active episode pattern.

        Args:
            pattern_source: Regular expression or preset name.

        Returns:
            True if the pattern was accepted, False if the default pattern
            was substituted.
        """
        matcher, valid = self._extractor.compile_or_default(pattern_source)
        with self._lock:
            self._matcher = matcher
            self._pattern_valid = valid
        logger.info(f'🔧 当前剧集正则: {matcher.source}')
        return valid

    def _on_settings_saved(self, settings: AppConfig) -> None:
        self.set_pattern(settings.episode_regex)

    def close(self) -> None:
        """Stop following the settings store."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ------------------------------------------------------------------
    # Working set
    # ------------------------------------------------------------------

    @property
    def videos(self) -> List[FileInfo]:
        with self._lock:
            return list(self._videos)

    @property
    def subtitles(self) -> List[FileInfo]:
        with self._lock:
            return list(self._subtitles)

    def add_paths(self, paths: Iterable[str]) -> Tuple[int, int]:
        """
        Add raw dropped or picked paths.

        Unknown extensions are dropped silently.

        Returns:
            (videos added, subtitles added).
        """
        return self.add_files(self._classifier.classify(paths))

    def add_files(self, files: Iterable[FileInfo]) -> Tuple[int, int]:
        """
        Merge files into the working set.

        Returns:
            (videos added, subtitles added); re-added paths count too.
        """
        new_videos, new_subtitles = self._classifier.split(files)
        if not new_videos and not new_subtitles:
            return 0, 0

        with self._lock:
            self._videos = self._classifier.merge(self._videos, new_videos)
            self._subtitles = self._classifier.merge(self._subtitles, new_subtitles)

        logger.info(
            f'📥 成功添加 {len(new_videos)} 个视频文件和 {len(new_subtitles)} 个字幕文件'
        )
        return len(new_videos), len(new_subtitles)

    def import_directory(self, path: str) -> Tuple[int, int]:
        """
        Replace the working set with the contents of one directory.

        Subtitles that cannot pair with any of the directory's videos are
        left out.

        Raises:
            FileOperationError: If the directory cannot be read.
        """
        files = self._filesystem.list_directory(path)
        self.clear()
        if not files:
            logger.info(f'ℹ️ 所选文件夹中未找到视频或字幕文件: {path}')
            return 0, 0
        return self.add_files(self._classifier.filter_directory_import(files, self._matcher))

    def clear(self) -> None:
        with self._lock:
            self._videos = []
            self._subtitles = []

    # ------------------------------------------------------------------
    # Alignment and preview
    # ------------------------------------------------------------------

    def alignment(self) -> List[EpisodeAlignmentRow]:
        """Align the current working set."""
        with self._lock:
            videos, subtitles, matcher = self._videos, self._subtitles, self._matcher
        return self._aligner.align(videos, subtitles, matcher)

    def missing(self) -> List[EpisodeKey]:
        """Episode keys that have a video but no subtitle."""
        return self._aligner.missing(self.alignment())

    def preview(self, suffix: str = '') -> Dict[EpisodeKey, Optional[str]]:
        """Target names per episode, without touching the disk."""
        return self._planner.preview(self.alignment(), suffix)

    def plan(self, suffix: str = '') -> RenamePlan:
        """
        Plan renames for the current working set.

        Raises:
            PlanningError: Invalid suffix or an internal count inconsistency.
        """
        return self._planner.plan(self.alignment(), suffix)

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------

    def rename(self, suffix: str = '', dry_run: bool = False) -> RenameResponse:
        """
        Rename every paired subtitle in the working set.

        Video-only episodes are skipped, colliding targets are left out of
        the plan. On success the subtitle list is updated in place; on
        failure it is left as it was.

        Args:
            suffix: Suffix tag (empty for none).
            dry_run: Plan only; report the target names without renaming.

        Returns:
            RenameResponse for the executed entries.
        """
        try:
            plan = self.plan(suffix)
        except PlanningError as e:
            logger.error(f'❌ 重命名计划失败: {e}')
            return RenameResponse(success=False, message=describe_error(e))

        for conflict in plan.conflicts:
            logger.warning(
                f'⚠️ 剧集 {conflict.episode} 未重命名: 目标文件 {conflict.target_name} 冲突'
            )

        if plan.is_empty:
            return RenameResponse(
                success=False,
                message='No video/subtitle pairs to rename'
            )

        if dry_run:
            names = [entry.target_name for entry in plan.entries]
            return RenameResponse(
                success=True,
                message=f'Would rename {len(names)} file(s)',
                renamed_files=names
            )

        report = self._executor.execute(plan.entries)
        with self._lock:
            self._subtitles = self._executor.apply(self._subtitles, plan.entries, report)
        return self.to_response(report)

    def rename_subtitle_files(self, request: RenameRequest) -> RenameResponse:
        """
        Rename ``subtitle_files[i]`` after ``video_files[i]``.

        Returns:
            RenameResponse whose ``renamed_files`` positionally matches the
            request's subtitle array on success.
        """
        if len(request.video_files) != len(request.subtitle_files):
            message = (
                f'Video count ({len(request.video_files)}) does not match '
                f'subtitle count ({len(request.subtitle_files)})'
            )
            logger.error(f'❌ {message}')
            return RenameResponse(success=False, message=message)

        rows = [
            EpisodeAlignmentRow(episode=str(index), video=video, subtitle=subtitle)
            for index, (video, subtitle) in enumerate(
                zip(request.video_files, request.subtitle_files)
            )
        ]
        try:
            plan = self._planner.plan(rows, request.suffix)
        except PlanningError as e:
            return RenameResponse(success=False, message=describe_error(e))

        if plan.conflicts:
            names = ', '.join(sorted({c.target_name for c in plan.conflicts}))
            message = f'Target file names collide: {names}'
            logger.error(f'❌ {message}')
            return RenameResponse(success=False, message=message)

        return self.to_response(self._executor.execute(plan.entries))

    @staticmethod
    def to_response(report: RenameReport) -> RenameResponse:
        return RenameResponse(
            success=report.success,
            message=report.message,
            renamed_files=list(report.renamed_names)
        )
