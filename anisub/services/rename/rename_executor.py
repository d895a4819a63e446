"""
Rename executor module.

Applies a rename plan through the file system primitive, strictly in plan
order, stopping at the first failure.
"""

import logging
from typing import Dict, Iterable, List, Sequence

from anisub.core.domain import FileInfo, RenamePlanEntry, RenameReport, has_directory
from anisub.core.exceptions import FileOperationError, describe_error
from anisub.core.interfaces import IFileSystem

logger = logging.getLogger(__name__)

NO_ROLLBACK_NOTE = 'files renamed before the failure were not rolled back'


class RenameExecutor:
    """
    Rename executor service.

    Entries are applied one at a time. On the first failure the remaining
    entries are not attempted and nothing is rolled back.

    Entries whose source is a bare file name (no directory), or that already
    carry their target name, are recorded without touching the disk.
    """

    def __init__(self, filesystem: IFileSystem):
        """
        Initialize the executor.

        Args:
            filesystem: File system adapter providing rename/exists.
        """
        self._filesystem = filesystem

    def _preflight(self, entries: Sequence[RenamePlanEntry]) -> str | None:
        """Return an error message when a source subtitle is missing."""
        for entry in entries:
            if has_directory(entry.source_path) and not self._filesystem.exists(entry.source_path):
                return f'Subtitle file does not exist: {entry.source_path}'
        return None

    def execute(self, entries: Sequence[RenamePlanEntry]) -> RenameReport:
        """
        Apply the plan.

        Args:
            entries: Plan entries in order.

        Returns:
            RenameReport. On success ``renamed_names[i]`` belongs to
            ``entries[i]``; on failure it lists the names applied before the
            failing entry.
        """
        missing = self._preflight(entries)
        if missing:
            logger.error(f'❌ {missing}')
            return RenameReport(success=False, message=missing, renamed_names=[])

        renamed: List[str] = []
        for index, entry in enumerate(entries):
            if not has_directory(entry.source_path) or entry.target_path == entry.source_path:
                renamed.append(entry.target_name)
                continue

            try:
                if self._filesystem.exists(entry.target_path):
                    raise FileOperationError(
                        f'Target file already exists: {entry.target_name}',
                        path=entry.target_path
                    )
                self._filesystem.rename(entry.source_path, entry.target_name)
            except FileOperationError as e:
                message = (
                    f'Failed to rename {entry.source_path} -> {entry.target_name} '
                    f'({index + 1}/{len(entries)}): {describe_error(e)}; '
                    f'{len(renamed)} file(s) already renamed, {NO_ROLLBACK_NOTE}'
                )
                logger.error(f'❌ {message}')
                return RenameReport(success=False, message=message, renamed_names=renamed)

            logger.debug(f'✏️ {entry.source_path} -> {entry.target_name}')
            renamed.append(entry.target_name)

        message = f'Renamed {len(renamed)} file(s)'
        logger.info(f'✅ {message}')
        return RenameReport(success=True, message=message, renamed_names=renamed)

    @staticmethod
    def apply(
        subtitles: Iterable[FileInfo],
        entries: Sequence[RenamePlanEntry],
        report: RenameReport
    ) -> List[FileInfo]:
        """
        Reflect a successful report in the subtitle list.

        Renamed subtitles get their new name and a path re-joined onto the
        original parent directory (split on '/' or '\\'). Subtitles outside
        the plan pass through unchanged. A failed or inconsistent report
        leaves the list untouched.

        Args:
            subtitles: Current subtitle list.
            entries: The executed entries.
            report: The execution report.

        Returns:
            A new subtitle list.
        """
        subtitles = list(subtitles)
        if not report.success:
            return subtitles
        if len(report.renamed_names) != len(entries):
            logger.error(
                f'❌ 返回的重命名数量({len(report.renamed_names)})'
                f'与计划数量({len(entries)})不一致'
            )
            return subtitles

        new_names: Dict[str, str] = {
            entry.source_path: name
            for entry, name in zip(entries, report.renamed_names)
        }
        return [
            s.renamed(new_names[s.path]) if s.path in new_names else s
            for s in subtitles
        ]
