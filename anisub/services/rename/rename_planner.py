"""
Rename planner module.

Derives a deterministic, collision-safe subtitle rename plan from
alignment rows.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from anisub.core.domain import (
    EpisodeAlignmentRow,
    EpisodeKey,
    PlanConflict,
    RenamePlan,
    RenamePlanEntry,
    split_parent,
)
from anisub.core.exceptions import PlanCountMismatchError
from anisub.services.rename.filename_formatter import FilenameFormatter

logger = logging.getLogger(__name__)


# Suffix presets offered next to the free-text suffix
SUFFIX_PRESETS: Tuple[str, ...] = ('chs', 'cht')


def resolve_suffix(custom: str | None, preset: str | None = None) -> str:
    """
    Pick the suffix to apply.

    Non-blank free text wins over the chosen preset; both empty means no
    suffix segment.
    """
    return (
        FilenameFormatter.normalize_suffix(custom)
        or FilenameFormatter.normalize_suffix(preset)
    )


class RenamePlanner:
    """
    Rename planner service.

    Only rows with both a video and a subtitle become entries. Entries keep
    row order, so identical inputs give identical plans.
    """

    def __init__(self, formatter: Optional[FilenameFormatter] = None):
        """
        Initialize the planner.

        Args:
            formatter: Filename formatter used to build target names.
        """
        self._formatter = formatter or FilenameFormatter()

    def target_name(self, row: EpisodeAlignmentRow, suffix: str | None) -> Optional[str]:
        """Return the target name for a paired row, else None."""
        if not row.is_paired:
            return None
        return self._formatter.format_subtitle(row.video, row.subtitle, suffix)

    def preview(
        self,
        rows: Iterable[EpisodeAlignmentRow],
        suffix: str | None
    ) -> Dict[EpisodeKey, Optional[str]]:
        """
        Preview target names without building a plan.

        Returns:
            Episode key -> target name (None for rows that will not be renamed).
        """
        return {row.episode: self.target_name(row, suffix) for row in rows}

    def plan(
        self,
        rows: Iterable[EpisodeAlignmentRow],
        suffix: str | None
    ) -> RenamePlan:
        """
        Build the rename plan.

        Args:
            rows: Alignment rows.
            suffix: Suffix tag (empty for none).

        Returns:
            RenamePlan with entries in row order, the skipped (video-only)
            keys, and pairs rejected because their target name collides with
            an earlier entry in the same directory.

        Raises:
            PlanCountMismatchError: If entries plus conflicts do not account
                for every complete pair.
        """
        entries: List[RenamePlanEntry] = []
        skipped: List[EpisodeKey] = []
        conflicts: List[PlanConflict] = []
        taken: Dict[Tuple[str, str], str] = {}

        rows = list(rows)
        pair_count = sum(1 for row in rows if row.is_paired)

        for row in rows:
            if row.is_missing_subtitle:
                skipped.append(row.episode)
                continue
            if not row.is_paired:
                continue

            target = self._formatter.format_subtitle(row.video, row.subtitle, suffix)
            directory = split_parent(row.subtitle.path)[0]

            # 文件系统大小写不敏感时同名也会覆盖
            slot = (directory, target.casefold())
            if slot in taken:
                logger.warning(
                    f'⚠️ 目标文件名冲突，跳过剧集 {row.episode}: {target} '
                    f'(已被剧集 {taken[slot]} 使用)'
                )
                conflicts.append(PlanConflict(
                    episode=row.episode,
                    target_name=target,
                    source_path=row.subtitle.path
                ))
                continue

            taken[slot] = row.episode
            entries.append(RenamePlanEntry(
                source_path=row.subtitle.path,
                target_name=target,
                video_ref_path=row.video.path
            ))

        if len(entries) + len(conflicts) != pair_count:
            raise PlanCountMismatchError(
                expected=pair_count,
                actual=len(entries) + len(conflicts)
            )

        if skipped:
            logger.info(f'ℹ️ 已跳过缺失字幕的剧集: {", ".join(skipped)}')

        logger.debug(
            f'📝 Planned {len(entries)} renames, '
            f'{len(skipped)} skipped, {len(conflicts)} conflicts'
        )
        return RenamePlan(entries=entries, skipped=skipped, conflicts=conflicts)
