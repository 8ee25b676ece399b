from __future__ import annotations

import logging

from ihl.contracts import DisplacementReport, Lineup, StructureChange, StructureChangeResult
from ihl.core import LineupLimits, now_utc
from ihl.lineup.slots import G_BACKUP, defence_pair_slots, forward_line_slots
from ihl.lineup.store import normalize

logger = logging.getLogger(__name__)

DEFAULT_LIMITS = LineupLimits()


def _report(lineup: Lineup, operation: str, slots: list[str]) -> DisplacementReport:
    displaced = [pid for pid in (lineup.assignments.get(s) for s in slots) if pid]
    return DisplacementReport(operation=operation, slots=list(slots), displaced_player_ids=displaced)


def _clear_and_renormalize(lineup: Lineup, slots: list[str]) -> None:
    for slot_id in slots:
        if slot_id in lineup.assignments:
            lineup.assignments[slot_id] = None
    lineup.updated_at = now_utc()
    normalize(lineup)


def _missing() -> StructureChangeResult:
    return StructureChangeResult(StructureChange.MISSING_LINEUP)


def add_forward_line(lineup: Lineup | None, limits: LineupLimits = DEFAULT_LIMITS) -> StructureChangeResult:
    if lineup is None:
        return _missing()
    if lineup.forward_lines >= limits.max_forward_lines:
        return StructureChangeResult(StructureChange.AT_MAXIMUM)
    lineup.forward_lines += 1
    lineup.updated_at = now_utc()
    normalize(lineup)
    logger.info("lineup %s now has %d forward lines", lineup.lineup_id, lineup.forward_lines)
    return StructureChangeResult(StructureChange.APPLIED)


def add_defence_pair(lineup: Lineup | None, limits: LineupLimits = DEFAULT_LIMITS) -> StructureChangeResult:
    if lineup is None:
        return _missing()
    if lineup.defence_pairs >= limits.max_defence_pairs:
        return StructureChangeResult(StructureChange.AT_MAXIMUM)
    lineup.defence_pairs += 1
    lineup.updated_at = now_utc()
    normalize(lineup)
    logger.info("lineup %s now has %d defence pairs", lineup.lineup_id, lineup.defence_pairs)
    return StructureChangeResult(StructureChange.APPLIED)


def preview_remove_forward_line(
    lineup: Lineup | None, limits: LineupLimits = DEFAULT_LIMITS
) -> DisplacementReport | None:
    """Occupants the highest forward line would lose; ``None`` when removal is not allowed."""
    if lineup is None or lineup.forward_lines <= limits.min_forward_lines:
        return None
    return _report(lineup, "remove_forward_line", forward_line_slots(lineup.forward_lines))


def preview_remove_defence_pair(
    lineup: Lineup | None, limits: LineupLimits = DEFAULT_LIMITS
) -> DisplacementReport | None:
    if lineup is None or lineup.defence_pairs <= limits.min_defence_pairs:
        return None
    return _report(lineup, "remove_defence_pair", defence_pair_slots(lineup.defence_pairs))


def preview_toggle_backup_goalie(lineup: Lineup | None) -> DisplacementReport | None:
    if lineup is None:
        return None
    if not lineup.backup_goalie_enabled:
        return DisplacementReport(operation="enable_backup_goalie", slots=[], displaced_player_ids=[])
    return _report(lineup, "disable_backup_goalie", [G_BACKUP])


def remove_forward_line(
    lineup: Lineup | None,
    *,
    confirmed: bool = False,
    limits: LineupLimits = DEFAULT_LIMITS,
) -> StructureChangeResult:
    if lineup is None:
        return _missing()
    report = preview_remove_forward_line(lineup, limits)
    if report is None:
        return StructureChangeResult(StructureChange.AT_MINIMUM)
    if report.requires_confirmation and not confirmed:
        return StructureChangeResult(StructureChange.CONFIRMATION_REQUIRED, report)
    _clear_and_renormalize(lineup, report.slots)
    lineup.forward_lines -= 1
    normalize(lineup)
    logger.info(
        "removed forward line %d from lineup %s (%d unassigned)",
        lineup.forward_lines + 1,
        lineup.lineup_id,
        report.displaced_count,
    )
    return StructureChangeResult(StructureChange.APPLIED, report)


def remove_defence_pair(
    lineup: Lineup | None,
    *,
    confirmed: bool = False,
    limits: LineupLimits = DEFAULT_LIMITS,
) -> StructureChangeResult:
    if lineup is None:
        return _missing()
    report = preview_remove_defence_pair(lineup, limits)
    if report is None:
        return StructureChangeResult(StructureChange.AT_MINIMUM)
    if report.requires_confirmation and not confirmed:
        return StructureChangeResult(StructureChange.CONFIRMATION_REQUIRED, report)
    _clear_and_renormalize(lineup, report.slots)
    lineup.defence_pairs -= 1
    normalize(lineup)
    logger.info(
        "removed defence pair %d from lineup %s (%d unassigned)",
        lineup.defence_pairs + 1,
        lineup.lineup_id,
        report.displaced_count,
    )
    return StructureChangeResult(StructureChange.APPLIED, report)


def toggle_backup_goalie(lineup: Lineup | None, *, confirmed: bool = False) -> StructureChangeResult:
    if lineup is None:
        return _missing()
    report = preview_toggle_backup_goalie(lineup)
    if lineup.backup_goalie_enabled:
        if report is not None and report.requires_confirmation and not confirmed:
            return StructureChangeResult(StructureChange.CONFIRMATION_REQUIRED, report)
        _clear_and_renormalize(lineup, [G_BACKUP])
        lineup.backup_goalie_enabled = False
    else:
        lineup.backup_goalie_enabled = True
        lineup.updated_at = now_utc()
    normalize(lineup)
    logger.info(
        "backup goalie %s for lineup %s",
        "enabled" if lineup.backup_goalie_enabled else "disabled",
        lineup.lineup_id,
    )
    return StructureChangeResult(StructureChange.APPLIED, report)
