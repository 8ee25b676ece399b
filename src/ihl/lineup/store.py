from __future__ import annotations

import logging
from typing import Iterable

from ihl.contracts import Lineup, Player, ValidationIssue
from ihl.core import now_utc
from ihl.lineup.slots import canonical_slots

logger = logging.getLogger(__name__)


def integrity_issues(lineup: Lineup) -> list[ValidationIssue]:
    """Report stale/missing keys and players holding more than one slot."""
    issues: list[ValidationIssue] = []
    expected = canonical_slots(lineup.structure)
    expected_set = set(expected)
    actual = set(lineup.assignments)
    for slot_id in sorted(actual - expected_set):
        issues.append(
            ValidationIssue(
                code="STALE_SLOT",
                severity="repairable",
                field_path=f"lineup.assignments.{slot_id}",
                entity_id=lineup.lineup_id,
                message=f"slot '{slot_id}' is not part of the current structure",
            )
        )
    for slot_id in expected:
        if slot_id not in actual:
            issues.append(
                ValidationIssue(
                    code="MISSING_SLOT",
                    severity="repairable",
                    field_path=f"lineup.assignments.{slot_id}",
                    entity_id=lineup.lineup_id,
                    message=f"slot '{slot_id}' is missing",
                )
            )
    seen: dict[str, str] = {}
    for slot_id in expected:
        player_id = lineup.assignments.get(slot_id)
        if not player_id:
            continue
        if player_id in seen:
            issues.append(
                ValidationIssue(
                    code="DUPLICATE_PLAYER",
                    severity="repairable",
                    field_path=f"lineup.assignments.{slot_id}",
                    entity_id=lineup.lineup_id,
                    message=f"player '{player_id}' already holds '{seen[player_id]}'",
                )
            )
        else:
            seen[player_id] = slot_id
    return issues


def normalize(lineup: Lineup) -> Lineup:
    """Rebuild ``assignments`` to exactly the canonical slot set of the structure.

    Values of still-valid keys carry forward, new keys start empty and stale keys
    are dropped. A player found in more than one slot keeps only the first one in
    canonical order.
    """
    issues = integrity_issues(lineup)
    duplicates = [i for i in issues if i.code == "DUPLICATE_PLAYER"]
    if duplicates:
        logger.warning(
            "lineup %s held %d duplicate assignment(s); keeping first holder",
            lineup.lineup_id,
            len(duplicates),
        )
    rebuilt: dict[str, str | None] = {}
    placed: set[str] = set()
    for slot_id in canonical_slots(lineup.structure):
        player_id = lineup.assignments.get(slot_id) or None
        if player_id is not None and player_id in placed:
            player_id = None
        if player_id is not None:
            placed.add(player_id)
        rebuilt[slot_id] = player_id
    lineup.assignments = rebuilt
    return lineup


def occupant_of(lineup: Lineup, slot_id: str) -> str | None:
    return lineup.assignments.get(slot_id) or None


def holder_slot_of(lineup: Lineup, player_id: str) -> str | None:
    for slot_id, occupant in lineup.assignments.items():
        if occupant == player_id:
            return slot_id
    return None


def assigned_player_ids(lineup: Lineup) -> set[str]:
    return {pid for pid in lineup.assignments.values() if pid}


def empty_slots(lineup: Lineup) -> list[str]:
    return [slot_id for slot_id, occupant in lineup.assignments.items() if not occupant]


def available_players(lineup: Lineup, players: Iterable[Player]) -> list[Player]:
    """Players not holding any slot in the line-up, ordered by jersey number."""
    assigned = assigned_player_ids(lineup)
    return sorted((p for p in players if p.player_id not in assigned), key=lambda p: p.number)


def clear_assignments(lineup: Lineup) -> int:
    cleared = 0
    for slot_id, occupant in lineup.assignments.items():
        if occupant:
            lineup.assignments[slot_id] = None
            cleared += 1
    lineup.updated_at = now_utc()
    normalize(lineup)
    logger.debug("cleared %d assignment(s) from lineup %s", cleared, lineup.lineup_id)
    return cleared


def unassign_player(lineup: Lineup, player_id: str) -> str | None:
    """Remove a player from whichever slot holds them; returns that slot."""
    slot_id = holder_slot_of(lineup, player_id)
    if slot_id is None:
        return None
    lineup.assignments[slot_id] = None
    lineup.updated_at = now_utc()
    return slot_id
