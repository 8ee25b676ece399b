from __future__ import annotations

import logging

from ihl.contracts import Lineup, MoveEvent, MoveOutcome, MoveResult
from ihl.core import now_utc
from ihl.lineup.store import holder_slot_of, normalize, occupant_of

logger = logging.getLogger(__name__)


def apply_move(lineup: Lineup | None, event: MoveEvent) -> MoveResult:
    """Apply one drag/drop move: unassign, place from the pool, or swap two slots.

    Stale targets (slots removed by a structure change mid-drag) are ignored.
    """
    if lineup is None:
        return MoveResult(MoveOutcome.NOOP)

    from_slot = holder_slot_of(lineup, event.dragged_player_id)

    if event.to_unassigned:
        if from_slot is None:
            return MoveResult(MoveOutcome.NOOP)
        lineup.assignments[from_slot] = None
        lineup.updated_at = now_utc()
        normalize(lineup)
        logger.debug("player %s returned to pool from %s", event.dragged_player_id, from_slot)
        return MoveResult(MoveOutcome.UNASSIGNED, from_slot=from_slot)

    target = event.target
    if target not in lineup.assignments:
        logger.debug("ignoring move of %s onto stale slot %s", event.dragged_player_id, target)
        return MoveResult(MoveOutcome.NOOP)

    target_occupant = occupant_of(lineup, target)

    if from_slot is None:
        lineup.assignments[target] = event.dragged_player_id
        lineup.updated_at = now_utc()
        normalize(lineup)
        return MoveResult(MoveOutcome.PLACED, to_slot=target, displaced_player_id=target_occupant)

    if from_slot == target:
        return MoveResult(MoveOutcome.NOOP, from_slot=from_slot, to_slot=target)

    lineup.assignments[target] = event.dragged_player_id
    lineup.assignments[from_slot] = target_occupant
    lineup.updated_at = now_utc()
    normalize(lineup)
    logger.debug("swapped %s and %s in lineup %s", from_slot, target, lineup.lineup_id)
    return MoveResult(MoveOutcome.SWAPPED, from_slot=from_slot, to_slot=target)
