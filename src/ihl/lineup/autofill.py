from __future__ import annotations

import logging
from typing import Iterable

from ihl.contracts import AutoFillResult, Lineup, Player, RandomSource
from ihl.core import now_utc
from ihl.lineup.slots import fill_order, role_code_of
from ihl.lineup.store import assigned_player_ids, normalize

logger = logging.getLogger(__name__)


def _snapshot_pool(lineup: Lineup, candidates: Iterable[Player]) -> list[Player]:
    # One entry per player, never someone already holding a slot here.
    taken = assigned_player_ids(lineup)
    pool: list[Player] = []
    seen: set[str] = set()
    for player in candidates:
        if player.player_id in taken or player.player_id in seen:
            continue
        seen.add(player.player_id)
        pool.append(player)
    return pool


def pick_candidate(pool: list[Player], role_code: str, rand: RandomSource) -> Player | None:
    """Uniform pick among players able to play ``role_code``, else among the whole pool."""
    if not pool:
        return None
    matches = [p for p in pool if role_code in {code.value for code in p.can_play}]
    return rand.choice(matches or pool)


def auto_fill(lineup: Lineup, candidates: Iterable[Player], rand: RandomSource) -> AutoFillResult:
    """Fill every empty slot of ``lineup`` from a snapshot of ``candidates``.

    Occupied slots are never overwritten and each candidate is used at most once.
    Slots left over when the pool runs dry stay empty.
    """
    pool = _snapshot_pool(lineup, candidates)
    result = AutoFillResult()

    for slot_id in fill_order(lineup.structure):
        if lineup.assignments.get(slot_id):
            continue
        chosen = pick_candidate(pool, role_code_of(slot_id), rand)
        if chosen is None:
            result.unfilled_slots.append(slot_id)
            continue
        pool.remove(chosen)
        lineup.assignments[slot_id] = chosen.player_id
        result.assigned[slot_id] = chosen.player_id

    result.pool_remaining = len(pool)
    if result.assigned:
        lineup.updated_at = now_utc()
    normalize(lineup)
    logger.debug(
        "auto-filled %d slot(s) in lineup %s, %d left empty, %d candidate(s) unused",
        len(result.assigned),
        lineup.lineup_id,
        len(result.unfilled_slots),
        result.pool_remaining,
    )
    return result
