from __future__ import annotations

from typing import Mapping

from ihl.contracts import Lineup, Player, RoleCode, Stick
from ihl.lineup.slots import role_code_of


def is_mismatch(player: Player, role_code: RoleCode | str) -> bool:
    """True when the player declares playable roles and ``role_code`` is not among them."""
    if not player.can_play:
        return False
    code = role_code.value if isinstance(role_code, RoleCode) else role_code
    return code not in {c.value for c in player.can_play}


def mismatched_slots(lineup: Lineup, players_by_id: Mapping[str, Player]) -> list[str]:
    flagged: list[str] = []
    for slot_id, player_id in lineup.assignments.items():
        player = players_by_id.get(player_id) if player_id else None
        if player is not None and is_mismatch(player, role_code_of(slot_id)):
            flagged.append(slot_id)
    return flagged


def stick_label(player: Player | None) -> str:
    if player is None:
        return ""
    if player.stick == Stick.LEFT:
        return "LH"
    if player.stick == Stick.RIGHT:
        return "RH"
    return ""
