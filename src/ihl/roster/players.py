from __future__ import annotations

import logging
from typing import Any, Iterable

from ihl.contracts import (
    AppState,
    Leadership,
    Player,
    Position,
    RoleCode,
    Stick,
    Team,
    ValidationError,
    ValidationIssue,
)
from ihl.core import make_id
from ihl.lineup.store import normalize, unassign_player

logger = logging.getLogger(__name__)

MAX_CAPTAINS = 1
MAX_ALTERNATES = 2

_POSITION_ORDER = {Position.GOALIE: 0, Position.DEFENDER: 1, Position.CENTRE: 2, Position.WING: 3}


def position_sort_key(position: Position | str) -> int:
    try:
        return _POSITION_ORDER[Position(position)]
    except ValueError:
        return 99


def _coerce_can_play(raw: Iterable[Any]) -> list[RoleCode]:
    codes: list[RoleCode] = []
    for item in raw:
        code = RoleCode(item.value if isinstance(item, RoleCode) else str(item).strip().upper())
        if code not in codes:
            codes.append(code)
    return codes


def create_player(draft: dict[str, Any]) -> Player:
    return Player(
        player_id=str(draft.get("player_id") or make_id("player")),
        number=int(draft["number"]),
        name=str(draft["name"]).strip(),
        preferred_position=Position(draft["preferred_position"]),
        leadership=Leadership(draft.get("leadership") or ""),
        stick=Stick(draft.get("stick") or ""),
        can_play=_coerce_can_play(draft.get("can_play") or []),
        notes=str(draft.get("notes") or ""),
    )


def validate_player(team: Team, draft: dict[str, Any], editing_player_id: str | None = None) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    entity = editing_player_id or "new"

    def issue(code: str, field_path: str, message: str) -> None:
        issues.append(ValidationIssue(code=code, severity="blocking", field_path=field_path, entity_id=entity, message=message))

    raw_number = draft.get("number")
    try:
        number = int(str(raw_number).strip())
    except (TypeError, ValueError):
        number = 0
    if number <= 0:
        issue("INVALID_NUMBER", "player.number", "number must be a positive integer")
    elif any(p.number == number and p.player_id != editing_player_id for p in team.players):
        issue("DUPLICATE_NUMBER", "player.number", f"number {number} is already used in this team")

    if not str(draft.get("name") or "").strip():
        issue("MISSING_NAME", "player.name", "name is required")

    try:
        Position(draft.get("preferred_position"))
    except ValueError:
        issue("INVALID_POSITION", "player.preferred_position", "preferred position is required")

    try:
        leadership = Leadership(draft.get("leadership") or "")
    except ValueError:
        issue("INVALID_LEADERSHIP", "player.leadership", "leadership must be '', 'C' or 'A'")
        leadership = Leadership.NONE
    others = [p for p in team.players if p.player_id != editing_player_id]
    if leadership == Leadership.CAPTAIN and sum(p.leadership == Leadership.CAPTAIN for p in others) >= MAX_CAPTAINS:
        issue("CAPTAIN_LIMIT", "player.leadership", "only one Captain (C) is allowed per team")
    if leadership == Leadership.ALTERNATE and sum(p.leadership == Leadership.ALTERNATE for p in others) >= MAX_ALTERNATES:
        issue("ALTERNATE_LIMIT", "player.leadership", "only two Alternates (A) are allowed per team")

    try:
        Stick(draft.get("stick") or "")
    except ValueError:
        issue("INVALID_STICK", "player.stick", "stick must be '', 'Left' or 'Right'")
    try:
        _coerce_can_play(draft.get("can_play") or [])
    except ValueError:
        issue("INVALID_CAN_PLAY", "player.can_play", "can_play entries must be LW, C, RW, LD, RD or G")
    return issues


def add_player(team: Team, draft: dict[str, Any]) -> Player:
    issues = validate_player(team, draft)
    if issues:
        raise ValidationError(issues)
    player = create_player(draft)
    team.players.append(player)
    logger.debug("added player #%d %s to team %s", player.number, player.name, team.team_id)
    return player


def update_player(team: Team, player_id: str, draft: dict[str, Any]) -> Player:
    current = team.player_by_id(player_id)
    if current is None:
        raise ValidationError(
            [ValidationIssue("UNKNOWN_PLAYER", "blocking", "player.player_id", player_id, "player is not on this team")]
        )
    issues = validate_player(team, draft, editing_player_id=player_id)
    if issues:
        raise ValidationError(issues)
    updated = create_player({**draft, "player_id": player_id})
    team.players[team.players.index(current)] = updated
    return updated


def remove_player(state: AppState, team: Team, player_id: str) -> bool:
    """Drop a player from the roster and from every line-up of the team."""
    player = team.player_by_id(player_id)
    if player is None:
        return False
    team.players.remove(player)
    collection = state.lineups_by_team.get(team.team_id)
    if collection is not None:
        for lineup in collection.lineups:
            if unassign_player(lineup, player_id) is not None:
                normalize(lineup)
    logger.info("removed player %s from team %s", player_id, team.team_id)
    return True
