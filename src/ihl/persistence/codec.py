from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from ihl.contracts import AppState, Lineup, LineupCollection, Player, Team
from ihl.core import LineupLimits, now_utc
from ihl.lineup.store import integrity_issues, normalize
from ihl.roster.players import create_player

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Keys written by the browser build of the app.
_LEGACY_KEYS = {
    "activeTeamId": "active_team_id",
    "lineupsByTeam": "lineups_by_team",
    "activeLineupId": "active_lineup_id",
    "forwardLines": "forward_lines",
    "defencePairs": "defence_pairs",
    "backupGoalieEnabled": "backup_goalie_enabled",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "preferredPosition": "preferred_position",
    "canPlay": "can_play",
    "leagueName": "league_name",
}


def _snake(raw: dict[str, Any]) -> dict[str, Any]:
    return {_LEGACY_KEYS.get(k, k): v for k, v in raw.items()}


def _ts(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, UTC)
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return now_utc()


def player_to_dict(player: Player) -> dict[str, Any]:
    return {
        "player_id": player.player_id,
        "number": player.number,
        "name": player.name,
        "preferred_position": player.preferred_position.value,
        "leadership": player.leadership.value,
        "stick": player.stick.value,
        "can_play": [code.value for code in player.can_play],
        "notes": player.notes,
    }


def team_to_dict(team: Team) -> dict[str, Any]:
    return {
        "team_id": team.team_id,
        "name": team.name,
        "players": [player_to_dict(p) for p in team.players],
        "league_name": team.league_name,
        "opposition": list(team.opposition),
    }


def lineup_to_dict(lineup: Lineup) -> dict[str, Any]:
    return {
        "lineup_id": lineup.lineup_id,
        "name": lineup.name,
        "forward_lines": lineup.forward_lines,
        "defence_pairs": lineup.defence_pairs,
        "backup_goalie_enabled": lineup.backup_goalie_enabled,
        "assignments": dict(lineup.assignments),
        "created_at": lineup.created_at.isoformat(),
        "updated_at": lineup.updated_at.isoformat(),
    }


def app_state_to_dict(state: AppState) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "teams": [team_to_dict(t) for t in state.teams],
        "active_team_id": state.active_team_id,
        "lineups_by_team": {
            team_id: {
                "active_lineup_id": collection.active_lineup_id,
                "lineups": [lineup_to_dict(lu) for lu in collection.lineups],
            }
            for team_id, collection in state.lineups_by_team.items()
        },
        "created_at": state.created_at.isoformat(),
        "updated_at": state.updated_at.isoformat(),
    }


def player_from_dict(raw: dict[str, Any]) -> Player:
    data = _snake(raw)
    return create_player({**data, "player_id": data.get("player_id") or data.get("id")})


def team_from_dict(raw: dict[str, Any]) -> Team:
    data = _snake(raw)
    return Team(
        team_id=str(data.get("team_id") or data["id"]),
        name=str(data.get("name") or ""),
        players=[player_from_dict(p) for p in data.get("players", [])],
        league_name=str(data.get("league_name") or ""),
        opposition=[str(o).strip() for o in data.get("opposition") or [] if str(o).strip()],
    )


def lineup_from_dict(raw: dict[str, Any], limits: LineupLimits) -> Lineup:
    data = _snake(raw)
    lineup = Lineup(
        lineup_id=str(data.get("lineup_id") or data["id"]),
        name=str(data.get("name") or "Lineup"),
        forward_lines=limits.clamp_forward_lines(int(data.get("forward_lines", limits.min_forward_lines))),
        defence_pairs=limits.clamp_defence_pairs(int(data.get("defence_pairs", limits.min_defence_pairs))),
        backup_goalie_enabled=bool(data.get("backup_goalie_enabled", False)),
        created_at=_ts(data.get("created_at")),
        updated_at=_ts(data.get("updated_at")),
        assignments={str(k): (str(v) if v else None) for k, v in (data.get("assignments") or {}).items()},
    )
    issues = integrity_issues(lineup)
    if issues:
        logger.warning("repairing lineup %s on load: %s", lineup.lineup_id, ", ".join(i.code for i in issues))
    return normalize(lineup)


def app_state_from_dict(raw: dict[str, Any], limits: LineupLimits | None = None) -> AppState:
    limits = limits or LineupLimits()
    data = _snake(raw)
    teams = [team_from_dict(t) for t in data.get("teams", [])]
    collections: dict[str, LineupCollection] = {}
    for team_id, bucket in (data.get("lineups_by_team") or {}).items():
        bucket = _snake(bucket)
        collections[team_id] = LineupCollection(
            active_lineup_id=bucket.get("active_lineup_id"),
            lineups=[lineup_from_dict(lu, limits) for lu in bucket.get("lineups", [])],
        )
    return AppState(
        created_at=_ts(data.get("created_at")),
        updated_at=_ts(data.get("updated_at")),
        teams=teams,
        active_team_id=data.get("active_team_id"),
        lineups_by_team=collections,
    )
