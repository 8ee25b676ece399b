from __future__ import annotations

import logging

from ihl.contracts import AppState, Team
from ihl.core import make_id

logger = logging.getLogger(__name__)


def create_team(name: str) -> Team:
    return Team(team_id=make_id("team"), name=name.strip() or "New team")


def rename_team(team: Team, name: str) -> bool:
    cleaned = name.strip()
    if not cleaned:
        return False
    team.name = cleaned
    return True


def delete_team(state: AppState, team_id: str) -> Team | None:
    """Remove a team with its line-ups; the active pointer falls back to the first team left."""
    team = state.team_by_id(team_id)
    if team is None:
        return None
    state.teams.remove(team)
    state.lineups_by_team.pop(team_id, None)
    if state.active_team_id == team_id or state.team_by_id(state.active_team_id) is None:
        state.active_team_id = state.teams[0].team_id if state.teams else None
    logger.info("deleted team %s (%s)", team_id, team.name)
    return team


def _opponent_key(name: str) -> str:
    return name.strip().lower()


def add_opponent(team: Team, name: str) -> bool:
    cleaned = name.strip()
    if not cleaned or any(_opponent_key(o) == cleaned.lower() for o in team.opposition):
        return False
    team.opposition.append(cleaned)
    return True


def rename_opponent(team: Team, index: int, name: str) -> bool:
    cleaned = name.strip()
    if not cleaned or not 0 <= index < len(team.opposition):
        return False
    if any(i != index and _opponent_key(o) == cleaned.lower() for i, o in enumerate(team.opposition)):
        return False
    team.opposition[index] = cleaned
    return True


def remove_opponent(team: Team, index: int) -> str | None:
    if not 0 <= index < len(team.opposition):
        return None
    return team.opposition.pop(index)


def merge_opposition(team: Team, league_name: str, names: list[str]) -> int:
    """Append unseen opponent names (case-insensitive); a non-blank league name replaces the old one."""
    if league_name.strip():
        team.league_name = league_name.strip()
    seen = {_opponent_key(o) for o in team.opposition}
    added = 0
    for name in names:
        key = _opponent_key(name)
        if not key or key in seen:
            continue
        team.opposition.append(name.strip())
        seen.add(key)
        added += 1
    return added
