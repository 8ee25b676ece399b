from __future__ import annotations

from ihl.contracts import AppState
from ihl.core import now_utc
from ihl.lineup import ensure_collection
from ihl.roster import (
    add_opponent,
    create_team,
    delete_team,
    merge_opposition,
    parse_opposition_rows,
    remove_opponent,
    rename_opponent,
    rename_team,
)


def _state_with(*names: str) -> AppState:
    stamp = now_utc()
    state = AppState(created_at=stamp, updated_at=stamp)
    for name in names:
        team = create_team(name)
        state.teams.append(team)
        ensure_collection(state, team.team_id)
    state.active_team_id = state.teams[0].team_id if state.teams else None
    return state


def test_rename_team_ignores_blank():
    team = create_team("Hawks")
    assert rename_team(team, "  Night Hawks ")
    assert team.name == "Night Hawks"
    assert not rename_team(team, "   ")
    assert team.name == "Night Hawks"


def test_delete_active_team_moves_pointer_and_drops_lineups():
    state = _state_with("Hawks", "Wolves", "Bears")
    hawks, wolves, _ = state.teams

    assert delete_team(state, hawks.team_id) is hawks
    assert hawks.team_id not in state.lineups_by_team
    assert state.active_team_id == wolves.team_id
    assert delete_team(state, "team_missing") is None


def test_delete_inactive_team_keeps_pointer():
    state = _state_with("Hawks", "Wolves")
    hawks, wolves = state.teams
    delete_team(state, wolves.team_id)
    assert state.active_team_id == hawks.team_id
    delete_team(state, hawks.team_id)
    assert state.active_team_id is None
    assert state.lineups_by_team == {}


def test_opposition_names_are_unique_ignoring_case():
    team = create_team("Hawks")
    assert add_opponent(team, " Wolves ")
    assert not add_opponent(team, "WOLVES")
    assert not add_opponent(team, " ")
    assert add_opponent(team, "Bears")

    assert not rename_opponent(team, 1, "wolves")
    assert rename_opponent(team, 1, "Brown Bears")
    assert not rename_opponent(team, 5, "Lynx")
    assert team.opposition == ["Wolves", "Brown Bears"]

    assert remove_opponent(team, 0) == "Wolves"
    assert remove_opponent(team, 3) is None
    assert team.opposition == ["Brown Bears"]


def test_opposition_csv_merge():
    text = "\n,,\nCity League,ignored\nWolves\nbears\n,x\nBears\nWOLVES\nLynx\n"
    league, names = parse_opposition_rows(text)
    assert league == "City League"
    assert names == ["Wolves", "bears", "Bears", "WOLVES", "Lynx"]

    team = create_team("Hawks")
    team.opposition.append("Lynx")
    assert merge_opposition(team, league, names) == 2
    assert team.opposition == ["Lynx", "Wolves", "bears"]
    assert team.league_name == "City League"

    merge_opposition(team, "", ["Eagles"])
    assert team.league_name == "City League"
    assert parse_opposition_rows(" \n,\n") is None
