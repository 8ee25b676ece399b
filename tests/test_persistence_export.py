from __future__ import annotations

import json
import sqlite3
from pathlib import Path

import duckdb

from ihl.contracts import AppState
from ihl.core import LineupLimits, now_utc
from ihl.export import ExportService, build_lineup_sheet
from ihl.lineup import canonical_slots, ensure_collection
from ihl.persistence import AppStateStore, MigrationRunner
from ihl.persistence.sqlite_store import HISTORY_DEPTH
from tests.helpers import make_team


def _state() -> AppState:
    stamp = now_utc()
    state = AppState(created_at=stamp, updated_at=stamp)
    team = make_team()
    state.teams.append(team)
    team.league_name = "Metro League"
    team.opposition.extend(["Wolves", "Bears"])
    state.active_team_id = team.team_id
    lineup = ensure_collection(state, team.team_id).lineups[0]
    lineup.assignments["G_START"] = "p1"
    lineup.assignments["F1_C"] = "p10"
    return state


def test_migrations_apply_once(tmp_path: Path):
    with sqlite3.connect(tmp_path / "m.sqlite3") as conn:
        assert MigrationRunner(conn).apply() == [1, 2]
        assert MigrationRunner(conn).apply() == []
        tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()}
    assert {"app_state", "app_state_history", "schema_migrations"} <= tables


def test_save_then_load_restores_teams_and_lineups(tmp_path: Path):
    store = AppStateStore(tmp_path / "state.sqlite3")
    store.initialize_schema()
    assert store.load() is None

    state = _state()
    store.save(state)
    loaded = AppStateStore(tmp_path / "state.sqlite3").load()

    assert loaded is not None
    assert loaded.active_team_id == "team_test"
    assert [p.player_id for p in loaded.teams[0].players] == [p.player_id for p in state.teams[0].players]
    original = state.lineups_by_team["team_test"]
    restored = loaded.lineups_by_team["team_test"]
    assert restored.active_lineup_id == original.active_lineup_id
    assert restored.lineups[0].assignments == original.lineups[0].assignments
    assert restored.lineups[0].created_at == original.lineups[0].created_at
    assert (loaded.teams[0].league_name, loaded.teams[0].opposition) == ("Metro League", ["Wolves", "Bears"])


def test_history_is_trimmed(tmp_path: Path):
    store = AppStateStore(tmp_path / "state.sqlite3")
    store.initialize_schema()
    state = _state()
    for _ in range(HISTORY_DEPTH + 5):
        store.save(state)
    assert store.history_count() == HISTORY_DEPTH


def test_invalid_payload_loads_as_nothing(tmp_path: Path):
    store = AppStateStore(tmp_path / "state.sqlite3")
    store.initialize_schema()
    with store.connect() as conn:
        conn.execute("INSERT INTO app_state VALUES (?, ?, ?)", (store.state_key, "{not json", "2026-01-01"))
    assert store.load() is None


def test_legacy_payload_is_clamped_and_repaired(tmp_path: Path):
    legacy = {
        "teams": [
            {
                "id": "t1",
                "name": "Legacy",
                "leagueName": "Old League",
                "opposition": ["Wolves", " "],
                "players": [
                    {"id": "a", "number": 9, "name": "Ann", "preferredPosition": "Wing", "canPlay": ["LW"]},
                    {"id": "b", "number": 1, "name": "Bob", "preferredPosition": "Goalie", "leadership": "C"},
                ],
            }
        ],
        "activeTeamId": "t1",
        "lineupsByTeam": {
            "t1": {
                "activeLineupId": "l1",
                "lineups": [
                    {
                        "id": "l1",
                        "name": "Old",
                        "forwardLines": 9,
                        "defencePairs": 0,
                        "backupGoalieEnabled": True,
                        "assignments": {"F1_LW": "a", "F1_C": "a", "F9_LW": "b", "G_START": "b"},
                        "createdAt": 1700000000000,
                        "updatedAt": 1700000000000,
                    }
                ],
            }
        },
    }
    store = AppStateStore(tmp_path / "state.sqlite3")
    store.initialize_schema()
    with store.connect() as conn:
        conn.execute("INSERT INTO app_state VALUES (?, ?, ?)", (store.state_key, json.dumps(legacy), "2026-01-01"))

    limits = LineupLimits()
    state = store.load(limits)
    assert state is not None
    lineup = state.lineups_by_team["t1"].lineups[0]
    assert (lineup.forward_lines, lineup.defence_pairs) == (limits.max_forward_lines, limits.min_defence_pairs)
    assert list(lineup.assignments) == canonical_slots(lineup.structure)
    assert lineup.assignments["F1_LW"] == "a"
    assert lineup.assignments["F1_C"] is None
    assert lineup.assignments["G_START"] == "b"
    assert lineup.assignments["G_BACKUP"] is None
    assert lineup.created_at.year == 2023
    assert state.teams[0].players[1].leadership.value == "C"
    assert (state.teams[0].league_name, state.teams[0].opposition) == ("Old League", ["Wolves"])


def test_lineup_export_csv_and_parquet_have_same_rows(tmp_path: Path):
    state = _state()
    team = state.teams[0]
    lineup = state.lineups_by_team[team.team_id].lineups[0]
    sheet = build_lineup_sheet(team, lineup)

    csv_path, parquet_path = ExportService().export_lineup(sheet, tmp_path / "out")
    assert csv_path.exists() and parquet_path.exists()

    with duckdb.connect() as conn:
        csv_rows = conn.execute(f"SELECT COUNT(*) FROM read_csv_auto('{csv_path.as_posix()}')").fetchone()[0]
        pq_rows = conn.execute(f"SELECT COUNT(*) FROM read_parquet('{parquet_path.as_posix()}')").fetchone()[0]
        goalie = conn.execute(
            f"SELECT name FROM read_parquet('{parquet_path.as_posix()}') WHERE slot_id = 'G_START'"
        ).fetchone()[0]
    assert csv_rows == pq_rows == len(canonical_slots(lineup.structure))
    assert goalie == "Gus Goalie"
