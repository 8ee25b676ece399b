from __future__ import annotations

from collections import Counter

from ihl.contracts import Position
from ihl.core import seeded_random
from ihl.lineup import auto_fill, empty_slots
from tests.helpers import make_lineup, make_player, make_team


def test_auto_fill_saturates_when_pool_is_large_enough():
    team = make_team()
    lineup = make_lineup(3, 2, True)
    before = len(empty_slots(lineup))

    result = auto_fill(lineup, team.players, seeded_random(1))

    assert len(empty_slots(lineup)) == max(0, before - len(team.players))
    assert len(result.assigned) == before
    assert result.pool_remaining == len(team.players) - before


def test_auto_fill_prefers_players_declaring_the_role():
    team = make_team()
    lineup = make_lineup(3, 1, True)
    by_id = {p.player_id: p for p in team.players}

    auto_fill(lineup, team.players, seeded_random(5))

    for slot_id in ("G_START", "G_BACKUP"):
        assert by_id[lineup.assignments[slot_id]].preferred_position == Position.GOALIE
    assert lineup.assignments["D1_LD"] in {"p2", "p4"}
    for i in (1, 2, 3):
        assert [c.value for c in by_id[lineup.assignments[f"F{i}_C"]].can_play] == ["C"]


def test_auto_fill_never_overwrites_or_duplicates():
    team = make_team()
    lineup = make_lineup(2, 1, False)
    lineup.assignments["G_START"] = "p30"
    lineup.assignments["F2_C"] = "p10"

    auto_fill(lineup, team.players, seeded_random(9))

    assert lineup.assignments["G_START"] == "p30"
    assert lineup.assignments["F2_C"] == "p10"
    counts = Counter(v for v in lineup.assignments.values() if v)
    assert max(counts.values()) == 1


def test_auto_fill_stops_when_pool_runs_out():
    lineup = make_lineup(2, 1, False)
    pool = [make_player(40), make_player(41), make_player(42)]

    result = auto_fill(lineup, pool, seeded_random(3))

    assert len(result.assigned) == 3
    assert len(empty_slots(lineup)) == 6
    assert result.pool_exhausted
    # goalie first, then the defence pair
    assert set(result.assigned) == {"G_START", "D1_LD", "D1_RD"}


def test_auto_fill_falls_back_to_whole_pool():
    lineup = make_lineup(1, 1, False)
    pool = [make_player(50, can_play=["C"])]
    result = auto_fill(lineup, pool, seeded_random(2))
    assert result.assigned == {"G_START": "p50"}


def test_auto_fill_ignores_duplicate_and_already_assigned_candidates():
    lineup = make_lineup(1, 1, False)
    lineup.assignments["F1_C"] = "p60"
    p60 = make_player(60)
    p61 = make_player(61)
    result = auto_fill(lineup, [p60, p61, p61], seeded_random(4))
    assert list(result.assigned.values()) == ["p61"]


def test_auto_fill_is_reproducible_with_same_seed():
    team = make_team()
    first = make_lineup(3, 2, True)
    second = make_lineup(3, 2, True)
    auto_fill(first, team.players, seeded_random(77))
    auto_fill(second, team.players, seeded_random(77))
    assert first.assignments == second.assignments


def test_auto_fill_with_empty_pool_changes_nothing():
    lineup = make_lineup(1, 1, False)
    before = dict(lineup.assignments)
    result = auto_fill(lineup, [], seeded_random(1))
    assert result.assigned == {}
    assert lineup.assignments == before
