from __future__ import annotations

from collections import Counter

from ihl.contracts import UNASSIGNED_TARGET, MoveEvent, MoveOutcome
from ihl.core import seeded_random
from ihl.lineup import apply_move, canonical_slots
from tests.helpers import make_lineup


def test_swap_between_two_occupied_slots():
    lineup = make_lineup(2, 1, False)
    lineup.assignments["F1_LW"] = "x"
    lineup.assignments["F2_RW"] = "y"

    result = apply_move(lineup, MoveEvent("x", "F2_RW"))

    assert result.outcome == MoveOutcome.SWAPPED
    assert lineup.assignments["F1_LW"] == "y"
    assert lineup.assignments["F2_RW"] == "x"


def test_move_into_empty_slot_leaves_source_empty():
    lineup = make_lineup(1, 1, False)
    lineup.assignments["F1_C"] = "x"
    apply_move(lineup, MoveEvent("x", "D1_LD"))
    assert lineup.assignments["F1_C"] is None
    assert lineup.assignments["D1_LD"] == "x"


def test_place_from_pool_displaces_target_occupant():
    lineup = make_lineup(1, 1, False)
    lineup.assignments["G_START"] = "old"

    result = apply_move(lineup, MoveEvent("new", "G_START"))

    assert result.outcome == MoveOutcome.PLACED
    assert result.displaced_player_id == "old"
    assert lineup.assignments["G_START"] == "new"
    assert "old" not in lineup.assignments.values()


def test_return_to_pool_clears_holder_slot():
    lineup = make_lineup(1, 1, False)
    lineup.assignments["D1_RD"] = "x"
    result = apply_move(lineup, MoveEvent("x", UNASSIGNED_TARGET))
    assert result.outcome == MoveOutcome.UNASSIGNED
    assert result.from_slot == "D1_RD"
    assert lineup.assignments["D1_RD"] is None


def test_unassign_of_unassigned_player_is_noop():
    lineup = make_lineup(1, 1, False)
    before = dict(lineup.assignments)
    assert apply_move(lineup, MoveEvent("x", UNASSIGNED_TARGET)).outcome == MoveOutcome.NOOP
    assert lineup.assignments == before


def test_stale_target_is_ignored():
    lineup = make_lineup(1, 1, False)
    lineup.assignments["F1_C"] = "x"
    assert apply_move(lineup, MoveEvent("x", "F4_C")).outcome == MoveOutcome.NOOP
    assert apply_move(lineup, MoveEvent("x", "G_BACKUP")).outcome == MoveOutcome.NOOP
    assert lineup.assignments["F1_C"] == "x"
    assert list(lineup.assignments) == canonical_slots(lineup.structure)


def test_drop_on_own_slot_is_noop():
    lineup = make_lineup(1, 1, False)
    lineup.assignments["F1_C"] = "x"
    assert apply_move(lineup, MoveEvent("x", "F1_C")).outcome == MoveOutcome.NOOP
    assert lineup.assignments["F1_C"] == "x"


def test_move_on_missing_lineup_is_noop():
    assert apply_move(None, MoveEvent("x", "F1_C")).outcome == MoveOutcome.NOOP


def test_random_move_sequences_keep_players_in_at_most_one_slot():
    rand = seeded_random(2024)
    lineup = make_lineup(3, 2, True)
    players = [f"p{i}" for i in range(20)]
    targets = canonical_slots(lineup.structure) + [UNASSIGNED_TARGET, "F4_LW"]
    for _ in range(500):
        apply_move(lineup, MoveEvent(rand.choice(players), rand.choice(targets)))
        counts = Counter(v for v in lineup.assignments.values() if v)
        assert not counts or max(counts.values()) == 1
        assert list(lineup.assignments) == canonical_slots(lineup.structure)
