from __future__ import annotations

from ihl.contracts import StructureChange
from ihl.core import LineupLimits
from ihl.lineup import (
    add_defence_pair,
    add_forward_line,
    canonical_slots,
    preview_remove_forward_line,
    remove_defence_pair,
    remove_forward_line,
    toggle_backup_goalie,
)
from tests.helpers import make_lineup


def _keys_match(lineup) -> bool:
    return list(lineup.assignments) == canonical_slots(lineup.structure)


def test_add_forward_line_until_maximum():
    lineup = make_lineup(3, 2, False)
    assert add_forward_line(lineup).status == StructureChange.APPLIED
    assert lineup.forward_lines == 4
    assert lineup.assignments["F4_LW"] is None
    assert add_forward_line(lineup).status == StructureChange.AT_MAXIMUM
    assert lineup.forward_lines == 4
    assert _keys_match(lineup)


def test_add_defence_pair_respects_custom_limits():
    lineup = make_lineup(1, 1, False)
    limits = LineupLimits(max_defence_pairs=2)
    assert add_defence_pair(lineup, limits).applied
    assert add_defence_pair(lineup, limits).status == StructureChange.AT_MAXIMUM
    assert lineup.defence_pairs == 2


def test_remove_forward_line_reports_displaced_count_before_mutation():
    lineup = make_lineup(3, 2, False)
    lineup.assignments["F3_LW"] = "p12"
    lineup.assignments["F3_C"] = "p10"

    report = preview_remove_forward_line(lineup)
    assert report is not None
    assert report.displaced_count == 2

    result = remove_forward_line(lineup)
    assert result.status == StructureChange.CONFIRMATION_REQUIRED
    assert result.report.displaced_count == 2
    assert lineup.forward_lines == 3
    assert lineup.assignments["F3_LW"] == "p12"


def test_confirmed_remove_forward_line_prunes_slots():
    lineup = make_lineup(3, 2, False)
    lineup.assignments["F3_LW"] = "p12"
    lineup.assignments["F1_C"] = "p10"

    result = remove_forward_line(lineup, confirmed=True)

    assert result.applied
    assert lineup.forward_lines == 2
    assert "F3_LW" not in lineup.assignments
    assert lineup.assignments["F1_C"] == "p10"
    assert _keys_match(lineup)


def test_remove_empty_line_needs_no_confirmation():
    lineup = make_lineup(2, 1, False)
    assert remove_forward_line(lineup).applied
    assert lineup.forward_lines == 1


def test_remove_at_minimum_is_a_noop():
    lineup = make_lineup(1, 1, False)
    assert remove_forward_line(lineup, confirmed=True).status == StructureChange.AT_MINIMUM
    assert remove_defence_pair(lineup, confirmed=True).status == StructureChange.AT_MINIMUM
    assert lineup.forward_lines == 1
    assert lineup.defence_pairs == 1


def test_remove_defence_pair_with_confirmation():
    lineup = make_lineup(1, 2, False)
    lineup.assignments["D2_RD"] = "p3"
    assert remove_defence_pair(lineup).status == StructureChange.CONFIRMATION_REQUIRED
    result = remove_defence_pair(lineup, confirmed=True)
    assert result.applied
    assert result.report.displaced_player_ids == ["p3"]
    assert "D2_RD" not in lineup.assignments


def test_toggle_backup_goalie_on_keeps_existing_occupants():
    lineup = make_lineup(2, 1, False)
    lineup.assignments["F1_C"] = "p10"
    lineup.assignments["G_START"] = "p1"

    assert toggle_backup_goalie(lineup).applied

    assert len(lineup.assignments) == 10
    assert lineup.assignments["G_BACKUP"] is None
    assert lineup.assignments["F1_C"] == "p10"
    assert lineup.assignments["G_START"] == "p1"


def test_toggle_backup_goalie_off_requires_confirmation_when_occupied():
    lineup = make_lineup(1, 1, True)
    lineup.assignments["G_BACKUP"] = "p30"

    pending = toggle_backup_goalie(lineup)
    assert pending.status == StructureChange.CONFIRMATION_REQUIRED
    assert lineup.backup_goalie_enabled

    assert toggle_backup_goalie(lineup, confirmed=True).applied
    assert not lineup.backup_goalie_enabled
    assert "G_BACKUP" not in lineup.assignments


def test_operations_on_missing_lineup_are_noops():
    assert add_forward_line(None).status == StructureChange.MISSING_LINEUP
    assert remove_forward_line(None).status == StructureChange.MISSING_LINEUP
    assert add_defence_pair(None).status == StructureChange.MISSING_LINEUP
    assert remove_defence_pair(None).status == StructureChange.MISSING_LINEUP
    assert toggle_backup_goalie(None).status == StructureChange.MISSING_LINEUP


def test_key_set_invariant_over_mutation_sequence():
    lineup = make_lineup(1, 1, False)
    steps = [
        lambda: add_forward_line(lineup),
        lambda: add_defence_pair(lineup),
        lambda: toggle_backup_goalie(lineup),
        lambda: add_forward_line(lineup),
        lambda: remove_forward_line(lineup, confirmed=True),
        lambda: toggle_backup_goalie(lineup, confirmed=True),
        lambda: remove_defence_pair(lineup, confirmed=True),
        lambda: add_forward_line(lineup),
        lambda: add_forward_line(lineup),
        lambda: add_forward_line(lineup),
    ]
    for step in steps:
        step()
        assert _keys_match(lineup)
