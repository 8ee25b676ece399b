from __future__ import annotations

from ihl.contracts import LineupStructure
from ihl.lineup import canonical_slots, fill_order, group_of, role_code_of


def test_canonical_slots_for_two_lines_one_pair_no_backup():
    slots = canonical_slots(LineupStructure(2, 1, False))
    assert slots == ["F1_LW", "F1_C", "F1_RW", "F2_LW", "F2_C", "F2_RW", "D1_LD", "D1_RD", "G_START"]


def test_backup_goalie_appends_last_slot():
    slots = canonical_slots(LineupStructure(2, 1, True))
    assert len(slots) == 10
    assert slots[-1] == "G_BACKUP"


def test_canonical_slots_are_deterministic():
    structure = LineupStructure(4, 3, True)
    assert canonical_slots(structure) == canonical_slots(structure)


def test_role_code_of_decomposes_slot_ids():
    assert role_code_of("F3_LW") == "LW"
    assert role_code_of("F1_C") == "C"
    assert role_code_of("D2_RD") == "RD"
    assert role_code_of("G_START") == "G"
    assert role_code_of("G_BACKUP") == "G"
    assert role_code_of("garbage") == ""


def test_group_of_reports_group_and_index():
    assert group_of("F3_RW") == ("F", 3)
    assert group_of("D1_LD") == ("D", 1)
    assert group_of("G_BACKUP") == ("G", 0)


def test_fill_order_prioritises_goalie_defence_then_first_line():
    order = fill_order(LineupStructure(3, 2, True))
    assert order[:5] == ["G_START", "D1_LD", "D1_RD", "D2_LD", "D2_RD"]
    assert order[5:8] == ["F1_LW", "F1_C", "F1_RW"]
    assert order[-1] == "G_BACKUP"
    assert sorted(order) == sorted(canonical_slots(LineupStructure(3, 2, True)))


def test_fill_order_skips_backup_when_disabled():
    assert "G_BACKUP" not in fill_order(LineupStructure(1, 1, False))
