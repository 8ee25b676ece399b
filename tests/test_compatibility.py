from __future__ import annotations

from ihl.contracts import RoleCode, Stick
from ihl.lineup import is_mismatch, mismatched_slots, stick_label
from ihl.roster import create_player
from tests.helpers import make_lineup, make_player


def test_centre_only_player_flagged_on_wing():
    player = make_player(10, can_play=["C"])
    assert is_mismatch(player, "LW")
    assert not is_mismatch(player, "C")
    assert not is_mismatch(player, RoleCode.C)


def test_no_declared_roles_means_no_warning():
    player = make_player(11)
    assert not is_mismatch(player, "G")


def test_mismatched_slots_over_lineup():
    centre = make_player(10, can_play=["C"])
    lineup = make_lineup(1, 1, False)
    lineup.assignments["F1_LW"] = centre.player_id
    assert mismatched_slots(lineup, {centre.player_id: centre}) == ["F1_LW"]
    lineup.assignments["F1_LW"] = None
    lineup.assignments["F1_C"] = centre.player_id
    assert mismatched_slots(lineup, {centre.player_id: centre}) == []


def test_stick_label():
    lefty = create_player({"number": 4, "name": "L", "preferred_position": "Defender", "stick": Stick.LEFT})
    assert stick_label(lefty) == "LH"
    assert stick_label(make_player(5)) == ""
    assert stick_label(None) == ""
