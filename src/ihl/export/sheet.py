from __future__ import annotations

from dataclasses import dataclass, field

from ihl.contracts import Lineup, Player, Team
from ihl.lineup.compatibility import is_mismatch, stick_label
from ihl.lineup.slots import canonical_slots, group_of, role_code_of


@dataclass(slots=True)
class SheetRow:
    group_label: str
    slot_id: str
    role: str
    player_id: str | None = None
    number: int | None = None
    name: str = ""
    position: str = ""
    leadership: str = ""
    stick: str = ""
    mismatch: bool = False


@dataclass(slots=True)
class LineupSheet:
    team_name: str
    lineup_name: str
    rows: list[SheetRow] = field(default_factory=list)

    def groups(self) -> list[tuple[str, list[SheetRow]]]:
        ordered: dict[str, list[SheetRow]] = {}
        for row in self.rows:
            ordered.setdefault(row.group_label, []).append(row)
        return list(ordered.items())


def group_label(slot_id: str) -> str:
    group, index = group_of(slot_id)
    if group == "F":
        return f"Line {index}"
    if group == "D":
        return f"D Pair {index}"
    return "Goalie(s)"


def build_lineup_sheet(team: Team, lineup: Lineup) -> LineupSheet:
    """Resolve a line-up's slots to player records for printing or export."""
    by_id: dict[str, Player] = {p.player_id: p for p in team.players}
    sheet = LineupSheet(team_name=team.name, lineup_name=lineup.name)
    for slot_id in canonical_slots(lineup.structure):
        role = role_code_of(slot_id)
        row = SheetRow(group_label=group_label(slot_id), slot_id=slot_id, role=role)
        player_id = lineup.assignments.get(slot_id)
        player = by_id.get(player_id) if player_id else None
        if player is not None:
            row.player_id = player.player_id
            row.number = player.number
            row.name = player.name
            row.position = player.preferred_position.value
            row.leadership = player.leadership.value
            row.stick = stick_label(player)
            row.mismatch = is_mismatch(player, role)
        sheet.rows.append(row)
    return sheet
