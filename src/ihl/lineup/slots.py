from __future__ import annotations

from ihl.contracts import LineupStructure, RoleCode

GOALIE_PREFIX = "G_"
G_START = "G_START"
G_BACKUP = "G_BACKUP"

FORWARD_ROLES: tuple[RoleCode, ...] = (RoleCode.LW, RoleCode.C, RoleCode.RW)
DEFENCE_ROLES: tuple[RoleCode, ...] = (RoleCode.LD, RoleCode.RD)


def forward_line_slots(index: int) -> list[str]:
    return [f"F{index}_{role.value}" for role in FORWARD_ROLES]


def defence_pair_slots(index: int) -> list[str]:
    return [f"D{index}_{role.value}" for role in DEFENCE_ROLES]


def role_code_of(slot_id: str) -> str:
    """Role code embedded in a slot id: ``G`` for goalies, else the segment after ``_``.

    Unknown shapes yield an empty string rather than raising.
    """
    if slot_id.startswith(GOALIE_PREFIX):
        return RoleCode.G.value
    parts = slot_id.split("_")
    return parts[1] if len(parts) > 1 else ""


def group_of(slot_id: str) -> tuple[str, int]:
    """(group letter, 1-based index) for a slot; goalies report index 0."""
    if slot_id.startswith(GOALIE_PREFIX):
        return ("G", 0)
    head = slot_id.split("_", 1)[0]
    try:
        return (head[:1], int(head[1:]))
    except ValueError:
        return (head[:1], 0)


def canonical_slots(structure: LineupStructure) -> list[str]:
    slots: list[str] = []
    for i in range(1, structure.forward_lines + 1):
        slots.extend(forward_line_slots(i))
    for i in range(1, structure.defence_pairs + 1):
        slots.extend(defence_pair_slots(i))
    slots.append(G_START)
    if structure.backup_goalie_enabled:
        slots.append(G_BACKUP)
    return slots


def fill_order(structure: LineupStructure) -> list[str]:
    """Auto-fill priority: starter, defence, first line, other lines, backup."""
    order = [G_START]
    for i in range(1, structure.defence_pairs + 1):
        order.extend(defence_pair_slots(i))
    for i in range(1, structure.forward_lines + 1):
        order.extend(forward_line_slots(i))
    if structure.backup_goalie_enabled:
        order.append(G_BACKUP)
    return order
