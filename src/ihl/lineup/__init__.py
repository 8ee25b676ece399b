from .autofill import auto_fill, pick_candidate
from .collection import (
    active_lineup,
    create_lineup,
    delete_lineup,
    duplicate_lineup,
    ensure_collection,
    find_lineup,
    new_lineup,
    rename_lineup,
    set_active,
)
from .compatibility import is_mismatch, mismatched_slots, stick_label
from .moves import apply_move
from .slots import G_BACKUP, G_START, canonical_slots, fill_order, group_of, role_code_of
from .store import (
    assigned_player_ids,
    available_players,
    clear_assignments,
    empty_slots,
    holder_slot_of,
    integrity_issues,
    normalize,
    occupant_of,
    unassign_player,
)
from .structure import (
    add_defence_pair,
    add_forward_line,
    preview_remove_defence_pair,
    preview_remove_forward_line,
    preview_toggle_backup_goalie,
    remove_defence_pair,
    remove_forward_line,
    toggle_backup_goalie,
)

__all__ = [
    "G_BACKUP",
    "G_START",
    "active_lineup",
    "add_defence_pair",
    "add_forward_line",
    "apply_move",
    "assigned_player_ids",
    "auto_fill",
    "available_players",
    "canonical_slots",
    "clear_assignments",
    "create_lineup",
    "delete_lineup",
    "duplicate_lineup",
    "empty_slots",
    "ensure_collection",
    "fill_order",
    "find_lineup",
    "group_of",
    "holder_slot_of",
    "integrity_issues",
    "is_mismatch",
    "mismatched_slots",
    "new_lineup",
    "normalize",
    "occupant_of",
    "pick_candidate",
    "preview_remove_defence_pair",
    "preview_remove_forward_line",
    "preview_toggle_backup_goalie",
    "remove_defence_pair",
    "remove_forward_line",
    "rename_lineup",
    "role_code_of",
    "set_active",
    "stick_label",
    "toggle_backup_goalie",
    "unassign_player",
]
