from .csv_io import (
    ROSTER_COLUMNS,
    export_roster_csv,
    import_opposition_csv,
    import_roster_csv,
    normalize_leadership,
    normalize_position,
    normalize_stick,
    parse_can_play,
    parse_opposition_rows,
    parse_roster_rows,
    team_name_from_filename,
)
from .players import (
    add_player,
    create_player,
    position_sort_key,
    remove_player,
    update_player,
    validate_player,
)
from .teams import (
    add_opponent,
    create_team,
    delete_team,
    merge_opposition,
    remove_opponent,
    rename_opponent,
    rename_team,
)

__all__ = [
    "ROSTER_COLUMNS",
    "add_opponent",
    "add_player",
    "create_player",
    "create_team",
    "delete_team",
    "export_roster_csv",
    "import_opposition_csv",
    "import_roster_csv",
    "merge_opposition",
    "normalize_leadership",
    "normalize_position",
    "normalize_stick",
    "parse_can_play",
    "parse_opposition_rows",
    "parse_roster_rows",
    "position_sort_key",
    "remove_opponent",
    "remove_player",
    "rename_opponent",
    "rename_team",
    "team_name_from_filename",
    "update_player",
    "validate_player",
]
