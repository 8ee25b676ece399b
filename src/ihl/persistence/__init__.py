from .codec import app_state_from_dict, app_state_to_dict, lineup_from_dict, lineup_to_dict
from .migrations import MigrationRunner
from .sqlite_store import AppStateStore

__all__ = [
    "AppStateStore",
    "MigrationRunner",
    "app_state_from_dict",
    "app_state_to_dict",
    "lineup_from_dict",
    "lineup_to_dict",
]
