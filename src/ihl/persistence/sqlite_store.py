from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path

from ihl.contracts import AppState
from ihl.core import LineupLimits, now_utc
from ihl.persistence.codec import app_state_from_dict, app_state_to_dict
from ihl.persistence.migrations import MigrationRunner

logger = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "ihlbuilder_v1"
HISTORY_DEPTH = 20


class AppStateStore:
    """Load/save of the whole application state as one JSON blob."""

    def __init__(self, db_path: Path, state_key: str = DEFAULT_STATE_KEY) -> None:
        self.db_path = db_path
        self.state_key = state_key
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def initialize_schema(self) -> None:
        with self.connect() as conn:
            MigrationRunner(conn).apply()

    def save(self, state: AppState) -> None:
        payload = json.dumps(app_state_to_dict(state), sort_keys=True)
        saved_at = now_utc().isoformat()
        with self.connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO app_state(state_key, payload_json, saved_at) VALUES (?, ?, ?)",
                (self.state_key, payload, saved_at),
            )
            conn.execute(
                "INSERT INTO app_state_history(state_key, payload_json, saved_at) VALUES (?, ?, ?)",
                (self.state_key, payload, saved_at),
            )
            conn.execute(
                """
                DELETE FROM app_state_history
                WHERE state_key = ? AND snapshot_id NOT IN (
                    SELECT snapshot_id FROM app_state_history WHERE state_key = ?
                    ORDER BY snapshot_id DESC LIMIT ?
                )
                """,
                (self.state_key, self.state_key, HISTORY_DEPTH),
            )
        logger.debug("saved app state %s (%d bytes)", self.state_key, len(payload))

    def load(self, limits: LineupLimits | None = None) -> AppState | None:
        """Return the saved state, or ``None`` when nothing usable is stored."""
        with self.connect() as conn:
            row = conn.execute("SELECT payload_json FROM app_state WHERE state_key = ?", (self.state_key,)).fetchone()
        if row is None:
            return None
        try:
            raw = json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("stored app state %s is not valid JSON; starting fresh", self.state_key)
            return None
        return app_state_from_dict(raw, limits)

    def history_count(self) -> int:
        with self.connect() as conn:
            return int(
                conn.execute("SELECT COUNT(*) FROM app_state_history WHERE state_key = ?", (self.state_key,)).fetchone()[0]
            )
