from __future__ import annotations

import sqlite3

MIGRATIONS: list[tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS app_state (
            state_key TEXT PRIMARY KEY,
            payload_json TEXT NOT NULL,
            saved_at TEXT NOT NULL
        );
        """,
    ),
    (
        2,
        """
        CREATE TABLE IF NOT EXISTS app_state_history (
            snapshot_id INTEGER PRIMARY KEY AUTOINCREMENT,
            state_key TEXT NOT NULL,
            payload_json TEXT NOT NULL,
            saved_at TEXT NOT NULL
        );

        CREATE INDEX IF NOT EXISTS idx_app_state_history_key ON app_state_history(state_key, snapshot_id);
        """,
    ),
]


class MigrationRunner:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def apply(self) -> list[int]:
        self.conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT DEFAULT CURRENT_TIMESTAMP)"
        )
        applied = {row[0] for row in self.conn.execute("SELECT version FROM schema_migrations").fetchall()}
        newly_applied: list[int] = []
        for version, sql in MIGRATIONS:
            if version in applied:
                continue
            self.conn.executescript(sql)
            self.conn.execute("INSERT INTO schema_migrations(version) VALUES (?)", (version,))
            newly_applied.append(version)
        self.conn.commit()
        return newly_applied
