from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import duckdb

from ihl.export.sheet import LineupSheet

logger = logging.getLogger(__name__)

SHEET_COLUMNS = [
    ("group_label", "VARCHAR"),
    ("slot_id", "VARCHAR"),
    ("role", "VARCHAR"),
    ("player_id", "VARCHAR"),
    ("number", "INTEGER"),
    ("name", "VARCHAR"),
    ("position", "VARCHAR"),
    ("leadership", "VARCHAR"),
    ("stick", "VARCHAR"),
    ("mismatch", "BOOLEAN"),
]


def sheet_file_stem(sheet: LineupSheet) -> str:
    raw = f"{sheet.team_name}_{sheet.lineup_name}_lineup"
    return re.sub(r"[^a-z0-9\-_]+", "_", raw, flags=re.IGNORECASE)


class ExportService:
    """Writes line-up sheets as CSV and Parquet through an in-memory DuckDB table."""

    def export_lineup(self, sheet: LineupSheet, output_dir: Path) -> list[Path]:
        output_dir.mkdir(parents=True, exist_ok=True)
        with duckdb.connect() as conn:
            columns = ", ".join(f"{name} {dtype}" for name, dtype in SHEET_COLUMNS)
            conn.execute(f"CREATE TABLE lineup_sheet ({columns})")
            rows = [
                (r.group_label, r.slot_id, r.role, r.player_id, r.number, r.name, r.position, r.leadership, r.stick, r.mismatch)
                for r in sheet.rows
            ]
            if rows:
                placeholders = ", ".join("?" for _ in SHEET_COLUMNS)
                conn.executemany(f"INSERT INTO lineup_sheet VALUES ({placeholders})", rows)
            outputs = self._export_table(conn, "lineup_sheet", output_dir / sheet_file_stem(sheet))
        logger.info("exported lineup %s/%s to %s", sheet.team_name, sheet.lineup_name, output_dir)
        return outputs

    def _export_table(self, conn: Any, table: str, stem: Path) -> list[Path]:
        csv_path = stem.with_suffix(".csv")
        parquet_path = stem.with_suffix(".parquet")
        conn.execute(f"COPY (SELECT * FROM {table}) TO '{csv_path.as_posix()}' (HEADER, DELIMITER ',')")
        conn.execute(f"COPY (SELECT * FROM {table}) TO '{parquet_path.as_posix()}' (FORMAT PARQUET)")
        return [csv_path, parquet_path]
