from __future__ import annotations

import csv
import io
import logging
import re
from datetime import date
from pathlib import Path

from ihl.contracts import ImportReport, Leadership, Player, Position, RoleCode, Stick, Team
from ihl.roster.players import MAX_ALTERNATES, create_player
from ihl.roster.teams import create_team

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = ["number", "name", "preferredPosition", "leadership", "stick", "canPlay", "notes"]
MAX_NAME_LENGTH = 16

_POSITION_ALIASES = {
    "c": Position.CENTRE,
    "ce": Position.CENTRE,
    "ctr": Position.CENTRE,
    "centre": Position.CENTRE,
    "center": Position.CENTRE,
    "w": Position.WING,
    "lw": Position.WING,
    "rw": Position.WING,
    "wing": Position.WING,
    "d": Position.DEFENDER,
    "ld": Position.DEFENDER,
    "rd": Position.DEFENDER,
    "defender": Position.DEFENDER,
    "defence": Position.DEFENDER,
    "defense": Position.DEFENDER,
    "g": Position.GOALIE,
    "gk": Position.GOALIE,
    "goalie": Position.GOALIE,
    "goalkeeper": Position.GOALIE,
}


def normalize_position(raw: str) -> Position:
    return _POSITION_ALIASES.get(raw.strip().lower(), Position.WING)


def normalize_leadership(raw: str) -> Leadership:
    up = raw.strip().upper()
    return Leadership(up) if up in {"C", "A"} else Leadership.NONE


def normalize_stick(raw: str) -> Stick:
    value = raw.strip()
    if value in {"Left", "Right"}:
        return Stick(value)
    up = value.upper()
    if up in {"L", "LH"}:
        return Stick.LEFT
    if up in {"R", "RH"}:
        return Stick.RIGHT
    return Stick.NONE


def parse_can_play(raw: str) -> list[RoleCode]:
    allowed = {code.value for code in RoleCode}
    codes: list[RoleCode] = []
    for token in re.split(r"[,;\s]+", raw.strip()):
        token = token.upper()
        if token in allowed and RoleCode(token) not in codes:
            codes.append(RoleCode(token))
    return codes


def team_name_from_filename(path: Path) -> str:
    base = re.sub(r"_roster_\d{8}$", "", path.stem, flags=re.IGNORECASE)
    return base.replace("_", " ").strip() or "Imported Team"


def roster_export_filename(team: Team, on: date | None = None) -> str:
    safe = re.sub(r"[^a-z0-9\-_]+", "_", team.name, flags=re.IGNORECASE) or "team"
    return f"{safe}_roster_{(on or date.today()).strftime('%Y%m%d')}.csv"


def export_roster_csv(team: Team, output_dir: Path, on: date | None = None) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / roster_export_filename(team, on)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(ROSTER_COLUMNS)
        for p in team.players:
            writer.writerow(
                [
                    p.number,
                    p.name,
                    p.preferred_position.value,
                    p.leadership.value,
                    p.stick.value,
                    ",".join(code.value for code in p.can_play),
                    p.notes,
                ]
            )
    logger.info("exported %d player(s) of %s to %s", len(team.players), team.name, path)
    return path


def parse_roster_rows(text: str, team_name: str) -> ImportReport:
    """Build a new team from CSV text, skipping rows that cannot be imported."""
    rows = [row for row in csv.reader(io.StringIO(text))]
    while rows and all(not cell.strip() for cell in rows[-1]):
        rows.pop()
    report = ImportReport(team=create_team(team_name))
    if not rows:
        report.empty = True
        report.messages.append("CSV is empty.")
        return report

    header = [cell.strip().lower() for cell in rows[0]]
    has_header = "number" in header or "name" in header
    fallback = {key.lower(): idx for idx, key in enumerate(ROSTER_COLUMNS)}

    used_numbers: set[int] = set()
    captain_used = False
    alternates = 0

    for row_idx, cols in enumerate(rows[1:] if has_header else rows, start=2 if has_header else 1):

        def get(key: str) -> str:
            idx = header.index(key) if has_header and key in header else (-1 if has_header else fallback[key])
            return cols[idx] if 0 <= idx < len(cols) else ""

        raw = {key: get(key.lower()) for key in ROSTER_COLUMNS}
        if all(not value.strip() for value in raw.values()):
            continue

        raw_number = raw["number"].strip()
        if not re.fullmatch(r"\d{1,2}", raw_number) or int(raw_number) <= 0:
            report.skipped += 1
            report.messages.append(f'Row {row_idx}: invalid number "{raw_number}" (must be 1-2 digits, positive).')
            continue
        number = int(raw_number)
        if number in used_numbers:
            report.skipped += 1
            report.messages.append(f"Row {row_idx}: number {number} duplicated in import.")
            continue

        name = raw["name"].strip()
        if not name:
            report.skipped += 1
            report.messages.append(f"Row {row_idx}: missing name.")
            continue

        leadership = normalize_leadership(raw["leadership"])
        if leadership == Leadership.CAPTAIN:
            if captain_used:
                leadership = Leadership.NONE
            captain_used = True
        elif leadership == Leadership.ALTERNATE:
            if alternates >= MAX_ALTERNATES:
                leadership = Leadership.NONE
            else:
                alternates += 1

        player: Player = create_player(
            {
                "number": number,
                "name": name[:MAX_NAME_LENGTH],
                "preferred_position": normalize_position(raw["preferredPosition"]),
                "leadership": leadership,
                "stick": normalize_stick(raw["stick"]),
                "can_play": parse_can_play(raw["canPlay"]),
                "notes": raw["notes"],
            }
        )
        report.team.players.append(player)
        used_numbers.add(number)
        report.imported += 1

    return report


def import_roster_csv(path: Path) -> ImportReport:
    report = parse_roster_rows(path.read_text(encoding="utf-8-sig"), team_name_from_filename(path))
    logger.info(
        "imported roster %s from %s: %d imported, %d skipped",
        report.team.name,
        path,
        report.imported,
        report.skipped,
    )
    return report


def parse_opposition_rows(text: str) -> tuple[str, list[str]] | None:
    """League name from the first non-blank row, opponents from the first cell of the rest.

    ``None`` when the CSV has no non-blank row at all.
    """
    rows = [[cell.strip() for cell in row] for row in csv.reader(io.StringIO(text))]
    rows = [row for row in rows if any(row)]
    if not rows:
        return None
    league = rows[0][0]
    names = [row[0] for row in rows[1:] if row[0]]
    return league, names


def import_opposition_csv(path: Path) -> tuple[str, list[str]] | None:
    return parse_opposition_rows(path.read_text(encoding="utf-8-sig"))
