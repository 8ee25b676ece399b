from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import FancyBboxPatch

from ihl.export.sheet import LineupSheet, SheetRow

logger = logging.getLogger(__name__)

DEFAULT_POSITION_COLORS: dict[str, str] = {
    "Centre": "#4f46e5",
    "Wing": "#16a34a",
    "Defender": "#f59e0b",
    "Goalie": "#dc2626",
}


@dataclass(frozen=True, slots=True)
class CardTheme:
    team_color: str = "#d32f2f"
    text_color: str = "#111111"
    card_text_color: str = "#ffffff"
    leader_color: str = "#ffd54a"
    empty_color: str = "#e5e7eb"
    position_colors: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_POSITION_COLORS))


def _pill_label(row: SheetRow) -> str:
    if row.player_id is None:
        return ""
    label = f"#{row.number}  {row.name}"
    if row.leadership:
        label += f"  ({row.leadership})"
    if row.mismatch:
        label += "  !"
    return label


def render_lineup_png(sheet: LineupSheet, path: Path, theme: CardTheme | None = None, dpi: int = 150) -> Path:
    """Draw a printable line-up card: one row per line/pair, one pill per slot."""
    theme = theme or CardTheme()
    groups = sheet.groups()
    height = 1.6 + 0.75 * len(groups)
    fig = Figure(figsize=(8.27, height), dpi=dpi)
    ax = fig.add_axes((0, 0, 1, 1))
    ax.set_xlim(0, 10)
    ax.set_ylim(0, height)
    ax.axis("off")

    ax.text(5, height - 0.45, sheet.team_name, ha="center", va="center", fontsize=24, fontweight="bold", color=theme.team_color)
    ax.text(5, height - 0.95, sheet.lineup_name, ha="center", va="center", fontsize=14, color=theme.text_color)

    pill_w, gap = 2.6, 0.15
    for idx, (label, rows) in enumerate(groups):
        y = height - 1.6 - idx * 0.75
        ax.text(0.2, y, label, ha="left", va="center", fontsize=10, fontweight="bold", color=theme.text_color)
        total = len(rows) * pill_w + (len(rows) - 1) * gap
        x = 1.4 + (8.4 - total) / 2
        for row in rows:
            color = theme.position_colors.get(row.position, theme.empty_color) if row.player_id else theme.empty_color
            edge = theme.leader_color if row.leadership else color
            ax.add_patch(
                FancyBboxPatch(
                    (x, y - 0.25),
                    pill_w,
                    0.5,
                    boxstyle="round,pad=0.02,rounding_size=0.25",
                    facecolor=color,
                    edgecolor=edge,
                    linewidth=2,
                )
            )
            ax.text(
                x + pill_w / 2,
                y,
                _pill_label(row) or row.role,
                ha="center",
                va="center",
                fontsize=9,
                color=theme.card_text_color if row.player_id else theme.text_color,
            )
            x += pill_w + gap

    path.parent.mkdir(parents=True, exist_ok=True)
    FigureCanvasAgg(fig)
    fig.savefig(path, format="png", dpi=dpi)
    logger.info("rendered lineup card %s", path)
    return path
