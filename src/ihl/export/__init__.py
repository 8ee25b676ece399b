from .render import DEFAULT_POSITION_COLORS, CardTheme, render_lineup_png
from .service import ExportService
from .sheet import LineupSheet, SheetRow, build_lineup_sheet

__all__ = [
    "DEFAULT_POSITION_COLORS",
    "CardTheme",
    "ExportService",
    "LineupSheet",
    "SheetRow",
    "build_lineup_sheet",
    "render_lineup_png",
]
