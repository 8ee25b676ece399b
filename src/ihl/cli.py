from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from ihl.app import LineupRuntime
from ihl.contracts import ActionRequest, ActionResult, ActionType
from ihl.core import make_id


def _dispatch(runtime: LineupRuntime, action: ActionType, payload: dict[str, Any] | None = None) -> ActionResult:
    result = runtime.handle_action(ActionRequest(make_id("req"), action, payload or {}))
    if not result.success:
        print(f"{action.value}: {result.message}")
    return result


def _print_board(view: dict[str, Any]) -> None:
    print(f"{view['team_name']} / {view['name']}")
    current = None
    for slot in view["slots"]:
        if slot["group_label"] != current:
            current = slot["group_label"]
            print(f"  {current}")
        who = f"#{slot['number']} {slot['name']}" if slot["player_id"] else "-"
        warn = "  (not familiar with this position)" if slot["mismatch"] else ""
        print(f"    {slot['role']:<3} {who}{warn}")
    if view["available"]:
        print("  Available: " + ", ".join(f"#{p['number']} {p['name']}" for p in view["available"]))


def main() -> None:
    parser = argparse.ArgumentParser(description="Line-up Builder: assign players to lines, pairs and goalies")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="runtime root directory")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible auto-fill")
    parser.add_argument("--import-roster", type=Path, default=None, help="import a roster CSV as a new team")
    parser.add_argument("--auto-fill", action="store_true", help="auto-fill empty slots of the active lineup")
    parser.add_argument("--export", action="store_true", help="export the active lineup as CSV and Parquet")
    parser.add_argument("--render", action="store_true", help="render the active lineup as a PNG card")
    parser.add_argument("--ui", action="store_true", help="launch Qt desktop UI")
    parser.add_argument("--log-level", default="WARNING", help="logging level")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    runtime = LineupRuntime(root=args.root, seed=args.seed)

    if args.import_roster is not None:
        imported = _dispatch(runtime, ActionType.IMPORT_ROSTER, {"path": str(args.import_roster)})
        if imported.success:
            print(imported.message)
            for message in imported.data.get("messages", [])[:8]:
                print(f"  {message}")

    if runtime.team() is None:
        _dispatch(runtime, ActionType.CREATE_TEAM, {"name": "My Team"})

    if args.ui:
        from ihl.ui import launch_ui

        launch_ui(runtime.handle_action)
        return

    if args.auto_fill:
        filled = _dispatch(runtime, ActionType.AUTO_FILL)
        if filled.success:
            print(filled.message)

    board = _dispatch(runtime, ActionType.GET_LINEUP)
    if board.success:
        _print_board(board.data)

    if args.export:
        exported = _dispatch(runtime, ActionType.EXPORT_LINEUP)
        for path in exported.data.get("paths", []):
            print(f"- {path}")
    if args.render:
        rendered = _dispatch(runtime, ActionType.RENDER_LINEUP)
        if rendered.success:
            print(f"- {rendered.data['path']}")


if __name__ == "__main__":
    main()
