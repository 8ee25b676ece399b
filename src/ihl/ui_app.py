from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ihl.app import LineupRuntime
from ihl.contracts import ActionRequest, ActionType
from ihl.core import make_id
from ihl.ui import launch_ui


def main() -> None:
    parser = argparse.ArgumentParser(description="Line-up Builder desktop launcher")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="runtime root directory")
    parser.add_argument("--seed", type=int, default=None, help="seed for reproducible auto-fill")
    parser.add_argument("--log-level", default="WARNING", help="logging level")
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    runtime = LineupRuntime(root=args.root, seed=args.seed)
    if runtime.team() is None:
        runtime.handle_action(ActionRequest(make_id("req"), ActionType.CREATE_TEAM, {"name": "My Team"}))
    launch_ui(runtime.handle_action)


if __name__ == "__main__":
    main()
