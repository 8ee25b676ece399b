from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "ihl.json"

# Hard ceilings; configuration may only narrow them.
MAX_FORWARD_LINES = 4
MAX_DEFENCE_PAIRS = 4


@dataclass(frozen=True, slots=True)
class LineupLimits:
    min_forward_lines: int = 1
    max_forward_lines: int = MAX_FORWARD_LINES
    min_defence_pairs: int = 1
    max_defence_pairs: int = MAX_DEFENCE_PAIRS

    def validate(self) -> None:
        if not 1 <= self.min_forward_lines <= self.max_forward_lines:
            raise ValueError("forward line bounds must satisfy 1 <= min <= max")
        if not 1 <= self.min_defence_pairs <= self.max_defence_pairs:
            raise ValueError("defence pair bounds must satisfy 1 <= min <= max")
        if self.max_forward_lines > MAX_FORWARD_LINES:
            raise ValueError(f"max_forward_lines may not exceed {MAX_FORWARD_LINES}")
        if self.max_defence_pairs > MAX_DEFENCE_PAIRS:
            raise ValueError(f"max_defence_pairs may not exceed {MAX_DEFENCE_PAIRS}")

    def clamp_forward_lines(self, value: int) -> int:
        return max(self.min_forward_lines, min(self.max_forward_lines, value))

    def clamp_defence_pairs(self, value: int) -> int:
        return max(self.min_defence_pairs, min(self.max_defence_pairs, value))


@dataclass(frozen=True, slots=True)
class LineupDefaults:
    name: str = "Lineup 1"
    forward_lines: int = 3
    defence_pairs: int = 2
    backup_goalie_enabled: bool = False

    def validate(self, limits: LineupLimits) -> None:
        if not self.name.strip():
            raise ValueError("default lineup name must not be blank")
        if not limits.min_forward_lines <= self.forward_lines <= limits.max_forward_lines:
            raise ValueError(f"default forward_lines {self.forward_lines} outside limits")
        if not limits.min_defence_pairs <= self.defence_pairs <= limits.max_defence_pairs:
            raise ValueError(f"default defence_pairs {self.defence_pairs} outside limits")


@dataclass(frozen=True, slots=True)
class BuilderConfig:
    limits: LineupLimits = field(default_factory=LineupLimits)
    defaults: LineupDefaults = field(default_factory=LineupDefaults)
    autosave: bool = True

    def validate(self) -> None:
        self.limits.validate()
        self.defaults.validate(self.limits)


def default_builder_config() -> BuilderConfig:
    return BuilderConfig()


def builder_config_from_dict(raw: dict[str, Any]) -> BuilderConfig:
    unknown = sorted(set(raw) - {"limits", "defaults", "autosave"})
    if unknown:
        raise ValueError(f"unknown configuration keys: {', '.join(unknown)}")
    try:
        limits = LineupLimits(**raw.get("limits", {}))
        defaults = LineupDefaults(**raw.get("defaults", {}))
    except TypeError as exc:
        raise ValueError(f"invalid configuration section: {exc}") from exc
    config = BuilderConfig(limits=limits, defaults=defaults, autosave=bool(raw.get("autosave", True)))
    config.validate()
    return config


def load_builder_config(path: Path) -> BuilderConfig:
    """Read an optional JSON config file; a missing file yields the defaults."""
    if not path.exists():
        return default_builder_config()
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"{path.name} must contain a JSON object")
    config = builder_config_from_dict(raw)
    logger.info("loaded builder config from %s", path)
    return config
