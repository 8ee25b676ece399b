from .config import (
    BuilderConfig,
    LineupDefaults,
    LineupLimits,
    builder_config_from_dict,
    default_builder_config,
    load_builder_config,
)
from .errors import build_forensic_artifact, persist_forensic_artifact
from .events import EventBus
from .ids import make_id, now_utc
from .randomness import PythonRandomSource, seeded_random, unseeded_random

__all__ = [
    "BuilderConfig",
    "EventBus",
    "LineupDefaults",
    "LineupLimits",
    "PythonRandomSource",
    "build_forensic_artifact",
    "builder_config_from_dict",
    "default_builder_config",
    "load_builder_config",
    "make_id",
    "now_utc",
    "persist_forensic_artifact",
    "seeded_random",
    "unseeded_random",
]
