from .types import (
    UNASSIGNED_TARGET,
    ActionRequest,
    ActionResult,
    ActionType,
    AppState,
    AutoFillResult,
    DisplacementReport,
    ForensicArtifact,
    ImportReport,
    Leadership,
    Lineup,
    LineupCollection,
    LineupEvent,
    LineupStructure,
    MoveEvent,
    MoveOutcome,
    MoveResult,
    Player,
    Position,
    RandomSource,
    RoleCode,
    Stick,
    StructureChange,
    StructureChangeResult,
    Team,
    ValidationError,
    ValidationIssue,
)

__all__ = [
    "UNASSIGNED_TARGET",
    "ActionRequest",
    "ActionResult",
    "ActionType",
    "AppState",
    "AutoFillResult",
    "DisplacementReport",
    "ForensicArtifact",
    "ImportReport",
    "Leadership",
    "Lineup",
    "LineupCollection",
    "LineupEvent",
    "LineupStructure",
    "MoveEvent",
    "MoveOutcome",
    "MoveResult",
    "Player",
    "Position",
    "RandomSource",
    "RoleCode",
    "Stick",
    "StructureChange",
    "StructureChangeResult",
    "Team",
    "ValidationError",
    "ValidationIssue",
]
