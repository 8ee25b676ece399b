from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Protocol, Sequence

UNASSIGNED_TARGET = "AVAILABLE"


class RoleCode(str, Enum):
    LW = "LW"
    C = "C"
    RW = "RW"
    LD = "LD"
    RD = "RD"
    G = "G"


class Position(str, Enum):
    CENTRE = "Centre"
    WING = "Wing"
    DEFENDER = "Defender"
    GOALIE = "Goalie"


class Leadership(str, Enum):
    NONE = ""
    CAPTAIN = "C"
    ALTERNATE = "A"


class Stick(str, Enum):
    NONE = ""
    LEFT = "Left"
    RIGHT = "Right"


class MoveOutcome(str, Enum):
    NOOP = "noop"
    UNASSIGNED = "unassigned"
    PLACED = "placed"
    SWAPPED = "swapped"


class StructureChange(str, Enum):
    APPLIED = "applied"
    AT_MAXIMUM = "at_maximum"
    AT_MINIMUM = "at_minimum"
    CONFIRMATION_REQUIRED = "confirmation_required"
    MISSING_LINEUP = "missing_lineup"


class ActionType(str, Enum):
    CREATE_TEAM = "create_team"
    SELECT_TEAM = "select_team"
    RENAME_TEAM = "rename_team"
    DELETE_TEAM = "delete_team"
    ADD_OPPONENT = "add_opponent"
    RENAME_OPPONENT = "rename_opponent"
    REMOVE_OPPONENT = "remove_opponent"
    IMPORT_OPPOSITION = "import_opposition"
    ADD_PLAYER = "add_player"
    UPDATE_PLAYER = "update_player"
    REMOVE_PLAYER = "remove_player"
    IMPORT_ROSTER = "import_roster"
    EXPORT_ROSTER = "export_roster"
    CREATE_LINEUP = "create_lineup"
    RENAME_LINEUP = "rename_lineup"
    DUPLICATE_LINEUP = "duplicate_lineup"
    DELETE_LINEUP = "delete_lineup"
    SET_ACTIVE_LINEUP = "set_active_lineup"
    ADD_FORWARD_LINE = "add_forward_line"
    REMOVE_FORWARD_LINE = "remove_forward_line"
    ADD_DEFENCE_PAIR = "add_defence_pair"
    REMOVE_DEFENCE_PAIR = "remove_defence_pair"
    TOGGLE_BACKUP_GOALIE = "toggle_backup_goalie"
    MOVE_PLAYER = "move_player"
    AUTO_FILL = "auto_fill"
    CLEAR_ASSIGNMENTS = "clear_assignments"
    GET_LINEUP = "get_lineup"
    EXPORT_LINEUP = "export_lineup"
    RENDER_LINEUP = "render_lineup"
    SAVE = "save"


class RandomSource(Protocol):
    def choice(self, items: Sequence[Any]) -> Any: ...

    def spawn(self, substream_id: str) -> RandomSource: ...


@dataclass(slots=True)
class Player:
    player_id: str
    number: int
    name: str
    preferred_position: Position
    leadership: Leadership = Leadership.NONE
    stick: Stick = Stick.NONE
    can_play: list[RoleCode] = field(default_factory=list)
    notes: str = ""


@dataclass(slots=True)
class Team:
    team_id: str
    name: str
    players: list[Player] = field(default_factory=list)
    league_name: str = ""
    opposition: list[str] = field(default_factory=list)

    def player_by_id(self, player_id: str) -> Player | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None


@dataclass(frozen=True, slots=True)
class LineupStructure:
    forward_lines: int
    defence_pairs: int
    backup_goalie_enabled: bool


@dataclass(slots=True)
class Lineup:
    lineup_id: str
    name: str
    forward_lines: int
    defence_pairs: int
    backup_goalie_enabled: bool
    created_at: datetime
    updated_at: datetime
    assignments: dict[str, str | None] = field(default_factory=dict)

    @property
    def structure(self) -> LineupStructure:
        return LineupStructure(self.forward_lines, self.defence_pairs, self.backup_goalie_enabled)


@dataclass(slots=True)
class LineupCollection:
    active_lineup_id: str | None = None
    lineups: list[Lineup] = field(default_factory=list)


@dataclass(slots=True)
class AppState:
    created_at: datetime
    updated_at: datetime
    teams: list[Team] = field(default_factory=list)
    active_team_id: str | None = None
    lineups_by_team: dict[str, LineupCollection] = field(default_factory=dict)

    def team_by_id(self, team_id: str | None) -> Team | None:
        for team in self.teams:
            if team.team_id == team_id:
                return team
        return None


@dataclass(frozen=True, slots=True)
class MoveEvent:
    dragged_player_id: str
    target: str

    @property
    def to_unassigned(self) -> bool:
        return self.target == UNASSIGNED_TARGET


@dataclass(slots=True)
class MoveResult:
    outcome: MoveOutcome
    from_slot: str | None = None
    to_slot: str | None = None
    displaced_player_id: str | None = None


@dataclass(slots=True)
class DisplacementReport:
    operation: str
    slots: list[str]
    displaced_player_ids: list[str]

    @property
    def displaced_count(self) -> int:
        return len(self.displaced_player_ids)

    @property
    def requires_confirmation(self) -> bool:
        return self.displaced_count > 0


@dataclass(slots=True)
class StructureChangeResult:
    status: StructureChange
    report: DisplacementReport | None = None

    @property
    def applied(self) -> bool:
        return self.status == StructureChange.APPLIED


@dataclass(slots=True)
class AutoFillResult:
    assigned: dict[str, str] = field(default_factory=dict)
    unfilled_slots: list[str] = field(default_factory=list)
    pool_remaining: int = 0

    @property
    def pool_exhausted(self) -> bool:
        return bool(self.unfilled_slots) and self.pool_remaining == 0


@dataclass(slots=True)
class ImportReport:
    team: Team
    imported: int = 0
    skipped: int = 0
    messages: list[str] = field(default_factory=list)
    empty: bool = False


@dataclass(slots=True)
class LineupEvent:
    event_id: str
    time: datetime
    scope: str
    event_type: str
    team_id: str | None
    lineup_id: str | None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ActionRequest:
    request_id: str
    action_type: ActionType | str
    payload: dict[str, Any]
    team_id: str | None = None


@dataclass(slots=True)
class ActionResult:
    request_id: str
    success: bool
    message: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ForensicArtifact:
    artifact_id: str
    timestamp: datetime
    engine_scope: str
    error_code: str
    message: str
    state_snapshot: dict[str, Any]
    context: dict[str, Any]
    identifiers: dict[str, str]


@dataclass(slots=True)
class ValidationIssue:
    code: str
    severity: str
    field_path: str
    entity_id: str
    message: str


class ValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue]) -> None:
        message = "; ".join(f"{i.code}:{i.entity_id}:{i.message}" for i in issues)
        super().__init__(message)
        self.issues = issues
