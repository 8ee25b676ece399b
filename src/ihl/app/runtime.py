from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable

from ihl.contracts import (
    ActionRequest,
    ActionResult,
    ActionType,
    AppState,
    Lineup,
    LineupCollection,
    LineupEvent,
    MoveEvent,
    MoveOutcome,
    StructureChange,
    StructureChangeResult,
    Team,
    ValidationError,
)
from ihl.core import (
    BuilderConfig,
    EventBus,
    build_forensic_artifact,
    load_builder_config,
    make_id,
    now_utc,
    persist_forensic_artifact,
    seeded_random,
    unseeded_random,
)
from ihl.core.config import CONFIG_FILENAME
from ihl.export import ExportService, build_lineup_sheet, render_lineup_png
from ihl.lineup import (
    active_lineup,
    add_defence_pair,
    add_forward_line,
    apply_move,
    auto_fill,
    available_players,
    clear_assignments,
    create_lineup,
    delete_lineup,
    duplicate_lineup,
    ensure_collection,
    find_lineup,
    remove_defence_pair,
    remove_forward_line,
    rename_lineup,
    set_active,
    toggle_backup_goalie,
)
from ihl.persistence import AppStateStore
from ihl.roster import (
    add_opponent,
    add_player,
    create_team,
    delete_team,
    export_roster_csv,
    import_opposition_csv,
    import_roster_csv,
    merge_opposition,
    remove_opponent,
    remove_player,
    rename_opponent,
    rename_team,
    update_player,
)

logger = logging.getLogger(__name__)

# Actions that only read state; everything else is autosaved.
READ_ONLY_ACTIONS = {ActionType.GET_LINEUP, ActionType.EXPORT_LINEUP, ActionType.EXPORT_ROSTER, ActionType.RENDER_LINEUP}

_STRUCTURE_MESSAGES = {
    StructureChange.APPLIED: "structure updated",
    StructureChange.AT_MAXIMUM: "already at maximum",
    StructureChange.AT_MINIMUM: "already at minimum",
    StructureChange.CONFIRMATION_REQUIRED: "confirmation required",
    StructureChange.MISSING_LINEUP: "no active lineup",
}


class RuntimePaths:
    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def sqlite_path(self) -> Path:
        return self.root / "data" / "app_state.sqlite3"

    @property
    def config_path(self) -> Path:
        return self.root / CONFIG_FILENAME

    @property
    def export_dir(self) -> Path:
        return self.root / "exports"

    @property
    def forensic_dir(self) -> Path:
        return self.root / "forensics"


class LineupRuntime:
    """Single entry point for UI/CLI callers: one action in, one result out."""

    def __init__(self, root: Path, seed: int | None = None, config: BuilderConfig | None = None) -> None:
        self.paths = RuntimePaths(root)
        self.config = config or load_builder_config(self.paths.config_path)
        self.config.validate()
        self.seed = seed
        self.rand = seeded_random(seed) if seed is not None else unseeded_random()
        self.autofill_rand = self.rand.spawn("autofill")
        self.event_bus = EventBus()
        self.exporter = ExportService()

        self.store = AppStateStore(self.paths.sqlite_path)
        self.store.initialize_schema()
        loaded = self.store.load(self.config.limits)
        stamp = now_utc()
        self.state: AppState = loaded or AppState(created_at=stamp, updated_at=stamp)
        for team in self.state.teams:
            ensure_collection(self.state, team.team_id, self.config.defaults)
        if self.state.team_by_id(self.state.active_team_id) is None and self.state.teams:
            self.state.active_team_id = self.state.teams[0].team_id
        logger.info("runtime ready at %s with %d team(s)", root, len(self.state.teams))

    # -- helpers ---------------------------------------------------------

    def team(self, team_id: str | None = None) -> Team | None:
        return self.state.team_by_id(team_id or self.state.active_team_id)

    def collection(self, team: Team) -> LineupCollection:
        return ensure_collection(self.state, team.team_id, self.config.defaults)

    def lineup(self, team: Team, lineup_id: str | None = None) -> Lineup | None:
        collection = self.collection(team)
        if lineup_id:
            return find_lineup(collection, lineup_id)
        return active_lineup(collection)

    def save(self) -> None:
        self.state.updated_at = now_utc()
        self.store.save(self.state)

    def _publish(self, scope: str, event_type: str, team: Team | None, lineup: Lineup | None, **details: Any) -> None:
        self.event_bus.publish(
            LineupEvent(
                event_id=make_id("evt"),
                time=now_utc(),
                scope=scope,
                event_type=event_type,
                team_id=team.team_id if team else None,
                lineup_id=lineup.lineup_id if lineup else None,
                details=details,
            )
        )

    def lineup_view(self, team: Team, lineup: Lineup) -> dict[str, Any]:
        sheet = build_lineup_sheet(team, lineup)
        collection = self.collection(team)
        return {
            "team_id": team.team_id,
            "team_name": team.name,
            "lineup_id": lineup.lineup_id,
            "name": lineup.name,
            "forward_lines": lineup.forward_lines,
            "defence_pairs": lineup.defence_pairs,
            "backup_goalie_enabled": lineup.backup_goalie_enabled,
            "slots": [asdict(row) for row in sheet.rows],
            "available": [
                {
                    "player_id": p.player_id,
                    "number": p.number,
                    "name": p.name,
                    "preferred_position": p.preferred_position.value,
                }
                for p in available_players(lineup, team.players)
            ],
            "lineups": [
                {"lineup_id": lu.lineup_id, "name": lu.name, "active": lu.lineup_id == collection.active_lineup_id}
                for lu in collection.lineups
            ],
        }

    # -- dispatch --------------------------------------------------------

    def handle_action(self, request: ActionRequest) -> ActionResult:
        try:
            result = self._handle_action_core(request)
        except ValidationError as exc:
            return ActionResult(
                request.request_id,
                False,
                "validation failed",
                data={"issues": [asdict(i) for i in exc.issues]},
            )
        except Exception as exc:
            artifact = build_forensic_artifact(
                engine_scope="runtime",
                error_code="UNHANDLED_RUNTIME_EXCEPTION",
                message=str(exc),
                state_snapshot={"team_count": len(self.state.teams), "active_team_id": self.state.active_team_id},
                context={"action_type": str(request.action_type), "payload": request.payload},
                identifiers={"request_id": request.request_id, "team_id": request.team_id or ""},
            )
            path = persist_forensic_artifact(artifact, self.paths.forensic_dir)
            return ActionResult(request.request_id, False, f"action failed: {exc}", {"forensic_path": str(path)})

        if result.success and self.config.autosave:
            if self._normalize_action(request.action_type) not in READ_ONLY_ACTIONS:
                self.save()
        return result

    def _normalize_action(self, action_type: ActionType | str) -> ActionType:
        if isinstance(action_type, ActionType):
            return action_type
        return ActionType(str(action_type))

    def _handle_action_core(self, request: ActionRequest) -> ActionResult:
        try:
            action = self._normalize_action(request.action_type)
        except ValueError:
            return ActionResult(request.request_id, False, f"unsupported action '{request.action_type}'")
        logger.debug("handling %s", action.value)

        team_actions: dict[ActionType, Callable[[ActionRequest], ActionResult]] = {
            ActionType.CREATE_TEAM: self._create_team,
            ActionType.SELECT_TEAM: self._select_team,
            ActionType.DELETE_TEAM: self._delete_team,
            ActionType.IMPORT_ROSTER: self._import_roster,
            ActionType.SAVE: self._save,
        }
        if action in team_actions:
            return team_actions[action](request)

        team = self.team(request.team_id)
        if team is None:
            return ActionResult(request.request_id, False, "no active team")

        handlers: dict[ActionType, Callable[[ActionRequest, Team], ActionResult]] = {
            ActionType.RENAME_TEAM: self._rename_team,
            ActionType.ADD_OPPONENT: self._add_opponent,
            ActionType.RENAME_OPPONENT: self._rename_opponent,
            ActionType.REMOVE_OPPONENT: self._remove_opponent,
            ActionType.IMPORT_OPPOSITION: self._import_opposition,
            ActionType.ADD_PLAYER: self._add_player,
            ActionType.UPDATE_PLAYER: self._update_player,
            ActionType.REMOVE_PLAYER: self._remove_player,
            ActionType.EXPORT_ROSTER: self._export_roster,
            ActionType.CREATE_LINEUP: self._create_lineup,
            ActionType.RENAME_LINEUP: self._rename_lineup,
            ActionType.DUPLICATE_LINEUP: self._duplicate_lineup,
            ActionType.DELETE_LINEUP: self._delete_lineup,
            ActionType.SET_ACTIVE_LINEUP: self._set_active_lineup,
            ActionType.ADD_FORWARD_LINE: self._structure,
            ActionType.REMOVE_FORWARD_LINE: self._structure,
            ActionType.ADD_DEFENCE_PAIR: self._structure,
            ActionType.REMOVE_DEFENCE_PAIR: self._structure,
            ActionType.TOGGLE_BACKUP_GOALIE: self._structure,
            ActionType.MOVE_PLAYER: self._move_player,
            ActionType.AUTO_FILL: self._auto_fill,
            ActionType.CLEAR_ASSIGNMENTS: self._clear_assignments,
            ActionType.GET_LINEUP: self._get_lineup,
            ActionType.EXPORT_LINEUP: self._export_lineup,
            ActionType.RENDER_LINEUP: self._render_lineup,
        }
        return handlers[action](request, team)

    # -- team and roster -------------------------------------------------

    def _create_team(self, request: ActionRequest) -> ActionResult:
        team = create_team(str(request.payload.get("name", "")))
        self.state.teams.append(team)
        self.state.active_team_id = team.team_id
        ensure_collection(self.state, team.team_id, self.config.defaults)
        self._publish("roster", "team_created", team, None)
        return ActionResult(request.request_id, True, f"team '{team.name}' created", {"team_id": team.team_id})

    def _select_team(self, request: ActionRequest) -> ActionResult:
        team = self.state.team_by_id(request.payload.get("team_id"))
        if team is None:
            return ActionResult(request.request_id, False, "unknown team")
        self.state.active_team_id = team.team_id
        ensure_collection(self.state, team.team_id, self.config.defaults)
        return ActionResult(request.request_id, True, f"team '{team.name}' selected", {"team_id": team.team_id})

    def _delete_team(self, request: ActionRequest) -> ActionResult:
        deleted = delete_team(self.state, str(request.payload.get("team_id") or self.state.active_team_id or ""))
        if deleted is None:
            return ActionResult(request.request_id, False, "unknown team")
        self._publish("roster", "team_deleted", deleted, None)
        return ActionResult(
            request.request_id,
            True,
            f"team '{deleted.name}' deleted",
            {"team_id": deleted.team_id, "active_team_id": self.state.active_team_id},
        )

    def _rename_team(self, request: ActionRequest, team: Team) -> ActionResult:
        if not rename_team(team, str(request.payload.get("name", ""))):
            return ActionResult(request.request_id, True, "team unchanged", {"team_id": team.team_id, "name": team.name})
        self._publish("roster", "team_renamed", team, None)
        return ActionResult(request.request_id, True, f"team renamed to '{team.name}'", {"team_id": team.team_id, "name": team.name})

    def _opposition_view(self, team: Team) -> dict[str, Any]:
        return {"team_id": team.team_id, "league_name": team.league_name, "opposition": list(team.opposition)}

    def _add_opponent(self, request: ActionRequest, team: Team) -> ActionResult:
        added = add_opponent(team, str(request.payload.get("name", "")))
        return ActionResult(request.request_id, True, "opponent added" if added else "opposition unchanged", self._opposition_view(team))

    def _rename_opponent(self, request: ActionRequest, team: Team) -> ActionResult:
        renamed = rename_opponent(team, int(request.payload["index"]), str(request.payload.get("name", "")))
        return ActionResult(request.request_id, True, "opponent renamed" if renamed else "opposition unchanged", self._opposition_view(team))

    def _remove_opponent(self, request: ActionRequest, team: Team) -> ActionResult:
        removed = remove_opponent(team, int(request.payload["index"]))
        message = f"opponent '{removed}' removed" if removed else "opposition unchanged"
        return ActionResult(request.request_id, True, message, self._opposition_view(team))

    def _import_opposition(self, request: ActionRequest, team: Team) -> ActionResult:
        path = Path(str(request.payload["path"]))
        if path.suffix.lower() != ".csv":
            return ActionResult(request.request_id, False, "please select a .csv file")
        parsed = import_opposition_csv(path)
        if parsed is None:
            return ActionResult(request.request_id, False, "import failed: CSV is empty")
        league, names = parsed
        added = merge_opposition(team, league, names)
        self._publish("roster", "opposition_imported", team, None, added=added)
        data = self._opposition_view(team)
        data["added"] = added
        return ActionResult(request.request_id, True, f"league '{league or '(not provided)'}', {added} opponent(s) added", data)

    def _import_roster(self, request: ActionRequest) -> ActionResult:
        path = Path(str(request.payload["path"]))
        if path.suffix.lower() != ".csv":
            return ActionResult(request.request_id, False, "please select a .csv file")
        report = import_roster_csv(path)
        if report.empty:
            return ActionResult(request.request_id, False, "import failed: CSV is empty", {"messages": report.messages})
        self.state.teams.append(report.team)
        self.state.active_team_id = report.team.team_id
        ensure_collection(self.state, report.team.team_id, self.config.defaults)
        self._publish("roster", "roster_imported", report.team, None, imported=report.imported)
        return ActionResult(
            request.request_id,
            True,
            f"imported {report.imported}, skipped {report.skipped}",
            {
                "team_id": report.team.team_id,
                "imported": report.imported,
                "skipped": report.skipped,
                "messages": report.messages,
            },
        )

    def _save(self, request: ActionRequest) -> ActionResult:
        self.save()
        return ActionResult(request.request_id, True, "saved", {"path": str(self.paths.sqlite_path)})

    def _add_player(self, request: ActionRequest, team: Team) -> ActionResult:
        player = add_player(team, dict(request.payload.get("player", {})))
        self._publish("roster", "player_added", team, None, player_id=player.player_id)
        return ActionResult(request.request_id, True, f"added #{player.number} {player.name}", {"player_id": player.player_id})

    def _update_player(self, request: ActionRequest, team: Team) -> ActionResult:
        player = update_player(team, str(request.payload["player_id"]), dict(request.payload.get("player", {})))
        self._publish("roster", "player_updated", team, None, player_id=player.player_id)
        return ActionResult(request.request_id, True, f"updated #{player.number} {player.name}", {"player_id": player.player_id})

    def _remove_player(self, request: ActionRequest, team: Team) -> ActionResult:
        player_id = str(request.payload["player_id"])
        if not remove_player(self.state, team, player_id):
            return ActionResult(request.request_id, False, "unknown player")
        self._publish("roster", "player_removed", team, None, player_id=player_id)
        return ActionResult(request.request_id, True, "player removed", {"player_id": player_id})

    def _export_roster(self, request: ActionRequest, team: Team) -> ActionResult:
        output_dir = Path(request.payload.get("output_dir") or self.paths.export_dir)
        path = export_roster_csv(team, output_dir)
        return ActionResult(request.request_id, True, "roster exported", {"path": str(path)})

    # -- line-up collection ----------------------------------------------

    def _create_lineup(self, request: ActionRequest, team: Team) -> ActionResult:
        lineup = create_lineup(self.collection(team), request.payload.get("name"), self.config.defaults)
        self._publish("collection", "lineup_created", team, lineup)
        return ActionResult(request.request_id, True, f"lineup '{lineup.name}' created", self.lineup_view(team, lineup))

    def _rename_lineup(self, request: ActionRequest, team: Team) -> ActionResult:
        lineup = self.lineup(team, request.payload.get("lineup_id"))
        if lineup is None or not rename_lineup(self.collection(team), lineup.lineup_id, str(request.payload.get("name", ""))):
            return ActionResult(request.request_id, True, "lineup unchanged")
        self._publish("collection", "lineup_renamed", team, lineup)
        return ActionResult(request.request_id, True, f"lineup renamed to '{lineup.name}'", self.lineup_view(team, lineup))

    def _duplicate_lineup(self, request: ActionRequest, team: Team) -> ActionResult:
        clone = duplicate_lineup(self.collection(team), request.payload.get("lineup_id"), request.payload.get("name"))
        if clone is None:
            return ActionResult(request.request_id, True, "lineup unchanged")
        self._publish("collection", "lineup_duplicated", team, clone)
        return ActionResult(request.request_id, True, f"lineup '{clone.name}' created", self.lineup_view(team, clone))

    def _delete_lineup(self, request: ActionRequest, team: Team) -> ActionResult:
        collection = self.collection(team)
        deleted = delete_lineup(collection, request.payload.get("lineup_id"), self.config.defaults)
        current = self.lineup(team)
        if current is None:
            return ActionResult(request.request_id, False, "no active lineup")
        if deleted is None:
            return ActionResult(request.request_id, True, "lineup unchanged", self.lineup_view(team, current))
        self._publish("collection", "lineup_deleted", team, deleted)
        return ActionResult(request.request_id, True, f"lineup '{deleted.name}' deleted", self.lineup_view(team, current))

    def _set_active_lineup(self, request: ActionRequest, team: Team) -> ActionResult:
        collection = self.collection(team)
        set_active(collection, str(request.payload.get("lineup_id", "")))
        current = self.lineup(team)
        if current is None:
            return ActionResult(request.request_id, False, "no active lineup")
        return ActionResult(request.request_id, True, f"lineup '{current.name}' active", self.lineup_view(team, current))

    # -- assignments -----------------------------------------------------

    def _structure(self, request: ActionRequest, team: Team) -> ActionResult:
        action = self._normalize_action(request.action_type)
        lineup = self.lineup(team, request.payload.get("lineup_id"))
        confirmed = bool(request.payload.get("confirmed", False))
        limits = self.config.limits
        outcome: StructureChangeResult
        if action == ActionType.ADD_FORWARD_LINE:
            outcome = add_forward_line(lineup, limits)
        elif action == ActionType.ADD_DEFENCE_PAIR:
            outcome = add_defence_pair(lineup, limits)
        elif action == ActionType.REMOVE_FORWARD_LINE:
            outcome = remove_forward_line(lineup, confirmed=confirmed, limits=limits)
        elif action == ActionType.REMOVE_DEFENCE_PAIR:
            outcome = remove_defence_pair(lineup, confirmed=confirmed, limits=limits)
        else:
            outcome = toggle_backup_goalie(lineup, confirmed=confirmed)

        data: dict[str, Any] = {"status": outcome.status.value}
        if outcome.report is not None:
            data["displaced_count"] = outcome.report.displaced_count
            data["displaced_player_ids"] = list(outcome.report.displaced_player_ids)
        if outcome.status == StructureChange.CONFIRMATION_REQUIRED:
            data["requires_confirmation"] = True
            return ActionResult(request.request_id, False, _STRUCTURE_MESSAGES[outcome.status], data)
        if lineup is None:
            return ActionResult(request.request_id, False, _STRUCTURE_MESSAGES[outcome.status], data)
        if outcome.applied:
            self._publish("structure", action.value, team, lineup, **data)
        data.update(self.lineup_view(team, lineup))
        return ActionResult(request.request_id, True, _STRUCTURE_MESSAGES[outcome.status], data)

    def _move_player(self, request: ActionRequest, team: Team) -> ActionResult:
        lineup = self.lineup(team, request.payload.get("lineup_id"))
        if lineup is None:
            return ActionResult(request.request_id, False, "no active lineup")
        player_id = str(request.payload["player_id"])
        if team.player_by_id(player_id) is None:
            return ActionResult(request.request_id, False, "unknown player")
        result = apply_move(lineup, MoveEvent(player_id, str(request.payload["target"])))
        if result.outcome != MoveOutcome.NOOP:
            self._publish("assignment", result.outcome.value, team, lineup, player_id=player_id)
        data = {"outcome": result.outcome.value, "from_slot": result.from_slot, "to_slot": result.to_slot}
        data["displaced_player_id"] = result.displaced_player_id
        data.update(self.lineup_view(team, lineup))
        return ActionResult(request.request_id, True, f"move {result.outcome.value}", data)

    def _auto_fill(self, request: ActionRequest, team: Team) -> ActionResult:
        lineup = self.lineup(team, request.payload.get("lineup_id"))
        if lineup is None:
            return ActionResult(request.request_id, False, "no active lineup")
        pool = available_players(lineup, team.players)
        if not pool:
            return ActionResult(request.request_id, True, "no available players to assign", self.lineup_view(team, lineup))
        result = auto_fill(lineup, pool, self.autofill_rand)
        self._publish("assignment", "auto_fill", team, lineup, assigned=len(result.assigned))
        data = {"assigned": dict(result.assigned), "unfilled_slots": list(result.unfilled_slots)}
        data.update(self.lineup_view(team, lineup))
        return ActionResult(request.request_id, True, f"assigned {len(result.assigned)} slot(s)", data)

    def _clear_assignments(self, request: ActionRequest, team: Team) -> ActionResult:
        lineup = self.lineup(team, request.payload.get("lineup_id"))
        if lineup is None:
            return ActionResult(request.request_id, False, "no active lineup")
        cleared = clear_assignments(lineup)
        self._publish("assignment", "cleared", team, lineup, cleared=cleared)
        return ActionResult(request.request_id, True, f"cleared {cleared} slot(s)", self.lineup_view(team, lineup))

    # -- read side -------------------------------------------------------

    def _get_lineup(self, request: ActionRequest, team: Team) -> ActionResult:
        lineup = self.lineup(team, request.payload.get("lineup_id"))
        if lineup is None:
            return ActionResult(request.request_id, False, "no such lineup")
        return ActionResult(request.request_id, True, "ok", self.lineup_view(team, lineup))

    def _export_lineup(self, request: ActionRequest, team: Team) -> ActionResult:
        lineup = self.lineup(team, request.payload.get("lineup_id"))
        if lineup is None:
            return ActionResult(request.request_id, False, "no such lineup")
        output_dir = Path(request.payload.get("output_dir") or self.paths.export_dir)
        outputs = self.exporter.export_lineup(build_lineup_sheet(team, lineup), output_dir)
        return ActionResult(request.request_id, True, "lineup exported", {"paths": [str(p) for p in outputs]})

    def _render_lineup(self, request: ActionRequest, team: Team) -> ActionResult:
        lineup = self.lineup(team, request.payload.get("lineup_id"))
        if lineup is None:
            return ActionResult(request.request_id, False, "no such lineup")
        sheet = build_lineup_sheet(team, lineup)
        default = self.paths.export_dir / f"{lineup.lineup_id}.png"
        path = render_lineup_png(sheet, Path(request.payload.get("path") or default))
        return ActionResult(request.request_id, True, "lineup rendered", {"path": str(path)})
