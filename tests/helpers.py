from __future__ import annotations

from ihl.contracts import ActionRequest, ActionType, Lineup, Player, Position, RoleCode, Team
from ihl.core import LineupDefaults
from ihl.lineup import new_lineup
from ihl.roster import create_player


def make_player(number: int, name: str | None = None, position: Position = Position.WING, can_play: list[str] | None = None) -> Player:
    return create_player(
        {
            "player_id": f"p{number}",
            "number": number,
            "name": name or f"Player {number}",
            "preferred_position": position,
            "can_play": can_play or [],
        }
    )


def make_lineup(forward_lines: int = 2, defence_pairs: int = 1, backup_goalie_enabled: bool = False) -> Lineup:
    return new_lineup("Test", LineupDefaults("Test", forward_lines, defence_pairs, backup_goalie_enabled))


def make_team() -> Team:
    """Two goalies, four defenders and nine forwards with declared roles."""
    players = [
        make_player(1, "Gus Goalie", Position.GOALIE, [RoleCode.G.value]),
        make_player(30, "Bo Backup", Position.GOALIE, [RoleCode.G.value]),
        make_player(2, "Lee Left", Position.DEFENDER, ["LD"]),
        make_player(3, "Ray Right", Position.DEFENDER, ["RD"]),
        make_player(4, "Dee Both", Position.DEFENDER, ["LD", "RD"]),
        make_player(5, "Dan Fifth", Position.DEFENDER, ["RD"]),
    ]
    for number in range(10, 19):
        role = ["LW", "C", "RW"][number % 3]
        players.append(make_player(number, f"Fwd {number}", Position.CENTRE if role == "C" else Position.WING, [role]))
    return Team(team_id="team_test", name="Test Team", players=players)


def bootstrap_team(runtime, name: str = "Test Team") -> str:
    result = runtime.handle_action(ActionRequest("req_team", ActionType.CREATE_TEAM, {"name": name}))
    if not result.success:
        raise RuntimeError(f"bootstrap_team failed: {result.message}")
    team = runtime.team()
    for player in make_team().players:
        team.players.append(player)
    return result.data["team_id"]
