"""Messages sent to subscribed clients and the values they carry."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from .models import Game, Lobby, Player


class StatusCode(IntEnum):
    """Status codes as used by gRPC."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class NavigationPath(str, Enum):
    """Screens a client can be sent to."""

    LOGIN = "LOGIN"
    HOME = "HOME"
    MY_LOBBY = "MY_LOBBY"
    GAME = "GAME"


class Mover(str, Enum):
    """The mark a player plays with."""

    UNSPECIFIED = "UNSPECIFIED"
    X = "X"
    O = "O"  # noqa: E741


class Winner(str, Enum):
    """Who won, seen from the player who made the last move."""

    you = "you"
    other = "other"


@dataclass
class Outcome:
    """Result of a request, reported back to the client."""

    ok: bool = False
    error_code: StatusCode = StatusCode.OK
    error_message: str = ""

    @classmethod
    def failure(cls, code: StatusCode, message: str) -> "Outcome":
        """A failed outcome with the given code and message."""
        return cls(ok=False, error_code=StatusCode(code), error_message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "error_code": int(self.error_code),
            "error_message": self.error_message,
        }


def _plain(value: Any) -> Any:
    if isinstance(value, Outcome):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


@dataclass
class SubscriptionUpdate:
    """One update pushed to a client: a kind and the data it carries."""

    kind: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-ready form: {kind: data}."""
        return {self.kind: _plain(self.data)}


def mover_of(game: Game, player_id: str) -> Mover:
    """The mark the given player plays with in the game."""
    if game.mover_x is not None and player_id == game.mover_x.id:
        return Mover.X
    if game.mover_o is not None and player_id == game.mover_o.id:
        return Mover.O
    return Mover.UNSPECIFIED


def _public_player(player: Player) -> dict[str, str]:
    return {"id": player.id, "name": player.name}


def navigation_update(path: NavigationPath) -> SubscriptionUpdate:
    return SubscriptionUpdate("navigation_update", {"path": NavigationPath(path)})


def my_lobby_details(lobby: Lobby) -> SubscriptionUpdate:
    players = [_public_player(p) for p in lobby.players.values() if p is not None]
    return SubscriptionUpdate(
        "my_lobby_details", {"lobby": {"name": lobby.name, "players": players}}
    )


def handshake_reply(outcome: Outcome) -> SubscriptionUpdate:
    return SubscriptionUpdate("handshake_reply", {"outcome": outcome})


def invalidate_reply(outcome: Outcome) -> SubscriptionUpdate:
    return SubscriptionUpdate("invalidate_reply", {"outcome": outcome})


def move_updates(game: Game) -> list[SubscriptionUpdate]:
    """One move update per occupied cell, in board order."""
    return [
        move_update(game, player_id, position)
        for position, player_id in enumerate(game.board)
        if player_id
    ]


def move_update(game: Game, player_id: str, position: int) -> SubscriptionUpdate:
    return SubscriptionUpdate(
        "move_update",
        {"move": {"position": position, "mover": mover_of(game, player_id)}},
    )


def create_lobby_reply(outcome: Outcome) -> SubscriptionUpdate:
    return SubscriptionUpdate("create_lobby_reply", {"outcome": outcome})


def join_lobby_reply(outcome: Outcome) -> SubscriptionUpdate:
    return SubscriptionUpdate("join_lobby_reply", {"outcome": outcome})


def my_lobby_joiner_update(player: Player) -> SubscriptionUpdate:
    return SubscriptionUpdate("my_lobby_joiner_update", {"player": _public_player(player)})


def leave_my_lobby_reply(outcome: Outcome) -> SubscriptionUpdate:
    return SubscriptionUpdate("leave_my_lobby_reply", {"outcome": outcome})


def my_lobby_leaver_update(player: Player) -> SubscriptionUpdate:
    return SubscriptionUpdate("my_lobby_leaver_update", {"player": _public_player(player)})


def create_game_reply(outcome: Outcome) -> SubscriptionUpdate:
    return SubscriptionUpdate("create_game_reply", {"outcome": outcome})


def game_start_update(game: Game, you: Player, other: Player) -> SubscriptionUpdate:
    return SubscriptionUpdate(
        "game_start_update",
        {"you": mover_of(game, you.id), "other": mover_of(game, other.id)},
    )


def next_mover_update(game: Game) -> SubscriptionUpdate:
    mover = mover_of(game, game.mover.id) if game.mover is not None else Mover.UNSPECIFIED
    return SubscriptionUpdate("next_mover_update", {"mover": mover})


def player_client_update(message: str) -> SubscriptionUpdate:
    return SubscriptionUpdate("player_client_update", {"message": message})


def make_move_reply(outcome: Outcome) -> SubscriptionUpdate:
    return SubscriptionUpdate("make_move_reply", {"outcome": outcome})


def winner_update(winner: Winner, mover: Mover) -> SubscriptionUpdate:
    return SubscriptionUpdate(
        "winner_update", {"winner": Winner(winner), "mover": Mover(mover)}
    )


def draw_update() -> SubscriptionUpdate:
    return SubscriptionUpdate("draw_update", {})