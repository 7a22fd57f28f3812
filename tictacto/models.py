"""Domain objects held by the tic-tac-toe server."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

BOARD_SIZE = 9


@dataclass
class Consumer:
    """An application allowed to obtain client ids, identified by its public key."""

    public_key: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Consumer":
        """Build a consumer from a decoded JSON object; missing keys become empty."""
        if not isinstance(data, Mapping):
            raise ValueError(f"consumer entry must be an object, got {type(data).__name__}")
        values = {}
        for key in ("public_key", "name"):
            value = data.get(key)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ValueError(f"consumer field {key!r} must be a string")
            values[key] = value
        return cls(**values)


@dataclass
class Client:
    """A connected client session."""

    id: str


@dataclass
class Player:
    """A registered player."""

    id: str
    name: str = ""
    password: str = ""


@dataclass
class Lobby:
    """A waiting room in which players gather before a game."""

    id: str
    name: str
    creator: Player | None = None
    players: dict[str, Player | None] = field(default_factory=dict)


class GameResult(IntEnum):
    """State of a game's outcome."""

    INITIAL = 0
    ONGOING = 1
    WIN = 2
    DRAW = 3


def _empty_board() -> list[str]:
    return [""] * BOARD_SIZE


@dataclass
class Game:
    """A game of tic-tac-toe; each board cell holds the id of the player who took it."""

    id: str
    board: list[str] = field(default_factory=_empty_board)
    creator: Player | None = None
    mover: Player | None = None
    mover_x: Player | None = None
    mover_o: Player | None = None
    winner: Player | None = None
    result: GameResult = GameResult.INITIAL