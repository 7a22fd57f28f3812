"""Requests that start games and make moves, and the board rules."""

from __future__ import annotations

import random
from typing import Sequence

from .core import _new_id
from .lobbies import LobbyServer
from .messages import (
    Mover,
    NavigationPath,
    Outcome,
    StatusCode,
    Winner,
    create_game_reply,
    draw_update,
    game_start_update,
    make_move_reply,
    navigation_update,
    next_mover_update,
    winner_update,
)
from .models import Game, GameResult, Player

_WIN_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


def check_win(board: Sequence[str]) -> bool:
    """True when one player holds a full row, column or diagonal."""
    return any(board[a] and board[a] == board[b] == board[c] for a, b, c in _WIN_LINES)


def check_draw(board: Sequence[str]) -> bool:
    """True when every cell is taken."""
    return all(board)


class GameServer(LobbyServer):
    """Server state plus the lobby and game requests."""

    def create_game(self, client_id: str, player1_id: str, player2_id: str) -> Game | None:
        """Start a game between two players; returns it, or None on failure."""
        with self._lock:
            creator, outcome = self._player_for_client(client_id)
            if not outcome.ok or creator is None:
                self._reply_create(client_id, outcome)
                return None
            if creator.id in self._player_game:
                self._reply_create(
                    client_id,
                    Outcome.failure(StatusCode.ALREADY_EXISTS, "creator is currently in a game"),
                )
                return None

            players = []
            for player_id, label in ((player1_id, "player 1"), (player2_id, "player 2")):
                player, outcome = self._player_by_id(player_id, label)
                if not outcome.ok or player is None:
                    self._reply_create(client_id, outcome)
                    return None
                if player_id in self._player_game:
                    self._reply_create(
                        client_id,
                        Outcome.failure(
                            StatusCode.ALREADY_EXISTS, f"{label} is currently in a game"
                        ),
                    )
                    return None
                players.append(player)
            player1, player2 = players

            game_id = _new_id(self._games)
            if game_id is None:
                return None

            game = Game(id=game_id, creator=creator, result=GameResult.INITIAL)
            self._setup_mover(game, player1, player2)
            self._games[game_id] = game
            self._player_game[player1.id] = game_id
            self._player_game[player2.id] = game_id

            client_ids = []
            for player_id, label in ((player1_id, "player 1"), (player2_id, "player 2")):
                other_client = self._player_client.get(player_id)
                if other_client is None:
                    self._reply_create(
                        client_id,
                        Outcome.failure(
                            StatusCode.INTERNAL,
                            f"internal error: client ID not found for {label}: {player_id}",
                        ),
                    )
                    return None
                client_ids.append(other_client)

            self._reply_create(client_id, Outcome(ok=True))
            for target, you, other in (
                (client_ids[0], player1, player2),
                (client_ids[1], player2, player1),
            ):
                self._queue_updates(
                    target,
                    [
                        navigation_update(NavigationPath.GAME),
                        game_start_update(game, you, other),
                        next_mover_update(game),
                    ],
                )
            return game

    def make_move(self, client_id: str, position: int) -> None:
        """Place the client's player's mark on a board cell."""
        with self._lock:
            player, outcome = self._player_for_client(client_id)
            if not outcome.ok or player is None:
                self._reply_move(client_id, outcome)
                return

            game_id = self._player_game.get(player.id)
            if game_id is None:
                self._reply_move(
                    client_id, Outcome.failure(StatusCode.NOT_FOUND, "player is not in a game")
                )
                return

            game = self._games.get(game_id)
            if game is None:
                self._reply_move(
                    client_id,
                    Outcome.failure(StatusCode.NOT_FOUND, "player's game details not found"),
                )
                return

            if not 0 <= position < len(game.board):
                self._reply_move(
                    client_id,
                    Outcome.failure(StatusCode.INVALID_ARGUMENT, "position out of range"),
                )
                return

            if game.board[position]:
                self._reply_move(
                    client_id,
                    Outcome.failure(StatusCode.INVALID_ARGUMENT, "position already occupied"),
                )
                return

            targets = []
            for mover, label in ((game.mover_o, "mover O"), (game.mover_x, "mover X")):
                mover_player, mover_outcome = self._player_by_id(mover.id, label)
                if not mover_outcome.ok or mover_player is None:
                    self._reply_move(client_id, mover_outcome)
                    return
                targets.append(self._player_client[mover_player.id])

            game.board[position] = player.id

            if check_draw(game.board):
                notice = draw_update()
            elif check_win(game.board):
                notice = winner_update(*self._determine_winner(game, player))
            else:
                self._switch_mover(game)
                notice = next_mover_update(game)

            self._reply_move(client_id, Outcome(ok=True))
            for target in targets:
                self._queue_updates(target, [notice])

    def _reply_create(self, client_id: str, outcome: Outcome) -> None:
        self._queue_updates(client_id, [create_game_reply(outcome)])

    def _reply_move(self, client_id: str, outcome: Outcome) -> None:
        self._queue_updates(client_id, [make_move_reply(outcome)])

    @staticmethod
    def _determine_winner(game: Game, last_player: Player) -> tuple[Winner, Mover]:
        winner = Winner.you if game.mover.id == last_player.id else Winner.other
        if game.mover.id == game.mover_x.id:
            mover = Mover.X
        elif game.mover.id == game.mover_o.id:
            mover = Mover.O
        else:
            mover = Mover.UNSPECIFIED
        return winner, mover

    @staticmethod
    def _switch_mover(game: Game) -> None:
        if game.mover.id == game.mover_x.id:
            game.mover = game.mover_o
        elif game.mover.id == game.mover_o.id:
            game.mover = game.mover_x

    @staticmethod
    def _setup_mover(game: Game, player1: Player, player2: Player) -> None:
        if random.randrange(2) == 1:
            game.mover_x, game.mover_o = player1, player2
            game.mover = game.mover_x
        else:
            game.mover_o, game.mover_x = player1, player2
            game.mover = game.mover_o