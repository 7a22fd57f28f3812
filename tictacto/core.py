"""Server state shared by all requests: clients, players and their update queues."""

from __future__ import annotations

import threading
import uuid
from typing import Any, Iterable, Mapping

from .messages import (
    NavigationPath,
    Outcome,
    StatusCode,
    SubscriptionUpdate,
    handshake_reply,
    invalidate_reply,
    my_lobby_details,
    navigation_update,
    player_client_update,
)
from .models import Client, Consumer, Game, Lobby, Player

_MAX_ID_ATTEMPTS = 10
_CLIENT_ID_KEY = "clientid"


class RpcError(Exception):
    """A request failed with a gRPC status code."""

    def __init__(self, code: StatusCode, message: str) -> None:
        super().__init__(message)
        self.code = StatusCode(code)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.name}: {self.message}"


def extract_client_id(metadata: Mapping[str, Any] | Iterable[tuple[str, Any]] | None) -> str:
    """Return the client id carried in request metadata under the key ``ClientId``."""
    if metadata is None:
        raise RpcError(StatusCode.NOT_FOUND, "metadata not ok")
    items = metadata.items() if isinstance(metadata, Mapping) else metadata
    values: list[Any] = []
    for key, value in items:
        if key.lower() != _CLIENT_ID_KEY:
            continue
        if isinstance(value, (list, tuple)):
            values.extend(value)
        else:
            values.append(value)
    if not values:
        raise RpcError(StatusCode.NOT_FOUND, "client not found")
    client_id = values[0]
    if isinstance(client_id, bytes):
        client_id = client_id.decode("utf-8")
    if not client_id:
        raise RpcError(StatusCode.INVALID_ARGUMENT, "client is empty")
    return client_id


def _new_id(taken: Mapping[str, Any]) -> str | None:
    """A fresh random id not among ``taken``, or None after repeated collisions."""
    for _ in range(_MAX_ID_ATTEMPTS):
        candidate = str(uuid.uuid4())
        if candidate not in taken:
            return candidate
    return None


class BaseServer:
    """Holds all server state and the requests that deal with clients and players."""

    def __init__(self, consumers: Mapping[str, Consumer]) -> None:
        self._consumers: dict[str, Consumer] = dict(consumers)

        self._clients: dict[str, Client] = {}
        self._client_updates: dict[str, list[SubscriptionUpdate]] = {}
        self._client_signals: dict[str, threading.Event] = {}
        self._client_last_index: dict[str, int] = {}
        self._client_player: dict[str, str] = {}

        self._players: dict[str, Player] = {}
        self._player_client: dict[str, str] = {}
        self._player_name_id: dict[str, str] = {}
        self._player_lobby: dict[str, str] = {}
        self._player_game: dict[str, str] = {}

        self._lobbies: dict[str, Lobby] = {}
        self._games: dict[str, Game] = {}

        self._lock = threading.RLock()

    # Requests

    def exchange(self, public_key: str) -> str:
        """Trade a consumer's public key for a new client id."""
        with self._lock:
            if public_key not in self._consumers:
                raise RpcError(StatusCode.NOT_FOUND, "invalid public key")
            client_id = _new_id(self._clients)
            if client_id is None:
                raise RpcError(StatusCode.INTERNAL, "failed to exchange")
            self._clients[client_id] = Client(id=client_id)
            return client_id

    def handshake(self, client_id: str, player_name: str, player_pass: str) -> None:
        """Register a player under the client and queue the reply."""
        with self._lock:
            if client_id not in self._clients:
                raise RpcError(StatusCode.NOT_FOUND, "unknown client")

            player, outcome = self._add_player(player_name, player_pass)
            updates = [handshake_reply(outcome)]

            if outcome.ok and player is not None:
                updates.append(navigation_update(NavigationPath.HOME))

                old_client_id = self._player_client.get(player.id)
                if old_client_id is not None and old_client_id in self._clients:
                    self._queue_updates(
                        old_client_id,
                        [
                            *updates,
                            player_client_update("player is using another client"),
                            navigation_update(NavigationPath.LOGIN),
                        ],
                    )

                self._client_player[client_id] = player.id
                self._player_client[player.id] = client_id

                lobby_id = self._player_lobby.get(player.id)
                if lobby_id is not None and lobby_id in self._lobbies:
                    updates.append(my_lobby_details(self._lobbies[lobby_id]))

            self._queue_updates(client_id, updates)

    def invalidate(self, client_id: str) -> None:
        """Log the player out of the client and send the client to the login screen."""
        with self._lock:
            player, outcome = self._player_for_client(client_id)
            if not outcome.ok or player is None:
                self._queue_updates(
                    client_id,
                    [invalidate_reply(outcome), navigation_update(NavigationPath.LOGIN)],
                )
                return
            self._client_player.pop(client_id, None)
            self._player_client.pop(player.id, None)
            self._queue_updates(
                client_id,
                [invalidate_reply(Outcome(ok=True)), navigation_update(NavigationPath.LOGIN)],
            )

    def pending_updates(self, client_id: str) -> list[SubscriptionUpdate]:
        """All updates queued for the client so far, oldest first."""
        with self._lock:
            return list(self._client_updates.get(client_id, []))

    # Helpers shared by the request handlers

    def _add_player(self, name: str, password: str) -> tuple[Player | None, Outcome]:
        if name in self._player_name_id:
            return None, Outcome.failure(StatusCode.ALREADY_EXISTS, "player name already exists")

        player_id = _new_id(self._players)
        if player_id is None:
            return None, Outcome.failure(
                StatusCode.INTERNAL, f"failed to add player with name {name}"
            )
        player = Player(id=player_id, name=name)
        self._players[player_id] = player
        self._player_name_id[name] = player_id
        return player, Outcome(ok=True)

    def _player_for_client(self, client_id: str) -> tuple[Player | None, Outcome]:
        with self._lock:
            if client_id not in self._clients:
                return None, Outcome.failure(StatusCode.NOT_FOUND, "unknown client")
            return self._check_player(client_id)

    def _player_by_id(self, player_id: str, label: str) -> tuple[Player | None, Outcome]:
        with self._lock:
            client_id = self._player_client.get(player_id)
            if client_id is None:
                return None, Outcome.failure(
                    StatusCode.INTERNAL, f"client ID for {label} not found"
                )
            player, outcome = self._check_player(client_id)
            if not outcome.ok:
                outcome.error_message = f"{label} error: {outcome.error_message}"
            return player, outcome

    def _check_player(self, client_id: str) -> tuple[Player, Outcome]:
        with self._lock:
            player_id = self._client_player.get(client_id)
            if player_id is None:
                return Player(id=""), Outcome.failure(
                    StatusCode.UNAUTHENTICATED, "client has no authenticated player"
                )
            if player_id not in self._player_client:
                return Player(id=player_id), Outcome.failure(
                    StatusCode.UNAUTHENTICATED, "player is not authenticated in the client"
                )
            player = self._players.get(player_id)
            if player is None:
                return Player(id=player_id), Outcome.failure(
                    StatusCode.NOT_FOUND, "player not found"
                )
            return player, Outcome(ok=True)

    def _queue_updates(self, client_id: str, updates: Iterable[SubscriptionUpdate]) -> None:
        with self._lock:
            self._client_updates.setdefault(client_id, []).extend(updates)
            signal = self._client_signals.get(client_id)
            if signal is not None:
                signal.set()