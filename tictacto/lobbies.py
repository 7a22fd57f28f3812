"""Requests that create, join and leave lobbies."""

from __future__ import annotations

from .core import BaseServer, _new_id
from .messages import (
    NavigationPath,
    Outcome,
    StatusCode,
    create_lobby_reply,
    join_lobby_reply,
    leave_my_lobby_reply,
    my_lobby_details,
    my_lobby_joiner_update,
    my_lobby_leaver_update,
    navigation_update,
)
from .models import Lobby, Player


class LobbyServer(BaseServer):
    """Server state plus the lobby requests."""

    def create_lobby(self, client_id: str, name: str) -> Lobby | None:
        """Open a lobby owned by the client's player; returns it, or None on failure."""
        with self._lock:
            player, outcome = self._player_for_client(client_id)
            if not outcome.ok or player is None:
                self._queue_updates(client_id, [create_lobby_reply(outcome)])
                return None

            if player.id in self._player_lobby:
                self._queue_updates(
                    client_id,
                    [
                        create_lobby_reply(
                            Outcome.failure(
                                StatusCode.ALREADY_EXISTS, "player has already a lobby"
                            )
                        )
                    ],
                )
                return None

            lobby_id = _new_id(self._lobbies)
            if lobby_id is None:
                self._queue_updates(
                    client_id,
                    [
                        create_lobby_reply(
                            Outcome.failure(
                                StatusCode.INTERNAL,
                                "unable to create lobby after multiple attempts",
                            )
                        )
                    ],
                )
                return None

            lobby = Lobby(id=lobby_id, name=name, creator=player, players={player.id: player})
            self._lobbies[lobby_id] = lobby
            self._player_lobby[player.id] = lobby_id

            self._queue_updates(
                client_id,
                [
                    create_lobby_reply(Outcome(ok=True)),
                    navigation_update(NavigationPath.MY_LOBBY),
                    my_lobby_details(lobby),
                ],
            )
            return lobby

    def join_lobby(self, client_id: str, lobby_id: str) -> None:
        """Add the client's player to an existing lobby."""
        with self._lock:
            player, outcome = self._player_for_client(client_id)
            if not outcome.ok or player is None:
                self._queue_updates(client_id, [join_lobby_reply(outcome)])
                return

            if player.id in self._player_lobby:
                self._queue_updates(
                    client_id,
                    [
                        join_lobby_reply(
                            Outcome.failure(
                                StatusCode.ALREADY_EXISTS, "player has already a lobby"
                            )
                        )
                    ],
                )
                return

            lobby = self._lobbies.get(lobby_id)
            if lobby is None:
                self._queue_updates(
                    client_id,
                    [join_lobby_reply(Outcome.failure(StatusCode.NOT_FOUND, "lobby not found"))],
                )
                return

            lobby.players.setdefault(player.id, player)

            updates = [
                join_lobby_reply(Outcome(ok=True)),
                navigation_update(NavigationPath.MY_LOBBY),
                my_lobby_details(lobby),
            ]
            self._notify_members_on_join(client_id, lobby)
            self._queue_updates(client_id, updates)

    def leave_my_lobby(self, client_id: str) -> None:
        """Remove the client's player from the lobby it owns."""
        with self._lock:
            player, outcome = self._player_for_client(client_id)
            if not outcome.ok or player is None:
                self._queue_updates(client_id, [leave_my_lobby_reply(outcome)])
                return

            lobby_id = self._player_lobby.get(player.id)
            if lobby_id is None:
                self._queue_updates(
                    client_id,
                    [
                        leave_my_lobby_reply(
                            Outcome.failure(StatusCode.INTERNAL, "player does not have a lobby")
                        )
                    ],
                )
                return

            lobby = self._lobbies.get(lobby_id)
            if lobby is None:
                self._queue_updates(
                    client_id,
                    [leave_my_lobby_reply(Outcome.failure(StatusCode.NOT_FOUND, "lobby not found"))],
                )
                return

            if player.id not in lobby.players:
                self._queue_updates(
                    client_id,
                    [
                        leave_my_lobby_reply(
                            Outcome.failure(StatusCode.NOT_FOUND, "player is not a lobby member")
                        )
                    ],
                )
                return

            leaving = lobby.players[player.id]
            self._player_lobby.pop(player.id, None)
            lobby.players.pop(player.id, None)

            if leaving is not None:
                self._notify_members_on_leave(client_id, leaving)
            self._queue_updates(
                client_id,
                [leave_my_lobby_reply(Outcome(ok=True)), navigation_update(NavigationPath.HOME)],
            )

    def _notify_members_on_join(self, joining_client_id: str, lobby: Lobby) -> None:
        for member in list(lobby.players.values()):
            if member is None:
                continue
            other_client_id = self._player_client.get(member.id)
            if other_client_id is None or other_client_id == joining_client_id:
                continue
            self._queue_updates(other_client_id, [my_lobby_joiner_update(member)])

    def _notify_members_on_leave(self, leaving_client_id: str, leaving: Player) -> None:
        lobby_id = self._player_lobby.get(leaving.id)
        if lobby_id is None:
            return
        lobby = self._lobbies.get(lobby_id)
        if lobby is None:
            return
        for member in list(lobby.players.values()):
            if member is None:
                continue
            other_client_id = self._player_client.get(member.id)
            if other_client_id is None or other_client_id == leaving_client_id:
                continue
            self._queue_updates(other_client_id, [my_lobby_leaver_update(leaving)])