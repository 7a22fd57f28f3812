# tictacto

The game logic of a tic-tac-toe server for remote players. Clients obtain a
client id, sign in with a player name, gather in lobbies, start games
against other players and make moves. Everything that happens to a client
(navigation hints, lobby changes, moves, the next mover, wins and draws) is
queued for it as a list of updates.

The package uses only the standard library.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `tictacto.models`: `Consumer` (with `Consumer.from_dict` for a decoded
  JSON object with `public_key` and `name`), `Client`, `Player`, `Lobby`,
  `Game` and the `GameResult` enum.
- `tictacto.messages`: the enums `StatusCode` (gRPC-style status codes),
  `NavigationPath` (`LOGIN`, `HOME`, `MY_LOBBY`, `GAME`), `Mover` (`X`, `O`,
  `UNSPECIFIED`) and `Winner` (`you`, `other`); `Outcome` (with
  `Outcome.failure(code, message)`); `SubscriptionUpdate`, whose `to_dict()`
  gives the plain form `{kind: data}`; and one function per kind of update,
  such as `navigation_update`, `my_lobby_details`, `move_updates`,
  `next_mover_update`, `winner_update` and `draw_update`.
- `tictacto.core`: `RpcError`, `extract_client_id(metadata)` and
  `BaseServer` with `exchange`, `handshake`, `invalidate` and
  `pending_updates`.
- `tictacto.lobbies`: `LobbyServer`, which adds `create_lobby`,
  `join_lobby` and `leave_my_lobby`.
- `tictacto.games`: `GameServer`, which adds `create_game` and `make_move`,
  and the board rules `check_win(board)` and `check_draw(board)` on a board
  of nine cells.

## How requests behave

1. `exchange(public_key)` trades a known consumer's public key for a new
   client id. An unknown key raises `RpcError` with `NOT_FOUND`.
2. `handshake(client_id, player_name, player_pass)` registers a new player
   under the client. An unknown client raises `RpcError`. A player name can
   be taken only once; a second handshake with the same name is answered
   with an `ALREADY_EXISTS` outcome.
3. `create_lobby`, `join_lobby` and `leave_my_lobby` manage lobbies; the
   other members are told who joined and who left.
4. `create_game(client_id, player1_id, player2_id)` starts a game between
   two signed-in players. Who plays X and who plays O is drawn at random,
   and both players are sent the game start and the first mover.
5. `make_move(client_id, position)` places the player's mark at a position
   from 0 to 8. Both players then hear of the next mover, the winner, or a
   draw.
6. `invalidate(client_id)` signs the player out of the client.

Requests that fail on the game's rules do not raise: they queue a reply
carrying an `Outcome` with a status code and a message, such as "position
already occupied" or "player has already a lobby".

`extract_client_id` reads the client id from request metadata under the key
`ClientId` (matched without regard to case) and raises `RpcError` when it is
missing or empty.

## Example

```python
from tictacto.games import GameServer
from tictacto.models import Consumer

server = GameServer({"placeholder": Consumer(public_key="placeholder", name="Example front end")})

alice = server.exchange("placeholder")
bob = server.exchange("placeholder")
password = "password"
server.handshake(alice, "alice", password)
server.handshake(bob, "bob", password)

lobby = server.create_lobby(alice, "friends")
server.join_lobby(bob, lobby.id)
alice_id, bob_id = list(lobby.players)

game = server.create_game(alice, alice_id, bob_id)
first = alice if game.mover.id == alice_id else bob
server.make_move(first, 4)

for update in server.pending_updates(bob):
    print(update.to_dict())
```

## What it does not do

The package holds the game state and the requests in memory only. It has
no network server and no command to start one, does not read a consumers
file, and offers no subscription stream: the updates for a client are
read with `pending_updates`, which returns everything queued for that
client so far.