import pytest

from tictacto.games import GameServer, check_draw, check_win
from tictacto.messages import Mover, NavigationPath, StatusCode, Winner, mover_of
from tictacto.models import Consumer

PUBLIC_KEY = "public-key-1"


@pytest.fixture
def server():
    return GameServer({PUBLIC_KEY: Consumer(public_key=PUBLIC_KEY, name="app")})


def _login(server, name):
    client_id = server.exchange(PUBLIC_KEY)
    server.handshake(client_id, name, "password")
    return client_id


@pytest.fixture
def pair(server):
    """Two logged-in clients and their player ids, learned through a lobby."""
    alice = _login(server, "alice")
    bob = _login(server, "bob")
    lobby = server.create_lobby(alice, "room")
    server.join_lobby(bob, lobby.id)
    ids = {p.name: p.id for p in lobby.players.values()}
    return alice, ids["alice"], bob, ids["bob"]


def _last(server, client_id):
    return server.pending_updates(client_id)[-1]


def test_check_win_lines():
    assert check_win(["a", "a", "a", "", "", "", "", "", ""])
    assert check_win(["b", "", "", "", "b", "", "", "", "b"])
    assert check_win(["", "", "c", "", "", "c", "", "", "c"])
    assert not check_win([""] * 9)
    assert not check_win(["a", "b", "a", "", "", "", "", "", ""])


def test_check_draw():
    assert check_draw(["a"] * 9)
    assert not check_draw(["a"] * 8 + [""])


def test_create_game_starts_both_players(server, pair):
    alice, alice_id, bob, bob_id = pair
    game = server.create_game(alice, alice_id, bob_id)
    assert {game.mover_x.id, game.mover_o.id} == {alice_id, bob_id}
    assert game.mover.id == alice_id
    assert _last(server, alice).kind in {"next_mover_update"}

    for client_id, player_id in ((alice, alice_id), (bob, bob_id)):
        nav, start, nxt = server.pending_updates(client_id)[-3:]
        assert nav.data["path"] == NavigationPath.GAME
        assert start.data["you"] == mover_of(game, player_id)
        assert start.data["other"] != start.data["you"]
        assert nxt.data["mover"] == mover_of(game, alice_id)

    replies = [u for u in server.pending_updates(alice) if u.kind == "create_game_reply"]
    assert replies[-1].data["outcome"].ok is True


def test_create_game_unknown_player(server, pair):
    alice, alice_id, _, _ = pair
    assert server.create_game(alice, alice_id, "ghost") is None
    outcome = _last(server, alice).data["outcome"]
    assert outcome.error_code == StatusCode.INTERNAL
    assert outcome.error_message == "client ID for player 2 not found"


def test_create_game_player_already_playing(server, pair):
    alice, alice_id, bob, bob_id = pair
    carol = _login(server, "carol")
    server.create_game(alice, alice_id, bob_id)
    server.create_game(carol, bob_id, alice_id)
    outcome = _last(server, carol).data["outcome"]
    assert outcome.error_code == StatusCode.ALREADY_EXISTS
    assert outcome.error_message == "player 1 is currently in a game"


def test_create_game_creator_already_playing(server, pair):
    alice, alice_id, bob, bob_id = pair
    server.create_game(alice, alice_id, bob_id)
    server.create_game(alice, alice_id, bob_id)
    outcome = _last(server, alice).data["outcome"]
    assert outcome.error_message == "creator is currently in a game"


def test_make_move_not_in_game(server, pair):
    alice = pair[0]
    server.make_move(alice, 0)
    update = _last(server, alice)
    assert update.kind == "make_move_reply"
    assert update.data["outcome"].error_code == StatusCode.NOT_FOUND
    assert update.data["outcome"].error_message == "player is not in a game"


@pytest.mark.parametrize("position", [-1, 9])
def test_make_move_out_of_range(server, pair, position):
    alice, alice_id, bob, bob_id = pair
    server.create_game(alice, alice_id, bob_id)
    server.make_move(alice, position)
    outcome = _last(server, alice).data["outcome"]
    assert outcome.error_code == StatusCode.INVALID_ARGUMENT
    assert outcome.error_message == "position out of range"


def test_make_move_occupied(server, pair):
    alice, alice_id, bob, bob_id = pair
    game = server.create_game(alice, alice_id, bob_id)
    server.make_move(alice, 4)
    server.make_move(bob, 4)
    outcome = _last(server, bob).data["outcome"]
    assert outcome.error_message == "position already occupied"
    assert game.board[4] == alice_id


def test_move_switches_mover(server, pair):
    alice, alice_id, bob, bob_id = pair
    game = server.create_game(alice, alice_id, bob_id)
    server.make_move(alice, 0)
    assert game.mover.id == bob_id
    for client_id in (alice, bob):
        assert _last(server, client_id).data["mover"] == mover_of(game, bob_id)
    replies = [u for u in server.pending_updates(alice) if u.kind == "make_move_reply"]
    assert replies[-1].data["outcome"].ok is True


def test_win_is_announced_to_both(server, pair):
    alice, alice_id, bob, bob_id = pair
    game = server.create_game(alice, alice_id, bob_id)
    for client_id, position in ((alice, 0), (bob, 3), (alice, 1), (bob, 4), (alice, 2)):
        server.make_move(client_id, position)
    assert check_win(game.board)
    expected_mover = Mover.X if game.mover_x.id == alice_id else Mover.O
    for client_id in (alice, bob):
        update = _last(server, client_id)
        assert update.kind == "winner_update"
        assert update.data["winner"] == Winner.you
        assert update.data["mover"] == expected_mover


def test_draw_is_announced_to_both(server, pair):
    alice, alice_id, bob, bob_id = pair
    game = server.create_game(alice, alice_id, bob_id)
    moves = [(alice, 0), (bob, 1), (alice, 2), (bob, 4), (alice, 3),
             (bob, 5), (alice, 7), (bob, 6), (alice, 8)]
    for client_id, position in moves:
        server.make_move(client_id, position)
    assert check_draw(game.board)
    assert not check_win(game.board)
    for client_id in (alice, bob):
        assert _last(server, client_id).kind == "draw_update"