import pytest

from tictacto.models import Client, Consumer, Game, GameResult, Lobby, Player


def test_consumer_from_dict_reads_fields():
    consumer = Consumer.from_dict({"public_key": "placeholder", "name": "web"})
    assert consumer.public_key == "placeholder"
    assert consumer.name == "web"


def test_consumer_from_dict_missing_fields_are_empty():
    consumer = Consumer.from_dict({})
    assert consumer == Consumer(public_key="", name="")


def test_consumer_from_dict_ignores_unknown_keys():
    consumer = Consumer.from_dict({"public_key": "k1", "name": "n", "extra": 5})
    assert consumer == Consumer("k1", "n")


def test_consumer_from_dict_rejects_non_object():
    with pytest.raises(ValueError):
        Consumer.from_dict(["public_key"])


def test_consumer_from_dict_rejects_non_string_field():
    with pytest.raises(ValueError):
        Consumer.from_dict({"public_key": 42, "name": "n"})


def test_game_defaults_to_empty_board_and_initial_result():
    game = Game(id="g1")
    assert game.board == [""] * 9
    assert game.result is GameResult.INITIAL
    assert game.mover is None


def test_game_boards_are_independent():
    first = Game(id="a")
    second = Game(id="b")
    first.board[4] = "p1"
    assert second.board[4] == ""


def test_game_result_values_and_ordering():
    finished = Game(id="g", result=GameResult.DRAW)
    fresh = Game(id="h")
    assert finished.result == 3
    assert fresh.result == 0
    assert fresh.result < GameResult.ONGOING < GameResult.WIN < finished.result


def test_lobby_players_default_empty_and_independent():
    creator = Player(id="p1", name="alice")
    lobby = Lobby(id="l1", name="room", creator=creator)
    lobby.players[creator.id] = creator
    other = Lobby(id="l2", name="room2")
    assert other.players == {}
    assert lobby.players == {"p1": creator}


def test_player_and_client_hold_values():
    password = "password"
    player = Player(id="p1", name="bob", password=password)
    assert player.password == password
    assert Client(id="c1").id == "c1"