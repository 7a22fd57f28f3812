"""Tic-tac-toe game state: clients, players, lobbies, games and the updates queued for clients."""

__version__ = "0.1.0"