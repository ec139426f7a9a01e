"""Reversi (Othello) move-search engine.

Modules:
- config: tunables (search depth, endgame threshold, cache size, zobrist seed)
- core: board, evaluation, opening book, transposition table and search
- main: Engine facade pairing a game board with a strategy
"""

from .main import Engine

__all__ = ["Engine"]
