"""Core engine components: board, evaluator, opening book, search, and transposition table."""

from .board import Disc, Move, ReversiBoard
from .book import OpeningBook
from .evaluator import Evaluator
from .search import GreedyStrategy, SearchEngine, make_strategy
from .transposition import TranspositionTable, Zobrist
