from typing import Optional, Tuple

from reversi.config import CONFIG
from reversi.core.board import ReversiBoard
from reversi.core.search import make_strategy


class Engine:
    def __init__(self, strategy=None, depth: Optional[int] = None):
        self.board = ReversiBoard()
        if strategy is None or isinstance(strategy, str):
            name = strategy or CONFIG.search.strategy
            kwargs = {"depth": depth} if depth is not None and name == "search" else {}
            strategy = make_strategy(name, **kwargs)
        self.search = strategy

    def get_best_move(self) -> Tuple[Optional[str], int]:
        move, value = self.search.search_best_move(self.board.position, self.board.turn,
                                                   self.board.get_legal_moves())
        return (move.notation if move else None), value

    def make_move(self, move_str: str) -> bool:
        return self.board.make_move(move_str)

    def play_engine_move(self) -> Optional[str]:
        """Search and play for the side to move; None when it has nothing to play."""
        notation, _ = self.get_best_move()
        if notation is not None:
            self.board.make_move(notation)
        return notation

    def print_board(self):
        self.board.print_board()
