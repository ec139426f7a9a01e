from typing import Optional

from reversi.config import CONFIG
from reversi.core.board import Disc, Position, count_discs, count_empty
from reversi.core.weights import weights_for


class Evaluator:
    def __init__(self):
        self.cfg = CONFIG.search

    def evaluate(self, position: Position, mover: Disc, empty_count: Optional[int] = None) -> int:
        """Weighted disc sum from ``mover``'s point of view (positive = good for mover)."""
        if empty_count is None:
            empty_count = count_empty(position)
        weights = weights_for(empty_count)
        opponent = mover.opponent()

        score = 0
        for idx, cell in enumerate(position):
            if cell == mover:
                score += weights[idx]
            elif cell == opponent:
                score -= weights[idx]
        return score

    def final_score(self, position: Position, mover: Disc, bonus: Optional[int] = None) -> int:
        """Disc differential of a finished game for ``mover``.

        A decisive result is pushed away from zero by ``bonus`` so that any
        win outranks any draw; a draw scores 0.
        """
        if bonus is None:
            bonus = self.cfg.win_bonus
        black, white = count_discs(position)
        diff = black - white
        if diff > 0:
            diff += bonus
        elif diff < 0:
            diff -= bonus
        return diff if mover == Disc.BLACK else -diff
