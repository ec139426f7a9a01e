import logging
import time
from typing import List, Optional, Tuple

from reversi.config import CONFIG
from reversi.core.board import Disc, Move, Position, apply_move, count_empty, has_legal_move, legal_moves
from reversi.core.book import OpeningBook
from reversi.core.evaluator import Evaluator
from reversi.core.transposition import TT_ALPHA, TT_BETA, TT_EXACT, TranspositionTable, Zobrist
from reversi.core.utils import format_info

logger = logging.getLogger(__name__)

INF = 1000000
BOOK_SCORE = 9999    # reported for moves taken straight from the opening book
EXACT_DEPTH = 999    # cache depth tag for exhaustive (game-end) results

MIDGAME = "midgame"
ENDGAME = "endgame"


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None, depth: Optional[int] = None,
                 endgame_threshold: Optional[int] = None, tt_size: Optional[int] = None,
                 seed: Optional[int] = None, book: Optional[OpeningBook] = None,
                 use_book: Optional[bool] = None, use_tt: bool = True):
        cfg = CONFIG.search
        self.evaluator = evaluator or Evaluator()
        self.max_depth = depth if depth is not None else cfg.depth
        if self.max_depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {self.max_depth}")
        self.endgame_threshold = endgame_threshold if endgame_threshold is not None else cfg.endgame_threshold
        self.book_threshold = cfg.book_threshold
        self.win_bonus = cfg.win_bonus

        self.zobrist = Zobrist(seed if seed is not None else cfg.zobrist_seed)
        self.tt = TranspositionTable(tt_size if tt_size is not None else cfg.tt_size)
        self.use_tt = use_tt

        if use_book is None:
            use_book = cfg.use_book
        if book is None and use_book:
            book = OpeningBook(CONFIG.book_file())
        self.book = book if use_book else None

        self.nodes = 0
        self._phase: Optional[str] = None

    def phase_for(self, empty_count: int) -> str:
        return ENDGAME if empty_count <= self.endgame_threshold else MIDGAME

    def get_book_move(self, position: Position, mover: Disc, moves: List[Move]) -> Optional[Move]:
        """First legal book reply for this position, if the book knows it."""
        if self.book is None or count_empty(position) < self.book_threshold:
            return None
        book_moves = self.book.lookup(position, mover, moves)
        if book_moves:
            logger.info("Book move: %s", book_moves[0].notation)
            return book_moves[0]
        return None

    def search_best_move(self, position: Position, mover: Disc,
                         moves: Optional[List[Move]] = None) -> Tuple[Optional[Move], int]:
        if moves is None:
            moves = legal_moves(position, mover)
        if not moves:
            # nothing to choose from; the caller has to pass
            return None, 0

        book_move = self.get_book_move(position, mover, moves)
        if book_move is not None:
            return book_move, BOOK_SCORE

        empty = count_empty(position)
        phase = self.phase_for(empty)
        # depth tags are not comparable across phases
        if phase != self._phase:
            self.tt.clear()
            self._phase = phase

        self.nodes = 0
        hits_before = self.tt.hits
        start_time = time.time()

        best_move, best_score = self._search_root(position, moves, mover, empty, phase)

        elapsed = time.time() - start_time
        depth = None if phase == ENDGAME else self.max_depth
        logger.info(format_info(phase, depth, best_score, self.nodes, elapsed, best_move,
                                self.tt.hits - hits_before))
        return best_move, best_score

    def clear(self):
        self.tt.clear()
        self._phase = None

    def _search_root(self, position: Position, moves: List[Move], mover: Disc,
                     empty: int, phase: str) -> Tuple[Move, int]:
        key = self.zobrist.hash(position)
        opponent = mover.opponent()
        child_depth = self.max_depth - 1
        alpha, beta = -INF, INF
        best_score = -INF
        best_move = moves[0]

        for i, move in enumerate(moves):
            child = apply_move(position, move, mover)
            child_key = self.zobrist.update(key, move, mover)

            if phase == ENDGAME:
                score = -self._negaalpha(child, child_key, -beta, -alpha, opponent, empty - 1)
            elif i == 0:
                score = -self._negascout(child, child_key, child_depth, -beta, -alpha, opponent, empty - 1)
            else:
                score = -self._negascout(child, child_key, child_depth, -alpha - 1, -alpha, opponent, empty - 1)
                if alpha < score < beta:
                    score = -self._negascout(child, child_key, child_depth, -beta, -alpha, opponent, empty - 1)

            # strict comparison: the first of equal moves wins
            if score > best_score:
                best_score = score
                best_move = move
            if score > alpha:
                alpha = score

        return best_move, best_score

    def _store(self, key: int, depth: int, best_score: int, alpha_orig: int, beta: int):
        if best_score <= alpha_orig:
            flag = TT_ALPHA
        elif best_score >= beta:
            flag = TT_BETA
        else:
            flag = TT_EXACT
        self.tt.store(key, depth, best_score, flag)

    def _negascout(self, position: Position, key: int, depth: int, alpha: int, beta: int,
                   mover: Disc, empty: int) -> int:
        self.nodes += 1
        tt_key = self.zobrist.side_key(key, mover)

        if self.use_tt:
            tt_value, hit = self.tt.probe(tt_key, depth, alpha, beta)
            if hit:
                return tt_value

        if depth == 0:
            score = self.evaluator.evaluate(position, mover, empty)
            if self.use_tt:
                self.tt.store(tt_key, depth, score, TT_EXACT)
            return score

        moves = legal_moves(position, mover)
        opponent = mover.opponent()

        if not moves:
            if not has_legal_move(position, opponent):
                score = self.evaluator.evaluate(position, mover, empty)
                if self.use_tt:
                    self.tt.store(tt_key, depth, score, TT_EXACT)
                return score
            # forced pass: same position, other side, no depth spent
            return -self._negascout(position, key, depth, -beta, -alpha, opponent, empty)

        alpha_orig = alpha
        best_score = -INF

        for i, move in enumerate(moves):
            child = apply_move(position, move, mover)
            child_key = self.zobrist.update(key, move, mover)

            if i == 0:
                score = -self._negascout(child, child_key, depth - 1, -beta, -alpha, opponent, empty - 1)
            else:
                score = -self._negascout(child, child_key, depth - 1, -alpha - 1, -alpha, opponent, empty - 1)
                if alpha < score < beta:
                    score = -self._negascout(child, child_key, depth - 1, -beta, -alpha, opponent, empty - 1)

            if score > best_score:
                best_score = score
            if score > alpha:
                alpha = score
            if alpha >= beta:
                break

        if self.use_tt:
            self._store(tt_key, depth, best_score, alpha_orig, beta)
        return best_score

    def _negaalpha(self, position: Position, key: int, alpha: int, beta: int,
                   mover: Disc, empty: int) -> int:
        self.nodes += 1
        tt_key = self.zobrist.side_key(key, mover)

        if self.use_tt:
            tt_value, hit = self.tt.probe(tt_key, EXACT_DEPTH, alpha, beta)
            if hit:
                return tt_value

        moves = legal_moves(position, mover) if empty > 0 else []
        opponent = mover.opponent()

        if not moves:
            if empty == 0 or not has_legal_move(position, opponent):
                score = self.evaluator.final_score(position, mover, self.win_bonus)
                if self.use_tt:
                    self.tt.store(tt_key, EXACT_DEPTH, score, TT_EXACT)
                return score
            return -self._negaalpha(position, key, -beta, -alpha, opponent, empty)

        alpha_orig = alpha
        best_score = -INF

        for move in moves:
            child = apply_move(position, move, mover)
            child_key = self.zobrist.update(key, move, mover)
            score = -self._negaalpha(child, child_key, -beta, -alpha, opponent, empty - 1)

            if score > best_score:
                best_score = score
            if score > alpha:
                alpha = score
            if alpha >= beta:
                break

        if self.use_tt:
            self._store(tt_key, EXACT_DEPTH, best_score, alpha_orig, beta)
        return best_score


class GreedyStrategy:
    """One-ply fallback: plays the move whose resulting position evaluates best.

    No search, no cache and no book; the weakest but fastest strategy.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None):
        self.evaluator = evaluator or Evaluator()
        self.nodes = 0

    def search_best_move(self, position: Position, mover: Disc,
                         moves: Optional[List[Move]] = None) -> Tuple[Optional[Move], int]:
        if moves is None:
            moves = legal_moves(position, mover)
        if not moves:
            return None, 0

        self.nodes = 0
        best_move = None
        best_score = -INF
        for move in moves:
            self.nodes += 1
            score = self.evaluator.evaluate(apply_move(position, move, mover), mover)
            if score > best_score:
                best_score = score
                best_move = move
        return best_move, best_score

    def clear(self):
        pass


STRATEGIES = {
    "search": SearchEngine,
    "greedy": GreedyStrategy,
}


def make_strategy(name: Optional[str] = None, **kwargs):
    """Build the strategy registered under ``name`` (default from config)."""
    name = name or CONFIG.search.strategy
    try:
        factory = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown strategy {name!r}; expected one of {sorted(STRATEGIES)}") from None
    return factory(**kwargs)
