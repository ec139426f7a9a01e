"""Board representation, move generation and a move-history wrapper.

Positions are plain tuples of 64 ``Disc`` values in row-major order
(index = row * 8 + col). Nothing here mutates a position in place, so a
parent position can be shared freely between search branches.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

SIZE = 8
CELLS = SIZE * SIZE

DIRECTIONS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1),
)


class Disc(IntEnum):
    EMPTY = 0
    BLACK = 1
    WHITE = 2

    def opponent(self) -> "Disc":
        if self == Disc.BLACK:
            return Disc.WHITE
        if self == Disc.WHITE:
            return Disc.BLACK
        raise ValueError("EMPTY has no opponent")


Position = Tuple[Disc, ...]

_DIAGRAM_SYMBOLS = {
    ".": Disc.EMPTY, "-": Disc.EMPTY, "0": Disc.EMPTY,
    "X": Disc.BLACK, "B": Disc.BLACK, "*": Disc.BLACK,
    "O": Disc.WHITE, "W": Disc.WHITE,
}
_PRINT_SYMBOLS = {Disc.EMPTY: ".", Disc.BLACK: "X", Disc.WHITE: "O"}


def parse_notation(text: str) -> Tuple[int, int]:
    """Parse ``"f5"`` into ``(row, col)``; file a-h is the column, rank 1-8 the row."""
    if not isinstance(text, str) or len(text) != 2:
        raise ValueError(f"Invalid move notation: {text!r}")
    file_ch, rank_ch = text[0].lower(), text[1]
    if not ("a" <= file_ch <= "h") or not ("1" <= rank_ch <= "8"):
        raise ValueError(f"Invalid move notation: {text!r}")
    return int(rank_ch) - 1, ord(file_ch) - ord("a")


def to_notation(row: int, col: int) -> str:
    return f"{chr(ord('a') + col)}{row + 1}"


@dataclass(frozen=True)
class Move:
    row: int
    col: int
    flips: Tuple[int, ...] = ()

    @property
    def index(self) -> int:
        return self.row * SIZE + self.col

    @property
    def notation(self) -> str:
        return to_notation(self.row, self.col)

    def __str__(self) -> str:
        return self.notation


def initial_position() -> Position:
    cells = [Disc.EMPTY] * CELLS
    cells[3 * SIZE + 3] = Disc.WHITE
    cells[4 * SIZE + 4] = Disc.WHITE
    cells[3 * SIZE + 4] = Disc.BLACK
    cells[4 * SIZE + 3] = Disc.BLACK
    return tuple(cells)


def position_from_string(text: str) -> Position:
    """Build a position from a 64-symbol diagram; whitespace is ignored."""
    symbols = [ch for ch in text if not ch.isspace()]
    if len(symbols) != CELLS:
        raise ValueError(f"Board diagram needs {CELLS} cells, got {len(symbols)}")
    try:
        return tuple(_DIAGRAM_SYMBOLS[ch.upper()] for ch in symbols)
    except KeyError as e:
        raise ValueError(f"Unknown board symbol: {e.args[0]!r}") from None


def position_to_string(position: Position) -> str:
    return "".join(_PRINT_SYMBOLS[c] for c in position)


def count_discs(position: Position) -> Tuple[int, int]:
    """Return ``(black, white)`` disc counts."""
    black = white = 0
    for cell in position:
        if cell == Disc.BLACK:
            black += 1
        elif cell == Disc.WHITE:
            white += 1
    return black, white


def count_empty(position: Position) -> int:
    return sum(1 for cell in position if cell == Disc.EMPTY)


def _flips_for(position: Position, row: int, col: int, mover: Disc, opponent: Disc) -> List[int]:
    flips: List[int] = []
    for dr, dc in DIRECTIONS:
        r, c = row + dr, col + dc
        run: List[int] = []
        while 0 <= r < SIZE and 0 <= c < SIZE and position[r * SIZE + c] == opponent:
            run.append(r * SIZE + c)
            r += dr
            c += dc
        # a run only counts when a mover disc closes it inside the board
        if run and 0 <= r < SIZE and 0 <= c < SIZE and position[r * SIZE + c] == mover:
            flips.extend(run)
    return flips


def legal_moves(position: Position, mover: Disc) -> List[Move]:
    """All legal moves for ``mover`` in cell-index order. Empty means pass."""
    opponent = mover.opponent()
    moves: List[Move] = []
    for idx in range(CELLS):
        if position[idx] != Disc.EMPTY:
            continue
        row, col = divmod(idx, SIZE)
        flips = _flips_for(position, row, col, mover, opponent)
        if flips:
            moves.append(Move(row, col, tuple(flips)))
    return moves


def has_legal_move(position: Position, mover: Disc) -> bool:
    opponent = mover.opponent()
    for idx in range(CELLS):
        if position[idx] == Disc.EMPTY:
            row, col = divmod(idx, SIZE)
            if _flips_for(position, row, col, mover, opponent):
                return True
    return False


def apply_move(position: Position, move: Move, mover: Disc) -> Position:
    """Return the position after ``mover`` plays ``move``; the input is untouched."""
    cells = list(position)
    cells[move.index] = mover
    for idx in move.flips:
        cells[idx] = mover
    return tuple(cells)


def find_move(moves: List[Move], row: int, col: int) -> Optional[Move]:
    for move in moves:
        if move.row == row and move.col == col:
            return move
    return None


class ReversiBoard:
    """Stateful game wrapper providing side-to-move and move history tracking."""

    def __init__(self, position: Optional[Position] = None, turn: Disc = Disc.BLACK):
        """Initialize from a position or the standard starting position."""
        self.position: Position = position if position is not None else initial_position()
        self.turn = turn
        self.move_history: List[Tuple[Disc, Optional[str], Position]] = []

    def reset(self):
        """Reset to the initial position."""
        self.position = initial_position()
        self.turn = Disc.BLACK
        self.move_history.clear()

    def set_position(self, position: Position, turn: Disc):
        self.position = position
        self.turn = turn
        self.move_history.clear()

    def get_legal_moves(self) -> List[Move]:
        return legal_moves(self.position, self.turn)

    def make_move(self, move_str: str) -> bool:
        """Play a move in notation (e.g. 'f5'). Returns True if legal."""
        try:
            row, col = parse_notation(move_str)
        except ValueError:
            return False
        move = find_move(self.get_legal_moves(), row, col)
        if move is None:
            return False
        self.push(move)
        return True

    def push(self, move: Move):
        self.move_history.append((self.turn, move.notation, self.position))
        self.position = apply_move(self.position, move, self.turn)
        self.turn = self.turn.opponent()
        # forced pass: the other side keeps the turn
        if self.must_pass():
            self.pass_turn()

    def pass_turn(self):
        self.move_history.append((self.turn, None, self.position))
        self.turn = self.turn.opponent()

    def must_pass(self) -> bool:
        """True when the side to move has no move but the opponent does."""
        return not has_legal_move(self.position, self.turn) and has_legal_move(self.position, self.turn.opponent())

    def undo_move(self):
        """Undo the last placement together with any forced passes after it."""
        while self.move_history:
            turn, notation, position = self.move_history.pop()
            self.turn, self.position = turn, position
            if notation is not None:
                break

    def is_game_over(self) -> bool:
        return not has_legal_move(self.position, Disc.BLACK) and not has_legal_move(self.position, Disc.WHITE)

    def winner(self) -> Optional[Disc]:
        """Side with more discs once the game is over, else None (also on a draw)."""
        if not self.is_game_over():
            return None
        black, white = count_discs(self.position)
        if black == white:
            return None
        return Disc.BLACK if black > white else Disc.WHITE

    def print_board(self):
        """Print ASCII representation."""
        diagram = position_to_string(self.position)
        print("  a b c d e f g h")
        for row in range(SIZE):
            print(row + 1, " ".join(diagram[row * SIZE:(row + 1) * SIZE]))
