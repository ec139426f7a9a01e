"""Opening book keyed by a 64-character position string.

The book is a TOML file with a single ``[positions]`` table::

    [positions]
    "0000000000000000000000000002100000012000000000000000000000000000" = ["f5", "d3"]

Each key has one character per cell in row-major order: ``0`` empty,
``1`` the side to move, ``2`` its opponent. Values list replies in
preference order. A missing or broken book is not an error; it simply has
no moves.
"""

import logging
import os
import tomllib
from typing import Dict, List, Optional

from reversi.core.board import CELLS, Disc, Move, Position, find_move, legal_moves, parse_notation

logger = logging.getLogger(__name__)

KEY_SYMBOLS = frozenset("012")


def book_key(position: Position, mover: Disc) -> str:
    opponent = mover.opponent()
    chars = []
    for cell in position:
        if cell == mover:
            chars.append("1")
        elif cell == opponent:
            chars.append("2")
        else:
            chars.append("0")
    return "".join(chars)


class OpeningBook:
    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._entries: Optional[Dict[str, List[str]]] = None

    @property
    def entries(self) -> Dict[str, List[str]]:
        if self._entries is None:
            self._entries = self._load()
        return self._entries

    def __len__(self) -> int:
        return len(self.entries)

    def _load(self) -> Dict[str, List[str]]:
        if not self.path or not os.path.exists(self.path):
            logger.debug("No opening book at %s", self.path)
            return {}
        try:
            with open(self.path, "rb") as f:
                raw = tomllib.load(f)
        except (OSError, ValueError) as e:  # TOMLDecodeError, UnicodeDecodeError
            logger.warning("Ignoring unreadable opening book %s: %s", self.path, e)
            return {}

        positions = raw.get("positions")
        if not isinstance(positions, dict):
            logger.warning("Opening book %s has no [positions] table", self.path)
            return {}

        entries: Dict[str, List[str]] = {}
        for key, replies in positions.items():
            if len(key) != CELLS or not set(key) <= KEY_SYMBOLS:
                logger.debug("Skipping malformed book key %r", key)
                continue
            if not isinstance(replies, list):
                logger.debug("Skipping book entry with non-list replies for %s", key)
                continue
            valid = []
            for reply in replies:
                try:
                    parse_notation(reply)
                except ValueError:
                    logger.debug("Skipping malformed book move %r", reply)
                    continue
                valid.append(reply)
            if valid:
                entries[key] = valid
        logger.info("Loaded %d opening book positions from %s", len(entries), os.path.basename(self.path))
        return entries

    def lookup(self, position: Position, mover: Disc, moves: Optional[List[Move]] = None) -> List[Move]:
        """Legal moves recommended by the book, in the book's preference order."""
        replies = self.entries.get(book_key(position, mover))
        if not replies:
            return []
        if moves is None:
            moves = legal_moves(position, mover)
        matched: List[Move] = []
        for reply in replies:
            move = find_move(moves, *parse_notation(reply))
            if move is not None and move not in matched:
                matched.append(move)
        return matched
