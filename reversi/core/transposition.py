"""Zobrist hashing and a fixed-size transposition table.

This module provides two main classes:

- Zobrist: builds the per-(cell, occupant) random keys from a fixed seed and
  computes a 64-bit key for a position, either from scratch or
  incrementally from the parent's key and the move that was played.

- TranspositionTable: a fixed number of slots (a power of two) indexed by
  the low bits of the key. Each slot holds one TTEntry; a store always
  replaces whatever is there, so lookups compare the full key before
  trusting an entry.

Usage (example):

    from reversi.core.transposition import TranspositionTable, Zobrist, TT_EXACT

    z = Zobrist(seed=12345)
    tt = TranspositionTable(65536)
    key = z.hash(position)
    tt.store(key, depth=3, value=120, flag=TT_EXACT)
    value, hit = tt.probe(key, depth=3, alpha=-100, beta=100)

"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from reversi.core.board import CELLS, Disc, Move, Position

TT_EXACT = 0
TT_ALPHA = 1  # upper bound: the node failed low
TT_BETA = 2   # lower bound: the node failed high

OCCUPANTS = (Disc.EMPTY, Disc.BLACK, Disc.WHITE)


def make_zobrist_table(seed: int) -> Dict[str, object]:
    """Create the zobrist table for ``seed``.

    Structure returned:
      {
        "cells": [64 lists of 3 ints, indexed by Disc value],
        "side": int,
      }
    """
    rng = random.Random(seed)
    cells = [[rng.getrandbits(64) for _ in OCCUPANTS] for _ in range(CELLS)]
    side_key = rng.getrandbits(64)
    return {"cells": cells, "side": side_key}


@dataclass
class TTEntry:
    key: int
    depth: int
    value: int
    flag: int

    def __iter__(self):
        return iter((self.key, self.depth, self.value, self.flag))


class Zobrist:
    """Zobrist hash utilities.

    ``hash`` covers cell contents only. ``update`` applies a move to an
    existing key: since XOR is its own inverse, toggling the old occupant
    out and the new one in gives the same result as hashing the child
    position from scratch, in any order.
    """

    def __init__(self, seed: int):
        self.seed = seed
        self.table = make_zobrist_table(seed)
        self._cells: List[List[int]] = self.table["cells"]
        self._side: int = self.table["side"]

    def hash(self, position: Position) -> int:
        cells = self._cells
        h = 0
        for idx, disc in enumerate(position):
            h ^= cells[idx][disc]
        return h

    def update(self, h: int, move: Move, mover: Disc) -> int:
        cells = self._cells
        opponent = mover.opponent()
        dest = cells[move.index]
        h ^= dest[Disc.EMPTY] ^ dest[mover]
        for idx in move.flips:
            h ^= cells[idx][opponent] ^ cells[idx][mover]
        return h

    def side_key(self, h: int, mover: Disc) -> int:
        """Fold the side to move into ``h`` (xor when white is to move)."""
        return h ^ self._side if mover == Disc.WHITE else h


class TranspositionTable:
    """Fixed-capacity transposition table keyed by zobrist hash.

    Methods:
      - probe(key, depth, alpha, beta) -> (value, hit)
      - get(key) -> Optional[TTEntry]
      - store(key, depth, value, flag)
      - clear()
    """

    def __init__(self, size: int = 65536):
        if size <= 0 or size & (size - 1):
            raise ValueError(f"Transposition table size must be a power of two, got {size}")
        self.size = size
        self._mask = size - 1
        self._slots: List[Optional[TTEntry]] = [None] * size
        self.probes = 0
        self.hits = 0

    def get(self, key: int) -> Optional[TTEntry]:
        entry = self._slots[key & self._mask]
        # a different position may own the slot
        if entry is None or entry.key != key:
            return None
        return entry

    def probe(self, key: int, depth: int, alpha: int, beta: int) -> Tuple[int, bool]:
        self.probes += 1
        entry = self.get(key)
        if entry is None or entry.depth < depth:
            return 0, False
        if entry.flag == TT_EXACT:
            self.hits += 1
            return entry.value, True
        if entry.flag == TT_ALPHA and entry.value <= alpha:
            self.hits += 1
            return alpha, True
        if entry.flag == TT_BETA and entry.value >= beta:
            self.hits += 1
            return beta, True
        return 0, False

    def store(self, key: int, depth: int, value: int, flag: int):
        self._slots[key & self._mask] = TTEntry(key, depth, value, flag)

    def clear(self):
        self._slots = [None] * self.size
        self.probes = 0
        self.hits = 0

    def __len__(self) -> int:
        return sum(1 for entry in self._slots if entry is not None)
