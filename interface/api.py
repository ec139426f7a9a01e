"""FastAPI REST interface for the engine."""

import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

from reversi.config import CONFIG
from reversi.core.board import Disc, ReversiBoard, count_discs, position_from_string, position_to_string
from reversi.core.search import SearchEngine
from reversi.core.utils import setup_logging

setup_logging(CONFIG.log_level)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared engine instance (preserves TT across requests).
engine = SearchEngine(depth=CONFIG.search.depth)
board = ReversiBoard()
_board_lock = threading.Lock()
# one search at a time: the engine's table and depth are shared
_search_lock = threading.Lock()

_TURNS = {"black": Disc.BLACK, "white": Disc.WHITE}


class PositionRequest(BaseModel):
    board: str  # 64 cells: . empty, X black, O white
    turn: str = "black"


class MoveRequest(BaseModel):
    move: str  # e.g. "f5"


class SearchRequest(BaseModel):
    depth: Optional[int] = None


def _state():
    black, white = count_discs(board.position)
    winner = board.winner()
    return {
        "board": position_to_string(board.position),
        "turn": board.turn.name.lower(),
        "legal_moves": [m.notation for m in board.get_legal_moves()],
        "discs": {"black": black, "white": white},
        "is_game_over": board.is_game_over(),
        "winner": winner.name.lower() if winner else None,
    }


@app.get("/board")
def get_board():
    with _board_lock:
        return _state()


@app.post("/position")
def set_position(req: PositionRequest):
    with _board_lock:
        turn = _TURNS.get(req.turn.lower())
        if turn is None:
            raise HTTPException(status_code=400, detail=f"Invalid turn: {req.turn}")
        try:
            position = position_from_string(req.board)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid board: {e}")
        board.set_position(position, turn)
        return _state()


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        if not board.make_move(req.move):
            raise HTTPException(status_code=400, detail=f"Illegal move: {req.move}")
        return {**_state(), "move": req.move}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _board_lock:
        if board.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        moves = board.get_legal_moves()
        if not moves:
            raise HTTPException(status_code=400, detail="Side to move has to pass")
        if req.depth is not None and req.depth < 1:
            raise HTTPException(status_code=400, detail=f"Invalid depth: {req.depth}")
        depth = req.depth or CONFIG.search.depth
        position, turn = board.position, board.turn

    with _search_lock:
        engine.max_depth = depth
        best, score = engine.search_best_move(position, turn, moves)
    return {
        "best_move": best.notation if best else None,
        "score": score,
        "turn": turn.name.lower(),
        "board": position_to_string(position),
    }


@app.post("/pass")
def pass_turn():
    with _board_lock:
        if not board.must_pass():
            raise HTTPException(status_code=400, detail="Side to move has a legal move or the game is over")
        board.pass_turn()
        return _state()


@app.post("/reset")
def reset_board():
    with _board_lock:
        board.reset()
        with _search_lock:
            engine.clear()
        return _state()
