"""
Integration test suite for the Reversi engine.

Tests components working together end-to-end:
- Full game simulations (engine vs engine, engine vs greedy)
- Search + Evaluator + TT pipeline (cache transparency, reuse)
- Opening book + search
- Engine facade
- FastAPI REST API integration
"""

import random

import pytest

from reversi.config import CONFIG, Config
from reversi.core.board import (
    Disc,
    ReversiBoard,
    count_discs,
    count_empty,
    initial_position,
    legal_moves,
    position_from_string,
)
from reversi.core.search import BOOK_SCORE, GreedyStrategy, SearchEngine
from reversi.main import Engine


def play_game(black, white, board=None, max_plies=120):
    """Play a game between two strategies; returns the finished board and ply count."""
    board = board or ReversiBoard()
    players = {Disc.BLACK: black, Disc.WHITE: white}
    plies = 0
    while not board.is_game_over() and plies < max_plies:
        moves = board.get_legal_moves()
        if not moves:
            board.pass_turn()
            continue
        move, score = players[board.turn].search_best_move(board.position, board.turn, moves)
        assert move in moves, f"Illegal move {move} at ply {plies}"
        assert isinstance(score, int)
        board.push(move)
        plies += 1
    return board, plies


def midgame_positions():
    board = ReversiBoard()
    greedy = GreedyStrategy()
    found = []
    for ply in range(24):
        move, _ = greedy.search_best_move(board.position, board.turn)
        if move is None:
            break
        board.push(move)
        if ply % 6 == 5:
            found.append((board.position, board.turn))
    return found


def endgame_positions(count, empties, first_seed=100):
    found = []
    seed = first_seed
    while len(found) < count:
        rng = random.Random(seed)
        seed += 1
        cells = [rng.choice((Disc.BLACK, Disc.WHITE)) for _ in range(64)]
        for idx in rng.sample(range(64), empties):
            cells[idx] = Disc.EMPTY
        position = tuple(cells)
        for mover in (Disc.BLACK, Disc.WHITE):
            if legal_moves(position, mover):
                found.append((position, mover))
                break
    return found


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE - FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """Tests that the engine can play complete games without crashing."""

    def test_engine_vs_engine_completes(self):
        """Two engines play a full game; it must end with a full accounting of discs."""
        engine = SearchEngine(depth=2, endgame_threshold=6)
        board, plies = play_game(engine, engine)

        assert board.is_game_over()
        assert plies > 20
        black, white = count_discs(board.position)
        assert black + white + count_empty(board.position) == 64

    def test_engine_vs_greedy(self):
        engine = SearchEngine(depth=2, endgame_threshold=6, use_book=False)
        board, _ = play_game(engine, GreedyStrategy())
        assert board.is_game_over()

    def test_greedy_vs_greedy_deterministic(self):
        a, _ = play_game(GreedyStrategy(), GreedyStrategy())
        b, _ = play_game(GreedyStrategy(), GreedyStrategy())
        assert a.position == b.position

    def test_move_history_covers_every_ply(self):
        engine = SearchEngine(depth=1, endgame_threshold=4, use_book=False)
        board, plies = play_game(engine, engine)
        placements = [entry for entry in board.move_history if entry[1] is not None]
        assert len(placements) == plies


# ════════════════════════════════════════════════════════════════════════════
#  SEARCH PIPELINE
# ════════════════════════════════════════════════════════════════════════════


class TestSearchPipeline:
    """Search, evaluator and transposition table working together."""

    @pytest.mark.parametrize("depth", [2, 3, 4])
    def test_cache_does_not_change_midgame_result(self, depth):
        for position, mover in midgame_positions():
            cached = SearchEngine(depth=depth, endgame_threshold=0, use_book=False)
            plain = SearchEngine(depth=depth, endgame_threshold=0, use_book=False, use_tt=False)
            assert cached.search_best_move(position, mover) == plain.search_best_move(position, mover)

    def test_cache_does_not_change_endgame_result(self):
        for position, mover in endgame_positions(4, 8):
            cached = SearchEngine(endgame_threshold=12, use_book=False)
            plain = SearchEngine(endgame_threshold=12, use_book=False, use_tt=False)
            assert cached.search_best_move(position, mover) == plain.search_best_move(position, mover)

    def test_tt_reuse_across_searches(self):
        position, mover = midgame_positions()[0]
        engine = SearchEngine(depth=3, endgame_threshold=0, use_book=False)
        first = engine.search_best_move(position, mover)
        hits = engine.tt.hits
        second = engine.search_best_move(position, mover)
        assert first == second
        assert engine.tt.hits > hits

    def test_phase_switch_clears_cache(self):
        engine = SearchEngine(depth=2, endgame_threshold=8, use_book=False)
        position, mover = midgame_positions()[0]
        engine.search_best_move(position, mover)
        z = engine.zobrist
        first_child = legal_moves(position, mover)[0]
        child_key = z.side_key(z.update(z.hash(position), first_child, mover), mover.opponent())
        assert engine.tt.get(child_key) is not None
        end_position, end_mover = endgame_positions(1, 4)[0]
        engine.search_best_move(end_position, end_mover)
        assert engine._phase == "endgame"
        assert engine.tt.get(child_key) is None

    def test_endgame_score_bounds(self):
        for position, mover in endgame_positions(3, 6):
            engine = SearchEngine(endgame_threshold=12, use_book=False)
            _, score = engine.search_best_move(position, mover)
            # differential of at most 64 plus the decisive bonus
            assert abs(score) <= 64 + CONFIG.search.win_bonus

    def test_independent_engines_do_not_share_state(self):
        position, mover = midgame_positions()[0]
        a = SearchEngine(depth=2, endgame_threshold=0, use_book=False)
        b = SearchEngine(depth=2, endgame_threshold=0, use_book=False)
        a.search_best_move(position, mover)
        assert len(b.tt) == 0

    def test_given_moves_not_regenerated(self):
        position, mover = midgame_positions()[0]
        moves = legal_moves(position, mover)
        engine = SearchEngine(depth=2, endgame_threshold=0, use_book=False)
        assert engine.search_best_move(position, mover, moves) == engine.search_best_move(position, mover)


# ════════════════════════════════════════════════════════════════════════════
#  OPENING BOOK + SEARCH
# ════════════════════════════════════════════════════════════════════════════


class TestBookIntegration:
    def test_book_line_then_search(self):
        engine = SearchEngine(depth=2, endgame_threshold=6)
        board = ReversiBoard()
        move, score = engine.search_best_move(board.position, board.turn)
        assert (move.notation, score) == ("f5", BOOK_SCORE)
        board.push(move)
        move, score = engine.search_best_move(board.position, board.turn)
        assert (move.notation, score) == ("d6", BOOK_SCORE)
        board.push(move)
        move, score = engine.search_best_move(board.position, board.turn)
        assert (move.notation, score) == ("c3", BOOK_SCORE)
        board.push(move)
        # out of book: a real search result
        move, score = engine.search_best_move(board.position, board.turn)
        assert move in board.get_legal_moves()
        assert score != BOOK_SCORE

    def test_unusable_book_falls_back_to_search(self, tmp_path):
        path = tmp_path / "book.toml"
        path.write_text("garbage ===")
        CONFIG.search.book_path = str(path)
        try:
            engine = SearchEngine(depth=1)
            move, score = engine.search_best_move(initial_position(), Disc.BLACK)
        finally:
            CONFIG.search.book_path = None
        assert move.notation == "d3"
        assert score != BOOK_SCORE


# ════════════════════════════════════════════════════════════════════════════
#  CONFIG
# ════════════════════════════════════════════════════════════════════════════


class TestConfig:
    def test_defaults(self):
        cfg = Config()
        assert cfg.search.depth == 6
        assert cfg.search.endgame_threshold == 12
        assert cfg.search.tt_size == 65536
        assert cfg.search.zobrist_seed == 12345

    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = Config.load_from_toml(str(tmp_path / "none.toml"))
        assert cfg.search.depth == 6

    def test_load_from_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            'log_level = "DEBUG"\n'
            "[search]\n"
            "depth = 4\n"
            "tt_size = 1024\n"
            "bogus = 1\n"
            "[ui]\n"
            'engine_name = "Test"\n'
        )
        cfg = Config.load_from_toml(str(path))
        assert cfg.search.depth == 4
        assert cfg.search.tt_size == 1024
        assert not hasattr(cfg.search, "bogus")
        assert cfg.ui.engine_name == "Test"
        assert cfg.log_level == "DEBUG"

    def test_book_file_default(self):
        cfg = Config()
        assert cfg.book_file().endswith("book.toml")


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE FACADE
# ════════════════════════════════════════════════════════════════════════════


class TestEngineWrapperIntegration:
    def test_get_best_move_from_book(self):
        eng = Engine(depth=2)
        assert eng.get_best_move() == ("f5", BOOK_SCORE)

    def test_greedy_engine(self):
        eng = Engine("greedy")
        assert eng.play_engine_move() == "d3"
        assert eng.board.turn == Disc.WHITE

    def test_make_move(self):
        eng = Engine("greedy")
        assert eng.make_move("f5") is True
        assert eng.make_move("f5") is False

    def test_custom_strategy_instance(self):
        strategy = SearchEngine(depth=1, use_book=False)
        eng = Engine(strategy)
        assert eng.search is strategy

    def test_no_move_when_side_must_pass(self):
        eng = Engine("greedy")
        eng.board.set_position(position_from_string("O" * 24 + "X" + "." * 39), Disc.BLACK)
        assert eng.get_best_move() == (None, 0)
        assert eng.play_engine_move() is None

    def test_plays_full_game(self):
        eng = Engine("greedy")
        while not eng.board.is_game_over():
            if eng.play_engine_move() is None:
                eng.board.pass_turn()
        black, white = count_discs(eng.board.position)
        assert black + white + count_empty(eng.board.position) == 64


# ════════════════════════════════════════════════════════════════════════════
#  FASTAPI REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests the REST API via FastAPI's TestClient."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app

        self.client = TestClient(app)
        self.client.post("/reset")
        yield
        self.client.post("/reset")

    def test_get_board_initial(self):
        r = self.client.get("/board")
        assert r.status_code == 200
        data = r.json()
        assert data["turn"] == "black"
        assert data["legal_moves"] == ["d3", "c4", "f5", "e6"]
        assert data["discs"] == {"black": 2, "white": 2}
        assert data["is_game_over"] is False

    def test_post_move_valid(self):
        r = self.client.post("/move", json={"move": "f5"})
        assert r.status_code == 200
        assert r.json()["turn"] == "white"

    def test_post_move_illegal(self):
        r = self.client.post("/move", json={"move": "a1"})
        assert r.status_code == 400

    def test_post_move_invalid_format(self):
        r = self.client.post("/move", json={"move": "zz9"})
        assert r.status_code == 400

    def test_set_position_valid(self):
        diagram = "O" * 24 + "X......X" + "." * 32
        r = self.client.post("/position", json={"board": diagram, "turn": "white"})
        assert r.status_code == 200
        assert r.json()["legal_moves"] == ["a5", "h5"]

    def test_set_position_invalid_board(self):
        r = self.client.post("/position", json={"board": "XO", "turn": "black"})
        assert r.status_code == 400

    def test_set_position_invalid_turn(self):
        r = self.client.post("/position", json={"board": "." * 64, "turn": "red"})
        assert r.status_code == 400

    def test_search_returns_move(self):
        self.client.post("/move", json={"move": "c4"})
        self.client.post("/move", json={"move": "c3"})
        r = self.client.post("/search", json={"depth": 2})
        assert r.status_code == 200
        data = r.json()
        legal = self.client.get("/board").json()["legal_moves"]
        assert data["best_move"] in legal
        assert isinstance(data["score"], int)

    def test_search_book_move(self):
        r = self.client.post("/search", json={"depth": 2})
        assert r.json()["best_move"] == "f5"
        assert r.json()["score"] == BOOK_SCORE

    def test_search_invalid_depth(self):
        r = self.client.post("/search", json={"depth": 0})
        assert r.status_code == 400

    def test_search_game_over_returns_400(self):
        self.client.post("/position", json={"board": "X" * 64, "turn": "black"})
        r = self.client.post("/search", json={})
        assert r.status_code == 400

    def test_search_pass_returns_400(self):
        self.client.post("/position", json={"board": "O" * 24 + "X" + "." * 39, "turn": "black"})
        r = self.client.post("/search", json={})
        assert r.status_code == 400

    def test_reset_board(self):
        self.client.post("/move", json={"move": "f5"})
        r = self.client.post("/reset")
        assert r.status_code == 200
        assert r.json()["turn"] == "black"

    def test_full_api_game_flow(self):
        self.client.post("/position", json={"board": "O" * 24 + "X......X" + "." * 32, "turn": "white"})
        r = self.client.post("/move", json={"move": "a5"})
        assert r.status_code == 200
        # black is stuck, so white keeps the move
        assert r.json()["turn"] == "white"
        r = self.client.post("/move", json={"move": "h5"})
        data = r.json()
        assert data["is_game_over"] is True
        assert data["winner"] == "white"

    def test_pass_unblocks_stuck_side(self):
        diagram = "O" * 24 + "X......X" + "." * 32
        r = self.client.post("/position", json={"board": diagram, "turn": "black"})
        assert r.json()["legal_moves"] == []
        assert r.json()["is_game_over"] is False
        r = self.client.post("/pass")
        assert r.status_code == 200
        assert r.json()["turn"] == "white"
        assert r.json()["legal_moves"] == ["a5", "h5"]
        r = self.client.post("/search", json={"depth": 1})
        assert r.status_code == 200
        assert r.json()["best_move"] in ("a5", "h5")

    def test_pass_rejected_with_legal_moves(self):
        r = self.client.post("/pass")
        assert r.status_code == 400
        assert self.client.get("/board").json()["turn"] == "black"

    def test_pass_rejected_when_game_over(self):
        self.client.post("/position", json={"board": "X" * 64, "turn": "white"})
        r = self.client.post("/pass")
        assert r.status_code == 400

    def test_searches_run_one_at_a_time(self, monkeypatch):
        import threading
        import time

        from fastapi.testclient import TestClient
        from interface import api

        original = api.engine.search_best_move
        counter_lock = threading.Lock()
        state = {"active": 0, "peak": 0}

        def slow_search(*args, **kwargs):
            with counter_lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.05)
            try:
                return original(*args, **kwargs)
            finally:
                with counter_lock:
                    state["active"] -= 1

        monkeypatch.setattr(api.engine, "search_best_move", slow_search)

        statuses = []

        def request():
            statuses.append(TestClient(api.app).post("/search", json={"depth": 2}).status_code)

        threads = [threading.Thread(target=request) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert statuses == [200] * 4
        assert state["peak"] == 1
