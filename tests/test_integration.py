"""
Integration test suite for the AlphaBeast draughts engine.

Tests components working together end-to-end:
- Full game simulations (engine vs engine)
- Engine wrapper (notation in, notation out)
- Background search lifecycle (start/stop/callback)
- FastAPI REST API
"""

import random
import threading
import time

import pytest

from draughts_engine.config import EvalConfig
from draughts_engine.core.board import DraughtsBoard, Side
from draughts_engine.core.evaluator import Evaluator
from draughts_engine.core.search import WIN_SCORE, SearchEngine
from draughts_engine.main import Engine

# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE: FULL GAME SIMULATIONS
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """The engine can play long sequences of moves without corrupting the board."""

    def test_engine_vs_engine_plays_legal_moves(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=2)
        board = DraughtsBoard()
        move_count = 0

        while not board.is_game_over() and move_count < 60:
            before = board.copy()
            move = engine.choose_move(board)
            assert board == before, f"board changed by search at ply {move_count}"
            assert move in board.legal_moves(), f"Illegal move {move} at ply {move_count}"
            board.apply(move)
            move_count += 1

        assert move_count > 10

    def test_different_evaluators_play_each_other(self):
        material_only = EvalConfig()
        material_only.weights = {"material": 1}
        engines = {
            Side.WHITE: SearchEngine(Evaluator(EvalConfig()), depth=2),
            Side.BLACK: SearchEngine(Evaluator(material_only), depth=2),
        }
        board = DraughtsBoard()
        for _ in range(30):
            if board.is_game_over():
                break
            move = engines[board.side_to_move].choose_move(board)
            board.apply(move)
        # replay from scratch through the history to check every unmake
        while board.ply:
            board.pop()
        assert board == DraughtsBoard()

    def test_engine_finishes_won_endgame(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=3)
        board = DraughtsBoard("W:W28:B23")
        result = engine.search_best_move(board)
        assert str(result.move) == "28x19"
        assert result.value == WIN_SCORE - 1
        board.apply(result.move)
        assert board.winner() is Side.WHITE


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE WRAPPER
# ════════════════════════════════════════════════════════════════════════════


class TestEngineWrapperIntegration:
    def test_get_best_move(self):
        engine = Engine(depth=2)
        move, score = engine.get_best_move()
        assert move in {str(m) for m in engine.board.legal_moves()}
        assert isinstance(score, int)

    def test_make_move(self):
        engine = Engine(depth=2)
        assert engine.make_move("32-28") is True
        assert engine.move_history == ["32-28"]
        assert engine.board.side_to_move is Side.BLACK

    def test_make_illegal_move(self):
        engine = Engine(depth=2)
        assert engine.make_move("32-26") is False
        assert engine.make_move("nonsense") is False
        assert engine.move_history == []

    def test_play_sequence_and_undo(self):
        engine = Engine(depth=2)
        start_fen = engine.board.fen()
        for _ in range(4):
            move, _ = engine.get_best_move()
            assert engine.make_move(move)
        assert len(engine.move_history) == 4
        for _ in range(4):
            engine.undo_move()
        assert engine.board.fen() == start_fen

    def test_game_over_position(self):
        engine = Engine(depth=2, fen="W:W46:B37,41")
        move, score = engine.get_best_move()
        assert move is None
        assert score == -WIN_SCORE


# ════════════════════════════════════════════════════════════════════════════
#  BACKGROUND SEARCH
# ════════════════════════════════════════════════════════════════════════════


class TestAsyncSearch:
    """Tests the background search lifecycle: start/stop/callback."""

    def test_callback_receives_result(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=3)
        board = DraughtsBoard()
        results = []
        engine.start_search(board, callback=results.append)
        engine._thread.join(timeout=30)

        assert len(results) == 1
        assert results[0].depth == 3
        assert results[0].move in board.legal_moves()

    def test_stop_halts_search_quickly(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=40, rng=random.Random(5))
        board = DraughtsBoard()
        before = board.copy()
        done = threading.Event()
        results = []

        def callback(result):
            results.append(result)
            done.set()

        engine.start_search(board, callback=callback)
        time.sleep(0.2)
        engine.stop()
        done.wait(timeout=2.0)

        assert done.is_set(), "Search didn't stop within timeout"
        assert results[0].depth < 40
        assert results[0].move in board.legal_moves()
        assert board == before

    def test_stop_before_start_is_safe(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=2)
        engine.stop()
        assert not engine.token.is_requested()
        assert engine.search_best_move(DraughtsBoard()).depth == 2

    def test_second_start_is_ignored(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=40)
        results = []
        engine.start_search(DraughtsBoard(), callback=results.append)
        first = engine._thread
        engine.start_search(DraughtsBoard(), callback=results.append)
        assert engine._thread is first
        engine.stop(timeout=2.0)
        first.join(timeout=2.0)
        assert len(results) == 1

    def test_multiple_sequential_searches(self):
        engine = SearchEngine(Evaluator(EvalConfig()), depth=2)
        board = DraughtsBoard()
        for _ in range(3):
            results = []
            engine.start_search(board, callback=results.append)
            engine._thread.join(timeout=10)
            move = results[0].move
            assert move in board.legal_moves()
            board.apply(move)


# ════════════════════════════════════════════════════════════════════════════
#  FASTAPI
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    """Tests FastAPI REST API endpoints."""

    @pytest.fixture(autouse=True)
    def setup_client(self):
        from fastapi.testclient import TestClient
        from interface.api import app, board

        self.client = TestClient(app)
        # Reset state before each test
        board.reset()

    def test_get_board_initial(self):
        response = self.client.get("/board")
        assert response.status_code == 200
        data = response.json()
        assert data["fen"] == DraughtsBoard().fen()
        assert data["turn"] == "white"
        assert data["is_game_over"] is False
        assert data["winner"] is None
        assert data["evaluation"] == 0
        assert len(data["legal_moves"]) == 9

    def test_post_move_valid(self):
        response = self.client.post("/move", json={"move": "32-28"})
        assert response.status_code == 200
        data = response.json()
        assert data["move"] == "32-28"
        assert data["fen"].startswith("B:")

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"move": "32-26"})
        assert response.status_code == 400

    def test_post_move_invalid_format(self):
        response = self.client.post("/move", json={"move": "zzzz"})
        assert response.status_code == 400

    def test_set_position_valid(self):
        fen = "B:W28,32:B17,19"
        response = self.client.post("/position", json={"fen": fen})
        assert response.status_code == 200
        assert response.json()["fen"] == fen

    def test_set_position_invalid(self):
        response = self.client.post("/position", json={"fen": "invalid"})
        assert response.status_code == 400

    def test_search_returns_move(self):
        response = self.client.post("/search", json={"depth": 2})
        assert response.status_code == 200
        data = response.json()
        assert data["depth"] == 2
        assert data["best_move"] in {str(m) for m in DraughtsBoard().legal_moves()}

    def test_search_negative_depth_rejected(self):
        response = self.client.post("/search", json={"depth": -1})
        assert response.status_code == 422

    def test_search_game_over_returns_400(self):
        self.client.post("/position", json={"fen": "W:W46:B37,41"})
        board_data = self.client.get("/board").json()
        assert board_data["is_game_over"] is True
        assert board_data["winner"] == "black"
        response = self.client.post("/search", json={"depth": 2})
        assert response.status_code == 400

    def test_stop_when_idle(self):
        response = self.client.post("/stop")
        assert response.status_code == 200
        assert response.json()["stopped"] is False

    def test_concurrent_searches_run_one_at_a_time(self):
        responses = []

        def search():
            responses.append(self.client.post("/search", json={"depth": 3}).json())

        threads = [threading.Thread(target=search, daemon=True) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert len(responses) == 2
        first, second = responses
        assert first["depth"] == second["depth"] == 3
        # serialized searches of the same position count the same nodes
        assert first["nodes"] == second["nodes"] > 0
        assert first["best_move"] == second["best_move"]
        assert self.client.post("/stop").json()["stopped"] is False

    def test_stop_cancels_running_search(self):
        responses = []
        worker = threading.Thread(
            target=lambda: responses.append(self.client.post("/search", json={"depth": 40})),
            daemon=True,
        )
        worker.start()
        stopped = False
        deadline = time.time() + 5
        while not stopped and time.time() < deadline:
            time.sleep(0.05)
            stopped = self.client.post("/stop").json()["stopped"]
        worker.join(timeout=5)

        assert stopped
        data = responses[0].json()
        assert data["depth"] < 40
        assert data["best_move"] in {str(m) for m in DraughtsBoard().legal_moves()}
        # the stop was spent on that search, the next one completes
        assert self.client.post("/search", json={"depth": 2}).json()["depth"] == 2

    def test_reset_board(self):
        self.client.post("/move", json={"move": "32-28"})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["fen"] == DraughtsBoard().fen()

    def test_full_api_game_flow(self):
        for _ in range(3):
            data = self.client.post("/search", json={"depth": 2}).json()
            response = self.client.post("/move", json={"move": data["best_move"]})
            assert response.status_code == 200
        assert self.client.get("/board").json()["turn"] == "black"
