"""FastAPI REST interface for the engine."""

import logging
import threading

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator
from typing import Optional

from draughts_engine.config import CONFIG, configure_logging
from draughts_engine.core.board import BoardError, DraughtsBoard, Side
from draughts_engine.core.evaluator import Evaluator
from draughts_engine.core.search import SearchEngine

configure_logging(CONFIG.log_level)
_log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared engine instance; /stop cancels whatever search it is running.
engine = SearchEngine(Evaluator(), depth=CONFIG.search.depth)
board = DraughtsBoard()
_board_lock = threading.Lock()
_search_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # PDN format e.g. "32-28" or "28x19"


class SearchRequest(BaseModel):
    depth: Optional[int] = None

    @field_validator("depth")
    @classmethod
    def non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("depth must be >= 0")
        return v


def _turn() -> str:
    return "white" if board.side_to_move is Side.WHITE else "black"


@app.get("/board")
def get_board():
    with _board_lock:
        winner = board.winner()
        return {
            "fen": board.fen(),
            "turn": _turn(),
            "legal_moves": [str(m) for m in board.legal_moves()],
            "is_game_over": winner is not None,
            "winner": winner.name.lower() if winner is not None else None,
            "evaluation": engine.evaluator.evaluate(board),
        }


@app.post("/position")
def set_position(req: FenRequest):
    with _board_lock:
        try:
            board.set_fen(req.fen)
        except BoardError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        return {"fen": board.fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _board_lock:
        try:
            move = board.push_notation(req.move)
        except BoardError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"fen": board.fen(), "move": str(move)}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _board_lock:
        if board.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        depth = CONFIG.search.depth if req.depth is None else req.depth
        search_board = board.copy()

    # one search at a time on the shared engine; later requests queue here
    with _search_lock:
        result = engine.search_best_move(search_board, depth)
    _log.info("search depth=%d move=%s value=%d nodes=%d", result.depth, result.move, result.value, result.nodes)
    return {
        "best_move": str(result.move) if result.move else None,
        "score": result.value,
        "depth": result.depth,
        "nodes": result.nodes,
        "fen": search_board.fen(),
    }


@app.post("/stop")
def stop_search():
    # only forward a stop while a search runs, or it would cancel the next one
    return {"stopped": engine.stop_if_running()}


@app.post("/reset")
def reset_board():
    with _board_lock:
        board.reset()
        return {"fen": board.fen()}
