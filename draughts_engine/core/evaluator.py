"""Static evaluation: weighted white-minus-black positional features."""

from typing import Dict, Optional

from draughts_engine.config import CONFIG, EvalConfig
from draughts_engine.core.board import (
    BACKWARD,
    HOME_ROW,
    NUM_SQUARES,
    DraughtsBoard,
    Piece,
    Side,
    column,
    neighbour,
    row,
)

FEATURES = ("material", "formation", "baseline", "tempo", "center")


class Evaluator:
    """Scores a position; positive favours white (the maximizing side).

    Every feature is a white-minus-black difference and the score is their
    weighted sum, so the evaluator is antisymmetric under mirroring.
    """

    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval

    def evaluate(self, board: DraughtsBoard) -> int:
        weights = self.cfg.weights
        features = self.breakdown(board)
        return sum(weights.get(name, 0) * value for name, value in features.items())

    def breakdown(self, board: DraughtsBoard) -> Dict[str, int]:
        """Raw (unweighted) feature values."""
        squares = (None,) + board.squares()
        total = sum(1 for p in squares[1:] if p != Piece.EMPTY)
        return {
            "material": self.material(squares, total),
            "formation": self.formation(squares),
            "baseline": self.baseline(squares, total),
            "tempo": self.tempo(squares),
            "center": self.center(squares),
        }

    # --- features ----------------------------------------------------------
    # squares is indexed 1..50 (slot 0 unused), total is the piece count.

    def material(self, squares, total: int) -> int:
        king_value = (
            self.cfg.king_value_opening
            if total > self.cfg.endgame_threshold
            else self.cfg.king_value_endgame
        )
        values = {
            Piece.WHITE_MAN: self.cfg.man_value,
            Piece.WHITE_KING: king_value,
            Piece.BLACK_MAN: -self.cfg.man_value,
            Piece.BLACK_KING: -king_value,
        }
        return sum(values.get(p, 0) for p in squares[1:])

    def formation(self, squares) -> int:
        """Chains of same-coloured pieces backing each other up diagonally."""
        score = 0
        for sq in range(1, NUM_SQUARES + 1):
            side = squares[sq].side
            if side is None:
                continue
            sign = 1 if side is Side.WHITE else -1
            for d in BACKWARD[side]:
                first = neighbour(sq, d)
                if first is None or squares[first].side is not side:
                    continue
                second = neighbour(first, d)
                if second is not None and squares[second].side is side:
                    score += sign * self.cfg.formation_triple_bonus
                else:
                    score += sign * self.cfg.formation_pair_bonus
        return score

    def baseline(self, squares, total: int) -> int:
        """Pieces still guarding their own back row, early and middle game only."""
        if total < self.cfg.baseline_min_pieces:
            return 0
        score = 0
        for sq in range(1, NUM_SQUARES + 1):
            side = squares[sq].side
            if side is not None and row(sq) == HOME_ROW[side]:
                score += 1 if side is Side.WHITE else -1
        return score

    def tempo(self, squares) -> int:
        """Rows each man has advanced from its own back row."""
        score = 0
        for sq in range(1, NUM_SQUARES + 1):
            piece = squares[sq]
            if piece == Piece.WHITE_MAN:
                score += HOME_ROW[Side.WHITE] - row(sq)
            elif piece == Piece.BLACK_MAN:
                score -= row(sq) - HOME_ROW[Side.BLACK]
        return score

    def center(self, squares) -> int:
        score = 0
        for sq in range(1, NUM_SQUARES + 1):
            side = squares[sq].side
            if side is None or column(sq) in (1, 5):
                continue
            score += 1 if side is Side.WHITE else -1
        return score
