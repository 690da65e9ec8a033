"""International draughts position: 50 playable squares, mutable, reversible moves."""

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

NUM_SQUARES = 50
START_FEN = "W:W31-50:B1-20"


class BoardError(ValueError):
    """The board was driven outside its contract (bad square, FEN, move or unmake)."""


class Side(IntEnum):
    WHITE = 0  # light, starts on 31-50 and moves up the board
    BLACK = 1  # dark, starts on 1-20

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE


class Piece(IntEnum):
    EMPTY = 0
    WHITE_MAN = 1
    WHITE_KING = 2
    BLACK_MAN = 3
    BLACK_KING = 4

    @property
    def side(self) -> Optional[Side]:
        if self in (Piece.WHITE_MAN, Piece.WHITE_KING):
            return Side.WHITE
        if self in (Piece.BLACK_MAN, Piece.BLACK_KING):
            return Side.BLACK
        return None

    @property
    def is_king(self) -> bool:
        return self in (Piece.WHITE_KING, Piece.BLACK_KING)


MAN = {Side.WHITE: Piece.WHITE_MAN, Side.BLACK: Piece.BLACK_MAN}
KING = {Side.WHITE: Piece.WHITE_KING, Side.BLACK: Piece.BLACK_KING}
SWAP_COLOUR = {
    Piece.EMPTY: Piece.EMPTY,
    Piece.WHITE_MAN: Piece.BLACK_MAN,
    Piece.WHITE_KING: Piece.BLACK_KING,
    Piece.BLACK_MAN: Piece.WHITE_MAN,
    Piece.BLACK_KING: Piece.WHITE_KING,
}
SYMBOLS = {
    Piece.EMPTY: ".",
    Piece.WHITE_MAN: "w",
    Piece.WHITE_KING: "W",
    Piece.BLACK_MAN: "b",
    Piece.BLACK_KING: "B",
}

HOME_ROW = {Side.WHITE: 10, Side.BLACK: 1}
PROMOTION_ROW = {Side.WHITE: 1, Side.BLACK: 10}


# ── Geometry ───────────────────────────────────────────────────────────────

def row(square: int) -> int:
    """1-based row; row 1 (squares 1-5) is black's home row."""
    return 1 + (square - 1) // 5


def column(square: int) -> int:
    """1-based playable column within the row (1..5)."""
    return 1 + (square - 1) % 5


def coords(square: int) -> Tuple[int, int]:
    """(r, x) on the full 10x10 grid, both 0-based, r = 0 at the top."""
    r = (square - 1) // 5
    x = 2 * ((square - 1) % 5) + (1 if r % 2 == 0 else 0)
    return r, x


def square_at(r: int, x: int) -> Optional[int]:
    if 0 <= r < 10 and 0 <= x < 10 and (r + x) % 2 == 1:
        return r * 5 + x // 2 + 1
    return None


DIRECTIONS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
FORWARD = {Side.WHITE: ((-1, -1), (-1, 1)), Side.BLACK: ((1, -1), (1, 1))}
BACKWARD = {Side.WHITE: ((1, -1), (1, 1)), Side.BLACK: ((-1, -1), (-1, 1))}


def _build_rays() -> List[Dict[Tuple[int, int], Tuple[int, ...]]]:
    rays: List[Dict[Tuple[int, int], Tuple[int, ...]]] = [{}]
    for sq in range(1, NUM_SQUARES + 1):
        r, x = coords(sq)
        per_direction = {}
        for dr, dx in DIRECTIONS:
            ray = []
            rr, xx = r + dr, x + dx
            while True:
                nxt = square_at(rr, xx)
                if nxt is None:
                    break
                ray.append(nxt)
                rr, xx = rr + dr, xx + dx
            per_direction[(dr, dx)] = tuple(ray)
        rays.append(per_direction)
    return rays


# RAYS[square][direction] -> squares along that diagonal, nearest first
RAYS = _build_rays()


def neighbour(square: int, direction: Tuple[int, int]) -> Optional[int]:
    ray = RAYS[square][direction]
    return ray[0] if ray else None


def check_square(square: int) -> int:
    if not isinstance(square, int) or not 1 <= square <= NUM_SQUARES:
        raise BoardError(f"invalid square index: {square!r}")
    return square


# ── Moves ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Move:
    """A move as the squares it visits plus the squares it jumps."""

    path: Tuple[int, ...]
    captures: Tuple[int, ...] = ()

    @property
    def origin(self) -> int:
        return self.path[0]

    @property
    def destination(self) -> int:
        return self.path[-1]

    @property
    def is_capture(self) -> bool:
        return bool(self.captures)

    def __str__(self) -> str:
        sep = "x" if self.captures else "-"
        return sep.join(str(sq) for sq in self.path)


# ── Board ──────────────────────────────────────────────────────────────────

class DraughtsBoard:
    """Mutable 10x10 board with the side to move and an apply/unapply history."""

    def __init__(self, fen: Optional[str] = None):
        self._squares: List[Piece] = [Piece.EMPTY] * (NUM_SQUARES + 1)  # index 0 unused
        self.side_to_move = Side.WHITE
        self._history: List[Tuple[Move, Piece, Tuple[Piece, ...]]] = []
        self.set_fen(fen or START_FEN)

    # --- state -------------------------------------------------------------

    def reset(self):
        """Back to the initial position."""
        self.set_fen(START_FEN)

    def copy(self) -> "DraughtsBoard":
        other = DraughtsBoard.__new__(DraughtsBoard)
        other._squares = list(self._squares)
        other.side_to_move = self.side_to_move
        other._history = list(self._history)
        return other

    def piece_at(self, square: int) -> Piece:
        return self._squares[check_square(square)]

    def squares(self) -> Tuple[Piece, ...]:
        """Snapshot of squares 1..50."""
        return tuple(self._squares[1:])

    def pieces(self, side: Side) -> List[int]:
        return [sq for sq in range(1, NUM_SQUARES + 1) if self._squares[sq].side is side]

    def piece_count(self) -> int:
        return sum(1 for p in self._squares if p != Piece.EMPTY)

    @property
    def ply(self) -> int:
        """Number of moves applied since the position was set."""
        return len(self._history)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DraughtsBoard):
            return NotImplemented
        return self.side_to_move == other.side_to_move and self._squares == other._squares

    __hash__ = None

    def mirrored(self) -> "DraughtsBoard":
        """The same position seen from the other side: rotated 180 degrees, colours swapped."""
        other = DraughtsBoard.__new__(DraughtsBoard)
        other._squares = [Piece.EMPTY] * (NUM_SQUARES + 1)
        for sq in range(1, NUM_SQUARES + 1):
            other._squares[NUM_SQUARES + 1 - sq] = SWAP_COLOUR[self._squares[sq]]
        other.side_to_move = self.side_to_move.opponent
        other._history = []
        return other

    # --- FEN ---------------------------------------------------------------

    def set_fen(self, fen: str):
        """Load a PDN FEN such as ``W:W31-50:B1-20`` (K marks kings)."""
        fields = [f.strip() for f in fen.strip().rstrip(".").split(":")]
        if not fields or fields[0].upper() not in ("W", "B"):
            raise BoardError(f"invalid FEN side to move: {fen!r}")
        side = Side.WHITE if fields[0].upper() == "W" else Side.BLACK
        squares = [Piece.EMPTY] * (NUM_SQUARES + 1)
        for part in fields[1:]:
            if not part:
                continue
            colour = part[0].upper()
            if colour not in ("W", "B"):
                raise BoardError(f"invalid FEN colour field: {part!r}")
            owner = Side.WHITE if colour == "W" else Side.BLACK
            for token in part[1:].split(","):
                token = token.strip()
                if not token:
                    continue
                is_king = token[0].upper() == "K"
                if is_king:
                    token = token[1:]
                try:
                    if "-" in token:
                        lo, hi = token.split("-", 1)
                        span = range(int(lo), int(hi) + 1)
                    else:
                        span = [int(token)]
                except ValueError:
                    raise BoardError(f"invalid FEN square: {token!r}") from None
                for sq in span:
                    check_square(sq)
                    if squares[sq] != Piece.EMPTY:
                        raise BoardError(f"square {sq} listed twice in FEN")
                    squares[sq] = KING[owner] if is_king else MAN[owner]
        self._squares = squares
        self.side_to_move = side
        self._history = []

    def fen(self) -> str:
        fields = ["W" if self.side_to_move is Side.WHITE else "B"]
        for side, letter in ((Side.WHITE, "W"), (Side.BLACK, "B")):
            tokens = [
                ("K" if self._squares[sq].is_king else "") + str(sq)
                for sq in self.pieces(side)
            ]
            fields.append(letter + ",".join(tokens))
        return ":".join(fields)

    # --- move generation ---------------------------------------------------

    def legal_moves(self) -> List[Move]:
        """Legal moves for the side to move.

        Capturing is compulsory and the capture taking the most pieces must be
        played. Moves reaching the same square with the same captured set are
        reported once.
        """
        side = self.side_to_move
        own = self.pieces(side)

        captures = self._longest_captures()
        if captures:
            seen = set()
            result = []
            for m in captures:
                key = (m.origin, m.destination, frozenset(m.captures))
                if key not in seen:
                    seen.add(key)
                    result.append(m)
            return result

        moves: List[Move] = []
        for sq in own:
            if self._squares[sq].is_king:
                for d in DIRECTIONS:
                    for target in RAYS[sq][d]:
                        if self._squares[target] != Piece.EMPTY:
                            break
                        moves.append(Move((sq, target)))
            else:
                for d in FORWARD[side]:
                    target = neighbour(sq, d)
                    if target is not None and self._squares[target] == Piece.EMPTY:
                        moves.append(Move((sq, target)))
        return moves

    def _longest_captures(self) -> List[Move]:
        """Every maximal capture path, including paths that differ only in landing squares."""
        captures: List[Move] = []
        for sq in self.pieces(self.side_to_move):
            captures.extend(self._captures_from(sq))
        if not captures:
            return []
        longest = max(len(m.captures) for m in captures)
        return [m for m in captures if len(m.captures) == longest]

    def _captures_from(self, origin: int) -> List[Move]:
        piece = self._squares[origin]
        # the moving piece may pass over and land on its own starting square
        self._squares[origin] = Piece.EMPTY
        found: List[Move] = []
        try:
            self._extend_capture(piece, (origin,), (), found)
        finally:
            self._squares[origin] = piece
        return found

    def _extend_capture(self, piece: Piece, path, taken, found: List[Move]):
        extended = False
        for d in DIRECTIONS:
            jump = self._jump(piece, path[-1], d, taken)
            if jump is None:
                continue
            victim, landings = jump
            for landing in landings:
                extended = True
                self._extend_capture(piece, path + (landing,), taken + (victim,), found)
        if not extended and taken:
            found.append(Move(path, taken))

    def _jump(self, piece: Piece, square: int, direction, taken):
        """(victim, landing squares) for a capture from square along direction, or None."""
        ray = RAYS[square][direction]
        i = 0
        if piece.is_king:
            while i < len(ray) and self._squares[ray[i]] == Piece.EMPTY:
                i += 1
        if i >= len(ray):
            return None
        victim = ray[i]
        # jumped pieces stay on the board until the move ends, so they block
        if self._squares[victim].side is not piece.side.opponent or victim in taken:
            return None
        landings = []
        for target in ray[i + 1:]:
            if self._squares[target] != Piece.EMPTY:
                break
            landings.append(target)
            if not piece.is_king:
                break
        if not landings:
            return None
        return victim, landings

    # --- apply / unapply ---------------------------------------------------

    def apply(self, move: Move):
        """Play move in place. The move is trusted to come from legal_moves()."""
        origin, dest = move.origin, move.destination
        piece = self.piece_at(origin)
        if piece.side is not self.side_to_move:
            raise BoardError(f"no {self.side_to_move.name.lower()} piece on {origin} for {move}")
        if dest != origin and self.piece_at(dest) != Piece.EMPTY:
            raise BoardError(f"destination {dest} of {move} is occupied")
        captured = tuple(self.piece_at(sq) for sq in move.captures)

        self._squares[origin] = Piece.EMPTY
        for sq in move.captures:
            self._squares[sq] = Piece.EMPTY
        promoted = not piece.is_king and row(dest) == PROMOTION_ROW[piece.side]
        self._squares[dest] = KING[piece.side] if promoted else piece
        self._history.append((move, piece, captured))
        self.side_to_move = self.side_to_move.opponent

    def unapply(self, move: Move):
        """Exact inverse of the most recent apply(move)."""
        if not self._history or self._history[-1][0] != move:
            raise BoardError(f"unapply({move}) does not match the most recent apply")
        _, piece, captured = self._history.pop()
        self.side_to_move = self.side_to_move.opponent
        self._squares[move.destination] = Piece.EMPTY
        for sq, victim in zip(move.captures, captured):
            self._squares[sq] = victim
        self._squares[move.origin] = piece

    def push(self, move: Move):
        """apply() after checking the move is legal here."""
        if move not in self.legal_moves():
            raise BoardError(f"illegal move {move}")
        self.apply(move)

    def pop(self) -> Move:
        if not self._history:
            raise BoardError("no move to take back")
        move = self._history[-1][0]
        self.unapply(move)
        return move

    def parse_move(self, text: str) -> Move:
        """Resolve '32-28', '28x19x10' or the short '28x10' to a legal move."""
        text = text.strip()
        if not re.fullmatch(r"\d+(?:[-x]\d+)+", text):
            raise BoardError(f"malformed move {text!r}")
        path = tuple(int(s) for s in re.split(r"[-x]", text))
        legal = self.legal_moves()
        for m in legal:
            if m.path == path:
                return m
        if len(path) > 2:
            # a king may reach the same result through other landing squares
            for m in self._longest_captures():
                if m.path == path:
                    return m
        if len(path) == 2:
            short = [m for m in legal if m.origin == path[0] and m.destination == path[1]]
            if len(short) == 1:
                return short[0]
            if short:
                raise BoardError(f"ambiguous move {text!r}, give the full path")
        raise BoardError(f"illegal move {text!r}")

    def push_notation(self, text: str) -> Move:
        move = self.parse_move(text)
        self.apply(move)
        return move

    # --- game state --------------------------------------------------------

    def is_game_over(self) -> bool:
        return not self.legal_moves()

    def winner(self) -> Optional[Side]:
        """The side to move loses once it has no legal move."""
        return self.side_to_move.opponent if self.is_game_over() else None

    def __str__(self) -> str:
        lines = []
        for r in range(10):
            cells = []
            for x in range(10):
                sq = square_at(r, x)
                cells.append(" " if sq is None else SYMBOLS[self._squares[sq]])
            lines.append(" ".join(cells))
        return "\n".join(lines)
