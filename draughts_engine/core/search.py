import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from draughts_engine.config import CONFIG
from draughts_engine.core.board import DraughtsBoard, Move, Side
from draughts_engine.core.evaluator import Evaluator
from draughts_engine.core.utils import format_info

logger = logging.getLogger(__name__)

INF = 1_000_000_000
WIN_SCORE = 1_000_000  # outranks any evaluation, stays inside the root window


class SearchAborted(Exception):
    """Unwinds the whole in-flight search after a stop request."""


class CancellationToken:
    """Single-shot stop flag, set from any thread and polled by the search."""

    def __init__(self):
        self._event = threading.Event()

    def request(self):
        self._event.set()

    def is_requested(self) -> bool:
        return self._event.is_set()

    def consume(self) -> bool:
        """Report a pending request once, clearing it."""
        if not self._event.is_set():
            return False
        self._event.clear()
        return True

    def clear(self):
        self._event.clear()


@dataclass
class SearchNode:
    board: DraughtsBoard
    best_move: Optional[Move] = None


@dataclass
class SearchResult:
    move: Optional[Move] = None
    value: int = 0
    depth: int = 0  # deepest fully completed iteration
    nodes: int = 0


class SearchEngine:
    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        depth: Optional[int] = None,
        token: Optional[CancellationToken] = None,
        rng: Optional[random.Random] = None,
    ):
        self.evaluator = evaluator or Evaluator()
        self.max_depth = CONFIG.search.depth if depth is None else depth
        self.token = token or CancellationToken()
        self.rng = rng or random.Random(CONFIG.search.random_seed)
        self.nodes = 0
        self._last_score = 0
        self._thread: Optional[threading.Thread] = None
        # guards _running together with the token so a stop cannot land between them
        self._lock = threading.Lock()
        self._running = False

    # --- host interface ----------------------------------------------------

    def choose_move(self, board: DraughtsBoard, max_depth: Optional[int] = None) -> Optional[Move]:
        """Best move for the side to move, or None when it has no legal move."""
        return self.search_best_move(board, max_depth).move

    def request_stop(self):
        """Ask the running search to stop; safe to call from any thread."""
        self.token.request()

    def stop_if_running(self) -> bool:
        """Request a stop only while a search is in progress; True if one was."""
        with self._lock:
            if not self._running:
                return False
            self.token.request()
            return True

    def last_score(self) -> int:
        """Value of the most recently chosen move, for display."""
        return self._last_score

    def search_best_move(self, board: DraughtsBoard, max_depth: Optional[int] = None) -> SearchResult:
        depth_limit = self.max_depth if max_depth is None else max_depth
        with self._lock:
            self._running = True
        try:
            result = self._iterate(board, depth_limit)
        finally:
            with self._lock:
                self._running = False
                # a stop arriving after the last iteration has nothing left to cancel
                self.token.clear()
        result.nodes = self.nodes

        if result.move is None:
            moves = board.legal_moves()
            if moves:
                logger.warning("no search iteration completed, playing a random move")
                result = SearchResult(self.rng.choice(moves), 0, result.depth, self.nodes)

        self._last_score = result.value
        return result

    def _iterate(self, board: DraughtsBoard, depth_limit: int) -> SearchResult:
        """Iterative deepening; returns the deepest fully completed iteration."""
        self.nodes = 0
        result = SearchResult()
        start_time = time.time()

        for d in range(1, depth_limit + 1):
            root = SearchNode(board)
            try:
                value = self.alpha_beta(root, -INF, INF, d)
            except SearchAborted:
                logger.info("stopped during depth %d, keeping the depth %d result", d, result.depth)
                break

            result = SearchResult(root.best_move, value, d, self.nodes)
            if logger.isEnabledFor(logging.INFO):
                elapsed = time.time() - start_time
                logger.info(format_info(d, value, self.nodes, elapsed, root.best_move, WIN_SCORE))
            if root.best_move is None:
                break  # no legal move at the root
        return result

    # --- background search -------------------------------------------------

    def start_search(
        self,
        board: DraughtsBoard,
        depth: Optional[int] = None,
        callback: Optional[Callable[[SearchResult], None]] = None,
    ):
        """Search a copy of board on a daemon thread, handing the result to callback."""
        if self._thread and self._thread.is_alive():
            logger.warning("search already running, ignoring start_search")
            return
        search_board = board.copy()
        # running from here on, so a stop issued before the worker starts still counts
        with self._lock:
            self._running = True

        def worker():
            result = self.search_best_move(search_board, depth)
            if callback:
                callback(result)

        self._thread = threading.Thread(target=worker, daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 0.2):
        if self.stop_if_running() and self._thread:
            self._thread.join(timeout=timeout)

    # --- alpha-beta --------------------------------------------------------

    def alpha_beta(self, node: SearchNode, alpha: int, beta: int, depth: int, ply: int = 0) -> int:
        """Minimax value of node.board within [alpha, beta], white maximizing.

        The best move found is left in node.best_move. The board is always
        restored before returning, including when SearchAborted unwinds.
        """
        if self.token.consume():
            raise SearchAborted()
        self.nodes += 1

        board = node.board
        maximizing = board.side_to_move is Side.WHITE
        moves = board.legal_moves()

        if not moves:
            # side to move is blocked or out of pieces and has lost
            return -(WIN_SCORE - ply) if maximizing else WIN_SCORE - ply
        if depth <= 0:
            return self.evaluator.evaluate(board)

        for move in moves:
            board.apply(move)
            try:
                value = self.alpha_beta(SearchNode(board), alpha, beta, depth - 1, ply + 1)
            finally:
                board.unapply(move)

            if maximizing:
                if value > alpha:
                    alpha = value
                    node.best_move = move
            elif value < beta:
                beta = value
                node.best_move = move

            if alpha >= beta:
                return beta if maximizing else alpha

        return alpha if maximizing else beta
