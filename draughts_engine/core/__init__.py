"""Core engine components: board, evaluator and search."""

from .board import DraughtsBoard, Move, Piece, Side, BoardError
from .evaluator import Evaluator
from .search import SearchEngine, CancellationToken, SearchResult
