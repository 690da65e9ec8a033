from draughts_engine.core.board import BoardError, DraughtsBoard
from draughts_engine.core.search import SearchEngine
from draughts_engine.core.evaluator import Evaluator

class Engine:
    def __init__(self, depth=3, fen=None):
        self.board = DraughtsBoard(fen)
        self.search = SearchEngine(Evaluator(), depth=depth)
        self.move_history = []

    def get_best_move(self):
        """(move in PDN notation or None, score) for the side to move."""
        move = self.search.choose_move(self.board)
        return (str(move) if move else None), self.search.last_score()

    def make_move(self, move_str: str) -> bool:
        """Play a move such as '32-28' or '28x19'. Returns True if legal."""
        try:
            move = self.board.push_notation(move_str)
        except BoardError:
            return False
        self.move_history.append(str(move))
        return True

    def undo_move(self):
        if self.move_history:
            self.board.pop()
            self.move_history.pop()

    def print_board(self):
        print(self.board)
