from draughts_engine.config import CONFIG, configure_logging
from draughts_engine.core.board import BoardError, DraughtsBoard, Side
from draughts_engine.core.search import SearchEngine


def main():
    configure_logging(CONFIG.log_level)

    # initialize board and engine
    board = DraughtsBoard()
    engine = SearchEngine(depth=CONFIG.search.depth)

    while not board.is_game_over():
        print(board)
        print("----------------------------")

        if board.side_to_move is Side.WHITE:  # human plays white
            user_move = input("Enter your move (e.g. 32-28 or 28x19): ")
            try:
                board.push_notation(user_move)
            except BoardError as e:
                print(f"{e}, try again.")
                continue
        else:
            move = engine.choose_move(board)
            print(f"Engine plays: {move} | Eval: {engine.last_score()}")
            board.apply(move)

    print(board)
    print("Game Over")
    print(f"Winner: {board.winner().name.lower()}")


if __name__ == "__main__":
    main()
