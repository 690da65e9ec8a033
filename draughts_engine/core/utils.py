def format_info(d, score, nodes, elapsed, move, WIN_SCORE):
    """One progress line per completed depth; elapsed is in seconds."""
    nps = int(nodes / elapsed) if elapsed > 0 else 0

    if abs(score) > WIN_SCORE - 1000:
        plies = WIN_SCORE - abs(score)
        score_str = f"win {plies if score > 0 else -plies}"
    else:
        score_str = f"cp {score}"

    return f"info depth {d} score {score_str} nodes {nodes} nps {nps} time {int(elapsed * 1000)} move {move or '-'}"
