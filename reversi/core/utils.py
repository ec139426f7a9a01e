import logging


def setup_logging(level="INFO"):
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")


def format_info(phase, depth, score, nodes, elapsed, best_move, tt_hits=0):
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    move_str = best_move.notation if best_move else "-"
    depth_str = "exact" if depth is None else str(depth)

    return (f"info phase {phase} depth {depth_str} score {score} nodes {nodes} nps {nps} "
            f"time {int(elapsed * 1000)} tthits {tt_hits} bestmove {move_str}")
