"""
Self-play runner: deals boards and lets the engine play all four seats
"""

import argparse
import logging
import random
import re
from dataclasses import replace

from decision_engine import DecisionEngine
from deal_model import SEATS, SUITS, Seat
from engine_config import EngineConfig, configure_logging
from table_api import new_board
from turn_scheduler import TurnScheduler

logger = logging.getLogger(__name__)

# ANSI escape codes for colors
SUIT_SYMBOLS = {
    'S': '\033[97m♠\033[0m',  # White
    'H': '\033[91m♥\033[0m',  # Red
    'D': '\033[91m♦\033[0m',  # Red
    'C': '\033[97m♣\033[0m'   # White
}


# ANSI-safe string length (used for padding)
def visible_len(s):
    return len(re.sub(r'\x1b\[[0-9;]*m', '', s))


def pad_right(s, width):
    return s + ' ' * (width - visible_len(s))


def hand_lines(hand):
    """One colored line per suit, highest suit first"""
    lines = []
    for suit in SUITS:
        ranks = ''.join(rank.letter for rank in hand.ranks(suit)) or '-'
        lines.append(f"{SUIT_SYMBOLS[suit.value]} {ranks}")
    return lines


def render_deal(hands):
    """Compass diagram of the four hands"""
    north = hand_lines(hands[Seat.NORTH])
    south = hand_lines(hands[Seat.SOUTH])
    west = hand_lines(hands[Seat.WEST])
    east = hand_lines(hands[Seat.EAST])
    indent = ' ' * 20
    rows = [indent + line for line in north]
    rows += [pad_right(w, 40) + e for w, e in zip(west, east)]
    rows += [indent + line for line in south]
    return '\n'.join(rows)


def play_boards(count, config, seed=None):
    rng = random.Random(seed)
    engine = DecisionEngine(config, rng=rng)
    boards = []
    number = 1
    while len(boards) < count:
        board = new_board(number, rng)
        print(f"\n🃏 Board #{board.number}")
        print(render_deal(board.hands))
        scheduler = TurnScheduler(engine, SEATS, think_delay=config.think_delay)
        board, moves = scheduler.run(board)
        print(f"📣 Auction: {board.auction}")
        if board.needs_redeal:
            print("🔁 Passed out, redealing")
            number += 1
            continue
        print(board.status_summary())
        boards.append(board)
        number += 1
    return boards


def main(argv=None):
    parser = argparse.ArgumentParser(description="Let the engine bid and play whole boards")
    parser.add_argument('--boards', type=int, default=1)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--trials', type=int, default=None, help="Monte-Carlo trials per candidate bid")
    parser.add_argument('--log-level', default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    config = EngineConfig.from_env()
    if args.trials is not None:
        config = replace(config, mc_trials=args.trials)
    logger.info(f"🚀 Self-play: {args.boards} board(s), {config.mc_trials} trials per bid, "
                f"estimator {config.trick_estimator}, advisor {'on' if config.advisor_enabled else 'off'}")
    play_boards(args.boards, config, args.seed)


if __name__ == "__main__":
    main()
