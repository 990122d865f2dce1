"""
Tests for the AI turn queue
"""

import random
import unittest

from bridge_types import PASS, BidMove, parse_bid
from decision_engine import DecisionEngine
from deal_model import SEATS, Hand, Seat
from engine_config import EngineConfig
from monte_carlo import BidEvaluation, generate_deal
from table_api import board_bid, new_board
from turn_scheduler import PendingMove, TurnScheduler


class PassingEvaluator:
    """Stands in for Monte-Carlo: always passes"""

    def evaluate(self, hand, seat, candidates, auction, vulnerability=None, rng=None):
        return BidEvaluation(PASS, 0.0, 1.0, 1, 1)


class CountingEngine:
    """Passes for whoever is asked, counting requests"""

    def __init__(self, think_delay=0.0):
        self.config = EngineConfig(think_delay=think_delay)
        self.requests = 0

    def request_ai_move(self, seat, board):
        self.requests += 1
        return BidMove(seat, PASS)


def opening_board(number=1):
    hands = generate_deal(Hand.from_lin('SAQ2HKJ4DKJ3CQ987'), Seat.NORTH, {}, random.Random(number))
    return new_board(number, hands=hands)


class TestScheduling(unittest.TestCase):

    def test_human_seat_is_not_queued(self):
        scheduler = TurnScheduler(CountingEngine(), [Seat.EAST, Seat.SOUTH, Seat.WEST])
        board = opening_board()
        self.assertIsNone(scheduler.schedule(board))
        board, moves = scheduler.run(board)
        self.assertEqual(moves, [])

    def test_entry_queued_once(self):
        scheduler = TurnScheduler(CountingEngine(), SEATS)
        board = opening_board()
        first = scheduler.schedule(board)
        scheduler.schedule(board)
        self.assertEqual(first, PendingMove(1, Seat.NORTH, 0))
        self.assertEqual(len(scheduler.queue), 1)

    def test_declarer_controls_dummy(self):
        board = opening_board()
        for call in ['1S', 'P', 'P', 'P']:
            board = board_bid(board, board.to_act, parse_bid(call))
        scheduler = TurnScheduler(CountingEngine(), [Seat.NORTH])
        self.assertEqual(scheduler.controller(board, Seat.SOUTH), Seat.NORTH)
        self.assertEqual(scheduler.controller(board, Seat.EAST), Seat.EAST)

    def test_think_delay(self):
        pauses = []
        scheduler = TurnScheduler(CountingEngine(think_delay=0.5), SEATS, sleep=pauses.append)
        scheduler.run(opening_board(), max_moves=3)
        self.assertEqual(pauses, [0.5, 0.5, 0.5])

    def test_no_sleep_without_delay(self):
        pauses = []
        scheduler = TurnScheduler(CountingEngine(), SEATS, think_delay=0, sleep=pauses.append)
        scheduler.run(opening_board(), max_moves=2)
        self.assertEqual(pauses, [])


class TestStaleMoves(unittest.TestCase):

    def test_changed_board_discards_entry(self):
        engine = CountingEngine()
        scheduler = TurnScheduler(engine, SEATS)
        board = opening_board()
        scheduler.schedule(board)
        # A human bid lands before the AI gets its turn
        moved = board_bid(board, Seat.NORTH, parse_bid('1NT'))
        result, move = scheduler.step(board, get_board=lambda: moved)
        self.assertIsNone(move)
        self.assertIs(result, moved)
        self.assertEqual(scheduler.discarded, 1)
        self.assertEqual(engine.requests, 0)

    def test_reset_while_thinking_discards_move(self):
        engine = CountingEngine()
        scheduler = TurnScheduler(engine, SEATS)
        board = opening_board()
        fresh = opening_board(number=2)
        boards = iter([board, fresh])
        scheduler.schedule(board)
        result, move = scheduler.step(board, get_board=lambda: next(boards))
        self.assertIsNone(move)
        self.assertIs(result, fresh)
        self.assertEqual(engine.requests, 1)
        self.assertEqual(scheduler.discarded, 1)

    def test_current_entry_applied(self):
        scheduler = TurnScheduler(CountingEngine(), SEATS)
        board = opening_board()
        scheduler.schedule(board)
        result, move = scheduler.step(board, get_board=lambda: board)
        self.assertEqual(move.seat, Seat.NORTH)
        self.assertEqual(result.version, 1)
        self.assertEqual(result.to_act, Seat.EAST)

    def test_empty_queue(self):
        board = opening_board()
        result, move = TurnScheduler(CountingEngine(), SEATS).step(board)
        self.assertIs(result, board)
        self.assertIsNone(move)


class TestSelfPlay(unittest.TestCase):

    def test_four_ai_seats_finish_the_board(self):
        engine = DecisionEngine(EngineConfig(), evaluator=PassingEvaluator(), rng=random.Random(0))
        board, moves = TurnScheduler(engine, SEATS).run(opening_board())
        self.assertEqual(board.phase, 'complete')
        self.assertEqual(len(moves), len(board.auction.entries) + 52)
        self.assertEqual(board.play.completed_tricks, 13)
        self.assertIsNotNone(board.result)
        self.assertEqual(board.version, len(moves))


if __name__ == '__main__':
    unittest.main()
