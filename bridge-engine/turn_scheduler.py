"""
Turn Scheduler
Explicit queue of "seat X owes a move" entries for AI seats

One loop takes the next entry, waits the thinking delay, asks the decision
engine for a move and applies it. An entry computed against a board that
has since changed (new version, or a reset board) is dropped, never retried.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass

from table_api import apply_move

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingMove:
    board_number: int
    seat: object
    version: int


class TurnScheduler:
    """
    Drives AI seats on one board
    """

    def __init__(self, engine, ai_seats, think_delay=None, sleep=time.sleep):
        self.engine = engine
        self.ai_seats = set(ai_seats)
        self.think_delay = engine.config.think_delay if think_delay is None else think_delay
        self.sleep = sleep
        self.queue = deque()
        self.discarded = 0

    def controller(self, board, seat):
        """Seat whose player decides for `seat`; declarer plays dummy's cards"""
        if board.play is not None and seat == board.play.dummy:
            return board.play.declarer
        return seat

    def schedule(self, board):
        """Queue the seat to act on `board` if an AI controls it; returns the entry or None"""
        seat = board.to_act
        if seat is None or self.controller(board, seat) not in self.ai_seats:
            return None
        pending = PendingMove(board.number, seat, board.version)
        if pending not in self.queue:
            self.queue.append(pending)
            logger.debug(f"⏳ {seat.value} owes a move on board #{board.number} (v{board.version})")
        return pending

    def is_stale(self, pending, board):
        return (pending.board_number != board.number or pending.version != board.version
                or board.to_act != pending.seat)

    def _discard(self, pending):
        self.discarded += 1
        logger.info(f"🗑️  Dropping stale move for {pending.seat.value} (board changed)")

    def step(self, board, get_board=None):
        """
        Process the next queued entry

        get_board, if given, returns the live board; it is consulted again
        after the move is computed so a reset during thinking discards it.

        Returns:
            (board, move) where move is None if the entry was stale or the queue empty
        """
        if not self.queue:
            return board, None
        pending = self.queue.popleft()
        if get_board is not None:
            board = get_board()
        if self.is_stale(pending, board):
            self._discard(pending)
            return board, None

        if self.think_delay > 0:
            self.sleep(self.think_delay)
        move = self.engine.request_ai_move(pending.seat, board)

        if get_board is not None:
            board = get_board()
            if self.is_stale(pending, board):
                self._discard(pending)
                return board, None
        return apply_move(board, move), move

    def run(self, board, max_moves=None):
        """Keep playing AI turns until a human must act or the board ends"""
        moves = []
        self.schedule(board)
        while self.queue:
            if max_moves is not None and len(moves) >= max_moves:
                break
            board, move = self.step(board)
            if move is not None:
                moves.append(move)
            self.schedule(board)
        return board, moves
