"""
Table API
Pure operations a session layer calls to run one board

Every function takes the current value and returns a new one; rejected
actions raise IllegalAction. The caller owns where boards are kept.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Dict, Optional

import auction_state
import trick_play
from bridge_errors import IllegalAction, RejectReason
from bridge_types import BidMove, PlayMove, parse_bid
from deal_model import Vulnerability, deal_hands, dealer_for_board, validate_deal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Board:
    """One deal with its auction and (once started) card play"""
    number: int
    dealer: object
    vulnerability: Vulnerability
    hands: Dict
    auction: object
    play: Optional[object] = None
    version: int = 0

    @property
    def phase(self):
        if not self.auction.is_complete:
            return 'auction'
        if self.auction.passed_out:
            return 'passed_out'
        if self.play is None:
            return 'ready_to_play'
        if self.play.is_complete:
            return 'complete'
        return 'play'

    @property
    def needs_redeal(self):
        return self.auction.passed_out

    @property
    def contract(self):
        return self.auction.contract

    @property
    def to_act(self):
        """Seat owing the next action, or None"""
        if not self.auction.is_complete:
            return self.auction.current_bidder
        if self.play is not None and not self.play.is_complete:
            return self.play.to_play
        return None

    @property
    def result(self):
        return self.play.result if self.play is not None else None

    def status_summary(self):
        """Get a summary of the current game state"""
        status = [f"Board #{self.number} | Dealer: {self.dealer.value} | Vul: {self.vulnerability.name}"]
        if self.play is not None:
            status.append(trick_play.status_summary(self.play))
        elif self.auction.passed_out:
            status.append("Passed out")
        else:
            status.append(f"Auction in progress ({len(self.auction.entries)} calls): {self.auction}")
        return "\n".join(status)


def new_board(number=1, rng=None, hands=None):
    """Deal a board with the standard dealer and vulnerability rotation"""
    rng = rng or random.Random()
    hands = hands or deal_hands(rng)
    validate_deal(hands)
    dealer = dealer_for_board(number)
    board = Board(number=number, dealer=dealer, vulnerability=Vulnerability.for_board(number),
                  hands=dict(hands), auction=auction_state.start_auction(dealer))
    logger.info(f"🆕 Board #{number}: dealer {dealer.value}, vul {board.vulnerability.name}")
    return board


def start_auction(dealer):
    return auction_state.start_auction(dealer)


def submit_bid(auction, seat, bid):
    """Apply a call given as a Bid value or as text ('1S', 'P', 'X', ...)"""
    if isinstance(bid, str):
        try:
            bid = parse_bid(bid)
        except ValueError as e:
            raise IllegalAction(RejectReason.NOT_A_CALL, str(e)) from e
    return auction_state.apply_bid(auction, seat, bid)


def start_play(contract, hands, vulnerability=Vulnerability.NONE):
    return trick_play.start_play(contract, hands, vulnerability)


def submit_card(state, seat, card):
    return trick_play.apply_play(state, seat, card)


def request_ai_move(engine, seat, board):
    """Move the decision engine recommends for `seat` on `board`"""
    return engine.request_ai_move(seat, board)


def board_bid(board, seat, bid):
    """Apply a call to a board; starts card play when the auction ends with a contract"""
    if board.phase != 'auction':
        raise IllegalAction(RejectReason.WRONG_PHASE, f"board is in {board.phase}")
    auction = submit_bid(board.auction, seat, bid)
    play = None
    if auction.is_complete and not auction.passed_out:
        play = start_play(auction.contract, board.hands, board.vulnerability)
    return replace(board, auction=auction, play=play, version=board.version + 1)


def board_card(board, seat, card):
    """Play a card on a board"""
    if board.phase != 'play':
        raise IllegalAction(RejectReason.WRONG_PHASE, f"board is in {board.phase}")
    return replace(board, play=submit_card(board.play, seat, card), version=board.version + 1)


def apply_move(board, move):
    """Apply a BidMove or PlayMove to a board"""
    if isinstance(move, BidMove):
        return board_bid(board, move.seat, move.bid)
    if isinstance(move, PlayMove):
        return board_card(board, move.seat, move.card)
    raise TypeError(f"Not a move: {move!r}")
