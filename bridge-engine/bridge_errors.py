"""
Engine Errors
Exception taxonomy shared by the auction, play and AI modules

- IllegalAction: a bid or card the rules reject (never partially applied)
- SimulationFailure: one Monte-Carlo trial could not finish
- AdvisorUnavailable: the remote advisor failed, timed out or answered nonsense
- ExhaustedOptions: no legal move exists (data corruption)
"""

from enum import Enum


class RejectReason(Enum):
    """Why a bid or card was refused"""
    OUT_OF_TURN = 'out_of_turn'
    AUCTION_CLOSED = 'auction_closed'
    INSUFFICIENT_BID = 'insufficient_bid'
    DOUBLE_NOT_ALLOWED = 'double_not_allowed'
    REDOUBLE_NOT_ALLOWED = 'redouble_not_allowed'
    CARD_NOT_HELD = 'card_not_held'
    MUST_FOLLOW_SUIT = 'must_follow_suit'
    BOARD_COMPLETE = 'board_complete'
    NO_CONTRACT = 'no_contract'
    WRONG_PHASE = 'wrong_phase'
    NOT_A_CALL = 'not_a_call'


# One explanation per category, for whoever shows rejections to a player
REASON_MESSAGES = {
    RejectReason.OUT_OF_TURN: "It is not your turn.",
    RejectReason.AUCTION_CLOSED: "The auction is already over.",
    RejectReason.INSUFFICIENT_BID: "A bid must be higher than the current contract bid.",
    RejectReason.DOUBLE_NOT_ALLOWED: "You can only double an opponent's undoubled bid.",
    RejectReason.REDOUBLE_NOT_ALLOWED: "You can only redouble an opponent's double.",
    RejectReason.CARD_NOT_HELD: "That card is not in the hand.",
    RejectReason.MUST_FOLLOW_SUIT: "You must follow suit.",
    RejectReason.BOARD_COMPLETE: "All 13 tricks have been played.",
    RejectReason.NO_CONTRACT: "The board was passed out; there is nothing to play.",
    RejectReason.WRONG_PHASE: "That action does not belong to the current phase.",
    RejectReason.NOT_A_CALL: "Only a bid, pass, double or redouble can be made in the auction.",
}


def explain(reason):
    """Human-readable explanation for a rejection reason"""
    return REASON_MESSAGES[reason]


class BridgeEngineError(Exception):
    """Base class for all engine errors"""


class IllegalAction(BridgeEngineError):
    """A bid or card play that the rules do not allow"""

    def __init__(self, reason, detail=None):
        self.reason = reason
        self.detail = detail
        message = explain(reason)
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SimulationFailure(BridgeEngineError):
    """A single Monte-Carlo trial could not produce a completed auction"""


class AdvisorUnavailable(BridgeEngineError):
    """The external advisor gave no usable answer"""


class ExhaustedOptions(BridgeEngineError):
    """No legal bid or card remains where one must exist"""
