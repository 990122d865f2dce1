"""
Auction State Machine
Applies calls in turn, enforces legality and derives the final contract

Every operation returns a new Auction; a rejected call raises IllegalAction
and leaves the input untouched.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from bridge_errors import IllegalAction, RejectReason
from bridge_types import (ALL_CONTRACT_BIDS, DOUBLE, PASS, REDOUBLE, ContractBid,
                          Double, Pass, Redouble, parse_bid)
from deal_model import Seat

logger = logging.getLogger(__name__)


class Doubling(Enum):
    UNDOUBLED = ''
    DOUBLED = 'X'
    REDOUBLED = 'XX'

    @property
    def multiplier(self):
        return {Doubling.UNDOUBLED: 1, Doubling.DOUBLED: 2, Doubling.REDOUBLED: 4}[self]


@dataclass(frozen=True)
class AuctionEntry:
    seat: Seat
    bid: object

    def __str__(self):
        return f"{self.seat.value}:{self.bid}"


@dataclass(frozen=True)
class Contract:
    """Final contract: level, strain, doubling and who plays it"""
    level: int
    strain: object
    doubling: Doubling
    declarer: Seat

    @property
    def dummy(self):
        return self.declarer.partner

    @property
    def trump(self):
        """Trump suit, or None in no-trump"""
        return self.strain.suit

    @property
    def required_tricks(self):
        return self.level + 6

    @property
    def declaring_side(self):
        return self.declarer.partnership

    @property
    def opening_leader(self):
        return self.declarer.lho

    @property
    def bid(self):
        return ContractBid(self.level, self.strain)

    def __str__(self):
        return f"{self.level}{self.strain.value}{self.doubling.value}"

    def describe(self):
        return f"{self} by {self.declarer.name.title()}"


@dataclass(frozen=True)
class Auction:
    """Immutable auction: the dealer plus the calls made so far"""
    dealer: Seat
    entries: Tuple[AuctionEntry, ...] = ()

    @classmethod
    def from_calls(cls, dealer, calls):
        """Replay a text auction, e.g. Auction.from_calls(Seat.SOUTH, ['1S', 'P', 'P', 'P'])"""
        auction = start_auction(dealer)
        for call in calls:
            auction = apply_bid(auction, auction.current_bidder, parse_bid(call))
        return auction

    @property
    def current_bidder(self):
        seat = self.dealer
        for _ in self.entries:
            seat = seat.next
        return seat

    @property
    def standing_entry(self):
        """Entry holding the highest contract bid so far"""
        for entry in reversed(self.entries):
            if isinstance(entry.bid, ContractBid):
                return entry
        return None

    @property
    def standing_bid(self):
        entry = self.standing_entry
        return entry.bid if entry else None

    @property
    def last_call_entry(self):
        """Last entry that was not a pass"""
        for entry in reversed(self.entries):
            if not isinstance(entry.bid, Pass):
                return entry
        return None

    @property
    def doubling(self):
        """Doubling state of the standing bid"""
        for entry in reversed(self.entries):
            if isinstance(entry.bid, Redouble):
                return Doubling.REDOUBLED
            if isinstance(entry.bid, Double):
                return Doubling.DOUBLED
            if isinstance(entry.bid, ContractBid):
                break
        return Doubling.UNDOUBLED

    @property
    def consecutive_passes(self):
        count = 0
        for entry in reversed(self.entries):
            if not isinstance(entry.bid, Pass):
                break
            count += 1
        return count

    @property
    def passed_out(self):
        return len(self.entries) == 4 and self.standing_entry is None and self.consecutive_passes == 4

    @property
    def is_complete(self):
        if self.passed_out:
            return True
        return self.standing_entry is not None and self.consecutive_passes >= 3

    @property
    def contract(self):
        """Final Contract once the auction is over with a bid, else None"""
        if not self.is_complete or self.passed_out:
            return None
        standing = self.standing_entry
        strain = standing.bid.strain
        side = standing.seat.partnership
        # Declarer is the first of the winning side to name the final strain
        declarer = next(entry.seat for entry in self.entries
                        if entry.seat.partnership == side
                        and isinstance(entry.bid, ContractBid)
                        and entry.bid.strain == strain)
        return Contract(standing.bid.level, strain, self.doubling, declarer)

    def bids_by(self, seat):
        return [entry.bid for entry in self.entries if entry.seat == seat]

    def contract_bids(self):
        return [entry for entry in self.entries if isinstance(entry.bid, ContractBid)]

    def opening_entry(self):
        """First contract bid of the auction"""
        for entry in self.entries:
            if isinstance(entry.bid, ContractBid):
                return entry
        return None

    def rejection_reason(self, seat, bid):
        """Why `seat` may not make `bid` now, or None when it is legal"""
        if not isinstance(bid, (Pass, Double, Redouble, ContractBid)):
            return RejectReason.NOT_A_CALL
        if self.is_complete:
            return RejectReason.AUCTION_CLOSED
        if seat != self.current_bidder:
            return RejectReason.OUT_OF_TURN
        if isinstance(bid, Pass):
            return None
        last = self.last_call_entry
        if isinstance(bid, Double):
            if (last is None or not isinstance(last.bid, ContractBid)
                    or not last.seat.is_opponent_of(seat)):
                return RejectReason.DOUBLE_NOT_ALLOWED
            return None
        if isinstance(bid, Redouble):
            if last is None or not isinstance(last.bid, Double) or not last.seat.is_opponent_of(seat):
                return RejectReason.REDOUBLE_NOT_ALLOWED
            return None
        standing = self.standing_bid
        if standing is not None and not bid > standing:
            return RejectReason.INSUFFICIENT_BID
        return None

    def is_legal(self, bid, seat=None):
        seat = seat or self.current_bidder
        return self.rejection_reason(seat, bid) is None

    def legal_bids(self):
        """All calls the current bidder may make, pass first"""
        if self.is_complete:
            return []
        seat = self.current_bidder
        calls = [PASS]
        if self.is_legal(DOUBLE, seat):
            calls.append(DOUBLE)
        if self.is_legal(REDOUBLE, seat):
            calls.append(REDOUBLE)
        standing = self.standing_bid
        calls.extend(bid for bid in ALL_CONTRACT_BIDS if standing is None or bid > standing)
        return calls

    def __str__(self):
        return ' '.join(str(entry.bid) for entry in self.entries) or '(no calls)'


def start_auction(dealer):
    """Empty auction with the dealer to call first"""
    return Auction(dealer=dealer)


def apply_bid(auction, seat, bid):
    """
    Apply one call to the auction.

    Args:
        auction: current Auction
        seat: Seat making the call
        bid: Pass, Double, Redouble or ContractBid

    Returns:
        New Auction with the call appended

    Raises:
        IllegalAction: the call is out of turn, insufficient or otherwise illegal
    """
    reason = auction.rejection_reason(seat, bid)
    if reason is not None:
        raise IllegalAction(reason, f"{seat.value} {bid} after '{auction}'")

    updated = replace(auction, entries=auction.entries + (AuctionEntry(seat, bid),))

    if updated.passed_out:
        logger.info("🔁 Passed out: no contract, board needs a redeal")
    elif updated.is_complete:
        contract = updated.contract
        logger.info(f"🔍 Contract finalized: {contract} by {contract.declarer.value} "
                    f"(first to bid {contract.strain.value}), opening leader: {contract.opening_leader.value}")
    return updated
