"""
Decision Engine
Chooses the move for a seat without a human player

Bids: GIB advisor (if enabled) -> conventional/opening fast path ->
Monte-Carlo evaluation of candidate calls.
Cards: GIB advisor (if enabled) -> play heuristics.

Advisor answers that are illegal in the current position are treated the
same as no answer at all.
"""

import logging
import random

from bidding_system import NaturalBidding
from bridge_errors import AdvisorUnavailable, IllegalAction, RejectReason
from bridge_types import (PASS, SOURCE_HEURISTIC, SOURCE_MONTE_CARLO, BidMove, PlayMove)
from engine_config import EngineConfig
from gib_advisor import AdvisorRequest, GibAdvisor
from monte_carlo import MonteCarloBidEvaluator, candidate_bids
from play_analyzer import choose_card
from trick_estimator import make_estimator
from trick_play import legal_cards

logger = logging.getLogger(__name__)


class DecisionEngine:
    """
    Computes AI moves from an explicit board context

    The context is any object exposing dealer, vulnerability, hands
    (Seat -> Hand, the original deal), auction and play (TrickState or None),
    such as table_api.Board. The engine keeps no per-board state.
    """

    def __init__(self, config=None, advisor=None, evaluator=None, rng=None):
        self.config = config or EngineConfig()
        if advisor is None and self.config.advisor_enabled:
            advisor = GibAdvisor(self.config)
        self.advisor = advisor
        self.evaluator = evaluator or MonteCarloBidEvaluator(
            self.config, make_estimator(self.config.trick_estimator))
        self.rng = rng or random.Random()

    def request_ai_move(self, seat, context):
        """
        Get a move for `seat`
        Returns: BidMove or PlayMove

        Raises:
            IllegalAction: it is not `seat`'s turn, or the board is finished
        """
        auction = context.auction
        if not auction.is_complete:
            if seat != auction.current_bidder:
                raise IllegalAction(RejectReason.OUT_OF_TURN, f"{seat.value} asked to bid")
            return self.choose_bid(seat, context)

        play = context.play
        if play is None:
            if auction.passed_out:
                raise IllegalAction(RejectReason.NO_CONTRACT)
            raise IllegalAction(RejectReason.WRONG_PHASE, "play has not started")
        if play.is_complete:
            raise IllegalAction(RejectReason.BOARD_COMPLETE)
        if seat != play.to_play:
            raise IllegalAction(RejectReason.OUT_OF_TURN, f"{seat.value} asked to play")
        return self.choose_card(seat, context)

    # ------------------------------------------------------------------
    # Bidding
    # ------------------------------------------------------------------

    def _ask_advisor(self, seat, context):
        if self.advisor is None:
            return None
        request = AdvisorRequest(seat=seat, dealer=context.auction.dealer, hands=context.hands,
                                 auction=context.auction, vulnerability=context.vulnerability,
                                 play=context.play if context.auction.is_complete else None)
        try:
            return self.advisor.ask(request)
        except AdvisorUnavailable as e:
            logger.info(f"⚠️  Advisor unavailable for {seat.value}: {e}")
            return None

    def choose_bid(self, seat, context):
        auction = context.auction
        hand = context.hands[seat]

        advice = self._ask_advisor(seat, context)
        if isinstance(advice, BidMove):
            if auction.is_legal(advice.bid, seat):
                return advice
            logger.warning(f"⚠️  Advisor suggested illegal call {advice.bid} for {seat.value}; ignoring")

        bidder = NaturalBidding(hand, auction, seat, context.vulnerability)
        forced = bidder.forced_bid()
        if forced is not None:
            call, reasoning = forced
            logger.info(f"🃏 {seat.value} bids {call}: {reasoning}")
            return BidMove(seat, call, reasoning, SOURCE_HEURISTIC)

        natural, _ = bidder.recommend()
        candidates = candidate_bids(auction, extra=[natural])
        choice = self.evaluator.evaluate(hand, seat, candidates, auction, context.vulnerability, self.rng)
        call = choice.bid
        if not auction.is_legal(call, seat):
            logger.error(f"❌ Monte-Carlo picked illegal call {call} for {seat.value}; passing")
            call = PASS
        return BidMove(seat, call, choice.describe(), SOURCE_MONTE_CARLO)

    # ------------------------------------------------------------------
    # Card play
    # ------------------------------------------------------------------

    def choose_card(self, seat, context):
        play = context.play
        legal = legal_cards(play, seat)

        advice = self._ask_advisor(seat, context)
        if isinstance(advice, PlayMove):
            if advice.card in legal:
                return advice
            logger.warning(f"⚠️  Advisor suggested illegal card {advice.card} for {seat.value}; ignoring")

        card, reasoning = choose_card(play, seat)
        logger.info(f"🃏 {seat.value} plays {card}: {reasoning}")
        return PlayMove(seat, card, reasoning, SOURCE_HEURISTIC)
