"""
Monte-Carlo Bid Evaluator
Scores candidate bids by simulating the rest of the deal many times

Per candidate bid, each trial:
1. deals the 39 unseen cards around the known hand, weakly filtered by
   what the earlier calls showed
2. finishes the auction with the natural bidder as a cheap proxy for
   every seat (hard cap on the number of calls)
3. estimates declarer's tricks with a pluggable trick estimator
4. turns the outcome into a score for the evaluating seat

Trial seeds are drawn up front from the caller's Random, so a run is
reproducible and its result does not depend on the order trials finish.
"""

import logging
import math
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from auction_state import apply_bid
from bidding_system import NaturalBidding
from bridge_errors import IllegalAction, SimulationFailure
from bridge_types import ContractBid, Pass, parse_bid
from deal_model import SEATS, Hand, Vulnerability, full_deck, shuffled
from engine_config import EngineConfig
from trick_estimator import PointCountEstimator

logger = logging.getLogger(__name__)

# Score for a bid whose every trial failed
SENTINEL_SCORE = -999.0

# Standard deviation at which confidence reaches zero
CONFIDENCE_SPREAD = 200.0


@dataclass(frozen=True)
class BidEvaluation:
    bid: object
    mean_score: float
    confidence: float
    valid_trials: int
    total_trials: int
    aggressive: bool = False

    def describe(self):
        return (f"{self.bid}: mean {self.mean_score:+.1f}, confidence {self.confidence:.2f} "
                f"({self.valid_trials}/{self.total_trials} trials)")


# ----------------------------------------------------------------------
# Constraints from earlier calls
# ----------------------------------------------------------------------

def _opening_constraint(call):
    """Accept/discard predicate for what an opening bid shows"""
    text = str(call)
    if text == '1NT':
        return lambda h: 15 <= h.hcp <= 17 and h.is_balanced()
    if text == '2NT':
        return lambda h: 20 <= h.hcp <= 21 and h.is_balanced()
    if text == '2C':
        return lambda h: h.hcp >= 22
    suit = call.strain.suit
    if suit is None:
        return None
    if call.level == 1:
        if call.strain.is_major:
            return lambda h: h.hcp >= 10 and h.length(suit) >= 5
        return lambda h: h.hcp >= 10 and h.length(suit) >= 3
    if call.level == 2:
        return lambda h: 5 <= h.hcp <= 11 and h.length(suit) == 6
    if call.level == 3:
        return lambda h: h.hcp <= 10 and h.length(suit) >= 7
    return None


def bid_constraints(auction):
    """
    Predicates on each seat's hand implied by the calls so far

    Returns:
        dict of Seat -> list of callables Hand -> bool
    """
    constraints = {seat: [] for seat in SEATS}
    opened = False
    opening_side = None
    first_bid_seen = set()
    for entry in auction.entries:
        call = entry.bid
        if isinstance(call, Pass):
            if not opened:
                constraints[entry.seat].append(lambda h: h.hcp <= 12)
            continue
        if not isinstance(call, ContractBid):
            continue
        if not opened:
            opened = True
            opening_side = entry.seat.partnership
            predicate = _opening_constraint(call)
            if predicate is not None:
                constraints[entry.seat].append(predicate)
        elif entry.seat.partnership != opening_side and entry.seat not in first_bid_seen:
            suit = call.strain.suit
            if suit is not None:
                constraints[entry.seat].append(lambda h, s=suit: h.hcp >= 8 and h.length(s) >= 5)
        first_bid_seen.add(entry.seat)
    return constraints


def generate_deal(known_hand, seat, constraints, rng, max_attempts=50):
    """
    Deal the unseen cards to the other three seats

    Up to max_attempts deals are tried; the first satisfying every
    constraint wins, otherwise the last one is used.
    """
    unseen = [card for card in full_deck() if card not in known_hand]
    others = [s for s in SEATS if s != seat]
    hands = None
    for _ in range(max(1, max_attempts)):
        deck = shuffled(unseen, rng)
        hands = {seat: known_hand}
        for i, other in enumerate(others):
            hands[other] = Hand.from_cards(deck[i * 13:(i + 1) * 13])
        if all(predicate(hands[other]) for other in others for predicate in constraints.get(other, ())):
            return hands
    return hands


# ----------------------------------------------------------------------
# Scoring and aggregation
# ----------------------------------------------------------------------

def bidding_score(contract, tricks, seat, vulnerability):
    """
    Outcome of a simulated contract from `seat`'s point of view

    Made contracts reward the declaring side (more for games and overtricks),
    failures reward the defenders; vulnerability raises both stakes.
    """
    target = contract.required_tricks
    ours = contract.declaring_side == seat.partnership
    vulnerable = vulnerability.is_vulnerable(seat)

    if tricks >= target:
        extra = tricks - target
        if ours:
            score = 100 + 10 * extra
            if target >= 10:
                score += 50
            elif target == 9:
                score += 30
            if vulnerable:
                score += 20
        else:
            score = -50 - 5 * extra
    else:
        short = target - tricks
        if ours:
            score = -100 - 20 * short
            if vulnerable:
                score -= 30
        else:
            score = 75 + 15 * short
    return float(score)


def aggregate(scores):
    """
    Mean score and confidence of a set of trial scores

    Order-independent (math.fsum); no scores gives the sentinel.
    """
    scores = list(scores)
    if not scores:
        return SENTINEL_SCORE, 0.0
    n = len(scores)
    mean = math.fsum(scores) / n
    variance = math.fsum((s - mean) ** 2 for s in scores) / n
    confidence = 1.0 - math.sqrt(variance) / CONFIDENCE_SPREAD
    return mean, max(0.0, min(1.0, confidence))


def is_aggressive(call, auction):
    """
    Game level or higher, or a jump of more than one level over the
    standing bid
    """
    if not isinstance(call, ContractBid):
        return False
    if call.level >= 4 or call.is_game:
        return True
    standing = auction.standing_bid
    return standing is not None and call.level > standing.level + 1


def select_bid(evaluations, threshold=0.6):
    """
    Best evaluation by mean score, preferring a safe or well-supported bid
    over an aggressive long shot
    """
    if not evaluations:
        raise ValueError("No bids to choose from")
    ranked = sorted(evaluations, key=lambda e: e.mean_score, reverse=True)
    top = ranked[0]
    if not top.aggressive or top.confidence >= threshold:
        return top
    for evaluation in ranked:
        if not evaluation.aggressive or evaluation.confidence >= threshold:
            logger.info(f"🛡️  {top.bid} is aggressive with confidence {top.confidence:.2f}; "
                        f"choosing {evaluation.bid} instead")
            return evaluation
    return top


def candidate_bids(auction, extra=(), max_jump=2):
    """
    Calls worth simulating: pass, any legal double/redouble and contract
    bids up to max_jump levels above the cheapest one
    """
    legal = auction.legal_bids()
    contract_bids = [b for b in legal if isinstance(b, ContractBid)]
    candidates = [b for b in legal if not isinstance(b, ContractBid)]
    if contract_bids:
        ceiling = contract_bids[0].level + max_jump
        candidates.extend(b for b in contract_bids if b.level <= ceiling)
    for call in extra:
        call = parse_bid(call)
        if call not in candidates and auction.is_legal(call):
            candidates.append(call)
    return candidates


# ----------------------------------------------------------------------
# Evaluator
# ----------------------------------------------------------------------

class MonteCarloBidEvaluator:
    """
    Simulation-based bid chooser
    """

    def __init__(self, config=None, estimator=None):
        self.config = config or EngineConfig()
        self.estimator = estimator or PointCountEstimator()

    def run_trial(self, seed, known_hand, seat, candidate, auction, vulnerability, constraints):
        """
        One simulated deal and auction; returns the score for `seat`

        Raises:
            SimulationFailure: the auction hit the call cap, or the proxy
                bidder could not produce a call
        """
        rng = random.Random(seed)
        hands = generate_deal(known_hand, seat, constraints, rng, self.config.max_deal_attempts)

        state = apply_bid(auction, seat, candidate)
        calls = 0
        while not state.is_complete:
            if calls >= self.config.max_bidding_rounds:
                raise SimulationFailure(f"auction did not finish within {calls} calls: {state}")
            bidder = state.current_bidder
            try:
                call, _ = NaturalBidding(hands[bidder], state, bidder, vulnerability).recommend()
            except ValueError as e:
                raise SimulationFailure(f"proxy bidder failed for {bidder.value} after '{state}': {e}") from e
            state = apply_bid(state, bidder, call)
            calls += 1

        contract = state.contract
        if contract is None:
            return 0.0
        tricks = self.estimator.estimate(hands, contract, rng)
        return bidding_score(contract, tricks, seat, vulnerability)

    def _score_or_none(self, args):
        try:
            return self.run_trial(*args)
        except (SimulationFailure, IllegalAction) as e:
            logger.debug(f"⚠️  Trial discarded: {e}")
            return None

    def evaluate_bid(self, known_hand, seat, candidate, auction, vulnerability=Vulnerability.NONE,
                     rng=None, trials=None):
        """Run all trials for one candidate and aggregate them"""
        rng = rng or random.Random()
        trials = self.config.mc_trials if trials is None else trials
        constraints = bid_constraints(auction)
        seeds = [rng.getrandbits(64) for _ in range(trials)]
        jobs = [(seed, known_hand, seat, candidate, auction, vulnerability, constraints) for seed in seeds]

        if self.config.mc_workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.mc_workers) as pool:
                results = list(pool.map(self._score_or_none, jobs))
        else:
            results = [self._score_or_none(job) for job in jobs]

        scores = [r for r in results if r is not None]
        mean, confidence = aggregate(scores)
        evaluation = BidEvaluation(candidate, mean, confidence, len(scores), trials,
                                   is_aggressive(candidate, auction))
        logger.debug(f"🎲 {evaluation.describe()}")
        return evaluation

    def evaluate_all(self, known_hand, seat, candidates, auction, vulnerability=Vulnerability.NONE,
                     rng=None):
        """BidEvaluation for each candidate, in candidate order"""
        rng = rng or random.Random()
        return [self.evaluate_bid(known_hand, seat, parse_bid(candidate), auction, vulnerability, rng)
                for candidate in candidates]

    def evaluate(self, known_hand, seat, candidates, auction, vulnerability=Vulnerability.NONE,
                 rng=None):
        """
        Pick the best of `candidates` for `seat`

        Returns:
            BidEvaluation of the selected bid
        """
        if not candidates:
            candidates = candidate_bids(auction)
        evaluations = self.evaluate_all(known_hand, seat, candidates, auction, vulnerability, rng)
        choice = select_bid(evaluations, self.config.confidence_threshold)
        logger.info(f"🎲 Monte-Carlo pick for {seat.value}: {choice.describe()}")
        return choice
