"""
Unit tests for the Monte-Carlo bid evaluator
"""

import random
import unittest
from unittest import mock

from auction_state import Auction, Contract, Doubling
from bridge_types import PASS, Strain, parse_bid
from deal_model import SEATS, Hand, Seat, Vulnerability, validate_deal
from engine_config import EngineConfig
from monte_carlo import (SENTINEL_SCORE, BidEvaluation, MonteCarloBidEvaluator, aggregate, bid_constraints,
                         bidding_score, candidate_bids, generate_deal, is_aggressive, select_bid)
from trick_estimator import PointCountEstimator, make_estimator

STRONG_HAND = Hand.from_lin('SAKQ32HAK4DK32C98')


class FixedTricks:
    """Estimator that always returns the same trick count"""

    name = 'fixed'

    def __init__(self, tricks):
        self.tricks = tricks
        self.calls = 0

    def estimate(self, hands, contract, rng):
        self.calls += 1
        return self.tricks


def evaluation(bid, mean, confidence, aggressive):
    return BidEvaluation(parse_bid(bid), mean, confidence, 10, 10, aggressive)


class TestAggregation(unittest.TestCase):

    def test_no_scores_gives_sentinel(self):
        self.assertEqual(aggregate([]), (SENTINEL_SCORE, 0.0))

    def test_order_independent(self):
        rng = random.Random(4)
        scores = [rng.uniform(-300, 300) for _ in range(500)]
        reordered = list(scores)
        rng.shuffle(reordered)
        self.assertEqual(aggregate(scores), aggregate(reordered))

    def test_confidence_from_spread(self):
        self.assertEqual(aggregate([120.0, 120.0, 120.0]), (120.0, 1.0))
        # Population std of [0, 400] is 200
        mean, confidence = aggregate([0.0, 400.0])
        self.assertEqual(mean, 200.0)
        self.assertEqual(confidence, 0.0)
        _, confidence = aggregate([-1000.0, 1000.0])
        self.assertEqual(confidence, 0.0)
        _, confidence = aggregate([0.0, 200.0])
        self.assertAlmostEqual(confidence, 0.5)


class TestBidSelection(unittest.TestCase):

    def test_low_confidence_game_jump_is_avoided(self):
        """A 30%-confident jump to game loses to a safer bid"""
        choice = select_bid([
            evaluation('4S', 300.0, 0.3, True),
            evaluation('2S', 120.0, 0.8, False),
            evaluation('P', -20.0, 0.9, False),
        ])
        self.assertEqual(str(choice.bid), '2S')

    def test_confident_aggressive_bid_kept(self):
        choice = select_bid([
            evaluation('4S', 300.0, 0.75, True),
            evaluation('2S', 120.0, 0.8, False),
        ])
        self.assertEqual(str(choice.bid), '4S')

    def test_safe_best_bid_kept(self):
        choice = select_bid([
            evaluation('2S', 150.0, 0.2, False),
            evaluation('4S', 100.0, 0.9, True),
        ])
        self.assertEqual(str(choice.bid), '2S')

    def test_only_aggressive_options(self):
        choice = select_bid([
            evaluation('4S', 300.0, 0.3, True),
            evaluation('5S', 100.0, 0.1, True),
        ])
        self.assertEqual(str(choice.bid), '4S')

    def test_empty(self):
        with self.assertRaises(ValueError):
            select_bid([])

    def test_is_aggressive(self):
        auction = Auction.from_calls(Seat.NORTH, ['1S', 'P'])
        self.assertTrue(is_aggressive(parse_bid('4S'), auction))
        self.assertTrue(is_aggressive(parse_bid('3NT'), auction))
        self.assertTrue(is_aggressive(parse_bid('3S'), auction))
        self.assertFalse(is_aggressive(parse_bid('2S'), auction))
        self.assertFalse(is_aggressive(PASS, auction))

    def test_candidate_bids(self):
        auction = Auction.from_calls(Seat.NORTH, ['1S'])
        candidates = [str(c) for c in candidate_bids(auction, extra=['4S'])]
        self.assertEqual(candidates[:2], ['P', 'X'])
        self.assertIn('1NT', candidates)
        self.assertIn('3NT', candidates)
        self.assertNotIn('4C', candidates)
        self.assertEqual(candidates[-1], '4S')
        self.assertEqual(len(candidates), 14)


class TestDealGeneration(unittest.TestCase):

    def test_constraints_from_calls(self):
        auction = Auction.from_calls(Seat.NORTH, ['P', '1H', '2C', 'P'])
        constraints = bid_constraints(auction)
        self.assertEqual(len(constraints[Seat.NORTH]), 1)
        self.assertEqual(len(constraints[Seat.EAST]), 1)
        self.assertEqual(len(constraints[Seat.SOUTH]), 1)
        self.assertEqual(constraints[Seat.WEST], [])

        opener = constraints[Seat.EAST][0]
        self.assertTrue(opener(Hand.from_lin('SA2HAKJ54DK32C987')))
        self.assertFalse(opener(Hand.from_lin('SAK2HAKJ4DK32C987')))
        overcaller = constraints[Seat.SOUTH][0]
        self.assertTrue(overcaller(Hand.from_lin('S32H54DK32CAQJ987')))
        self.assertFalse(overcaller(Hand.from_lin('SK32HQ54DK32C9876')))

    def test_known_hand_kept(self):
        rng = random.Random(8)
        hands = generate_deal(STRONG_HAND, Seat.SOUTH, {}, rng)
        self.assertIs(hands[Seat.SOUTH], STRONG_HAND)
        validate_deal(hands)

    def test_constraints_respected_when_satisfiable(self):
        constraints = {Seat.NORTH: [lambda h: h.hcp >= 10]}
        rng = random.Random(9)
        for _ in range(20):
            hands = generate_deal(STRONG_HAND, Seat.SOUTH, constraints, rng, max_attempts=200)
            self.assertGreaterEqual(hands[Seat.NORTH].hcp, 10)

    def test_impossible_constraints_still_deal(self):
        constraints = {Seat.NORTH: [lambda h: False]}
        hands = generate_deal(STRONG_HAND, Seat.SOUTH, constraints, random.Random(1), max_attempts=3)
        validate_deal(hands)


class TestScoring(unittest.TestCase):

    def setUp(self):
        self.contract = Contract(4, Strain.SPADES, Doubling.UNDOUBLED, Seat.SOUTH)

    def test_made_game(self):
        self.assertEqual(bidding_score(self.contract, 10, Seat.SOUTH, Vulnerability.NONE), 150.0)
        self.assertEqual(bidding_score(self.contract, 11, Seat.NORTH, Vulnerability.NS), 180.0)
        self.assertEqual(bidding_score(self.contract, 10, Seat.EAST, Vulnerability.NONE), -50.0)

    def test_defeated(self):
        self.assertEqual(bidding_score(self.contract, 9, Seat.SOUTH, Vulnerability.NONE), -120.0)
        self.assertEqual(bidding_score(self.contract, 9, Seat.SOUTH, Vulnerability.BOTH), -150.0)
        self.assertEqual(bidding_score(self.contract, 8, Seat.WEST, Vulnerability.NONE), 105.0)


class TestEvaluator(unittest.TestCase):

    def test_passed_out_candidate_scores_zero(self):
        auction = Auction.from_calls(Seat.NORTH, ['P', 'P', 'P'])
        estimator = FixedTricks(7)
        evaluator = MonteCarloBidEvaluator(EngineConfig(mc_trials=10), estimator)
        result = evaluator.evaluate_bid(STRONG_HAND, Seat.WEST, PASS, auction, rng=random.Random(1))
        self.assertEqual(result.mean_score, 0.0)
        self.assertEqual(result.confidence, 1.0)
        self.assertEqual(result.valid_trials, 10)
        self.assertEqual(estimator.calls, 0)

    def test_every_trial_failing_gives_sentinel(self):
        auction = Auction.from_calls(Seat.NORTH, [])
        evaluator = MonteCarloBidEvaluator(EngineConfig(mc_trials=5, max_bidding_rounds=0), FixedTricks(9))
        result = evaluator.evaluate_bid(STRONG_HAND, Seat.NORTH, parse_bid('1S'), auction,
                                        rng=random.Random(2))
        self.assertEqual(result.mean_score, SENTINEL_SCORE)
        self.assertEqual(result.valid_trials, 0)
        self.assertEqual(result.total_trials, 5)

    def test_proxy_bidder_error_discards_trial(self):
        auction = Auction.from_calls(Seat.NORTH, [])
        evaluator = MonteCarloBidEvaluator(EngineConfig(mc_trials=4), FixedTricks(9))
        with mock.patch('monte_carlo.NaturalBidding.recommend',
                        side_effect=ValueError("Bid level must be 1-7, got 8")):
            result = evaluator.evaluate_bid(STRONG_HAND, Seat.NORTH, parse_bid('1S'), auction,
                                            rng=random.Random(2))
        self.assertEqual(result.mean_score, SENTINEL_SCORE)
        self.assertEqual(result.valid_trials, 0)
        self.assertEqual(result.total_trials, 4)

    def test_reproducible_with_seed(self):
        auction = Auction.from_calls(Seat.NORTH, [])
        evaluator = MonteCarloBidEvaluator(EngineConfig(mc_trials=15))
        first = evaluator.evaluate_bid(STRONG_HAND, Seat.NORTH, parse_bid('1S'), auction,
                                       rng=random.Random(42))
        second = evaluator.evaluate_bid(STRONG_HAND, Seat.NORTH, parse_bid('1S'), auction,
                                        rng=random.Random(42))
        self.assertEqual(first, second)
        self.assertGreater(first.valid_trials, 0)

    def test_workers_do_not_change_result(self):
        auction = Auction.from_calls(Seat.NORTH, [])
        serial = MonteCarloBidEvaluator(EngineConfig(mc_trials=12, mc_workers=1))
        parallel = MonteCarloBidEvaluator(EngineConfig(mc_trials=12, mc_workers=4))
        a = serial.evaluate_bid(STRONG_HAND, Seat.NORTH, parse_bid('1S'), auction, rng=random.Random(5))
        b = parallel.evaluate_bid(STRONG_HAND, Seat.NORTH, parse_bid('1S'), auction, rng=random.Random(5))
        self.assertEqual(a, b)

    def test_evaluate_picks_a_candidate(self):
        auction = Auction.from_calls(Seat.NORTH, [])
        evaluator = MonteCarloBidEvaluator(EngineConfig(mc_trials=8))
        choice = evaluator.evaluate(STRONG_HAND, Seat.NORTH, ['P', '1S', '2S'], auction,
                                    rng=random.Random(3))
        self.assertIn(str(choice.bid), ('P', '1S', '2S'))
        self.assertEqual(choice.total_trials, 8)


class TestEstimators(unittest.TestCase):

    def test_point_count_range(self):
        rng = random.Random(6)
        contract = Contract(3, Strain.NOTRUMP, Doubling.UNDOUBLED, Seat.SOUTH)
        estimator = PointCountEstimator()
        for _ in range(30):
            hands = generate_deal(STRONG_HAND, Seat.SOUTH, {}, rng)
            self.assertTrue(0 <= estimator.estimate(hands, contract, rng) <= 13)

    def test_point_count_without_noise(self):
        hands = {seat: Hand() for seat in SEATS}
        hands[Seat.SOUTH] = STRONG_HAND
        hands[Seat.NORTH] = Hand.from_lin('SJ54H532DJ654C543')
        contract = Contract(4, Strain.SPADES, Doubling.UNDOUBLED, Seat.SOUTH)
        # 21 HCP -> 6 + 5, plus one for the 8-card fit
        self.assertEqual(PointCountEstimator(noise=0).estimate(hands, contract, None), 12)

    def test_make_estimator(self):
        self.assertIsInstance(make_estimator('points'), PointCountEstimator)
        with self.assertRaises(ValueError):
            make_estimator('oracle')


if __name__ == '__main__':
    unittest.main()
