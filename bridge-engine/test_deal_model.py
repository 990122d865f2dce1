"""
Unit tests for cards, hands, seats and dealing
"""

import random
import unittest

from deal_model import (SEATS, Card, Hand, Partnership, Rank, Seat, Suit, Vulnerability,
                        deal_hands, dealer_for_board, full_deck, shuffled, validate_deal)


class TestCardParsing(unittest.TestCase):

    def test_ten_spellings(self):
        """'10', 'T' and 't' are the same rank"""
        self.assertEqual(Rank.parse('10'), Rank.TEN)
        self.assertEqual(Rank.parse('T'), Rank.TEN)
        self.assertEqual(Rank.parse('t'), Rank.TEN)
        self.assertEqual(Card.parse('S10'), Card.parse('st'))

    def test_card_text(self):
        self.assertEqual(str(Card(Suit.SPADES, Rank.ACE)), 'SA')
        self.assertEqual(str(Card.parse('h10')), 'HT')
        self.assertEqual(Card.parse('♠A'), Card(Suit.SPADES, Rank.ACE))

    def test_bad_card(self):
        with self.assertRaises(ValueError):
            Card.parse('Z9')
        with self.assertRaises(ValueError):
            Card.parse('S1')

    def test_suit_order(self):
        self.assertLess(Suit.CLUBS, Suit.DIAMONDS)
        self.assertLess(Suit.HEARTS, Suit.SPADES)

    def test_full_deck(self):
        deck = full_deck()
        self.assertEqual(len(deck), 52)
        self.assertEqual(len(set(deck)), 52)
        self.assertEqual(str(deck[0]), 'SA')


class TestHandEvaluation(unittest.TestCase):
    """Test hand evaluation methods"""

    def test_hcp_counting(self):
        # AK spades, AK hearts, Q diamonds
        hand = Hand.from_lin('SAK2HAK3DQ54C5432')
        self.assertEqual(hand.hcp, 16)

    def test_lin_round_trip(self):
        hand = Hand.from_lin('SAKQJHAKT9D876C32')
        self.assertEqual(hand.to_lin(), 'SAKQJHAKT9D876C32')
        self.assertEqual(len(hand), 13)

    def test_lin_accepts_10(self):
        self.assertEqual(Hand.from_lin('SA10'), Hand.from_lin('SAT'))

    def test_dotted_round_trip(self):
        hand = Hand.from_dotted('akq86.ak3.4.ak63')
        self.assertEqual(hand.to_dotted(), 'akq86.ak3.4.ak63')
        self.assertEqual(hand.length(Suit.DIAMONDS), 1)

    def test_dotted_void(self):
        hand = Hand.from_dotted('akqjt98765432...')
        self.assertEqual(hand.length(Suit.SPADES), 13)
        self.assertEqual(hand.length(Suit.CLUBS), 0)
        self.assertEqual(Hand.from_dotted(hand.to_dotted()), hand)

    def test_balanced_hand(self):
        self.assertTrue(Hand.from_lin('SAKJ2HQ54DK32CJ98').is_balanced())
        self.assertTrue(Hand.from_lin('SAKQJ2HQ54DK32C98').is_balanced())
        self.assertFalse(Hand.from_lin('SAKQJ2HQJ54DK3C98').is_balanced())

    def test_semi_balanced_hand(self):
        self.assertTrue(Hand.from_lin('SAKQJ2HQJ54DK3C98').is_semi_balanced())
        self.assertTrue(Hand.from_lin('SAKQJ32HQ54DK3C98').is_semi_balanced())

    def test_stopper_detection(self):
        hand = Hand.from_lin('SA2HAK3DQJ32CKQ54')
        self.assertTrue(hand.has_stopper(Suit.SPADES))
        self.assertTrue(hand.has_stopper(Suit.DIAMONDS))
        self.assertTrue(hand.has_stopper(Suit.CLUBS))
        self.assertFalse(Hand.from_lin('SJ2HAK3DQJ32CKQ54').has_stopper(Suit.SPADES))

    def test_total_points_and_quick_tricks(self):
        # 5-4-4-0: void adds 3
        hand = Hand.from_lin('SAKQ32HK432D5432')
        self.assertEqual(hand.hcp, 12)
        self.assertEqual(hand.count_total_points(), 15)
        self.assertEqual(hand.quick_tricks(), 2.5)

    def test_without_is_immutable(self):
        hand = Hand.from_lin('SAKQJHAKT9D876C32')
        smaller = hand.without(Card.parse('SA'))
        self.assertIn(Card.parse('SA'), hand)
        self.assertNotIn(Card.parse('SA'), smaller)
        self.assertEqual(len(smaller), 12)
        with self.assertRaises(ValueError):
            smaller.without(Card.parse('SA'))

    def test_duplicate_rejected(self):
        with self.assertRaises(ValueError):
            Hand({Suit.SPADES: [Rank.ACE, Rank.ACE]})


class TestSeats(unittest.TestCase):

    def test_rotation(self):
        self.assertEqual(Seat.NORTH.next, Seat.EAST)
        self.assertEqual(Seat.WEST.next, Seat.NORTH)
        self.assertEqual(Seat.SOUTH.partner, Seat.NORTH)
        self.assertEqual(Seat.NORTH.lho, Seat.EAST)
        self.assertEqual(Seat.NORTH.rho, Seat.WEST)

    def test_partnerships(self):
        self.assertEqual(Seat.EAST.partnership, Partnership.EW)
        self.assertTrue(Seat.NORTH.is_opponent_of(Seat.EAST))
        self.assertFalse(Seat.NORTH.is_opponent_of(Seat.SOUTH))

    def test_vulnerability(self):
        self.assertTrue(Vulnerability.NS.is_vulnerable(Seat.SOUTH))
        self.assertFalse(Vulnerability.NS.is_vulnerable(Partnership.EW))
        self.assertTrue(Vulnerability.BOTH.is_vulnerable(Seat.WEST))
        self.assertFalse(Vulnerability.NONE.is_vulnerable(Seat.WEST))

    def test_board_rotation(self):
        self.assertEqual(dealer_for_board(1), Seat.NORTH)
        self.assertEqual(dealer_for_board(4), Seat.WEST)
        self.assertEqual(Vulnerability.for_board(1), Vulnerability.NONE)
        self.assertEqual(Vulnerability.for_board(4), Vulnerability.BOTH)
        self.assertEqual(Vulnerability.for_board(17), Vulnerability.NONE)


class TestDealing(unittest.TestCase):

    def test_deal_partitions_deck(self):
        """Every deal uses each of the 52 cards exactly once"""
        rng = random.Random(7)
        for _ in range(50):
            hands = deal_hands(rng)
            validate_deal(hands)
            cards = [card for seat in SEATS for card in hands[seat].cards()]
            self.assertEqual(sorted(cards, key=str), sorted(full_deck(), key=str))

    def test_same_seed_same_deal(self):
        self.assertEqual(deal_hands(random.Random(3)), deal_hands(random.Random(3)))

    def test_shuffled_leaves_input(self):
        deck = full_deck()
        before = list(deck)
        result = shuffled(deck, random.Random(1))
        self.assertEqual(deck, before)
        self.assertEqual(set(result), set(deck))

    def test_validate_rejects_duplicates(self):
        hands = deal_hands(random.Random(5))
        hands[Seat.NORTH] = hands[Seat.SOUTH]
        with self.assertRaises(ValueError):
            validate_deal(hands)


if __name__ == '__main__':
    unittest.main()
