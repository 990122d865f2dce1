"""
Play Analyzer
Heuristic card selection for leads, follows, ruffs and discards

Always returns a legal card for the seat to play. No look-ahead: the rules
below are the usual single-dummy table habits.
"""

import logging

from bridge_errors import ExhaustedOptions
from deal_model import Rank, SUITS
from trick_play import legal_cards, trick_winner

logger = logging.getLogger(__name__)

# Touching honor sequences and the card they lead, strongest first
LEAD_SEQUENCES = [
    ((Rank.ACE, Rank.KING, Rank.QUEEN), Rank.ACE),
    ((Rank.ACE, Rank.KING, Rank.JACK), Rank.ACE),
    ((Rank.ACE, Rank.KING), Rank.ACE),
    ((Rank.KING, Rank.QUEEN, Rank.JACK), Rank.KING),
    ((Rank.KING, Rank.QUEEN, Rank.TEN), Rank.KING),
    ((Rank.KING, Rank.QUEEN), Rank.KING),
    ((Rank.QUEEN, Rank.JACK, Rank.TEN), Rank.QUEEN),
    ((Rank.QUEEN, Rank.JACK, Rank.NINE), Rank.QUEEN),
    ((Rank.QUEEN, Rank.JACK), Rank.QUEEN),
    ((Rank.JACK, Rank.TEN, Rank.NINE), Rank.JACK),
    ((Rank.JACK, Rank.TEN), Rank.JACK),
    ((Rank.TEN, Rank.NINE, Rank.EIGHT), Rank.TEN),
    ((Rank.TEN, Rank.NINE), Rank.TEN),
]


class PlayAnalyzer:
    """
    Picks a card for the seat on play in a TrickState
    """

    def __init__(self, state, seat=None):
        self.state = state
        self.seat = seat or state.to_play
        self.hand = state.hands[self.seat]
        self.trump = state.trump

    def choose_card(self):
        """
        Recommend a card to play
        Returns: (card, reasoning)
        """
        legal = legal_cards(self.state, self.seat)
        if not legal:
            raise ExhaustedOptions(f"{self.seat.value} has no legal card")

        trick = self.state.current_trick
        if not trick:
            if not self.state.played:
                card, reasoning = self._opening_lead()
            else:
                card, reasoning = self._lead()
        elif any(card.suit == trick[0].card.suit for card in legal):
            card, reasoning = self._follow(legal)
        else:
            card, reasoning = self._cannot_follow()

        if card not in legal:
            logger.warning(f"⚠️  {self.seat.value}: heuristic chose {card}, not legal; using {legal[-1]}")
            card, reasoning = legal[-1], f"Playing {legal[-1]} (fallback)"
        return card, reasoning

    # ------------------------------------------------------------------
    # Leading
    # ------------------------------------------------------------------

    def _sequence_lead(self, suit):
        ranks = self.hand.ranks(suit)
        for sequence, lead in LEAD_SEQUENCES:
            if all(rank in ranks for rank in sequence) and ranks[0] == sequence[0]:
                return next(c for c in self.hand.cards_in(suit) if c.rank == lead)
        return None

    def _fourth_highest(self, suit):
        cards = self.hand.cards_in(suit)
        return cards[3] if len(cards) >= 4 else cards[-1]

    def _side_suits(self):
        return [s for s in SUITS if s != self.trump and self.hand.length(s) > 0]

    def _longest(self, suits):
        return max(suits, key=lambda s: (self.hand.length(s), self.hand.top_honors(s)))

    def _opening_lead(self):
        """Opening lead from sequences, then length (NT) or shortness (suit)"""
        side = self._side_suits() or [s for s in SUITS if self.hand.length(s) > 0]
        for suit in sorted(side, key=lambda s: -self.hand.length(s)):
            card = self._sequence_lead(suit)
            if card is not None:
                return card, f"Opening lead {card}: top of sequence"

        if self.trump is None:
            suit = self._longest(side)
            card = self._fourth_highest(suit)
            return card, f"Opening lead {card}: fourth highest of longest suit"

        trumps = self.hand.length(self.trump)
        if 1 <= trumps <= 2:
            card = self.hand.cards_in(self.trump)[-1]
            return card, f"Opening lead {card}: short trump"
        for length, label in ((1, 'singleton'), (2, 'doubleton')):
            for suit in side:
                if self.hand.length(suit) == length:
                    card = self.hand.cards_in(suit)[0]
                    return card, f"Opening lead {card}: {label}"
        suit = self._longest(side)
        card = self._fourth_highest(suit)
        return card, f"Opening lead {card}: fourth highest of longest side suit"

    def _lead(self):
        """Lead after the first trick"""
        side = self._side_suits() or [s for s in SUITS if self.hand.length(s) > 0]
        for suit in side:
            card = self._sequence_lead(suit)
            if card is not None:
                return card, f"Leading {card} from a sequence"
        suit = self._longest(side)
        card = self.hand.cards_in(suit)[-1]
        return card, f"Leading low from longest suit ({suit.symbol})"

    # ------------------------------------------------------------------
    # Following
    # ------------------------------------------------------------------

    def _partner_winning(self):
        trick = self.state.current_trick
        return trick_winner(trick, self.trump) == self.seat.partner

    def _winning_card(self):
        trick = self.state.current_trick
        winner = trick_winner(trick, self.trump)
        return next(p.card for p in trick if p.seat == winner)

    def _beats(self, card, best):
        if card.suit == best.suit:
            return card.rank > best.rank
        return self.trump is not None and card.suit == self.trump

    def _follow(self, legal):
        low = legal[-1]
        if self._partner_winning():
            return low, f"Following low with {low} (partner winning)"
        best = self._winning_card()
        winners = [c for c in legal if self._beats(c, best)]
        if winners:
            card = winners[-1]
            return card, f"Winning with cheapest card {card}"
        return low, f"Following low with {low} (can't win)"

    def _cannot_follow(self):
        if self.trump is not None and self.hand.length(self.trump) > 0 and not self._partner_winning():
            best = self._winning_card()
            ruffs = [c for c in self.hand.cards_in(self.trump) if self._beats(c, best)]
            if ruffs:
                card = ruffs[-1]
                return card, f"Trumping with {card}"
        discards = [s for s in SUITS if s != self.trump and self.hand.length(s) > 0]
        if not discards:
            discards = [self.trump]
        suit = max(discards, key=lambda s: self.hand.length(s))
        card = self.hand.cards_in(suit)[-1]
        return card, f"Discarding {card} (can't follow)"


def choose_card(state, seat=None):
    """
    Convenience function to get a play recommendation

    Returns:
        Tuple of (card, reasoning)
    """
    return PlayAnalyzer(state, seat).choose_card()
