"""
Natural Bidding System
A simplified Standard American system used as the engine's fast path

Features:
- Opening bids (1-level, 1NT/2NT, weak twos, preempts, 2C strong)
- Conventional replies that need no judgement: Stayman, Jacoby transfers,
  2C waiting/positive answer, Blackwood and Gerber ace counts
- Responses, overcalls, takeout doubles and simple rebids (recommend only)

forced_bid() answers only the mechanical situations and returns None
otherwise, so the caller can fall through to simulation. recommend()
always produces a legal call and is cheap enough to drive simulated
auctions.
"""

import logging

from bridge_types import DOUBLE, PASS, ContractBid, Strain, parse_bid
from deal_model import SUITS, Suit, Vulnerability

logger = logging.getLogger(__name__)

MAJORS = (Suit.SPADES, Suit.HEARTS)

# Rough strength partner has shown with their first contract bid
SHOWN_STRENGTH = {
    '1NT': 16, '2NT': 20, '3NT': 25, '2C': 23,
    '1C': 13, '1D': 13, '1H': 13, '1S': 13,
    '2D': 8, '2H': 8, '2S': 8,
    '3C': 8, '3D': 8, '3H': 8, '3S': 8,
}


def bid(level, strain):
    """ContractBid from a level and a Suit, Strain or letter"""
    if isinstance(strain, Suit):
        strain = Strain.from_suit(strain)
    elif not isinstance(strain, Strain):
        strain = Strain.parse(strain)
    return ContractBid(level, strain)


class NaturalBidding:
    """
    Natural bidding for one seat at one point of the auction
    """

    def __init__(self, hand=None, auction=None, seat=None, vulnerability=Vulnerability.NONE):
        self.hand = hand
        self.auction = auction
        self.seat = seat
        self.vulnerability = vulnerability

    def set_hand(self, hand):
        """Set the current hand to analyze"""
        self.hand = hand

    def set_auction(self, auction, seat=None):
        """
        Set the current auction
        auction: auction_state.Auction
        seat: seat to bid (defaults to the auction's current bidder)
        """
        self.auction = auction
        self.seat = seat or auction.current_bidder

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------

    def forced_bid(self):
        """
        Mechanical bid for openings and conventional replies
        Returns: (bid, reasoning), or None when judgement is needed
        """
        if self.hand is None or self.auction is None:
            return None

        if self.auction.standing_bid is None:
            return self._get_opening_bid()

        for handler in (self._answer_stayman, self._complete_transfer, self._answer_2c,
                        self._answer_ace_ask, self._initiate_over_notrump):
            answer = handler()
            if answer is not None:
                call, reasoning = answer
                if self.auction.is_legal(call, self.seat):
                    return call, reasoning
        return None

    def recommend(self):
        """
        Best natural call for the seat; always legal
        Returns: (bid, reasoning)
        """
        forced = self.forced_bid()
        if forced is not None:
            return forced

        call, reasoning = self._judgement_bid()
        if not self.auction.is_legal(call, self.seat):
            logger.debug(f"🔍 {self.seat.value}: {call} not legal after '{self.auction}', passing")
            return PASS, f"Pass ({call} is not available)"
        return call, reasoning

    # ------------------------------------------------------------------
    # Auction reading helpers
    # ------------------------------------------------------------------

    def _calls(self):
        return [entry.bid for entry in self.auction.entries]

    def _tail(self, *pattern):
        """Last calls match `pattern` (oldest first); 'P' matches a pass"""
        calls = self._calls()
        if len(calls) < len(pattern):
            return False
        for call, expected in zip(calls[-len(pattern):], pattern):
            if expected is None:
                continue
            if str(call) != expected:
                return False
        return True

    def _opening_is(self, index_from_end, seat):
        opening = self.auction.opening_entry()
        entries = self.auction.entries
        return opening is not None and opening is entries[-index_from_end] and opening.seat == seat

    def _contract_bids_by(self, seat):
        return [b for b in self.auction.bids_by(seat) if isinstance(b, ContractBid)]

    def _have_i_bid(self):
        return bool(self._contract_bids_by(self.seat))

    def _partner_bids(self):
        return self._contract_bids_by(self.seat.partner)

    def _opponent_bids(self):
        return self._contract_bids_by(self.seat.lho) + self._contract_bids_by(self.seat.rho)

    def _dist(self):
        return self.hand.distribution

    def _suit_quality(self, suit):
        """Count of A, K, Q in the suit"""
        return self.hand.top_honors(suit)

    def _rule_of_20(self):
        """Rule of 20: HCP + length of two longest suits >= 20"""
        shape = self.hand.shape
        return self.hand.hcp + shape[0] + shape[1] >= 20

    def _cheapest(self, strain):
        """Lowest legal level for a strain over the standing bid, None above 7"""
        if isinstance(strain, Suit):
            strain = Strain.from_suit(strain)
        standing = self.auction.standing_bid
        if standing is None:
            return 1
        level = standing.level if strain.rank > standing.strain.rank else standing.level + 1
        return level if level <= 7 else None

    # ------------------------------------------------------------------
    # Openings
    # ------------------------------------------------------------------

    def _get_opening_bid(self):
        """Determine opening bid"""
        hcp = self.hand.hcp
        dist = self._dist()

        if hcp >= 22:
            return bid(2, 'C'), f"2♣ Strong artificial (22+ HCP, {hcp} HCP)"

        if 20 <= hcp <= 21 and self.hand.is_balanced():
            return bid(2, 'NT'), f"2NT balanced ({hcp} HCP)"

        if 15 <= hcp <= 17 and self.hand.is_balanced():
            return bid(1, 'NT'), f"1NT balanced ({hcp} HCP)"

        if hcp >= 12 or (hcp >= 10 and self._rule_of_20()):
            if dist[Suit.SPADES] >= 5 and dist[Suit.SPADES] >= dist[Suit.HEARTS]:
                return bid(1, 'S'), f"1♠ ({dist[Suit.SPADES]}-card suit, {hcp} HCP)"
            if dist[Suit.HEARTS] >= 5:
                return bid(1, 'H'), f"1♥ ({dist[Suit.HEARTS]}-card suit, {hcp} HCP)"
            diamonds, clubs = dist[Suit.DIAMONDS], dist[Suit.CLUBS]
            if diamonds > clubs or (diamonds == clubs and diamonds >= 4):
                return bid(1, 'D'), f"1♦ ({diamonds}-card suit, {hcp} HCP)"
            return bid(1, 'C'), f"1♣ ({clubs}-card suit, {hcp} HCP)"

        # Weak two: 6-card suit with two of the top three honors
        if 5 <= hcp <= 11:
            for suit in (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS):
                if dist[suit] == 6 and self._suit_quality(suit) >= 2:
                    return bid(2, suit), f"Weak 2{suit.symbol} (6-card suit, {hcp} HCP)"

        if 6 <= hcp <= 10:
            for suit in SUITS:
                if dist[suit] >= 7:
                    return bid(3, suit), f"Preemptive 3{suit.symbol} (7+ card suit, {hcp} HCP)"

        return PASS, f"Pass (insufficient values, {hcp} HCP)"

    # ------------------------------------------------------------------
    # Conventional replies
    # ------------------------------------------------------------------

    def _stayman_answer(self, level):
        dist = self._dist()
        if dist[Suit.HEARTS] >= 4:
            return bid(level, 'H'), f"{level}♥ Stayman reply (4+ hearts)"
        if dist[Suit.SPADES] >= 4:
            return bid(level, 'S'), f"{level}♠ Stayman reply (4+ spades)"
        return bid(level, 'D'), f"{level}♦ Stayman reply (no 4-card major)"

    def _answer_stayman(self):
        """Opener answers partner's Stayman inquiry"""
        if self._tail('1NT', 'P', '2C', 'P') and self._opening_is(4, self.seat):
            return self._stayman_answer(2)
        if self._tail('2NT', 'P', '3C', 'P') and self._opening_is(4, self.seat):
            return self._stayman_answer(3)
        return None

    def _complete_transfer(self):
        """Opener completes partner's Jacoby transfer"""
        transfers = {('1NT', '2D'): ('2H', '♥'), ('1NT', '2H'): ('2S', '♠'),
                     ('2NT', '3D'): ('3H', '♥'), ('2NT', '3H'): ('3S', '♠')}
        for (opening, ask), (answer, symbol) in transfers.items():
            if self._tail(opening, 'P', ask, 'P') and self._opening_is(4, self.seat):
                return parse_bid(answer), f"{answer[0]}{symbol} completing Jacoby transfer"
        return None

    def _answer_2c(self):
        """Answer partner's strong 2C opening"""
        if not (self._tail('2C', 'P') and self._opening_is(2, self.seat.partner)):
            return None
        hcp = self.hand.hcp
        dist = self._dist()
        if hcp < 8:
            return bid(2, 'D'), f"2♦ waiting (negative, {hcp} HCP)"
        if dist[Suit.HEARTS] >= 5:
            return bid(2, 'H'), f"2♥ positive ({hcp} HCP, 5+ hearts)"
        if dist[Suit.SPADES] >= 5:
            return bid(2, 'S'), f"2♠ positive ({hcp} HCP, 5+ spades)"
        if self.hand.is_balanced():
            return bid(2, 'NT'), f"2NT positive ({hcp} HCP, balanced)"
        for suit in (Suit.CLUBS, Suit.DIAMONDS):
            if dist[suit] >= 5:
                return bid(3, suit), f"3{suit.symbol} positive ({hcp} HCP, 5+ {suit.name.lower()})"
        return bid(2, 'D'), f"2♦ waiting ({hcp} HCP)"

    def _answer_ace_ask(self):
        """Blackwood (4NT) and Gerber (4C over our notrump opening)"""
        aces = self.hand.aces()
        steps = {0: 0, 4: 0, 1: 1, 2: 2, 3: 3}
        calls = self._calls()
        if len(calls) < 4 or not self._tail(None, 'P', None, 'P'):
            return None
        mine, partners = calls[-4], calls[-2]

        if (str(partners) == '4C' and str(mine) in ('1NT', '2NT')
                and self._opening_is(4, self.seat)):
            answer = ('4D', '4H', '4S', '4NT')[steps[aces]]
            return parse_bid(answer), f"{answer} Gerber reply ({aces} aces)"

        # 4NT directly over our own notrump is quantitative, not Blackwood
        if (str(partners) == '4NT' and isinstance(mine, ContractBid)
                and mine.strain is not Strain.NOTRUMP):
            answer = ('5C', '5D', '5H', '5S')[steps[aces]]
            return parse_bid(answer), f"{answer} Blackwood reply ({aces} aces)"
        return None

    def _initiate_over_notrump(self):
        """Responder starts Stayman or a transfer over partner's notrump opening"""
        if self._have_i_bid():
            return None
        for opening, level in (('1NT', 2), ('2NT', 3)):
            if self._tail(opening, 'P') and self._opening_is(2, self.seat.partner):
                return self._notrump_convention(level)
        return None

    def _notrump_convention(self, level):
        hcp = self.hand.hcp
        dist = self._dist()
        # 2NT opener needs less from responder to reach game
        invite = 8 if level == 2 else 4
        hearts, spades = dist[Suit.HEARTS], dist[Suit.SPADES]
        if hearts >= 6 or (hearts >= 5 and hcp >= invite and hearts >= spades):
            return bid(level, 'D'), f"{level}♦ Jacoby transfer (5+ hearts, {hcp} HCP)"
        if dist[Suit.SPADES] >= 5 and (dist[Suit.SPADES] >= 6 or hcp >= invite):
            return bid(level, 'H'), f"{level}♥ Jacoby transfer (5+ spades, {hcp} HCP)"
        if hcp >= invite and (dist[Suit.HEARTS] == 4 or dist[Suit.SPADES] == 4):
            return bid(level, 'C'), f"{level}♣ Stayman (4-card major, {hcp} HCP)"
        return None

    # ------------------------------------------------------------------
    # Judgement bids (recommend only)
    # ------------------------------------------------------------------

    def _judgement_bid(self):
        partner_bids = self._partner_bids()
        opponent_bids = self._opponent_bids()

        if not self._have_i_bid():
            if partner_bids:
                return self._respond_to_partner(partner_bids[0])
            if opponent_bids:
                return self._get_overcall()
            return self._get_opening_bid()
        if self.auction.opening_entry().seat == self.seat:
            return self._get_opener_rebid()
        return self._get_responder_rebid()

    def _respond_to_partner(self, opening):
        """Respond to partner's first contract bid"""
        text = str(opening)
        if text == '1NT':
            return self._respond_to_notrump(1)
        if text == '2NT':
            return self._respond_to_notrump(2)
        if opening.level == 1:
            return self._respond_to_1_suit(opening)
        if text in ('2D', '2H', '2S') or opening.level == 3:
            return self._respond_to_preempt(opening)
        return PASS, "Pass (default)"

    def _respond_to_notrump(self, level):
        """Natural answers to partner's notrump once no convention applies"""
        hcp = self.hand.hcp
        game_needs = 10 if level == 1 else 5
        if hcp >= game_needs + 6 and self.hand.is_balanced():
            return bid(4, 'NT'), f"4NT quantitative (slam invitation, {hcp} HCP)"
        if hcp >= game_needs:
            return bid(3, 'NT'), f"3NT game ({hcp} HCP)"
        if level == 1 and hcp >= 8 and self.hand.is_balanced():
            return bid(2, 'NT'), f"2NT invitational ({hcp} HCP, balanced)"
        return PASS, f"Pass {level}NT ({hcp} HCP)"

    def _respond_to_preempt(self, opening):
        hcp = self.hand.hcp
        suit = opening.strain.suit
        if hcp < 15:
            return PASS, f"Pass {opening.display()} ({hcp} HCP, insufficient for game)"
        if suit in MAJORS:
            return bid(4, suit), f"4{suit.symbol} game ({hcp} HCP)"
        if self.hand.is_balanced():
            return bid(3, 'NT'), f"3NT game ({hcp} HCP)"
        if opening.level == 2:
            return bid(3, suit), f"3{suit.symbol} invitational ({hcp} HCP)"
        return PASS, f"Pass ({hcp} HCP)"

    def _respond_to_1_suit(self, opening):
        """Respond to partner's 1-level suit opening"""
        hcp = self.hand.hcp
        dist = self._dist()
        opened = opening.strain.suit

        if hcp < 6:
            return PASS, f"Pass ({hcp} HCP, insufficient to respond)"

        support = dist[opened]
        if opened in MAJORS and support >= 4 and hcp >= 13:
            return bid(2, 'NT'), f"2NT Jacoby (4+ card support, {hcp} HCP, game-forcing)"
        if support >= 4 and 10 <= hcp <= 12:
            return bid(3, opened), f"3{opened.symbol} limit raise (4+ card support, {hcp} HCP)"
        if opened in MAJORS and support >= 3 and hcp <= 9:
            return bid(2, opened), f"2{opened.symbol} raise (3+ card support, {hcp} HCP)"

        # New suit: majors up the line at the one level
        for suit in (Suit.HEARTS, Suit.SPADES):
            if suit != opened and dist[suit] >= 4 and self._cheapest(suit) == 1:
                return bid(1, suit), f"1{suit.symbol} new suit ({dist[suit]}+ cards, {hcp} HCP)"

        if hcp >= 13 and self.hand.is_balanced():
            return bid(3, 'NT'), f"3NT game ({hcp} HCP, balanced)"

        if hcp >= 10:
            for suit in SUITS:
                if suit != opened and dist[suit] >= 4:
                    level = self._cheapest(suit)
                    if level is not None:
                        return bid(level, suit), f"{level}{suit.symbol} new suit ({hcp} HCP)"

        if opened not in MAJORS and support >= 5:
            return bid(2, opened), f"2{opened.symbol} raise (5+ card support, {hcp} HCP)"

        if hcp <= 10:
            return bid(1, 'NT'), f"1NT ({hcp} HCP, no fit)"
        if self.hand.is_balanced():
            return bid(2, 'NT'), f"2NT invitational ({hcp} HCP, balanced)"
        return bid(1, 'NT'), f"1NT ({hcp} HCP)"

    def _get_overcall(self):
        """Determine overcall after opponent opens"""
        hcp = self.hand.hcp
        dist = self._dist()
        standing = self.auction.standing_bid
        their_suit = standing.strain.suit

        if 8 <= hcp <= 17 and self.hand.quick_tricks() >= 2:
            for suit in SUITS:
                if suit != their_suit and dist[suit] >= 5 and self._suit_quality(suit) >= 1:
                    level = self._cheapest(suit)
                    if level is not None and level <= 2:
                        return (bid(level, suit),
                                f"{level}{suit.symbol} overcall ({hcp} HCP, {dist[suit]}-card suit)")

        if (15 <= hcp <= 18 and self.hand.is_balanced() and their_suit is not None
                and self.hand.has_stopper(their_suit) and self._cheapest(Strain.NOTRUMP) == 1):
            return bid(1, 'NT'), f"1NT overcall ({hcp} HCP, balanced, stopper)"

        if 6 <= hcp <= 11:
            for suit in SUITS:
                if suit != their_suit and dist[suit] >= 6 and self._suit_quality(suit) >= 2:
                    level = self._cheapest(suit)
                    if level is not None and level <= 2:
                        return (bid(level + 1, suit),
                                f"{level + 1}{suit.symbol} jump overcall (weak, {hcp} HCP)")

        if hcp >= 12 and their_suit is not None and dist[their_suit] <= 2:
            others = [s for s in SUITS if s != their_suit]
            if all(dist[s] >= 3 for s in others) and self.auction.is_legal(DOUBLE, self.seat):
                return DOUBLE, f"Double for takeout ({hcp} HCP, shortage in opponent's suit)"

        return PASS, f"Pass (no safe overcall, {hcp} HCP)"

    def _partner_strength(self):
        first = self._partner_bids()
        if not first:
            return 0
        return SHOWN_STRENGTH.get(str(first[0]), 9)

    def _get_opener_rebid(self):
        """Opener's second bid"""
        hcp = self.hand.hcp
        points = self.hand.count_total_points()
        dist = self._dist()
        opening = self._contract_bids_by(self.seat)[0]
        partner_bids = self._partner_bids()
        if not partner_bids:
            return PASS, f"Pass (partner silent, {hcp} HCP)"
        reply = partner_bids[-1]
        my_suit = opening.strain.suit

        if self.auction.standing_entry.seat != self.seat.partner:
            return PASS, "Pass (opponents have the auction)"
        if reply.is_game:
            return PASS, f"Pass (partner placed the contract at {reply.display()})"

        if my_suit is not None and reply.strain.suit == my_suit:
            game = bid(Strain.from_suit(my_suit).game_level, my_suit)
            if (reply.level == 2 and points >= 19) or (reply.level == 3 and points >= 15):
                return game, f"{game.display()} game ({points} points, fit found)"
            if reply.level == 2 and points >= 16:
                return bid(3, my_suit), f"3{my_suit.symbol} invitational ({points} points)"
            return PASS, f"Pass (minimum, {points} points)"

        if my_suit in MAJORS and str(reply) == '2NT':
            return bid(4, my_suit), f"4{my_suit.symbol} game (over Jacoby 2NT)"

        if reply.strain is Strain.NOTRUMP:
            if hcp >= 18:
                return bid(3, 'NT'), f"3NT game ({hcp} HCP)"
            if my_suit is not None and dist[my_suit] >= 6:
                level = self._cheapest(my_suit)
                if level is not None:
                    return bid(level, my_suit), f"{level}{my_suit.symbol} rebid (6-card suit)"
            return PASS, f"Pass ({hcp} HCP)"

        new_suit = reply.strain.suit
        if new_suit is not None and dist[new_suit] >= 4:
            level = self._cheapest(new_suit)
            if level is not None:
                if points >= 19 and new_suit in MAJORS:
                    level = max(level, 4)
                return bid(level, new_suit), f"{level}{new_suit.symbol} raise (4-card support, {points} points)"
        if my_suit is not None and dist[my_suit] >= 6:
            level = self._cheapest(my_suit)
            if level is not None:
                return bid(level, my_suit), f"{level}{my_suit.symbol} rebid (6-card suit)"
        if self.hand.is_balanced():
            level = self._cheapest(Strain.NOTRUMP)
            if level == 1 or (level is not None and hcp >= 18):
                return bid(level, 'NT'), f"{level}NT rebid (balanced, {hcp} HCP)"
        for suit in SUITS:
            if suit not in (my_suit, new_suit) and dist[suit] >= 4:
                level = self._cheapest(suit)
                if level is not None and level <= 2:
                    return bid(level, suit), f"{level}{suit.symbol} second suit ({hcp} HCP)"
        if my_suit is not None:
            level = self._cheapest(my_suit)
            if level is not None and level <= 2:
                return bid(level, my_suit), f"{level}{my_suit.symbol} rebid"
        return PASS, f"Pass ({hcp} HCP)"

    def _get_responder_rebid(self):
        """Responder's continuation after opener's rebid"""
        hcp = self.hand.hcp
        dist = self._dist()
        combined = hcp + self._partner_strength()
        mine = self._contract_bids_by(self.seat)
        partner_bids = self._partner_bids()
        standing = self.auction.standing_bid

        if self.auction.standing_entry.seat != self.seat.partner or standing.is_game:
            return PASS, f"Pass (combined {combined} points)"

        # Fit: partner bid a major we hold 3+ of, or raised one we bid
        fit = None
        for partner_bid in reversed(partner_bids):
            suit = partner_bid.strain.suit
            if suit in MAJORS and (dist[suit] >= 3 or any(b.strain.suit == suit for b in mine)):
                fit = suit
                break

        if combined >= 25:
            if fit is not None and self.auction.is_legal(bid(4, fit), self.seat):
                return bid(4, fit), f"4{fit.symbol} game (combined {combined} points)"
            if self.auction.is_legal(bid(3, 'NT'), self.seat):
                return bid(3, 'NT'), f"3NT game (combined {combined} points)"
        if 23 <= combined < 25:
            level = self._cheapest(fit) if fit is not None else None
            if level is not None and level <= 3:
                return bid(level, fit), f"{level}{fit.symbol} invitational (combined {combined} points)"
            level = self._cheapest(Strain.NOTRUMP)
            if level is not None and level <= 2:
                return bid(2, 'NT'), f"2NT invitational (combined {combined} points)"
        return PASS, f"Pass (combined {combined} points)"


def recommend_bid(hand, auction, seat=None, vulnerability=Vulnerability.NONE):
    """Convenience wrapper: natural call for `seat` (default current bidder)"""
    return NaturalBidding(hand, auction, seat or auction.current_bidder, vulnerability).recommend()


def forced_bid(hand, auction, seat=None, vulnerability=Vulnerability.NONE):
    """Convenience wrapper: conventional/opening call or None"""
    return NaturalBidding(hand, auction, seat or auction.current_bidder, vulnerability).forced_bid()

