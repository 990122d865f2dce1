"""
Card & Deal Model
Suits, ranks, seats, hands and full-deck dealing

Text formats:
- Card: 'SA', 'HT' (suit letter + rank letter, 'T' or '10' for ten)
- LIN hand: 'SAKQJHAKT9D8765C432'
- Dotted hand: 'akq86.ak3.4.ak63' (spades.hearts.diamonds.clubs)
"""

import random
from dataclasses import dataclass
from enum import Enum, IntEnum


class Suit(Enum):
    """A card suit; comparison follows bidding order C < D < H < S"""
    CLUBS = 'C'
    DIAMONDS = 'D'
    HEARTS = 'H'
    SPADES = 'S'

    @property
    def order(self):
        return _SUIT_ORDER.index(self)

    @property
    def symbol(self):
        return _SUIT_SYMBOLS[self]

    def __lt__(self, other):
        if not isinstance(other, Suit):
            return NotImplemented
        return self.order < other.order

    @classmethod
    def parse(cls, text):
        """Parse 'S', 's', 'spades' or '♠'"""
        key = str(text).strip()
        if key in _SYMBOL_TO_SUIT:
            return _SYMBOL_TO_SUIT[key]
        key = key.upper()
        if key[:1] in ('S', 'H', 'D', 'C') and (len(key) == 1 or key.lower() == cls(key[0]).name.lower()):
            return cls(key[0])
        raise ValueError(f"Unknown suit: {text!r}")


_SUIT_ORDER = [Suit.CLUBS, Suit.DIAMONDS, Suit.HEARTS, Suit.SPADES]
_SUIT_SYMBOLS = {Suit.SPADES: '♠', Suit.HEARTS: '♥', Suit.DIAMONDS: '♦', Suit.CLUBS: '♣'}
_SYMBOL_TO_SUIT = {symbol: suit for suit, symbol in _SUIT_SYMBOLS.items()}

# Display order, highest suit first
SUITS = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)


class Rank(IntEnum):
    """Card rank, 2 lowest and ace highest"""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    @property
    def letter(self):
        return RANK_LETTERS[self - 2]

    @classmethod
    def parse(cls, text):
        """Parse 'A', 'k', 'T', 't' or '10' (ten has two spellings)"""
        key = str(text).strip().upper()
        if key == '10':
            return cls.TEN
        if len(key) == 1 and key in RANK_LETTERS:
            return cls(RANK_LETTERS.index(key) + 2)
        raise ValueError(f"Unknown rank: {text!r}")


RANK_LETTERS = '23456789TJQKA'

HCP_VALUES = {Rank.ACE: 4, Rank.KING: 3, Rank.QUEEN: 2, Rank.JACK: 1}


class Seat(Enum):
    """A table position, rotating N -> E -> S -> W"""
    NORTH = 'N'
    EAST = 'E'
    SOUTH = 'S'
    WEST = 'W'

    @property
    def next(self):
        return SEATS[(SEATS.index(self) + 1) % 4]

    @property
    def partner(self):
        return SEATS[(SEATS.index(self) + 2) % 4]

    @property
    def lho(self):
        """Left-hand opponent (next to act)"""
        return self.next

    @property
    def rho(self):
        """Right-hand opponent"""
        return SEATS[(SEATS.index(self) - 1) % 4]

    @property
    def partnership(self):
        return Partnership.NS if self in (Seat.NORTH, Seat.SOUTH) else Partnership.EW

    def is_opponent_of(self, other):
        return self.partnership != other.partnership

    @classmethod
    def parse(cls, text):
        """Parse 'N', 'north', 'North'"""
        key = str(text).strip().upper()[:1]
        return cls(key)


SEATS = (Seat.NORTH, Seat.EAST, Seat.SOUTH, Seat.WEST)


class Partnership(Enum):
    NS = 'NS'
    EW = 'EW'

    @property
    def seats(self):
        return (Seat.NORTH, Seat.SOUTH) if self is Partnership.NS else (Seat.EAST, Seat.WEST)

    @property
    def other(self):
        return Partnership.EW if self is Partnership.NS else Partnership.NS


class Vulnerability(Enum):
    """Which sides are vulnerable; values are the advisor's markers"""
    NONE = '-'
    NS = 'n'
    EW = 'e'
    BOTH = 'b'

    def is_vulnerable(self, side):
        """side may be a Partnership or a Seat"""
        if isinstance(side, Seat):
            side = side.partnership
        if self is Vulnerability.BOTH:
            return True
        if self is Vulnerability.NONE:
            return False
        return self.value == side.value[0].lower()

    @classmethod
    def for_board(cls, board_number):
        """Standard 16-board vulnerability rotation"""
        rotation = (cls.NONE, cls.NS, cls.EW, cls.BOTH,
                    cls.NS, cls.EW, cls.BOTH, cls.NONE,
                    cls.EW, cls.BOTH, cls.NONE, cls.NS,
                    cls.BOTH, cls.NONE, cls.NS, cls.EW)
        return rotation[(board_number - 1) % 16]


def dealer_for_board(board_number):
    """Board 1 is dealt by North, then clockwise"""
    return SEATS[(board_number - 1) % 4]


@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: Rank

    def __str__(self):
        return f"{self.suit.value}{self.rank.letter}"

    @property
    def hcp(self):
        return HCP_VALUES.get(self.rank, 0)

    @classmethod
    def parse(cls, text):
        """Parse 'SA', 'S10', 'st' or '♠A'"""
        text = str(text).strip()
        if len(text) < 2:
            raise ValueError(f"Unknown card: {text!r}")
        return cls(Suit.parse(text[0]), Rank.parse(text[1:]))


def full_deck():
    """All 52 cards, spades first, ace high within each suit"""
    return [Card(suit, rank) for suit in SUITS for rank in sorted(Rank, reverse=True)]


def shuffled(cards, rng=None):
    """Return a shuffled copy; the input sequence is left untouched"""
    rng = rng or random.Random()
    cards = list(cards)
    return rng.sample(cards, len(cards))


class Hand:
    """An immutable bridge hand with evaluation methods"""

    def __init__(self, suits=None):
        """
        suits: mapping of Suit -> iterable of Rank (or rank text)
        """
        self._suits = {}
        suits = suits or {}
        for suit in SUITS:
            ranks = [r if isinstance(r, Rank) else Rank.parse(r) for r in suits.get(suit, ())]
            if len(set(ranks)) != len(ranks):
                raise ValueError(f"Duplicate card in {suit.name.lower()}")
            self._suits[suit] = tuple(sorted(ranks, reverse=True))

    @classmethod
    def from_cards(cls, cards):
        suits = {suit: [] for suit in SUITS}
        for card in cards:
            suits[card.suit].append(card.rank)
        return cls(suits)

    @classmethod
    def from_lin(cls, lin_str):
        """Parse LIN format (e.g., 'SAKQJHAKT9D8765C432')"""
        suits = {suit: [] for suit in SUITS}
        current_suit = None
        for char in lin_str.upper():
            if char in 'SHDC':
                current_suit = Suit(char)
            elif char in RANK_LETTERS:
                if current_suit is None:
                    raise ValueError(f"Rank before suit in LIN hand: {lin_str!r}")
                suits[current_suit].append(Rank.parse(char))
            elif char == '1' or char == '0':
                # '10' spelling: the '1' starts it, the '0' finishes it
                if char == '0':
                    suits[current_suit].append(Rank.TEN)
        return cls(suits)

    @classmethod
    def from_dotted(cls, dotted):
        """Parse dotted format (e.g., 'akq86.ak3.4.ak63'); empty runs are voids"""
        parts = dotted.strip().split('.')
        if len(parts) != 4:
            raise ValueError(f"Dotted hand needs four suits: {dotted!r}")
        suits = {}
        for suit, run in zip(SUITS, parts):
            suits[suit] = [Rank.parse(ch) for ch in run.upper().replace('10', 'T')]
        return cls(suits)

    def to_lin(self):
        return ''.join(suit.value + ''.join(r.letter for r in self._suits[suit]) for suit in SUITS)

    def to_dotted(self):
        return '.'.join(''.join(r.letter for r in self._suits[suit]).lower() for suit in SUITS)

    def __str__(self):
        return ' '.join(f"{suit.symbol}{''.join(r.letter for r in self._suits[suit]) or '-'}"
                        for suit in SUITS)

    def __repr__(self):
        return f"Hand({self.to_lin()!r})"

    def __eq__(self, other):
        if not isinstance(other, Hand):
            return NotImplemented
        return self._suits == other._suits

    def __hash__(self):
        return hash(tuple(self._suits[s] for s in SUITS))

    def __len__(self):
        return sum(len(ranks) for ranks in self._suits.values())

    def __contains__(self, card):
        return card.rank in self._suits[card.suit]

    def __iter__(self):
        return iter(self.cards())

    def ranks(self, suit):
        """Ranks held in a suit, highest first"""
        return self._suits[suit]

    def length(self, suit):
        return len(self._suits[suit])

    def cards(self):
        return [Card(suit, rank) for suit in SUITS for rank in self._suits[suit]]

    def cards_in(self, suit):
        return [Card(suit, rank) for rank in self._suits[suit]]

    def without(self, card):
        """A new hand with one card removed"""
        if card not in self:
            raise ValueError(f"{card} is not in the hand")
        suits = dict(self._suits)
        suits[card.suit] = tuple(r for r in suits[card.suit] if r != card.rank)
        return Hand(suits)

    @property
    def hcp(self):
        """High card points (A=4, K=3, Q=2, J=1)"""
        return sum(HCP_VALUES.get(rank, 0) for ranks in self._suits.values() for rank in ranks)

    @property
    def distribution(self):
        """Length of each suit"""
        return {suit: len(ranks) for suit, ranks in self._suits.items()}

    @property
    def shape(self):
        """Shape pattern sorted by length (e.g., [5,4,2,2])"""
        return sorted((len(ranks) for ranks in self._suits.values()), reverse=True)

    def count_total_points(self):
        """HCP plus shortness points: void=3, singleton=2, doubleton=1"""
        dist_points = 0
        for length in self.distribution.values():
            if length == 0:
                dist_points += 3
            elif length == 1:
                dist_points += 2
            elif length == 2:
                dist_points += 1
        return self.hcp + dist_points

    def longest_suit(self):
        """Return the longest suit(s), highest ranking first"""
        dist = self.distribution
        max_len = max(dist.values())
        return [suit for suit in SUITS if dist[suit] == max_len]

    def is_balanced(self):
        """No singleton/void, at most one doubleton"""
        return self.shape in ([4, 3, 3, 3], [4, 4, 3, 2], [5, 3, 3, 2])

    def is_semi_balanced(self):
        """Balanced, or 5-4-2-2 / 6-3-2-2"""
        return self.shape in ([4, 3, 3, 3], [4, 4, 3, 2], [5, 3, 3, 2], [5, 4, 2, 2], [6, 3, 2, 2])

    def has_stopper(self, suit):
        """A, Kx, Qxx or Jxxx"""
        ranks = self._suits[suit]
        if not ranks:
            return False
        if Rank.ACE in ranks:
            return True
        if Rank.KING in ranks and len(ranks) >= 2:
            return True
        if Rank.QUEEN in ranks and len(ranks) >= 3:
            return True
        if Rank.JACK in ranks and len(ranks) >= 4:
            return True
        return False

    def quick_tricks(self):
        """Count quick tricks (defensive tricks)"""
        qt = 0
        for ranks in self._suits.values():
            if Rank.ACE in ranks and Rank.KING in ranks:
                qt += 2
            elif Rank.ACE in ranks:
                qt += 1
            elif Rank.KING in ranks and Rank.QUEEN in ranks:
                qt += 1
            elif Rank.KING in ranks:
                qt += 0.5
        return qt

    def top_honors(self, suit):
        """Count of A, K, Q held in a suit"""
        return sum(1 for rank in (Rank.ACE, Rank.KING, Rank.QUEEN) if rank in self._suits[suit])

    def aces(self):
        return sum(1 for ranks in self._suits.values() if Rank.ACE in ranks)


def deal_hands(rng=None):
    """Shuffle a full deck and deal 13 cards to each seat"""
    deck = shuffled(full_deck(), rng)
    return {seat: Hand.from_cards(deck[i * 13:(i + 1) * 13]) for i, seat in enumerate(SEATS)}


def validate_deal(hands):
    """Raise ValueError unless the four hands partition the deck exactly"""
    seen = set()
    for seat in SEATS:
        hand = hands.get(seat)
        if hand is None:
            raise ValueError(f"Missing hand for {seat.name.lower()}")
        if len(hand) != 13:
            raise ValueError(f"{seat.name.lower()} holds {len(hand)} cards")
        for card in hand.cards():
            if card in seen:
                raise ValueError(f"{card} dealt twice")
            seen.add(card)
    if len(seen) != 52:
        raise ValueError("Deal does not cover the full deck")
