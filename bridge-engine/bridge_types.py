"""
Bids and Moves
Tagged variants for calls in the auction and actions at the table

Bid = Pass | Double | Redouble | ContractBid(level, strain)
Move = BidMove(seat, bid) | PlayMove(seat, card)
"""

import re
from dataclasses import dataclass
from enum import Enum

from deal_model import Suit


class Strain(Enum):
    """Denomination of a contract; ordered C < D < H < S < NT"""
    CLUBS = 'C'
    DIAMONDS = 'D'
    HEARTS = 'H'
    SPADES = 'S'
    NOTRUMP = 'NT'

    @property
    def rank(self):
        return _STRAIN_ORDER.index(self)

    @property
    def suit(self):
        """Trump suit, or None for no-trump"""
        if self is Strain.NOTRUMP:
            return None
        return Suit(self.value)

    @property
    def symbol(self):
        return 'NT' if self is Strain.NOTRUMP else self.suit.symbol

    @property
    def is_major(self):
        return self in (Strain.HEARTS, Strain.SPADES)

    @property
    def is_minor(self):
        return self in (Strain.CLUBS, Strain.DIAMONDS)

    @property
    def game_level(self):
        """Lowest level that scores a game in this strain"""
        if self is Strain.NOTRUMP:
            return 3
        return 4 if self.is_major else 5

    @classmethod
    def parse(cls, text):
        key = str(text).strip().upper()
        if key in ('N', 'NT'):
            return cls.NOTRUMP
        return cls(Suit.parse(key).value)

    @classmethod
    def from_suit(cls, suit):
        return cls(suit.value)


_STRAIN_ORDER = [Strain.CLUBS, Strain.DIAMONDS, Strain.HEARTS, Strain.SPADES, Strain.NOTRUMP]


@dataclass(frozen=True)
class Pass:
    def __str__(self):
        return 'P'


@dataclass(frozen=True)
class Double:
    def __str__(self):
        return 'X'


@dataclass(frozen=True)
class Redouble:
    def __str__(self):
        return 'XX'


@dataclass(frozen=True)
class ContractBid:
    """A level 1-7 in a strain; ordering is by (level, strain rank)"""
    level: int
    strain: Strain

    def __post_init__(self):
        if not 1 <= self.level <= 7:
            raise ValueError(f"Bid level must be 1-7, got {self.level}")

    def __lt__(self, other):
        if not isinstance(other, ContractBid):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __le__(self, other):
        if not isinstance(other, ContractBid):
            return NotImplemented
        return self.sort_key <= other.sort_key

    def __gt__(self, other):
        if not isinstance(other, ContractBid):
            return NotImplemented
        return self.sort_key > other.sort_key

    def __ge__(self, other):
        if not isinstance(other, ContractBid):
            return NotImplemented
        return self.sort_key >= other.sort_key

    @property
    def sort_key(self):
        return (self.level, self.strain.rank)

    @property
    def tricks_required(self):
        return self.level + 6

    @property
    def is_game(self):
        return self.level >= self.strain.game_level

    def display(self):
        """Pretty text, e.g. '4♥' or '3NT'"""
        return f"{self.level}{self.strain.symbol}"

    def __str__(self):
        return f"{self.level}{self.strain.value}"


PASS = Pass()
DOUBLE = Double()
REDOUBLE = Redouble()

ALL_CONTRACT_BIDS = tuple(ContractBid(level, strain) for level in range(1, 8) for strain in _STRAIN_ORDER)

BID_PATTERN = re.compile(r'^([1-7])(C|D|H|S|N|NT)$')

_CALL_SPELLINGS = {
    'P': PASS, 'PASS': PASS, 'PA': PASS,
    'X': DOUBLE, 'D': DOUBLE, 'DBL': DOUBLE, 'DOUBLE': DOUBLE,
    'XX': REDOUBLE, 'R': REDOUBLE, 'RDBL': REDOUBLE, 'REDOUBLE': REDOUBLE,
}


def parse_bid(text):
    """
    Parse a call in any of the common spellings.

    Args:
        text: '1S', '3N', '3NT', 'P', 'PASS', 'X', 'DBL', 'XX', 'RDBL' (any case)

    Returns:
        Pass, Double, Redouble or ContractBid

    Raises:
        ValueError: the text is not a call
    """
    if isinstance(text, (Pass, Double, Redouble, ContractBid)):
        return text
    key = str(text).strip().upper()
    if key in _CALL_SPELLINGS:
        return _CALL_SPELLINGS[key]
    match = BID_PATTERN.match(key)
    if not match:
        raise ValueError(f"Unknown call: {text!r}")
    return ContractBid(int(match.group(1)), Strain.parse(match.group(2)))


def is_contract_bid(bid):
    return isinstance(bid, ContractBid)


@dataclass(frozen=True)
class BidMove:
    """A call made (or recommended) for a seat"""
    seat: object
    bid: object
    explanation: str = ''
    source: str = ''

    def __str__(self):
        return f"{self.seat.value}:{self.bid}"


@dataclass(frozen=True)
class PlayMove:
    """A card played (or recommended) for a seat"""
    seat: object
    card: object
    explanation: str = ''
    source: str = ''

    def __str__(self):
        return f"{self.seat.value}:{self.card}"


# Where a recommended move came from
SOURCE_ADVISOR = 'advisor'
SOURCE_HEURISTIC = 'heuristic'
SOURCE_MONTE_CARLO = 'monte-carlo'
