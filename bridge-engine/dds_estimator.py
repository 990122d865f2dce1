"""
Double Dummy Trick Estimator
Uses endplay (Bo Haglund's DDS engine) to count declarer's tricks exactly

Drop-in replacement for PointCountEstimator inside Monte-Carlo bidding.
Much slower, so keep mc_trials low when selecting it.
"""

import logging

from endplay.dds import calc_dd_table
from endplay.types import Deal, Denom, Player

from deal_model import SEATS, Seat

logger = logging.getLogger(__name__)

PLAYER_MAP = {Seat.NORTH: Player.north, Seat.EAST: Player.east,
              Seat.SOUTH: Player.south, Seat.WEST: Player.west}

DENOM_MAP = {'S': Denom.spades, 'H': Denom.hearts, 'D': Denom.diamonds,
             'C': Denom.clubs, 'NT': Denom.nt}


def hands_to_pbn(hands):
    """PBN deal string starting from North, e.g. 'N:AKQ.JT9.876.5432 ...'"""
    return 'N:' + ' '.join(hands[seat].to_dotted().upper() for seat in SEATS)


class DoubleDummyEstimator:
    """Exact double-dummy trick count for the declaring side"""

    name = 'dds'

    def __init__(self):
        self._cache = {}

    def trick_table(self, hands):
        """endplay DDTable for a full deal (cached per deal)"""
        pbn = hands_to_pbn(hands)
        table = self._cache.get(pbn)
        if table is None:
            table = calc_dd_table(Deal(pbn))
            if len(self._cache) > 256:
                self._cache.clear()
            self._cache[pbn] = table
        return table

    def estimate(self, hands, contract, rng=None):
        table = self.trick_table(hands)
        tricks = table[DENOM_MAP[contract.strain.value], PLAYER_MAP[contract.declarer]]
        logger.debug(f"🔍 DDS: {contract} by {contract.declarer.value} takes {tricks} tricks")
        return int(tricks)
