"""
Duplicate scoring of finished contracts
"""

import pytest

from auction_state import Contract, Doubling
from bridge_types import Strain
from contract_scoring import score_contract, trick_score
from deal_model import Seat


def contract(text, declarer=Seat.SOUTH):
    level = int(text[0])
    rest = text[1:]
    doubling = Doubling.UNDOUBLED
    if rest.endswith('XX'):
        doubling, rest = Doubling.REDOUBLED, rest[:-2]
    elif rest.endswith('X'):
        doubling, rest = Doubling.DOUBLED, rest[:-1]
    return Contract(level, Strain.parse(rest), doubling, declarer)


@pytest.mark.parametrize('text, tricks, vulnerable, expected', [
    ('4S', 10, False, 420),
    ('4S', 10, True, 620),
    ('3NT', 10, True, 630),
    ('2C', 10, False, 130),
    ('1NTX', 7, False, 180),
    ('2HX', 8, False, 470),
    ('1NTXX', 8, True, 1160),
    ('6NT', 12, True, 1440),
    ('7S', 13, False, 1510),
    ('5D', 12, False, 420),
])
def test_made_contracts(text, tricks, vulnerable, expected):
    assert score_contract(contract(text), tricks, vulnerable)['declarer_score'] == expected


@pytest.mark.parametrize('text, tricks, vulnerable, expected', [
    ('4S', 8, False, -100),
    ('4S', 8, True, -200),
    ('4SX', 7, False, -500),
    ('4SX', 9, True, -200),
    ('4SX', 6, False, -800),
    ('3NTXX', 7, False, -600),
])
def test_defeated_contracts(text, tricks, vulnerable, expected):
    assert score_contract(contract(text), tricks, vulnerable)['declarer_score'] == expected


def test_breakdown():
    score = score_contract(contract('3NT', Seat.EAST), 9, False)
    assert score['partnership'] == 'EW'
    assert score['below_line'] == 100
    assert score['makes_game'] is True
    assert score['description'] == '3NT made'

    penalty = score_contract(contract('2HX', Seat.NORTH), 6, False)
    assert penalty['partnership'] == 'EW'
    assert penalty['undertricks'] == 2
    assert penalty['description'] == 'Down 2 doubled'


def test_trick_score():
    assert trick_score(1, 'NT') == 40
    assert trick_score(3, 'NT') == 100
    assert trick_score(4, 'H') == 120
    assert trick_score(5, 'C') == 100
    assert trick_score(2, 'S', multiplier=2) == 120
