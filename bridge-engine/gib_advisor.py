"""
GIB Advisor Gateway
Asks the remote GIB robot for a bid or card, with a hard timeout

Query: GET robot.php?sc=tp&pov=S&d=N&v=-&n=...&e=...&s=...&w=...&h=1s-p-2s
Answer: small XML fragment, e.g.
    <sc_robot err="0"><r bid="2H" m="Stayman reply"/></sc_robot>

Anything other than a clean, legal answer is reported as
AdvisorUnavailable; the caller falls back to local bidding/play.
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from bridge_errors import AdvisorUnavailable
from bridge_types import SOURCE_ADVISOR, BidMove, PlayMove, parse_bid
from deal_model import Card, Hand, Seat, Vulnerability
from engine_config import EngineConfig

logger = logging.getLogger(__name__)

GIB_BID_PATTERN = re.compile(r'^([1-7][CDHSN]|[1-7]NT|P|X|XX)$')
GIB_SPELLINGS = {'PASS': 'P', 'DBL': 'X', 'RDBL': 'XX'}

# Compact answers that mean "no idea"
UNCERTAIN_ANSWERS = ('?', 'n')


@dataclass(frozen=True)
class AdvisorRequest:
    """Everything the robot needs to advise `seat`"""
    seat: object
    dealer: object
    hands: Dict
    auction: object
    vulnerability: Vulnerability = Vulnerability.NONE
    play: Optional[object] = None   # TrickState during card play

    @property
    def wants_card(self):
        return self.play is not None


def encode_hand(hand):
    """Dotted high-to-low runs, ten as 't' (e.g. 'akq86.ak3.4.ak63')"""
    return hand.to_dotted()


def decode_hand(text):
    return Hand.from_dotted(text)


def encode_auction(auction):
    """Dash-joined lowercase calls (e.g. 'p-1s-x-xx-3n')"""
    tokens = []
    for entry in auction.entries:
        text = str(entry.bid).lower()
        if text.endswith('nt'):
            text = text[:-1]
        tokens.append(text)
    return '-'.join(tokens)


def encode_played_cards(state):
    """Cards played so far as seat + suit + rank (e.g. 'Nsa,Eh2')"""
    return ','.join(f"{play.seat.value}{str(play.card).lower()}" for play in state.played)


def build_query(request):
    """Query parameters for robot.php"""
    params = {
        'sc': 'tp',
        'pov': request.seat.value,
        'd': request.dealer.value,
        'v': request.vulnerability.value,
        'n': encode_hand(request.hands[Seat('N')]),
        'e': encode_hand(request.hands[Seat('E')]),
        's': encode_hand(request.hands[Seat('S')]),
        'w': encode_hand(request.hands[Seat('W')]),
        'h': encode_auction(request.auction),
    }
    if request.wants_card:
        params['cards'] = encode_played_cards(request.play)
    return params


def _error_code(text):
    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        match = re.search(r'\berr="([^"]*)"', text)
        return match.group(1) if match else None
    return root.attrib.get('err')


def _explanation(text):
    match = re.search(r'\b(?:m|meaning|explanation)="([^"]*)"', text)
    return match.group(1) if match else ''


def _raw_answers(text, kind):
    """(answer, shape) for every response shape that carries one, in order of trust"""
    primary = re.search(rf'<r[^>]*\b{kind}="([^"]+)"', text)
    if primary:
        yield primary.group(1), 'primary'
    compact = re.search(r'\bc="([^"]+)"', text)
    if compact and compact.group(1) not in UNCERTAIN_ANSWERS:
        yield compact.group(1), 'compact'
    alternative = re.search(rf'<{kind}[^>]*>([^<]+)</{kind}>', text)
    if alternative:
        yield alternative.group(1).strip(), 'alternative'


def _decode(raw, kind):
    """Bid or Card from a raw answer, or None when it is malformed"""
    if kind == 'bid':
        value = GIB_SPELLINGS.get(raw.upper(), raw.upper())
        if not GIB_BID_PATTERN.match(value):
            return None
        return parse_bid(value)
    try:
        return Card.parse(raw)
    except ValueError:
        return None


def parse_response(text, kind='bid'):
    """
    Parse a robot answer

    Each response shape is tried in turn; a malformed value in one shape
    does not hide a usable value in the next.

    Args:
        text: raw response body
        kind: 'bid' or 'card'

    Returns:
        (Bid or Card, explanation)

    Raises:
        AdvisorUnavailable: error code, uncertain or unparseable answer
    """
    if not text or not text.strip():
        raise AdvisorUnavailable("empty response")

    err = _error_code(text)
    if err is not None and err.strip() != '0':
        raise AdvisorUnavailable(f"robot error code {err}")

    rejected = []
    for raw, shape in _raw_answers(text, kind):
        result = _decode(raw, kind)
        if result is not None:
            logger.debug(f"🔍 GIB answer ({shape}): {result}")
            return result, _explanation(text)
        logger.debug(f"⚠️  GIB {shape} answer {raw!r} is not a valid {kind}")
        rejected.append(raw)

    if rejected:
        raise AdvisorUnavailable(f"invalid {kind} format {', '.join(repr(r) for r in rejected)}")
    raise AdvisorUnavailable(f"no {kind} in response")


class GibAdvisor:
    """
    Client for the GIB robot service
    """

    def __init__(self, config=None, session=None):
        self.config = config or EngineConfig()
        self.session = session or requests.Session()

    def fetch(self, params):
        """Raw response body for a query"""
        try:
            response = self.session.get(
                self.config.advisor_url,
                params=params,
                timeout=self.config.advisor_timeout,
                headers={'User-Agent': self.config.advisor_user_agent},
            )
            response.raise_for_status()
        except requests.Timeout as e:
            logger.warning(f"⏱️  GIB timeout for {params.get('pov')}: {e}")
            raise AdvisorUnavailable("timeout") from e
        except requests.RequestException as e:
            logger.warning(f"❌ GIB request failed for {params.get('pov')}: {e}")
            raise AdvisorUnavailable(str(e)) from e
        return response.text

    def ask(self, request):
        """
        Ask for a move for request.seat

        Returns:
            BidMove during the auction, PlayMove during play

        Raises:
            AdvisorUnavailable: on any failure
        """
        params = build_query(request)
        kind = 'card' if request.wants_card else 'bid'
        text = self.fetch(params)
        try:
            value, explanation = parse_response(text, kind)
        except AdvisorUnavailable:
            logger.info(f"❌ GIB parsing failed for {request.seat.value}, using local AI fallback")
            raise

        logger.info(f"✅ GIB {request.seat.value} {kind}: {value}")
        explanation = explanation or f"GIB suggests {value}"
        if kind == 'card':
            return PlayMove(request.seat, value, explanation, SOURCE_ADVISOR)
        return BidMove(request.seat, value, explanation, SOURCE_ADVISOR)
