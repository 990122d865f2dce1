"""
Trick-Play Engine
Legal card play, trump-aware trick resolution and the board result

TrickState is immutable: apply_play() returns a new state or raises
IllegalAction. After the 13th trick the state carries a BoardResult and
accepts no further cards.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from bridge_errors import ExhaustedOptions, IllegalAction, RejectReason
from contract_scoring import score_contract
from deal_model import Partnership, Vulnerability

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Play:
    seat: object
    card: object

    def __str__(self):
        return f"{self.seat.value}:{self.card}"


@dataclass(frozen=True)
class BoardResult:
    """Verdict after 13 tricks"""
    contract: object
    declarer_tricks: int
    made: bool
    overtricks: int
    undertricks: int
    score: dict

    def describe(self):
        if self.made:
            if self.overtricks:
                return f"{self.contract} made with {self.overtricks} overtrick(s)"
            return f"{self.contract} made"
        return f"{self.contract} down {self.undertricks}"


@dataclass(frozen=True)
class TrickState:
    contract: object
    hands: Dict
    vulnerability: Vulnerability = Vulnerability.NONE
    to_play: object = None
    leader: object = None
    current_trick: Tuple[Play, ...] = ()
    played: Tuple[Play, ...] = ()
    tricks: Tuple[Tuple[Play, ...], ...] = ()
    tricks_won: Dict = field(default_factory=lambda: {Partnership.NS: 0, Partnership.EW: 0})
    result: Optional[BoardResult] = None

    @property
    def trump(self):
        return self.contract.trump

    @property
    def declarer(self):
        return self.contract.declarer

    @property
    def dummy(self):
        return self.contract.dummy

    @property
    def is_complete(self):
        return self.result is not None

    @property
    def led_suit(self):
        return self.current_trick[0].card.suit if self.current_trick else None

    @property
    def completed_tricks(self):
        return len(self.tricks)

    @property
    def declarer_tricks(self):
        return self.tricks_won[self.contract.declaring_side]

    @property
    def defender_tricks(self):
        return self.tricks_won[self.contract.declaring_side.other]

    def remaining_hand(self, seat):
        return self.hands[seat]

    def last_trick(self):
        return self.tricks[-1] if self.tricks else None


def start_play(contract, hands, vulnerability=Vulnerability.NONE):
    """
    Begin card play for a finished auction.

    Args:
        contract: auction_state.Contract, or None when the board was passed out
        hands: dict of Seat -> Hand (13 cards each)
        vulnerability: board vulnerability, used for the final score

    Raises:
        IllegalAction: NO_CONTRACT when there is nothing to play
    """
    if contract is None:
        raise IllegalAction(RejectReason.NO_CONTRACT)
    leader = contract.opening_leader
    logger.info(f"🃏 Play starts: {contract} by {contract.declarer.value}, "
                f"dummy {contract.dummy.value}, {leader.value} on lead")
    return TrickState(contract=contract, hands=dict(hands), vulnerability=vulnerability,
                      to_play=leader, leader=leader)


def legal_cards(state, seat):
    """Cards `seat` may play now (must follow the led suit when able)"""
    hand = state.hands[seat]
    led = state.led_suit
    if led is not None and hand.length(led) > 0:
        return hand.cards_in(led)
    return hand.cards()


def trick_winner(plays, trump):
    """
    Winner of a trick.

    Args:
        plays: sequence of Play in playing order, first one led
        trump: trump Suit or None

    Returns:
        Seat that won the trick
    """
    led_suit = plays[0].card.suit
    best = plays[0]
    for play in plays[1:]:
        card = play.card
        best_card = best.card
        if trump is not None and card.suit == trump:
            if best_card.suit != trump or card.rank > best_card.rank:
                best = play
        elif card.suit == led_suit and best_card.suit == led_suit:
            if card.rank > best_card.rank:
                best = play
    return best.seat


def rejection_reason(state, seat, card):
    """Why `seat` may not play `card` now, or None when it is legal"""
    if state.is_complete:
        return RejectReason.BOARD_COMPLETE
    if seat != state.to_play:
        return RejectReason.OUT_OF_TURN
    hand = state.hands[seat]
    if card not in hand:
        return RejectReason.CARD_NOT_HELD
    led = state.led_suit
    if led is not None and card.suit != led and hand.length(led) > 0:
        return RejectReason.MUST_FOLLOW_SUIT
    return None


def apply_play(state, seat, card):
    """
    Play one card.

    Returns:
        New TrickState; completes the trick after the fourth card and the
        board after the 13th trick

    Raises:
        IllegalAction: out of turn, card not held, or revoke
    """
    reason = rejection_reason(state, seat, card)
    if reason is not None:
        raise IllegalAction(reason, f"{seat.value} {card}")

    hands = dict(state.hands)
    hands[seat] = hands[seat].without(card)
    play = Play(seat, card)
    trick = state.current_trick + (play,)
    played = state.played + (play,)

    if len(trick) < 4:
        return replace(state, hands=hands, current_trick=trick, played=played, to_play=seat.next)

    winner = trick_winner(trick, state.trump)
    tricks_won = dict(state.tricks_won)
    tricks_won[winner.partnership] += 1
    trick_cards = ' '.join(str(p) for p in trick)
    logger.info(f"🏆 Trick complete: {trick_cards} → {winner.value} wins")

    updated = replace(state, hands=hands, current_trick=(), played=played,
                      tricks=state.tricks + (trick,), tricks_won=tricks_won,
                      to_play=winner, leader=winner)
    if len(updated.tricks) == 13:
        updated = replace(updated, to_play=None, result=_board_result(updated))
        logger.info(f"🏁 Board complete: {updated.result.describe()} "
                    f"({updated.result.score['declarer_score']:+d})")
    return updated


def _board_result(state):
    contract = state.contract
    taken = state.declarer_tricks
    made = taken >= contract.required_tricks
    vulnerable = state.vulnerability.is_vulnerable(contract.declaring_side)
    return BoardResult(
        contract=contract,
        declarer_tricks=taken,
        made=made,
        overtricks=max(0, taken - contract.required_tricks),
        undertricks=max(0, contract.required_tricks - taken),
        score=score_contract(contract, taken, vulnerable),
    )


def status_summary(state):
    """Get a summary of the current play state"""
    contract = state.contract
    status = [
        f"Contract: {contract} by {contract.declarer.value} | Dummy: {contract.dummy.value}",
        f"Tricks: NS={state.tricks_won[Partnership.NS]} EW={state.tricks_won[Partnership.EW]}",
    ]
    if state.is_complete:
        status.append(f"Result: {state.result.describe()}")
    else:
        remaining = len(state.hands[state.to_play])
        status.append(f"To play: {state.to_play.value} ({remaining} cards left)")
    if state.current_trick:
        status.append(f"Current trick: {' '.join(str(p) for p in state.current_trick)}")
    return "\n".join(status)


def require_legal_card(state, seat):
    """First legal card; raises ExhaustedOptions if the seat has none"""
    cards = legal_cards(state, seat)
    if not cards:
        raise ExhaustedOptions(f"{seat.value} has no legal card with {len(state.hands[seat])} held")
    return cards[0]

