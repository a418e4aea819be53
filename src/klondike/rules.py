"""Move legality for Klondike.

Everything here is a pure predicate over cards and piles; nothing mutates
game state.
"""

from __future__ import annotations

from typing import Sequence

from klondike.common import Card, Pile, Rank, TableauPile
from klondike.state import PileKind


def can_stack_tableau(upper: Card, lower: Card) -> bool:
    """True when ``upper`` may sit on ``lower`` in a tableau column."""
    return upper.suit.is_red != lower.suit.is_red and upper.rank == lower.rank - 1


def can_build_foundation(card: Card, top: Card) -> bool:
    return card.suit == top.suit and card.rank == top.rank + 1


def is_valid_move(cards: Sequence[Card], destination_kind: PileKind, destination_pile: Pile) -> bool:
    """Decide whether ``cards`` may be dropped onto ``destination_pile``.

    Only the leading card of the run is checked against the destination's top
    card (or against emptiness). Foundations accept single cards only.
    """
    if not cards:
        return False
    card = cards[0]
    top = destination_pile.peek()
    if destination_kind is PileKind.FOUNDATION:
        if len(cards) != 1:
            return False
        if top is None:
            return card.rank == Rank.ACE
        return can_build_foundation(card, top)
    elif destination_kind is PileKind.TABLEAU:
        if top is None:
            return card.rank == Rank.KING
        return can_stack_tableau(card, top)
    elif destination_kind in (PileKind.STOCK, PileKind.WASTE):
        return False
    raise ValueError(f"Unknown pile kind: {destination_kind!r}")


def movable_run_length(pile: Pile) -> int:
    """Number of cards that can be lifted together from the top of ``pile``.

    For a tableau pile that is its face-up tail; every other pile only ever
    offers its top card.
    """
    if isinstance(pile, TableauPile):
        return pile.face_up_count
    return 1 if pile else 0
