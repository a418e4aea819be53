"""Game state container: piles, score, move log and selection cursor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from klondike.common import Card, Pile, TableauPile

if TYPE_CHECKING:
    from klondike.mechanics import MoveRecord

logger = logging.getLogger(__name__)

TABLEAU_PILES = 7
FOUNDATION_PILES = 4
CARDS_PER_SUIT = 13


class PileKind(Enum):
    STOCK = "stock"
    WASTE = "waste"
    TABLEAU = "tableau"
    FOUNDATION = "foundation"


_PILE_COUNTS = {
    PileKind.STOCK: 1,
    PileKind.WASTE: 1,
    PileKind.TABLEAU: TABLEAU_PILES,
    PileKind.FOUNDATION: FOUNDATION_PILES,
}


@dataclass(frozen=True)
class Location:
    """Address of a single pile: its kind plus an index within that kind."""

    kind: PileKind
    index: int = 0

    def __post_init__(self):
        if not isinstance(self.kind, PileKind):
            raise TypeError(f"Location kind must be a PileKind, got {self.kind!r}")
        count = _PILE_COUNTS[self.kind]
        if not 0 <= self.index < count:
            raise ValueError(f"{self.kind.value} index {self.index} out of range 0..{count - 1}")

    @classmethod
    def stock(cls) -> "Location":
        return cls(PileKind.STOCK)

    @classmethod
    def waste(cls) -> "Location":
        return cls(PileKind.WASTE)

    @classmethod
    def tableau(cls, index: int) -> "Location":
        return cls(PileKind.TABLEAU, index)

    @classmethod
    def foundation(cls, index: int) -> "Location":
        return cls(PileKind.FOUNDATION, index)

    def __str__(self):
        if self.kind in (PileKind.STOCK, PileKind.WASTE):
            return self.kind.value
        return f"{self.kind.value}[{self.index}]"


@dataclass
class GameState:
    tableau: List[TableauPile] = field(default_factory=lambda: [TableauPile() for _ in range(TABLEAU_PILES)])
    foundations: List[Pile] = field(default_factory=lambda: [Pile() for _ in range(FOUNDATION_PILES)])
    stock: Pile = field(default_factory=Pile)
    waste: Pile = field(default_factory=Pile)
    score: int = 0
    moves: List["MoveRecord"] = field(default_factory=list)
    selection: Optional[Location] = None
    track_face_down: bool = True

    def pile(self, location: Location) -> Pile:
        kind = location.kind
        if kind is PileKind.STOCK:
            return self.stock
        elif kind is PileKind.WASTE:
            return self.waste
        elif kind is PileKind.TABLEAU:
            return self.tableau[location.index]
        elif kind is PileKind.FOUNDATION:
            return self.foundations[location.index]
        raise ValueError(f"Unknown pile kind: {kind!r}")

    def all_cards(self) -> List[Card]:
        cards: List[Card] = list(self.stock.cards) + list(self.waste.cards)
        for p in self.tableau:
            cards.extend(p.cards)
        for f in self.foundations:
            cards.extend(f.cards)
        return cards

    def snapshot(self) -> Dict[str, Any]:
        """Plain, comparable view of everything a move or undo can change."""
        return {
            "tableau": [p.cards for p in self.tableau],
            "face_down": [p.face_down for p in self.tableau],
            "foundations": [f.cards for f in self.foundations],
            "stock": self.stock.cards,
            "waste": self.waste.cards,
            "score": self.score,
            "moves": len(self.moves),
        }


def deal(deck: List[Card], track_face_down: bool = True) -> GameState:
    """Deal ``deck`` (consumed from its end) into a fresh GameState.

    Pile *i* gets *i + 1* cards in a triangular pass; what is left becomes the
    stock in deck order.
    """
    state = GameState(track_face_down=track_face_down)
    for rnd in range(TABLEAU_PILES):
        for col in range(rnd, TABLEAU_PILES):
            state.tableau[col].push(deck.pop())
    if track_face_down:
        for p in state.tableau:
            p.face_down = len(p) - 1
    state.stock.extend(deck)
    deck.clear()
    logger.debug("Dealt tableau %s with %d cards in stock", [len(p) for p in state.tableau], len(state.stock))
    return state
