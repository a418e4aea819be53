"""
Move execution and undo.

Every successful operation appends a :class:`MoveRecord` to ``state.moves``;
:func:`undo` pops the newest record and reverses it exactly. Failed moves
return a falsy :class:`Rejected` and leave the state untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from klondike.common import Card
from klondike.rules import is_valid_move
from klondike.state import GameState, Location, PileKind

logger = logging.getLogger(__name__)

FOUNDATION_BONUS = 10
FOUNDATION_PENALTY = -15


class MoveKind(Enum):
    DRAW = "draw"
    RECYCLE = "recycle"
    TRANSFER = "transfer"


@dataclass(frozen=True)
class MoveRecord:
    source: Location
    destination: Location
    run_length: int
    cards: Tuple[Card, ...]
    kind: MoveKind = MoveKind.TRANSFER
    score_delta: int = 0
    flipped: bool = False


@dataclass(frozen=True)
class Rejected:
    """A game outcome that changed nothing. Falsy, so ``if result:`` reads naturally."""

    reason: str = ""

    def __bool__(self):
        return False


@dataclass(frozen=True)
class InvalidMove(Rejected):
    pass


@dataclass(frozen=True)
class EmptySource(InvalidMove):
    pass


@dataclass(frozen=True)
class NothingToUndo(Rejected):
    reason: str = "nothing to undo"


MoveResult = Union[MoveRecord, InvalidMove]
UndoResult = Union[MoveRecord, NothingToUndo]


def score_delta(source: PileKind, destination: PileKind) -> int:
    if source in (PileKind.WASTE, PileKind.TABLEAU) and destination is PileKind.FOUNDATION:
        return FOUNDATION_BONUS
    if source is PileKind.FOUNDATION and destination is PileKind.TABLEAU:
        return FOUNDATION_PENALTY
    return 0


def draw_or_recycle(state: GameState) -> MoveRecord:
    """Turn one stock card onto the waste, or turn the waste back over when the stock is empty."""
    if state.stock:
        card = state.stock.pop()
        state.waste.push(card)
        record = MoveRecord(Location.stock(), Location.waste(), 1, (card,), MoveKind.DRAW)
    else:
        captured = tuple(state.waste.clear())
        state.stock.extend(reversed(captured))
        record = MoveRecord(Location.stock(), Location.waste(), len(captured), captured, MoveKind.RECYCLE)
    state.moves.append(record)
    logger.debug("%s: %d card(s)", record.kind.value, len(record.cards))
    return record


def _reject(cls, message: str, *args) -> Rejected:
    reason = message % args if args else message
    logger.debug("Rejected move: %s", reason)
    return cls(reason)


def move_cards(state: GameState, source: Location, destination: Location, run_length: int = 1) -> MoveResult:
    """Move the top ``run_length`` cards of ``source`` onto ``destination``."""
    if source.kind is PileKind.STOCK:
        return _reject(InvalidMove, "cannot move cards out of the stock; draw instead")
    elif source.kind not in (PileKind.WASTE, PileKind.TABLEAU, PileKind.FOUNDATION):
        raise ValueError(f"Unknown pile kind: {source.kind!r}")
    if source == destination:
        return _reject(InvalidMove, "source and destination are the same pile (%s)", source)

    src = state.pile(source)
    dst = state.pile(destination)
    if not src:
        return _reject(EmptySource, "%s is empty", source)
    if run_length < 1 or run_length > len(src):
        return _reject(InvalidMove, "cannot lift %d card(s) from %s holding %d", run_length, source, len(src))
    if source.kind is PileKind.TABLEAU and run_length > src.face_up_count:
        return _reject(InvalidMove, "run of %d reaches face-down cards in %s", run_length, source)

    run = src.take(run_length)
    if not is_valid_move(run, destination.kind, dst):
        src.extend(run)
        return _reject(InvalidMove, "%s cannot go on %s", run[0], destination)

    dst.extend(run)
    delta = score_delta(source.kind, destination.kind)
    state.score += delta
    flipped = source.kind is PileKind.TABLEAU and src.flip_top()
    record = MoveRecord(source, destination, run_length, tuple(run), MoveKind.TRANSFER, delta, flipped)
    state.moves.append(record)
    logger.debug("Moved %s from %s to %s (score %+d)", list(run), source, destination, delta)
    return record


def undo(state: GameState) -> UndoResult:
    """Reverse the most recent move exactly."""
    if not state.moves:
        return NothingToUndo()
    record: MoveRecord = state.moves.pop()
    if record.kind is MoveKind.DRAW:
        state.stock.push(state.waste.pop())
    elif record.kind is MoveKind.RECYCLE:
        # The stock/waste split before the recycle is not recoverable
        state.stock.clear()
        state.waste.clear()
        state.waste.extend(record.cards)
    elif record.kind is MoveKind.TRANSFER:
        src = state.pile(record.source)
        dst = state.pile(record.destination)
        if record.flipped:
            src.face_down += 1
        dst.take(len(record.cards))
        src.extend(record.cards)
        state.score -= record.score_delta
    else:
        raise ValueError(f"Unknown move kind: {record.kind!r}")
    logger.debug("Undid %s from %s to %s", record.kind.value, record.source, record.destination)
    return record
