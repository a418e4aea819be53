"""
Public entry points for a Klondike session.

A presentation layer creates a state with :func:`new_game`, reads piles and
score straight off the returned :class:`~klondike.state.GameState`, and feeds
user intents back through :func:`handle_click` (or the lower-level
:func:`request_move`, :func:`draw_or_recycle` and :func:`undo`).
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Union

from klondike import common as C
from klondike.mechanics import (
    InvalidMove,
    MoveRecord,
    MoveResult,
    NothingToUndo,
    Rejected,
    UndoResult,
    draw_or_recycle,
    move_cards,
    undo,
)
from klondike.rules import is_valid_move, movable_run_length
from klondike.state import (
    CARDS_PER_SUIT,
    FOUNDATION_PILES,
    GameState,
    Location,
    PileKind,
    deal,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ClickResult",
    "GameState",
    "InvalidMove",
    "Location",
    "MoveRecord",
    "NothingToUndo",
    "Rejected",
    "check_win",
    "clear_selection",
    "draw_or_recycle",
    "handle_click",
    "is_won",
    "new_game",
    "request_move",
    "select",
    "undo",
]


def new_game(rng: Optional[random.Random] = None, settings: Optional[dict] = None) -> GameState:
    """Build, shuffle and deal a fresh game.

    ``rng`` is the only source of randomness; when omitted a generator seeded
    from ``KLONDIKE_SEED`` (or the OS) is used. ``settings`` defaults to the
    current persisted settings.
    """
    if settings is None:
        settings = C.get_current_settings()
    if rng is None:
        rng = random.Random(C.env_seed())
    deck = C.shuffle(C.build_deck(), rng)
    state = deal(deck, track_face_down=bool(settings.get("track_face_down", True)))
    logger.info("New game (face-down tracking %s)", "on" if state.track_face_down else "off")
    return state


def request_move(state: GameState, source: Location, destination: Location, run_length: int = 1) -> MoveResult:
    return move_cards(state, source, destination, run_length)


def check_win(state: GameState) -> bool:
    return all(len(f) == CARDS_PER_SUIT for f in state.foundations)


is_won = check_win


def select(state: GameState, location: Location):
    state.selection = location


def clear_selection(state: GameState):
    state.selection = None


@dataclass(frozen=True)
class ClickResult:
    """What one click did: the move/undo outcome (None if nothing was attempted) and the win flag."""

    outcome: Union[MoveRecord, Rejected, None] = None
    won: bool = False


def _auto_move_waste(state: GameState) -> Union[MoveRecord, Rejected, None]:
    top = state.waste.peek()
    if top is None:
        return None
    for fi in range(FOUNDATION_PILES):
        if is_valid_move([top], PileKind.FOUNDATION, state.foundations[fi]):
            return move_cards(state, Location.waste(), Location.foundation(fi))
    return InvalidMove(f"no foundation accepts {top}")


def handle_click(state: GameState, location: Location) -> ClickResult:
    """Drive the Idle/Selected click state machine for one click on ``location``."""
    kind = location.kind
    outcome: Union[MoveRecord, Rejected, None] = None
    if kind is PileKind.STOCK:
        outcome = draw_or_recycle(state)
    elif kind is PileKind.WASTE:
        outcome = _auto_move_waste(state)
    elif kind is PileKind.TABLEAU:
        selected = state.selection
        if selected is None:
            select(state, location)
        else:
            if selected.kind is PileKind.TABLEAU:
                run_length = movable_run_length(state.pile(selected))
            else:
                run_length = 1
            outcome = move_cards(state, selected, location, run_length)
            clear_selection(state)
    elif kind is PileKind.FOUNDATION:
        selected = state.selection
        if selected is not None:
            outcome = move_cards(state, selected, location)
            clear_selection(state)
    else:
        raise ValueError(f"Unknown pile kind: {kind!r}")

    won = check_win(state)
    if won:
        logger.info("Game won with score %d", state.score)
    return ClickResult(outcome, won)
