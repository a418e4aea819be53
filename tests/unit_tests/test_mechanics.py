import random

import pytest

from klondike.common import Card
from klondike.mechanics import (
    EmptySource,
    InvalidMove,
    MoveKind,
    NothingToUndo,
    draw_or_recycle,
    move_cards,
    score_delta,
    undo,
)
from klondike.session import new_game
from klondike.state import GameState, Location, PileKind, TABLEAU_PILES, FOUNDATION_PILES


def _cards(*labels):
    return [Card.parse(x) for x in labels]


def _state(track_face_down=False):
    return GameState(track_face_down=track_face_down)


@pytest.mark.parametrize(
    "source, destination, expected",
    [
        (PileKind.WASTE, PileKind.FOUNDATION, 10),
        (PileKind.TABLEAU, PileKind.FOUNDATION, 10),
        (PileKind.FOUNDATION, PileKind.TABLEAU, -15),
        (PileKind.TABLEAU, PileKind.TABLEAU, 0),
        (PileKind.WASTE, PileKind.TABLEAU, 0),
        (PileKind.FOUNDATION, PileKind.FOUNDATION, 0),
    ],
)
def test_score_delta(source, destination, expected):
    assert score_delta(source, destination) == expected


def test_tableau_to_tableau_run():
    state = _state()
    state.tableau[0].extend(_cards("KC"))
    state.tableau[1].extend(_cards("5S", "QH", "JS"))
    record = move_cards(state, Location.tableau(1), Location.tableau(0), 2)
    assert record
    assert record.kind is MoveKind.TRANSFER
    assert record.cards == tuple(_cards("QH", "JS"))
    assert state.tableau[0].cards == tuple(_cards("KC", "QH", "JS"))
    assert state.tableau[1].cards == tuple(_cards("5S"))
    assert state.score == 0
    assert state.moves == [record]


def test_rejected_move_leaves_state_identical():
    state = _state()
    state.tableau[0].extend(_cards("KH"))
    state.tableau[1].extend(_cards("3C", "JD"))
    before = state.snapshot()
    result = move_cards(state, Location.tableau(1), Location.tableau(0))
    assert isinstance(result, InvalidMove)
    assert not result
    assert result.reason
    assert state.snapshot() == before
    assert state.moves == []


def test_red_queen_on_red_king_is_rejected():
    state = _state()
    state.tableau[0].extend(_cards("KH"))
    state.tableau[1].extend(_cards("QD"))
    before = state.snapshot()
    assert not move_cards(state, Location.tableau(1), Location.tableau(0))
    assert state.snapshot() == before


def test_empty_source_is_reported():
    state = _state()
    result = move_cards(state, Location.waste(), Location.foundation(0))
    assert isinstance(result, EmptySource)
    assert isinstance(result, InvalidMove)


@pytest.mark.parametrize("run_length", [0, -1, 4])
def test_bad_run_lengths_are_rejected(run_length):
    state = _state()
    state.tableau[1].extend(_cards("QH", "JS", "10H"))
    state.tableau[0].extend(_cards("KS"))
    before = state.snapshot()
    assert isinstance(move_cards(state, Location.tableau(1), Location.tableau(0), run_length), InvalidMove)
    assert state.snapshot() == before


def test_stock_is_not_a_move_source():
    state = _state()
    state.stock.extend(_cards("AH"))
    assert isinstance(move_cards(state, Location.stock(), Location.foundation(0)), InvalidMove)
    assert len(state.stock) == 1


def test_same_pile_is_rejected():
    state = _state()
    state.tableau[2].extend(_cards("KS"))
    assert isinstance(move_cards(state, Location.tableau(2), Location.tableau(2)), InvalidMove)


def test_waste_to_foundation_then_back_to_tableau_nets_minus_five():
    state = _state()
    state.waste.extend(_cards("AH"))
    state.tableau[3].extend(_cards("2S"))
    assert move_cards(state, Location.waste(), Location.foundation(0))
    assert state.score == 10
    assert move_cards(state, Location.foundation(0), Location.tableau(3))
    assert state.score == -5
    assert state.tableau[3].cards == tuple(_cards("2S", "AH"))


def test_undo_restores_score_and_piles():
    state = _state()
    state.waste.extend(_cards("AH"))
    state.tableau[3].extend(_cards("2S"))
    initial = state.snapshot()
    move_cards(state, Location.waste(), Location.foundation(0))
    after_first = state.snapshot()
    move_cards(state, Location.foundation(0), Location.tableau(3))
    undone = undo(state)
    assert undone.source == Location.foundation(0)
    assert state.snapshot() == after_first
    undo(state)
    assert state.snapshot() == initial


def test_undo_with_empty_log():
    state = _state()
    result = undo(state)
    assert isinstance(result, NothingToUndo)
    assert not result
    assert result.reason


def test_draw_and_undo_draw():
    state = _state()
    state.stock.extend(_cards("3C", "9D"))
    record = draw_or_recycle(state)
    assert record.kind is MoveKind.DRAW
    assert record.cards == (Card.parse("9D"),)
    assert state.waste.cards == (Card.parse("9D"),)
    assert state.stock.cards == (Card.parse("3C"),)
    undo(state)
    assert state.stock.cards == tuple(_cards("3C", "9D"))
    assert not state.waste


def test_stock_exhaustion_recycles_waste_in_reverse():
    state = new_game(random.Random(5))
    first_draw = state.stock.peek()
    for _ in range(24):
        assert draw_or_recycle(state).kind is MoveKind.DRAW
    assert not state.stock
    waste_before = state.waste.cards
    assert len(waste_before) == 24

    record = draw_or_recycle(state)
    assert record.kind is MoveKind.RECYCLE
    assert record.cards == waste_before
    assert state.stock.cards == tuple(reversed(waste_before))
    assert not state.waste

    record = draw_or_recycle(state)
    assert record.kind is MoveKind.DRAW
    assert record.cards == (first_draw,)
    assert state.waste.cards == (first_draw,)
    assert len(state.stock) == 23


def test_undo_recycle_restores_the_captured_waste():
    state = _state()
    state.waste.extend(_cards("4H", "8C", "KD"))
    draw_or_recycle(state)
    assert state.stock.cards == tuple(_cards("KD", "8C", "4H"))
    undo(state)
    assert state.waste.cards == tuple(_cards("4H", "8C", "KD"))
    assert not state.stock


def test_recycling_a_single_card_waste_undoes_as_a_recycle():
    state = _state()
    state.waste.extend(_cards("7C"))
    record = draw_or_recycle(state)
    assert record.kind is MoveKind.RECYCLE
    assert record.cards == tuple(_cards("7C"))
    assert state.stock.cards == tuple(_cards("7C"))
    assert not state.waste

    assert undo(state) == record
    assert state.waste.cards == tuple(_cards("7C"))
    assert not state.stock
    assert state.moves == []


def test_recycle_with_nothing_to_recycle_still_records():
    state = _state()
    record = draw_or_recycle(state)
    assert record.kind is MoveKind.RECYCLE
    assert record.cards == ()
    assert undo(state) == record


def test_moving_off_hidden_cards_flips_and_undo_hides_again():
    state = _state(track_face_down=True)
    state.tableau[0].extend(_cards("KD"))
    state.tableau[1].extend(_cards("7C", "4H", "QS"))
    state.tableau[1].face_down = 2
    record = move_cards(state, Location.tableau(1), Location.tableau(0))
    assert record.flipped
    assert state.tableau[1].face_down == 1
    assert state.tableau[1].is_face_up(-1)
    undo(state)
    assert state.tableau[1].face_down == 2
    assert state.tableau[1].cards == tuple(_cards("7C", "4H", "QS"))


def test_run_cannot_reach_into_hidden_cards():
    state = _state(track_face_down=True)
    state.tableau[0].extend(_cards("KD"))
    state.tableau[1].extend(_cards("QS", "JH"))
    state.tableau[1].face_down = 1
    before = state.snapshot()
    assert isinstance(move_cards(state, Location.tableau(1), Location.tableau(0), 2), InvalidMove)
    assert state.snapshot() == before


def _every_location():
    yield Location.waste()
    for i in range(TABLEAU_PILES):
        yield Location.tableau(i)
    for i in range(FOUNDATION_PILES):
        yield Location.foundation(i)


@pytest.mark.parametrize("track_face_down", [True, False])
@pytest.mark.parametrize("seed", range(8))
def test_every_move_is_undone_exactly(seed, track_face_down):
    state = new_game(random.Random(seed), {"track_face_down": track_face_down})
    for _ in range(seed + 3):
        draw_or_recycle(state)
    for source in _every_location():
        for destination in _every_location():
            run = state.pile(source).face_up_count if source.kind is PileKind.TABLEAU else 1
            for run_length in range(1, max(run, 1) + 1):
                before = state.snapshot()
                result = move_cards(state, source, destination, run_length)
                if result:
                    assert undo(state) == result
                assert state.snapshot() == before
