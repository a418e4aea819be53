# common.py - cards, piles and settings shared by the Klondike engine
import os
import json
import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

# --- Settings ---
# Defaults (may be overridden by persisted settings or the environment)
_DEFAULT_SETTINGS = {
    "track_face_down": True,  # hide dealt tableau cards until exposed
    "card_size": "Medium",    # Small | Medium | Large (presentation only)
}

_CARD_SIZES = ("Small", "Medium", "Large")

_CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


def _settings_dir() -> str:
    # Prefer %APPDATA% on Windows, else ~/.klondike_engine
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikeEngine")
    return os.path.join(os.path.expanduser("~"), ".klondike_engine")


def _settings_path() -> str:
    return os.path.join(_settings_dir(), "settings.json")


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError(f"Expected a boolean setting, got {value!r}")


def _normalise(values: dict) -> dict:
    out = {}
    if "track_face_down" in values:
        out["track_face_down"] = _parse_bool(values["track_face_down"])
    if "card_size" in values:
        size = str(values["card_size"]).capitalize()
        if size not in _CARD_SIZES:
            raise ValueError(f"Unknown card size {values['card_size']!r}")
        out["card_size"] = size
    return out


def get_current_settings():
    return dict(_CURRENT_SETTINGS)


def load_settings(path: Optional[str] = None):
    """Merge the persisted settings file and environment overrides into the current settings."""
    global _CURRENT_SETTINGS
    path = path or _settings_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            _CURRENT_SETTINGS.update(_normalise(data))
        else:
            logger.warning("Ignoring settings file %s: expected an object", path)
    except FileNotFoundError:
        pass
    except (OSError, ValueError) as exc:
        logger.warning("Could not read settings from %s: %s", path, exc)

    env_face_down = os.environ.get("KLONDIKE_TRACK_FACE_DOWN", "").strip()
    if env_face_down:
        try:
            _CURRENT_SETTINGS["track_face_down"] = _parse_bool(env_face_down)
        except ValueError as exc:
            logger.warning("Ignoring KLONDIKE_TRACK_FACE_DOWN: %s", exc)
    return get_current_settings()


def save_settings(new_values: dict, path: Optional[str] = None):
    # Merge and write to disk
    global _CURRENT_SETTINGS
    _CURRENT_SETTINGS.update(_normalise(new_values))
    path = path or _settings_path()
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(_CURRENT_SETTINGS, f, indent=2)
    except OSError as exc:
        logger.warning("Could not write settings to %s: %s", path, exc)


def reset_settings():
    global _CURRENT_SETTINGS
    _CURRENT_SETTINGS = dict(_DEFAULT_SETTINGS)


def env_seed() -> Optional[int]:
    """Return the developer seed from KLONDIKE_SEED, if set and numeric."""
    raw = os.environ.get("KLONDIKE_SEED", "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer KLONDIKE_SEED=%r", raw)
        return None


# ---------- Cards ----------
class Suit(IntEnum):
    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)

    @property
    def color(self) -> str:
        return "red" if self.is_red else "black"


class Rank(IntEnum):
    ACE = 0
    TWO = 1
    THREE = 2
    FOUR = 3
    FIVE = 4
    SIX = 5
    SEVEN = 6
    EIGHT = 7
    NINE = 8
    TEN = 9
    JACK = 10
    QUEEN = 11
    KING = 12


SUIT_GLYPHS = {Suit.HEARTS: "♥", Suit.DIAMONDS: "♦", Suit.CLUBS: "♣", Suit.SPADES: "♠"}
RANK_TO_TEXT = {Rank.ACE: "A", Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K"}
for _r in Rank:
    RANK_TO_TEXT.setdefault(_r, str(_r.value + 1))

_RANK_LOOKUP = {text: rank for rank, text in RANK_TO_TEXT.items()}
_SUIT_LOOKUP = {s.name[0]: s for s in Suit}
_SUIT_LOOKUP.update({glyph: s for s, glyph in SUIT_GLYPHS.items()})


@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: Rank

    def __post_init__(self):
        object.__setattr__(self, "suit", Suit(self.suit))
        object.__setattr__(self, "rank", Rank(self.rank))

    @classmethod
    def parse(cls, text: str) -> "Card":
        """Build a card from a label such as ``"AH"``, ``"10s"`` or ``"Q♦"``."""
        text = text.strip()
        if len(text) < 2:
            raise ValueError(f"Not a card label: {text!r}")
        rank_text, suit_text = text[:-1].upper(), text[-1]
        suit = _SUIT_LOOKUP.get(suit_text.upper(), _SUIT_LOOKUP.get(suit_text))
        rank = _RANK_LOOKUP.get(rank_text)
        if suit is None or rank is None:
            raise ValueError(f"Not a card label: {text!r}")
        return cls(suit, rank)

    def color(self):
        return self.suit.color

    def label(self) -> str:
        return f"{RANK_TO_TEXT[self.rank]}{SUIT_GLYPHS[self.suit]}"

    def __repr__(self):
        return self.label()


def build_deck() -> List[Card]:
    """All 52 cards, suit by suit (hearts, diamonds, clubs, spades), Ace to King."""
    return [Card(suit, rank) for suit in Suit for rank in Rank]


def shuffle(deck: List[Card], rng=None) -> List[Card]:
    """
    In-place Fisher-Yates shuffle. ``rng`` only needs ``randrange``; pass a
    seeded ``random.Random`` for a reproducible deal.
    """
    if rng is None:
        rng = random.Random()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randrange(i + 1)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


# ---------- Piles ----------
class Pile:
    """Ordered stack of cards; the last element is the top."""

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self._cards: List[Card] = list(cards) if cards else []

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    def __len__(self):
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(tuple(self._cards))

    def __bool__(self):
        return bool(self._cards)

    def peek(self) -> Optional[Card]:
        return self._cards[-1] if self._cards else None

    def push(self, card: Card):
        self._cards.append(card)

    def extend(self, cards: Iterable[Card]):
        self._cards.extend(cards)

    def pop(self) -> Card:
        if not self._cards:
            raise IndexError("pop from empty pile")
        return self._cards.pop()

    def take(self, n: int) -> List[Card]:
        """Remove the last ``n`` cards and return them bottom-to-top."""
        if n < 0 or n > len(self._cards):
            raise IndexError(f"cannot take {n} cards from a pile of {len(self._cards)}")
        if n == 0:
            return []
        run = self._cards[-n:]
        del self._cards[-n:]
        return run

    def clear(self) -> List[Card]:
        run = self._cards
        self._cards = []
        return run

    def __repr__(self):
        return f"{type(self).__name__}({self._cards!r})"


class TableauPile(Pile):
    """A working pile whose bottom ``face_down`` cards are hidden."""

    def __init__(self, cards: Optional[Iterable[Card]] = None, face_down: int = 0):
        super().__init__(cards)
        self.face_down = face_down

    @property
    def face_down(self) -> int:
        return self._face_down

    @face_down.setter
    def face_down(self, value: int):
        if value < 0 or value > len(self._cards):
            raise ValueError(f"face_down={value} out of range for a pile of {len(self._cards)}")
        self._face_down = value

    @property
    def face_up_count(self) -> int:
        return len(self._cards) - self._face_down

    def is_face_up(self, idx: int) -> bool:
        if idx < 0:
            idx += len(self._cards)
        return self._face_down <= idx < len(self._cards)

    def needs_flip(self) -> bool:
        return bool(self._cards) and self._face_down == len(self._cards)

    def flip_top(self) -> bool:
        """Turn the top card face-up if it is hidden. Returns True when a card flipped."""
        if not self.needs_flip():
            return False
        self._face_down -= 1
        return True

    def take(self, n: int) -> List[Card]:
        run = super().take(n)
        # Taking hidden cards (legacy mode never hides any) keeps the count in range
        self._face_down = min(self._face_down, len(self._cards))
        return run

    def clear(self) -> List[Card]:
        self._face_down = 0
        return super().clear()

    def __repr__(self):
        return f"TableauPile({self._cards!r}, face_down={self._face_down})"
