# ui.py - pygame drawing helpers for the Klondike scene
import pygame
from klondike import common as C

SCREEN_W, SCREEN_H = 1280, 800
TABLE_BG = (2, 100, 40)

CARD_RADIUS = 10
CARD_GAP_X = 18
FAN_Y_DOWN = 12
FAN_Y_UP = 28

BLACK = (20, 20, 20)
WHITE = (245, 245, 245)
RED = (200, 20, 20)
GOLD = (230, 190, 80)
LIGHT = (220, 220, 220)
BACK_BLUE = (34, 96, 200)

# card_size setting -> (width, height) in pixels
CARD_SIZES = {"Small": (75, 105), "Medium": (100, 140), "Large": (150, 210)}

CARD_W, CARD_H = CARD_SIZES[C.get_current_settings()["card_size"]]

# Set by setup_fonts() once pygame is initialised
FONT_UI = None
FONT_LABEL = None

_faces = {}
_back = None


def setup_fonts():
    global FONT_UI, FONT_LABEL
    name = pygame.font.get_default_font()
    FONT_UI = pygame.font.SysFont(name, 26, bold=True)
    FONT_LABEL = pygame.font.SysFont(name, max(16, CARD_W // 3), bold=True)


def set_card_size(size_name: str):
    """Resize cards; cached surfaces and the label font are rebuilt on next use."""
    global CARD_W, CARD_H, _back
    CARD_W, CARD_H = CARD_SIZES[size_name]
    _faces.clear()
    _back = None
    if FONT_UI is not None:
        setup_fonts()


def next_card_size(size_name: str) -> str:
    names = list(CARD_SIZES)
    return names[(names.index(size_name) + 1) % len(names)]


def _blank_card(fill):
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, fill, surf.get_rect(), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, surf.get_rect(), width=2, border_radius=CARD_RADIUS)
    return surf


def card_face(card):
    surf = _faces.get(card)
    if surf is None:
        surf = _blank_card(WHITE)
        text = FONT_LABEL.render(card.label(), True, RED if card.suit.is_red else BLACK)
        surf.blit(text, (8, 6))
        surf.blit(text, ((CARD_W - text.get_width()) // 2, (CARD_H - text.get_height()) // 2))
        _faces[card] = surf
    return surf


def card_back():
    global _back
    if _back is None:
        _back = _blank_card(BACK_BLUE)
        pygame.draw.rect(_back, LIGHT, _back.get_rect().inflate(-16, -16), width=2, border_radius=6)
    return _back


def draw_card(screen, card, pos, face_up=True):
    screen.blit(card_face(card) if face_up else card_back(), pos)


def draw_empty_slot(screen, rect, color=LIGHT):
    pygame.draw.rect(screen, color, rect, width=2, border_radius=CARD_RADIUS)


def draw_text(screen, text, center_x, top, color=WHITE):
    surf = FONT_UI.render(text, True, color)
    screen.blit(surf, (center_x - surf.get_width() // 2, top))
