# klondike.py - pygame scene that renders a GameState and forwards clicks to the session
import logging
import random
from typing import Optional

import pygame

from klondike import common as C
from klondike import session as S
from klondike import ui as U
from klondike.state import FOUNDATION_PILES, TABLEAU_PILES, Location, PileKind

logger = logging.getLogger(__name__)


class KlondikeGameScene:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng
        self.message = ""
        self.compute_layout()
        self.deal_new()

    def compute_layout(self):
        left = 40
        top = 90
        step = U.CARD_W + U.CARD_GAP_X
        self.stock_xy = (left, top)
        self.waste_xy = (left + step, top)
        self.foundation_xy = [(left + (3 + i) * step, top) for i in range(FOUNDATION_PILES)]
        self.tableau_xy = [(left + i * step, top + U.CARD_H + 40) for i in range(TABLEAU_PILES)]

    def deal_new(self):
        self.state = S.new_game(self.rng)
        logger.debug("Scene dealt a new game")
        self.message = ""

    # ---------- Geometry ----------
    def _card_offsets(self, pile):
        """Yield the y offset of each card in a tableau pile (hidden cards fan tighter)."""
        y = 0
        for i in range(len(pile)):
            yield y
            y += U.FAN_Y_UP if pile.is_face_up(i) else U.FAN_Y_DOWN

    def _tableau_rect(self, idx):
        x, y = self.tableau_xy[idx]
        pile = self.state.tableau[idx]
        offsets = list(self._card_offsets(pile))
        height = U.CARD_H + (offsets[-1] if offsets else 0)
        return pygame.Rect(x, y, U.CARD_W, height)

    def location_at(self, pos) -> Optional[Location]:
        if pygame.Rect(*self.stock_xy, U.CARD_W, U.CARD_H).collidepoint(pos):
            return Location.stock()
        if pygame.Rect(*self.waste_xy, U.CARD_W, U.CARD_H).collidepoint(pos):
            return Location.waste()
        for fi, xy in enumerate(self.foundation_xy):
            if pygame.Rect(*xy, U.CARD_W, U.CARD_H).collidepoint(pos):
                return Location.foundation(fi)
        for ti in range(TABLEAU_PILES):
            if self._tableau_rect(ti).collidepoint(pos):
                return Location.tableau(ti)
        return None

    def pile_center(self, location: Location):
        if location.kind is PileKind.STOCK:
            x, y = self.stock_xy
        elif location.kind is PileKind.WASTE:
            x, y = self.waste_xy
        elif location.kind is PileKind.FOUNDATION:
            x, y = self.foundation_xy[location.index]
        else:
            r = self._tableau_rect(location.index)
            return r.centerx, r.bottom - U.CARD_H // 2
        return x + U.CARD_W // 2, y + U.CARD_H // 2

    # ---------- Event handling ----------
    def click(self, location: Location):
        result = S.handle_click(self.state, location)
        if result.outcome is not None and not result.outcome:
            self.message = result.outcome.reason
        else:
            self.message = ""
        if result.won:
            self.message = f"Congratulations! You won! Your score is {self.state.score}"
        return result

    def undo(self):
        result = S.undo(self.state)
        S.clear_selection(self.state)
        self.message = "" if result else result.reason
        return result

    def cycle_card_size(self):
        size = U.next_card_size(C.get_current_settings()["card_size"])
        C.save_settings({"card_size": size})
        U.set_card_size(size)
        self.compute_layout()
        return size

    def handle_event(self, e):
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            location = self.location_at(e.pos)
            if location is None:
                S.clear_selection(self.state)
                return
            self.click(location)
        elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 3:
            # Right-click picks up a foundation top so it can go back to the tableau
            location = self.location_at(e.pos)
            if location is not None and location.kind is PileKind.FOUNDATION:
                S.select(self.state, location)
        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_u:
                self.undo()
            elif e.key == pygame.K_n:
                self.deal_new()
            elif e.key == pygame.K_s:
                self.cycle_card_size()
            elif e.key == pygame.K_ESCAPE:
                pygame.event.post(pygame.event.Event(pygame.QUIT))

    # ---------- Drawing ----------
    def _draw_top(self, screen, pile, xy):
        rect = pygame.Rect(*xy, U.CARD_W, U.CARD_H)
        top = pile.peek()
        if top is None:
            U.draw_empty_slot(screen, rect)
        else:
            U.draw_card(screen, top, rect.topleft)

    def draw(self, screen):
        screen.fill(U.TABLE_BG)
        U.draw_text(screen, f"Score: {self.state.score}    U: Undo  N: New  S: Card size  Esc: Quit", U.SCREEN_W // 2, 20)

        # Stock shows a back and its size
        stock_rect = pygame.Rect(*self.stock_xy, U.CARD_W, U.CARD_H)
        if self.state.stock:
            screen.blit(U.card_back(), stock_rect.topleft)
        else:
            U.draw_empty_slot(screen, stock_rect)
        U.draw_text(screen, str(len(self.state.stock)), stock_rect.centerx, stock_rect.bottom + 4)

        self._draw_top(screen, self.state.waste, self.waste_xy)
        for fi, xy in enumerate(self.foundation_xy):
            self._draw_top(screen, self.state.foundations[fi], xy)

        for ti, (x, y) in enumerate(self.tableau_xy):
            pile = self.state.tableau[ti]
            if not pile:
                U.draw_empty_slot(screen, pygame.Rect(x, y, U.CARD_W, U.CARD_H))
                continue
            for i, (card, dy) in enumerate(zip(pile.cards, self._card_offsets(pile))):
                U.draw_card(screen, card, (x, y + dy), pile.is_face_up(i))

        selected = self.state.selection
        if selected is not None:
            if selected.kind is PileKind.TABLEAU:
                rect = self._tableau_rect(selected.index)
            else:
                cx, cy = self.pile_center(selected)
                rect = pygame.Rect(cx - U.CARD_W // 2, cy - U.CARD_H // 2, U.CARD_W, U.CARD_H)
            pygame.draw.rect(screen, U.GOLD, rect.inflate(6, 6), width=3, border_radius=U.CARD_RADIUS)

        if self.message:
            U.draw_text(screen, self.message, U.SCREEN_W // 2, U.SCREEN_H - 40, (255, 255, 180))
