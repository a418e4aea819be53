# __main__.py - entry point for the pygame front end
import os
import logging
import pygame
from klondike import common as C
from klondike import ui as U
from klondike.modes.klondike import KlondikeGameScene


def _initial_window_size():
    info = pygame.display.Info()
    # Keep a safety margin so the window never hides under taskbar
    margin_w, margin_h = 120, 140
    w = min(U.SCREEN_W, max(640, info.current_w - margin_w))
    h = min(U.SCREEN_H, max(480, info.current_h - margin_h))
    return w, h


def _log_level():
    name = os.environ.get("KLONDIKE_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING


def main():
    logging.basicConfig(
        level=_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = C.load_settings()
    U.set_card_size(settings["card_size"])

    # Center window and init
    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    pygame.init()

    w, h = _initial_window_size()
    U.SCREEN_W, U.SCREEN_H = w, h
    screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
    pygame.display.set_caption("Klondike")
    U.setup_fonts()
    clock = pygame.time.Clock()

    scene = KlondikeGameScene()

    running = True
    while running:
        clock.tick(60)
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
                break
            elif e.type == pygame.VIDEORESIZE:
                U.SCREEN_W, U.SCREEN_H = e.size
                screen = pygame.display.set_mode((U.SCREEN_W, U.SCREEN_H), pygame.RESIZABLE)
                scene.compute_layout()
            else:
                scene.handle_event(e)
        scene.draw(screen)
        pygame.display.flip()
    pygame.quit()


if __name__ == "__main__":
    main()
