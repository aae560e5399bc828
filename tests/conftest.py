import os

# Run pygame headless; must be set before pygame creates any display.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest


@pytest.fixture
def screen():
    pygame.init()
    surface = pygame.display.set_mode((60, 40))
    yield surface
    pygame.quit()


@pytest.fixture
def blank_surface():
    def make(size):
        return pygame.Surface(size, 0, 32)
    return make
