# recording.py

import logging
import os

import pygame

import constants

logger = logging.getLogger("particle_sim")


class CaptureError(RuntimeError):
    """Raised when a frame cannot be exported. Fatal: the sequence must stay contiguous."""


class RecordingSession:
    """
    Idle/Recording state machine plus the offscreen surface frames are drawn to
    while recording.

    Data Contract:
    - Inputs:
        - size (tuple): (width, height) of the offscreen surface; matches the window.
        - frame_dir (str): Directory exported frames are written to.
        - surface_factory (callable): Allocates a surface from a size. Defaults to pygame.Surface.
        - bottom_up (bool): Whether the surface stores rows bottom-up and needs a vertical flip.
    - Invariants:
        - The surface is allocated at most once per session (lazily, on the
          first activation) and reused across toggles.
        - frame_count only increases, only while active, and is never reset.
    """
    def __init__(self, size: tuple, frame_dir: str = constants.FRAMES_DIR,
                 surface_factory=None, bottom_up: bool = False):
        self.size = tuple(size)
        self.frame_dir = frame_dir
        self.surface_factory = surface_factory or pygame.Surface
        self.bottom_up = bottom_up
        self.active = False
        self.frame_count = 0
        self.surface = None

    @property
    def state(self) -> str:
        return "Recording" if self.active else "Idle"

    def toggle(self):
        """Switches between Idle and Recording, allocating the surface on first use."""
        if self.active:
            self.active = False
            logger.info(f"Recording stopped after {self.frame_count} frame(s) total.")
            return self.active

        if self.surface is None:
            self.surface = self.surface_factory(self.size)
            logger.info(f"Offscreen capture surface allocated at {self.size[0]}x{self.size[1]}.")
        self.active = True
        logger.info(f"Recording started at frame {self.frame_count}.")
        return self.active

    def target(self, screen: pygame.Surface) -> pygame.Surface:
        """The surface this frame should be drawn to."""
        return self.surface if self.active else screen

    def frame_path(self, index: int) -> str:
        return os.path.join(self.frame_dir, f"{constants.FRAME_PREFIX}{index:04d}.{constants.FRAME_EXT}")

    def export_frame(self) -> str:
        """
        Writes the offscreen surface to the next numbered frame file and
        advances the frame counter. Returns the written path.
        """
        if not self.active:
            raise CaptureError("Cannot export a frame while recording is inactive")

        path = self.frame_path(self.frame_count)
        try:
            if self.bottom_up:
                # Transient upright copy; the offscreen surface itself is left untouched.
                image = pygame.transform.flip(self.surface, False, True)
                pygame.image.save(image, path)
                del image
            else:
                pygame.image.save(self.surface, path)
        except (pygame.error, OSError) as e:
            raise CaptureError(f"Failed to export frame {self.frame_count} to '{path}': {e}") from e

        self.frame_count += 1
        logger.debug(f"Exported frame {path}")
        return path

    def close(self):
        """Returns to Idle and releases the offscreen surface if it was ever allocated."""
        self.active = False
        if self.surface is not None:
            self.surface = None
            logger.info("Offscreen capture surface released.")
