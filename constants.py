# constants.py

"""
Application Constants

This module defines static configuration values for the application's framework.
These are the built-in defaults used whenever the configuration file leaves a
key out, plus the closed palette of color names the file may reference.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
- Colors are RGBA tuples of 0-255 ints.
"""

# Screen dimensions
WIDTH = 800  # Pixels
HEIGHT = 600  # Pixels

# Framerate
FPS = 60  # Frames per second (on-screen)
VIDEO_FPS = 30  # Frames per second (encoded video playback)

# Population
PARTICLE_AMOUNT = 20_000

# Kinematics
ACCELERATION_STRENGTH = 300.0  # Units per second^2
MAX_SPEED = 300.0  # Units per second

# Window Title
TITLE = "Particle Simulation"

# Input
RECORD_KEY = "r"  # pygame key name that toggles recording

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
LOG_ROOT = "runs"

# Default configuration file, looked up in the working directory
CONFIG_PATH = "config.txt"

# Recording output
FRAMES_DIR = "frames"
FRAME_PREFIX = "frame_"
FRAME_EXT = "png"
FRAME_PATTERN = f"{FRAME_PREFIX}%04d.{FRAME_EXT}"  # ffmpeg sequence pattern
OUTPUT_VIDEO = "output.mp4"
RECORDING_LABEL = "Recording"
RECORDING_LABEL_POS = (10, 10)  # Pixels from top-left
RECORDING_LABEL_SIZE = 20  # Font size

# Named color palette (RGBA), keyed by lowercase name.
# Configuration values are matched case-insensitively against these keys.
PALETTE = {
    "lightgray":  (200, 200, 200, 255),
    "gray":       (130, 130, 130, 255),
    "darkgray":   (80, 80, 80, 255),
    "yellow":     (253, 249, 0, 255),
    "gold":       (255, 203, 0, 255),
    "orange":     (255, 161, 0, 255),
    "pink":       (255, 109, 194, 255),
    "red":        (230, 41, 55, 255),
    "maroon":     (190, 33, 55, 255),
    "green":      (0, 228, 48, 255),
    "lime":       (0, 158, 47, 255),
    "darkgreen":  (0, 117, 44, 255),
    "skyblue":    (102, 191, 255, 255),
    "blue":       (0, 121, 241, 255),
    "darkblue":   (0, 82, 172, 255),
    "purple":     (200, 122, 255, 255),
    "violet":     (135, 60, 190, 255),
    "darkpurple": (112, 31, 126, 255),
    "beige":      (211, 176, 131, 255),
    "brown":      (127, 106, 79, 255),
    "darkbrown":  (76, 63, 47, 255),
    "white":      (255, 255, 255, 255),
    "black":      (0, 0, 0, 255),
    "blank":      (0, 0, 0, 0),
    "magenta":    (255, 0, 255, 255),
    "raywhite":   (245, 245, 245, 255),
}

BACKGROUND_COLOR = PALETTE["black"]
PARTICLE_COLOR = PALETTE["white"]
