# config.py

"""
Simulation configuration loading.

The configuration file is plain text with one `key = value` pair per line.
Blank lines, `#` comments, lines without `=` and unrecognized keys are ignored.
Any key absent from the file keeps its built-in default from `constants`.

Error policy:
- Unknown color names are fatal and raise ConfigError.
- Malformed, non-finite or non-positive numeric values fall back to the default
  and log a warning.
- An unreadable or non-UTF-8 file raises ConfigError.
"""

import logging
import math
import os
from dataclasses import dataclass

import constants

logger = logging.getLogger("particle_sim")


class ConfigError(ValueError):
    """Raised when the configuration file cannot be turned into valid parameters."""


@dataclass(frozen=True)
class SimulationParameters:
    """
    Immutable parameters for one simulation run.

    Owned by the render loop and read-only for every other component.
    Colors are RGBA tuples; particle_colors always holds at least one entry.
    """
    window_width: int = constants.WIDTH
    window_height: int = constants.HEIGHT
    particle_amount: int = constants.PARTICLE_AMOUNT
    acceleration_strength: float = constants.ACCELERATION_STRENGTH
    max_speed: float = constants.MAX_SPEED
    frame_rate: int = constants.FPS
    video_frame_rate: int = constants.VIDEO_FPS
    background_color: tuple = constants.BACKGROUND_COLOR
    particle_colors: tuple = (constants.PARTICLE_COLOR,)
    record_key: str = constants.RECORD_KEY
    log_level: str = constants.LOG_LEVEL

    @property
    def size(self):
        return (self.window_width, self.window_height)


_INT_KEYS = ("particle_amount", "window_width", "window_height", "frame_rate", "video_frame_rate")
_FLOAT_KEYS = ("acceleration_strength", "max_speed")


def resolve_color(name: str) -> tuple:
    """Looks up a color name case-insensitively in the palette."""
    key = name.strip().lower()
    try:
        return constants.PALETTE[key]
    except KeyError:
        raise ConfigError(f"Unknown color name: {name.strip()!r}") from None


def parse_config_text(text: str) -> dict:
    """
    Splits configuration text into a {key: raw_value} dict.

    Keys are lowercased; later lines override earlier ones.
    """
    entries = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        entries[key.strip().lower()] = value.strip()
    return entries


def _parse_number(key, raw, cast, default):
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"Malformed value for '{key}': {raw!r}. Using default {default}.")
        return default
    if not math.isfinite(value):
        logger.warning(f"Non-finite value for '{key}': {raw!r}. Using default {default}.")
        return default
    if value <= 0:
        logger.warning(f"Non-positive value for '{key}': {raw!r}. Using default {default}.")
        return default
    return value


def build_parameters(entries: dict) -> SimulationParameters:
    """Converts raw config entries into validated SimulationParameters."""
    defaults = SimulationParameters()
    values = {}

    for key in _INT_KEYS:
        if key in entries:
            values[key] = _parse_number(key, entries[key], int, getattr(defaults, key))
    for key in _FLOAT_KEYS:
        if key in entries:
            values[key] = _parse_number(key, entries[key], float, getattr(defaults, key))

    if "background_color" in entries:
        values["background_color"] = resolve_color(entries["background_color"])

    # particle_colors (a list) wins over particle_color when both are present.
    color_names = None
    if "particle_colors" in entries:
        color_names = [name for name in entries["particle_colors"].split(",") if name.strip()]
    elif "particle_color" in entries:
        color_names = [entries["particle_color"]]
    if color_names is not None:
        if not color_names:
            raise ConfigError("particle_colors must name at least one color")
        values["particle_colors"] = tuple(resolve_color(name) for name in color_names)

    if "record_key" in entries and entries["record_key"]:
        values["record_key"] = entries["record_key"].lower()

    if "log_level" in entries:
        level = entries["log_level"].upper()
        if isinstance(logging.getLevelName(level), int):
            values["log_level"] = level
        else:
            logger.warning(f"Unknown log level {entries['log_level']!r}. Using default {defaults.log_level}.")

    return SimulationParameters(**values)


def load_config(path=constants.CONFIG_PATH) -> SimulationParameters:
    """
    Loads simulation parameters from a `key = value` text file.

    A missing file is not an error: every parameter keeps its default.
    """
    if not os.path.exists(path):
        logger.warning(f"Config file '{path}' not found. Using built-in defaults.")
        return SimulationParameters()

    try:
        with open(path, 'r', encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file '{path}': {e}") from e
    entries = parse_config_text(text)

    params = build_parameters(entries)
    logger.info(f"Loaded configuration from '{path}': {params}")
    return params
