# main.py

import logging
import os
import sys

import numpy as np
import pygame

import config
import constants
import encoder
import logger_setup
from particle_system import ParticleSystem
from recording import CaptureError, RecordingSession

# Get the application's dedicated logger
logger = logging.getLogger("particle_sim")


def prepare_output(frames_dir=constants.FRAMES_DIR, output_video=constants.OUTPUT_VIDEO):
    """Creates the frames directory and removes any video left by a previous run."""
    os.makedirs(frames_dir, exist_ok=True)
    stale = encoder.frame_files(frames_dir)
    if stale:
        logger.warning(
            f"Found {len(stale)} frame(s) from an earlier run in '{frames_dir}'. "
            f"Only frames recorded in this run will be encoded."
        )
    if os.path.exists(output_video):
        os.remove(output_video)
        logger.info(f"Removed previous output video '{output_video}'.")


def resolve_record_key(name: str) -> int:
    try:
        return pygame.key.key_code(name)
    except ValueError:
        logger.warning(f"Unknown record key {name!r}. Using '{constants.RECORD_KEY}'.")
        return pygame.key.key_code(constants.RECORD_KEY)


def handle_events(session: RecordingSession, record_key: int) -> bool:
    """
    Drains the event queue. Toggles recording on the record key.
    Returns False once the window should close.
    """
    running = True
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                running = False
            elif event.key == record_key:
                session.toggle()
    return running


def draw_recording_label(screen: pygame.Surface, font: pygame.font.Font):
    label = font.render(constants.RECORDING_LABEL, True, constants.PALETTE["red"])
    screen.blit(label, constants.RECORDING_LABEL_POS)


def render_frame(particle_system: ParticleSystem, screen: pygame.Surface, session: RecordingSession,
                 background_color, font: pygame.font.Font, target_position, elapsed_seconds: float):
    """
    Draws one frame. While recording, the particles are drawn to the offscreen
    surface, exported as the next frame image, and then shown on the window
    with a "Recording" label that never reaches the exported frames.
    """
    target = session.target(screen)
    target.fill(background_color)

    particle_system.update(target_position, elapsed_seconds)
    particle_system.draw(target)

    if session.active:
        session.export_frame()
        screen.blit(target, (0, 0))
        draw_recording_label(screen, font)

    pygame.display.flip()


def run_simulation_loop(particle_system, screen, clock, session, params, record_key, font):
    """
    The main simulation loop. Runs until the window is closed.
    Elapsed time for each frame is the duration of the previous one, so the
    first frame integrates with dt = 0.
    """
    # --- Loop Setup ---
    running = True
    tick = 0
    elapsed = 0.0

    while running:
        # Event handling
        running = handle_events(session, record_key)
        if not running:
            break

        render_frame(
            particle_system, screen, session, params.background_color, font,
            pygame.mouse.get_pos(), elapsed
        )

        elapsed = clock.tick(params.frame_rate) / 1000
        tick += 1

        # --- Logging (throttled to roughly once per second) ---
        if tick % params.frame_rate == 0:
            logger.debug(
                f"Tick={tick}, FPS={clock.get_fps():.1f}, "
                f"State={session.state}, FramesExported={session.frame_count}"
            )

    logger.info(f"Simulation loop finished after {tick} ticks.")


def main(argv=None):
    """
    Main function to initialize and run the particle simulation, then encode
    any recorded frames into a video.
    """
    argv = sys.argv[1:] if argv is None else argv
    config_path = argv[0] if argv else constants.CONFIG_PATH

    # --- Setup ---
    logger_setup.setup_logging()
    logger.info("Application starting...")

    try:
        params = config.load_config(config_path)
    except config.ConfigError as e:
        logger.critical(f"Configuration error: {e}")
        sys.exit(1)
    logger.setLevel(params.log_level)

    prepare_output()

    # Unseeded: every run starts from a different layout.
    rng = np.random.default_rng()
    particle_system = ParticleSystem.from_parameters(params, rng)

    # --- Initialization ---
    try:
        pygame.init()
        screen = pygame.display.set_mode(params.size)
        pygame.display.set_caption(constants.TITLE)
        font = pygame.font.Font(None, constants.RECORDING_LABEL_SIZE)
    except pygame.error as e:
        logger.critical(f"Could not create the rendering window: {e}")
        pygame.quit()
        sys.exit(1)

    clock = pygame.time.Clock()
    record_key = resolve_record_key(params.record_key)
    session = RecordingSession(params.size)

    # --- Prime the physics engine ---
    # The first call compiles the Numba kernels. With dt = 0 and zero
    # velocities nothing moves, so the initial layout is unchanged.
    particle_system.update((0.0, 0.0), 0.0)

    failed = False
    try:
        run_simulation_loop(particle_system, screen, clock, session, params, record_key, font)
    except CaptureError as e:
        logger.critical(f"Frame capture failed: {e}")
        failed = True
    finally:
        session.close()
        pygame.quit()

    if failed:
        sys.exit(1)

    # --- Encode the recorded frames ---
    if session.frame_count > 0:
        try:
            encoder.encode(
                constants.FRAMES_DIR, constants.FRAME_PATTERN,
                constants.OUTPUT_VIDEO, params.video_frame_rate, session.frame_count
            )
        except encoder.EncodingError as e:
            logger.error(f"Video encoding failed: {e}")
    else:
        logger.info("No frames were recorded. Skipping video encoding.")

    logger.info("Application shutting down.")


if __name__ == "__main__":
    main()
