# logger_setup.py

import logging
import os
from datetime import datetime

import constants


def setup_logging(level=constants.LOG_LEVEL, run_id=None, log_root=constants.LOG_ROOT):
    """
    Sets up logging for the application.

    Creates a run-specific log directory and configures a dedicated application
    logger (not the root logger) to output to both the console and a log file.
    This keeps verbose output from third-party libraries like Numba and pygame
    out of the simulation log.

    Data Contract:
    - Inputs:
        - level (str | int): Logging level for the "particle_sim" logger.
        - run_id (str | None): Name of the run directory. Defaults to a timestamp.
        - log_root (str): Parent directory for all run directories.
    - Outputs: The path of the log file (str).
    - Side Effects:
        - Configures the "particle_sim" logger.
        - Creates directories for log files.
    """
    if run_id is None:
        run_id = datetime.now().strftime("%Y%m%d-%H%M%S")

    # --- Get a dedicated logger for the application ---
    logger = logging.getLogger("particle_sim")
    logger.setLevel(level)

    # --- Prevent logs from propagating to the root logger ---
    logger.propagate = False

    # --- Create directories for logs ---
    log_dir = os.path.join(log_root, run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'simulation.log')

    # --- Create formatter and handlers ---
    formatter = logging.Formatter(constants.LOG_FORMAT)

    # File handler
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)

    # Console handler
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    # --- Add handlers to the logger ---
    # Clear existing handlers to avoid duplication if this function is called again
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)

    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    return log_file
