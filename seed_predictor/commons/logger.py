"""
Logger utility for Seed Predictor
"""

import logging
import os

ROOT_LOGGER_NAME = "seed_predictor"
DEBUG_ENV_VAR = "SEED_PREDICTOR_DEBUG"


def _debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV_VAR, "").strip().lower() in ("1", "true", "yes", "on")


class Logger:
    """
    A Logger class for logging messages

    All instances share one console handler installed on the package root
    logger; ``module`` selects a child logger (``seed_predictor.<module>``).
    """

    def __init__(self, module: str = ""):
        root = logging.getLogger(ROOT_LOGGER_NAME)
        level = logging.DEBUG if _debug_enabled() else logging.INFO
        root.setLevel(level)

        if not root.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            root.addHandler(handler)

        self.logger = root.getChild(module) if module else root

    def info(self, message: str):
        """Log info message"""
        self.logger.info(message)

    def warn(self, message: str):
        """Log warning message"""
        self.logger.warning(message)

    def error(self, message: str):
        """Log error message"""
        self.logger.error(message)

    def debug(self, message: str):
        """Log debug message"""
        self.logger.debug(message)
