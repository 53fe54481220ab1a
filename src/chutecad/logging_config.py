"""
Logging Configuration
Sets up the package loggers for the command line tools.
"""
import logging
import sys
from typing import Optional, Sequence

LOGGER_NAMESPACES: tuple[str, ...] = ("parachute", "exporters", "schemas", "chutecad")


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    namespaces: Sequence[str] = LOGGER_NAMESPACES,
) -> None:
    """
    Configures the loggers of every package namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        namespaces: Logger names that receive the handlers.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers: list[logging.Handler] = []
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    for name in namespaces:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Avoid duplicate records when setup runs more than once
        for old_handler in list(logger.handlers):
            logger.removeHandler(old_handler)
            old_handler.close()
        for handler in handlers:
            logger.addHandler(handler)

    logging.getLogger("chutecad").debug("Logging initialized.")
