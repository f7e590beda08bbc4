"""
Logging configuration for structlens.

Routes log records through rich so progress output and diagnostics share
one stderr console. Levels follow ``AnalysisConfig.verbosity``:

    quiet    ERROR
    normal   WARNING
    verbose  DEBUG (with source locations)
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the structlens logger hierarchy.

    Safe to call again once the full configuration is known; handlers from
    the previous call are replaced.

    Args:
        verbosity: One of quiet / normal / verbose
        log_file: Optional file path; receives every record at DEBUG level

    Returns:
        The root structlens logger
    """
    level = VERBOSITY_LEVELS.get(verbosity, logging.WARNING)

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_path=verbosity == "verbose",
    )
    console_handler.setLevel(level)
    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    logger = logging.getLogger("structlens")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)

    logger.setLevel(logging.DEBUG if log_file else level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the structlens hierarchy.

    Args:
        name: Module name (e.g., 'structlens.core'); bare names are
              prefixed with 'structlens.'. None returns the root
              structlens logger.
    """
    if name is None:
        return logging.getLogger("structlens")

    if not name.startswith("structlens"):
        name = f"structlens.{name}"

    return logging.getLogger(name)
