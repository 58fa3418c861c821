"""
Logger Configuration
"""
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler
from rich.console import Console


console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_FORMAT_SIMPLE = "%(message)s"

ROOT_LOGGER_NAME = "crisis_pipeline"

LOG_DIR = Path(__file__).parent.parent / "logs"


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    use_rich: bool = True,
) -> logging.Logger:
    """
    Configure a logger with a console handler and an optional file handler.

    Args:
        name: logger name
        level: log level
        log_file: file name under ``logs/`` (optional)
        use_rich: render console output with Rich

    Returns:
        the configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # handlers already installed
    if logger.handlers:
        return logger

    if use_rich:
        console_handler = RichHandler(
            console=console,
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
        )
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_DIR / log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        logger.addHandler(file_handler)

    return logger


def configure_pipeline_logging(level: int = logging.INFO, use_rich: bool = True) -> None:
    """
    Route the pipeline packages' module loggers through one configured handler.
    """
    setup_logger(ROOT_LOGGER_NAME, level=level, use_rich=use_rich)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for package in ("scrapers", "aggregator", "intelligence"):
        package_logger = logging.getLogger(package)
        package_logger.setLevel(level)
        package_logger.handlers = list(root.handlers)
        package_logger.propagate = False
