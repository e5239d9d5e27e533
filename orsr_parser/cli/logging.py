"""
Logging utilities for the orsr_parser CLI.

Console output goes through a tqdm-compatible handler so that batch progress
bars stay intact; a log file is written when a log directory is given.
"""

import logging
import sys
import time
from pathlib import Path

from orsr_parser.utils.tqdm_logging import TqdmLoggingHandler

# Libraries logging every request at INFO/DEBUG
NOISY_LOGGERS = ("urllib3", "requests", "charset_normalizer")


class FlushingFileHandler(logging.FileHandler):
    """File handler that flushes after each record so logs survive a crash."""

    def emit(self, record):
        super().emit(record)
        self.flush()


def setup_logging(
    command_name: str,
    verbose: bool = False,
    log_dir: Path | None = None,
    tqdm_compatible: bool = True,
) -> logging.Logger:
    """
    Set up logging for a CLI command.

    Args:
        command_name: Name of the command (logger name and log file prefix)
        verbose: Show DEBUG messages on the console
        log_dir: Directory for a DEBUG level log file (None = console only)
        tqdm_compatible: If True, use TqdmLoggingHandler for the console

    Returns:
        Configured logger instance
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    console_formatter = logging.Formatter("%(message)s")

    if tqdm_compatible:
        console_handler = TqdmLoggingHandler(level=console_level)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)

    handlers: list[logging.Handler] = [console_handler]
    log_file = None
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        log_file = log_dir / f"{command_name}_{timestamp}.log"
        file_handler = FlushingFileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
        handlers.append(file_handler)

    # Command logger and the package logger share the handlers
    for name in (command_name, "orsr_parser"):
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        logger.handlers = list(handlers)
        logger.propagate = False

    for noisy_logger in NOISY_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    logger = logging.getLogger(command_name)
    if log_file is not None:
        logger.info(f"Log file: {log_file}")
    return logger
