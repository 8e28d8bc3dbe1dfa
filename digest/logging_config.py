"""
Platform-aware logging configuration for changelog-digest.

Log records go to a per-user log file and to stderr, keeping stdout free for
the rendered digest.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_default_log_file() -> Path:
    """
    Get the default log file path based on the current platform.

    Returns:
        Path: Platform-specific log file path
            - Linux: ~/.local/state/changelog-digest/changelog-digest.log
            - macOS: ~/Library/Logs/ChangelogDigest/changelog-digest.log
            - Windows: %LOCALAPPDATA%\\ChangelogDigest\\changelog-digest.log
    """
    if sys.platform == "darwin":  # macOS
        log_dir = Path.home() / "Library" / "Logs" / "ChangelogDigest"
    elif sys.platform == "win32":  # Windows
        log_dir = Path.home() / "AppData" / "Local" / "ChangelogDigest"
    else:  # Linux and other Unix-like systems
        log_dir = Path.home() / ".local" / "state" / "changelog-digest"

    log_dir.mkdir(parents=True, exist_ok=True)

    return log_dir / "changelog-digest.log"


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True,
    console_level: Optional[int] = None,
) -> logging.Logger:
    """
    Set up logging with file and/or console handlers.

    Args:
        level: Logging level for the root logger and the log file
        log_file: Path to log file. If None, uses platform default.
        console: Whether to enable console (stderr) logging
        console_level: Level for the console handler; defaults to ``level``

    Returns:
        logging.Logger: Configured root logger
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    try:
        if log_file is None:
            log_file = get_default_log_file()
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: Could not set up file logging at {log_file}: {e}", file=sys.stderr)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level if console_level is not None else level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def setup_default_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """
    Set up logging with sensible defaults for the CLI.

    The log file always records INFO and above (DEBUG when verbose); the
    console only shows warnings unless verbose is set.
    """
    level = logging.DEBUG if verbose else logging.INFO
    console_level = logging.DEBUG if verbose else logging.WARNING
    return setup_logging(level=level, log_file=log_file, console=True, console_level=console_level)
