"""Logging helpers for scripts and notebooks."""

import logging
import os
from pathlib import Path


def setup_console_logging(
    default_log_level="warning",
    log_file: Path | None = None,
    clear_log_file=True,
) -> logging.Logger:
    """Set up coloured log output.

    - ``LOG_LEVEL`` environment variable overrides ``default_log_level``

    - Uses ``coloredlogs`` when installed, plain output otherwise

    - Tunes down noisy dependency logging

    :param log_file:
        Output both console and this log file.
        The file gets at least ``INFO`` level.

    :return:
        Root logger
    """
    level = os.environ.get("LOG_LEVEL", default_log_level).upper()
    numeric_level = getattr(logging, level, None)
    assert isinstance(numeric_level, int), f"No log level: {level}"

    fmt = "%(asctime)s %(name)-44s %(message)s"
    date_fmt = "%H:%M:%S"

    try:
        # Optional dependency
        import coloredlogs

        coloredlogs.install(level=numeric_level, fmt=fmt, datefmt=date_fmt)
    except ImportError:
        # non-ANSI e.g. Docker
        logging.basicConfig(level=numeric_level, format=fmt, datefmt=date_fmt)

    if log_file:
        assert isinstance(log_file, Path), f"log_file must be Path, got {type(log_file)}"

        log_file.parent.mkdir(parents=True, exist_ok=True)

        min_level = min(logging.INFO, numeric_level)
        mode = "w" if clear_log_file else "a"

        file_handler = logging.FileHandler(log_file, mode=mode, encoding="utf-8")
        file_handler.setLevel(min_level)
        file_handler.setFormatter(logging.Formatter(fmt, date_fmt))

        root = logging.getLogger()
        root.setLevel(min_level)
        root.addHandler(file_handler)

    # Mute noise
    logging.getLogger("web3.RequestManager").setLevel(logging.WARNING)
    return logging.getLogger()
