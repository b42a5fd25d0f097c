"""Logging set up."""

import logging

from hypercore_signing.utils import setup_console_logging


def test_setup_console_logging_with_file(tmp_path, monkeypatch):
    """Log file receives info level messages."""
    monkeypatch.setenv("LOG_LEVEL", "warning")
    log_file = tmp_path / "logs" / "signing.log"
    root = setup_console_logging(log_file=log_file)
    try:
        logging.getLogger("hypercore_signing.test").info("Signed test action")
        for handler in root.handlers:
            handler.flush()
        assert "Signed test action" in log_file.read_text()
    finally:
        for handler in list(root.handlers):
            if isinstance(handler, logging.FileHandler):
                root.removeHandler(handler)
                handler.close()
