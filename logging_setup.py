"""
Logging setup.

Streamlit re-executes the screen script on every interaction, so setup is
done once per process. A log file that cannot be opened leaves console
logging in place; startup never fails on it.
"""

from __future__ import annotations

import logging
import os

_configured = False


def setup_logging(log_path: str, log_level: str) -> None:
    global _configured
    if _configured:
        return

    handlers = [logging.StreamHandler()]
    file_error = None
    try:
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_path))
    except OSError as e:
        file_error = e

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    if file_error is not None:
        logging.warning(f"Logging to console only, cannot open {log_path}: {file_error}")
    _configured = True
