# revtui/utils/logging_config.py
"""revtui.utils.logging_config
=============================

Logging configuration for revtui. A curses application owns the terminal,
so the default setup writes to a rotating log file and keeps the console
handler disabled unless the configuration asks for it.

Globals:
    logger: Main application logger ("revtui").
    KEY_LOGGER: Logger for raw key-press trace events ("revtui.keyevents").

Functions:
    setup_logging(config: Optional[Dict[str, Any]] = None) -> None
        Configures logging handlers and log levels for the application.
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
# Created at import time, unconfigured until ``setup_logging()`` runs.
logger = logging.getLogger("revtui")
KEY_LOGGER = logging.getLogger("revtui.keyevents")


def _rotating_handler(
    filename: str, max_bytes: int, backup_count: int
) -> logging.handlers.RotatingFileHandler:
    """Creates a rotating handler, making the parent directory if needed."""
    log_dir = os.path.dirname(filename)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)
    return logging.handlers.RotatingFileHandler(
        filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are installed:

    1. File handler – rotating ``revtui.log`` (path from ``log_file``)
       capturing everything from ``file_level`` (default DEBUG) upward.
    2. Console handler – optional ``stderr`` output at ``console_level``.
       Off by default because curses owns the terminal.
    3. Error-file handler – optional rotating ``error.log`` with ERROR and
       CRITICAL records only.
    4. Key-event handler – rotating ``keytrace.log`` attached to
       ``revtui.keyevents`` when ``REVTUI_KEYTRACE`` is ``1/true/yes``.

    Existing root handlers are replaced, so calling this twice (e.g. in
    tests) does not duplicate records. The function never raises; I/O
    problems are reported to stderr and logging continues best-effort.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` section is consulted.
    """
    logging_config = (config or {}).get("logging", {})
    log_filename = logging_config.get("log_file", "revtui.log")
    log_file_level = getattr(
        logging, str(logging_config.get("file_level", "DEBUG")).upper(), logging.DEBUG
    )

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
    except OSError as e_fh:
        print(f"Error setting up file logger for '{log_filename}': {e_fh}", file=sys.stderr)
        log_filename = os.path.join(tempfile.gettempdir(), "revtui.log")
        print(f"Logging to temporary file: '{log_filename}'", file=sys.stderr)
        try:
            file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
        except OSError as e_tmp:
            print(f"File logging disabled: {e_tmp}", file=sys.stderr)
    if file_handler:
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)

    console_handler = None
    if logging_config.get("log_to_console", False):
        console_level = getattr(
            logging,
            str(logging_config.get("console_level", "WARNING")).upper(),
            logging.WARNING,
        )
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        )
        console_handler.setLevel(console_level)

    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        try:
            error_file_handler = _rotating_handler("error.log", 1024 * 1024, 3)
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except OSError as e_efh:
            print(f"Error setting up separate error log 'error.log': {e_efh}", file=sys.stderr)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)
    root_logger.setLevel(log_file_level)

    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    if os.environ.get("REVTUI_KEYTRACE", "").lower() in {"1", "true", "yes"}:
        try:
            key_trace_handler = _rotating_handler("keytrace.log", 1024 * 1024, 3)
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            KEY_LOGGER.disabled = False
            logging.info("Key event tracing enabled, logging to 'keytrace.log'.")
        except OSError as e_keytrace:
            logging.error(f"Failed to set up key trace logging: {e_keytrace}", exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(
            f"File logging to '{log_filename}' at level: {logging.getLevelName(file_handler.level)}."
        )
