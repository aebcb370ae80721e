"""CLI logging setup: level-prefixed console output plus optional log file."""

import logging
import os
import sys

from unideploy.redact import SecretRedactingFilter

_COLORS = {
    logging.DEBUG: "\033[0;36m",
    logging.INFO: "\033[0;32m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[0;31m",
    logging.CRITICAL: "\033[0;31m",
}
_RESET = "\033[0m"


class _LevelPrefixFormatter(logging.Formatter):
    """Console formatter rendering ``[INFO] message``.

    The level tag is colored when ``color`` is set. Records logged with
    ``extra={"plain": True}`` are emitted without a prefix (summary lines,
    streamed command output).
    """

    def __init__(self, color=False):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record):
        message = super().format(record)
        if getattr(record, "plain", False):
            return message
        tag = f"[{record.levelname}]"
        if self.color:
            tag = f"{_COLORS.get(record.levelno, '')}{tag}{_RESET}"
        return f"{tag} {message}"


def _use_color(stream) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def setup_cli_logging(level=logging.INFO):
    """Configure root logger with a level-prefixed console handler on stdout."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_LevelPrefixFormatter(color=_use_color(sys.stdout)))
    # Logger filters do not see records propagated from child loggers
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)


def add_file_handler(log_file) -> str:
    """Add a file handler that writes a timestamped copy of all output.

    Returns:
        Path to the log file.
    """
    log_file = os.path.abspath(log_file)
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)
    file_handler.addFilter(SecretRedactingFilter())
    logging.getLogger().addHandler(file_handler)

    return log_file
