# utils/logger.py
import logging
import os
import sys
from config.paths import LOG_PATH

# Package loggers that share the run log; module loggers propagate into these.
LOGGER_NAMES = ("scheduler", "core", "api", "utils")
LOG_LEVEL = os.getenv("SCHEDULER_LOG_LEVEL", "INFO").upper()


def _build_handlers() -> list[logging.Handler]:
    """File handler for the run log plus a stdout handler (-> docker logs)."""
    LOG_PATH.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    return [file_handler, stream_handler]


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Attach the shared handlers to every package logger exactly once."""
    handlers = None
    for name in LOGGER_NAMES:
        pkg_logger = logging.getLogger(name)
        pkg_logger.setLevel(level)
        # Prevent duplicate handlers if imported multiple times
        if pkg_logger.handlers:
            continue
        if handlers is None:
            handlers = _build_handlers()
        for handler in handlers:
            pkg_logger.addHandler(handler)


configure_logging()
