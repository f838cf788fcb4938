from __future__ import annotations

import logging
import sys

"""Console logging for the importer.

Every line is ``<LABEL> <message>`` with LABEL one of
DEBUG|INFO|WARN|ERROR|SUMMARY. Library modules log through
``logging.getLogger(__name__)``; as children of ``contract_tracker`` they
reach the single stdout handler installed by ``setup_logging``.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_debug",
    "setup_logging",
]

LOGGER_NAME = "contract_tracker"

# INFO(20) と WARNING(30) の間
SUMMARY_LEVEL = 25

LEVEL_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
    SUMMARY_LEVEL: "SUMMARY",
}

_configured: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return f"{LEVEL_LABELS.get(record.levelno, record.levelname)} {record.getMessage()}"


def _stdout_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(LabeledFormatter())
    return handler


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Install the labeled stdout handler on ``contract_tracker`` once.

    Later calls return the same logger until ``reset_logging`` is called.
    """
    global _configured
    if _configured is not None:
        return _configured

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # 再初期化時に古いハンドラ (閉じた stdout を掴んでいる可能性あり) を外す
    logger.handlers.clear()
    logger.addHandler(_stdout_handler(level))
    logger.propagate = False

    _configured = logger
    return logger


def set_debug(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)


def get_logger() -> logging.Logger:
    return _configured if _configured is not None else setup_logging()


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next ``setup_logging`` rebinds stdout (tests)."""
    global _configured
    _configured = None
