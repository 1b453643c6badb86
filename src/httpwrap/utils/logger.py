import logging
import os
from typing import Optional

_FMT = "[%(levelname)s] %(message)s"
_FILE_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = "httpwrap") -> logging.Logger:
    # Handlers live on the package root only (see configure_logging);
    # child loggers propagate to it.
    return logging.getLogger(name)


def configure_logging(
    *,
    logger_name: str = "httpwrap",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_path: Optional[str] = None,
) -> logging.Logger:
    """
    Process-level logging baseline (idempotent):
    - console -> stderr at console_level
    - optional file handler at file_level
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(min(console_level, file_level) if log_path else console_level)

    if not any(getattr(h, "_httpwrap_console", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setLevel(console_level)
        handler.setFormatter(logging.Formatter(_FMT))
        handler._httpwrap_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    if log_path and not any(
        isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_path) for h in logger.handlers
    ):
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FMT))
        logger.addHandler(fh)

    return logger


def resolve_level(name: str, default: int = logging.INFO) -> int:
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else default
