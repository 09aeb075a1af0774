from __future__ import annotations

import logging
from typing import Any

ROOT_LOGGER = "swipe"


def get_logger(name: str) -> logging.Logger:
    """Child of the package root so one level setting covers every scorer."""
    if name.startswith(ROOT_LOGGER):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(level: str | int = "WARNING") -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
        root.addHandler(handler)
    return root


# ---------- Best-effort diagnostics ----------
# Scoring must finish even when an injected logger is broken, so failures
# inside the logger are dropped here and nowhere else.
def _emit(logger: Any, level: int, msg: str, *args: Any) -> None:
    if logger is None:
        return
    try:
        logger.log(level, msg, *args)
    except Exception:
        pass


def safe_warning(logger: Any, msg: str, *args: Any) -> None:
    _emit(logger, logging.WARNING, msg, *args)


def safe_debug(logger: Any, msg: str, *args: Any) -> None:
    _emit(logger, logging.DEBUG, msg, *args)
