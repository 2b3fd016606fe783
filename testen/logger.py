from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

ROOT_LOGGER = "testen"


def build_logger(log_path: Path | None, debug: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    The terminal belongs to the live table, so records only go to ``log_path``.
    Without a path the logger stays silent.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Close handlers from a previous run
    for h in list(logger.handlers):
        h.close()
    logger.handlers.clear()

    logger.propagate = False

    if log_path is None:
        logger.addHandler(logging.NullHandler())
        return logger

    log_path.parent.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(str(log_path), encoding="utf-8")
    fh.setLevel(logging.DEBUG if debug else logging.INFO)
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(fh)

    return logger


def log_event(logger: logging.Logger, event: Dict) -> None:
    logger.info(json.dumps(event, ensure_ascii=False, sort_keys=True))
