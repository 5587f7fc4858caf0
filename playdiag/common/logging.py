# playdiag/common/logging.py
from __future__ import annotations

import logging
from typing import Optional, Union

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        from playdiag.common.settings import get_settings
        level = get_settings().log_level
    if isinstance(level, str):
        return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    return level


def get_logger(name: str = "playdiag", level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Return a logger for the diagnostics engine at `level` (defaults to the
    LOG_LEVEL setting). Under uvicorn the root logger already has handlers;
    otherwise (CLI, tests) we add a basicConfig once.
    """
    lvl = _resolve_level(level)
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=lvl, format=_FORMAT)
    logger.setLevel(lvl)
    return logger
