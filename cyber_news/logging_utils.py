from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from rich.logging import RichHandler


def setup_logging(
    level: str = "INFO",
    *,
    console: bool = True,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Attach handlers to the `cyber_news` logger. The library never calls this itself;
    applications (the Discord bot, scripts) do.
    """
    logger = logging.getLogger("cyber_news")
    logger.setLevel(_level_from_string(level))
    logger.handlers = []
    logger.propagate = False

    if console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=True, show_level=True)
        console_handler.setLevel(_level_from_string(level))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(_level_from_string(level))
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(file_handler)

    return logger


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
