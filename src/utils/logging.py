from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import structlog


def setup_logging(
    *,
    level: str | None = None,
    log_file: str | None = None,
    fmt: str | None = None,
) -> None:
    """
    Logging for the countries pipeline (countries_fetch_*, refresh_*, observer_failed).

    - stderr, so scripts/fetch_countries.py keeps stdout for the country list
    - `json` renderer by default, `console` for interactive runs (LOG_FORMAT / `fmt`)
    - JSON lines file only when LOG_FILE / `log_file` is given; no default file
    """
    lvl = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    file_path = log_file or os.getenv("LOG_FILE")
    render = (fmt or os.getenv("LOG_FORMAT", "json")).lower()

    root = logging.getLogger()
    root.setLevel(lvl)
    root.handlers.clear()

    formatter = logging.Formatter("%(message)s")

    console = logging.StreamHandler()
    console.setLevel(lvl)
    console.setFormatter(formatter)
    root.addHandler(console)

    if file_path:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(file_path)
        fh.setLevel(lvl)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    # Request lines from httpx are noise next to countries_fetch_* events.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    renderer: Any = structlog.dev.ConsoleRenderer() if render == "console" else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, lvl, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(**kwargs: Any):
    return structlog.get_logger().bind(**kwargs)
