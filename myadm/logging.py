from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from .settings import Settings


def _resolve_log_dir(settings: Settings) -> Path:
    # Relative directories hang off the working directory.
    raw = settings.MYADM_LOG_DIR
    p = raw if isinstance(raw, Path) else Path(str(raw))
    if p.is_absolute():
        return p
    return Path.cwd() / p


def setup_logging(settings: Settings) -> Path:
    """Send all logging to MYADM_LOG_DIR/myadm.log, rotated at midnight.

    The terminal belongs to the UI, so nothing is logged to the console.
    Calling it again replaces the previous handlers.
    """
    log_dir = _resolve_log_dir(settings)
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "myadm.log"

    level_name = str(settings.MYADM_LOG_LEVEL or "INFO").upper().strip()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    file_handler = TimedRotatingFileHandler(
        filename=str(log_file),
        when="midnight",
        interval=1,
        backupCount=max(0, int(settings.MYADM_LOG_BACKUP_COUNT or 0)),
        encoding="utf-8",
        utc=False,
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(fmt))

    # Only one myadm handler on the root logger.
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(level)
    root.addHandler(file_handler)

    # PyMySQL is chatty at DEBUG; keep it at WARNING unless asked otherwise.
    logging.getLogger("pymysql").setLevel(max(level, logging.WARNING))

    logging.getLogger("myadm").info(
        "myadm logging enabled (file=%s, level=%s)",
        os.fspath(log_file),
        level_name,
    )

    return log_file
