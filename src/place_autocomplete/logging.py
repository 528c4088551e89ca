from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from place_autocomplete.config.models import LoggingSettings

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Handlers installed by init_logging, so a second call replaces rather than duplicates them.
_installed_handlers: list[logging.Handler] = []


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown logging level: {level}")
    return resolved


def init_logging(settings: LoggingSettings) -> None:
    root = logging.getLogger()
    root.setLevel(_resolve_level(settings.level))

    for handler in _installed_handlers:
        root.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    formatter = logging.Formatter(_LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    _installed_handlers.append(console)

    if settings.file.path.strip():
        log_path = Path(settings.file.path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.TimedRotatingFileHandler(
            log_path,
            when="midnight",
            backupCount=settings.file.rotation.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        root.addHandler(handler)

    # aiohttp logs every connection at DEBUG; keep it quieter than our own modules.
    logging.getLogger("aiohttp").setLevel(max(root.level, logging.INFO))
