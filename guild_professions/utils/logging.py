"""
Logging setup for guild-professions.

Call ``configure_logging(config)`` once at CLI entry, before the catalog or
roster is loaded.  Library modules only ever do
``logging.getLogger(__name__)``, so all engine output lives under the
``guild_professions`` logger hierarchy.

Levels
------
The root logger takes ``[logging] level``.  With ``debug = true`` (or
``GUILD_PROFESSIONS_DEBUG=1``) the ``guild_professions`` hierarchy is opened
to DEBUG while third-party loggers stay at the configured level, so the
per-computation summaries (``Coverage computed | ...``, ``Supply audit | ...``)
show up without library noise.

Output
------
Handlers write to stderr; stdout is reserved for the report or ``--json``
payload a command prints.  With ``json_format = true`` each record becomes
one JSON object::

    {"ts": "2026-02-24T15:00:00Z", "level": "INFO",
     "logger": "guild_professions.analytics.health", "msg": "Guild health | ..."}
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from guild_professions.config import LoggingConfig

PACKAGE_LOGGER = "guild_professions"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Attributes every LogRecord carries; anything else came from ``extra=``.
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """One JSON object per record: ``ts``, ``level``, ``logger``, ``msg``,
    ``exc`` when an exception is attached, plus any ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                LOG_DATE_FORMAT
            ),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        payload.update(
            (key, val)
            for key, val in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, default=str)


def _build_handlers(config: "LoggingConfig", formatter: logging.Formatter) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config: "LoggingConfig", debug: bool = False) -> None:
    """Configure the root and ``guild_professions`` loggers.

    Args:
        config: ``[logging]`` section of ``AppConfig``.
        debug:  Open the ``guild_professions`` hierarchy to DEBUG regardless
                of ``config.level``.
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    formatter: logging.Formatter = (
        _JsonFormatter() if config.json_format
        else logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    )

    # Handlers pass everything; the loggers decide what gets through.
    logging.basicConfig(level=level, handlers=_build_handlers(config, formatter), force=True)
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if debug else logging.NOTSET)
