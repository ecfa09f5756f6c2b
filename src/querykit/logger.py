"""Logging for querykit.

Every querykit logger lives under the ``querykit`` namespace, so an
application can tune the whole library with one
``logging.getLogger("querykit")`` call. Statement text is logged at DEBUG;
bind values never are.
"""

import logging
from typing import Optional

from querykit.settings import settings as api_settings

ROOT_LOGGER = "querykit"

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def resolve_level(level: Optional[str]) -> int:
    """Map a level name to its numeric value; unknown or empty names mean INFO."""
    return _LEVELS.get((level or "").upper(), logging.INFO)


def qualify(name: Optional[str]) -> str:
    """Place ``name`` under the ``querykit`` namespace.

    ``"SQLiteConnection"`` becomes ``"querykit.SQLiteConnection"``; names
    already inside the namespace (module ``__name__`` values) are kept.
    """
    if not name or name == ROOT_LOGGER:
        return ROOT_LOGGER
    if name.startswith(ROOT_LOGGER + "."):
        return name
    return f"{ROOT_LOGGER}.{name}"


def setup_global_logging(level: str = "INFO") -> None:
    """Install the querykit log format on first use.

    Called with ``LOG_LEVEL`` when the first ``Logger`` is created. Later calls
    do nothing, and neither does a process that configured logging itself
    beforehand (``basicConfig`` leaves existing handlers alone).
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(level=resolve_level(level), format=_FORMAT)
    _configured = True


def get_logger(name: Optional[str] = None) -> "Logger":
    """Logger for a querykit component; no name gives the package logger."""
    return Logger(name)


class Logger:
    """Wrapper over a stdlib logger in the ``querykit`` namespace.

    ``message`` is the channel for routine progress lines (connection opened,
    query dispatched): it logs at DEBUG when ``LOG_LEVEL`` is DEBUG and at
    INFO otherwise.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        if not _configured:
            setup_global_logging(api_settings.LOG_LEVEL)
        self._logger = logging.getLogger(qualify(name))

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._logger.warning(msg, *args, **kwargs)

    def message(self, msg: str, *args, **kwargs) -> None:
        if resolve_level(api_settings.LOG_LEVEL) == logging.DEBUG:
            self.debug(msg, *args, **kwargs)
        else:
            self.info(msg, *args, **kwargs)
