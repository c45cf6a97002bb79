from collections.abc import Iterable
from logging import Formatter, StreamHandler, getLogger
from threading import RLock

_initialized = False
_lock = RLock()
DEFAULT_FORMATTER = Formatter(
    '%(asctime)s [%(name)s] %(levelname)s    %(message)s',
    '%Y-%m-%d %H:%M:%S',
    )
SERVER_LOGGERS = 'uvicorn', 'uvicorn.error', 'uvicorn.access'
"""
Loggers of the ASGI server which are redirected to the root logger.
"""


def init_logging(
        level: str = 'INFO',
        /,
        *,
        formatter: Formatter = DEFAULT_FORMATTER,
        redirect: Iterable[str] = SERVER_LOGGERS,
        ) -> None:
    """
    Installs a single stream handler with the specified formatter on the root logger
    and sets the level of logging.
    If called more than once, this function is no-op.

    :param level: The level of logging, case-insensitive. Defaults to ``INFO``.
    :param formatter: The formatter for log records.
    :param redirect: Names of loggers whose own handlers are removed,
      so their records are formatted by the root handler.
    """
    with _lock:
        global _initialized
        if _initialized: return

        root = getLogger()
        root.setLevel(level.upper())
        handler = StreamHandler()
        handler.setFormatter(formatter)
        root.addHandler(handler)

        for name in redirect:
            logger = getLogger(name)
            logger.handlers.clear()
            logger.propagate = True

        _initialized = True


__all__ = 'DEFAULT_FORMATTER', 'SERVER_LOGGERS', 'init_logging'
