"""
Logging service for the counter dashboard

Everything goes through the ``interop_counter`` logger. Formatted lines are
handed to registered callbacks (the activity log) and a short backlog is kept
so callbacks attached after startup still see connection and config messages.
"""

import logging
from collections import deque
from enum import Enum
from typing import Callable, Deque, List, Tuple, Union

LOGGER_NAME = "interop_counter"
BACKLOG_SIZE = 200

LogCallback = Callable[[str, "LogLevel"], None]


class LogLevel(Enum):
    """Log levels"""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class LoggingService:
    """Centralized logging service that can be injected.

    Owns the package logger, so module loggers created with
    ``logging.getLogger(__name__)`` inside the package reach the same callbacks.
    """

    def __init__(self, level: Union[int, str] = logging.DEBUG, backlog_size: int = BACKLOG_SIZE):
        self._handlers: List[LogCallback] = []
        self._backlog: Deque[Tuple[str, LogLevel]] = deque(maxlen=backlog_size)
        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(level)
        self._logger.propagate = False

        # One callback handler per process, replacing any earlier instance
        self._logger.handlers = [
            h for h in self._logger.handlers if not isinstance(h, CallbackHandler)
        ]
        handler = CallbackHandler(self)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(filename)s:%(lineno)d - %(levelname)s - %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        self._logger.addHandler(handler)

    @property
    def level(self) -> int:
        return self._logger.level

    def set_level(self, level: Union[int, str]):
        """Change the minimum level at runtime"""
        self._logger.setLevel(level.upper() if isinstance(level, str) else level)

    def add_handler(self, handler: LogCallback, replay: bool = True):
        """Add a log handler callback, optionally replaying the backlog to it first"""
        if replay:
            for message, level in list(self._backlog):
                handler(message, level)
        self._handlers.append(handler)

    def remove_handler(self, handler: LogCallback):
        """Remove a log handler callback"""
        if handler in self._handlers:
            self._handlers.remove(handler)

    # stacklevel=2 attributes the record to whoever called debug()/info()/...
    def debug(self, message: str):
        self._logger.debug(message, stacklevel=2)

    def info(self, message: str):
        self._logger.info(message, stacklevel=2)

    def warning(self, message: str):
        self._logger.warning(message, stacklevel=2)

    def error(self, message: str, exc_info=None):
        self._logger.error(message, exc_info=exc_info, stacklevel=2)

    def critical(self, message: str):
        self._logger.critical(message, stacklevel=2)

    def _emit_to_handlers(self, message: str, level: LogLevel):
        self._backlog.append((message, level))
        for handler in list(self._handlers):
            try:
                handler(message, level)
            except Exception as e:
                # A broken callback must not break logging
                print(f"Error in log handler: {e}")


class CallbackHandler(logging.Handler):
    """Custom logging handler that routes to callbacks"""

    def __init__(self, logging_service: LoggingService):
        super().__init__(level=logging.DEBUG)
        self.logging_service = logging_service

    def emit(self, record):
        try:
            msg = self.format(record)
            self.logging_service._emit_to_handlers(msg, LogLevel(record.levelno))
        except Exception:
            self.handleError(record)
