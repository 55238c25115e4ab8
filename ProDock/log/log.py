"""Logging setup for ProDock.

Records go to stdout through the root logger. Qt's own diagnostics are routed
into the ``Qt`` logger so they share the same format and level. The level is
driven by the ``log_level`` setting.
"""
import logging
import sys
from typing import Union

from PySide6.QtCore import QtMsgType, qInstallMessageHandler

LOG_LEVEL = logging.DEBUG
LOG_FORMAT = '[%(asctime)s] <%(module)s> %(levelname)s:  %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def resolve_level(level: Union[int, str]) -> int:
    """Return the numeric level for a level name or number.

    Raises:
        ValueError: If the level is not one of the standard levels.
    """
    if isinstance(level, str):
        if level.upper() not in LEVELS:
            raise ValueError(f'Unknown logging level "{level}", must be one of {list(LEVELS)}.')
        return LEVELS[level.upper()]
    if isinstance(level, bool) or not isinstance(level, int) or level not in LEVELS.values():
        raise ValueError(f'Invalid logging level {level!r}. Use one of the standard logging levels.')
    return level


def set_logging_level(level: Union[int, str]) -> None:
    """Set the level of the root logger and of every handler installed on it.

    Args:
        level: A standard level, as a number (``logging.INFO``) or a name (``'INFO'``).
    """
    level = resolve_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def qt_message_handler(mode, context, message):
    """Forward a Qt diagnostic to the ``Qt`` logger. Fatal messages exit."""
    level = QT_LEVELS.get(mode, logging.WARNING)
    logging.getLogger('Qt').log(level, message.strip())
    if mode == QtMsgType.QtFatalMsg:
        sys.exit(1)


def setup_logging(enable_stream_handler=True, enable_qt_handler=True, log_level=LOG_LEVEL):
    """Replace the root logger's handlers with ProDock's.

    Args:
        enable_stream_handler (bool): Write records to stdout.
        enable_qt_handler (bool): Route Qt's own messages through Python logging.
        log_level (int | str): Initial level. The ``log_level`` setting replaces it once settings load.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    if enable_stream_handler:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))
        root_logger.addHandler(stream_handler)

    set_logging_level(log_level)

    if enable_qt_handler:
        qInstallMessageHandler(qt_message_handler)
