"""Levelled log messages handed to a user-supplied receiver."""

import inspect
import threading
from enum import IntEnum

MODULE_NAME = "SimpleDBus"


class LogLevel(IntEnum):
    """Severity of a log message; higher values are more verbose."""

    NONE = 0
    FATAL = 1
    ERROR = 2
    WARN = 3
    INFO = 4
    DEBUG = 5
    VERBOSE = 6


_lock = threading.Lock()
_level = LogLevel.ERROR
_receiver = None


def set_log_level(level):
    """Set the most verbose level that is still delivered."""
    global _level
    with _lock:
        _level = LogLevel(level)


def set_receiver(receiver):
    """Install the callable that receives log records, or None to drop them.

    The receiver is called as ``receiver(level, module, file, line, function, message)``.
    """
    global _receiver
    with _lock:
        _receiver = receiver


def _emit(level, message, args):
    with _lock:
        threshold = _level
        receiver = _receiver
    if threshold < level or receiver is None:
        return
    text = message.format(*args) if args else message

    frame = inspect.currentframe()
    caller = frame.f_back.f_back if frame is not None and frame.f_back is not None else None
    try:
        if caller is None:
            file, line, function = "", 0, ""
        else:
            file = caller.f_code.co_filename
            line = caller.f_lineno
            function = caller.f_code.co_name
    finally:
        del frame, caller
    receiver(level, MODULE_NAME, file, line, function, text)


def log_fatal(message, *args):
    _emit(LogLevel.FATAL, message, args)


def log_error(message, *args):
    _emit(LogLevel.ERROR, message, args)


def log_warn(message, *args):
    _emit(LogLevel.WARN, message, args)


def log_info(message, *args):
    _emit(LogLevel.INFO, message, args)


def log_debug(message, *args):
    _emit(LogLevel.DEBUG, message, args)


def log_verbose(message, *args):
    _emit(LogLevel.VERBOSE, message, args)