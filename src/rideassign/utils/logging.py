"""Console logging for rideassign.

A thin layer over :mod:`logging` with four verbosity levels, coloured single-line
output and a ``tqdm`` progress tracker for the CLI.
"""

import logging
import os
import sys
from enum import Enum

from tqdm import tqdm


class LogLevel(Enum):
    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


class Colors:
    GRAY = "\033[90m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class Symbols:
    CHECK = "✓"
    CROSS = "✗"
    ROCKET = "🚀"
    GEAR = "⚙"
    WARNING = "⚠"
    INFO = "ℹ"


_LEVEL_TO_LOGGING = {
    LogLevel.QUIET: logging.ERROR,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}

_LEVEL_COLORS = {
    logging.DEBUG: Colors.GRAY,
    logging.INFO: Colors.CYAN,
    logging.WARNING: Colors.YELLOW,
    logging.ERROR: Colors.RED,
    logging.CRITICAL: Colors.RED,
}


class SimpleFormatter(logging.Formatter):
    """Colour the message according to its level; no timestamps or names."""

    def format(self, record: logging.LogRecord) -> str:
        color = _LEVEL_COLORS.get(record.levelno, Colors.RESET)
        return f"{color}{record.getMessage()}{Colors.RESET}"


class RideassignLogger:
    """Process-wide registry of configured loggers."""

    _current_level: LogLevel = LogLevel.NORMAL
    _loggers: dict[str, logging.Logger] = {}

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        cls._current_level = level
        for logger in cls._loggers.values():
            logger.setLevel(_LEVEL_TO_LOGGING[level])

    @classmethod
    def get_level(cls) -> LogLevel:
        return cls._current_level

    @classmethod
    def _effective_level(cls) -> LogLevel:
        # Worker threads and subprocesses inherit the level through the environment
        env_level = os.environ.get("RIDEASSIGN_EFFECTIVE_LOG_LEVEL")
        if env_level and env_level.upper() in LogLevel.__members__:
            return LogLevel[env_level.upper()]
        return cls._current_level

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if name in cls._loggers:
            return cls._loggers[name]

        logger = logging.getLogger(name)
        logger.setLevel(_LEVEL_TO_LOGGING[cls._effective_level()])
        if not logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(SimpleFormatter())
            logger.addHandler(handler)
        logger.propagate = False
        cls._loggers[name] = logger
        return logger

    @classmethod
    def progress(cls, message: str, symbol: str = Symbols.GEAR) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("rideassign").info(f"{symbol} {message}")

    @classmethod
    def success(cls, message: str, symbol: str = Symbols.CHECK) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("rideassign").info(
                f"{Colors.GREEN}{symbol} {message}{Colors.RESET}"
            )

    @classmethod
    def info(cls, message: str, symbol: str = Symbols.INFO) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("rideassign").info(f"{symbol} {message}")

    @classmethod
    def detail(cls, message: str, prefix: str = "  ") -> None:
        if cls._current_level.value >= LogLevel.VERBOSE.value:
            cls.get_logger("rideassign").info(f"{prefix}{message}")

    @classmethod
    def debug(cls, message: str, logger_name: str = "rideassign") -> None:
        if cls._current_level.value >= LogLevel.DEBUG.value:
            cls.get_logger(logger_name).debug(message)

    @classmethod
    def warning(cls, message: str, symbol: str = Symbols.WARNING) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("rideassign").warning(f"{symbol} {message}")

    @classmethod
    def error(cls, message: str, symbol: str = Symbols.CROSS) -> None:
        cls.get_logger("rideassign").error(f"{symbol} {message}")


def suppress_third_party_logs() -> None:
    for name in ("urllib3", "requests", "joblib", "matplotlib", "numba"):
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure the global level; falls back to ``RIDEASSIGN_LOG_LEVEL`` then NORMAL."""
    if level is None:
        env_level = os.environ.get("RIDEASSIGN_LOG_LEVEL", "").upper()
        level = LogLevel[env_level] if env_level in LogLevel.__members__ else LogLevel.NORMAL

    RideassignLogger.set_level(level)
    os.environ["RIDEASSIGN_EFFECTIVE_LOG_LEVEL"] = level.name
    suppress_third_party_logs()


class ProgressTracker:
    """Step-wise progress bar; silent in QUIET mode."""

    def __init__(self, steps: list[str]):
        self.steps = steps
        self.current = 0
        self.pbar = None
        if RideassignLogger.get_level() != LogLevel.QUIET:
            self.pbar = tqdm(
                total=len(steps),
                desc=f"{Colors.BLUE}{Symbols.ROCKET} Assignment progress{Colors.RESET}",
                bar_format="{desc}: {percentage:3.0f}%|{bar:30}| {n_fmt}/{total_fmt} [{elapsed}]",
            )

    def advance(self, message: str | None = None, status: str = "success") -> None:
        if self.pbar is None:
            return
        if message:
            color = Colors.GREEN if status == "success" else Colors.YELLOW
            self.pbar.write(f"{color}{Symbols.CHECK} {message}{Colors.RESET}")
        self.pbar.update(1)
        self.current += 1

    def close(self) -> None:
        if self.pbar is None:
            return
        self.pbar.write(f"\n{Colors.GREEN}{Symbols.CHECK} Done{Colors.RESET}")
        self.pbar.close()


def log_progress(message: str) -> None:
    RideassignLogger.progress(message, Symbols.GEAR)


def log_success(message: str) -> None:
    RideassignLogger.success(message, Symbols.CHECK)


def log_info(message: str) -> None:
    RideassignLogger.info(message, Symbols.INFO)


def log_detail(message: str) -> None:
    RideassignLogger.detail(message, "  ")


def log_warning(message: str) -> None:
    RideassignLogger.warning(message, Symbols.WARNING)


def log_error(message: str) -> None:
    RideassignLogger.error(message, Symbols.CROSS)


def log_debug(message: str, logger_name: str = "rideassign") -> None:
    RideassignLogger.debug(message, logger_name)
