"""
Logging System for the Symbolic Calculus Engine

Centralized logging with verbosity levels. The core only emits debug traces;
the command line front end decides how much of it reaches the terminal.
"""

import logging
import sys
from typing import Optional
from enum import Enum
from datetime import datetime


class LogLevel(Enum):
    """Enumeration of logging levels"""
    SILENT = 0      # No output except critical errors
    MINIMAL = 1     # Warnings and final results
    MODERATE = 2    # Key steps of an operation
    DETAILED = 3    # Individual rewrite steps
    VERBOSE = 4     # All information including debug details


class CalculusLogger:
    """
    Centralized logger with level-aware helpers
    """

    def __init__(self, log_level: LogLevel = LogLevel.MINIMAL,
                 log_to_file: bool = False, log_file_path: Optional[str] = None):
        self.log_level = log_level
        self.log_to_file = log_to_file

        self.logger = logging.getLogger('symbolic_calculus')
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()
        self.logger.propagate = False

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        # Results go to stdout, so diagnostics use stderr
        if self.log_level != LogLevel.SILENT:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if log_to_file:
            if log_file_path is None:
                log_file_path = f"symbolic_calculus_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _should_log(self, required_level: LogLevel) -> bool:
        """Check if message should be logged based on current log level"""
        return self.log_level.value >= required_level.value

    def critical(self, message: str, *args):
        """Always logged - critical errors and failures"""
        if self.log_level != LogLevel.SILENT:
            self.logger.error("CRITICAL: " + message, *args)

    def info(self, message: str, *args, required_level: LogLevel = LogLevel.MODERATE):
        """General information with configurable level"""
        if self._should_log(required_level):
            self.logger.info(message, *args)

    def step(self, message: str, *args):
        """Individual rewrite steps"""
        if self._should_log(LogLevel.DETAILED):
            self.logger.info("STEP: " + message, *args)

    def warning(self, message: str, *args):
        """Warnings - shown from minimal level onwards"""
        if self._should_log(LogLevel.MINIMAL):
            self.logger.warning(message, *args)

    def debug(self, message: str, *args):
        """Debug information - only in verbose mode"""
        if self._should_log(LogLevel.VERBOSE):
            self.logger.debug("DEBUG: " + message, *args)


# Global logger instance
_global_logger: Optional[CalculusLogger] = None


def get_logger() -> CalculusLogger:
    """Get or create the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = CalculusLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global logging level"""
    global _global_logger
    if _global_logger is None:
        _global_logger = CalculusLogger(log_level=level)
    else:
        _global_logger.log_level = level


def configure_logging(log_level: LogLevel = LogLevel.MINIMAL,
                      log_to_file: bool = False,
                      log_file_path: Optional[str] = None) -> CalculusLogger:
    """Configure the global logging system"""
    global _global_logger
    _global_logger = CalculusLogger(
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path
    )
    return _global_logger


def log_info(message: str, *args, level: LogLevel = LogLevel.MODERATE):
    """Log info message at specified level, %-style arguments formatted only when shown"""
    get_logger().info(message, *args, required_level=level)


def log_step(message: str, *args):
    """Log a rewrite step"""
    get_logger().step(message, *args)


def log_warning(message: str, *args):
    """Log warning message"""
    get_logger().warning(message, *args)


def log_debug(message: str, *args):
    """Log debug message"""
    get_logger().debug(message, *args)
