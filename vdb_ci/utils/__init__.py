"""
Utility modules for the build matrix driver
"""

import sys
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .files import FileOperations
from .runner import CommandRunner, Invocation, RecordingRunner

NO_STEP = "vdb-ci"


class StepFilter(logging.Filter):
    """Stamps each record with the step that is currently running"""

    def __init__(self):
        super().__init__()
        self.current = NO_STEP

    def filter(self, record):
        record.step = self.current
        return True


class ColoredFormatter(logging.Formatter):
    """Colours the level name when writing to a terminal"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'SUCCESS': '\033[92m',
    }
    RESET = '\033[0m'

    def format(self, record):
        if getattr(record, 'raw', False):
            return record.getMessage()

        color = self.COLORS.get(record.levelname)
        if color and sys.stdout.isatty():
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class Logger:
    """Driver logger, prefixing records with the active step"""

    SUCCESS = 25  # Between INFO and WARNING

    CONSOLE_FORMAT = "[%(levelname)s] %(step)s: %(message)s"
    VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(step)s: %(message)s"

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None, name: str = "vdb_ci"):
        """
        Initialize logger

        Args:
            verbose: Show commands and timestamps on the console
            log_file: Optional log file, always written at DEBUG
            name: Name of the underlying logging.Logger
        """
        self.verbose = verbose
        self.steps = StepFilter()

        logging.addLevelName(self.SUCCESS, "SUCCESS")

        self.logger = logging.getLogger(name)
        self.logger.propagate = False
        self.logger.handlers.clear()
        self.logger.filters.clear()
        self.logger.addFilter(self.steps)

        console_level = logging.DEBUG if verbose else logging.INFO
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(ColoredFormatter(
            self.VERBOSE_FORMAT if verbose else self.CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        self.logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(self.VERBOSE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            self.logger.addHandler(file_handler)

        self.logger.setLevel(logging.DEBUG if log_file else console_level)

    @contextmanager
    def step(self, label: str) -> Iterator[None]:
        """Attribute every record logged inside the block to ``label``"""
        previous = self.steps.current
        self.steps.current = label
        try:
            yield
        finally:
            self.steps.current = previous

    def debug(self, msg: str):
        self.logger.debug(msg)

    def info(self, msg: str):
        self.logger.info(msg)

    def warning(self, msg: str):
        self.logger.warning(msg)

    def error(self, msg: str):
        self.logger.error(msg)

    def success(self, msg: str):
        self.logger.log(self.SUCCESS, msg)

    def raw(self, msg: str):
        """Log a message without level or step decoration"""
        record = self.logger.makeRecord(
            self.logger.name, logging.INFO, "", 0, msg, (), None
        )
        record.raw = True
        self.logger.handle(record)


__all__ = ["Logger", "StepFilter", "CommandRunner", "RecordingRunner", "Invocation", "FileOperations"]
