"""
Utility modules for the build runner
"""

import os
import sys
import logging
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

from ..exceptions import BuildRunnerError, CommandFailedError


class ColoredFormatter(logging.Formatter):
    """Colored log formatter for terminal output"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'SUCCESS': '\033[92m',  # Bright Green
        'RESET': '\033[0m'
    }

    def format(self, record):
        if sys.stdout.isatty():
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']

            # Other handlers must see the uncolored record
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{reset}"
            record.msg = f"{color}{record.msg}{reset}"

        return super().format(record)


class Logger:
    """Build runner logger"""

    SUCCESS = 25  # Between INFO and WARNING
    NAME = "build_runner"

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None):
        """
        Initialize logger

        Args:
            verbose: Enable verbose output
            log_file: Optional log file path
        """
        logging.addLevelName(self.SUCCESS, "SUCCESS")

        self.logger = logging.getLogger(self.NAME)
        # Debug records must reach the file handler
        self.logger.setLevel(logging.DEBUG if verbose or log_file else logging.INFO)

        # Remove handlers left behind by a previous instance
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

        if verbose:
            fmt = "%(asctime)s [%(levelname)s] %(message)s"
        else:
            fmt = "[%(levelname)s] %(message)s"

        console_handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S"))
        self.logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            self.logger.addHandler(file_handler)

    def debug(self, msg: str):
        """Log debug message"""
        self.logger.debug(msg)

    def info(self, msg: str):
        """Log info message"""
        self.logger.info(msg)

    def warning(self, msg: str):
        """Log warning message"""
        self.logger.warning(msg)

    def error(self, msg: str):
        """Log error message"""
        self.logger.error(msg)

    def success(self, msg: str):
        """Log success message"""
        self.logger.log(self.SUCCESS, msg)


@contextmanager
def working_directory(path: Union[str, Path]) -> Iterator[Path]:
    """
    Change into path for the duration of the block

    The previous working directory is restored on exit, including when
    the block raises.
    """
    previous = os.getcwd()
    try:
        os.chdir(path)
    except OSError as e:
        raise BuildRunnerError(f"Cannot change into {path}: {e.strerror}") from e
    try:
        yield Path(path)
    finally:
        os.chdir(previous)


def format_command(cmd: List[str]) -> str:
    """Join a command into the form used in log messages"""
    return " ".join(str(c) for c in cmd)


class CommandRunner:
    """Runs external commands in the current working directory"""

    def __init__(self, logger: Logger, dry_run: bool = False):
        """
        Initialize command runner

        Args:
            logger: Logger instance
            dry_run: If True, log commands instead of running them
        """
        self.logger = logger
        self.dry_run = dry_run

    def run(self, cmd: List[str]) -> subprocess.CompletedProcess:
        """
        Run a command and wait for it to finish

        Output is not captured; the command shares this process's
        terminal.

        Args:
            cmd: Command and arguments

        Returns:
            CompletedProcess instance

        Raises:
            CommandFailedError: The command exited non-zero or could not
                be started
        """
        cmd_str = format_command(cmd)
        self.logger.debug(f"Running: {cmd_str}")
        self.logger.debug(f"  in: {os.getcwd()}")

        if self.dry_run:
            self.logger.info(f"[DRY RUN] Would run: {cmd_str}")
            return subprocess.CompletedProcess(cmd, 0)

        try:
            result = subprocess.run([str(c) for c in cmd], check=False)
        except OSError as e:
            self.logger.debug(f"Could not start {cmd_str}: {e}")
            raise CommandFailedError(cmd_str) from e

        if result.returncode != 0:
            self.logger.debug(f"{cmd_str} exited with status {result.returncode}")
            raise CommandFailedError(cmd_str, result.returncode)

        return result


__all__ = [
    "ColoredFormatter",
    "Logger",
    "CommandRunner",
    "format_command",
    "working_directory",
]
