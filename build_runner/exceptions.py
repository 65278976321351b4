"""Holds exceptions used by the build runner"""

from typing import Optional


class BuildRunnerError(Exception):
    """Base class for every error the command line reports"""


class CommandFailedError(BuildRunnerError):
    """Raised when an external command exits non-zero or cannot be started"""
    def __init__(self, command: str, returncode: Optional[int] = None):
        self.command = command
        self.returncode = returncode
        super().__init__(f"{command}: failed")


class ConfigurationError(BuildRunnerError):
    """Raised when project settings cannot be loaded"""
