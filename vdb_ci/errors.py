"""Holds exceptions raised by the build matrix driver"""

from typing import Optional, Sequence


class DriverError(RuntimeError):
    """Base exception for driver errors"""


class InvalidVariant(DriverError, ValueError):
    """Raised when a positional build parameter is not a member of its enumeration"""


class ConfigError(DriverError):
    """Raised when configuration files are missing or inconsistent"""


class ExternalCommandFailed(DriverError):
    """Raised when an invoked process exits with a non-zero status"""

    def __init__(self,
                 command: Sequence[str],
                 returncode: int,
                 stdout: Optional[str] = None,
                 stderr: Optional[str] = None):
        self.command = [str(c) for c in command]
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command failed with exit code {returncode}: {' '.join(self.command)}")
