"""Process invocation for the build matrix driver.

Every external program (package manager, downloader, archiver, cmake, make,
ccache) goes through a runner. :class:`CommandRunner` executes for real and
turns a non-zero exit into :class:`~vdb_ci.errors.ExternalCommandFailed`,
which aborts the whole run. :class:`RecordingRunner` records invocations
without executing them; it backs ``--dry-run`` and the test-suite.
"""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from vdb_ci.errors import ExternalCommandFailed

Matcher = Union[str, Callable[[Sequence[str]], bool]]


def format_command(cmd: Sequence[Any]) -> str:
    return shlex.join(str(c) for c in cmd)


@dataclass(frozen=True)
class Invocation:
    """A process call as seen by a runner"""

    command: tuple
    cwd: Optional[Path] = None
    env: Optional[Mapping[str, str]] = field(default=None, compare=False)

    @property
    def text(self) -> str:
        return format_command(self.command)


class CommandRunner:
    """Runs external commands with logging and fail-fast error handling"""

    def __init__(self, logger: Any):
        """
        Initialize runner

        Args:
            logger: Logger instance
        """
        self.logger = logger

    def run(self,
            cmd: Sequence[Any],
            cwd: Optional[Path] = None,
            env: Optional[Dict[str, str]] = None,
            capture_output: bool = False) -> subprocess.CompletedProcess:
        """
        Run a command with logging

        Args:
            cmd: Command and arguments
            cwd: Working directory
            env: Complete environment for the child, None to inherit
            capture_output: Capture stdout/stderr instead of streaming them

        Returns:
            CompletedProcess instance

        Raises:
            ExternalCommandFailed: the command exited with a non-zero status
                or could not be started
        """
        args = [str(c) for c in cmd]
        self.logger.debug(f"Running: {format_command(args)}")
        if cwd is not None:
            self.logger.debug(f"  in: {cwd}")

        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                env=env,
                check=False,
                capture_output=capture_output,
                text=True,
            )
        except FileNotFoundError as exc:
            self.logger.error(f"Command not found: {args[0]}")
            raise ExternalCommandFailed(args, 127, stderr=str(exc)) from exc

        if capture_output and result.stdout:
            self.logger.debug(f"Output: {result.stdout}")

        if result.returncode != 0:
            self.logger.error(f"Command failed: {format_command(args)}")
            if result.stdout:
                self.logger.error(f"stdout: {result.stdout}")
            if result.stderr:
                self.logger.error(f"stderr: {result.stderr}")
            raise ExternalCommandFailed(args, result.returncode, result.stdout, result.stderr)

        return result


class RecordingRunner(CommandRunner):
    """Records invocations instead of executing them.

    Canned output and failures are registered against a matcher, either a
    substring of the shell-quoted command or a predicate over the argv.
    """

    def __init__(self, logger: Any):
        super().__init__(logger)
        self.calls: List[Invocation] = []
        self._responses: List[tuple] = []
        self._failures: List[tuple] = []

    def respond(self, matcher: Matcher, stdout: str = "", stderr: str = "") -> None:
        """Return the given output from commands matching ``matcher``"""
        self._responses.append((matcher, stdout, stderr))

    def fail_on(self, matcher: Matcher, returncode: int = 1, stderr: str = "") -> None:
        """Make commands matching ``matcher`` exit with ``returncode``"""
        self._failures.append((matcher, returncode, stderr))

    @staticmethod
    def _matches(matcher: Matcher, args: Sequence[str]) -> bool:
        if callable(matcher):
            return bool(matcher(args))
        return matcher in format_command(args)

    def run(self,
            cmd: Sequence[Any],
            cwd: Optional[Path] = None,
            env: Optional[Dict[str, str]] = None,
            capture_output: bool = False) -> subprocess.CompletedProcess:
        args = [str(c) for c in cmd]
        self.calls.append(Invocation(tuple(args), cwd, env))
        self.logger.info(f"[DRY RUN] Would run: {format_command(args)}")

        for matcher, returncode, stderr in self._failures:
            if self._matches(matcher, args):
                raise ExternalCommandFailed(args, returncode, "", stderr)

        for matcher, stdout, stderr in self._responses:
            if self._matches(matcher, args):
                return subprocess.CompletedProcess(args, 0, stdout, stderr)

        return subprocess.CompletedProcess(args, 0, "", "")

    @property
    def commands(self) -> List[str]:
        """Shell-quoted form of every recorded command"""
        return [call.text for call in self.calls]

    def find(self, matcher: Matcher) -> List[Invocation]:
        return [call for call in self.calls if self._matches(matcher, call.command)]


__all__ = ["CommandRunner", "RecordingRunner", "Invocation", "format_command"]
