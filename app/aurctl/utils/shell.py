"""Shell execution utilities.

Provides safe subprocess execution with proper error handling, plus the
ToolRunner interface through which makepkg, git and pacman are driven.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a shell command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def run_interactive(
    args: list[str],
    *,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Execute a command interactively, inheriting the terminal.

    Unlike run_command(), this does NOT capture stdout/stderr, so tools
    like makepkg and sudo can prompt the user directly.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Additional environment variables (merged with current env).

    Returns:
        Exit code of the command.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    full_env = {**os.environ, **(env or {})}
    result = subprocess.run(
        args,
        check=False,
        cwd=cwd,
        env=full_env,
    )
    return result.returncode


def run_cancellable(
    args: list[str],
    *,
    cwd: str | None = None,
    kill_timeout: float = 5.0,
) -> int:
    """Execute a command interactively and stop it cleanly on Ctrl+C.

    On KeyboardInterrupt the child is terminated (and killed if it does not
    exit within ``kill_timeout``) before the interrupt is re-raised, so no
    orphaned process is left behind.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        kill_timeout: Seconds to wait after SIGTERM before sending SIGKILL.

    Returns:
        Exit code of the command.

    Raises:
        KeyboardInterrupt: If the user interrupted the command.
        FileNotFoundError: If command executable is not found.
    """
    process = subprocess.Popen(args, cwd=cwd)
    try:
        return process.wait()
    except KeyboardInterrupt:
        process.terminate()
        try:
            process.wait(timeout=kill_timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
        raise


class ToolRunner(Protocol):
    """Capability for running external tools (makepkg, git, pacman)."""

    def run(self, args: list[str], cwd: str | None = None) -> int:
        """Run a command attached to the terminal and return its exit code."""
        ...

    def capture(self, args: list[str], cwd: str | None = None) -> CommandResult:
        """Run a command with captured output."""
        ...


class ShellRunner:
    """ToolRunner backed by real subprocesses."""

    def __init__(self, timeout: float | None = 600.0) -> None:
        self._timeout = timeout

    def run(self, args: list[str], cwd: str | None = None) -> int:
        return run_interactive(args, cwd=cwd)

    def capture(self, args: list[str], cwd: str | None = None) -> CommandResult:
        return run_command(args, timeout=self._timeout, cwd=cwd)
