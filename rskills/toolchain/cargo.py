"""Cargo wrappers: check, test, clippy, fmt.

Each wrapper prints a start banner, runs cargo with the caller's extra
arguments appended and prints a success banner when cargo exits 0. Output
is streamed straight to the terminal. A non-zero exit raises
CommandFailedError carrying cargo's exit code.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from rskills.core.detection import detect_test_threads
from rskills.core.errors import CommandFailedError, CommandTimeoutError, ToolchainNotFoundError
from rskills.core.logging import log_command
from rskills.ui import info, success, warn

logger = logging.getLogger(__name__)


@dataclass
class CargoResult:
    """Outcome of one cargo invocation."""
    command: list[str]
    returncode: int
    duration: float

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CargoRunner:
    """Runs cargo subcommands in a working directory."""

    def __init__(
        self,
        cargo: str = "cargo",
        cwd: Optional[Path] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.cargo = cargo
        self.cwd = cwd
        self.timeout = timeout

    def resolve(self) -> str:
        """Locate the cargo executable.

        Raises:
            ToolchainNotFoundError: If cargo is not on PATH
        """
        path = shutil.which(self.cargo)
        if path is None:
            raise ToolchainNotFoundError(self.cargo)
        return path

    def run(self, args: Sequence[str], check: bool = True) -> CargoResult:
        """
        Run ``cargo <args>``.

        Args:
            args: Arguments after the cargo executable
            check: Raise CommandFailedError on non-zero exit

        Returns:
            CargoResult with exit code and duration
        """
        executable = self.resolve()
        command = [self.cargo, *args]
        logger.debug("Running %s in %s", command, self.cwd or Path.cwd())

        start = time.monotonic()
        try:
            completed = subprocess.run(
                [executable, *args],
                cwd=self.cwd,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            duration = time.monotonic() - start
            log_command(command, None, duration * 1000, error="timeout")
            raise CommandTimeoutError(command, self.timeout or 0)
        except FileNotFoundError:
            raise ToolchainNotFoundError(self.cargo)

        duration = time.monotonic() - start
        result = CargoResult(command=command, returncode=completed.returncode, duration=duration)
        log_command(command, result.returncode, duration * 1000)

        if check and not result.ok:
            raise CommandFailedError(command, result.returncode)
        return result


def check(runner: CargoRunner, args: Sequence[str] = ()) -> CargoResult:
    """``cargo check --all-targets --message-format=short``."""
    info("Running cargo check...")
    result = runner.run(["check", "--all-targets", "--message-format=short", *args])
    success("All checks passed!")
    return result


def test(runner: CargoRunner, args: Sequence[str] = (), threads: Optional[int] = None) -> CargoResult:
    """``cargo test --workspace --all-targets -- --test-threads=N``.

    ``args`` land after the test-harness separator and reach the test binary.
    """
    threads = threads or detect_test_threads()
    info(f"Running tests in parallel ({threads} threads)...")
    result = runner.run(
        ["test", "--workspace", "--all-targets", "--", f"--test-threads={threads}", *args]
    )
    success("All tests passed!")
    return result


def clippy(runner: CargoRunner, args: Sequence[str] = ()) -> CargoResult:
    """``cargo clippy --all-targets -- -D warnings``."""
    info("Running clippy with strict warnings...")
    result = runner.run(["clippy", "--all-targets", "--", "-D", "warnings", *args])
    success("Clippy passed with no warnings!")
    return result


def fmt(runner: CargoRunner, args: Sequence[str] = ()) -> CargoResult:
    """Check formatting; run the formatter if the check fails."""
    info("Checking code format...")
    checked = runner.run(["fmt", "--check", "--all-targets", *args], check=False)
    if checked.ok:
        success("Code is properly formatted!")
        return checked

    warn("Code needs formatting. Running formatter...")
    result = runner.run(["fmt", "--all-targets", *args])
    success("Code formatted successfully!")
    return result
