"""Error classification and exit codes for rskills."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ErrorCategory(Enum):
    """Categories of errors with distinct user messages and exit codes."""
    INVALID_INPUT = "invalid_input"            # Bad CLI arguments or directories
    NOT_FOUND = "not_found"                    # Skill or file does not exist
    TOOLCHAIN_MISSING = "toolchain_missing"    # cargo not on PATH
    COMMAND_FAILED = "command_failed"          # cargo exited non-zero
    TIMEOUT = "timeout"                        # cargo exceeded its timeout
    PERMISSION_DENIED = "permission_denied"    # File access denied
    PARSE_ERROR = "parse_error"                # Malformed skill document
    UNKNOWN = "unknown"                        # Unclassified error


@dataclass
class ErrorPolicy:
    """How the CLI reports an error category."""
    exit_code: int = 1
    user_message: Optional[str] = None
    show_traceback: bool = False


DEFAULT_POLICIES: dict[ErrorCategory, ErrorPolicy] = {
    ErrorCategory.INVALID_INPUT: ErrorPolicy(exit_code=1),
    ErrorCategory.NOT_FOUND: ErrorPolicy(exit_code=1),
    ErrorCategory.TOOLCHAIN_MISSING: ErrorPolicy(
        exit_code=127,
        user_message="cargo was not found. Install the Rust toolchain (https://rustup.rs) and retry.",
    ),
    ErrorCategory.COMMAND_FAILED: ErrorPolicy(exit_code=1),
    ErrorCategory.TIMEOUT: ErrorPolicy(exit_code=124),
    ErrorCategory.PERMISSION_DENIED: ErrorPolicy(
        exit_code=1,
        user_message="Permission denied for this operation.",
    ),
    ErrorCategory.PARSE_ERROR: ErrorPolicy(exit_code=1),
    ErrorCategory.UNKNOWN: ErrorPolicy(
        exit_code=1,
        user_message="An unexpected error occurred.",
        show_traceback=True,
    ),
}


@dataclass
class ClassifiedError:
    """An error with its classification and reporting policy."""
    category: ErrorCategory
    original_error: BaseException
    message: str
    policy: ErrorPolicy
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def exit_code(self) -> int:
        return self.metadata.get("exit_code", self.policy.exit_code)

    @property
    def user_message(self) -> str:
        return self.policy.user_message or self.message


def classify_error(error: BaseException) -> ClassifiedError:
    """
    Classify an error and determine how it is reported.

    Args:
        error: The exception to classify

    Returns:
        ClassifiedError with category, message, and reporting policy
    """
    if isinstance(error, RSkillsError):
        return error.classified

    if isinstance(error, subprocess.TimeoutExpired):
        return ClassifiedError(
            category=ErrorCategory.TIMEOUT,
            original_error=error,
            message=f"Command timed out after {error.timeout}s",
            policy=DEFAULT_POLICIES[ErrorCategory.TIMEOUT],
        )

    if isinstance(error, PermissionError):
        return ClassifiedError(
            category=ErrorCategory.PERMISSION_DENIED,
            original_error=error,
            message="Permission denied",
            policy=DEFAULT_POLICIES[ErrorCategory.PERMISSION_DENIED],
        )

    if isinstance(error, FileNotFoundError):
        return ClassifiedError(
            category=ErrorCategory.NOT_FOUND,
            original_error=error,
            message=str(error),
            policy=DEFAULT_POLICIES[ErrorCategory.NOT_FOUND],
        )

    if isinstance(error, TimeoutError):
        return ClassifiedError(
            category=ErrorCategory.TIMEOUT,
            original_error=error,
            message="Operation timed out",
            policy=DEFAULT_POLICIES[ErrorCategory.TIMEOUT],
        )

    error_str = str(error).lower()
    if "yaml" in error_str or "frontmatter" in error_str or "front matter" in error_str:
        return ClassifiedError(
            category=ErrorCategory.PARSE_ERROR,
            original_error=error,
            message=str(error),
            policy=DEFAULT_POLICIES[ErrorCategory.PARSE_ERROR],
        )

    return ClassifiedError(
        category=ErrorCategory.UNKNOWN,
        original_error=error,
        message=str(error),
        policy=DEFAULT_POLICIES[ErrorCategory.UNKNOWN],
    )


class RSkillsError(Exception):
    """Base exception for rskills-specific errors."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN, **metadata: Any):
        super().__init__(message)
        self.category = category
        self.classified = ClassifiedError(
            category=category,
            original_error=self,
            message=message,
            policy=DEFAULT_POLICIES[category],
            metadata=metadata,
        )


class InvalidDirectoryError(RSkillsError):
    """A required directory argument is missing or not a directory."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.INVALID_INPUT)


class SkillNotFoundError(RSkillsError):
    """No skill with the requested name is loaded."""

    def __init__(self, name: str):
        super().__init__(f"Skill not found: {name}", ErrorCategory.NOT_FOUND)
        self.name = name


class SkillParseError(RSkillsError, ValueError):
    """A skill document could not be parsed."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCategory.PARSE_ERROR)


class ToolchainNotFoundError(RSkillsError):
    """The cargo executable could not be located."""

    def __init__(self, executable: str = "cargo"):
        super().__init__(f"'{executable}' is not installed or not in PATH", ErrorCategory.TOOLCHAIN_MISSING)
        self.executable = executable


class CommandFailedError(RSkillsError):
    """A toolchain command exited with a non-zero status.

    A command killed by signal N (negative ``returncode``) maps to exit
    code 128 + N, as a shell reports it.
    """

    def __init__(self, command: list[str], returncode: int):
        super().__init__(
            f"Command failed with exit code {returncode}: {' '.join(command)}",
            ErrorCategory.COMMAND_FAILED,
            exit_code=returncode if returncode >= 0 else 128 - returncode,
        )
        self.command = command
        self.returncode = returncode


class CommandTimeoutError(RSkillsError):
    """A toolchain command exceeded its timeout."""

    def __init__(self, command: list[str], timeout: float):
        super().__init__(
            f"Command timed out after {timeout}s: {' '.join(command)}",
            ErrorCategory.TIMEOUT,
        )
        self.command = command
        self.timeout = timeout
