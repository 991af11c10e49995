"""Core module - configuration, logging, errors and host detection."""

from rskills.core.config import CargoConfig, RSkillsConfig, SkillsConfig, TranslationConfig
from rskills.core.detection import detect_test_threads
from rskills.core.errors import (
    ClassifiedError,
    CommandFailedError,
    CommandTimeoutError,
    ErrorCategory,
    InvalidDirectoryError,
    RSkillsError,
    SkillNotFoundError,
    SkillParseError,
    ToolchainNotFoundError,
    classify_error,
)

__all__ = [
    "CargoConfig",
    "ClassifiedError",
    "CommandFailedError",
    "CommandTimeoutError",
    "ErrorCategory",
    "InvalidDirectoryError",
    "RSkillsConfig",
    "RSkillsError",
    "SkillNotFoundError",
    "SkillParseError",
    "SkillsConfig",
    "ToolchainNotFoundError",
    "TranslationConfig",
    "classify_error",
    "detect_test_threads",
]
