"""Configuration management for rskills."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"


def _default_config_dir() -> Path:
    """Get default configuration directory (``$RSKILLS_HOME`` or ~/.rskills)."""
    env = os.environ.get("RSKILLS_HOME")
    if env:
        return Path(env)
    return Path.home() / ".rskills"


def _default_logs_dir() -> Path:
    """Get default logs directory."""
    return _default_config_dir() / "logs"


class SkillsConfig(BaseModel):
    """Where the skill collection lives."""
    skills_dir: Path = Field(default=Path("skills"), description="Directory holding skill documents")
    references_dir: Optional[Path] = Field(
        default=Path("references"),
        description="Directory holding reference documents (glossary, best practices)",
    )


class TranslationConfig(BaseModel):
    """Translation comparison settings."""
    line_delta_threshold: int = Field(default=50, ge=0, description="Line delta that triggers a warning")
    pattern: str = Field(default="*.md", description="Glob for documents to compare")
    report_dir: Optional[Path] = Field(default=None, description="Where reports go (None = fresh temp dir)")


class CargoConfig(BaseModel):
    """Cargo wrapper settings."""
    cargo: str = Field(default="cargo", description="cargo executable")
    test_threads: Optional[int] = Field(default=None, ge=1, description="Test threads (None = auto-detect)")
    timeout: Optional[float] = Field(default=None, gt=0, description="Per-command timeout in seconds")


class RSkillsConfig(BaseModel):
    """Main rskills configuration."""
    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    translation: TranslationConfig = Field(default_factory=TranslationConfig)
    cargo: CargoConfig = Field(default_factory=CargoConfig)

    log_level: str = Field(default="INFO")
    logs_dir: Path = Field(default_factory=_default_logs_dir)

    # Not persisted
    config_dir: Path = Field(default_factory=_default_config_dir, exclude=True)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    @classmethod
    def load(cls, config_dir: Optional[Path] = None) -> "RSkillsConfig":
        """
        Load configuration from ``<config_dir>/config.yaml``.

        Returns defaults if the file doesn't exist or cannot be parsed.
        """
        config_dir = Path(config_dir) if config_dir else _default_config_dir()
        config_file = config_dir / CONFIG_FILENAME
        if not config_file.exists():
            return cls(config_dir=config_dir)

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError("top-level YAML value must be a mapping")
            if "config_dir" in data:
                logger.warning("Ignoring config_dir in %s; set RSKILLS_HOME instead", config_file)
                data.pop("config_dir")
            return cls(config_dir=config_dir, **data)
        except (yaml.YAMLError, ValueError, TypeError, OSError) as e:
            logger.warning("Failed to load config from %s: %s", config_file, e)
            return cls(config_dir=config_dir)

    def save(self) -> Path:
        """Write configuration to ``config_file`` (mode 0600) and return its path."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        with open(self.config_file, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        os.chmod(self.config_file, 0o600)
        return self.config_file

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., "cargo.test_threads")
            default: Default value if key not found
        """
        obj: Any = self
        for part in key.split("."):
            if isinstance(obj, BaseModel) and part in type(obj).model_fields:
                obj = getattr(obj, part)
            else:
                return default
        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value by dot-notation key.

        Raises:
            KeyError: If any segment of the key is unknown
        """
        parts = key.split(".")
        obj: Any = self
        for part in parts[:-1]:
            if isinstance(obj, BaseModel) and part in type(obj).model_fields:
                obj = getattr(obj, part)
            else:
                raise KeyError(f"Configuration key not found: {key}")

        final_key = parts[-1]
        if not (isinstance(obj, BaseModel) and final_key in type(obj).model_fields):
            raise KeyError(f"Configuration key not found: {key}")
        setattr(obj, final_key, value)
