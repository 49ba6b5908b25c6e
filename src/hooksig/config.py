"""Configuration types with environment variable support.

All settings can be configured via environment variables with the HOOKSIG_ prefix.
Example: HOOKSIG_TOLERANCE=600 allows signatures up to 10 minutes old.
"""

from __future__ import annotations

import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hooksig.envelope import DEFAULT_SIGNATURE_TOLERANCE, VerifyOptions

DEFAULT_HEADER_NAME = "Webhook-Signature"


def load_config_from_file(path: str | Path) -> dict[str, Any]:
    """Read hooksig settings from a ``.yaml``, ``.yml`` or ``.toml`` file.

    The top level must be a mapping whose keys are HooksigConfig field
    names (``tolerance``, ``untrusted_schemes``, ...). An empty YAML file
    yields no settings.

    Raises:
        FileNotFoundError: If nothing exists at path.
        ValueError: If the file is not UTF-8, fails to parse, has an
            unrecognized suffix, or does not hold a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"{path} is not valid UTF-8: {e}") from e

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        elif path.suffix == ".toml":
            data = tomllib.loads(text)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of settings")
    return data


def flatten_config(config: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Collapse nested sections into underscore-joined field names.

    A ``log`` section holding ``level: debug`` becomes ``log_level``, which
    lets YAML and TOML files group related settings.
    """
    flat: dict[str, Any] = {}
    for key, value in config.items():
        name = f"{prefix}_{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_config(value, name))
        else:
            flat[name] = value
    return flat


class HooksigConfig(BaseSettings):
    """Signature verification settings.

    Environment variables:
        HOOKSIG_HEADER_NAME: Header carrying the signature (default: Webhook-Signature)
        HOOKSIG_TOLERANCE: Maximum signature age in seconds (default: 300)
        HOOKSIG_IGNORE_TOLERANCE: Skip the age check (default: false)
        HOOKSIG_UNTRUSTED_SCHEMES: JSON list of scheme versions to reject, e.g. [1]
        HOOKSIG_LOG_LEVEL: Log level for the CLI (default: warning)
    """

    model_config = SettingsConfigDict(
        env_prefix="HOOKSIG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    header_name: str = Field(
        default=DEFAULT_HEADER_NAME,
        description="Name of the header carrying the signature value.",
    )
    tolerance: int = Field(
        default=DEFAULT_SIGNATURE_TOLERANCE,
        ge=0,
        description="Maximum allowed signature age in seconds.",
    )
    ignore_tolerance: bool = Field(
        default=False,
        description="Accept signatures of any age.",
    )
    untrusted_schemes: list[int] = Field(
        default_factory=list,
        description="Scheme versions whose signatures are never accepted.",
    )
    log_level: str = Field(
        default="warning",
        description="Log level (debug, info, warning, error).",
    )

    @field_validator("untrusted_schemes")
    @classmethod
    def _positive_versions(cls, value: list[int]) -> list[int]:
        for version in value:
            if version <= 0:
                raise ValueError(f"Scheme versions must be positive, got {version}")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.lower()
        if value not in ("debug", "info", "warning", "error"):
            raise ValueError(f"Unknown log level: {value}")
        return value

    def verify_options(self, now: Callable[[], int] | None = None) -> VerifyOptions:
        """Build envelope verification options from this config."""
        return VerifyOptions(
            tolerance=self.tolerance,
            ignore_tolerance=self.ignore_tolerance,
            now=now,
            untrusted_schemes=tuple(self.untrusted_schemes),
        )


_config: HooksigConfig | None = None


def get_config() -> HooksigConfig:
    """Get the global configuration instance.

    The instance is created once from environment variables and cached for
    the lifetime of the process. To reload config (e.g., in tests), call
    clear_config() first.
    """
    global _config
    if _config is None:
        _config = HooksigConfig()
    return _config


def clear_config() -> None:
    """Clear the cached configuration."""
    global _config
    _config = None
