"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``GUILD_PROFESSIONS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

Engine functions take the relevant sub-config (``RankLimits``,
``HealthConfig``) as an explicit argument.  Their defaults reproduce the
standard policy, so the analytics modules are usable without loading any
file at all.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class CatalogConfig(BaseModel):
    """Location of the profession catalog file."""

    model_config = ConfigDict(frozen=True)

    path: str = "config/professions.toml"


class RankLimits(BaseModel):
    """Advisory per-member rank caps.

    A member should hold at most ``grandmaster_limit`` professions at
    Grandmaster and at most ``master_limit`` at Master or above.  Exceeding
    either produces a warning; it never blocks an assignment.
    """

    model_config = ConfigDict(frozen=True)

    grandmaster_limit: int = 2
    master_limit: int = 3

    @field_validator("grandmaster_limit", "master_limit")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Rank limit must be >= 0, got {v}.")
        return v


class HealthConfig(BaseModel):
    """Guild health scoring weights and recommendation thresholds."""

    model_config = ConfigDict(frozen=True)

    coverage_weight: float = 0.2
    mastery_weight: float = 0.4
    grandmaster_weight: float = 0.4
    tier_warning_threshold: int = 50      # weakest tier below this → recommendation
    grandmaster_warning_threshold: int = 30
    max_gap_names: int = 2                # crafting gaps named in recommendation 1
    display_limit: int = 4                # recommendations shown by consumers

    @field_validator("coverage_weight", "mastery_weight", "grandmaster_weight")
    @classmethod
    def non_negative_weight(cls, v: float) -> float:
        if v < 0.0:
            raise ValueError(f"Score weight must be >= 0.0, got {v}.")
        return v

    @field_validator("max_gap_names", "display_limit")
    @classmethod
    def positive_count(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Count must be >= 1, got {v}.")
        return v

    @model_validator(mode="after")
    def weights_sum_to_one(self) -> "HealthConfig":
        total = self.coverage_weight + self.mastery_weight + self.grandmaster_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(
                f"Health score weights must sum to 1.0, got {total:.4f}."
            )
        return self


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    catalog: CatalogConfig = CatalogConfig()
    ranks: RankLimits = RankLimits()
    health: HealthConfig = HealthConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def resolve_path(path: str | Path) -> Path:
    """Resolve a config-relative path against the project root.

    Absolute paths and paths that exist relative to the working directory
    are returned unchanged.
    """
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p
    return _find_project_root() / p


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply GUILD_PROFESSIONS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply GUILD_PROFESSIONS_* env vars to the raw config dict.

    Supported overrides:
      GUILD_PROFESSIONS_CATALOG_PATH → raw["catalog"]["path"]
      GUILD_PROFESSIONS_LOG_LEVEL    → raw["logging"]["level"]
      GUILD_PROFESSIONS_DEBUG        → raw["debug"]
    """
    if catalog_path := os.environ.get("GUILD_PROFESSIONS_CATALOG_PATH"):
        raw.setdefault("catalog", {})["path"] = catalog_path

    if log_level := os.environ.get("GUILD_PROFESSIONS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("GUILD_PROFESSIONS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        catalog=CatalogConfig(**raw.get("catalog", {})),
        ranks=RankLimits(**raw.get("ranks", {})),
        health=HealthConfig(**raw.get("health", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
