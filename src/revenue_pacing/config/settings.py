# src/revenue_pacing/config/settings.py
"""
Application configuration management.
Loads settings from environment variables with sensible defaults.

Environment selection:
1) explicit argument to get_settings()
2) APP_ENV / FLASK_ENV (development|production|test aliases accepted)
3) fallback to prod
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, TYPE_CHECKING
from dataclasses import dataclass

if TYPE_CHECKING:
    from revenue_pacing.models.entities import TargetConfiguration


# -------------------------- helpers (pure) --------------------------


def _norm_env_name(raw: Optional[str]) -> str:
    """
    Normalize environment name to one of: dev | prod | test
    Accepts FLASK_ENV compatibility.
    """
    if not raw:
        raw = os.getenv("APP_ENV") or os.getenv("FLASK_ENV") or "prod"
    raw = raw.lower().strip()
    if raw in {"development", "debug"}:
        return "dev"
    if raw in {"production", "release"}:
        return "prod"
    if raw in {"testing"}:
        return "test"
    if raw not in {"dev", "prod", "test"}:
        return "prod"
    return raw


def _project_root() -> Path:
    return Path(
        os.getenv("PROJECT_ROOT", Path(__file__).parent.parent.parent.parent)
    ).resolve()


def _bool(var: str, default: bool = False) -> bool:
    val = os.getenv(var)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "on"}


def _int(var: str, default: int) -> int:
    try:
        return int(os.getenv(var, "").strip() or default)
    except ValueError:
        return default


def _float(var: str, default: float) -> float:
    try:
        return float(os.getenv(var, "").strip() or default)
    except ValueError:
        return default


# -------------------------- dataclasses --------------------------


@dataclass
class TargetDefaultsConfig:
    """Built-in daily revenue goals used when no target settings are supplied."""

    austin_daily: float
    charlotte_daily: float


@dataclass
class WebConfig:
    """Web server configuration."""

    secret_key: str
    debug: bool
    host: str
    port: int
    max_content_length: int


@dataclass
class ServicesConfig:
    """Services configuration."""

    data_path: str


@dataclass
class Settings:
    """Application settings."""

    environment: str
    project_root: Path
    targets: TargetDefaultsConfig
    web: WebConfig
    services: ServicesConfig


# -------------------------- public API --------------------------


def get_settings(environment: Optional[str] = None) -> Settings:
    """
    Get application settings based on environment.
    """
    env = _norm_env_name(environment)
    project_root = _project_root()

    targets = TargetDefaultsConfig(
        austin_daily=_float("DEFAULT_AUSTIN_DAILY_TARGET", 53000.0),
        charlotte_daily=_float("DEFAULT_CHARLOTTE_DAILY_TARGET", 62500.0),
    )

    web = WebConfig(
        secret_key=os.getenv("SECRET_KEY", "dev-secret-key-change-in-production"),
        debug=_bool("DEBUG", env == "dev"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int("PORT", 8000),
        max_content_length=_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024),  # 16MB
    )

    default_data_path = project_root / "data" / "revenue"
    services = ServicesConfig(
        data_path=os.getenv("DATA_PATH", str(default_data_path)),
    )

    return Settings(
        environment=env,
        project_root=project_root,
        targets=targets,
        web=web,
        services=services,
    )


def default_target_configuration(
    settings: Optional[Settings] = None,
) -> "TargetConfiguration":
    """
    Build the default target configuration (no monthly adjustments) from settings.

    Callers inject the result wherever a computation needs targets and the
    consumer supplied none.
    """
    from revenue_pacing.models.entities import DailyTargetPair, TargetConfiguration

    settings = settings or get_settings()
    return TargetConfiguration(
        daily_targets=DailyTargetPair(
            austin=settings.targets.austin_daily,
            charlotte=settings.targets.charlotte_daily,
        ),
        monthly_adjustments=(),
    )
