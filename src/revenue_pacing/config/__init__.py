# src/revenue_pacing/config/__init__.py
from .settings import get_settings, default_target_configuration, Settings

__all__ = ["get_settings", "default_target_configuration", "Settings"]
