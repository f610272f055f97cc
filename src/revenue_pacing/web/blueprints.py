# src/revenue_pacing/web/blueprints.py
"""
Blueprint registration and service validation.

Environment knobs:
  SKIP_SERVICE_VALIDATION: "1"/"true" -> never raise on validation failures
"""
import os
import logging
from typing import Any, Dict

from flask import Flask

from revenue_pacing.services.container import get_container
from revenue_pacing.services.factory import CORE_SERVICES
from revenue_pacing.utils.template_formatters import format_currency, format_percentage
from revenue_pacing.web.routes.api import api_bp
from revenue_pacing.web.routes.health import health_bp

logger = logging.getLogger(__name__)

BLUEPRINTS = [api_bp, health_bp]


def _truthy_env(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def register_blueprints(app: Flask) -> None:
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
        logger.info(f"Registered {blueprint.name} blueprint")

    app.add_template_filter(format_currency, "currency")
    app.add_template_filter(format_percentage, "percentage")
    logger.info("All blueprints registered successfully")


def configure_blueprint_services(app: Flask) -> None:
    """
    Build every core service once so a broken one fails at startup rather
    than on the first request. SKIP_SERVICE_VALIDATION only logs the failure.
    """
    container = get_container()
    app.config["SERVICE_CONTAINER"] = container

    missing = []
    for name in CORE_SERVICES:
        try:
            container.get(name)
        except Exception as e:
            logger.error(f"Service '{name}' failed validation: {e}")
            missing.append(name)

    if missing:
        message = f"Critical services unavailable: {', '.join(missing)}"
        if _truthy_env("SKIP_SERVICE_VALIDATION", False):
            logger.warning(f"{message} (continuing, SKIP_SERVICE_VALIDATION set)")
        else:
            raise RuntimeError(message)
    else:
        logger.info("All critical services validated")


def initialize_blueprints(app: Flask) -> None:
    configure_blueprint_services(app)
    register_blueprints(app)


def get_blueprint_info() -> Dict[str, Any]:
    return {
        blueprint.name: {"url_prefix": blueprint.url_prefix}
        for blueprint in BLUEPRINTS
    }
