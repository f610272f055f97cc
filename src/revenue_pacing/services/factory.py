"""
Service factory functions.
Registers the dashboard services with the container and reports their health.
"""

import logging
from datetime import datetime
from typing import Optional

from revenue_pacing.config.settings import Settings, default_target_configuration, get_settings
from .container import ServiceCreationError, get_container

logger = logging.getLogger(__name__)

CORE_SERVICES = [
    "settings",
    "default_targets",
    "dashboard_service",
    "revenue_file_service",
]


def create_default_targets():
    """Default target configuration built from the registered settings."""
    container = get_container()
    return default_target_configuration(container.get("settings"))


def create_dashboard_service():
    """Create DashboardService with the default targets injected."""
    try:
        from .dashboard_service import DashboardService

        container = get_container()
        service = DashboardService(container.get("default_targets"))
        logger.debug("Created DashboardService")
        return service
    except ImportError as e:
        logger.error(f"Failed to import DashboardService: {e}")
        raise ServiceCreationError(f"Could not import DashboardService: {e}") from e


def create_revenue_file_service():
    """Create RevenueFileService."""
    try:
        from .revenue_file_service import RevenueFileService

        return RevenueFileService()
    except ImportError as e:
        logger.error(f"Failed to import RevenueFileService: {e}")
        raise ServiceCreationError(f"Could not import RevenueFileService: {e}") from e


def initialize_services(settings: Optional[Settings] = None) -> None:
    """
    Register every service with the global container.

    Safe to call more than once; later calls replace the registrations and
    drop any singletons built from the previous settings.
    """
    container = get_container()
    settings = settings or get_settings()

    container.set_config({
        "ENVIRONMENT": settings.environment,
        "DATA_PATH": settings.services.data_path,
    })

    container.register_instance("settings", settings)
    container.register_singleton("default_targets", create_default_targets)
    container.register_singleton("dashboard_service", create_dashboard_service)
    container.register_singleton("revenue_file_service", create_revenue_file_service)
    container.clear_singletons()

    logger.info(
        f"Initialized {len(CORE_SERVICES)} services for environment: {settings.environment}"
    )


def get_service_health_report() -> dict:
    """
    Get a health report of all core services.

    Returns:
        Dictionary with per-service status plus overall_status of
        healthy, degraded or unhealthy
    """
    container = get_container()

    health_report = {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "environment": container.get_config("ENVIRONMENT", "unknown"),
        "services": {},
        "overall_status": "healthy",
        "issues": [],
    }

    for service_name in CORE_SERVICES:
        service_health = {
            "registered": container.has_service(service_name),
            "healthy": False,
            "error": None,
        }

        if service_health["registered"]:
            try:
                service_health["healthy"] = container.get(service_name) is not None
            except ServiceCreationError as e:
                service_health["error"] = str(e)
                health_report["issues"].append(f"Service {service_name}: {e}")
        else:
            health_report["issues"].append(f"Service {service_name}: not registered")

        health_report["services"][service_name] = service_health

    unhealthy_services = [
        name for name, health in health_report["services"].items() if not health["healthy"]
    ]
    if unhealthy_services:
        health_report["overall_status"] = (
            "degraded" if len(unhealthy_services) < len(CORE_SERVICES) else "unhealthy"
        )
        logger.warning(f"Unhealthy services: {', '.join(unhealthy_services)}")

    return health_report
