# src/revenue_pacing/web/routes/health.py
"""
Health monitoring endpoints.
Reports service container status and basic host resource usage.
"""

import logging
import time
from datetime import datetime, timedelta

import psutil
from flask import Blueprint

from revenue_pacing.services.container import get_container
from revenue_pacing.services.factory import get_service_health_report
from revenue_pacing.web.utils.request_helpers import (
    create_success_response,
    handle_request_errors,
    log_requests,
)

logger = logging.getLogger(__name__)

# Create health blueprint
health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("/")
@log_requests
@handle_request_errors
def system_health():
    """
    Service health check.
    200 when every service is healthy, 206 when degraded, 503 otherwise.
    """
    health_report = get_service_health_report()

    status_code = 200
    if health_report["overall_status"] == "degraded":
        status_code = 206  # Partial Content
    elif health_report["overall_status"] == "unhealthy":
        status_code = 503  # Service Unavailable

    return create_success_response(health_report, status_code=status_code)


@health_bp.route("/services")
@log_requests
@handle_request_errors
def list_services():
    container = get_container()
    return create_success_response({
        "environment": container.get_config("ENVIRONMENT", "unknown"),
        "services": container.list_services(),
    })


@health_bp.route("/system")
@log_requests
@handle_request_errors
def system_stats():
    """Host resource usage for the monitoring panel."""
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage("/")
    uptime_seconds = int(time.time() - psutil.boot_time())

    return create_success_response({
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "system": {
            "cpu_percent": round(psutil.cpu_percent(interval=None), 1),
            "memory_percent": round(memory.percent, 1),
            "memory_used_mb": round(memory.used / 1024 / 1024, 1),
            "memory_total_mb": round(memory.total / 1024 / 1024, 1),
            "disk_percent": round((disk.used / disk.total) * 100, 1),
            "disk_used_gb": round(disk.used / 1024 / 1024 / 1024, 1),
            "disk_total_gb": round(disk.total / 1024 / 1024 / 1024, 1),
            "uptime_seconds": uptime_seconds,
            "uptime_formatted": str(timedelta(seconds=uptime_seconds)),
        },
    })
