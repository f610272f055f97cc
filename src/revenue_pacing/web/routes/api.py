# src/revenue_pacing/web/routes/api.py
"""
API blueprint with JSON endpoints for the pacing dashboard.

Every POST endpoint takes a JSON body with the dashboard's current state:
{records, targets, timeFrame, location, startDate, endDate,
attainmentThreshold, asOf}. Missing keys fall back to MTD, Combined, the
default targets and today.
"""

import logging
from flask import Blueprint

from revenue_pacing.services.container import get_container
from revenue_pacing.web.utils.request_helpers import (
    RequestValidationError,
    create_success_response,
    get_json_payload,
    get_records_parameter,
    handle_request_errors,
    log_requests,
    safe_get_service,
)

logger = logging.getLogger(__name__)

# Create API blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")


def _dashboard_service():
    return safe_get_service(get_container(), "dashboard_service")


def _filters(payload):
    return {
        "time_frame": payload.get("timeFrame", "MTD"),
        "location": payload.get("location"),
        "start_date": payload.get("startDate"),
        "end_date": payload.get("endDate"),
    }


@api_bp.route("/targets/default", methods=["GET"])
@log_requests
@handle_request_errors
def get_default_targets():
    """Target configuration used when a request carries none."""
    service = _dashboard_service()
    return create_success_response(service.default_targets.to_dict())


@api_bp.route("/targets/resolve", methods=["POST"])
@log_requests
@handle_request_errors
def resolve_targets():
    """Effective daily targets for {date}."""
    payload = get_json_payload()
    if not payload.get("date"):
        raise RequestValidationError("'date' is required")
    service = _dashboard_service()
    pair = service.daily_targets(payload["date"], payload.get("targets"))
    return create_success_response({"date": payload["date"], **pair.to_dict(), "combined": pair.combined})


@api_bp.route("/business-days", methods=["POST"])
@log_requests
@handle_request_errors
def get_business_days():
    """Working-day counts for {year, month} as of asOf."""
    payload = get_json_payload()
    try:
        year = int(payload["year"])
        month = int(payload["month"])
    except (KeyError, TypeError, ValueError) as e:
        raise RequestValidationError("'year' and 'month' must be integers") from e
    if not 1 <= month <= 12:
        raise RequestValidationError(f"Invalid month: {month}")

    service = _dashboard_service()
    info = service.business_days(year, month, payload.get("targets"), payload.get("asOf"))
    return create_success_response(info.to_dict())


@api_bp.route("/records/filter", methods=["POST"])
@log_requests
@handle_request_errors
def filter_records():
    payload = get_json_payload()
    service = _dashboard_service()
    filtered = service.filter_records(
        get_records_parameter(payload),
        attainment_threshold=payload.get("attainmentThreshold"),
        targets=payload.get("targets"),
        today=payload.get("asOf"),
        **_filters(payload),
    )
    return create_success_response({
        "count": len(filtered),
        "records": [r.to_dict() for r in filtered],
    })


@api_bp.route("/metrics/location", methods=["POST"])
@log_requests
@handle_request_errors
def get_location_metrics():
    """Current-month pacing per location, whatever the time frame."""
    payload = get_json_payload()
    filters = _filters(payload)
    service = _dashboard_service()
    records = service.filter_records(
        get_records_parameter(payload),
        attainment_threshold=payload.get("attainmentThreshold"),
        targets=payload.get("targets"),
        today=payload.get("asOf"),
        **filters,
    )
    report = service.location_metrics(
        records, filters["location"], filters["time_frame"],
        payload.get("targets"), payload.get("asOf"),
    )
    return create_success_response(report.to_dict())


@api_bp.route("/metrics/period", methods=["POST"])
@log_requests
@handle_request_errors
def get_period_metrics():
    """Pacing against the selected time frame's own date range."""
    payload = get_json_payload()
    filters = _filters(payload)
    service = _dashboard_service()
    records = service.filter_records(
        get_records_parameter(payload),
        attainment_threshold=payload.get("attainmentThreshold"),
        targets=payload.get("targets"),
        today=payload.get("asOf"),
        **filters,
    )
    report = service.period_metrics(
        records, filters["location"], filters["time_frame"],
        filters["start_date"], filters["end_date"],
        payload.get("targets"), payload.get("asOf"),
    )
    return create_success_response(report.to_dict())


@api_bp.route("/anomalies/weekly", methods=["POST"])
@log_requests
@handle_request_errors
def get_weekly_anomalies():
    payload = get_json_payload()
    service = _dashboard_service()
    report = service.weekly_anomalies(
        get_records_parameter(payload), payload.get("targets"), payload.get("asOf")
    )
    return create_success_response(report.to_dict())


@api_bp.route("/missing-data", methods=["POST"])
@log_requests
@handle_request_errors
def get_missing_data():
    payload = get_json_payload()
    service = _dashboard_service()
    report = service.missing_data(
        get_records_parameter(payload), payload.get("targets"), payload.get("asOf")
    )
    return create_success_response(report.to_dict())


@api_bp.route("/validate", methods=["POST"])
@log_requests
@handle_request_errors
def validate_data():
    """Validation findings; always 200, with is_valid telling the outcome."""
    payload = get_json_payload()
    service = _dashboard_service()
    result = service.validate(
        get_records_parameter(payload), payload.get("targets"), payload.get("asOf")
    )
    return create_success_response(result.to_dict())


@api_bp.route("/insights", methods=["POST"])
@log_requests
@handle_request_errors
def get_executive_insights():
    payload = get_json_payload()
    service = _dashboard_service()
    result = service.executive_insights(
        get_records_parameter(payload), payload.get("targets"), payload.get("asOf")
    )
    if not result.ok:
        logger.info(f"Executive insights unavailable: {result.reason.value}")
    return create_success_response(result.to_dict())


@api_bp.route("/summary/period", methods=["POST"])
@log_requests
@handle_request_errors
def get_period_summary():
    payload = get_json_payload()
    service = _dashboard_service()
    summary = service.period_summary(get_records_parameter(payload), payload.get("targets"))
    return create_success_response(summary.to_dict())


@api_bp.route("/summary/time-periods", methods=["POST"])
@log_requests
@handle_request_errors
def get_time_period_metrics():
    payload = get_json_payload()
    service = _dashboard_service()
    metrics = service.time_period_metrics(get_records_parameter(payload), payload.get("targets"))
    return create_success_response(metrics.to_dict())


@api_bp.route("/trends/monthly", methods=["POST"])
@log_requests
@handle_request_errors
def get_monthly_trends():
    payload = get_json_payload()
    service = _dashboard_service()
    trends = service.monthly_trends(
        get_records_parameter(payload), payload.get("targets"), payload.get("asOf")
    )
    return create_success_response([t.to_dict() for t in trends])


@api_bp.route("/trends/moving-average", methods=["POST"])
@log_requests
@handle_request_errors
def get_moving_average():
    payload = get_json_payload()
    try:
        periods = int(payload.get("periods", 3))
    except (TypeError, ValueError) as e:
        raise RequestValidationError("'periods' must be an integer") from e

    service = _dashboard_service()
    points = service.moving_average(
        get_records_parameter(payload), periods, payload.get("targets"), payload.get("asOf")
    )
    return create_success_response([p.to_dict() for p in points])


@api_bp.route("/business-intelligence", methods=["POST"])
@log_requests
@handle_request_errors
def get_business_intelligence():
    payload = get_json_payload()
    service = _dashboard_service()
    report = service.business_intelligence(get_records_parameter(payload), payload.get("targets"))
    return create_success_response(report.to_dict())


@api_bp.route("/consistency", methods=["POST"])
@log_requests
@handle_request_errors
def get_consistency_report():
    payload = get_json_payload()
    service = _dashboard_service()
    report = service.consistency(
        get_records_parameter(payload),
        targets=payload.get("targets"),
        today=payload.get("asOf"),
        **_filters(payload),
    )
    return create_success_response(report.to_dict())
