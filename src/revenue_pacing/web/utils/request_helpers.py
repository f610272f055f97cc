# src/revenue_pacing/web/utils/request_helpers.py
"""
Request and response helper utilities for Flask routes.
"""
import logging
from typing import Any, Dict, Optional
from flask import request, Response
import json

from revenue_pacing.utils.template_formatters import serialize_for_javascript

logger = logging.getLogger(__name__)


class RequestValidationError(Exception):
    """Raised when request parameters are invalid."""
    pass


def get_json_payload() -> Dict[str, Any]:
    """Body of a JSON request; an empty body is an empty payload."""
    payload = request.get_json(silent=True)
    if payload is None:
        if request.get_data(cache=True).strip():
            raise RequestValidationError("Request body must be valid JSON")
        return {}
    if not isinstance(payload, dict):
        raise RequestValidationError("Request body must be a JSON object")
    return payload


def get_records_parameter(payload: Dict[str, Any]) -> list:
    records = payload.get("records", [])
    if records is None:
        return []
    if not isinstance(records, list):
        raise RequestValidationError("'records' must be a list")
    return records


def create_json_response(data: Any, status_code: int = 200) -> Response:
    """Create standardized JSON response."""
    try:
        json_data = serialize_for_javascript(data)
        return Response(json_data, status=status_code, mimetype='application/json')
    except (TypeError, ValueError) as e:
        logger.error(f"Error creating JSON response: {e}")
        error_data = json.dumps({'success': False, 'error': 'Serialization failed', 'status': 500})
        return Response(error_data, status=500, mimetype='application/json')


def create_success_response(data: Any, message: Optional[str] = None, status_code: int = 200) -> Response:
    """Create standardized success response."""
    response_data = {'success': True, 'data': data}
    if message:
        response_data['message'] = message
    return create_json_response(response_data, status_code)


def create_error_response(error_message: str, status_code: int = 400, error_code: Optional[str] = None) -> Response:
    """Create standardized error response."""
    response_data = {'success': False, 'error': error_message, 'status': status_code}
    if error_code:
        response_data['error_code'] = error_code
    return create_json_response(response_data, status_code)


def safe_get_service(container, service_name: str):
    """Get a service from the container or raise RequestValidationError."""
    try:
        service = container.get(service_name)
    except Exception as e:
        logger.error(f"Failed to get service '{service_name}': {e}")
        raise RequestValidationError(f"Service '{service_name}' is not available") from e
    if service is None:
        raise RequestValidationError(f"Service '{service_name}' is not available")
    return service


def log_requests(func):
    """Decorator to log request information."""
    def log_wrapper(*args, **kwargs):
        logger.debug(f"Request: {request.method} {request.path}")
        return func(*args, **kwargs)
    log_wrapper.__name__ = f"{func.__name__}_logged"
    return log_wrapper


def handle_request_errors(func):
    """Decorator mapping request and input errors to 400, anything else to 500."""
    def error_wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RequestValidationError as e:
            return create_error_response(str(e), 400, "VALIDATION_ERROR")
        except ValueError as e:
            return create_error_response(str(e), 400, "INVALID_INPUT")
        except Exception as e:
            logger.exception(f"Unexpected error in {func.__name__}: {e}")
            return create_error_response("An unexpected error occurred", 500, "INTERNAL_ERROR")
    error_wrapper.__name__ = f"{func.__name__}_error_handled"
    return error_wrapper
