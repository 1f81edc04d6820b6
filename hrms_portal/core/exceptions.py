"""
Error taxonomy for calls made against the HRMS backend.

Transport failures, authentication expiry, validation failures and the
remaining HTTP errors each get their own type so pages can decide how a
failure is surfaced (toast, inline message, field errors or nothing).
"""

from typing import Dict, Optional

import httpx


class HRMSError(Exception):
    """Base class for all portal errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(HRMSError):
    """The request never produced an HTTP response (DNS, refused, timeout)."""


class FormValidationError(HRMSError):
    """A form failed client-side validation and was not submitted."""

    def __init__(self, errors: Dict[str, str], message: str = "Please fix errors before proceeding"):
        super().__init__(message)
        self.errors = errors


class ApiError(HRMSError):
    """The backend answered with a non-2xx status."""

    def __init__(
        self,
        response: httpx.Response,
        message: Optional[str] = None,
        field_errors: Optional[Dict[str, str]] = None,
    ):
        self.response = response
        self.status_code = response.status_code
        self.field_errors: Dict[str, str] = field_errors or {}
        self.server_message = message
        super().__init__(message or f"Request failed with status {response.status_code}")


class AuthenticationError(ApiError):
    """401 - missing, invalid or expired token."""

    session_cleared: bool = False


class AuthorizationError(ApiError):
    """403 - authenticated but not allowed."""


class ValidationError(ApiError):
    """400/422 - payload rejected, usually with per-field messages."""


class NotFoundError(ApiError):
    """404."""


class ConflictError(ApiError):
    """409."""


_STATUS_ERRORS = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


def _parse_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _parse_field_errors(body: dict) -> Dict[str, str]:
    """
    Collect `{field: message}` from the backend's validation payload.

    The backend sends `errors: [{field, message}]`; entries without a field
    name are ignored. The first message per field wins.
    """
    field_errors: Dict[str, str] = {}
    errors = body.get("errors")
    if not isinstance(errors, list):
        return field_errors
    for item in errors:
        if not isinstance(item, dict):
            continue
        field = item.get("field") or item.get("param") or item.get("path")
        message = item.get("message") or item.get("msg")
        if field and message and field not in field_errors:
            field_errors[field] = str(message)
    return field_errors


def error_from_response(response: httpx.Response) -> ApiError:
    """Build the matching ApiError subclass for a non-2xx response."""
    body = _parse_body(response)
    message = body.get("message") or body.get("error") or None
    error_cls = _STATUS_ERRORS.get(response.status_code, ApiError)
    return error_cls(response, message=message, field_errors=_parse_field_errors(body))
