"""CORS rejection definitions.

Every preflight rejection is defined here with its corresponding HTTP status code.
Simple requests are never rejected by the filter, so only preflight outcomes appear.
"""

from enum import Enum


class CORSErrorCode(str, Enum):
    """Standardized rejection codes for preflight responses.

    Format: E_CORS_NAME
    """

    # Origin errors (403)
    E_CORS_ORIGIN_FORBIDDEN = "E_CORS_ORIGIN_FORBIDDEN"

    # Method / header errors (400)
    E_CORS_METHOD_MISSING = "E_CORS_METHOD_MISSING"
    E_CORS_METHOD_NOT_ALLOWED = "E_CORS_METHOD_NOT_ALLOWED"
    E_CORS_HEADER_NOT_ALLOWED = "E_CORS_HEADER_NOT_ALLOWED"


# Rejection code to HTTP status mapping
ERROR_CODE_TO_STATUS: dict[CORSErrorCode, int] = {
    CORSErrorCode.E_CORS_ORIGIN_FORBIDDEN: 403,
    CORSErrorCode.E_CORS_METHOD_MISSING: 400,
    CORSErrorCode.E_CORS_METHOD_NOT_ALLOWED: 400,
    CORSErrorCode.E_CORS_HEADER_NOT_ALLOWED: 400,
}


def status_for(code: CORSErrorCode) -> int:
    """Return the HTTP status for a rejection code (400 when unmapped)."""
    return ERROR_CODE_TO_STATUS.get(code, 400)
