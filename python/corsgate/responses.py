"""Response envelope helpers.

All filter-originated bodies use a consistent envelope:
- Success: { "data": ... }
- Error: { "error": { "code": "E_CORS_...", "message": "..." } }
"""

from typing import Any

from starlette.responses import JSONResponse

from corsgate.errors import CORSErrorCode, status_for


def success_response(data: Any) -> dict[str, Any]:
    """Create a success response envelope.

    Args:
        data: The response data to wrap.

    Returns:
        Dict with "data" key containing the response.
    """
    return {"data": data}


def error_response(code: CORSErrorCode, message: str) -> dict[str, Any]:
    """Create an error response envelope.

    Args:
        code: The rejection code enum value.
        message: Human-readable error message.

    Returns:
        Dict with "error" key containing code and message.
    """
    return {"error": {"code": code.value, "message": message}}


def rejection_response(code: CORSErrorCode, message: str) -> JSONResponse:
    """Build the terminal response for a rejected preflight request."""
    return JSONResponse(status_code=status_for(code), content=error_response(code, message))
