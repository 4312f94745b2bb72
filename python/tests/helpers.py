"""Test helpers for driving the CORS middleware.

Provides:
- A downstream ASGI app with a configurable status and headers
- Header builders for cross-origin and preflight requests
- Raw ASGI scope construction for middleware-level tests
"""

from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Receive, Scope, Send

ORIGIN = "http://www.example.com"
OTHER_ORIGIN = "http://google.com"

DOWNSTREAM_BODY = "downstream"


def make_downstream(status_code: int = 200, headers: dict[str, str] | None = None) -> ASGIApp:
    """Build an ASGI app answering every method with a fixed status.

    Args:
        status_code: Status the downstream app responds with.
        headers: Extra response headers set by the downstream app.

    Returns:
        An ASGI application.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        response = PlainTextResponse(DOWNSTREAM_BODY, status_code=status_code, headers=headers)
        await response(scope, receive, send)

    return app


def origin_headers(origin: str = ORIGIN) -> dict[str, str]:
    """Headers for a simple cross-origin request."""
    return {"Origin": origin}


def preflight_headers(
    method: str | None = "POST",
    request_headers: str | None = None,
    origin: str = ORIGIN,
) -> dict[str, str]:
    """Headers for a preflight request.

    Args:
        method: Value of Access-Control-Request-Method (omitted when None).
        request_headers: Value of Access-Control-Request-Headers (omitted when None).
        origin: Value of the Origin header.
    """
    headers = {"Origin": origin}
    if method is not None:
        headers["Access-Control-Request-Method"] = method
    if request_headers is not None:
        headers["Access-Control-Request-Headers"] = request_headers
    return headers


def http_scope(method: str = "GET", headers: dict[str, str] | None = None) -> Scope:
    """Build a minimal HTTP scope for calling middleware directly."""
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or {}).items()
    ]
    return {
        "type": "http",
        "path": "/",
        "method": method,
        "headers": raw_headers,
        "query_string": b"",
    }
