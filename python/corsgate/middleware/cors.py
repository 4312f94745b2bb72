"""Pure ASGI CORS middleware.

Each request is classified as one of:
- non-CORS (no Origin header): passed through untouched
- simple (Origin present, not OPTIONS): passed through, CORS headers injected
  on the http.response.start message when the origin is permitted
- preflight (Origin present, OPTIONS): answered here, the wrapped app never runs

Does not use BaseHTTPMiddleware, so streaming responses are never buffered.
Rejections only happen on preflight: 403 for the origin, 400 for method/headers.
"""

from collections.abc import Callable
from enum import Enum

from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from corsgate.errors import CORSErrorCode
from corsgate.logging import get_logger
from corsgate.policy import SAFELISTED_HEADERS, CORSPolicy, parse_header_list
from corsgate.responses import rejection_response

# Inbound
ORIGIN_HEADER = "Origin"
REQUEST_METHOD_HEADER = "Access-Control-Request-Method"
REQUEST_HEADERS_HEADER = "Access-Control-Request-Headers"

# Outbound
ALLOW_ORIGIN_HEADER = "Access-Control-Allow-Origin"
ALLOW_METHODS_HEADER = "Access-Control-Allow-Methods"
ALLOW_HEADERS_HEADER = "Access-Control-Allow-Headers"
EXPOSE_HEADERS_HEADER = "Access-Control-Expose-Headers"
ALLOW_CREDENTIALS_HEADER = "Access-Control-Allow-Credentials"
MAX_AGE_HEADER = "Access-Control-Max-Age"
VARY_HEADER = "Vary"

OPTIONS_METHOD = "OPTIONS"

logger = get_logger(__name__)


class RequestKind(str, Enum):
    """How a request relates to CORS."""

    NON_CORS = "non_cors"
    SIMPLE = "simple"
    PREFLIGHT = "preflight"


def classify_request(method: str, origin: str | None) -> RequestKind:
    """Classify a request from its method and Origin header.

    Every cross-origin OPTIONS request is a preflight, including one that
    lacks Access-Control-Request-Method (it is then rejected with 400).
    """
    if not origin:
        return RequestKind.NON_CORS
    if method.upper() == OPTIONS_METHOD:
        return RequestKind.PREFLIGHT
    return RequestKind.SIMPLE


class CORSMiddleware:
    """Pure ASGI middleware enforcing a CORSPolicy in front of one app.

    Args:
        app: The downstream ASGI application.
        policy: The CORS policy; the default policy when omitted.
    """

    def __init__(self, app: ASGIApp, policy: CORSPolicy | None = None):
        self.app = app
        self.policy = policy if policy is not None else CORSPolicy()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope["method"].upper()
        if self.policy.ignore_options and method == OPTIONS_METHOD:
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        origin = headers.get(ORIGIN_HEADER)
        kind = classify_request(method, origin)

        if kind is RequestKind.NON_CORS:
            await self.app(scope, receive, send)
            return

        if kind is RequestKind.PREFLIGHT:
            response = self.preflight_response(origin, headers)
            await response(scope, receive, send)
            return

        if self.policy.is_origin_allowed(origin):
            cors_headers = self.simple_headers(origin)
        else:
            # The browser enforces the block; the request itself is still served
            logger.debug("cors_origin_not_allowed", origin=origin, method=method)
            cors_headers = {}

        if not cors_headers and not self.policy.varies_by_origin:
            await self.app(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                resp_headers = MutableHeaders(scope=message)
                for name, value in cors_headers.items():
                    resp_headers[name] = value
                if self.policy.varies_by_origin:
                    resp_headers.add_vary_header(ORIGIN_HEADER)
            await send(message)

        await self.app(scope, receive, send_with_cors)

    def simple_headers(self, origin: str) -> dict[str, str]:
        """CORS headers for an actual (non-preflight) response from a permitted origin."""
        policy = self.policy
        headers = {ALLOW_ORIGIN_HEADER: policy.allow_origin_value(origin)}
        if policy.exposed_headers:
            headers[EXPOSE_HEADERS_HEADER] = ",".join(policy.exposed_headers)
        if policy.allow_credentials:
            headers[ALLOW_CREDENTIALS_HEADER] = "true"
        return headers

    def preflight_response(self, origin: str, headers: Headers) -> Response:
        """Build the terminal response for a preflight request."""
        policy = self.policy

        if not policy.is_origin_allowed(origin):
            return self._reject(
                CORSErrorCode.E_CORS_ORIGIN_FORBIDDEN, "Origin not allowed", origin=origin
            )

        requested_method = headers.get(REQUEST_METHOD_HEADER)
        if not requested_method:
            return self._reject(
                CORSErrorCode.E_CORS_METHOD_MISSING,
                f"Missing {REQUEST_METHOD_HEADER} header",
                origin=origin,
            )
        if not policy.is_method_allowed(requested_method):
            return self._reject(
                CORSErrorCode.E_CORS_METHOD_NOT_ALLOWED,
                f"Method {requested_method} not allowed",
                origin=origin,
                method=requested_method,
            )

        requested_headers = parse_header_list(headers.get(REQUEST_HEADERS_HEADER))
        disallowed = [h for h in requested_headers if not policy.is_header_allowed(h)]
        if disallowed:
            return self._reject(
                CORSErrorCode.E_CORS_HEADER_NOT_ALLOWED,
                f"Headers not allowed: {', '.join(disallowed)}",
                origin=origin,
                method=requested_method,
                headers=disallowed,
            )

        response_headers = {
            ALLOW_ORIGIN_HEADER: policy.allow_origin_value(origin),
            ALLOW_METHODS_HEADER: ",".join(policy.allowed_methods),
        }

        echoed = [h for h in dict.fromkeys(requested_headers) if h not in SAFELISTED_HEADERS]
        if echoed:
            response_headers[ALLOW_HEADERS_HEADER] = ",".join(echoed)
        if policy.allow_credentials:
            response_headers[ALLOW_CREDENTIALS_HEADER] = "true"
        if policy.max_age > 0:
            response_headers[MAX_AGE_HEADER] = str(policy.max_age)
        if policy.varies_by_origin:
            response_headers[VARY_HEADER] = ORIGIN_HEADER

        return Response(status_code=policy.preflight_status_code, headers=response_headers)

    def _reject(self, code: CORSErrorCode, message: str, **log_fields) -> Response:
        logger.debug("cors_preflight_rejected", reason=code.value, **log_fields)
        response = rejection_response(code, message)
        if self.policy.varies_by_origin:
            response.headers.add_vary_header(ORIGIN_HEADER)
        return response


def cors(policy: CORSPolicy | None = None) -> Callable[[ASGIApp], ASGIApp]:
    """Return a decorator wrapping an ASGI app in CORSMiddleware.

    Usage:
        app = cors(CORSPolicy(allowed_origins=["https://example.com"]))(app)
    """
    policy = policy if policy is not None else CORSPolicy()

    def wrap(app: ASGIApp) -> ASGIApp:
        return CORSMiddleware(app, policy=policy)

    return wrap
