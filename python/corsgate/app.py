"""FastAPI application creation and configuration.

This module creates the demo application the CORS filter is composed onto.
The application itself is opaque to the filter: it only ever sees the
ASGI (scope, receive, send) contract.

Middleware Ordering:
- CORSMiddleware is added LAST so it runs FIRST (outermost)
- Preflight requests are answered before any route or other middleware runs
"""

from fastapi import FastAPI

from corsgate.api.routes import create_api_router
from corsgate.config import get_settings
from corsgate.logging import configure_logging, get_logger
from corsgate.middleware.cors import CORSMiddleware
from corsgate.policy import CORSPolicy

logger = get_logger(__name__)


def create_app(policy: CORSPolicy | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        policy: CORS policy to enforce. Built from settings when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()
    configure_logging(json_format=settings.log_json)

    if policy is None:
        policy = settings.to_policy()

    app = FastAPI(
        title="corsgate",
        description="CORS policy enforcement in front of an ASGI application",
        version="0.1.0",
    )
    app.include_router(create_api_router())

    add_cors_middleware(app, policy)
    return app


def add_cors_middleware(app: FastAPI, policy: CORSPolicy) -> None:
    """Add the CORS middleware to the app.

    This should be called AFTER all other middleware is added, so it runs FIRST.

    Args:
        app: The FastAPI application.
        policy: The CORS policy to enforce.
    """
    app.add_middleware(CORSMiddleware, policy=policy)
    logger.info(
        "cors_middleware_enabled",
        origins=list(policy.allowed_origins),
        methods=list(policy.allowed_methods),
        allow_credentials=policy.allow_credentials,
        max_age=policy.max_age,
        ignore_options=policy.ignore_options,
    )
