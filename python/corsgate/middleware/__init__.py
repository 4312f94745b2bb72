"""Middleware modules for corsgate."""

from corsgate.middleware.cors import CORSMiddleware, RequestKind, classify_request, cors

__all__ = ["CORSMiddleware", "RequestKind", "classify_request", "cors"]
