"""corsgate: CORS policy enforcement as pure ASGI middleware."""

from corsgate.middleware.cors import CORSMiddleware, RequestKind, classify_request, cors
from corsgate.policy import MAX_AGE_CEILING, CORSPolicy

__all__ = [
    "CORSMiddleware",
    "CORSPolicy",
    "MAX_AGE_CEILING",
    "RequestKind",
    "classify_request",
    "cors",
]
