"""CORS policy schema.

A CORSPolicy is built once (keyword fields or Settings.to_policy()) and then
shared read-only by every request the middleware serves. The model is frozen,
so concurrent requests never need a lock.

Normalization applied at construction:
- Methods are upper-cased
- Header names are canonicalized (X-CORS-TEST -> X-Cors-Test)
- The safelisted request headers are always part of allowed_headers
- max_age is capped at MAX_AGE_CEILING
"""

import re
from collections.abc import Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

WILDCARD = "*"

# Fixed policy ceiling for Access-Control-Max-Age, in seconds
MAX_AGE_CEILING = 600

# Request headers a preflight may always carry without configuration
SAFELISTED_HEADERS: tuple[str, ...] = ("Accept", "Accept-Language", "Content-Language", "Origin")

DEFAULT_METHODS: tuple[str, ...] = ("GET", "HEAD", "POST")


def canonical_header_key(name: str) -> str:
    """Canonicalize a header name: first letter and letters after '-' upper-cased."""
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.strip().split("-"))


def normalize_origin(origin: str) -> str:
    """Normalize an origin for comparison (case-insensitive, trailing slash ignored)."""
    return origin.strip().rstrip("/").lower()


def parse_header_list(value: str | None) -> list[str]:
    """Parse a comma-separated header list into canonical names, skipping empty items."""
    if not value:
        return []
    return [canonical_header_key(item) for item in value.split(",") if item.strip()]


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


class CORSPolicy(BaseModel):
    """Immutable CORS configuration.

    Attributes:
        allowed_origins: Origins permitted to receive CORS headers; "*" allows any.
        allowed_origin_regex: Pattern an origin may fully match instead of a literal.
            Only consulted when allowed_origins has no wildcard.
        allowed_origin_validator: When set, the only judge of origin permission.
        allowed_methods: Methods permitted for cross-origin requests.
        allowed_headers: Request headers permitted in a preflight.
        exposed_headers: Headers exposed to browser scripts on actual responses.
        allow_credentials: Whether credentialed requests are permitted.
        max_age: Preflight cache duration in seconds (0 omits the header).
        ignore_options: If True, OPTIONS requests bypass CORS handling entirely.
        preflight_status_code: Status of a successful preflight response.
    """

    allowed_origins: tuple[str, ...] = (WILDCARD,)
    allowed_origin_regex: str | None = None
    allowed_origin_validator: Callable[[str], bool] | None = None
    allowed_methods: tuple[str, ...] = DEFAULT_METHODS
    allowed_headers: tuple[str, ...] = SAFELISTED_HEADERS
    exposed_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = Field(default=0, ge=0)
    ignore_options: bool = False
    preflight_status_code: int = Field(default=200, ge=200, le=299)

    model_config = ConfigDict(frozen=True)

    @field_validator("allowed_origins")
    @classmethod
    def strip_origins(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(o.strip() for o in v if o.strip())

    @field_validator("allowed_origin_regex")
    @classmethod
    def validate_origin_regex(cls, v: str | None) -> str | None:
        """Reject patterns that do not compile."""
        if v is None:
            return None
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"allowed_origin_regex is not a valid pattern: {e}") from e
        return v

    @field_validator("allowed_methods")
    @classmethod
    def upper_methods(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(m.strip().upper() for m in v if m.strip())

    @field_validator("allowed_headers")
    @classmethod
    def include_safelisted_headers(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Configured headers extend the safelisted defaults, never replace them."""
        return _dedupe(
            [*SAFELISTED_HEADERS, *(canonical_header_key(h) for h in v if h.strip())]
        )

    @field_validator("exposed_headers")
    @classmethod
    def canonicalize_exposed_headers(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(canonical_header_key(h) for h in v if h.strip())

    @field_validator("max_age")
    @classmethod
    def cap_max_age(cls, v: int) -> int:
        return min(v, MAX_AGE_CEILING)

    @property
    def allows_any_origin(self) -> bool:
        """Whether the wildcard origin is configured."""
        return WILDCARD in self.allowed_origins

    @property
    def varies_by_origin(self) -> bool:
        """Whether responses differ per request origin and need Vary: Origin."""
        return (
            len(self.allowed_origins) > 1
            or self.allowed_origin_regex is not None
            or self.allowed_origin_validator is not None
        )

    def is_origin_allowed(self, origin: str) -> bool:
        """Check whether a request origin is permitted by this policy."""
        if self.allowed_origin_validator is not None:
            return bool(self.allowed_origin_validator(origin))
        if self.allows_any_origin:
            return True

        normalized = normalize_origin(origin)
        if any(normalize_origin(allowed) == normalized for allowed in self.allowed_origins):
            return True

        if self.allowed_origin_regex is not None:
            return re.fullmatch(self.allowed_origin_regex, origin, re.IGNORECASE) is not None
        return False

    def is_method_allowed(self, method: str) -> bool:
        return method.strip().upper() in self.allowed_methods

    def is_header_allowed(self, header: str) -> bool:
        """Case-insensitive membership test against allowed_headers."""
        wanted = header.strip().lower()
        return any(allowed.lower() == wanted for allowed in self.allowed_headers)

    def allow_origin_value(self, origin: str) -> str:
        """Value for Access-Control-Allow-Origin.

        The wildcard is only emitted when credentials are off and no validator
        decides per origin; otherwise the request origin is echoed.
        """
        if (
            self.allows_any_origin
            and not self.allow_credentials
            and self.allowed_origin_validator is None
        ):
            return WILDCARD
        return origin
