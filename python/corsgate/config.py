"""Application settings loaded from environment variables.

Environment Configuration:
    CORSGATE_ENV: Deployment environment (local | test | staging | prod)
    LOG_JSON: Emit JSON logs (true) or console-friendly logs (false)

CORS Policy Configuration:
    CORS_ALLOWED_ORIGINS: Comma-separated origins, "*" for any (default "*")
    CORS_ALLOWED_ORIGIN_REGEX: Pattern an origin may fully match
    CORS_ALLOWED_METHODS: Comma-separated methods (default "GET,HEAD,POST")
    CORS_ALLOWED_HEADERS: Comma-separated extra request headers allowed in preflight
    CORS_EXPOSED_HEADERS: Comma-separated headers exposed to browser scripts
    CORS_ALLOW_CREDENTIALS: Permit credentialed requests (default false)
    CORS_MAX_AGE: Preflight cache duration in seconds, capped at 600 (default 0)
    CORS_IGNORE_OPTIONS: Let OPTIONS requests bypass CORS handling (default false)
    CORS_PREFLIGHT_STATUS_CODE: Status of successful preflights (default 200)

Note: staging/prod refuse a wildcard origin combined with credentials.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from corsgate.policy import WILDCARD, CORSPolicy


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables.
    Validation rules:
    - CORS_MAX_AGE must be >= 0 (values above 600 are capped by the policy)
    - CORS_ALLOWED_ORIGINS=* with CORS_ALLOW_CREDENTIALS=true is rejected in staging and prod
    """

    corsgate_env: Environment = Field(default=Environment.LOCAL, alias="CORSGATE_ENV")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    cors_allowed_origins: str = Field(default=WILDCARD, alias="CORS_ALLOWED_ORIGINS")
    cors_allowed_origin_regex: str | None = Field(default=None, alias="CORS_ALLOWED_ORIGIN_REGEX")
    cors_allowed_methods: str = Field(default="GET,HEAD,POST", alias="CORS_ALLOWED_METHODS")
    cors_allowed_headers: str = Field(default="", alias="CORS_ALLOWED_HEADERS")
    cors_exposed_headers: str = Field(default="", alias="CORS_EXPOSED_HEADERS")
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")
    cors_max_age: int = Field(default=0, ge=0, alias="CORS_MAX_AGE")
    cors_ignore_options: bool = Field(default=False, alias="CORS_IGNORE_OPTIONS")
    cors_preflight_status_code: int = Field(default=200, alias="CORS_PREFLIGHT_STATUS_CODE")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def validate_credentials_with_wildcard(self) -> "Settings":
        """Refuse any-origin credentialed CORS outside local/test."""
        if self.corsgate_env in (Environment.STAGING, Environment.PROD):
            if self.cors_allow_credentials and WILDCARD in self.origin_list:
                raise ValueError(
                    "CORS_ALLOWED_ORIGINS=* cannot be combined with CORS_ALLOW_CREDENTIALS=true "
                    f"for CORSGATE_ENV={self.corsgate_env.value}"
                )
        return self

    @property
    def origin_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return _split_csv(self.cors_allowed_origins)

    @property
    def method_list(self) -> list[str]:
        """Parse comma-separated methods into a list."""
        return _split_csv(self.cors_allowed_methods)

    @property
    def header_list(self) -> list[str]:
        """Parse comma-separated allowed headers into a list."""
        return _split_csv(self.cors_allowed_headers)

    @property
    def exposed_header_list(self) -> list[str]:
        """Parse comma-separated exposed headers into a list."""
        return _split_csv(self.cors_exposed_headers)

    def to_policy(self) -> CORSPolicy:
        """Build the immutable CORS policy described by these settings.

        Raises:
            ValidationError: If the resulting policy is invalid.
        """
        return CORSPolicy(
            allowed_origins=self.origin_list,
            allowed_origin_regex=self.cors_allowed_origin_regex,
            allowed_methods=self.method_list,
            allowed_headers=self.header_list,
            exposed_headers=self.exposed_header_list,
            allow_credentials=self.cors_allow_credentials,
            max_age=self.cors_max_age,
            ignore_options=self.cors_ignore_options,
            preflight_status_code=self.cors_preflight_status_code,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
