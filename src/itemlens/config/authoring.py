"""Authoring GraphQL endpoint configuration for the standalone HTTP host."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars, require_http_url
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

AUTHORING_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True)
class AuthoringConfig:
    endpoint: str
    token: str
    resilience: ResilienceConfig

    def __post_init__(self) -> None:
        if not self.token.strip():
            raise ConfigurationError("Authoring token must not be blank")
        require_http_url(self.endpoint, label="Authoring endpoint")

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", "Authorization": f"Bearer {self.token}"}


def get_authoring_config(*, resilience: ResilienceConfig | None = None) -> AuthoringConfig:
    values = require_env_vars(("SITECORE_AUTHORING_ENDPOINT", "SITECORE_AUTHORING_TOKEN"))
    return AuthoringConfig(
        endpoint=values["SITECORE_AUTHORING_ENDPOINT"],
        token=values["SITECORE_AUTHORING_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="authoring",
            timeout_seconds=AUTHORING_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        ),
    )
