"""Experience Edge (live store) configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, require_env_vars, require_http_url
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig

DEFAULT_EDGE_ENDPOINT = "https://edge.sitecorecloud.io/api/graphql/v1"
EDGE_TIMEOUT_SECONDS = 15.0
EDGE_API_KEY_HEADER = "sc_apikey"


@dataclass(frozen=True, slots=True)
class EdgeConfig:
    """Endpoint and credential for direct calls against the live store."""

    endpoint: str
    api_key: str
    resilience: ResilienceConfig

    def __post_init__(self) -> None:
        if not self.api_key.strip():
            raise ConfigurationError("Edge API key must not be blank")
        require_http_url(self.endpoint, label="Edge endpoint")

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Type": "application/json", EDGE_API_KEY_HEADER: self.api_key}


def get_edge_config(*, resilience: ResilienceConfig | None = None) -> EdgeConfig:
    values = require_env_vars(("SITECORE_EDGE_TOKEN",))
    endpoint = optional_env_var("SITECORE_EDGE_ENDPOINT", DEFAULT_EDGE_ENDPOINT)
    return EdgeConfig(
        endpoint=endpoint,
        api_key=values["SITECORE_EDGE_TOKEN"],
        resilience=resilience
        or ResilienceConfig(name="edge", timeout_seconds=EDGE_TIMEOUT_SECONDS),
    )
