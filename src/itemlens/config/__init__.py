"""Application configuration helpers."""

from __future__ import annotations

from .authoring import AuthoringConfig, get_authoring_config
from .edge import DEFAULT_EDGE_ENDPOINT, EdgeConfig, get_edge_config
from .env import optional_env_var, require_env_vars, require_http_url
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .pipeline import (
    DEFAULT_EXCLUDED_PATH_PREFIXES,
    DEFAULT_SYSTEM_FIELDS,
    PipelineConfig,
    get_pipeline_config,
)

__all__ = [
    "DEFAULT_EDGE_ENDPOINT",
    "DEFAULT_EXCLUDED_PATH_PREFIXES",
    "DEFAULT_SYSTEM_FIELDS",
    "AuthoringConfig",
    "ConfigurationError",
    "EdgeConfig",
    "MissingConfigurationError",
    "PipelineConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "get_authoring_config",
    "get_edge_config",
    "get_pipeline_config",
    "optional_env_var",
    "require_env_vars",
    "require_http_url",
]
