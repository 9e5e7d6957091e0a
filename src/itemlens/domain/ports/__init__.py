"""Domain port definitions for adapters."""

from __future__ import annotations

from .host import (
    APPLICATION_CONTEXT_QUERY,
    AUTHORING_GRAPHQL_MUTATION,
    PAGE_CONTEXT_QUERY,
    HostClient,
)
from .sources import AuthoringSource, ItemSource

__all__ = [
    "APPLICATION_CONTEXT_QUERY",
    "AUTHORING_GRAPHQL_MUTATION",
    "PAGE_CONTEXT_QUERY",
    "AuthoringSource",
    "HostClient",
    "ItemSource",
]
