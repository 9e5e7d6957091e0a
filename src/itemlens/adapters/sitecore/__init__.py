"""Public interface for the Sitecore authoring and Experience Edge adapters."""

from __future__ import annotations

from .authoring import AuthoringGateway, authoring_mutation_params
from .edge import EdgeItemSource
from .host import HostRequestError, HttpHostClient, load_context_document
from .schema import AuthoringItemPayload, GraphQLResponsePayload, LiveItemPayload
from .translator import authoring_entity, live_entity, unwrap_graphql_data

__all__ = [
    "AuthoringGateway",
    "AuthoringItemPayload",
    "EdgeItemSource",
    "GraphQLResponsePayload",
    "HostRequestError",
    "HttpHostClient",
    "LiveItemPayload",
    "authoring_entity",
    "authoring_mutation_params",
    "live_entity",
    "load_context_document",
    "unwrap_graphql_data",
]
