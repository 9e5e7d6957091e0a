"""Authoring store lookups routed through the host's GraphQL mutation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from itemlens.config.pipeline import AUTHORING_DATABASE
from itemlens.domain.pipeline.fetcher import item_alias
from itemlens.domain.ports.host import AUTHORING_GRAPHQL_MUTATION

from .queries import (
    authoring_headers_query,
    authoring_items_query,
    authoring_paths_query,
    path_alias,
)
from .schema import AuthoringItemPayload
from .translator import authoring_entity, parse_aliased, parse_path_lookup, unwrap_graphql_data

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.domain.model import Entity
    from itemlens.domain.ports.host import HostClient

log = getLogger(__name__)


def authoring_mutation_params(query: str, *, context_id: str | None) -> dict[str, object]:
    """Build the host mutation params; the context id travels as a query parameter."""

    return {
        "query": {"sitecoreContextId": context_id} if context_id else {},
        "body": {"query": query},
    }


@dataclass(slots=True)
class AuthoringGateway:
    host: HostClient
    database: str = AUTHORING_DATABASE

    async def fetch_items(
        self,
        ids: Sequence[str],
        *,
        context_id: str | None,
        language: str,
    ) -> dict[str, Entity | None]:
        if not ids:
            return {}
        query = authoring_items_query(ids, language=language, database=self.database)
        data = await self._execute(query, context_id=context_id)
        aliases = [item_alias(index) for index in range(len(ids))]
        return parse_aliased(data, aliases, AuthoringItemPayload, authoring_entity)

    async def fetch_item_headers(
        self,
        ids: Sequence[str],
        *,
        context_id: str | None,
        language: str,
    ) -> dict[str, Entity | None]:
        if not ids:
            return {}
        query = authoring_headers_query(ids, language=language, database=self.database)
        data = await self._execute(query, context_id=context_id)
        aliases = [item_alias(index) for index in range(len(ids))]
        return parse_aliased(data, aliases, AuthoringItemPayload, authoring_entity)

    async def lookup_paths(
        self,
        paths: Sequence[str],
        *,
        context_id: str | None,
        language: str,
    ) -> list[str | None]:
        if not paths:
            return []
        query = authoring_paths_query(paths, language=language, database=self.database)
        data = await self._execute(query, context_id=context_id)
        return parse_path_lookup(data, [path_alias(index) for index in range(len(paths))])

    async def _execute(self, query: str, *, context_id: str | None) -> Mapping[str, object]:
        if not context_id:
            log.debug("No context id available for authoring GraphQL query")
        envelope = await self.host.mutate(
            AUTHORING_GRAPHQL_MUTATION,
            params=authoring_mutation_params(query, context_id=context_id),
        )
        return unwrap_graphql_data(envelope.get("data"), label="authoring")
