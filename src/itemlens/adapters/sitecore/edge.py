"""HTTP client for the Experience Edge (live) GraphQL endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from itemlens.adapters.http_resilience import ResilientClient, default_client_factory
from itemlens.config.edge import get_edge_config
from itemlens.domain.pipeline.fetcher import item_alias

from .queries import live_items_query
from .schema import LiveItemPayload
from .translator import live_entity, parse_aliased, unwrap_graphql_data

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from itemlens.config.edge import EdgeConfig
    from itemlens.config.http_resilience import ResilienceConfig
    from itemlens.domain.model import Entity
    from itemlens.domain.ports.sources import ItemSource

log = getLogger(__name__)


@dataclass(slots=True)
class EdgeItemSource:
    """Live-store lookups. The tenant context id is not used by Edge."""

    config: EdgeConfig = field(default_factory=get_edge_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )

    async def fetch_items(
        self,
        ids: Sequence[str],
        *,
        context_id: str | None,  # noqa: ARG002
        language: str,
    ) -> dict[str, Entity | None]:
        if not ids:
            return {}
        data = await self._perform_request(live_items_query(ids, language=language))
        aliases = [item_alias(index) for index in range(len(ids))]
        return parse_aliased(data, aliases, LiveItemPayload, live_entity)

    async def _perform_request(self, query: str) -> Mapping[str, object]:
        async with self.client_factory(self.config.resilience) as client:
            response = await client.post(
                self.config.endpoint,
                json={"query": query},
                headers=self.config.headers,
            )
        response.raise_for_status()
        log.debug("Edge responded %s", response.status_code)
        return unwrap_graphql_data(response.json(), label="live")


if TYPE_CHECKING:
    _source_check: ItemSource = EdgeItemSource()
