"""Standalone host: contexts from JSON documents, authoring GraphQL over HTTP.

Used by the command line, where no embedding application supplies page or
application contexts. The authoring mutation is forwarded to the configured
authoring endpoint with a bearer token.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from itemlens.adapters.http_resilience import ResilientClient, default_client_factory
from itemlens.config.authoring import get_authoring_config
from itemlens.domain.ports.host import (
    APPLICATION_CONTEXT_QUERY,
    AUTHORING_GRAPHQL_MUTATION,
    PAGE_CONTEXT_QUERY,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from itemlens.config.authoring import AuthoringConfig
    from itemlens.config.http_resilience import ResilienceConfig
    from itemlens.domain.ports.host import HostClient

log = getLogger(__name__)


class HostRequestError(RuntimeError):
    """Raised when the standalone host cannot answer a query or mutation."""


def load_context_document(path: Path) -> dict[str, object]:
    """Read a JSON context document; raises ``ValueError`` on unreadable or non-object files."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ValueError(f"Cannot read context file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"Context file {path} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"Context file {path} must contain a JSON object")
    return payload


@dataclass(slots=True)
class HttpHostClient:
    config: AuthoringConfig = field(default_factory=get_authoring_config)
    contexts: dict[str, Mapping[str, object]] = field(
        default_factory=dict[str, "Mapping[str, object]"]
    )
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )

    @classmethod
    def from_files(
        cls,
        *,
        page_context: Path | None = None,
        app_context: Path | None = None,
        context_id: str | None = None,
        config: AuthoringConfig | None = None,
    ) -> HttpHostClient:
        contexts: dict[str, Mapping[str, object]] = {}
        if page_context is not None:
            contexts[PAGE_CONTEXT_QUERY] = load_context_document(page_context)
        if app_context is not None:
            contexts[APPLICATION_CONTEXT_QUERY] = load_context_document(app_context)
        elif context_id:
            contexts[APPLICATION_CONTEXT_QUERY] = {"sitecoreContextId": context_id}
        return cls(config=config or get_authoring_config(), contexts=contexts)

    async def query(self, key: str) -> Mapping[str, object]:
        if key not in self.contexts:
            raise HostRequestError(f"No {key} document was provided")
        return {"data": self.contexts[key]}

    async def mutate(self, key: str, *, params: Mapping[str, object]) -> Mapping[str, object]:
        if key != AUTHORING_GRAPHQL_MUTATION:
            raise HostRequestError(f"Unsupported host mutation: {key}")
        query_params = params.get("query")
        body = params.get("body")
        async with self.client_factory(self.config.resilience) as client:
            response = await client.post(
                self.config.endpoint,
                params=dict(query_params) if isinstance(query_params, dict) else None,
                json=body,
                headers=self.config.headers,
            )
        response.raise_for_status()
        log.debug("Authoring endpoint responded %s", response.status_code)
        return {"data": response.json()}


if TYPE_CHECKING:
    _host_check: HostClient = HttpHostClient()
