"""Port for the host application that embeds the item information panel."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

PAGE_CONTEXT_QUERY = "pages.context"
APPLICATION_CONTEXT_QUERY = "application.context"
AUTHORING_GRAPHQL_MUTATION = "xmc.authoring.graphql"


@runtime_checkable
class HostClient(Protocol):
    """Query/mutation surface exposed by the host.

    Both calls return an envelope whose ``data`` key holds the payload. The
    host controls the payload shape and may omit fields at will.
    """

    async def query(self, key: str) -> Mapping[str, object]: ...

    async def mutate(self, key: str, *, params: Mapping[str, object]) -> Mapping[str, object]: ...
