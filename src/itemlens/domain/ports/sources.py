"""Ports for fetching items from the authoring and live stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.domain.model import Entity


@runtime_checkable
class ItemSource(Protocol):
    """One batched round trip for a list of canonical ids.

    The result is keyed by positional alias (``item0`` for ``ids[0]`` and so
    on); a missing item maps to ``None``. Implementations raise on transport
    or payload failure and leave recovery to the caller.
    """

    async def fetch_items(
        self,
        ids: Sequence[str],
        *,
        context_id: str | None,
        language: str,
    ) -> dict[str, Entity | None]: ...


@runtime_checkable
class AuthoringSource(ItemSource, Protocol):
    """Authoring store lookups beyond the full item fetch."""

    async def fetch_item_headers(
        self,
        ids: Sequence[str],
        *,
        context_id: str | None,
        language: str,
    ) -> dict[str, Entity | None]:
        """Light lookup returning id, name and path only (no fields)."""
        ...

    async def lookup_paths(
        self,
        paths: Sequence[str],
        *,
        context_id: str | None,
        language: str,
    ) -> list[str | None]:
        """Return the canonical id found at each absolute path, positionally."""
        ...
