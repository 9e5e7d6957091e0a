"""Parallel authoring/live lookup for one batch of item ids."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from itemlens.domain.errors import SourceQueryFailedError
from itemlens.domain.model import DualSourceResult, Source, SourceResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.domain.ports.sources import AuthoringSource, ItemSource

log = getLogger(__name__)


def item_alias(index: int) -> str:
    return f"item{index}"


@dataclass(slots=True)
class DualSourceFetcher:
    authoring: AuthoringSource
    live: ItemSource

    async def fetch(
        self,
        ids: Sequence[str],
        *,
        context_id: str | None,
        language: str,
    ) -> DualSourceResult:
        if not ids:
            return DualSourceResult.empty()

        authoring_result, live_result = await asyncio.gather(
            _guarded(self.authoring, Source.AUTHORING, ids, context_id, language),
            _guarded(self.live, Source.LIVE, ids, context_id, language),
        )
        aliases = {item_alias(index): identifier for index, identifier in enumerate(ids)}
        return DualSourceResult(authoring=authoring_result, live=live_result, aliases=aliases)


async def _guarded(
    source: ItemSource,
    kind: Source,
    ids: Sequence[str],
    context_id: str | None,
    language: str,
) -> SourceResult:
    try:
        items = await source.fetch_items(ids, context_id=context_id, language=language)
    except Exception as exc:
        log.exception("Error querying %s source for %d items", kind, len(ids))
        return SourceResult(source=kind, error=SourceQueryFailedError(kind, str(exc) or repr(exc)))
    return SourceResult(source=kind, items=items)
