"""Filter discovered references down to content items worth a full fetch."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from itemlens.config.pipeline import DEFAULT_EXCLUDED_PATH_PREFIXES

from .fetcher import item_alias

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.domain.model import Entity
    from itemlens.domain.ports.sources import AuthoringSource

log = getLogger(__name__)


def is_excluded_path(path: str | None, prefixes: Sequence[str]) -> bool:
    """Return ``True`` for empty paths and paths starting with any of ``prefixes``.

    Item paths are case-insensitive, so the comparison is too.
    """

    if not path or not path.strip():
        return True
    lowered = path.strip().lower()
    return any(lowered.startswith(prefix.lower()) for prefix in prefixes)


@dataclass(frozen=True, slots=True)
class NestedItemValidator:
    authoring: AuthoringSource
    excluded_path_prefixes: tuple[str, ...] = DEFAULT_EXCLUDED_PATH_PREFIXES

    async def validate(
        self,
        candidates: Sequence[str],
        *,
        context_id: str | None,
        language: str,
    ) -> list[str]:
        """Return the candidates, in order, that resolve to non-system items.

        Raises whatever the light authoring lookup raises; the caller decides
        how a failed validation degrades the cycle.
        """

        if not candidates:
            return []

        headers = await self.authoring.fetch_item_headers(
            candidates, context_id=context_id, language=language
        )
        accepted: list[str] = []
        for index, candidate in enumerate(candidates):
            header: Entity | None = headers.get(item_alias(index))
            path = header.path if header is not None else None
            if is_excluded_path(path, self.excluded_path_prefixes):
                log.debug("Skipping nested item %s at %r", candidate, path)
                continue
            accepted.append(candidate)
        log.info("Accepted %d of %d referenced items", len(accepted), len(candidates))
        return accepted
