"""Combine primary and nested lookups into one identifier space."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from itemlens.domain.model import Source

from .fetcher import item_alias

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.domain.model import DualSourceResult, Entity, SourceResult


@dataclass(slots=True)
class MergedItems:
    """Alias-keyed entities per source spanning both fetch passes.

    Nested aliases continue the primary numbering (``item{len(primary) + k}``)
    so the two passes never collide. ``aliases`` maps every alias back to its
    canonical id; pairing authoring with live data goes through that index.
    """

    identifiers: tuple[str, ...] = ()
    nested_ids: frozenset[str] = frozenset()
    aliases: dict[str, str] = field(default_factory=dict[str, str])
    authoring: dict[str, Entity | None] = field(default_factory=dict[str, "Entity | None"])
    live: dict[str, Entity | None] = field(default_factory=dict[str, "Entity | None"])
    failed: dict[Source, set[str]] = field(
        default_factory=lambda: {Source.AUTHORING: set[str](), Source.LIVE: set[str]()}
    )
    source_errors: dict[Source, str] = field(default_factory=dict[Source, str])
    _alias_by_id: dict[str, str] = field(default_factory=dict[str, str], repr=False)

    def add_alias(self, identifier: str) -> str | None:
        """Register ``identifier`` under the next synthetic alias; ``None`` if already known."""

        if identifier in self._alias_by_id:
            return None
        alias = item_alias(len(self.aliases))
        self.aliases[alias] = identifier
        self._alias_by_id[identifier] = alias
        return alias

    def entity(self, source: Source, identifier: str) -> Entity | None:
        alias = self._alias_by_id.get(identifier)
        if alias is None:
            return None
        by_alias = self.authoring if source is Source.AUTHORING else self.live
        return by_alias.get(alias)

    def source_failed_for(self, source: Source, identifier: str) -> bool:
        return identifier in self.failed[source]


def unified_identifiers(
    original: Sequence[str],
    resolved_local: Sequence[str],
    nested: Sequence[str],
) -> tuple[str, ...]:
    """Original ids first, then resolved local ids, then nested ids, each id once."""

    return tuple(dict.fromkeys((*original, *resolved_local, *nested)))


def merge_results(
    primary: DualSourceResult,
    nested: DualSourceResult,
    *,
    original: Sequence[str],
    resolved_local: Sequence[str],
) -> MergedItems:
    primary_ids = set(primary.identifiers)
    merged = MergedItems(
        identifiers=unified_identifiers(original, resolved_local, nested.identifiers),
        nested_ids=frozenset(nested.identifiers) - primary_ids,
    )
    _absorb(merged, primary)
    _absorb(merged, nested)
    return merged


def _absorb(merged: MergedItems, result: DualSourceResult) -> None:
    renamed: dict[str, str] = {}
    for alias, identifier in result.aliases.items():
        new_alias = merged.add_alias(identifier)
        if new_alias is not None:
            renamed[alias] = new_alias

    _copy_source(merged, result.authoring, merged.authoring, renamed)
    _copy_source(merged, result.live, merged.live, renamed)


def _copy_source(
    merged: MergedItems,
    source_result: SourceResult,
    target: dict[str, Entity | None],
    renamed: dict[str, str],
) -> None:
    if source_result.error is None:
        for alias, new_alias in renamed.items():
            target[new_alias] = source_result.items.get(alias)
        return

    merged.failed[source_result.source].update(merged.aliases[alias] for alias in renamed.values())
    message = str(source_result.error)
    previous = merged.source_errors.get(source_result.source)
    if previous is not None and previous != message:
        message = f"{previous}; {message}"
    merged.source_errors[source_result.source] = message
