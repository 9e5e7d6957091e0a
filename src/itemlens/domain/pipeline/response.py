"""Project merged pipeline data into per-item records and a summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

from itemlens.domain.model import (
    ItemInformationResponse,
    ProcessedItem,
    PublicationStatus,
    Source,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.domain.model import CycleIssue, Entity, ParentReference

    from .merge import MergedItems
    from .references import ReferenceGraph


def compare_sources(authoring: Entity | None, live: Entity | None) -> tuple[str, ...]:
    """Return the names of the attributes that differ between both copies."""

    if authoring is None or live is None:
        return ()
    discrepancies: list[str] = []
    if (
        authoring.version is not None
        and live.version is not None
        and authoring.version != live.version
    ):
        discrepancies.append("version")
    if authoring.name != live.name:
        discrepancies.append("name")
    return tuple(discrepancies)


def publication_status(
    authoring: Entity | None,
    live: Entity | None,
    *,
    live_failed: bool,
    authoring_failed: bool = False,
    discrepancies: Sequence[str] = (),
) -> PublicationStatus:
    if authoring_failed:
        return PublicationStatus.UNKNOWN
    if authoring is None:
        return PublicationStatus.MISSING
    if live_failed:
        return PublicationStatus.UNKNOWN
    if live is None:
        return PublicationStatus.NOT_PUBLISHED
    if "version" in discrepancies:
        return PublicationStatus.OUTDATED
    return PublicationStatus.PUBLISHED


def build_processed_item(
    identifier: str,
    merged: MergedItems,
    *,
    parents: tuple[ParentReference, ...],
    current_item_id: str | None,
) -> ProcessedItem:
    authoring = merged.entity(Source.AUTHORING, identifier)
    live = merged.entity(Source.LIVE, identifier)
    discrepancies = compare_sources(authoring, live)
    status = publication_status(
        authoring,
        live,
        live_failed=merged.source_failed_for(Source.LIVE, identifier),
        authoring_failed=merged.source_failed_for(Source.AUTHORING, identifier),
        discrepancies=discrepancies,
    )
    return ProcessedItem(
        id=identifier,
        authoring=authoring,
        live=live,
        status=status,
        discrepancies=discrepancies,
        parents=parents,
        is_current=identifier == current_item_id,
        is_nested=identifier in merged.nested_ids,
    )


def build_response(
    merged: MergedItems,
    references: ReferenceGraph,
    *,
    current_item_id: str | None,
    language: str,
    issues: Sequence[CycleIssue] = (),
) -> ItemInformationResponse:
    items = tuple(
        build_processed_item(
            identifier,
            merged,
            parents=references.parents_of(identifier),
            current_item_id=current_item_id,
        )
        for identifier in merged.identifiers
    )
    return ItemInformationResponse(
        items=items,
        current_item_id=current_item_id,
        language=language,
        source_errors=dict(merged.source_errors),
        issues=tuple(issues),
    )
