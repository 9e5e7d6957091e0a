"""Discover items referenced from authoring field text.

References are not modelled by any schema: list and link fields store the ids
of their targets as plain text (``{ID}|{ID}``, ``<link id="{ID}" />``, ...).
The extractor scans every content field of the primary items, one hop deep,
and keeps a child -> parents map. Self references and mutual references are
ordinary map entries; there is no traversal, so no cycle handling is needed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from itemlens.config.pipeline import DEFAULT_SYSTEM_FIELDS
from itemlens.domain.identifiers import find_embedded_ids
from itemlens.domain.model import ParentReference

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from itemlens.domain.model import Entity


@dataclass(slots=True)
class ReferenceGraph:
    """Candidates for a nested fetch plus every parent link that was seen."""

    candidates: list[str] = field(default_factory=list[str])
    parents: dict[str, list[ParentReference]] = field(
        default_factory=dict[str, list[ParentReference]]
    )

    def add_link(self, child_id: str, parent: ParentReference) -> None:
        linked = self.parents.setdefault(child_id, [])
        if all(existing.id != parent.id for existing in linked):
            linked.append(parent)

    def add_candidate(self, child_id: str) -> None:
        if child_id not in self.candidates:
            self.candidates.append(child_id)

    def parents_of(self, child_id: str) -> tuple[ParentReference, ...]:
        return tuple(self.parents.get(child_id, ()))


@dataclass(frozen=True, slots=True)
class ReferenceExtractor:
    system_fields: frozenset[str] = DEFAULT_SYSTEM_FIELDS

    def extract(self, entities: Iterable[Entity], *, known_ids: Collection[str]) -> ReferenceGraph:
        """Scan ``entities`` and return nested candidates not already in ``known_ids``."""

        graph = ReferenceGraph()
        for entity in entities:
            parent = ParentReference.from_entity(entity)
            for item_field in entity.fields:
                if item_field.name in self.system_fields or not item_field.value:
                    continue
                for child_id in find_embedded_ids(item_field.value):
                    graph.add_link(child_id, parent)
                    if child_id not in known_ids:
                        graph.add_candidate(child_id)
        return graph
