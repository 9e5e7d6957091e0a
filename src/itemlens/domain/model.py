"""Domain records shared by every pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .identifiers import try_canonicalize_id

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .errors import SourceQueryFailedError


class Source(StrEnum):
    AUTHORING = "authoring"
    LIVE = "live"


class PublicationStatus(StrEnum):
    """How an item's live copy relates to its authoring copy."""

    PUBLISHED = "published"
    OUTDATED = "outdated"
    NOT_PUBLISHED = "not_published"
    UNKNOWN = "unknown"
    MISSING = "missing"


class IssueKind(StrEnum):
    CONTEXT_ID_UNRESOLVED = "context_id_unresolved"
    SOURCE_QUERY_FAILED = "source_query_failed"
    PATH_RESOLUTION_EXHAUSTED = "path_resolution_exhausted"
    NESTED_VALIDATION_FAILED = "nested_validation_failed"


@dataclass(frozen=True, slots=True)
class ItemField:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class Entity:
    """One item as reported by a single source."""

    id: str
    name: str
    source: Source
    path: str | None = None
    template_name: str | None = None
    language: str | None = None
    version: int | None = None
    display_name: str | None = None
    fields: tuple[ItemField, ...] = ()

    def field_value(self, name: str) -> str | None:
        for item_field in self.fields:
            if item_field.name == name:
                return item_field.value
        return None


@dataclass(frozen=True, slots=True)
class ParentReference:
    id: str
    name: str
    path: str | None = None
    display_name: str | None = None

    @classmethod
    def from_entity(cls, entity: Entity) -> ParentReference:
        return cls(
            id=entity.id,
            name=entity.name,
            path=entity.path,
            display_name=entity.display_name,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "displayName": self.display_name,
        }


@dataclass(frozen=True, slots=True)
class CycleIssue:
    """A recoverable problem that degraded a cycle without aborting it."""

    kind: IssueKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": str(self.kind), "message": self.message}


@dataclass(slots=True)
class SourceResult:
    """Alias-keyed entities returned by one source, or the marker of its failure."""

    source: Source
    items: dict[str, Entity | None] = field(default_factory=dict[str, "Entity | None"])
    error: SourceQueryFailedError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def entities(self) -> list[Entity]:
        return [entity for entity in self.items.values() if entity is not None]


@dataclass(slots=True)
class DualSourceResult:
    """Both sources' answers for one batch, plus the alias to identifier index."""

    authoring: SourceResult
    live: SourceResult
    aliases: dict[str, str] = field(default_factory=dict[str, str])

    @classmethod
    def empty(cls) -> DualSourceResult:
        return cls(authoring=SourceResult(Source.AUTHORING), live=SourceResult(Source.LIVE))

    @property
    def identifiers(self) -> list[str]:
        return list(self.aliases.values())


@dataclass(frozen=True, slots=True)
class ProcessedItem:
    id: str
    authoring: Entity | None
    live: Entity | None
    status: PublicationStatus
    discrepancies: tuple[str, ...] = ()
    parents: tuple[ParentReference, ...] = ()
    is_current: bool = False
    is_nested: bool = False

    @property
    def name(self) -> str | None:
        if self.authoring is not None:
            return self.authoring.name
        return self.live.name if self.live is not None else None

    @property
    def has_version_mismatch(self) -> bool:
        return "version" in self.discrepancies

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "status": str(self.status),
            "isCurrent": self.is_current,
            "isNested": self.is_nested,
            "discrepancies": list(self.discrepancies),
            "authoring": _entity_to_dict(self.authoring),
            "live": _entity_to_dict(self.live),
            "parents": [parent.to_dict() for parent in self.parents],
        }


@dataclass(frozen=True, slots=True)
class ItemInformationResponse:
    """Summary of one completed fetch cycle."""

    items: tuple[ProcessedItem, ...]
    current_item_id: str | None
    language: str
    source_errors: Mapping[Source, str] = field(default_factory=dict["Source", str])
    issues: tuple[CycleIssue, ...] = ()

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def nested_count(self) -> int:
        return sum(1 for item in self.items if item.is_nested)

    def count(self, status: PublicationStatus) -> int:
        return sum(1 for item in self.items if item.status is status)

    @property
    def current_item(self) -> ProcessedItem | None:
        if self.current_item_id is None:
            return None
        return self.item(self.current_item_id)

    def item(self, identifier: str) -> ProcessedItem | None:
        canonical = try_canonicalize_id(identifier)
        if canonical is None:
            return None
        for item in self.items:
            if item.id == canonical:
                return item
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "currentItemId": self.current_item_id,
            "language": self.language,
            "summary": {
                "total": self.total,
                "nested": self.nested_count,
                **{str(status): self.count(status) for status in PublicationStatus},
            },
            "sourceErrors": {
                str(source): message for source, message in self.source_errors.items()
            },
            "issues": [issue.to_dict() for issue in self.issues],
            "items": [item.to_dict() for item in self.items],
        }


def _entity_to_dict(entity: Entity | None) -> dict[str, object] | None:
    if entity is None:
        return None
    return {
        "id": entity.id,
        "name": entity.name,
        "path": entity.path,
        "template": entity.template_name,
        "language": entity.language,
        "version": entity.version,
        "displayName": entity.display_name,
        "fields": {item_field.name: item_field.value for item_field in entity.fields},
    }
