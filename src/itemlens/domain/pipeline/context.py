"""Read item ids, paths and the tenant context id out of host context blobs.

The host owns the shape of its page and application contexts and omits
fields freely. Every value is therefore read through a ``FieldProbe``: an
explicit, prioritized list of ``ExtractionRule`` key paths tried in order.
Rules are plain data, so the probing order can be tested (and extended)
without a live host.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, TypeGuard

from itemlens.config.pipeline import DEFAULT_LANGUAGE
from itemlens.domain.errors import ContextIdUnresolvedError, NoIdentifiersError
from itemlens.domain.identifiers import try_canonicalize_id, unique_ids

if TYPE_CHECKING:
    from collections.abc import Iterator

log = getLogger(__name__)

WILDCARD = "*"
LOCAL_DATASOURCE_PREFIX = "local:"

type PathSegment = str | int


@dataclass(frozen=True, slots=True)
class ExtractionRule:
    """A key path into a nested blob.

    Segments are mapping keys, list indexes, or ``"*"`` to fan out over every
    element of a list or mapping. A string met before the path is exhausted
    is decoded as JSON, since hosts sometimes ship nested documents as text.
    """

    path: tuple[PathSegment, ...]

    @classmethod
    def parse(cls, dotted: str) -> ExtractionRule:
        segments: list[PathSegment] = []
        for part in dotted.split("."):
            segments.append(int(part) if part.isdigit() else part)
        return cls(path=tuple(segments))

    def __str__(self) -> str:
        return ".".join(str(segment) for segment in self.path)

    def values(self, blob: object) -> Iterator[object]:
        yield from _walk(blob, self.path)


def _walk(node: object, path: tuple[PathSegment, ...]) -> Iterator[object]:
    if not path:
        if node is not None:
            yield node
        return
    if isinstance(node, str):
        node = _decode_json(node)
    segment, rest = path[0], path[1:]
    if segment == WILDCARD:
        if isinstance(node, Mapping):
            for child in node.values():
                yield from _walk(child, rest)
        elif _is_list(node):
            for child in node:
                yield from _walk(child, rest)
        return
    if isinstance(segment, int):
        if _is_list(node) and -len(node) <= segment < len(node):
            yield from _walk(node[segment], rest)
        return
    if isinstance(node, Mapping) and segment in node:
        yield from _walk(node[segment], rest)


def _is_list(node: object) -> TypeGuard[Sequence[object]]:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes))


def _decode_json(text: str) -> object:
    stripped = text.strip()
    if not stripped.startswith(("{", "[")):
        return None
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        return None


@dataclass(frozen=True, slots=True)
class FieldProbe:
    rules: tuple[ExtractionRule, ...]

    @classmethod
    def of(cls, *dotted: str) -> FieldProbe:
        return cls(rules=tuple(ExtractionRule.parse(path) for path in dotted))

    def first(self, blob: object) -> str | None:
        """Return the first non-blank string any rule yields, trying rules in order."""

        for rule in self.rules:
            for value in rule.values(blob):
                if isinstance(value, str) and value.strip():
                    return value.strip()
        return None

    def collect(self, blob: object) -> list[str]:
        """Return every non-blank string yielded by every rule, in rule order."""

        found: list[str] = []
        for rule in self.rules:
            found.extend(
                value.strip()
                for value in rule.values(blob)
                if isinstance(value, str) and value.strip()
            )
        return found


CURRENT_ITEM_PROBE = FieldProbe.of(
    "pageInfo.id", "pageInfo.itemId", "page.id", "item.id", "itemId", "id"
)
PAGE_PATH_PROBE = FieldProbe.of("pageInfo.path", "page.path", "item.path", "path")
LANGUAGE_PROBE = FieldProbe.of(
    "pageInfo.language",
    "pageInfo.language.name",
    "page.language",
    "language",
    "language.name",
    "siteInfo.language",
)
EDITABLE_ITEMS_PROBE = FieldProbe.of(
    "pageInfo.editableItems.*.id",
    "pageInfo.editableItems.*.itemId",
    "editableItems.*.id",
    "editableItems.*.itemId",
)
DATASOURCE_PROBE = FieldProbe.of(
    "pageInfo.presentationDetails.devices.*.renderings.*.dataSource",
    "pageInfo.presentationDetails.devices.*.renderings.*.datasource",
    "pageInfo.renderings.*.dataSource",
    "renderings.*.dataSource",
)
CONTEXT_ID_PROBE = FieldProbe.of(
    "resourceAccess.0.context.preview",
    "resourceAccess.0.context.live",
    "sitecoreContextId",
    "contextId",
    "resourceAccess.*.context.preview",
    "resourceAccess.*.context.live",
    "resourceAccess.*.context.master",
)


@dataclass(frozen=True, slots=True)
class PageContext:
    """Everything the pipeline needs to know about the page being inspected."""

    item_ids: tuple[str, ...]
    local_paths: tuple[str, ...] = ()
    page_path: str = ""
    language: str = DEFAULT_LANGUAGE

    @property
    def current_item_id(self) -> str | None:
        return self.item_ids[0] if self.item_ids else None


def unwrap_envelope(envelope: object) -> object:
    """Return the payload of a host ``{"data": ...}`` envelope, or ``envelope`` itself."""

    if isinstance(envelope, Mapping) and "data" in envelope:
        return envelope["data"]
    return envelope


def local_datasource_path(value: str) -> str | None:
    if not value.lower().startswith(LOCAL_DATASOURCE_PREFIX):
        return None
    relative = value[len(LOCAL_DATASOURCE_PREFIX) :].strip().lstrip("/")
    return relative or None


@dataclass(frozen=True, slots=True)
class ContextExtractor:
    default_language: str = DEFAULT_LANGUAGE
    current_item: FieldProbe = CURRENT_ITEM_PROBE
    page_path: FieldProbe = PAGE_PATH_PROBE
    language: FieldProbe = LANGUAGE_PROBE
    editable_items: FieldProbe = EDITABLE_ITEMS_PROBE
    datasources: FieldProbe = DATASOURCE_PROBE
    context_id: FieldProbe = CONTEXT_ID_PROBE

    def extract_page(self, envelope: object) -> PageContext:
        """Return the page's item ids (current item first), local paths, base path and language.

        Raises ``NoIdentifiersError`` when the blob yields no usable item id.
        """

        blob = unwrap_envelope(envelope)
        raw_ids: list[str] = []
        current = self.current_item.first(blob)
        if current is not None:
            raw_ids.append(current)
        raw_ids.extend(self.editable_items.collect(blob))

        local_paths: list[str] = []
        for datasource in self.datasources.collect(blob):
            canonical = try_canonicalize_id(datasource)
            if canonical is not None:
                raw_ids.append(canonical)
                continue
            relative = local_datasource_path(datasource)
            if relative is not None and relative not in local_paths:
                local_paths.append(relative)

        item_ids = unique_ids(raw_ids)
        if not item_ids:
            raise NoIdentifiersError
        if current is not None and try_canonicalize_id(current) is None:
            log.warning("Ignoring malformed current item id %r", current)

        return PageContext(
            item_ids=tuple(item_ids),
            local_paths=tuple(local_paths),
            page_path=self.page_path.first(blob) or "",
            language=self.language.first(blob) or self.default_language,
        )

    def extract_context_id(self, envelope: object) -> str:
        """Return the tenant context id or raise ``ContextIdUnresolvedError``."""

        blob = unwrap_envelope(envelope)
        context_id = self.context_id.first(blob)
        if context_id is None:
            raise ContextIdUnresolvedError("Context ID not found in application context")
        return context_id
