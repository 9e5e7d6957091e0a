"""GraphQL documents for batched item lookups.

Every lookup of ``n`` ids or paths is a single document with ``n`` aliased
``item`` selections (``item0`` .. ``item{n-1}``, or ``path0`` .. for path
lookups), so one round trip covers the whole batch.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from itemlens.domain.identifiers import braced
from itemlens.domain.pipeline.fetcher import item_alias

if TYPE_CHECKING:
    from collections.abc import Sequence

AUTHORING_ITEM_SELECTION = """
    itemId
    name
    displayName
    path
    version
    template { name }
    language { name }
    fields { nodes { name value } }
"""

AUTHORING_HEADER_SELECTION = """
    itemId
    name
    path
"""

LIVE_ITEM_SELECTION = """
    id
    name
    path
    version
    language { name }
"""


def path_alias(index: int) -> str:
    return f"path{index}"


def _literal(value: str) -> str:
    # JSON string escaping is valid GraphQL string escaping.
    return json.dumps(value)


def _document(operation: str, selections: list[str]) -> str:
    body = "\n".join(selections)
    return f"query {operation} {{\n{body}\n}}"


def _authoring_where(*, database: str, language: str, **keys: str) -> str:
    conditions = [f"database: {_literal(database)}"]
    conditions.extend(f"{key}: {_literal(value)}" for key, value in keys.items())
    conditions.append(f"language: {_literal(language)}")
    return "{ " + " ".join(conditions) + " }"


def authoring_items_query(ids: Sequence[str], *, language: str, database: str) -> str:
    selections = [
        f"  {item_alias(index)}: item(where: "
        f"{_authoring_where(database=database, language=language, itemId=identifier)}) "
        f"{{{AUTHORING_ITEM_SELECTION}}}"
        for index, identifier in enumerate(ids)
    ]
    return _document("GetAuthoringItems", selections)


def authoring_headers_query(ids: Sequence[str], *, language: str, database: str) -> str:
    selections = [
        f"  {item_alias(index)}: item(where: "
        f"{_authoring_where(database=database, language=language, itemId=identifier)}) "
        f"{{{AUTHORING_HEADER_SELECTION}}}"
        for index, identifier in enumerate(ids)
    ]
    return _document("ValidateReferencedItems", selections)


def authoring_paths_query(paths: Sequence[str], *, language: str, database: str) -> str:
    selections = [
        f"  {path_alias(index)}: item(where: "
        f"{_authoring_where(database=database, language=language, path=path)}) "
        f"{{{AUTHORING_HEADER_SELECTION}}}"
        for index, path in enumerate(paths)
    ]
    return _document("ResolveLocalDatasources", selections)


def live_items_query(ids: Sequence[str], *, language: str) -> str:
    """Live items are addressed by braced, hyphenated id passed as ``path``."""

    selections = [
        f"  {item_alias(index)}: item(path: {_literal(braced(identifier))}, "
        f"language: {_literal(language)}) {{{LIVE_ITEM_SELECTION}}}"
        for index, identifier in enumerate(ids)
    ]
    return _document("GetLiveItems", selections)
