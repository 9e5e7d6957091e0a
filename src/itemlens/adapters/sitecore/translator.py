"""Translate GraphQL item payloads into domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ValidationError

from itemlens.domain.errors import GraphQLResponseError
from itemlens.domain.identifiers import try_canonicalize_id
from itemlens.domain.model import Entity, ItemField, Source

from .schema import AuthoringItemPayload, GraphQLResponsePayload, LiveItemPayload

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

log = getLogger(__name__)


def unwrap_graphql_data(payload: object, *, label: str) -> Mapping[str, object]:
    """Return the ``data`` object of a GraphQL response.

    Field-level ``errors`` next to usable data are logged and tolerated; a
    response without a ``data`` object raises ``GraphQLResponseError``.
    """

    if not isinstance(payload, Mapping):
        raise GraphQLResponseError(f"{label} response is not a JSON object")
    try:
        response = GraphQLResponsePayload.model_validate(payload)
    except ValidationError as exc:
        raise GraphQLResponseError(f"Malformed {label} response: {exc}") from exc

    if response.errors:
        log.warning("%s GraphQL errors: %s", label, "; ".join(response.error_messages))
    if response.data is None:
        detail = "; ".join(response.error_messages) or "no data in response"
        raise GraphQLResponseError(
            f"{label} response carried no data: {detail}", errors=response.error_messages
        )
    return response.data


def authoring_entity(payload: AuthoringItemPayload) -> Entity | None:
    identifier = try_canonicalize_id(payload.item_id)
    if identifier is None:
        log.warning("Ignoring authoring item with malformed id %r", payload.item_id)
        return None
    nodes = payload.field_nodes.nodes if payload.field_nodes is not None else []
    return Entity(
        id=identifier,
        name=payload.name,
        source=Source.AUTHORING,
        path=payload.path,
        template_name=payload.template.name if payload.template else None,
        language=payload.language.name if payload.language else None,
        version=payload.version,
        display_name=payload.display_name,
        fields=tuple(ItemField(name=node.name, value=node.value or "") for node in nodes),
    )


def live_entity(payload: LiveItemPayload) -> Entity | None:
    identifier = try_canonicalize_id(payload.id)
    if identifier is None:
        log.warning("Ignoring live item with malformed id %r", payload.id)
        return None
    return Entity(
        id=identifier,
        name=payload.name,
        source=Source.LIVE,
        path=payload.path,
        language=payload.language.name if payload.language else None,
        version=payload.version,
    )


def parse_aliased[P: BaseModel](
    data: Mapping[str, object],
    aliases: Iterable[str],
    model: type[P],
    translate: Callable[[P], Entity | None],
) -> dict[str, Entity | None]:
    """Translate every aliased selection; absent or ``null`` aliases map to ``None``."""

    entities: dict[str, Entity | None] = {}
    for alias in aliases:
        raw = data.get(alias)
        if raw is None:
            entities[alias] = None
            continue
        try:
            entities[alias] = translate(model.model_validate(raw))
        except ValidationError:
            log.warning("Skipping malformed %s payload for %s", model.__name__, alias)
            entities[alias] = None
    return entities


def parse_path_lookup(data: Mapping[str, object], aliases: Iterable[str]) -> list[str | None]:
    """Return the item id each path alias resolved to, positionally."""

    found: list[str | None] = []
    for alias in aliases:
        raw = data.get(alias)
        item_id = raw.get("itemId") if isinstance(raw, Mapping) else None
        found.append(try_canonicalize_id(item_id))
    return found
