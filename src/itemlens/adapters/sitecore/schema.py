"""Pydantic models describing authoring and Experience Edge GraphQL payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _coerce_version(value: object) -> object:
    # The authoring schema reports versions as numbers, some Edge tenants as strings.
    if isinstance(value, str):
        stripped = value.strip()
        return int(stripped) if stripped.isdigit() else None
    return value


class SitecoreBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NamedPayload(SitecoreBaseModel):
    name: str


class FieldNodePayload(SitecoreBaseModel):
    name: str
    value: str | None = None


class FieldConnectionPayload(SitecoreBaseModel):
    nodes: list[FieldNodePayload] = Field(default_factory=list[FieldNodePayload])


class AuthoringItemPayload(SitecoreBaseModel):
    item_id: str = Field(alias="itemId")
    name: str
    display_name: str | None = Field(default=None, alias="displayName")
    path: str | None = None
    version: int | None = None
    template: NamedPayload | None = None
    language: NamedPayload | None = None
    field_nodes: FieldConnectionPayload | None = Field(default=None, alias="fields")

    _normalize_display_name = field_validator("display_name", mode="before")(_blank_to_none)
    _normalize_version = field_validator("version", mode="before")(_coerce_version)


class LiveItemPayload(SitecoreBaseModel):
    id: str
    name: str
    path: str | None = None
    version: int | None = None
    language: NamedPayload | None = None

    _normalize_version = field_validator("version", mode="before")(_coerce_version)


class GraphQLErrorPayload(SitecoreBaseModel):
    message: str
    path: list[str | int] | None = None


class GraphQLResponsePayload(SitecoreBaseModel):
    """Top-level ``{"data": ..., "errors": [...]}`` envelope of a GraphQL response."""

    data: dict[str, object] | None = None
    errors: list[GraphQLErrorPayload] = Field(default_factory=list[GraphQLErrorPayload])

    @property
    def error_messages(self) -> tuple[str, ...]:
        return tuple(error.message for error in self.errors)
