"""Tunables for the item information pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var
from .errors import ConfigurationError

DEFAULT_LANGUAGE = "en"
AUTHORING_DATABASE = "master"

# Standard-field metadata that never carries content references.
DEFAULT_SYSTEM_FIELDS = frozenset(
    {
        "__Created",
        "__Created by",
        "__Updated",
        "__Updated by",
        "__Owner",
        "__Revision",
        "__Workflow",
        "__Workflow state",
        "__Lock",
        "__Default workflow",
        "__Standard values",
        "__Originator",
        "__Source",
        "__Source Item",
        "__Base template",
        "__Masters",
        "__Sortorder",
        "__Valid from",
        "__Valid to",
        "__Hide version",
        "__Publish",
        "__Unpublish",
        "__Never publish",
    }
)

DEFAULT_EXCLUDED_PATH_PREFIXES = (
    "/sitecore/system",
    "/sitecore/templates",
    "/sitecore/layout",
)


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    default_language: str = DEFAULT_LANGUAGE
    database: str = AUTHORING_DATABASE
    system_fields: frozenset[str] = field(default_factory=lambda: DEFAULT_SYSTEM_FIELDS)
    excluded_path_prefixes: tuple[str, ...] = DEFAULT_EXCLUDED_PATH_PREFIXES
    data_folder: str = "Data"
    grouping_prefix: str = "Page Components/"

    def __post_init__(self) -> None:
        if not self.default_language.strip():
            raise ConfigurationError("Default language must not be blank")
        if not self.database.strip():
            raise ConfigurationError("Authoring database must not be blank")
        if any(not prefix.startswith("/") for prefix in self.excluded_path_prefixes):
            raise ConfigurationError("Excluded path prefixes must be absolute paths")


def get_pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        default_language=optional_env_var("ITEMLENS_DEFAULT_LANGUAGE", DEFAULT_LANGUAGE),
    )
