"""Stages of the item information fetch cycle."""

from __future__ import annotations

from .context import ContextExtractor, ExtractionRule, FieldProbe, PageContext
from .cycle import CycleResult, CycleStage, FetchCycle
from .fetcher import DualSourceFetcher, item_alias
from .merge import MergedItems, merge_results
from .path_resolver import DatasourcePathResolver, PathStrategy, default_strategies
from .references import ReferenceExtractor, ReferenceGraph
from .response import build_response, compare_sources, publication_status
from .validation import NestedItemValidator, is_excluded_path

__all__ = [
    "ContextExtractor",
    "CycleResult",
    "CycleStage",
    "DatasourcePathResolver",
    "DualSourceFetcher",
    "ExtractionRule",
    "FetchCycle",
    "FieldProbe",
    "MergedItems",
    "NestedItemValidator",
    "PageContext",
    "PathStrategy",
    "ReferenceExtractor",
    "ReferenceGraph",
    "build_response",
    "compare_sources",
    "default_strategies",
    "is_excluded_path",
    "item_alias",
    "merge_results",
    "publication_status",
]
