"""Resolve page-relative datasource paths to item ids.

Local datasources are stored relative to the page that owns them, but where
exactly they live under the page differs between sites. The resolver tries an
ordered cascade of path-construction strategies with one batched lookup per
strategy. Each strategy only queries the paths still unresolved, so the
cascade stops as soon as every path has an id, and an entry resolved by an
earlier strategy is never replaced by a later one.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from itemlens.config.pipeline import PipelineConfig
from itemlens.domain.identifiers import try_canonicalize_id

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.domain.ports.sources import AuthoringSource

log = getLogger(__name__)

type PathBuilder = Callable[[str, str], str]
type ResolvedPaths = dict[str, str | None]


@dataclass(frozen=True, slots=True)
class PathStrategy:
    name: str
    build: PathBuilder


def _join(*parts: str) -> str:
    cleaned = [part.strip("/") for part in parts if part.strip("/")]
    prefix = "/" if parts and parts[0].startswith("/") else ""
    return prefix + "/".join(cleaned)


def default_strategies(config: PipelineConfig | None = None) -> tuple[PathStrategy, ...]:
    active = config or PipelineConfig()
    data_folder = active.data_folder
    grouping = active.grouping_prefix

    def strip_grouping(local_path: str) -> str:
        return local_path.replace(grouping, "", 1) if grouping else local_path

    return (
        PathStrategy("direct", lambda local, base: _join(base, local)),
        PathStrategy("data-folder", lambda local, base: _join(base, data_folder, local)),
        PathStrategy("strip-grouping", lambda local, base: _join(base, strip_grouping(local))),
        PathStrategy(
            "data-folder-stripped",
            lambda local, base: _join(base, data_folder, strip_grouping(local)),
        ),
    )


@dataclass(slots=True)
class DatasourcePathResolver:
    authoring: AuthoringSource
    strategies: tuple[PathStrategy, ...] = field(default_factory=default_strategies)

    async def resolve(
        self,
        local_paths: Sequence[str],
        *,
        base_path: str,
        context_id: str | None,
        language: str,
    ) -> ResolvedPaths:
        """Return a mapping of every local path to its item id, or ``None`` if unresolved."""

        paths = list(dict.fromkeys(local_paths))
        resolved: ResolvedPaths = dict.fromkeys(paths)
        if not paths:
            return resolved

        for strategy in self.strategies:
            # Only unresolved paths are sent; earlier hits are never overwritten.
            pending = [path for path in paths if resolved[path] is None]
            if not pending:
                break
            full_paths = [strategy.build(path, base_path) for path in pending]
            try:
                found = await self.authoring.lookup_paths(
                    full_paths, context_id=context_id, language=language
                )
            except Exception:
                log.exception("Error in path resolution strategy %s", strategy.name)
                continue

            hits = 0
            for path, item_id in zip(pending, found, strict=False):
                canonical = try_canonicalize_id(item_id)
                if canonical is not None:
                    resolved[path] = canonical
                    hits += 1
            log.debug("Strategy %s resolved %d of %d paths", strategy.name, hits, len(pending))

        unresolved = [path for path, item_id in resolved.items() if item_id is None]
        if unresolved:
            log.warning("Could not resolve local datasource paths: %s", ", ".join(unresolved))
        return resolved
