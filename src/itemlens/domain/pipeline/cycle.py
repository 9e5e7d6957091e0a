"""One fetch cycle, from host context to a unified item response.

Stages run strictly in order; parallel work inside a stage (the
authoring/live fan-out) is joined before the next stage starts. Everything a
cycle gathers stays in its own ``CycleTrace`` until the response is built, so
a caller never observes a half-finished cycle. Only failing to determine any
item id is fatal; every other failure is logged, recorded as a
``CycleIssue`` and the cycle continues with what it has.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from itemlens.config.pipeline import DEFAULT_LANGUAGE
from itemlens.domain.errors import (
    ContextIdUnresolvedError,
    ContextUnavailableError,
    NoIdentifiersError,
)
from itemlens.domain.identifiers import unique_ids
from itemlens.domain.model import CycleIssue, DualSourceResult, IssueKind
from itemlens.domain.ports.host import APPLICATION_CONTEXT_QUERY, PAGE_CONTEXT_QUERY

from .context import ContextExtractor, PageContext
from .merge import merge_results
from .references import ReferenceExtractor, ReferenceGraph
from .response import build_response

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.domain.model import ItemInformationResponse
    from itemlens.domain.ports.host import HostClient

    from .fetcher import DualSourceFetcher
    from .path_resolver import DatasourcePathResolver
    from .validation import NestedItemValidator

log = getLogger(__name__)


class CycleStage(StrEnum):
    IDLE = "idle"
    EXTRACTING_CONTEXT = "extracting_context"
    RESOLVING_CONTEXT_ID = "resolving_context_id"
    RESOLVING_LOCAL_PATHS = "resolving_local_paths"
    FETCHING_PRIMARY = "fetching_primary"
    EXTRACTING_REFERENCES = "extracting_references"
    VALIDATING_AND_FETCHING_NESTED = "validating_and_fetching_nested"
    MERGING = "merging"
    BUILT = "built"


@dataclass(slots=True)
class CycleTrace:
    """Private accumulator of one cycle: visited stages and recoverable issues."""

    stages: list[CycleStage] = field(default_factory=lambda: [CycleStage.IDLE])
    issues: list[CycleIssue] = field(default_factory=list[CycleIssue])

    @property
    def stage(self) -> CycleStage:
        return self.stages[-1]

    def enter(self, stage: CycleStage) -> None:
        log.debug("Cycle stage %s -> %s", self.stage, stage)
        self.stages.append(stage)

    def record(self, kind: IssueKind, message: str) -> None:
        log.warning("%s: %s", kind, message)
        self.issues.append(CycleIssue(kind=kind, message=message))


@dataclass(frozen=True, slots=True)
class CycleResult:
    response: ItemInformationResponse
    stages: tuple[CycleStage, ...]


@dataclass(slots=True)
class FetchCycle:
    host: HostClient
    fetcher: DualSourceFetcher
    resolver: DatasourcePathResolver
    validator: NestedItemValidator
    references: ReferenceExtractor = field(default_factory=ReferenceExtractor)
    context: ContextExtractor = field(default_factory=ContextExtractor)
    default_language: str = DEFAULT_LANGUAGE

    async def run(
        self,
        item_ids: Sequence[str] | None = None,
        *,
        language: str | None = None,
    ) -> CycleResult:
        """Run every stage and return the built response.

        ``item_ids`` bypasses page-context discovery when non-empty; the first
        id is treated as the current item. Raises ``ContextUnavailableError``
        (or ``NoIdentifiersError``) when no item id can be determined.
        """

        trace = CycleTrace()

        trace.enter(CycleStage.EXTRACTING_CONTEXT)
        page = await self._page_context(item_ids, language=language)
        log.info("Fetching information for initial items: %s", ", ".join(page.item_ids))

        trace.enter(CycleStage.RESOLVING_CONTEXT_ID)
        context_id = await self._context_id(trace)

        trace.enter(CycleStage.RESOLVING_LOCAL_PATHS)
        resolved_local = await self._resolve_local_paths(page, context_id, trace)
        main_ids = list(dict.fromkeys((*page.item_ids, *resolved_local)))

        trace.enter(CycleStage.FETCHING_PRIMARY)
        primary = await self.fetcher.fetch(main_ids, context_id=context_id, language=page.language)
        _record_source_failures(primary, trace, label="primary")

        trace.enter(CycleStage.EXTRACTING_REFERENCES)
        graph = self.references.extract(primary.authoring.entities(), known_ids=set(main_ids))
        log.debug(
            "Found %d referenced items outside the main set (%d linked children)",
            len(graph.candidates),
            len(graph.parents),
        )

        trace.enter(CycleStage.VALIDATING_AND_FETCHING_NESTED)
        nested = await self._fetch_nested(graph, context_id, page.language, trace)

        trace.enter(CycleStage.MERGING)
        merged = merge_results(
            primary, nested, original=page.item_ids, resolved_local=resolved_local
        )

        trace.enter(CycleStage.BUILT)
        response = build_response(
            merged,
            graph,
            current_item_id=page.current_item_id,
            language=page.language,
            issues=trace.issues,
        )
        trace.enter(CycleStage.IDLE)
        return CycleResult(response=response, stages=tuple(trace.stages))

    async def _page_context(
        self,
        item_ids: Sequence[str] | None,
        *,
        language: str | None,
    ) -> PageContext:
        if item_ids:
            explicit = unique_ids(item_ids)
            if not explicit:
                raise NoIdentifiersError("No valid item IDs provided")
            return PageContext(
                item_ids=tuple(explicit), language=language or self.default_language
            )

        try:
            envelope = await self.host.query(PAGE_CONTEXT_QUERY)
        except Exception as exc:
            raise ContextUnavailableError(f"Failed to read page context: {exc}") from exc
        page = self.context.extract_page(envelope)
        if language:
            return PageContext(
                item_ids=page.item_ids,
                local_paths=page.local_paths,
                page_path=page.page_path,
                language=language,
            )
        return page

    async def _context_id(self, trace: CycleTrace) -> str | None:
        try:
            envelope = await self.host.query(APPLICATION_CONTEXT_QUERY)
            return self.context.extract_context_id(envelope)
        except ContextIdUnresolvedError as exc:
            trace.record(IssueKind.CONTEXT_ID_UNRESOLVED, str(exc))
        except Exception as exc:  # noqa: BLE001
            trace.record(
                IssueKind.CONTEXT_ID_UNRESOLVED, f"Failed to get application context: {exc}"
            )
        return None

    async def _resolve_local_paths(
        self,
        page: PageContext,
        context_id: str | None,
        trace: CycleTrace,
    ) -> list[str]:
        if not page.local_paths:
            return []
        if context_id is None:
            log.info(
                "Skipping %d local datasource paths without a context id", len(page.local_paths)
            )
            return []

        resolved = await self.resolver.resolve(
            page.local_paths,
            base_path=page.page_path,
            context_id=context_id,
            language=page.language,
        )
        found: list[str] = []
        for local_path, item_id in resolved.items():
            if item_id is None:
                trace.record(
                    IssueKind.PATH_RESOLUTION_EXHAUSTED,
                    f"Could not resolve local datasource {local_path!r} under {page.page_path!r}",
                )
            elif item_id not in found:
                found.append(item_id)
        return found

    async def _fetch_nested(
        self,
        graph: ReferenceGraph,
        context_id: str | None,
        language: str,
        trace: CycleTrace,
    ) -> DualSourceResult:
        try:
            accepted = await self.validator.validate(
                graph.candidates, context_id=context_id, language=language
            )
        except Exception as exc:  # noqa: BLE001
            trace.record(
                IssueKind.NESTED_VALIDATION_FAILED,
                f"Could not validate {len(graph.candidates)} referenced items: {exc}",
            )
            return DualSourceResult.empty()

        nested = await self.fetcher.fetch(accepted, context_id=context_id, language=language)
        _record_source_failures(nested, trace, label="nested")
        return nested


def _record_source_failures(result: DualSourceResult, trace: CycleTrace, *, label: str) -> None:
    for source_result in (result.authoring, result.live):
        if source_result.error is not None:
            trace.record(IssueKind.SOURCE_QUERY_FAILED, f"{label}: {source_result.error}")
