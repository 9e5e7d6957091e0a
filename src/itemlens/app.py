"""Application entry points: the item information service and its wiring."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from itemlens.adapters.sitecore import AuthoringGateway, EdgeItemSource
from itemlens.config.pipeline import get_pipeline_config
from itemlens.domain.errors import ItemInformationError
from itemlens.domain.pipeline import (
    ContextExtractor,
    DatasourcePathResolver,
    DualSourceFetcher,
    FetchCycle,
    NestedItemValidator,
    ReferenceExtractor,
    default_strategies,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from itemlens.config.pipeline import PipelineConfig
    from itemlens.domain.model import ItemInformationResponse, ProcessedItem
    from itemlens.domain.pipeline import CycleStage
    from itemlens.domain.ports.host import HostClient
    from itemlens.domain.ports.sources import ItemSource

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ItemInformationState:
    """What callers observe: the last published response and the in-flight flag."""

    data: ItemInformationResponse | None = None
    error: str | None = None
    loading: bool = False

    @property
    def items(self) -> tuple[ProcessedItem, ...]:
        return self.data.items if self.data is not None else ()


class ItemInformationService:
    """Runs fetch cycles and publishes their outcome.

    Cycles are never cancelled. When several overlap, each publishes on
    completion and the last one to finish wins.
    """

    def __init__(self, cycle: FetchCycle) -> None:
        self._cycle = cycle
        self._data: ItemInformationResponse | None = None
        self._error: str | None = None
        self._in_flight = 0
        self._last_stages: tuple[CycleStage, ...] = ()

    @property
    def current_result(self) -> ItemInformationState:
        return ItemInformationState(
            data=self._data, error=self._error, loading=self._in_flight > 0
        )

    @property
    def last_stages(self) -> tuple[CycleStage, ...]:
        """Stages visited by the last cycle that completed successfully."""

        return self._last_stages

    def reset(self) -> None:
        self._data = None
        self._error = None
        self._last_stages = ()

    def run_full_cycle(self) -> ItemInformationState:
        """Discover ids from the host page context and publish the result."""

        return self._run_sync(None)

    def run_for_identifiers(
        self, ids: Sequence[str], *, language: str | None = None
    ) -> ItemInformationState:
        """Run a cycle for ``ids``; an empty list falls back to context discovery."""

        return self._run_sync(ids, language=language)

    def force_refresh(self) -> ItemInformationState:
        self.reset()
        return self.run_full_cycle()

    async def run_full_cycle_async(self) -> ItemInformationResponse:
        return await self._run(None)

    async def run_for_identifiers_async(
        self, ids: Sequence[str], *, language: str | None = None
    ) -> ItemInformationResponse:
        return await self._run(ids, language=language)

    async def force_refresh_async(self) -> ItemInformationResponse:
        self.reset()
        return await self._run(None)

    def _run_sync(
        self, ids: Sequence[str] | None, *, language: str | None = None
    ) -> ItemInformationState:
        try:
            asyncio.run(self._run(ids, language=language))
        except ItemInformationError:
            # Already published as the error state.
            pass
        return self.current_result

    async def _run(
        self, ids: Sequence[str] | None, *, language: str | None = None
    ) -> ItemInformationResponse:
        self._in_flight += 1
        try:
            result = await self._cycle.run(ids, language=language)
        except Exception as exc:
            log.exception("Error fetching item information")
            self._data = None
            self._error = str(exc) or type(exc).__name__
            raise
        finally:
            self._in_flight -= 1

        self._data = result.response
        self._error = None
        self._last_stages = result.stages
        log.info(
            "Fetched %d items (%d nested, %d issues)",
            result.response.total,
            result.response.nested_count,
            len(result.response.issues),
        )
        return result.response


def build_fetch_cycle(
    host: HostClient,
    *,
    live: ItemSource | None = None,
    config: PipelineConfig | None = None,
) -> FetchCycle:
    active = config or get_pipeline_config()
    authoring = AuthoringGateway(host=host, database=active.database)
    return FetchCycle(
        host=host,
        fetcher=DualSourceFetcher(authoring=authoring, live=live or EdgeItemSource()),
        resolver=DatasourcePathResolver(authoring=authoring, strategies=default_strategies(active)),
        validator=NestedItemValidator(
            authoring=authoring, excluded_path_prefixes=active.excluded_path_prefixes
        ),
        references=ReferenceExtractor(system_fields=active.system_fields),
        context=ContextExtractor(default_language=active.default_language),
        default_language=active.default_language,
    )


def build_service(
    host: HostClient,
    *,
    live: ItemSource | None = None,
    config: PipelineConfig | None = None,
) -> ItemInformationService:
    """Wire the service against ``host``; ``live`` defaults to the Edge client from env."""

    return ItemInformationService(build_fetch_cycle(host, live=live, config=config))
