from __future__ import annotations

import asyncio

import httpx
import pytest

from itemlens.adapters.sitecore import EdgeItemSource
from itemlens.app import ItemInformationService, build_service
from itemlens.domain.errors import ContextUnavailableError, NoIdentifiersError
from itemlens.domain.model import PublicationStatus
from itemlens.domain.pipeline import CycleStage
from tests.helpers.content import (
    ContentTree,
    FakeHost,
    LiveEndpoint,
    edge_config,
    make_client_factory,
)
from tests.helpers.ids import AUTHOR_ID, DRAFT_ID, HEADER_ID, PAGE_ID


@pytest.fixture
def service(host: FakeHost, edge_source: EdgeItemSource) -> ItemInformationService:
    return build_service(host, live=edge_source)


def test_full_cycle_publishes_the_response(service: ItemInformationService) -> None:
    state = service.run_full_cycle()

    assert state.error is None
    assert state.loading is False
    assert state.data is not None
    assert state.data.current_item_id == PAGE_ID
    assert len(state.items) == 5
    assert service.current_result == state
    assert service.last_stages[-2:] == (CycleStage.BUILT, CycleStage.IDLE)


def test_identifiers_run_with_explicit_language(
    service: ItemInformationService, host: FakeHost
) -> None:
    state = service.run_for_identifiers([HEADER_ID, AUTHOR_ID], language="de")

    assert state.data is not None
    assert state.data.language == "de"
    assert [item.id for item in state.items] == [HEADER_ID, AUTHOR_ID, DRAFT_ID]
    assert all('language: "de"' in query for query in host.queries)


def test_empty_identifier_list_falls_back_to_page_context(
    service: ItemInformationService,
) -> None:
    state = service.run_for_identifiers([])

    assert state.data is not None
    assert state.data.current_item_id == PAGE_ID


def test_fatal_error_clears_published_data(
    service: ItemInformationService, host: FakeHost
) -> None:
    assert service.run_full_cycle().data is not None

    host.page_context = None
    state = service.run_full_cycle()

    assert state.data is None
    assert state.items == ()
    assert state.error is not None
    assert state.error.startswith("Failed to read page context")


def test_async_entry_points_re_raise_fatal_errors(
    service: ItemInformationService, host: FakeHost
) -> None:
    host.page_context = {"pageInfo": {"path": "/sitecore/content/Site"}}

    with pytest.raises(NoIdentifiersError):
        asyncio.run(service.run_full_cycle_async())
    assert service.current_result.error is not None
    assert service.current_result.loading is False

    host.page_context = None
    with pytest.raises(ContextUnavailableError):
        asyncio.run(service.run_for_identifiers_async([]))


def test_reset_forgets_the_last_result(service: ItemInformationService) -> None:
    service.run_full_cycle()

    service.reset()

    assert service.current_result.data is None
    assert service.current_result.error is None
    assert service.last_stages == ()


def test_force_refresh_recovers_after_an_error(
    service: ItemInformationService, host: FakeHost, page_context: dict[str, object]
) -> None:
    host.page_context = None
    assert service.run_full_cycle().error is not None

    host.page_context = page_context
    state = service.force_refresh()

    assert state.error is None
    assert state.data is not None
    assert state.data.count(PublicationStatus.OUTDATED) == 1

    response = asyncio.run(service.force_refresh_async())
    assert response.total == 5


def test_loading_flag_is_raised_while_a_cycle_runs(host: FakeHost, tree: ContentTree) -> None:
    endpoint = LiveEndpoint(tree=tree)
    observed: list[bool] = []

    def handler(request: httpx.Request) -> httpx.Response:
        observed.append(service.current_result.loading)
        return endpoint(request)

    service = build_service(
        host,
        live=EdgeItemSource(config=edge_config(), client_factory=make_client_factory(handler)),
    )

    state = service.run_full_cycle()

    assert observed == [True, True]
    assert state.loading is False
