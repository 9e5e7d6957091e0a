from __future__ import annotations

import json

import pytest

from itemlens.adapters.sitecore import EdgeItemSource
from tests.helpers.content import (
    ContentItem,
    ContentTree,
    FakeHost,
    LiveEndpoint,
    edge_config,
    make_client_factory,
)
from tests.helpers.ids import (
    AUTHOR_ID,
    BODY_ID,
    DRAFT_ID,
    HEADER_ID,
    PAGE_ID,
    PAGE_PATH,
    TEMPLATE_ID,
)


@pytest.fixture
def tree() -> ContentTree:
    content = ContentTree()
    content.add(
        ContentItem(
            id=PAGE_ID,
            name="Article",
            path=PAGE_PATH,
            version=3,
            fields={
                "Title": "Hello",
                "Author": f"{{{AUTHOR_ID}}}",
                "__Created by": f"{{{DRAFT_ID}}}",
            },
        ),
        live_version=2,
    )
    content.add(
        ContentItem(
            id=HEADER_ID,
            name="Article Header",
            path="/sitecore/content/Site/Shared/Article Header",
            fields={"Related": f"{{{DRAFT_ID}}}|{{{TEMPLATE_ID}}}"},
        )
    )
    content.add(
        ContentItem(
            id=BODY_ID,
            name="Article Body",
            path=f"{PAGE_PATH}/Data/Article Body",
            fields={"Text": f'<link linktype="internal" id="{{{PAGE_ID}}}" />'},
        )
    )
    content.add(
        ContentItem(id=AUTHOR_ID, name="Jane", path="/sitecore/content/Site/Authors/Jane")
    )
    content.add(
        ContentItem(
            id=TEMPLATE_ID,
            name="Article Template",
            path="/sitecore/templates/Project/Article",
        )
    )
    content.add(
        ContentItem(id=DRAFT_ID, name="Draft", path="/sitecore/content/Site/Drafts/Draft"),
        published=False,
    )
    return content


@pytest.fixture
def page_context() -> dict[str, object]:
    renderings = {
        "devices": [
            {
                "renderings": [
                    {"dataSource": f"{{{HEADER_ID}}}"},
                    {"dataSource": "local:/Data/Article Body"},
                    {"dataSource": ""},
                ]
            }
        ]
    }
    return {
        "pageInfo": {
            "id": PAGE_ID.lower(),
            "path": PAGE_PATH,
            "language": "en",
            "presentationDetails": json.dumps(renderings),
        }
    }


@pytest.fixture
def host(tree: ContentTree, page_context: dict[str, object]) -> FakeHost:
    return FakeHost(tree=tree, page_context=page_context)


@pytest.fixture
def live_endpoint(tree: ContentTree) -> LiveEndpoint:
    return LiveEndpoint(tree=tree)


@pytest.fixture
def edge_source(live_endpoint: LiveEndpoint) -> EdgeItemSource:
    return EdgeItemSource(config=edge_config(), client_factory=make_client_factory(live_endpoint))
