"""In-memory content tree served through fake host and Edge transports."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import httpx

from itemlens.adapters.http_resilience import ResilientClient
from itemlens.config.edge import EdgeConfig
from itemlens.config.http_resilience import ResilienceConfig
from itemlens.domain.identifiers import canonicalize_id
from itemlens.domain.ports.host import (
    APPLICATION_CONTEXT_QUERY,
    AUTHORING_GRAPHQL_MUTATION,
    PAGE_CONTEXT_QUERY,
)

CONTEXT_ID = "ctx-preview-1234"

_AUTHORING_SELECTION = re.compile(r"(\w+): item\(where: \{ (.*?) \}\)")
_WHERE_KEY = re.compile(r'(itemId|path): ("(?:[^"\\]|\\.)*")')
_LIVE_SELECTION = re.compile(r'(\w+): item\(path: ("(?:[^"\\]|\\.)*"), language: "([^"]*)"\)')


def compact(identifier: str) -> str:
    return canonicalize_id(identifier).replace("-", "")


@dataclass
class ContentItem:
    id: str
    name: str
    path: str
    version: int = 1
    template: str = "Sample Item"
    display_name: str | None = None
    fields: dict[str, str] = field(default_factory=dict[str, str])

    def authoring_payload(self, language: str) -> dict[str, object]:
        # Authoring GraphQL reports ids lower case without hyphens.
        return {
            "itemId": compact(self.id).lower(),
            "name": self.name,
            "displayName": self.display_name or self.name,
            "path": self.path,
            "version": self.version,
            "template": {"name": self.template},
            "language": {"name": language},
            "fields": {
                "nodes": [{"name": name, "value": value} for name, value in self.fields.items()]
            },
        }


@dataclass
class LiveCopy:
    name: str
    path: str
    version: int


@dataclass
class ContentTree:
    authoring: dict[str, ContentItem] = field(default_factory=dict[str, ContentItem])
    live: dict[str, LiveCopy] = field(default_factory=dict[str, LiveCopy])

    def add(
        self,
        item: ContentItem,
        *,
        published: bool = True,
        live_version: int | None = None,
        live_name: str | None = None,
    ) -> ContentItem:
        item.id = canonicalize_id(item.id)
        self.authoring[item.id] = item
        if published:
            self.live[item.id] = LiveCopy(
                name=live_name or item.name,
                path=item.path,
                version=live_version if live_version is not None else item.version,
            )
        return item

    def by_path(self, path: str) -> ContentItem | None:
        for item in self.authoring.values():
            if item.path.lower() == path.lower():
                return item
        return None


@dataclass
class FakeHost:
    """Host double answering context queries and the authoring GraphQL mutation."""

    tree: ContentTree
    page_context: Mapping[str, object] | None = None
    app_context: Mapping[str, object] | None = field(
        default_factory=lambda: {"resourceAccess": [{"context": {"preview": CONTEXT_ID}}]}
    )
    fail_mutations: bool = False
    fail_when: Callable[[str], bool] | None = None
    queries: list[str] = field(default_factory=list[str])
    mutation_params: list[Mapping[str, object]] = field(
        default_factory=list["Mapping[str, object]"]
    )

    async def query(self, key: str) -> Mapping[str, object]:
        blob = {PAGE_CONTEXT_QUERY: self.page_context, APPLICATION_CONTEXT_QUERY: self.app_context}
        if blob.get(key) is None:
            raise RuntimeError(f"host has no {key}")
        return {"data": blob[key]}

    async def mutate(self, key: str, *, params: Mapping[str, object]) -> Mapping[str, object]:
        assert key == AUTHORING_GRAPHQL_MUTATION
        body = params["body"]
        assert isinstance(body, Mapping)
        query = str(body["query"])
        self.queries.append(query)
        self.mutation_params.append(params)
        if self.fail_mutations or (self.fail_when is not None and self.fail_when(query)):
            raise RuntimeError("authoring endpoint unavailable")
        return {"data": {"data": self.answer(query)}}

    def answer(self, query: str) -> dict[str, object]:
        data: dict[str, object] = {}
        for alias, where in _AUTHORING_SELECTION.findall(query):
            language = re.search(r'language: "([^"]*)"', where)
            key = _WHERE_KEY.search(where)
            assert key is not None
            value = json.loads(key.group(2))
            if key.group(1) == "itemId":
                item = self.tree.authoring.get(canonicalize_id(value))
            else:
                item = self.tree.by_path(value)
            data[alias] = (
                item.authoring_payload(language.group(1) if language else "en")
                if item is not None
                else None
            )
        return data


@dataclass
class LiveEndpoint:
    """Experience Edge double served through ``httpx.MockTransport``."""

    tree: ContentTree
    status_code: int = 200
    requests: list[httpx.Request] = field(default_factory=list[httpx.Request])

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "unavailable"})
        query = json.loads(request.content)["query"]
        data: dict[str, object] = {}
        for alias, quoted_path, language in _LIVE_SELECTION.findall(query):
            identifier = canonicalize_id(json.loads(quoted_path))
            copy = self.tree.live.get(identifier)
            data[alias] = (
                {
                    "id": compact(identifier),
                    "name": copy.name,
                    "path": copy.path,
                    "version": copy.version,
                    "language": {"name": language},
                }
                if copy is not None
                else None
            )
        return httpx.Response(200, json={"data": data})


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(transport=httpx.MockTransport(async_handler))  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        return client

    return factory


def edge_config() -> EdgeConfig:
    return EdgeConfig(
        endpoint="https://edge.example.test/api/graphql/v1",
        api_key="edge-key",
        resilience=ResilienceConfig(name="edge-test"),
    )
