"""Shared fakes for the export pipeline tests."""

import asyncio
from typing import Any, Dict, List, Optional

import httpx
import pytest

from hubexport.core.interfaces import IndexDirectory, WebhookResolver
from hubexport.core.models import ContentTypeAssignment, IndexSummary


def assignment(uri: str, active: Optional[str] = "wh-active", archived: Optional[str] = "wh-archived") -> Dict[str, Any]:
    links = {}
    if active:
        links["active-content-webhook"] = {"href": f"https://api.example.com/hubs/h1/webhooks/{active}"}
    if archived:
        links["archived-content-webhook"] = {"href": f"https://api.example.com/hubs/h1/webhooks/{archived}"}
    return {"contentTypeUri": uri, "_links": links}


class FakeDirectory(IndexDirectory):
    """In-memory index directory.

    ``delays`` maps an index id or name to a sleep before answering, so tests
    can force responses to complete out of order.
    """

    def __init__(
        self,
        indexes: List[Dict[str, Any]],
        settings: Dict[str, Dict[str, Any]],
        assignments: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        delays: Optional[Dict[str, float]] = None,
        fail_on: Optional[Dict[str, str]] = None,
    ):
        self.indexes = indexes
        self.settings = settings
        self.assignments = assignments or {}
        self.delays = delays or {}
        self.fail_on = fail_on or {}
        self.calls: List[tuple] = []
        self.in_flight = 0
        self.peak_in_flight: Dict[str, int] = {}

    async def _call(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        self.in_flight += 1
        self.peak_in_flight[op] = max(self.peak_in_flight.get(op, 0), self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
            if self.fail_on.get(op) == key:
                raise RuntimeError(f"{op} failed for {key}")
        finally:
            self.in_flight -= 1

    async def list_indexes_with_details(self) -> List[IndexSummary]:
        return [IndexSummary.from_api(r) for r in self.indexes]

    async def get_index_settings(self, index_id: str) -> Dict[str, Any]:
        await self._call("settings", index_id)
        return self.settings[index_id]

    async def get_index_by_name(self, name: str) -> IndexSummary:
        await self._call("by_name", name)
        for record in self.indexes:
            if record["name"] == name:
                return IndexSummary.from_api(record)
        raise KeyError(name)

    async def get_assigned_content_types(self, index_id: str) -> List[ContentTypeAssignment]:
        await self._call("assignments", index_id)
        return [ContentTypeAssignment.from_api(r) for r in self.assignments.get(index_id, [])]


class FakeWebhooks(WebhookResolver):
    def __init__(self, payloads: Optional[Dict[str, Any]] = None, fail: bool = False):
        self.payloads = payloads or {}
        self.fail = fail
        self.resolved: List[str] = []

    async def resolve(self, webhook_id: str) -> Optional[Any]:
        self.resolved.append(webhook_id)
        if self.fail:
            raise RuntimeError(f"webhook {webhook_id} unavailable")
        return self.payloads.get(webhook_id)


@pytest.fixture
def acme_directory() -> FakeDirectory:
    """Hub with one primary index and its replica, listed primary first."""
    return FakeDirectory(
        indexes=[
            {"id": "i1", "name": "Main"},
            {"id": "i2", "name": "MainReplica", "parentId": "i1"},
        ],
        settings={
            "i1": {"replicas": ["MainReplica"], "searchableAttributes": ["title"]},
            "i2": {"replicas": [], "customRanking": ["desc(date)"]},
        },
        assignments={"i1": [assignment("https://schema.example.com/blog.json")]},
    )


@pytest.fixture
def acme_webhooks() -> FakeWebhooks:
    return FakeWebhooks({
        "wh-active": {"objectID": "{{id}}"},
        "wh-archived": {"objectID": "{{id}}", "archived": True},
    })


API = "https://api.example.com/v2/content"
AUTH = "https://auth.example.com/oauth/token"


class FakeApi:
    """Routes requests to canned responses and records what was asked."""

    def __init__(self, routes, token_responses=None):
        self.routes = routes
        self.token_responses = list(token_responses or [{"access_token": "t1", "expires_in": 3600}])
        self.requests = []
        self.token_requests = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == AUTH:
            self.token_requests += 1
            body = self.token_responses[min(self.token_requests, len(self.token_responses)) - 1]
            return httpx.Response(200, json=body)

        self.requests.append(request)
        handler = self.routes[request.url.path]
        result = handler(request) if callable(handler) else handler
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)
