"""
Shared fixtures: an in-memory content store served through httpx.MockTransport.
"""

import json
import math
from typing import Any, Dict, List

import httpx
import pytest

from contentloader.models import RunOptions
from contentloader.store import StoreClient


class FakeStore:
    """
    Minimal Strapi-style REST store keeping collections in memory.

    Supports ``filters[<field>][$eq]``, ``pagination[page]`` /
    ``pagination[pageSize]``, POST to a collection and PUT to
    ``<collection>/<id>``. Every request is recorded in ``calls``.
    """

    def __init__(self, wrap_attributes: bool = False):
        self.collections: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.fail_paths: Dict[str, int] = {}
        self.wrap_attributes = wrap_attributes
        self._next_id = 1

    def add(self, endpoint: str, **fields: Any) -> Dict[str, Any]:
        entry = {"id": self._next_id, "documentId": f"doc-{self._next_id}", **fields}
        self._next_id += 1
        self.collections.setdefault(endpoint, []).append(entry)
        return entry

    @property
    def writes(self) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["method"] in ("POST", "PUT")]

    def _shape(self, entry: Dict[str, Any]) -> Dict[str, Any]:
        if not self.wrap_attributes:
            return entry
        attributes = {k: v for k, v in entry.items() if k not in ("id", "documentId")}
        return {"id": entry.get("id"), "attributes": attributes}

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.calls.append({"method": request.method, "path": path, "params": dict(request.url.params), "json": body})

        if path in self.fail_paths:
            return httpx.Response(self.fail_paths[path], text="boom")

        if request.method == "GET":
            return self._list(path, request.url.params)

        if request.method == "POST":
            entry = self.add(path, **body["data"])
            return httpx.Response(201, json={"data": self._shape(entry)})

        if request.method == "PUT":
            endpoint, _, entry_id = path.rpartition("/")
            for entry in self.collections.get(endpoint, []):
                if entry_id in (str(entry.get("documentId")), str(entry.get("id"))):
                    entry.update(body["data"])
                    return httpx.Response(200, json={"data": self._shape(entry)})
            return httpx.Response(404, json={"error": {"message": "Not Found"}})

        return httpx.Response(405)

    def _list(self, path: str, params: httpx.QueryParams) -> httpx.Response:
        entries = list(self.collections.get(path, []))
        for name, value in params.items():
            if name.startswith("filters[") and name.endswith("][$eq]"):
                field = name[len("filters["):-len("][$eq]")]
                entries = [entry for entry in entries if str(entry.get(field)) == value]

        page_size = int(params.get("pagination[pageSize]", 25))
        page = int(params.get("pagination[page]", 1))
        page_count = max(1, math.ceil(len(entries) / page_size))
        chunk = entries[(page - 1) * page_size:page * page_size]
        return httpx.Response(200, json={
            "data": [self._shape(entry) for entry in chunk],
            "meta": {"pagination": {"page": page, "pageSize": page_size,
                                    "pageCount": page_count, "total": len(entries)}},
        })


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def store_client(fake_store):
    client = StoreClient("http://cms.test", "secret-token", transport=httpx.MockTransport(fake_store.handler))
    yield client
    client.close()


def make_options(operation: str = "import", **overrides: Any) -> RunOptions:
    values: Dict[str, Any] = {
        "operation": operation,
        "base_url": "http://cms.test",
        "token": "secret-token",
        "upsert_mode": "update" if operation == "import" else "skip",
    }
    values.update(overrides)
    return RunOptions(**values)


@pytest.fixture
def options_factory():
    return make_options
