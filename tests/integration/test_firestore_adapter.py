"""FirestoreAdapter against a fake Firestore REST endpoint (httpx.MockTransport)."""

import json
from typing import Any
from urllib.parse import unquote

import httpx
import pytest

from app.domain.entities.file_item import FileItem
from app.infrastructure.adapters import FirestoreAdapter
from app.infrastructure.adapters.model import ModelSpec, Property, PropertyKind, Resource
from app.infrastructure.adapters.query import Operator, Query
from app.infrastructure.exceptions import AdapterException, SerialAllocationError
from app.infrastructure.firebase import FirestoreRESTClient
from app.infrastructure.firebase._rest_encoding import decode_document, decode_value
from app.infrastructure.persistence.repositories import FileItemRepository

BASE_URL = "https://firestore.test/v1"
DOCUMENTS = "/v1/projects/demo/databases/(default)/documents"

NOTE = ModelSpec(
    "Note",
    (
        Property("id", PropertyKind.SERIAL),
        Property("title", PropertyKind.STRING),
        Property("rank", PropertyKind.INTEGER),
    ),
)

_COMPARE = {
    "EQUAL": lambda a, b: a == b,
    "NOT_EQUAL": lambda a, b: a != b,
    "LESS_THAN": lambda a, b: a is not None and a < b,
    "LESS_THAN_OR_EQUAL": lambda a, b: a is not None and a <= b,
    "GREATER_THAN": lambda a, b: a is not None and a > b,
    "GREATER_THAN_OR_EQUAL": lambda a, b: a is not None and a >= b,
    "IN": lambda a, b: a in b,
}


class StaticCredentials:
    valid = True
    token = "test-token"


class FakeFirestore:
    """Just enough of the Firestore v1 REST surface for the adapter."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.queries: list[dict[str, Any]] = []
        self.conflicts = 0
        self.fail_status: int | None = None

    def seed(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        self.collections.setdefault(collection, {})[doc_id] = fields

    def data(self, collection: str) -> dict[str, dict[str, Any]]:
        return {
            doc_id: decode_document(fields)
            for doc_id, fields in self.collections.get(collection, {}).items()
        }

    def handle(self, request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer test-token"
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"error": {"message": "unavailable"}})
        path = unquote(request.url.path)
        assert path.startswith(DOCUMENTS)
        rest = path[len(DOCUMENTS):]
        body = json.loads(request.content) if request.content else None

        if rest == ":runQuery":
            return self._run_query(body["structuredQuery"])
        parts = rest.strip("/").split("/")
        if len(parts) == 1 and request.method == "POST":
            return self._create(parts[0], request.url.params["documentId"], body["fields"])
        collection, doc_id = parts
        docs = self.collections.setdefault(collection, {})
        if request.method == "GET":
            if doc_id not in docs:
                return httpx.Response(404, json={"error": {"status": "NOT_FOUND"}})
            return httpx.Response(200, json=self._document(collection, doc_id))
        if request.method == "PATCH":
            if doc_id not in docs:
                return httpx.Response(404, json={"error": {"status": "NOT_FOUND"}})
            for name in request.url.params.get_list("updateMask.fieldPaths"):
                docs[doc_id][name] = body["fields"][name]
            return httpx.Response(200, json=self._document(collection, doc_id))
        if request.method == "DELETE":
            docs.pop(doc_id, None)
            return httpx.Response(200, json={})
        return httpx.Response(405)

    def _document(self, collection: str, doc_id: str) -> dict[str, Any]:
        return {
            "name": f"projects/demo/databases/(default)/documents/{collection}/{doc_id}",
            "fields": self.collections[collection][doc_id],
        }

    def _create(self, collection: str, doc_id: str, fields: dict[str, Any]) -> httpx.Response:
        docs = self.collections.setdefault(collection, {})
        if self.conflicts:
            # A concurrent writer claims the id first.
            self.conflicts -= 1
            docs[doc_id] = {**fields, "title": {"stringValue": "competitor"}}
        if doc_id in docs:
            return httpx.Response(409, json={"error": {"status": "ALREADY_EXISTS"}})
        docs[doc_id] = fields
        return httpx.Response(200, json=self._document(collection, doc_id))

    def _run_query(self, structured: dict[str, Any]) -> httpx.Response:
        self.queries.append(structured)
        collection = structured["from"][0]["collectionId"]
        matched = [
            (doc_id, data)
            for doc_id, data in self.data(collection).items()
            if "where" not in structured or self._matches(structured["where"], data)
        ]
        for order in reversed(structured.get("orderBy", [])):
            field = order["field"]["fieldPath"]
            matched.sort(key=lambda item: item[1][field], reverse=order["direction"] == "DESCENDING")
        if "limit" in structured:
            matched = matched[: structured["limit"]]
        if not matched:
            return httpx.Response(200, json=[{"readTime": "2026-01-01T00:00:00Z"}])
        return httpx.Response(
            200, json=[{"document": self._document(collection, doc_id)} for doc_id, _ in matched]
        )

    def _matches(self, where: dict[str, Any], data: dict[str, Any]) -> bool:
        if "compositeFilter" in where:
            return all(self._matches(f, data) for f in where["compositeFilter"]["filters"])
        if "unaryFilter" in where:
            value = data.get(where["unaryFilter"]["field"]["fieldPath"])
            return (value is None) == (where["unaryFilter"]["op"] == "IS_NULL")
        field_filter = where["fieldFilter"]
        candidate = data.get(field_filter["field"]["fieldPath"])
        return _COMPARE[field_filter["op"]](candidate, decode_value(field_filter["value"]))


@pytest.fixture
def firestore() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
async def adapter(firestore: FakeFirestore) -> FirestoreAdapter:
    async with httpx.AsyncClient(transport=httpx.MockTransport(firestore.handle)) as http:
        client = FirestoreRESTClient(
            "demo", StaticCredentials(), http_client=http, base_url=BASE_URL
        )
        yield FirestoreAdapter("default", {"adapter": "firestore", "project": "demo"}, client=client)


async def test_create_allocates_serials_as_document_ids(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    first = Resource(NOTE, {"title": "a", "rank": 1})
    second = Resource(NOTE, {"title": "b", "rank": 2})
    assert await adapter.create([first, second]) == 2

    assert (first.key, second.key) == (1, 2)
    assert firestore.data("notes") == {
        "1": {"title": "a", "rank": 1, "id": 1},
        "2": {"title": "b", "rank": 2, "id": 2},
    }


async def test_create_retries_when_serial_is_taken(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    firestore.conflicts = 2
    resource = Resource(NOTE, {"title": "mine", "rank": 0})
    await adapter.create([resource])
    assert resource.key == 3
    assert firestore.data("notes")["3"]["title"] == "mine"


async def test_create_gives_up_after_repeated_conflicts(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    firestore.conflicts = 10
    with pytest.raises(SerialAllocationError):
        await adapter.create([Resource(NOTE, {"title": "mine"})])


async def test_read_orders_by_serial_in_process(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    for doc_id in ("10", "2", "7"):
        firestore.seed(
            "notes",
            doc_id,
            {"id": {"integerValue": doc_id}, "title": {"stringValue": "t"}, "rank": {"integerValue": "1"}},
        )
    rows = await adapter.read(Query(NOTE))
    assert [row["id"] for row in rows] == [2, 7, 10]
    assert "orderBy" not in firestore.queries[-1]


async def test_read_sends_filters_and_slices_locally(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    for title, rank in [("a", 1), ("b", 5), ("c", 3), ("d", 4)]:
        await adapter.create([Resource(NOTE, {"title": title, "rank": rank})])

    query = Query.build(
        NOTE,
        {"rank": (Operator.GTE, 3), "title": (Operator.NOT, "d")},
        order=["-rank"],
        limit=1,
    )
    rows = await adapter.read(query)

    assert [row["title"] for row in rows] == ["b"]
    where = firestore.queries[-1]["where"]
    assert where["compositeFilter"]["op"] == "AND"
    ops = [f["fieldFilter"]["op"] for f in where["compositeFilter"]["filters"]]
    assert ops == ["GREATER_THAN_OR_EQUAL", "NOT_EQUAL"]
    assert "limit" not in firestore.queries[-1]
    assert "offset" not in firestore.queries[-1]


async def test_read_in_and_null_filters(adapter: FirestoreAdapter, firestore: FakeFirestore) -> None:
    await adapter.create([Resource(NOTE, {"title": "a", "rank": 1})])
    await adapter.create([Resource(NOTE, {"title": "b", "rank": None})])

    rows = await adapter.read(Query.build(NOTE, {"title": (Operator.IN, ("a", "z"))}))
    assert [row["title"] for row in rows] == ["a"]

    rows = await adapter.read(Query.build(NOTE, {"rank": None}))
    assert [row["title"] for row in rows] == ["b"]
    assert firestore.queries[-1]["where"]["unaryFilter"]["op"] == "IS_NULL"


async def test_read_empty_collection(adapter: FirestoreAdapter) -> None:
    assert await adapter.read(Query(NOTE)) == []


async def test_update_patches_given_fields_of_existing_documents(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    resource = Resource(NOTE, {"title": "a", "rank": 1})
    await adapter.create([resource])
    ghost = Resource(NOTE, {"id": 99})

    updated = await adapter.update({NOTE.property("rank"): 7}, [resource, ghost])

    assert updated == 1
    assert firestore.data("notes")["1"] == {"title": "a", "rank": 7, "id": 1}
    assert "99" not in firestore.collections["notes"]


async def test_delete_counts_only_existing_documents(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    resource = Resource(NOTE, {"title": "a", "rank": 1})
    await adapter.create([resource])

    assert await adapter.delete([resource, Resource(NOTE, {"id": 42})]) == 1
    assert firestore.data("notes") == {}
    assert await adapter.delete([resource]) == 0


async def test_http_errors_become_adapter_exceptions(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    firestore.fail_status = 503
    with pytest.raises(AdapterException) as exc_info:
        await adapter.read(Query(NOTE))
    assert exc_info.value.details["operation"] == "read"
    assert exc_info.value.error_code == "ADAPTER_ERROR"


async def test_transport_errors_become_adapter_exceptions() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as http:
        client = FirestoreRESTClient("demo", StaticCredentials(), http_client=http, base_url=BASE_URL)
        adapter = FirestoreAdapter("default", client=client)
        with pytest.raises(AdapterException) as exc_info:
            await adapter.create([Resource(NOTE, {"title": "a"})])
    assert exc_info.value.details["operation"] == "create"


async def test_file_repository_on_firestore(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    repo = FileItemRepository(adapter)
    await repo.create(FileItem.from_bytes("docs/a.txt", b"first"))
    await repo.create(FileItem.from_bytes("docs/a.txt", b"second"))

    found = await repo.first_by_path("docs/a.txt")
    assert found is not None
    assert found.id == 1
    assert found.decoded_contents() == b"first"
    assert set(firestore.collections["file_items"]) == {"1", "2"}


async def test_create_with_taken_explicit_id_is_adapter_error(
    adapter: FirestoreAdapter, firestore: FakeFirestore
) -> None:
    await adapter.create([Resource(NOTE, {"id": 1, "title": "a", "rank": 1})])

    with pytest.raises(AdapterException) as exc_info:
        await adapter.create([Resource(NOTE, {"id": 1, "title": "b", "rank": 2})])

    assert exc_info.value.details["operation"] == "create"
    assert firestore.data("notes")["1"]["title"] == "a"
