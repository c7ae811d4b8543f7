"""JSON listing of stored files."""

from fastapi import FastAPI
from httpx import AsyncClient

from app.infrastructure.adapters import Resource
from app.infrastructure.persistence.repositories import FILE_ITEM_MODEL


async def test_list_files_empty(client: AsyncClient) -> None:
    response = await client.get("/api/v1/files")
    assert response.status_code == 200
    assert response.json() == []


async def test_list_files_oldest_first_with_metadata(client: AsyncClient) -> None:
    await client.post("/fs/b.json", files={"datafile": ("b.json", b"{}")})
    await client.post("/fs/a.txt", files={"datafile": ("a.txt", b"hello")})

    response = await client.get("/api/v1/files")
    assert response.status_code == 200
    assert response.json() == [
        {
            "id": 1,
            "path": "b.json",
            "size_bytes": 2,
            "content_type": "application/json",
            "url": "/fs/b.json",
        },
        {
            "id": 2,
            "path": "a.txt",
            "size_bytes": 5,
            "content_type": "text/plain",
            "url": "/fs/a.txt",
        },
    ]


async def test_listing_urls_are_percent_encoded(client: AsyncClient) -> None:
    await client.post("/fs/a%20b%3F.txt", files={"datafile": ("x.txt", b"hi")})

    [entry] = (await client.get("/api/v1/files")).json()
    assert entry["path"] == "a b?.txt"
    assert entry["url"] == "/fs/a%20b%3F.txt"

    response = await client.get(entry["url"])
    assert response.status_code == 200
    assert response.content == b"hi"


async def test_listings_survive_contents_that_are_not_base64(
    app: FastAPI, client: AsyncClient
) -> None:
    await client.post("/fs/good.txt", files={"datafile": ("good.txt", b"hello")})
    legacy = Resource(FILE_ITEM_MODEL, {"path": "legacy.bin", "contents": "not base64!"})
    await app.state.adapter.create([legacy])

    response = await client.get("/api/v1/files")
    assert response.status_code == 200
    assert [(e["path"], e["size_bytes"]) for e in response.json()] == [
        ("good.txt", 5),
        ("legacy.bin", 7),
    ]

    page = await client.get("/")
    assert page.status_code == 200
    assert "good.txt" in page.text
    assert "legacy.bin" in page.text
