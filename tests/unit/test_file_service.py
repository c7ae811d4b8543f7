"""Tests for FileService against the in-memory repository."""

import pytest

from app.application.use_cases.files import FileService, guess_content_type
from app.domain.exceptions import FileNotFoundException
from app.infrastructure.persistence.repositories import FileItemRepository


@pytest.fixture
def service(file_repo: FileItemRepository) -> FileService:
    return FileService(file_repo)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("notes.txt", "text/plain"),
        ("data/report.json", "application/json"),
        ("img/logo.png", "image/png"),
        ("index.html", "text/html"),
        ("README", "text/html"),
        ("archive.unknownext", "text/html"),
    ],
)
def test_guess_content_type(path: str, expected: str) -> None:
    assert guess_content_type(path) == expected


async def test_upload_then_get(service: FileService) -> None:
    created = await service.upload_file("a/b.txt", b"hello")
    assert created.id == 1

    download = await service.get_file("a/b.txt")
    assert download.content == b"hello"
    assert download.content_type == "text/plain"
    assert download.path == "a/b.txt"


async def test_get_missing_raises(service: FileService) -> None:
    with pytest.raises(FileNotFoundException) as exc_info:
        await service.get_file("nope.txt")
    assert exc_info.value.path == "nope.txt"


async def test_first_upload_wins_for_duplicate_paths(service: FileService) -> None:
    await service.upload_file("dup.txt", b"first")
    await service.upload_file("dup.txt", b"second")
    assert (await service.get_file("dup.txt")).content == b"first"


async def test_delete_removes_oldest_only(
    service: FileService, file_repo: FileItemRepository
) -> None:
    await service.upload_file("dup.txt", b"first")
    await service.upload_file("dup.txt", b"second")

    deleted = await service.delete_file("dup.txt")

    assert deleted.id == 1
    remaining = await file_repo.all_by_path("dup.txt")
    assert [item.id for item in remaining] == [2]
    assert (await service.get_file("dup.txt")).content == b"second"


async def test_delete_missing_raises(service: FileService) -> None:
    with pytest.raises(FileNotFoundException):
        await service.delete_file("nope.txt")


async def test_list_files_in_creation_order(service: FileService) -> None:
    await service.upload_file("z.txt", b"1")
    await service.upload_file("a.txt", b"2")
    assert [item.path for item in await service.list_files()] == ["z.txt", "a.txt"]


async def test_delete_when_destroy_finds_nothing(
    service: FileService, file_repo: FileItemRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    await service.upload_file("a.txt", b"1")

    async def destroy_nothing(entity) -> bool:
        return False

    monkeypatch.setattr(file_repo, "destroy", destroy_nothing)
    with pytest.raises(FileNotFoundException):
        await service.delete_file("a.txt")
