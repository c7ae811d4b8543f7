"""File operations: store, fetch, list and delete files by path."""

import logging
import mimetypes
from dataclasses import dataclass

from app.application.interfaces.repositories import IFileItemRepository
from app.domain.entities.file_item import FileItem
from app.domain.exceptions import FileNotFoundException
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "text/html"


def guess_content_type(path: str) -> str:
    """MIME type from the path's extension; text/html when unknown."""
    content_type, _ = mimetypes.guess_type(path, strict=False)
    return content_type or DEFAULT_CONTENT_TYPE


@dataclass(frozen=True)
class FileDownload:
    """Decoded file body with its content type."""

    path: str
    content: bytes
    content_type: str


class FileService:
    """Use cases behind the file routes. Paths are not unique; the oldest record wins."""

    def __init__(self, file_repo: IFileItemRepository) -> None:
        self.file_repo = file_repo

    @traced("files.list")
    async def list_files(self) -> list[FileItem]:
        files = await self.file_repo.list_all()
        add_span_attributes(**{"file.count": len(files)})
        return files

    @traced("files.get")
    async def get_file(self, path: str) -> FileDownload:
        """Return the first file stored under path.

        Raises:
            FileNotFoundException: Nothing is stored under path.
            ValidationException: Stored contents are not valid base64.
        """
        item = await self.file_repo.first_by_path(path)
        if item is None:
            raise FileNotFoundException(path)
        content = item.decoded_contents()
        content_type = guess_content_type(path)
        add_span_attributes(
            **{
                "file.id": item.id or 0,
                "file.path": path,
                "file.size": len(content),
                "file.content_type": content_type,
            }
        )
        return FileDownload(path=path, content=content, content_type=content_type)

    @traced("files.upload")
    async def upload_file(self, path: str, data: bytes) -> FileItem:
        """Store data under path as a new record (earlier records are kept)."""
        created = await self.file_repo.create(FileItem.from_bytes(path, data))
        add_span_attributes(
            **{"file.id": created.id or 0, "file.path": path, "file.size": len(data)}
        )
        return created

    @traced("files.delete")
    async def delete_file(self, path: str) -> FileItem:
        """Delete the first record stored under path and return it.

        Raises:
            FileNotFoundException: Nothing is stored under path.
        """
        item = await self.file_repo.first_by_path(path)
        if item is None:
            raise FileNotFoundException(path)
        if not await self.file_repo.destroy(item):
            # Removed concurrently between lookup and delete.
            raise FileNotFoundException(path)
        add_span_attributes(**{"file.id": item.id or 0, "file.path": path})
        return item
