"""FileItem repository: stored files addressed by path."""

import logging
from typing import Any

from app.domain.entities.file_item import FileItem
from app.infrastructure.adapters.model import ModelSpec, Property, PropertyKind
from app.infrastructure.persistence.repositories.base import ResourceRepository

logger = logging.getLogger(__name__)

FILE_ITEM_MODEL = ModelSpec(
    "FileItem",
    (
        Property("id", PropertyKind.SERIAL),
        Property("path", PropertyKind.STRING, length=1024, index=True),
        Property("contents", PropertyKind.TEXT),
    ),
)


class FileItemRepository(ResourceRepository[FileItem]):
    """Repository for FileItem. Several records may share a path; lookups take the oldest."""

    model = FILE_ITEM_MODEL

    async def list_all(self) -> list[FileItem]:
        return await self.all()

    async def all_by_path(self, path: str) -> list[FileItem]:
        return await self.all(path=path)

    async def first_by_path(self, path: str) -> FileItem | None:
        return await self.first(path=path)

    def _to_entity(self, attributes: dict[str, Any]) -> FileItem:
        return FileItem(
            id=attributes.get("id"),
            path=attributes.get("path") or "",
            contents=attributes.get("contents") or "",
        )

    def _to_attributes(self, entity: FileItem) -> dict[str, Any]:
        attributes: dict[str, Any] = {"path": entity.path, "contents": entity.contents}
        if entity.id is not None:
            attributes["id"] = entity.id
        return attributes

    async def _on_after_create(self, entity: FileItem) -> None:
        logger.info("Stored file %r as id %s", entity.path, entity.id)

    async def _on_before_delete(self, entity: FileItem) -> None:
        logger.info("Deleting file %r (id %s)", entity.path, entity.id)
