"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill.
"""

from typing import Protocol

from app.domain.entities.file_item import FileItem


class IFileItemRepository(Protocol):
    """Protocol for the stored-file repository."""

    async def list_all(self) -> list[FileItem]:
        """Return every stored file, oldest first."""

    async def all_by_path(self, path: str) -> list[FileItem]:
        """Return every record stored under path, oldest first."""

    async def first_by_path(self, path: str) -> FileItem | None:
        """Return the oldest record stored under path, or None."""

    async def create(self, entity: FileItem) -> FileItem:
        """Persist a new record; the returned entity carries its id."""

    async def destroy(self, entity: FileItem) -> bool:
        """Delete the record; False if it was already gone."""
