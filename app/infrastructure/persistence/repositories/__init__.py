"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import ResourceRepository
from app.infrastructure.persistence.repositories.file_item_repo import (
    FILE_ITEM_MODEL,
    FileItemRepository,
)

__all__ = [
    "FILE_ITEM_MODEL",
    "FileItemRepository",
    "ResourceRepository",
]
