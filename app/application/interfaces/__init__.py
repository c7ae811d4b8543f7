"""Application interfaces (ports)."""

from app.application.interfaces.repositories import IFileItemRepository

__all__ = ["IFileItemRepository"]
