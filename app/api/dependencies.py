"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for settings, the storage adapter and the file
use cases. The adapter and shared HTTP client are built once in create_app
and read from app.state here; routes never construct infrastructure.
"""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from app.application.use_cases.files import FileService
from app.core.config import Settings
from app.infrastructure.adapters.abstract_adapter import AbstractAdapter
from app.infrastructure.persistence.repositories import FileItemRepository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_adapter(request: Request) -> AbstractAdapter:
    return request.app.state.adapter


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_file_repo(
    adapter: Annotated[AbstractAdapter, Depends(get_adapter)],
) -> FileItemRepository:
    return FileItemRepository(adapter)


def get_file_service(
    file_repo: Annotated[FileItemRepository, Depends(get_file_repo)],
) -> FileService:
    """Build FileService over the FileItem repository."""
    return FileService(file_repo)


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
FileServiceDep = Annotated[FileService, Depends(get_file_service)]
