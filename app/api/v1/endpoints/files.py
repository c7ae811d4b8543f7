"""Stored file listing as JSON."""

from urllib.parse import quote

from fastapi import APIRouter

from app.api.dependencies import FileServiceDep, SettingsDep
from app.application.use_cases.files import guess_content_type
from app.schemas.file_item import FileItemResponse

router = APIRouter()


@router.get("", response_model=list[FileItemResponse])
async def list_files(file_service: FileServiceDep, settings: SettingsDep) -> list[FileItemResponse]:
    """List every stored file, oldest first."""
    files = await file_service.list_files()
    return [
        FileItemResponse(
            id=item.id,
            path=item.path,
            size_bytes=item.size_bytes,
            content_type=guess_content_type(item.path),
            url=f"/{settings.fs_prefix}/{quote(item.path)}",
        )
        for item in files
    ]
