"""File routes: GET/POST/PUT/DELETE on /<fs_prefix>/<path>.

Mounted by create_app under the configured prefix. Mutations redirect to the
listing at ``/`` with 303 so browsers follow up with a GET.
"""

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import PlainTextResponse, RedirectResponse, Response

from app.api.dependencies import FileServiceDep, SettingsDep
from app.core.limiter import limit_upload, limit_writes
from app.domain.exceptions import FileNotFoundException

router = APIRouter()

LISTING_URL = "/"


def _redirect_to_listing() -> RedirectResponse:
    return RedirectResponse(LISTING_URL, status_code=303)


@router.get("/{path:path}")
async def read_file(path: str, file_service: FileServiceDep, settings: SettingsDep) -> Response:
    """Return the bytes of the first file stored at path, typed by its extension."""
    try:
        download = await file_service.get_file(path)
    except FileNotFoundException as e:
        return PlainTextResponse(e.message, status_code=settings.missing_file_status)
    return Response(content=download.content, media_type=download.content_type)


@router.post("/{path:path}", status_code=303)
@limit_upload
async def upload_file(
    request: Request,
    path: str,
    file_service: FileServiceDep,
    datafile: UploadFile = File(...),
) -> RedirectResponse:
    """Store the multipart ``datafile`` at path (a new record every time)."""
    data = await datafile.read()
    await file_service.upload_file(path, data)
    return _redirect_to_listing()


@router.put("/{path:path}", status_code=303)
async def replace_file(path: str) -> RedirectResponse:
    """Accepted for form compatibility; changes nothing."""
    return _redirect_to_listing()


@router.delete("/{path:path}", status_code=303)
@limit_writes
async def delete_file(request: Request, path: str, file_service: FileServiceDep) -> Response:
    """Delete the first file stored at path; 404 text when there is none."""
    try:
        await file_service.delete_file(path)
    except FileNotFoundException as e:
        return PlainTextResponse(e.message, status_code=404)
    return _redirect_to_listing()
