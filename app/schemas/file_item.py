"""Stored file API schemas."""

from pydantic import BaseModel, Field


class FileItemResponse(BaseModel):
    """One stored file in GET /files (contents are not included)."""

    id: int = Field(..., description="Datastore-assigned serial id")
    path: str = Field(..., description="Path the file was stored under")
    size_bytes: int = Field(..., description="Decoded size in bytes (from the stored base64 length)")
    content_type: str = Field(..., description="MIME type served for the path")
    url: str = Field(..., description="Where GET returns the file body")
