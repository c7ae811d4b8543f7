"""Pydantic request/response schemas for the API."""

from app.schemas.file_item import FileItemResponse
from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse

__all__ = [
    "FileItemResponse",
    "HealthResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
]
