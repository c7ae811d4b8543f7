"""File use cases."""

from app.application.use_cases.files.file_operations import (
    FileDownload,
    FileService,
    guess_content_type,
)

__all__ = ["FileDownload", "FileService", "guess_content_type"]
