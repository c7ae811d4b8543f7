"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.file_item import (
    FileItem,
    decode_contents,
    encode_contents,
    encoded_size,
)

__all__ = [
    "FileItem",
    "decode_contents",
    "encode_contents",
    "encoded_size",
]
