"""FileItem domain entity.

A stored file addressed by path. Contents are kept as base64 text so that
text-oriented datastores can hold arbitrary bytes.
"""

import base64
import binascii
from dataclasses import dataclass

from app.domain.exceptions import ValidationException


@dataclass
class FileItem:
    """Domain entity for a stored file.

    ``id`` is assigned by the datastore on create (None until persisted).
    ``path`` is the lookup key; uniqueness is not enforced, the lowest id wins.
    """

    id: int | None
    path: str
    contents: str

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate path and contents. Raises ValidationException if invalid."""
        if not isinstance(self.path, str):
            raise ValidationException("File path must be a string", field="path")
        if "\x00" in self.path:
            raise ValidationException("File path must not contain NUL", field="path")
        if not isinstance(self.contents, str):
            raise ValidationException("File contents must be base64 text", field="contents")

    @classmethod
    def from_bytes(cls, path: str, data: bytes) -> "FileItem":
        """Build an unsaved FileItem, base64-encoding the raw bytes."""
        return cls(id=None, path=path, contents=encode_contents(data))

    def decoded_contents(self) -> bytes:
        """Return the original bytes."""
        return decode_contents(self.contents)

    @property
    def size_bytes(self) -> int:
        """Decoded size, computed from the base64 length without decoding."""
        return encoded_size(self.contents)


def encoded_size(text: str) -> int:
    """Byte length of base64 text once decoded. Exact for valid base64, never raises."""
    compact = "".join(text.split())
    padding = len(compact) - len(compact.rstrip("="))
    return max(len(compact) * 3 // 4 - padding, 0)


def encode_contents(data: bytes) -> str:
    """Encode raw bytes as base64 text."""
    return base64.b64encode(data).decode("ascii")


def decode_contents(text: str) -> bytes:
    """Decode base64 text. Line breaks from MIME-style encoders are ignored.

    Raises:
        ValidationException: If the text is not valid base64.
    """
    try:
        return base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationException(f"Stored contents are not valid base64: {e}", field="contents") from e
