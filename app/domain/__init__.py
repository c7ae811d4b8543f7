"""Domain layer: entities and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import FileItem
from app.domain.exceptions import (
    FeatureDisabledException,
    FileNotFoundException,
    FileServiceException,
    ResourceNotFoundException,
    UpstreamFetchException,
    ValidationException,
)

__all__ = [
    # Entities
    "FileItem",
    # Exceptions
    "FeatureDisabledException",
    "FileNotFoundException",
    "FileServiceException",
    "ResourceNotFoundException",
    "UpstreamFetchException",
    "ValidationException",
]
