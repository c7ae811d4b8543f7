"""Domain exceptions for the file service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class FileServiceException(Exception):
    """Base exception for all file service errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the exception handlers."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(FileServiceException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(FileServiceException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'FileItem').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class FileNotFoundException(ResourceNotFoundException):
    """Raised when no stored file matches a path."""

    def __init__(self, path: str) -> None:
        super().__init__("FileItem", path)
        self.path = path
        self.message = f'File at path "{path}" not found'
        self.args = (self.message,)


class UpstreamFetchException(FileServiceException):
    """Raised when the proxy route cannot fetch the remote resource."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            f"Failed to fetch {url}",
            "UPSTREAM_ERROR",
            {"url": url, "reason": reason},
        )


class FeatureDisabledException(FileServiceException):
    """Raised when a route is switched off in settings."""

    def __init__(self, feature: str) -> None:
        super().__init__(
            f"{feature} is disabled",
            "FEATURE_DISABLED",
            {"feature": feature},
        )
