"""Infrastructure exceptions for storage backends.

Adapter errors extend FileServiceException so presentation can map them
to HTTP responses consistently.
"""

from app.domain.exceptions import FileServiceException


class AdapterException(FileServiceException):
    """A storage backend call failed."""

    def __init__(self, adapter: str, operation: str, reason: str) -> None:
        super().__init__(
            f"Storage adapter '{adapter}' failed to {operation}",
            "ADAPTER_ERROR",
            {"adapter": adapter, "operation": operation, "reason": reason},
        )


class SerialAllocationError(AdapterException):
    """No free serial id could be claimed for a new record."""

    def __init__(self, adapter: str, storage: str, attempts: int) -> None:
        super().__init__(
            adapter,
            "create",
            f"could not allocate a serial id in '{storage}' after {attempts} attempts",
        )
