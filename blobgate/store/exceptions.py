"""
Object Store Exceptions

Backend faults carry a machine-readable error code so the gateway can
pattern-match on the few codes it translates and treat the rest as opaque.

Author: BlobGate Contributors
Date: 2026
"""

from typing import Any, Dict, Optional


class ErrorCode:
    """Backend error codes (values match Azure Blob Storage error codes)."""

    BLOB_NOT_FOUND = "BlobNotFound"
    CONTAINER_NOT_FOUND = "ContainerNotFound"
    BLOB_ALREADY_EXISTS = "BlobAlreadyExists"
    CONTAINER_ALREADY_EXISTS = "ContainerAlreadyExists"
    INVALID_RESOURCE_NAME = "InvalidResourceName"

    NOT_FOUND = frozenset({BLOB_NOT_FOUND, CONTAINER_NOT_FOUND})


class ObjectStoreError(Exception):
    """
    Base exception for all object store faults.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., 'BlobNotFound')
        details: Additional context (container, blob name, ...)
    """

    error_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.error_code
        self.details = details or {}

    @property
    def is_not_found(self) -> bool:
        return self.error_code in ErrorCode.NOT_FOUND

    @property
    def is_already_exists(self) -> bool:
        return self.error_code == ErrorCode.BLOB_ALREADY_EXISTS

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


class BlobNotFoundError(ObjectStoreError):
    """Raised when a blob is not found."""
    error_code = ErrorCode.BLOB_NOT_FOUND

    def __init__(self, container_name: str, blob_name: str):
        super().__init__(
            f"Blob '{blob_name}' not found in container '{container_name}'",
            details={"container": container_name, "blob": blob_name},
        )


class ContainerNotFoundError(ObjectStoreError):
    """Raised when a container is not found."""
    error_code = ErrorCode.CONTAINER_NOT_FOUND

    def __init__(self, container_name: str):
        super().__init__(
            f"Container '{container_name}' not found",
            details={"container": container_name},
        )


class BlobAlreadyExistsError(ObjectStoreError):
    """Raised when writing a blob whose name is already taken."""
    error_code = ErrorCode.BLOB_ALREADY_EXISTS

    def __init__(self, container_name: str, blob_name: str):
        super().__init__(
            f"Blob '{blob_name}' already exists in container '{container_name}'",
            details={"container": container_name, "blob": blob_name},
        )


class ContainerAlreadyExistsError(ObjectStoreError):
    """Raised when attempting to create a container that already exists."""
    error_code = ErrorCode.CONTAINER_ALREADY_EXISTS

    def __init__(self, container_name: str):
        super().__init__(
            f"Container '{container_name}' already exists",
            details={"container": container_name},
        )


class InvalidResourceNameError(ObjectStoreError):
    """Raised when a container or blob name is rejected by the backend."""
    error_code = ErrorCode.INVALID_RESOURCE_NAME

    def __init__(self, name: str, reason: str):
        super().__init__(
            f"Invalid resource name '{name}': {reason}",
            details={"name": name, "reason": reason},
        )
