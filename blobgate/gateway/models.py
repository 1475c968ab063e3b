"""
Gateway Models

Blob records, the closed status vocabulary, and the uniform operation result.

Author: BlobGate Contributors
Date: 2026
"""

from enum import Enum
from typing import Any, BinaryIO, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..store.interface import BlobHeaders


class StatusCode(str, Enum):
    """Caller-facing status codes. Never backend-specific."""
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_SUCCESS_DELETED = "FILE_SUCCESS_DELETED"
    FILE_SIZE_OVER = "FILE_SIZE_OVER"
    FILE_TYPE_ERROR = "FILE_TYPE_ERROR"
    FILE_ALREADY_EXISTS = "FILE_ALREADY_EXISTS"
    FILE_SUCCESS_UPLOADED = "FILE_SUCCESS_UPLOADED"
    GENERAL_ERROR = "GENERAL_ERROR"


STATUS_MESSAGES = {
    StatusCode.FILE_NOT_FOUND: "File not found: {name}",
    StatusCode.FILE_SUCCESS_DELETED: "File deleted: {name}",
    StatusCode.FILE_SIZE_OVER: "File exceeds the upload size limit: {name}",
    StatusCode.FILE_TYPE_ERROR: "File type not allowed: {name}",
    StatusCode.FILE_ALREADY_EXISTS: "File already exists: {name}",
    StatusCode.FILE_SUCCESS_UPLOADED: "File uploaded: {name}",
    StatusCode.GENERAL_ERROR: "Unexpected storage error for file: {name}",
}

FOUND_MESSAGE = "File found: {name}"


def compose_uri(container_uri: str, name: str) -> str:
    """Build a blob URI from its container URI and name."""
    return f"{container_uri.rstrip('/')}/{name}"


class Blob(BaseModel):
    """
    A named binary object within a container.

    ``content`` is only populated by operations that fetch it; the caller owns
    and must close it.
    """

    name: str = Field(min_length=1, description="Blob name, unique within its container")
    uri: Optional[str] = Field(default=None, description="<container-uri>/<name>")
    content_type: Optional[str] = Field(default=None, description="Advisory MIME type")
    content: Optional[Any] = Field(default=None, description="Readable binary stream", exclude=True)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def read(self) -> bytes:
        """Read and close the content stream."""
        if self.content is None:
            raise ValueError(f"Blob '{self.name}' was returned without content")
        stream: BinaryIO = self.content
        try:
            return stream.read()
        finally:
            stream.close()


class OperationResult(BaseModel):
    """
    Uniform outcome of get, delete and upload.

    An error result always has a status code and never carries a blob.

    ``status_code`` is NOT always set. A successful get returns
    ``status_code=None`` with ``is_error=False`` and the message
    "File found: <name>", because the status vocabulary has no "found" entry.
    Callers that branch on ``status_code`` must check ``is_error`` first, or
    treat ``None`` as a successful get.
    """

    is_error: bool
    status_code: Optional[StatusCode] = None
    message: str = ""
    blob: Optional[Blob] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def _check_error_shape(self) -> "OperationResult":
        if self.is_error and self.blob is not None:
            raise ValueError("An error result cannot carry a blob")
        if self.is_error and self.status_code is None:
            raise ValueError("An error result needs a status code")
        return self

    @classmethod
    def success(
        cls,
        status_code: Optional[StatusCode],
        name: str,
        blob: Optional[Blob] = None,
    ) -> "OperationResult":
        template = STATUS_MESSAGES[status_code] if status_code else FOUND_MESSAGE
        return cls(
            is_error=False,
            status_code=status_code,
            message=template.format(name=name),
            blob=blob,
        )

    @classmethod
    def failure(cls, status_code: StatusCode, name: str) -> "OperationResult":
        return cls(
            is_error=True,
            status_code=status_code,
            message=STATUS_MESSAGES[status_code].format(name=name),
        )

    def to_dict(self) -> dict:
        """Convert result to dictionary for CLI/JSON output."""
        data = {
            "error": self.is_error,
            "status": self.status_code.value if self.status_code else None,
            "message": self.message,
        }
        if self.blob is not None:
            data["blob"] = self.blob.model_dump(exclude_none=True)
        return data


__all__ = [
    "Blob",
    "BlobHeaders",
    "OperationResult",
    "STATUS_MESSAGES",
    "StatusCode",
    "compose_uri",
]
