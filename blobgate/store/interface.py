"""
Object Store Client Interface

Defines the narrow capability interface the gateway consumes. Backends
(in-memory, Azure Blob Storage) implement it; the gateway never talks to a
storage SDK directly.

Author: BlobGate Contributors
Date: 2026
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import BinaryIO, List, Optional

from pydantic import BaseModel, Field


DEFAULT_CONTENT_TYPE = "application/octet-stream"


class PublicAccessLevel(str, Enum):
    """Container public access levels."""
    PRIVATE = "private"
    BLOB = "blob"
    CONTAINER = "container"


class BlobHeaders(BaseModel):
    """Optional content headers passed through to the backend on write."""

    content_type: Optional[str] = Field(default=None)
    content_encoding: Optional[str] = Field(default=None)
    content_language: Optional[str] = Field(default=None)
    cache_control: Optional[str] = Field(default=None)
    content_disposition: Optional[str] = Field(default=None)


class ObjectInfo(BaseModel):
    """One entry of a container enumeration."""

    name: str
    content_type: Optional[str] = None


class ObjectProperties(BaseModel):
    """Metadata of a single stored object."""

    name: str
    content_type: Optional[str] = None
    content_length: int = 0
    etag: Optional[str] = None
    last_modified: Optional[datetime] = None


class ObjectStoreClient(ABC):
    """
    Abstract base class for object store backends.

    Every method takes the container name explicitly; implementations must
    not remember a "current" container between calls.

    **Error Handling**:
    - Raise ObjectStoreError (or a subclass) carrying the backend error code
    - delete() raises a not-found fault when the object is absent
    - write() raises BlobAlreadyExistsError when the name is taken
    """

    @abstractmethod
    async def exists(self, container: str, name: str) -> bool:
        """Return True if the object exists in the container."""

    @abstractmethod
    async def open_read(self, container: str, name: str) -> BinaryIO:
        """
        Open a read stream over the object's content.

        The caller owns the returned stream and must close it.
        """

    @abstractmethod
    async def get_metadata(self, container: str, name: str) -> ObjectProperties:
        """Fetch the object's properties (content type, length, etag)."""

    @abstractmethod
    async def delete(self, container: str, name: str) -> None:
        """Delete the object, raising a not-found fault when absent."""

    @abstractmethod
    async def write(
        self,
        container: str,
        name: str,
        stream: BinaryIO,
        headers: Optional[BlobHeaders] = None,
    ) -> None:
        """Write the stream's remaining content as a new object."""

    @abstractmethod
    async def list_objects(self, container: str) -> List[ObjectInfo]:
        """Enumerate every object in the container, in backend order."""

    @abstractmethod
    async def set_public_access_policy(self, container: str) -> None:
        """Create the container if needed and make its blobs publicly readable."""

    @abstractmethod
    def container_uri(self, container: str) -> str:
        """Return the fully-qualified URI of the container."""

    async def close(self) -> None:
        """Release backend resources. Default: nothing to release."""

    async def __aenter__(self) -> "ObjectStoreClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
