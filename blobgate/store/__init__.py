"""
BlobGate Object Store Backends

Capability interface consumed by the gateway plus its in-memory and Azure
Blob Storage implementations.
"""

from .exceptions import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    ContainerAlreadyExistsError,
    ContainerNotFoundError,
    ErrorCode,
    InvalidResourceNameError,
    ObjectStoreError,
)
from .factory import create_object_store
from .interface import (
    BlobHeaders,
    ObjectInfo,
    ObjectProperties,
    ObjectStoreClient,
    PublicAccessLevel,
)
from .memory import InMemoryObjectStore

__all__ = [
    "BlobAlreadyExistsError",
    "BlobHeaders",
    "BlobNotFoundError",
    "ContainerAlreadyExistsError",
    "ContainerNotFoundError",
    "ErrorCode",
    "InMemoryObjectStore",
    "InvalidResourceNameError",
    "ObjectInfo",
    "ObjectProperties",
    "ObjectStoreClient",
    "ObjectStoreError",
    "PublicAccessLevel",
    "create_object_store",
]
