"""
In-Memory Object Store

Dictionary-backed object store used for local development and tests.
Applies Azure container naming rules so invalid names fail like they would
against the real service.

Author: BlobGate Contributors
Date: 2026
"""

import asyncio
import hashlib
import io
import re
import uuid
from datetime import datetime, timezone
from typing import BinaryIO, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .exceptions import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    ContainerAlreadyExistsError,
    ContainerNotFoundError,
    InvalidResourceNameError,
)
from .interface import (
    DEFAULT_CONTENT_TYPE,
    BlobHeaders,
    ObjectInfo,
    ObjectProperties,
    ObjectStoreClient,
    PublicAccessLevel,
)


class ContainerNameValidator:
    """
    Validates Azure Blob Storage container names.

    Rules:
    - 3-63 characters
    - Lowercase letters, numbers, hyphens only
    - Must start and end with letter or number
    - No consecutive hyphens
    """

    PATTERN = re.compile(r'^[a-z0-9]([a-z0-9-]*[a-z0-9])?$')
    MIN_LENGTH = 3
    MAX_LENGTH = 63

    @classmethod
    def validate(cls, name: str) -> Tuple[bool, Optional[str]]:
        """
        Validate container name against Azure rules.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not name:
            return False, "Container name cannot be empty"

        if len(name) < cls.MIN_LENGTH:
            return False, f"Container name must be at least {cls.MIN_LENGTH} characters"

        if len(name) > cls.MAX_LENGTH:
            return False, f"Container name must be at most {cls.MAX_LENGTH} characters"

        if not cls.PATTERN.match(name):
            return False, "Container name must contain only lowercase letters, numbers, and hyphens, and must start/end with letter or number"

        if '--' in name:
            return False, "Container name cannot contain consecutive hyphens"

        return True, None


class StoredObject(BaseModel):
    """An object held by the in-memory store."""

    name: str
    content: bytes
    content_type: str = Field(default=DEFAULT_CONTENT_TYPE)
    content_encoding: Optional[str] = None
    content_language: Optional[str] = None
    cache_control: Optional[str] = None
    content_disposition: Optional[str] = None
    etag: str
    last_modified: datetime


class StoredContainer(BaseModel):
    """A container held by the in-memory store."""

    name: str
    public_access: PublicAccessLevel = PublicAccessLevel.PRIVATE
    objects: Dict[str, StoredObject] = Field(default_factory=dict)


class InMemoryObjectStore(ObjectStoreClient):
    """
    In-memory object store.

    The lock guards the dictionaries only; it is never held while a caller
    awaits anything else.
    """

    def __init__(self, account_url: str = "http://127.0.0.1:10000/devstoreaccount1"):
        self._account_url = account_url.rstrip("/")
        self._containers: Dict[str, StoredContainer] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Container management
    # ------------------------------------------------------------------

    async def create_container(
        self,
        name: str,
        public_access: PublicAccessLevel = PublicAccessLevel.PRIVATE,
    ) -> StoredContainer:
        """
        Create a new container.

        Raises:
            InvalidResourceNameError: If name is invalid
            ContainerAlreadyExistsError: If container already exists
        """
        self._validate_container_name(name)

        async with self._lock:
            if name in self._containers:
                raise ContainerAlreadyExistsError(name)
            container = StoredContainer(name=name, public_access=public_access)
            self._containers[name] = container
            return container

    async def get_container(self, name: str) -> StoredContainer:
        """
        Get container by name.

        Raises:
            ContainerNotFoundError: If container not found
        """
        self._validate_container_name(name)
        async with self._lock:
            return self._require_container(name)

    async def set_public_access_policy(self, container: str) -> None:
        self._validate_container_name(container)
        async with self._lock:
            stored = self._containers.get(container)
            if stored is None:
                stored = StoredContainer(name=container)
                self._containers[container] = stored
            stored.public_access = PublicAccessLevel.CONTAINER

    def container_uri(self, container: str) -> str:
        return f"{self._account_url}/{container}"

    # ------------------------------------------------------------------
    # Object operations
    # ------------------------------------------------------------------

    async def exists(self, container: str, name: str) -> bool:
        self._validate_container_name(container)
        async with self._lock:
            stored = self._containers.get(container)
            return stored is not None and name in stored.objects

    async def open_read(self, container: str, name: str) -> BinaryIO:
        obj = await self._get_object(container, name)
        return io.BytesIO(obj.content)

    async def get_metadata(self, container: str, name: str) -> ObjectProperties:
        obj = await self._get_object(container, name)
        return ObjectProperties(
            name=obj.name,
            content_type=obj.content_type,
            content_length=len(obj.content),
            etag=obj.etag,
            last_modified=obj.last_modified,
        )

    async def delete(self, container: str, name: str) -> None:
        self._validate_container_name(container)
        async with self._lock:
            stored = self._require_container(container)
            if name not in stored.objects:
                raise BlobNotFoundError(container, name)
            del stored.objects[name]

    async def write(
        self,
        container: str,
        name: str,
        stream: BinaryIO,
        headers: Optional[BlobHeaders] = None,
    ) -> None:
        self._validate_container_name(container)
        if not name:
            raise InvalidResourceNameError(name, "Blob name cannot be empty")

        content = stream.read()
        headers = headers or BlobHeaders()

        async with self._lock:
            stored = self._require_container(container)
            if name in stored.objects:
                raise BlobAlreadyExistsError(container, name)
            stored.objects[name] = StoredObject(
                name=name,
                content=content,
                content_type=headers.content_type or DEFAULT_CONTENT_TYPE,
                content_encoding=headers.content_encoding,
                content_language=headers.content_language,
                cache_control=headers.cache_control,
                content_disposition=headers.content_disposition,
                etag=self._generate_etag(content),
                last_modified=datetime.now(timezone.utc),
            )

    async def list_objects(self, container: str) -> List[ObjectInfo]:
        self._validate_container_name(container)
        async with self._lock:
            stored = self._require_container(container)
            return [
                ObjectInfo(name=obj.name, content_type=obj.content_type)
                for obj in stored.objects.values()
            ]

    async def reset(self) -> None:
        """Drop every container and object."""
        async with self._lock:
            self._containers.clear()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _get_object(self, container: str, name: str) -> StoredObject:
        self._validate_container_name(container)
        async with self._lock:
            stored = self._require_container(container)
            if name not in stored.objects:
                raise BlobNotFoundError(container, name)
            return stored.objects[name]

    def _require_container(self, name: str) -> StoredContainer:
        # Caller holds the lock
        if name not in self._containers:
            raise ContainerNotFoundError(name)
        return self._containers[name]

    @staticmethod
    def _validate_container_name(name: str) -> None:
        is_valid, error = ContainerNameValidator.validate(name)
        if not is_valid:
            raise InvalidResourceNameError(name, error)

    @staticmethod
    def _generate_etag(content: bytes) -> str:
        return f"0x{hashlib.md5(content + uuid.uuid4().bytes).hexdigest()[:16].upper()}"
