"""
Azure Blob Storage Object Store

Object store backed by the asynchronous Azure Storage SDK. SDK faults are
translated into ObjectStoreError carrying the Azure error code.

Author: BlobGate Contributors
Date: 2026
"""

import io
import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterator, List, Optional

from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.storage.blob import ContentSettings
from azure.storage.blob.aio import BlobServiceClient

from .exceptions import ErrorCode, ObjectStoreError
from .interface import (
    BlobHeaders,
    ObjectInfo,
    ObjectProperties,
    ObjectStoreClient,
    PublicAccessLevel,
)

logger = logging.getLogger(__name__)


@contextmanager
def _translated_errors(container: str, name: Optional[str] = None) -> Iterator[None]:
    """Re-raise Azure SDK faults as ObjectStoreError."""
    try:
        yield
    except HttpResponseError as e:
        # The SDK may hand back a StorageErrorCode member; keep its wire value
        error_code = getattr(e, "error_code", None)
        error_code = getattr(error_code, "value", error_code)
        if not error_code:
            if isinstance(e, ResourceNotFoundError):
                error_code = ErrorCode.BLOB_NOT_FOUND if name else ErrorCode.CONTAINER_NOT_FOUND
            elif isinstance(e, ResourceExistsError):
                error_code = ErrorCode.BLOB_ALREADY_EXISTS if name else ErrorCode.CONTAINER_ALREADY_EXISTS
        details = {"container": container}
        if name is not None:
            details["blob"] = name
        if getattr(e, "status_code", None) is not None:
            details["status_code"] = e.status_code
        raise ObjectStoreError(
            getattr(e, "message", None) or str(e),
            error_code=error_code or None,
            details=details,
        ) from e


class AzureBlobObjectStore(ObjectStoreClient):
    """
    Object store backed by Azure Blob Storage.

    The connection string is read once, here; container clients are resolved
    per call and never cached.
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        service_client: Optional[BlobServiceClient] = None,
    ):
        if service_client is None:
            if not connection_string:
                raise ValueError("A connection string is required for the Azure backend")
            service_client = BlobServiceClient.from_connection_string(connection_string)
        self._service = service_client

    async def exists(self, container: str, name: str) -> bool:
        blob = self._service.get_container_client(container).get_blob_client(name)
        with _translated_errors(container, name):
            return await blob.exists()

    async def open_read(self, container: str, name: str) -> BinaryIO:
        blob = self._service.get_container_client(container).get_blob_client(name)
        with _translated_errors(container, name):
            downloader = await blob.download_blob()
            return io.BytesIO(await downloader.readall())

    async def get_metadata(self, container: str, name: str) -> ObjectProperties:
        blob = self._service.get_container_client(container).get_blob_client(name)
        with _translated_errors(container, name):
            props = await blob.get_blob_properties()
        content_settings = getattr(props, "content_settings", None)
        return ObjectProperties(
            name=props.name or name,
            content_type=content_settings.content_type if content_settings else None,
            content_length=props.size or 0,
            etag=props.etag,
            last_modified=props.last_modified,
        )

    async def delete(self, container: str, name: str) -> None:
        blob = self._service.get_container_client(container).get_blob_client(name)
        with _translated_errors(container, name):
            await blob.delete_blob()

    async def write(
        self,
        container: str,
        name: str,
        stream: BinaryIO,
        headers: Optional[BlobHeaders] = None,
    ) -> None:
        blob = self._service.get_container_client(container).get_blob_client(name)
        kwargs = {}
        if headers is not None:
            kwargs["content_settings"] = ContentSettings(**headers.model_dump(exclude_none=True))
        with _translated_errors(container, name):
            await blob.upload_blob(stream, overwrite=False, **kwargs)

    async def list_objects(self, container: str) -> List[ObjectInfo]:
        container_client = self._service.get_container_client(container)
        objects: List[ObjectInfo] = []
        with _translated_errors(container):
            async for props in container_client.list_blobs():
                content_settings = getattr(props, "content_settings", None)
                objects.append(ObjectInfo(
                    name=props.name,
                    content_type=content_settings.content_type if content_settings else None,
                ))
        return objects

    async def set_public_access_policy(self, container: str) -> None:
        container_client = self._service.get_container_client(container)
        access = PublicAccessLevel.CONTAINER.value
        with _translated_errors(container):
            try:
                await container_client.create_container(public_access=access)
                logger.info(f"Created container '{container}' with public access '{access}'")
            except ResourceExistsError:
                await container_client.set_container_access_policy(
                    signed_identifiers={},
                    public_access=access,
                )

    def container_uri(self, container: str) -> str:
        return self._service.get_container_client(container).url

    async def close(self) -> None:
        await self._service.close()
