"""
Blob Gateway Service

Orchestrates get, delete, download, list and upload against an object store.
Uploads pass the upload policy before any backend call; backend faults are
translated into the closed status vocabulary.

Author: BlobGate Contributors
Date: 2026
"""

import inspect
import io
import logging
import time
from functools import wraps
from typing import BinaryIO, Callable, List, Optional, Tuple, Union

from ..core.config_manager import BlobGateConfig
from ..core.logging_config import operation_scope
from ..store.exceptions import ObjectStoreError
from ..store.interface import BlobHeaders, ObjectStoreClient
from .metrics import GatewayMetrics, get_metrics
from .models import Blob, OperationResult, StatusCode, compose_uri
from .validator import UploadPolicyValidator

logger = logging.getLogger(__name__)

UploadData = Union[bytes, bytearray, BinaryIO]


def _status_label(result) -> str:
    if isinstance(result, OperationResult):
        return result.status_code.value if result.status_code else "FILE_FOUND"
    if isinstance(result, list):
        return "ok"
    return "found" if result is not None else "missing"


def _tracked(operation: str) -> Callable:
    """
    Run a gateway call inside its own logging scope and record one metrics
    sample for it, including calls that raise.
    """
    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            arguments = signature.bind(self, *args, **kwargs).arguments
            blob_name = arguments.get("blob_name", arguments.get("file_name"))
            with operation_scope(operation, arguments.get("container_name"), blob_name):
                started = time.perf_counter()
                status = "backend_fault"
                try:
                    result = await func(self, *args, **kwargs)
                    status = _status_label(result)
                    return result
                finally:
                    elapsed = time.perf_counter() - started
                    self.metrics.track_operation(operation, status, elapsed)
                    logger.debug(f"{operation} finished with {status} in {elapsed * 1000:.1f}ms")
        return wrapper
    return decorator


def _open_upload_stream(file_data: UploadData) -> Tuple[BinaryIO, bool]:
    """
    Return a seekable stream over the upload and whether the gateway owns it.

    Non-seekable streams are buffered so the sniffed bytes can be re-read.
    """
    if isinstance(file_data, (bytes, bytearray)):
        return io.BytesIO(bytes(file_data)), True
    if file_data.seekable():
        return file_data, False
    return io.BytesIO(file_data.read()), True


def _remaining_length(stream: BinaryIO) -> int:
    position = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(position)
    return end - position


class BlobGatewayService:
    """
    Validated gateway over an object store.

    The service holds no per-call state: every operation resolves its
    container from the argument, so concurrent calls on different containers
    never see each other's target. Unclassified backend faults propagate from
    get, delete, download and list; upload maps them to GENERAL_ERROR.
    """

    def __init__(
        self,
        store: ObjectStoreClient,
        validator: Optional[UploadPolicyValidator] = None,
        public_container_access: bool = True,
        metrics: Optional[GatewayMetrics] = None,
    ):
        self.store = store
        self.validator = validator or UploadPolicyValidator()
        self.public_container_access = public_container_access
        self.metrics = metrics or get_metrics()

    @classmethod
    def from_config(
        cls,
        config: BlobGateConfig,
        store: ObjectStoreClient,
        metrics: Optional[GatewayMetrics] = None,
    ) -> "BlobGatewayService":
        return cls(
            store,
            validator=UploadPolicyValidator.from_config(config.upload_policy),
            public_container_access=config.upload_policy.public_container_access,
            metrics=metrics,
        )

    def _blob_uri(self, container_name: str, blob_name: str) -> str:
        return compose_uri(self.store.container_uri(container_name), blob_name)

    @_tracked("get")
    async def get(self, blob_name: str, container_name: str) -> OperationResult:
        """
        Fetch a blob's content stream.

        Returns FILE_NOT_FOUND when the blob is missing; the content type is
        not fetched.
        """
        try:
            if await self.store.exists(container_name, blob_name):
                content = await self.store.open_read(container_name, blob_name)
                blob = Blob(
                    name=blob_name,
                    uri=self._blob_uri(container_name, blob_name),
                    content=content,
                )
                return OperationResult.success(None, blob_name, blob=blob)
        except ObjectStoreError as e:
            if not e.is_not_found:
                raise
            logger.debug(f"Get of '{blob_name}' in '{container_name}' hit {e.error_code}")

        return OperationResult.failure(StatusCode.FILE_NOT_FOUND, blob_name)

    @_tracked("delete")
    async def delete(self, blob_name: str, container_name: str) -> OperationResult:
        """Delete a blob without checking for it first."""
        try:
            await self.store.delete(container_name, blob_name)
        except ObjectStoreError as e:
            if not e.is_not_found:
                raise
            return OperationResult.failure(StatusCode.FILE_NOT_FOUND, blob_name)

        logger.info(f"Deleted '{blob_name}' from '{container_name}'")
        return OperationResult.success(StatusCode.FILE_SUCCESS_DELETED, blob_name)

    @_tracked("download")
    async def download(self, blob_name: str, container_name: str) -> Optional[Blob]:
        """
        Fetch a blob's content stream and content type.

        Returns None when the blob is missing; unlike get there is no status.
        """
        try:
            if await self.store.exists(container_name, blob_name):
                content = await self.store.open_read(container_name, blob_name)
                try:
                    properties = await self.store.get_metadata(container_name, blob_name)
                except ObjectStoreError:
                    content.close()
                    raise
                return Blob(
                    name=blob_name,
                    uri=self._blob_uri(container_name, blob_name),
                    content_type=properties.content_type,
                    content=content,
                )
        except ObjectStoreError as e:
            if not e.is_not_found:
                raise
            logger.debug(f"Download of '{blob_name}' in '{container_name}' hit {e.error_code}")

        return None

    @_tracked("list")
    async def list_blobs(self, container_name: str) -> List[Blob]:
        """List every blob in the container, without content."""
        container_uri = self.store.container_uri(container_name)
        return [
            Blob(
                name=info.name,
                uri=compose_uri(container_uri, info.name),
                content_type=info.content_type,
            )
            for info in await self.store.list_objects(container_name)
        ]

    @_tracked("upload")
    async def upload(
        self,
        file_data: UploadData,
        file_name: str,
        container_name: str,
        headers: Optional[BlobHeaders] = None,
        length: Optional[int] = None,
    ) -> OperationResult:
        """
        Validate and store a new blob.

        Args:
            file_data: Bytes or a binary stream positioned at the payload start
            file_name: Blob name; must not already exist in the container
            container_name: Target container, provisioned on demand
            headers: Optional content headers passed through to the backend
            length: Payload size in bytes; measured from the stream when omitted

        Returns:
            OperationResult with FILE_SUCCESS_UPLOADED and a blob whose content
            is re-read from the backend, or an error status
        """
        stream, owned = _open_upload_stream(file_data)
        try:
            if length is None:
                length = _remaining_length(stream)
            return await self._upload(stream, length, file_name, container_name, headers)
        finally:
            if owned:
                stream.close()

    async def _upload(
        self,
        stream: BinaryIO,
        length: int,
        file_name: str,
        container_name: str,
        headers: Optional[BlobHeaders],
    ) -> OperationResult:
        outcome = self.validator.validate(length, stream, file_name)
        if not outcome.passed:
            self.metrics.track_rejection(outcome.status_code.value)
            return OperationResult.failure(outcome.status_code, file_name)

        try:
            if self.public_container_access:
                await self.store.set_public_access_policy(container_name)

            if await self.store.exists(container_name, file_name):
                return OperationResult.failure(StatusCode.FILE_ALREADY_EXISTS, file_name)

            await self.store.write(container_name, file_name, stream, headers)
            content = await self.store.open_read(container_name, file_name)
        except ObjectStoreError as e:
            if e.is_already_exists:
                return OperationResult.failure(StatusCode.FILE_ALREADY_EXISTS, file_name)
            logger.error(
                f"Upload of '{file_name}' to '{container_name}' failed "
                f"with backend error {e.error_code}: {e.message}"
            )
            return OperationResult.failure(StatusCode.GENERAL_ERROR, file_name)

        self.metrics.track_upload_size(length)
        logger.info(f"Uploaded '{file_name}' ({length} bytes, signature {outcome.signature}) to '{container_name}'")
        blob = Blob(
            name=file_name,
            uri=self._blob_uri(container_name, file_name),
            content=content,
        )
        return OperationResult.success(StatusCode.FILE_SUCCESS_UPLOADED, file_name, blob=blob)
