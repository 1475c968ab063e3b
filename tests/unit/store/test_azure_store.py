"""
Unit tests for the Azure Blob Storage object store.

SDK clients are replaced by mocks; no network access is needed.
"""

import io
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import (
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
)
from azure.storage.blob import StorageErrorCode

from blobgate.store.azure import AzureBlobObjectStore
from blobgate.store.exceptions import ErrorCode, ObjectStoreError
from blobgate.store.interface import BlobHeaders

CONTAINER_URL = "https://acct.blob.core.windows.net/docs"
CONNECTION_STRING = (
    "DefaultEndpointsProtocol=https;AccountName=acct;"
    "AccountKey=a2V5a2V5a2V5;EndpointSuffix=core.windows.net"
)


class _AsyncIter:
    """Minimal async iterator standing in for AsyncItemPaged."""

    def __init__(self, items):
        self._items = iter(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        try:
            return next(self._items)
        except StopIteration:
            raise StopAsyncIteration


def _fault(cls, error_code=None, message="request failed"):
    error = cls(message=message)
    if error_code is not None:
        error.error_code = error_code
    return error


@pytest.fixture
def blob_client():
    client = MagicMock()
    client.exists = AsyncMock(return_value=True)
    downloader = MagicMock()
    downloader.readall = AsyncMock(return_value=b"%PDF-1.7")
    client.download_blob = AsyncMock(return_value=downloader)
    client.get_blob_properties = AsyncMock(return_value=SimpleNamespace(
        name="a.pdf",
        content_settings=SimpleNamespace(content_type="application/pdf"),
        size=8,
        etag='"0x8D"',
        last_modified=datetime(2026, 1, 1, tzinfo=timezone.utc),
    ))
    client.delete_blob = AsyncMock()
    client.upload_blob = AsyncMock()
    return client


@pytest.fixture
def container_client(blob_client):
    client = MagicMock()
    client.url = CONTAINER_URL
    client.get_blob_client.return_value = blob_client
    client.create_container = AsyncMock()
    client.set_container_access_policy = AsyncMock()
    client.list_blobs = MagicMock(return_value=_AsyncIter([]))
    return client


@pytest.fixture
def service_client(container_client):
    client = MagicMock()
    client.get_container_client.return_value = container_client
    client.close = AsyncMock()
    return client


@pytest.fixture
def store(service_client):
    return AzureBlobObjectStore(service_client=service_client)


class TestConstruction:
    """Test client construction."""

    def test_requires_connection_string(self):
        with pytest.raises(ValueError):
            AzureBlobObjectStore()

    @pytest.mark.asyncio
    async def test_from_connection_string(self):
        store = AzureBlobObjectStore(connection_string=CONNECTION_STRING)

        assert store.container_uri("docs") == CONTAINER_URL
        await store.close()


class TestOperations:
    """Test the SDK calls made per operation."""

    @pytest.mark.asyncio
    async def test_exists(self, store, service_client, container_client, blob_client):
        assert await store.exists("docs", "a.pdf")

        service_client.get_container_client.assert_called_with("docs")
        container_client.get_blob_client.assert_called_with("a.pdf")

    @pytest.mark.asyncio
    async def test_open_read(self, store):
        stream = await store.open_read("docs", "a.pdf")

        assert isinstance(stream, io.BytesIO)
        assert stream.read() == b"%PDF-1.7"

    @pytest.mark.asyncio
    async def test_get_metadata(self, store):
        props = await store.get_metadata("docs", "a.pdf")

        assert props.name == "a.pdf"
        assert props.content_type == "application/pdf"
        assert props.content_length == 8

    @pytest.mark.asyncio
    async def test_delete(self, store, blob_client):
        await store.delete("docs", "a.pdf")

        blob_client.delete_blob.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_write_without_headers(self, store, blob_client):
        stream = io.BytesIO(b"data")

        await store.write("docs", "a.pdf", stream)

        blob_client.upload_blob.assert_awaited_once_with(stream, overwrite=False)

    @pytest.mark.asyncio
    async def test_write_with_headers(self, store, blob_client):
        await store.write(
            "docs", "a.pdf", io.BytesIO(b"data"),
            BlobHeaders(content_type="application/pdf", cache_control="no-cache"),
        )

        settings = blob_client.upload_blob.await_args.kwargs["content_settings"]
        assert settings.content_type == "application/pdf"
        assert settings.cache_control == "no-cache"
        assert blob_client.upload_blob.await_args.kwargs["overwrite"] is False

    @pytest.mark.asyncio
    async def test_list_objects(self, store, container_client):
        container_client.list_blobs.return_value = _AsyncIter([
            SimpleNamespace(name="a.pdf", content_settings=SimpleNamespace(content_type="application/pdf")),
            SimpleNamespace(name="b.bin", content_settings=None),
        ])

        objects = await store.list_objects("docs")

        assert [(o.name, o.content_type) for o in objects] == [
            ("a.pdf", "application/pdf"),
            ("b.bin", None),
        ]

    @pytest.mark.asyncio
    async def test_set_public_access_creates_container(self, store, container_client):
        await store.set_public_access_policy("docs")

        container_client.create_container.assert_awaited_once_with(public_access="container")
        container_client.set_container_access_policy.assert_not_called()

    @pytest.mark.asyncio
    async def test_set_public_access_on_existing_container(self, store, container_client):
        container_client.create_container.side_effect = _fault(ResourceExistsError, "ContainerAlreadyExists")

        await store.set_public_access_policy("docs")

        container_client.set_container_access_policy.assert_awaited_once_with(
            signed_identifiers={},
            public_access="container",
        )

    def test_container_uri(self, store):
        assert store.container_uri("docs") == CONTAINER_URL

    @pytest.mark.asyncio
    async def test_close(self, store, service_client):
        await store.close()

        service_client.close.assert_awaited_once()


class TestErrorTranslation:
    """SDK faults become ObjectStoreError with the Azure error code."""

    @pytest.mark.asyncio
    async def test_blob_not_found(self, store, blob_client):
        blob_client.delete_blob.side_effect = _fault(ResourceNotFoundError, "BlobNotFound")

        with pytest.raises(ObjectStoreError) as exc_info:
            await store.delete("docs", "a.pdf")

        assert exc_info.value.error_code == ErrorCode.BLOB_NOT_FOUND
        assert exc_info.value.is_not_found
        assert exc_info.value.details["blob"] == "a.pdf"

    @pytest.mark.asyncio
    async def test_not_found_without_code(self, store, blob_client):
        blob_client.download_blob.side_effect = _fault(ResourceNotFoundError)

        with pytest.raises(ObjectStoreError) as exc_info:
            await store.open_read("docs", "a.pdf")

        assert exc_info.value.error_code == ErrorCode.BLOB_NOT_FOUND

    @pytest.mark.asyncio
    async def test_blob_already_exists(self, store, blob_client):
        blob_client.upload_blob.side_effect = _fault(ResourceExistsError, "BlobAlreadyExists")

        with pytest.raises(ObjectStoreError) as exc_info:
            await store.write("docs", "a.pdf", io.BytesIO(b"x"))

        assert exc_info.value.is_already_exists

    @pytest.mark.asyncio
    async def test_container_not_found_on_list(self, store, container_client):
        container_client.list_blobs.side_effect = _fault(ResourceNotFoundError)

        with pytest.raises(ObjectStoreError) as exc_info:
            await store.list_objects("docs")

        assert exc_info.value.error_code == ErrorCode.CONTAINER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_unclassified_fault(self, store, blob_client):
        blob_client.exists.side_effect = _fault(HttpResponseError, "ServerBusy", "busy")

        with pytest.raises(ObjectStoreError) as exc_info:
            await store.exists("docs", "a.pdf")

        assert exc_info.value.error_code == "ServerBusy"
        assert not exc_info.value.is_not_found
        assert not exc_info.value.is_already_exists
        assert isinstance(exc_info.value.__cause__, HttpResponseError)

    @pytest.mark.asyncio
    async def test_sdk_enum_code_keeps_wire_value(self, store, blob_client):
        blob_client.exists.side_effect = _fault(HttpResponseError, StorageErrorCode.SERVER_BUSY, "busy")

        with pytest.raises(ObjectStoreError) as exc_info:
            await store.exists("docs", "a.pdf")

        assert exc_info.value.error_code == "ServerBusy"
        assert str(exc_info.value.error_code) == "ServerBusy"
        assert exc_info.value.to_dict()["error"]["code"] == "ServerBusy"

    @pytest.mark.asyncio
    async def test_sdk_enum_not_found_is_classified(self, store, blob_client):
        blob_client.delete_blob.side_effect = _fault(ResourceNotFoundError, StorageErrorCode.BLOB_NOT_FOUND)

        with pytest.raises(ObjectStoreError) as exc_info:
            await store.delete("docs", "a.pdf")

        assert exc_info.value.is_not_found
        assert str(exc_info.value.error_code) == ErrorCode.BLOB_NOT_FOUND
