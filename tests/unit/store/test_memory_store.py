"""
Unit tests for the in-memory object store.
"""

import io

import pytest

from blobgate.store.exceptions import (
    BlobAlreadyExistsError,
    BlobNotFoundError,
    ContainerAlreadyExistsError,
    ContainerNotFoundError,
    ErrorCode,
    InvalidResourceNameError,
)
from blobgate.store.interface import BlobHeaders, PublicAccessLevel
from blobgate.store.memory import ContainerNameValidator, InMemoryObjectStore


@pytest.fixture
def store():
    """Create a fresh store for each test."""
    return InMemoryObjectStore(account_url="http://127.0.0.1:10000/devstoreaccount1")


@pytest.fixture
async def store_with_container(store):
    """Create a store with a test container."""
    await store.create_container("test-container")
    return store


class TestContainerNameValidator:
    """Test Azure container naming rules."""

    @pytest.mark.parametrize("name", ["abc", "my-container", "a1b2c3", "a" * 63])
    def test_valid(self, name):
        assert ContainerNameValidator.validate(name) == (True, None)

    @pytest.mark.parametrize("name", ["", "ab", "a" * 64, "My-Container", "-abc", "abc-", "a--b", "a_b"])
    def test_invalid(self, name):
        is_valid, error = ContainerNameValidator.validate(name)
        assert not is_valid
        assert error


class TestContainers:
    """Test container management."""

    @pytest.mark.asyncio
    async def test_create_container(self, store):
        container = await store.create_container("docs")

        assert container.name == "docs"
        assert container.public_access == PublicAccessLevel.PRIVATE

    @pytest.mark.asyncio
    async def test_create_container_twice(self, store_with_container):
        with pytest.raises(ContainerAlreadyExistsError):
            await store_with_container.create_container("test-container")

    @pytest.mark.asyncio
    async def test_invalid_container_name(self, store):
        with pytest.raises(InvalidResourceNameError) as exc_info:
            await store.create_container("Bad_Name")

        assert exc_info.value.error_code == ErrorCode.INVALID_RESOURCE_NAME

    @pytest.mark.asyncio
    async def test_set_public_access_creates_container(self, store):
        await store.set_public_access_policy("docs")

        container = await store.get_container("docs")
        assert container.public_access == PublicAccessLevel.CONTAINER

    @pytest.mark.asyncio
    async def test_set_public_access_is_idempotent(self, store_with_container):
        await store_with_container.write("test-container", "a.txt", io.BytesIO(b"x"))

        await store_with_container.set_public_access_policy("test-container")
        await store_with_container.set_public_access_policy("test-container")

        container = await store_with_container.get_container("test-container")
        assert container.public_access == PublicAccessLevel.CONTAINER
        assert await store_with_container.exists("test-container", "a.txt")

    @pytest.mark.asyncio
    async def test_get_missing_container(self, store):
        with pytest.raises(ContainerNotFoundError):
            await store.get_container("missing")

    def test_container_uri(self, store):
        assert store.container_uri("docs") == "http://127.0.0.1:10000/devstoreaccount1/docs"

    @pytest.mark.asyncio
    async def test_reset(self, store_with_container):
        await store_with_container.reset()

        with pytest.raises(ContainerNotFoundError):
            await store_with_container.get_container("test-container")


class TestObjects:
    """Test object operations."""

    @pytest.mark.asyncio
    async def test_write_and_read(self, store_with_container):
        await store_with_container.write("test-container", "a.txt", io.BytesIO(b"Hello, World!"))

        stream = await store_with_container.open_read("test-container", "a.txt")

        assert stream.read() == b"Hello, World!"

    @pytest.mark.asyncio
    async def test_write_reads_from_current_position(self, store_with_container):
        stream = io.BytesIO(b"skipHello")
        stream.seek(4)

        await store_with_container.write("test-container", "a.txt", stream)

        assert (await store_with_container.open_read("test-container", "a.txt")).read() == b"Hello"

    @pytest.mark.asyncio
    async def test_default_content_type(self, store_with_container):
        await store_with_container.write("test-container", "a.bin", io.BytesIO(b"x"))

        props = await store_with_container.get_metadata("test-container", "a.bin")

        assert props.content_type == "application/octet-stream"
        assert props.content_length == 1
        assert props.etag.startswith("0x")

    @pytest.mark.asyncio
    async def test_write_with_headers(self, store_with_container):
        headers = BlobHeaders(content_type="text/html", cache_control="max-age=3600")

        await store_with_container.write("test-container", "index.html", io.BytesIO(b"<html/>"), headers)

        props = await store_with_container.get_metadata("test-container", "index.html")
        assert props.content_type == "text/html"

    @pytest.mark.asyncio
    async def test_write_existing_name(self, store_with_container):
        await store_with_container.write("test-container", "a.txt", io.BytesIO(b"one"))

        with pytest.raises(BlobAlreadyExistsError) as exc_info:
            await store_with_container.write("test-container", "a.txt", io.BytesIO(b"two"))

        assert exc_info.value.is_already_exists
        assert (await store_with_container.open_read("test-container", "a.txt")).read() == b"one"

    @pytest.mark.asyncio
    async def test_write_missing_container(self, store):
        with pytest.raises(ContainerNotFoundError) as exc_info:
            await store.write("missing", "a.txt", io.BytesIO(b"x"))

        assert exc_info.value.is_not_found

    @pytest.mark.asyncio
    async def test_write_empty_name(self, store_with_container):
        with pytest.raises(InvalidResourceNameError):
            await store_with_container.write("test-container", "", io.BytesIO(b"x"))

    @pytest.mark.asyncio
    async def test_exists(self, store_with_container):
        assert not await store_with_container.exists("test-container", "a.txt")
        assert not await store_with_container.exists("missing", "a.txt")

        await store_with_container.write("test-container", "a.txt", io.BytesIO(b"x"))

        assert await store_with_container.exists("test-container", "a.txt")

    @pytest.mark.asyncio
    async def test_open_read_missing(self, store_with_container):
        with pytest.raises(BlobNotFoundError) as exc_info:
            await store_with_container.open_read("test-container", "missing.txt")

        assert exc_info.value.error_code == ErrorCode.BLOB_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete(self, store_with_container):
        await store_with_container.write("test-container", "a.txt", io.BytesIO(b"x"))

        await store_with_container.delete("test-container", "a.txt")

        assert not await store_with_container.exists("test-container", "a.txt")

    @pytest.mark.asyncio
    async def test_delete_missing(self, store_with_container):
        with pytest.raises(BlobNotFoundError):
            await store_with_container.delete("test-container", "a.txt")

    @pytest.mark.asyncio
    async def test_list_objects(self, store_with_container):
        await store_with_container.write("test-container", "b.txt", io.BytesIO(b"x"))
        await store_with_container.write(
            "test-container", "a.png", io.BytesIO(b"y"), BlobHeaders(content_type="image/png")
        )

        objects = await store_with_container.list_objects("test-container")

        assert [(o.name, o.content_type) for o in objects] == [
            ("b.txt", "application/octet-stream"),
            ("a.png", "image/png"),
        ]

    @pytest.mark.asyncio
    async def test_list_empty(self, store_with_container):
        assert await store_with_container.list_objects("test-container") == []

    @pytest.mark.asyncio
    async def test_list_missing_container(self, store):
        with pytest.raises(ContainerNotFoundError):
            await store.list_objects("missing")

    @pytest.mark.asyncio
    async def test_context_manager(self):
        async with InMemoryObjectStore() as store:
            await store.create_container("docs")
            assert await store.list_objects("docs") == []
