"""
Object Store Factory

Creates the object store backend selected by configuration.

Author: BlobGate Contributors
Date: 2026
"""

from ..core.config_manager import StorageSettings, StoreBackendType
from .azure import AzureBlobObjectStore
from .interface import ObjectStoreClient
from .memory import InMemoryObjectStore


def create_object_store(settings: StorageSettings) -> ObjectStoreClient:
    """
    Factory function to create an object store from configuration.

    Args:
        settings: Storage settings

    Returns:
        Object store client instance

    Raises:
        ValueError: If the backend is unknown or misconfigured

    Example:
        ```python
        settings = StorageSettings(backend="azure", connection_string=conn_str)
        async with create_object_store(settings) as store:
            service = BlobGatewayService(store)
        ```
    """
    backend = StoreBackendType(settings.backend)

    if backend == StoreBackendType.MEMORY:
        return InMemoryObjectStore(account_url=settings.account_url)

    elif backend == StoreBackendType.AZURE:
        if not settings.connection_string:
            raise ValueError(
                "The azure backend needs a connection string "
                "(storage.connection_string or BLOBGATE_CONNECTION_STRING)"
            )
        return AzureBlobObjectStore(connection_string=settings.connection_string)

    raise ValueError(
        f"Unknown object store backend: {settings.backend}. "
        f"Supported backends: {[t.value for t in StoreBackendType]}"
    )
