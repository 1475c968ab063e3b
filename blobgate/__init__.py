"""
BlobGate: validated gateway over remote blob storage

Accepts, retrieves, lists and removes blobs in named containers, enforcing
upload policy before delegating to the storage backend.
"""

__version__ = "0.1.0"

from .gateway.service import BlobGatewayService

__all__ = ["BlobGatewayService", "__version__"]
