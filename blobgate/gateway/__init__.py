"""
BlobGate Gateway

Upload policy (content sniffing, size limit), result model and the blob
gateway service.
"""

from .metrics import GatewayMetrics, get_metrics, reset_metrics
from .models import Blob, OperationResult, StatusCode, compose_uri
from .service import BlobGatewayService
from .sniffer import SIGNATURES, ContentSniffer
from .validator import UploadPolicyValidator, ValidationOutcome

__all__ = [
    "Blob",
    "BlobGatewayService",
    "ContentSniffer",
    "GatewayMetrics",
    "OperationResult",
    "SIGNATURES",
    "StatusCode",
    "UploadPolicyValidator",
    "ValidationOutcome",
    "compose_uri",
    "get_metrics",
    "reset_metrics",
]
