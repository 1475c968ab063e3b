"""
Gateway Metrics Collection

Prometheus metrics for gateway operations, upload rejections and payload
sizes.

Author: BlobGate Contributors
Date: 2026
"""

from typing import Optional

from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


class GatewayMetrics:
    """
    Prometheus metrics collector for gateway operations.

    Each instance registers its collectors in its own registry unless one is
    passed in, so several gateways can coexist in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()

        self.operations_total = Counter(
            'blobgate_operations_total',
            'Total gateway operations by outcome',
            ['operation', 'status'],
            registry=self.registry
        )

        self.operation_duration_seconds = Histogram(
            'blobgate_operation_duration_seconds',
            'Gateway operation duration',
            ['operation'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=self.registry
        )

        self.upload_rejections_total = Counter(
            'blobgate_upload_rejections_total',
            'Uploads rejected by the upload policy',
            ['reason'],
            registry=self.registry
        )

        self.upload_size_bytes = Histogram(
            'blobgate_upload_size_bytes',
            'Size of accepted uploads',
            buckets=[1024, 10240, 102400, 524288, 1048576, 2097152, 5242880],
            registry=self.registry
        )

    def track_operation(self, operation: str, status: str, duration: float) -> None:
        """
        Track one gateway call.

        Args:
            operation: get/delete/download/list/upload
            status: Status code, or found/missing/ok for operations without one
            duration: Operation duration in seconds
        """
        self.operations_total.labels(operation=operation, status=status).inc()
        self.operation_duration_seconds.labels(operation=operation).observe(duration)

    def track_rejection(self, reason: str) -> None:
        self.upload_rejections_total.labels(reason=reason).inc()

    def track_upload_size(self, size_bytes: int) -> None:
        self.upload_size_bytes.observe(size_bytes)

    def generate_metrics(self) -> bytes:
        """Generate Prometheus metrics output."""
        return generate_latest(self.registry)

    def get_content_type(self) -> str:
        return CONTENT_TYPE_LATEST


# Global metrics instance
_metrics: Optional[GatewayMetrics] = None


def get_metrics() -> GatewayMetrics:
    """Get global metrics instance (singleton)."""
    global _metrics
    if _metrics is None:
        _metrics = GatewayMetrics()
    return _metrics


def reset_metrics() -> None:
    """Reset global metrics instance (for testing)."""
    global _metrics
    _metrics = None
