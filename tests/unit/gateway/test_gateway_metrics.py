"""
Tests for gateway Prometheus metrics.
"""

import pytest
from prometheus_client import CollectorRegistry

from blobgate.gateway.metrics import GatewayMetrics, get_metrics, reset_metrics


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    return GatewayMetrics(registry=registry)


class TestGatewayMetrics:
    """Test cases for metrics collection."""

    def test_track_operation(self, metrics, registry):
        metrics.track_operation("upload", "FILE_SUCCESS_UPLOADED", 0.02)
        metrics.track_operation("upload", "FILE_SUCCESS_UPLOADED", 0.03)

        assert registry.get_sample_value(
            "blobgate_operations_total",
            {"operation": "upload", "status": "FILE_SUCCESS_UPLOADED"},
        ) == 2
        assert registry.get_sample_value(
            "blobgate_operation_duration_seconds_count",
            {"operation": "upload"},
        ) == 2

    def test_track_rejection(self, metrics, registry):
        metrics.track_rejection("FILE_SIZE_OVER")

        assert registry.get_sample_value(
            "blobgate_upload_rejections_total", {"reason": "FILE_SIZE_OVER"}
        ) == 1

    def test_track_upload_size(self, metrics, registry):
        metrics.track_upload_size(2048)

        assert registry.get_sample_value("blobgate_upload_size_bytes_sum") == 2048

    def test_generate_metrics(self, metrics):
        metrics.track_operation("get", "FILE_NOT_FOUND", 0.001)

        output = metrics.generate_metrics()

        assert b"blobgate_operations_total" in output
        assert metrics.get_content_type().startswith("text/plain")

    def test_instances_are_isolated(self):
        first = GatewayMetrics()
        second = GatewayMetrics()

        first.track_rejection("FILE_TYPE_ERROR")

        assert second.registry.get_sample_value(
            "blobgate_upload_rejections_total", {"reason": "FILE_TYPE_ERROR"}
        ) is None

    def test_global_singleton(self):
        reset_metrics()
        assert get_metrics() is get_metrics()
        previous = get_metrics()
        reset_metrics()
        assert get_metrics() is not previous
