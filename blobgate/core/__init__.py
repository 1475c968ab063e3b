"""Core module initialization."""

from .config_manager import ConfigManager, BlobGateConfig
from .logging_config import setup_logging, operation_scope

__all__ = [
    "ConfigManager",
    "BlobGateConfig",
    "setup_logging",
    "operation_scope",
]
