"""
Configuration management for BlobGate.

Handles loading, validation, and access to configuration settings.
"""

import os
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional
from enum import Enum

import yaml
from pydantic import BaseModel, Field, field_validator, ValidationError, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024

_ACCOUNT_KEY_PATTERN = re.compile(r'(AccountKey=)[^;]+', re.IGNORECASE)
_SAS_PATTERN = re.compile(r'(SharedAccessSignature=)[^;]+', re.IGNORECASE)


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StoreBackendType(str, Enum):
    """Supported object store backends."""
    MEMORY = "memory"
    AZURE = "azure"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "json"
    file: Optional[str] = None
    rotation_size: str = "10MB"
    rotation_count: int = 5
    module_levels: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-module log levels, e.g., {'blobgate.gateway.service': 'DEBUG'}"
    )

    model_config = ConfigDict(use_enum_values=True)


class StorageSettings(BaseModel):
    """Object store backend configuration."""
    backend: StoreBackendType = StoreBackendType.MEMORY
    connection_string: Optional[str] = Field(
        default=None,
        description="Storage account connection string (required for the azure backend)"
    )
    account_url: str = Field(
        default="http://127.0.0.1:10000/devstoreaccount1",
        description="Base URI used by the in-memory backend when composing container URIs"
    )

    model_config = ConfigDict(use_enum_values=True)


class UploadPolicyConfig(BaseModel):
    """Upload policy enforced before any write reaches the backend."""
    max_size_bytes: int = Field(
        default=DEFAULT_MAX_UPLOAD_BYTES,
        gt=0,
        description="Uploads must be strictly smaller than this many bytes"
    )
    bypass_marker: str = Field(
        default=".zd",
        min_length=1,
        description="File names containing this marker skip signature checks"
    )
    public_container_access: bool = Field(
        default=True,
        description="Make the target container publicly readable on every upload"
    )


class BlobGateConfig(BaseModel):
    """Main BlobGate configuration schema."""

    version: str = Field(default="0.1.0", description="Configuration version")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    storage: StorageSettings = Field(default_factory=StorageSettings)

    upload_policy: UploadPolicyConfig = Field(default_factory=UploadPolicyConfig)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate version format."""
        parts = v.split(".")
        if len(parts) != 3:
            raise ValueError("Version must be in format x.y.z")
        for part in parts:
            if not part.isdigit():
                raise ValueError("Version components must be numeric")
        return v

    model_config = ConfigDict(use_enum_values=True)


def redact_connection_string(value: Optional[str]) -> Optional[str]:
    """Mask account keys and SAS tokens inside a connection string."""
    if not value:
        return value
    value = _ACCOUNT_KEY_PATTERN.sub(r'\1***REDACTED***', value)
    return _SAS_PATTERN.sub(r'\1***REDACTED***', value)


class ConfigManager:
    """
    Manages BlobGate configuration loading and validation.

    Configuration precedence (highest to lowest):
    1. CLI arguments
    2. Environment variables (BLOBGATE_*)
    3. Configuration file (YAML/JSON)
    4. Defaults
    """

    def __init__(self):
        self._config: Optional[BlobGateConfig] = None
        self._config_file: Optional[Path] = None

    def load(
        self,
        config_file: Optional[str] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> BlobGateConfig:
        """
        Load and validate configuration from multiple sources.

        Args:
            config_file: Path to configuration file (YAML or JSON)
            cli_overrides: Dictionary of CLI argument overrides

        Returns:
            Validated BlobGateConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If specified config file doesn't exist
        """
        logger.info("Loading BlobGate configuration")

        config_dict: Dict[str, Any] = {}

        if config_file:
            config_dict = self._load_from_file(config_file)
            self._config_file = Path(config_file)
            logger.info(f"Loaded configuration from file: {config_file}")

        env_config = self._load_from_env()
        config_dict = self._merge_configs(config_dict, env_config)
        if env_config:
            logger.info(f"Applied {len(env_config)} environment variable overrides")

        if cli_overrides:
            config_dict = self._merge_configs(config_dict, cli_overrides)
            logger.info(f"Applied {len(cli_overrides)} CLI argument overrides")

        try:
            self._config = BlobGateConfig(**config_dict)
            logger.info("Configuration validated successfully")
            self._log_configuration()
            return self._config
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

    def _load_from_file(self, file_path: str) -> Dict[str, Any]:
        """Load configuration from YAML or JSON file."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                return yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                return json.load(f)
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        if log_level := os.getenv("BLOBGATE_LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level.upper()
        if log_file := os.getenv("BLOBGATE_LOG_FILE"):
            config.setdefault("logging", {})["file"] = log_file

        if backend := os.getenv("BLOBGATE_BACKEND"):
            config.setdefault("storage", {})["backend"] = backend.lower()
        if connection_string := os.getenv("BLOBGATE_CONNECTION_STRING"):
            config.setdefault("storage", {})["connection_string"] = connection_string

        if max_bytes := os.getenv("BLOBGATE_MAX_UPLOAD_BYTES"):
            config.setdefault("upload_policy", {})["max_size_bytes"] = int(max_bytes)

        return config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def _log_configuration(self) -> None:
        """Log the loaded configuration (with the connection string redacted)."""
        if not self._config:
            return

        config_dict = self._config.model_dump()
        storage = config_dict.get("storage", {})
        if storage.get("connection_string"):
            storage["connection_string"] = redact_connection_string(storage["connection_string"])

        logger.info(f"Active configuration: {json.dumps(config_dict, indent=2)}")

    def get_config(self) -> BlobGateConfig:
        """
        Get the loaded configuration.

        Returns:
            BlobGateConfig instance

        Raises:
            RuntimeError: If configuration hasn't been loaded
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call load() first.")
        return self._config

    def reload(self) -> BlobGateConfig:
        """Reload configuration from the same sources."""
        config_file = str(self._config_file) if self._config_file else None
        return self.load(config_file=config_file)
