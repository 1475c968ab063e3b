"""
Upload Policy Validator

Decides whether a candidate upload may proceed before any backend call is
made. Size is checked first; the first failing check decides the outcome.

Author: BlobGate Contributors
Date: 2026
"""

import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

from ..core.config_manager import DEFAULT_MAX_UPLOAD_BYTES, UploadPolicyConfig
from .models import StatusCode
from .sniffer import ContentSniffer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationOutcome:
    """Pass/fail decision with the rejecting status code, if any."""

    passed: bool
    status_code: Optional[StatusCode] = None
    signature: Optional[str] = None


class UploadPolicyValidator:
    """Pure upload gate: size limit, then content signature."""

    def __init__(
        self,
        max_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        bypass_marker: str = ".zd",
        sniffer: Optional[ContentSniffer] = None,
    ):
        self.max_size_bytes = max_size_bytes
        self.bypass_marker = bypass_marker
        self.sniffer = sniffer or ContentSniffer()

    @classmethod
    def from_config(cls, config: UploadPolicyConfig) -> "UploadPolicyValidator":
        return cls(
            max_size_bytes=config.max_size_bytes,
            bypass_marker=config.bypass_marker,
        )

    def check_size(self, length: int) -> bool:
        return length < self.max_size_bytes

    def check_type(self, signature: str, file_name: str) -> bool:
        # Either condition is enough; the marker does not replace the table
        return self.sniffer.is_known(signature) or self.bypass_marker in file_name

    def validate(self, length: int, stream: BinaryIO, file_name: str) -> ValidationOutcome:
        """
        Run the size check, then the type check.

        The stream is only sniffed when the size check passes.
        """
        if not self.check_size(length):
            logger.info(f"Rejected '{file_name}': {length} bytes is over the {self.max_size_bytes} byte limit")
            return ValidationOutcome(passed=False, status_code=StatusCode.FILE_SIZE_OVER)

        signature = self.sniffer.sniff(stream)
        if not self.check_type(signature, file_name):
            logger.info(f"Rejected '{file_name}': unrecognized signature '{signature}'")
            return ValidationOutcome(
                passed=False,
                status_code=StatusCode.FILE_TYPE_ERROR,
                signature=signature,
            )

        return ValidationOutcome(passed=True, signature=signature)
