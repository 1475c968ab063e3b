"""
Content Sniffer

Classifies a stream by its leading bytes (magic number), independent of the
file name.

Author: BlobGate Contributors
Date: 2026
"""

from typing import BinaryIO, Dict, FrozenSet

SNIFF_LENGTH = 0x10

# "XX-XX-XX-XX": four bytes as separated hex pairs
SIGNATURE_LENGTH = 11

# One signature can stand for several formats; it is not disambiguated.
SIGNATURES: Dict[str, FrozenSet[str]] = {
    "D0-CF-11-E0": frozenset({"xls", "doc"}),
    "FF-D8-FF-E0": frozenset({"jpeg", "pdf"}),
    "25-50-44-46": frozenset({"pdf1"}),
    "89-50-4E-47": frozenset({"png"}),
    "50-4B-03-04": frozenset({"xlsx", "docx"}),
    "61-64-73-61": frozenset({"txt"}),
    "30-82-08-3B": frozenset({"zd"}),
    "30-82-08-3A": frozenset({"zd1"}),
}


class ContentSniffer:
    """Magic-number classifier backed by a fixed signature table."""

    def __init__(self, signatures: Dict[str, FrozenSet[str]] = SIGNATURES):
        self._signatures = signatures

    @staticmethod
    def signature_of(head: bytes) -> str:
        """Render leading bytes as an uppercase, dash-separated hex signature."""
        return head[:SNIFF_LENGTH].hex("-").upper()[:SIGNATURE_LENGTH]

    def sniff(self, stream: BinaryIO) -> str:
        """
        Read the first bytes of ``stream`` and return its signature.

        Seekable streams are rewound to where they were, so the sniffed
        bytes are still part of a subsequent upload. Short streams yield a
        short signature that matches nothing.
        """
        position = stream.tell() if stream.seekable() else None
        head = stream.read(SNIFF_LENGTH) or b""
        if position is not None:
            stream.seek(position)
        return self.signature_of(head)

    def match(self, signature: str) -> FrozenSet[str]:
        """Return the candidate tags for a signature (empty when unknown)."""
        return self._signatures.get(signature, frozenset())

    def is_known(self, signature: str) -> bool:
        return signature in self._signatures
