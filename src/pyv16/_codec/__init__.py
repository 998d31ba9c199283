"""Transport obfuscation primitives for the DGT feed."""

from __future__ import annotations

from typing import Protocol

from pyv16._codec.envelope import ObfuscationCodec
from pyv16._codec.xor import xor_bytes


class EnvelopeCodec(Protocol):
    """Protocol for feed envelope encoding/decoding."""

    def encode_envelope(self, plaintext: str | bytes) -> str: ...

    def decode_envelope(self, envelope: str | bytes) -> bytes: ...


__all__ = [
    "EnvelopeCodec",
    "ObfuscationCodec",
    "xor_bytes",
]
