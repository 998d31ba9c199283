"""Feed envelope encoding/decoding (Base64 over single-byte XOR)."""

from __future__ import annotations

import base64
import binascii
import logging

from pyv16._codec.xor import xor_bytes
from pyv16._constants import XOR_KEY
from pyv16.exceptions import V16EncodingError

_logger = logging.getLogger(__name__)


def _normalise_envelope_input(envelope: str | bytes) -> str:
    """Strip whitespace and line breaks the transport may have inserted."""
    if isinstance(envelope, bytes):
        try:
            envelope = envelope.decode("ascii")
        except UnicodeDecodeError as exc:
            raise V16EncodingError(f"Envelope contains non-ASCII bytes at offset {exc.start}") from exc
    return "".join(envelope.split())


class ObfuscationCodec:
    """Encode and decode feed envelopes.

    Decoding is ``base64 → XOR(key)``; encoding is the exact inverse and
    exists to build payloads for fixtures and tooling.

    Parameters
    ----------
    key : int
        Single-byte XOR key. Defaults to the protocol constant ``0x4B``.
    """

    def __init__(self, key: int = XOR_KEY) -> None:
        if not 0 <= key <= 0xFF:
            raise ValueError(f"XOR key must fit in one byte, got {key}")
        self._key = key

    def encode_envelope(self, plaintext: str | bytes) -> str:
        """Encode plaintext into an envelope string.

        Parameters
        ----------
        plaintext : str or bytes
            Data to encode. Strings are UTF-8 encoded.

        Returns
        -------
        str
            ASCII Base64 text.
        """
        plain_bytes = plaintext.encode("utf-8") if isinstance(plaintext, str) else plaintext
        return base64.b64encode(xor_bytes(plain_bytes, self._key)).decode("ascii")

    def decode_envelope(self, envelope: str | bytes) -> bytes:
        """Decode an envelope back to plaintext bytes.

        The result is not checked for valid UTF-8; that is the caller's
        next stage.

        Raises
        ------
        V16EncodingError
            If the envelope is not valid Base64.
        """
        b64_payload = _normalise_envelope_input(envelope)
        try:
            obfuscated = base64.b64decode(b64_payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise V16EncodingError(f"Invalid base64 in feed envelope: {exc}") from exc

        _logger.debug("Decoded %d obfuscated bytes from envelope", len(obfuscated))
        return xor_bytes(obfuscated, self._key)
