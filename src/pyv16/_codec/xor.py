"""Single-byte XOR used by the upstream feed.

Not encryption: the key is a published protocol constant and the
transform is its own inverse.
"""

from __future__ import annotations

from pyv16._constants import XOR_KEY


def xor_bytes(data: bytes, key: int = XOR_KEY) -> bytes:
    """XOR every byte of *data* with the single-byte *key*.

    Applying the function twice with the same key returns *data*.
    """
    if not 0 <= key <= 0xFF:
        raise ValueError(f"XOR key must fit in one byte, got {key}")
    return bytes(b ^ key for b in data)
