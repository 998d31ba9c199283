from __future__ import annotations

import base64

import pytest

from pyv16._codec import ObfuscationCodec, xor_bytes
from pyv16.exceptions import V16DecodeError, V16EncodingError


def test_xor_twice_with_same_key_returns_original_bytes() -> None:
    original = bytes(range(256))
    assert xor_bytes(xor_bytes(original)) == original


def test_xor_uses_protocol_key() -> None:
    assert xor_bytes(b"\x00\x4b\xff") == b"\x4b\x00\xb4"


def test_xor_rejects_multi_byte_key() -> None:
    with pytest.raises(ValueError):
        xor_bytes(b"abc", key=0x100)


def test_envelope_encode_decode_inverse() -> None:
    codec = ObfuscationCodec()
    text = '{"situationsRecords":[],"nota":"señal"}'
    encoded = codec.encode_envelope(text)

    assert codec.decode_envelope(encoded) == text.encode("utf-8")
    assert codec.decode_envelope(encoded.encode("ascii")) == text.encode("utf-8")


def test_envelope_is_plain_base64_of_xored_bytes() -> None:
    encoded = ObfuscationCodec().encode_envelope(b"{}")
    assert base64.b64decode(encoded) == bytes([ord("{") ^ 0x4B, ord("}") ^ 0x4B])


def test_envelope_tolerates_line_breaks() -> None:
    codec = ObfuscationCodec()
    encoded = codec.encode_envelope("x" * 120)
    wrapped = "\n".join(encoded[i : i + 40] for i in range(0, len(encoded), 40))
    assert codec.decode_envelope(f"  {wrapped}\r\n") == b"x" * 120


@pytest.mark.parametrize("payload", ["not base64!!", "abc", "QUJD$"])
def test_malformed_base64_raises_encoding_error(payload: str) -> None:
    with pytest.raises(V16EncodingError) as excinfo:
        ObfuscationCodec().decode_envelope(payload)
    assert isinstance(excinfo.value, V16DecodeError)
    assert excinfo.value.stage == "encoding"


def test_non_ascii_envelope_bytes_raise_encoding_error() -> None:
    with pytest.raises(V16EncodingError):
        ObfuscationCodec().decode_envelope("QUJD".encode("ascii") + b"\xc3\xa9")
