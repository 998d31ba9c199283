"""Custom exception hierarchy for pyv16."""

from __future__ import annotations


class V16Error(Exception):
    """Base exception for all pyv16 errors."""


class V16ConfigError(V16Error):
    """Invalid or missing configuration."""


class V16TransportError(V16Error):
    """HTTP-level failure (network, non-200, empty body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class V16RefreshInProgressError(V16Error):
    """A refresh was requested while another one is still running."""


class V16DecodeError(V16Error):
    """The feed payload could not be decoded.

    ``stage`` names the pipeline step that failed: ``"encoding"``,
    ``"text"`` or ``"structure"``.
    """

    stage: str = ""

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        if stage is not None:
            self.stage = stage
        super().__init__(message)


class V16EncodingError(V16DecodeError):
    """Payload is not valid Base64."""

    stage = "encoding"


class V16TextEncodingError(V16DecodeError):
    """De-obfuscated bytes are not valid UTF-8."""

    stage = "text"


class V16MalformedStructureError(V16DecodeError):
    """Decoded text is not JSON or does not have the expected shape."""

    stage = "structure"
