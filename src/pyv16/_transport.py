"""HTTP transport for the DGT feed."""

from __future__ import annotations

import logging
from typing import Protocol

import aiohttp

from pyv16._constants import REQUEST_BODY, USER_AGENT
from pyv16.config import V16Config
from pyv16.exceptions import V16TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by the client.

    Anything that returns the raw feed body works, which keeps tests
    free of network access.
    """

    async def fetch_feed(self) -> bytes:
        ...


class FeedTransport:
    """POST the fixed filter body to the feed URL and return the raw body.

    The body is returned undecoded; transport failures raise
    :class:`V16TransportError`, never a decode error.
    """

    def __init__(self, config: V16Config, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def fetch_feed(self) -> bytes:
        url = self._config.api_url
        headers: dict[str, str] = {
            "accept": "application/json, text/plain, */*",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        _logger.debug("POST %s", url)

        try:
            async with self._http.post(url, data=REQUEST_BODY, headers=headers, timeout=timeout) as resp:
                body = await resp.read()
                if resp.status != 200:
                    raise V16TransportError(
                        f"HTTP {resp.status} from {url}: {body[:200]!r}",
                        status_code=resp.status,
                        url=url,
                    )
        except V16TransportError:
            raise
        except TimeoutError as exc:
            raise V16TransportError(
                f"Request to {url} timed out after {self._config.request_timeout}s",
                url=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise V16TransportError(f"Request to {url} failed: {exc}", url=url) from exc

        if not body.strip():
            raise V16TransportError(f"Empty response body from {url}", status_code=200, url=url)

        _logger.debug("Received %d bytes from %s", len(body), url)
        return body
