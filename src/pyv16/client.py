"""High-level async client for the DGT V16 beacon feed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from pyv16._transport import FeedTransport, Transport
from pyv16.analytics import BeaconSummary, summarize
from pyv16.config import V16Config
from pyv16.exceptions import V16DecodeError, V16Error, V16RefreshInProgressError, V16TransportError
from pyv16.geo.cluster import ClusterEngine, RenderGroup
from pyv16.geo.projection import Projection, TilePlacement
from pyv16.ingestion.decode import decode_payload
from pyv16.models.beacon import BeaconRecord
from pyv16.state.beacons import BeaconStore
from pyv16.state.events import BeaconsEvent
from pyv16.state.viewport import ViewportState

_logger = logging.getLogger(__name__)


class V16Client:
    """Async client that keeps a live beacon batch and a map viewport.

    Usage::

        async with V16Client() as client:
            await client.refresh()
            client.viewport.zoom_in()
            groups = client.render_groups()

    Only one refresh runs at a time; a second call while one is in
    flight raises :class:`V16RefreshInProgressError`. A failed refresh
    keeps the previous beacons.
    """

    def __init__(
        self,
        config: V16Config | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        on_refresh: Callable[[BeaconsEvent], None] | None = None,
    ) -> None:
        self._config = config or V16Config()
        self._external_session = session is not None
        self._http_session = session
        self._external_transport = transport is not None
        self._transport: Transport | None = transport
        self._refresh_lock = asyncio.Lock()

        self.projection = Projection(self._config.tile_size)
        self.viewport = ViewportState.from_config(self._config, self.projection)
        self.cluster_engine = ClusterEngine.from_config(self._config, self.projection)
        self.store = BeaconStore()
        if on_refresh is not None:
            self.store.subscribe(on_refresh)

    @property
    def config(self) -> V16Config:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> V16Client:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = FeedTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise V16Error("Client not initialized. Use 'async with V16Client(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    @property
    def is_refreshing(self) -> bool:
        return self._refresh_lock.locked()

    @property
    def beacons(self) -> list[BeaconRecord]:
        return self.store.beacons

    async def refresh(self) -> list[BeaconRecord]:
        """Fetch and decode the feed, replacing the current beacons.

        Raises
        ------
        V16RefreshInProgressError
            Another refresh is still running.
        V16TransportError
            The request failed; current beacons are kept.
        V16DecodeError
            The body could not be decoded; current beacons are kept.
        """
        if self._refresh_lock.locked():
            raise V16RefreshInProgressError("A refresh is already in progress")

        async with self._refresh_lock:
            transport = self._require_transport()
            try:
                body = await transport.fetch_feed()
            except V16TransportError as exc:
                self.store.record_failure(exc)
                raise

            try:
                result = decode_payload(body)
            except V16DecodeError as exc:
                self.store.record_failure(f"decode failed at {exc.stage} stage: {exc}")
                raise

            self.store.replace(result)
            _logger.debug("Loaded %d beacons", len(result.beacons))
            return result.beacons

    async def auto_refresh(self, interval: float | None = None) -> None:
        """Refresh forever, sleeping *interval* seconds between attempts.

        Failures are logged and the loop continues; cancel the task to stop.
        """
        delay = self._config.refresh_interval if interval is None else interval
        while True:
            try:
                await self.refresh()
            except V16RefreshInProgressError:
                _logger.debug("Skipping scheduled refresh; one is already running")
            except V16Error:
                _logger.debug("Scheduled refresh failed", exc_info=True)
            await asyncio.sleep(delay)

    # ------------------------------------------------------------------
    # Views over the current state
    # ------------------------------------------------------------------

    def render_groups(self) -> list[RenderGroup]:
        """Markers and clusters for the current beacons and viewport."""
        return self.cluster_engine.cluster(self.store.beacons, self.viewport)

    def visible_tiles(self) -> list[TilePlacement]:
        return self.projection.visible_tiles(self.viewport, self._config.tiles_per_axis)

    def tile_url(self, placement: TilePlacement) -> str:
        """Image URL for *placement* from the configured tile template."""
        return placement.tile.url(self._config.tile_url_template)

    def summary(self) -> BeaconSummary:
        return summarize(self.store.beacons)
