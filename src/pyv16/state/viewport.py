"""Map viewport state.

Single owner of the map center and zoom. Out-of-range input is clamped
(latitude, zoom) or wrapped (longitude), never rejected. Projection and
clustering only read from it.

Not thread-safe: callers serialize mutations (one event loop or a lock).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import Protocol

from pyv16._constants import DEFAULT_LATITUDE, DEFAULT_LONGITUDE, DEFAULT_ZOOM, MAX_LATITUDE, zoom_level_name
from pyv16.config import V16Config
from pyv16.geo.projection import Projection, ScreenPosition
from pyv16.state.events import ViewportChange, ViewportEvent

_logger = logging.getLogger(__name__)

ViewportListener = Callable[[ViewportEvent], None]

#: Zoom used when jumping to a single beacon.
BEACON_FOCUS_ZOOM = 15
#: Zoom levels added when expanding a cluster.
CLUSTER_EXPAND_STEP = 2


class _Located(Protocol):
    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


def clamp_latitude(lat: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))


def wrap_longitude(lon: float) -> float:
    """Wrap *lon* into ``(-180, 180]``."""
    wrapped = lon - 360.0 * math.floor((lon + 180.0) / 360.0)
    if wrapped <= -180.0:
        wrapped += 360.0
    return wrapped


class ViewportState:
    """Current map center and zoom with change notifications.

    Parameters
    ----------
    min_zoom, max_zoom : int
        Inclusive zoom bounds.
    zoom : int
        Initial zoom (clamped).
    latitude, longitude : float
        Initial center (clamped/wrapped).
    projection : Projection or None
        Used for pan arithmetic. Defaults to 256 px tiles.
    """

    def __init__(
        self,
        *,
        min_zoom: int = 4,
        max_zoom: int = 18,
        zoom: int = DEFAULT_ZOOM,
        latitude: float = DEFAULT_LATITUDE,
        longitude: float = DEFAULT_LONGITUDE,
        projection: Projection | None = None,
    ) -> None:
        if min_zoom > max_zoom:
            raise ValueError(f"min_zoom {min_zoom} is greater than max_zoom {max_zoom}")
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.projection = projection or Projection()
        self._zoom = self._clamp_zoom(zoom)
        self._latitude = clamp_latitude(latitude)
        self._longitude = wrap_longitude(longitude)
        self._listeners: list[ViewportListener] = []

    @classmethod
    def from_config(cls, config: V16Config, projection: Projection | None = None) -> ViewportState:
        return cls(
            min_zoom=config.min_zoom,
            max_zoom=config.max_zoom,
            zoom=config.initial_zoom,
            latitude=config.initial_latitude,
            longitude=config.initial_longitude,
            projection=projection or Projection(config.tile_size),
        )

    @property
    def latitude(self) -> float:
        return self._latitude

    @property
    def longitude(self) -> float:
        return self._longitude

    @property
    def zoom(self) -> int:
        return self._zoom

    @property
    def zoom_level_name(self) -> str:
        return zoom_level_name(self._zoom)

    def _clamp_zoom(self, zoom: int) -> int:
        return max(self.min_zoom, min(self.max_zoom, int(zoom)))

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: ViewportListener) -> Callable[[], None]:
        """Register *listener* for change events; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, kind: ViewportChange) -> None:
        event = ViewportEvent(kind=kind, latitude=self._latitude, longitude=self._longitude, zoom=self._zoom)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                _logger.debug("viewport listener failed for %s change", kind, exc_info=True)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_center(self, latitude: float, longitude: float, zoom: int | None = None) -> None:
        """Move the center and optionally change zoom in one step."""
        new_lat = clamp_latitude(latitude)
        new_lon = wrap_longitude(longitude)
        new_zoom = self._zoom if zoom is None else self._clamp_zoom(zoom)

        center_changed = (new_lat, new_lon) != (self._latitude, self._longitude)
        zoom_changed = new_zoom != self._zoom
        self._latitude, self._longitude, self._zoom = new_lat, new_lon, new_zoom

        if center_changed:
            self._emit(ViewportChange.CENTER)
        if zoom_changed:
            self._emit(ViewportChange.ZOOM)

    def set_zoom(self, zoom: int) -> None:
        new_zoom = self._clamp_zoom(zoom)
        if new_zoom == self._zoom:
            return
        self._zoom = new_zoom
        self._emit(ViewportChange.ZOOM)

    def zoom_in(self) -> None:
        self.set_zoom(self._zoom + 1)

    def zoom_out(self) -> None:
        self.set_zoom(self._zoom - 1)

    def pan(self, dx: float, dy: float) -> None:
        """Drag the map by ``(dx, dy)`` screen pixels (y up).

        Dragging right/up moves the center west/south.
        """
        dlat, dlon = self.projection.pan_delta(self._zoom, dx, dy)
        self.set_center(self._latitude - dlat, self._longitude - dlon)

    def center_on(self, target: _Located, zoom: int | None = BEACON_FOCUS_ZOOM) -> None:
        """Center on a beacon (or anything with latitude/longitude)."""
        self.set_center(target.latitude, target.longitude, zoom)

    def expand_cluster(self, cluster: _Located) -> None:
        """Center on a cluster's centroid and zoom in two levels."""
        self.set_center(cluster.latitude, cluster.longitude, self._zoom + CLUSTER_EXPAND_STEP)

    # ------------------------------------------------------------------
    # Projection shortcuts
    # ------------------------------------------------------------------

    def to_screen(self, latitude: float, longitude: float) -> ScreenPosition:
        return self.projection.geo_to_screen(self, latitude, longitude)

    def to_geo(self, position: ScreenPosition) -> tuple[float, float]:
        return self.projection.screen_to_geo(self, position)
