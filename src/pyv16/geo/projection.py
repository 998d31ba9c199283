"""Web-Mercator slippy-map projection.

World pixel space at zoom ``z`` is a square of ``tile_size * 2**z``
pixels with the origin at the north-west corner (x east, y south).
Screen positions are offsets from the viewport center with y pointing
north, so a beacon north of the center has a positive ``y``.

Latitudes must be inside the Mercator domain. Callers clamp to ±85°;
``|lat| >= 90`` trips an assertion instead of producing infinities.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

DEFAULT_TILE_SIZE = 256


class MapView(Protocol):
    """Read-only view of a map center and zoom."""

    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...

    @property
    def zoom(self) -> int: ...


@dataclass(frozen=True, slots=True)
class TileCoordinate:
    """Slippy-map tile address. ``x`` is already wrapped modulo ``2**zoom``."""

    x: int
    y: int
    zoom: int

    @property
    def is_valid(self) -> bool:
        return 0 <= self.y < (1 << self.zoom)

    @property
    def key(self) -> str:
        return f"{self.zoom}/{self.x}/{self.y}"

    def url(self, template: str) -> str:
        """Render a ``{z}/{x}/{y}`` URL template for this tile."""
        return template.replace("{z}", str(self.zoom)).replace("{x}", str(self.x)).replace("{y}", str(self.y))


@dataclass(frozen=True, slots=True)
class ScreenPosition:
    """Pixel offset from the viewport center (x east, y north)."""

    x: float
    y: float

    def distance_to(self, other: ScreenPosition) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_within(self, margin_x: float, margin_y: float) -> bool:
        return abs(self.x) <= margin_x and abs(self.y) <= margin_y


@dataclass(frozen=True, slots=True)
class TilePlacement:
    """A tile to draw and where its north-west corner lands on screen."""

    tile: TileCoordinate
    column: int
    row: int
    position: ScreenPosition


def _assert_latitude(lat: float) -> None:
    assert -90.0 < lat < 90.0, f"latitude {lat} is outside the Mercator domain; clamp before projecting"  # noqa: S101


def _mercator_y(lat: float) -> float:
    """Normalized Mercator y in [0, 1] (0 = north edge) for *lat* degrees."""
    rad = math.radians(lat)
    return (1.0 - math.log(math.tan(rad) + 1.0 / math.cos(rad)) / math.pi) / 2.0


class Projection:
    """Convert between WGS84 degrees, world pixels, tiles and screen offsets.

    Parameters
    ----------
    tile_size : int
        Tile edge in pixels at zoom 0. Must match the tile provider.
    """

    def __init__(self, tile_size: int = DEFAULT_TILE_SIZE) -> None:
        if tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {tile_size}")
        self.tile_size = tile_size

    def scale(self, zoom: int) -> float:
        """World size in pixels at *zoom*."""
        return float(self.tile_size) * math.pow(2.0, zoom)

    # ------------------------------------------------------------------
    # Tiles
    # ------------------------------------------------------------------

    def geo_to_tile(self, lat: float, lon: float, zoom: int) -> TileCoordinate:
        """Tile containing ``(lat, lon)`` at *zoom*.

        ``x`` wraps across the antimeridian; ``y`` is not wrapped and may
        be out of range for latitudes beyond the tiled area.
        """
        _assert_latitude(lat)
        n = 1 << zoom
        x = math.floor((lon + 180.0) / 360.0 * n) % n
        y = math.floor(_mercator_y(lat) * n)
        return TileCoordinate(x=x, y=y, zoom=zoom)

    def visible_tiles(self, view: MapView, tiles_per_axis: int = 5) -> list[TilePlacement]:
        """Tiles in a ``tiles_per_axis`` square around the center tile.

        Columns wrap around the antimeridian; rows outside the world are
        skipped.
        """
        zoom = view.zoom
        n = 1 << zoom
        center = self.geo_to_tile(view.latitude, view.longitude, zoom)
        center_px, center_py = self.geo_to_pixel(view.latitude, view.longitude, zoom)
        half = tiles_per_axis // 2

        placements: list[TilePlacement] = []
        for dx in range(-half, half + 1):
            for dy in range(-half, half + 1):
                column = center.x + dx
                row = center.y + dy
                if row < 0 or row >= n:
                    continue
                tile = TileCoordinate(x=column % n, y=row, zoom=zoom)
                corner = ScreenPosition(
                    x=column * self.tile_size - center_px,
                    y=center_py - row * self.tile_size,
                )
                placements.append(TilePlacement(tile=tile, column=dx, row=dy, position=corner))
        return placements

    # ------------------------------------------------------------------
    # World pixels
    # ------------------------------------------------------------------

    def geo_to_pixel(self, lat: float, lon: float, zoom: int) -> tuple[float, float]:
        """World pixel ``(x, y)`` of ``(lat, lon)``; y grows southward."""
        _assert_latitude(lat)
        scale = self.scale(zoom)
        return (lon + 180.0) / 360.0 * scale, _mercator_y(lat) * scale

    def pixel_to_geo(self, x: float, y: float, zoom: int) -> tuple[float, float]:
        """Inverse of :meth:`geo_to_pixel`, returning ``(lat, lon)``."""
        scale = self.scale(zoom)
        lon = x / scale * 360.0 - 180.0
        n = math.pi - 2.0 * math.pi * y / scale
        lat = math.degrees(math.atan(math.sinh(n)))
        return lat, lon

    # ------------------------------------------------------------------
    # Screen offsets
    # ------------------------------------------------------------------

    def geo_to_screen(self, view: MapView, lat: float, lon: float) -> ScreenPosition:
        """Offset of ``(lat, lon)`` from the center of *view*, y up."""
        center_x, center_y = self.geo_to_pixel(view.latitude, view.longitude, view.zoom)
        point_x, point_y = self.geo_to_pixel(lat, lon, view.zoom)
        return ScreenPosition(x=point_x - center_x, y=center_y - point_y)

    def screen_to_geo(self, view: MapView, position: ScreenPosition) -> tuple[float, float]:
        """Inverse of :meth:`geo_to_screen`, returning ``(lat, lon)``."""
        center_x, center_y = self.geo_to_pixel(view.latitude, view.longitude, view.zoom)
        return self.pixel_to_geo(center_x + position.x, center_y - position.y, view.zoom)

    def pan_delta(self, zoom: int, dx: float, dy: float) -> tuple[float, float]:
        """Degrees ``(dlat, dlon)`` covered by a pixel drag of ``(dx, dy)``.

        Linear in both axes: ``360°`` of longitude and ``180°`` of latitude
        per world width.
        """
        scale = self.scale(zoom)
        return dy / scale * 180.0, dx / scale * 360.0
