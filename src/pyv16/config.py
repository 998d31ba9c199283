"""Client configuration for pyv16."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from typing import Any

from pyv16._constants import (
    API_URL,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    DEFAULT_ZOOM,
    TILE_URL_TEMPLATE,
)
from pyv16.exceptions import V16ConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class V16Config:
    """Library configuration.

    Parameters
    ----------
    api_url : str
        Upstream feed endpoint. The request body is fixed.
    request_timeout : float
        Total HTTP timeout in seconds for one refresh.
    refresh_interval : float
        Seconds between refreshes in :meth:`V16Client.auto_refresh`.
    tile_size : int
        Tile edge in pixels at zoom 0. Must match the tile provider
        (256 for OpenStreetMap) or markers drift from the background.
    tile_url_template : str
        ``{z}/{x}/{y}`` URL template used for tile planning.
    tiles_per_axis : int
        Width/height of the tile plan around the center tile.
    min_zoom, max_zoom : int
        Inclusive zoom bounds enforced by the viewport.
    initial_zoom : int
        Zoom at startup (clamped to the bounds).
    initial_latitude, initial_longitude : float
        Map center at startup. Defaults to Madrid.
    enable_clustering : bool
        Group nearby beacons at low zoom.
    cluster_radius : float
        Screen distance in pixels under which a beacon joins a group seed.
    min_cluster_size : int
        Smallest group rendered as a cluster; smaller groups render
        their members individually.
    cluster_max_zoom : int
        Clustering runs only below this zoom.
    visible_margin_x, visible_margin_y : float
        Markers whose screen offset exceeds these bounds are dropped.
    """

    api_url: str = API_URL
    request_timeout: float = 30.0
    refresh_interval: float = 60.0
    tile_size: int = 256
    tile_url_template: str = TILE_URL_TEMPLATE
    tiles_per_axis: int = 5
    min_zoom: int = 4
    max_zoom: int = 18
    initial_zoom: int = DEFAULT_ZOOM
    initial_latitude: float = DEFAULT_LATITUDE
    initial_longitude: float = DEFAULT_LONGITUDE
    enable_clustering: bool = True
    cluster_radius: float = 50.0
    min_cluster_size: int = 3
    cluster_max_zoom: int = 12
    visible_margin_x: float = 1000.0
    visible_margin_y: float = 800.0

    def __post_init__(self) -> None:
        if self.tile_size <= 0:
            raise V16ConfigError(f"tile_size must be positive, got {self.tile_size}")
        if self.min_zoom < 0 or self.min_zoom > self.max_zoom:
            raise V16ConfigError(f"invalid zoom bounds [{self.min_zoom}, {self.max_zoom}]")
        if self.min_cluster_size < 1:
            raise V16ConfigError(f"min_cluster_size must be >= 1, got {self.min_cluster_size}")

    @classmethod
    def from_env(cls, **overrides: Any) -> V16Config:
        """Create configuration from environment variables.

        Reads optional ``V16_*`` variables (``V16_API_URL``,
        ``V16_MIN_ZOOM``, ``V16_CLUSTER_RADIUS`` …). Explicit keyword
        arguments override environment values.

        Raises
        ------
        V16ConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "V16_API_URL": ("api_url", str),
            "V16_REQUEST_TIMEOUT": ("request_timeout", float),
            "V16_REFRESH_INTERVAL": ("refresh_interval", float),
            "V16_TILE_SIZE": ("tile_size", int),
            "V16_TILE_URL_TEMPLATE": ("tile_url_template", str),
            "V16_TILES_PER_AXIS": ("tiles_per_axis", int),
            "V16_MIN_ZOOM": ("min_zoom", int),
            "V16_MAX_ZOOM": ("max_zoom", int),
            "V16_INITIAL_ZOOM": ("initial_zoom", int),
            "V16_INITIAL_LATITUDE": ("initial_latitude", float),
            "V16_INITIAL_LONGITUDE": ("initial_longitude", float),
            "V16_CLUSTER_RADIUS": ("cluster_radius", float),
            "V16_MIN_CLUSTER_SIZE": ("min_cluster_size", int),
            "V16_CLUSTER_MAX_ZOOM": ("cluster_max_zoom", int),
            "V16_VISIBLE_MARGIN_X": ("visible_margin_x", float),
            "V16_VISIBLE_MARGIN_Y": ("visible_margin_y", float),
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, (field_name, convert) in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = convert(val)
            except ValueError as exc:
                raise V16ConfigError(f"{env_key}={val!r} is not a valid {convert.__name__}") from exc

        if "enable_clustering" not in overrides:
            config_kwargs["enable_clustering"] = _env_bool(env.get("V16_ENABLE_CLUSTERING"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
