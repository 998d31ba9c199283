"""Screen-space marker clustering.

Greedy single pass in input order: the first unassigned beacon seeds a
group and every later unassigned beacon closer than ``cluster_radius``
pixels *to the seed* joins it. Distances are never measured to a
running centroid, so the result depends on input order and a group can
span up to twice the radius.

O(n²) per call; n is a single country's beacon count.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pyv16.config import V16Config
from pyv16.geo.projection import MapView, Projection, ScreenPosition
from pyv16.models.beacon import BeaconRecord

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BeaconMarker:
    """A single beacon drawn at ``position``."""

    beacon: BeaconRecord
    position: ScreenPosition

    @property
    def latitude(self) -> float:
        return self.beacon.latitude

    @property
    def longitude(self) -> float:
        return self.beacon.longitude

    @property
    def count(self) -> int:
        return 1

    @property
    def has_active(self) -> bool:
        return self.beacon.is_active


@dataclass(frozen=True, slots=True)
class ClusterMarker:
    """Several nearby beacons drawn as one badge.

    ``latitude``/``longitude`` are the arithmetic mean of the members in
    geographic space; ``position`` is that centroid on screen.
    """

    members: tuple[BeaconRecord, ...]
    latitude: float
    longitude: float
    position: ScreenPosition

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def has_active(self) -> bool:
        return any(member.is_active for member in self.members)


RenderGroup = BeaconMarker | ClusterMarker


def greedy_groups(positions: Sequence[ScreenPosition], radius: float) -> list[list[int]]:
    """Group indexes of *positions* by distance to each group's seed.

    A point joins a group when its distance to the seed is strictly less
    than *radius*. Groups and their members keep input order.
    """
    assigned = [False] * len(positions)
    groups: list[list[int]] = []
    for i, seed in enumerate(positions):
        if assigned[i]:
            continue
        assigned[i] = True
        members = [i]
        for j in range(i + 1, len(positions)):
            if assigned[j]:
                continue
            if seed.distance_to(positions[j]) < radius:
                assigned[j] = True
                members.append(j)
        groups.append(members)
    return groups


class ClusterEngine:
    """Turn beacons into render groups for the current viewport.

    Parameters
    ----------
    projection : Projection or None
        Defaults to 256 px tiles.
    enabled : bool
        When ``False`` every beacon is rendered individually.
    cluster_radius : float
        Seed distance in pixels.
    min_cluster_size : int
        Groups smaller than this are rendered as individual markers.
    cluster_max_zoom : int
        Clustering runs only while ``zoom < cluster_max_zoom``.
    visible_margin_x, visible_margin_y : float
        Groups whose screen offset is beyond these bounds are dropped.
    """

    def __init__(
        self,
        projection: Projection | None = None,
        *,
        enabled: bool = True,
        cluster_radius: float = 50.0,
        min_cluster_size: int = 3,
        cluster_max_zoom: int = 12,
        visible_margin_x: float = 1000.0,
        visible_margin_y: float = 800.0,
    ) -> None:
        self.projection = projection or Projection()
        self.enabled = enabled
        self.cluster_radius = cluster_radius
        self.min_cluster_size = min_cluster_size
        self.cluster_max_zoom = cluster_max_zoom
        self.visible_margin_x = visible_margin_x
        self.visible_margin_y = visible_margin_y

    @classmethod
    def from_config(cls, config: V16Config, projection: Projection | None = None) -> ClusterEngine:
        return cls(
            projection or Projection(config.tile_size),
            enabled=config.enable_clustering,
            cluster_radius=config.cluster_radius,
            min_cluster_size=config.min_cluster_size,
            cluster_max_zoom=config.cluster_max_zoom,
            visible_margin_x=config.visible_margin_x,
            visible_margin_y=config.visible_margin_y,
        )

    def should_cluster(self, zoom: int) -> bool:
        return self.enabled and zoom < self.cluster_max_zoom

    def _is_visible(self, position: ScreenPosition) -> bool:
        return position.is_within(self.visible_margin_x, self.visible_margin_y)

    def cluster(self, beacons: Sequence[BeaconRecord], view: MapView) -> list[RenderGroup]:
        """Build the render groups for *beacons* at *view*.

        Every beacon is projected once. Off-screen groups are dropped
        from the result rather than flagged.
        """
        positions = [self.projection.geo_to_screen(view, b.latitude, b.longitude) for b in beacons]

        if not self.should_cluster(view.zoom):
            return [
                BeaconMarker(beacon=beacon, position=position)
                for beacon, position in zip(beacons, positions, strict=True)
                if self._is_visible(position)
            ]

        groups: list[RenderGroup] = []
        for members in greedy_groups(positions, self.cluster_radius):
            if len(members) >= self.min_cluster_size:
                member_beacons = tuple(beacons[i] for i in members)
                latitude = sum(b.latitude for b in member_beacons) / len(member_beacons)
                longitude = sum(b.longitude for b in member_beacons) / len(member_beacons)
                position = self.projection.geo_to_screen(view, latitude, longitude)
                if self._is_visible(position):
                    groups.append(
                        ClusterMarker(
                            members=member_beacons,
                            latitude=latitude,
                            longitude=longitude,
                            position=position,
                        )
                    )
                continue
            for i in members:
                if self._is_visible(positions[i]):
                    groups.append(BeaconMarker(beacon=beacons[i], position=positions[i]))

        _logger.debug("Clustered %d beacons into %d groups at zoom %d", len(beacons), len(groups), view.zoom)
        return groups
