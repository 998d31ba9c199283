"""Tests for greedy screen-space clustering."""

from __future__ import annotations

import pytest

from pyv16.config import V16Config
from pyv16.geo.cluster import BeaconMarker, ClusterEngine, ClusterMarker, greedy_groups
from pyv16.geo.projection import Projection, ScreenPosition
from pyv16.models.beacon import BeaconRecord
from pyv16.state.viewport import ViewportState


@pytest.fixture
def projection() -> Projection:
    return Projection()


@pytest.fixture
def view(projection: Projection) -> ViewportState:
    return ViewportState(latitude=40.0, longitude=-3.0, zoom=6, projection=projection)


def _beacon_at(view: ViewportState, beacon_id: str, x: float, y: float, *, status: str = "active") -> BeaconRecord:
    """Beacon placed at screen offset ``(x, y)`` from the view center."""
    lat, lon = view.to_geo(ScreenPosition(x, y))
    return BeaconRecord(id=beacon_id, status=status, latitude=lat, longitude=lon)


class TestGreedyGroups:
    def test_distance_is_measured_to_the_seed(self) -> None:
        points = [ScreenPosition(0, 0), ScreenPosition(40, 0), ScreenPosition(80, 0)]
        assert greedy_groups(points, 50) == [[0, 1], [2]]

    def test_boundary_distance_does_not_join(self) -> None:
        points = [ScreenPosition(0, 0), ScreenPosition(50, 0)]
        assert greedy_groups(points, 50) == [[0], [1]]

    def test_empty_input(self) -> None:
        assert greedy_groups([], 50) == []


class TestClusterEngine:
    def test_close_beacons_form_one_cluster(self, view: ViewportState, projection: Projection) -> None:
        beacons = [
            _beacon_at(view, "a", 0, 0),
            _beacon_at(view, "b", 10, 5),
            _beacon_at(view, "c", -12, 20),
        ]
        engine = ClusterEngine(projection, cluster_radius=50, min_cluster_size=3)

        groups = engine.cluster(beacons, view)

        assert len(groups) == 1
        cluster = groups[0]
        assert isinstance(cluster, ClusterMarker)
        assert cluster.count == 3
        assert [m.id for m in cluster.members] == ["a", "b", "c"]
        assert cluster.latitude == pytest.approx(sum(b.latitude for b in beacons) / 3)
        assert cluster.longitude == pytest.approx(sum(b.longitude for b in beacons) / 3)
        expected = projection.geo_to_screen(view, cluster.latitude, cluster.longitude)
        assert cluster.position.x == pytest.approx(expected.x)
        assert cluster.position.y == pytest.approx(expected.y)

    def test_small_group_renders_individually(self, view: ViewportState, projection: Projection) -> None:
        beacons = [_beacon_at(view, "a", 0, 0), _beacon_at(view, "b", 10, 0)]
        engine = ClusterEngine(projection, cluster_radius=50, min_cluster_size=3)

        groups = engine.cluster(beacons, view)

        assert [type(g) for g in groups] == [BeaconMarker, BeaconMarker]
        assert [g.beacon.id for g in groups if isinstance(g, BeaconMarker)] == ["a", "b"]

    def test_result_depends_on_input_order(self, view: ViewportState, projection: Projection) -> None:
        a = _beacon_at(view, "a", 0, 0)
        b = _beacon_at(view, "b", 40, 0)
        c = _beacon_at(view, "c", 80, 0)
        engine = ClusterEngine(projection, cluster_radius=50, min_cluster_size=2)

        first = engine.cluster([a, b, c], view)
        assert isinstance(first[0], ClusterMarker)
        assert first[0].count == 2
        assert isinstance(first[1], BeaconMarker)
        assert first[1].beacon.id == "c"

        second = engine.cluster([b, a, c], view)
        assert len(second) == 1
        assert isinstance(second[0], ClusterMarker)
        assert second[0].count == 3

    def test_no_clustering_at_high_zoom(self, projection: Projection) -> None:
        view = ViewportState(latitude=40.0, longitude=-3.0, zoom=12, projection=projection)
        beacons = [_beacon_at(view, str(i), i, i) for i in range(5)]
        engine = ClusterEngine(projection, cluster_radius=50, min_cluster_size=3)

        groups = engine.cluster(beacons, view)

        assert len(groups) == 5
        assert all(isinstance(g, BeaconMarker) for g in groups)

    def test_disabled_engine_never_clusters(self, view: ViewportState, projection: Projection) -> None:
        beacons = [_beacon_at(view, str(i), 0, 0) for i in range(4)]
        engine = ClusterEngine(projection, enabled=False)

        assert all(isinstance(g, BeaconMarker) for g in engine.cluster(beacons, view))

    def test_offscreen_markers_are_dropped(self, view: ViewportState, projection: Projection) -> None:
        beacons = [
            _beacon_at(view, "near", 100, 100),
            _beacon_at(view, "far-east", 1500, 0),
            _beacon_at(view, "far-north", 0, 900),
        ]
        engine = ClusterEngine(projection, cluster_radius=50, min_cluster_size=3)

        groups = engine.cluster(beacons, view)

        assert [g.beacon.id for g in groups if isinstance(g, BeaconMarker)] == ["near"]

    def test_offscreen_cluster_is_dropped(self, view: ViewportState, projection: Projection) -> None:
        beacons = [_beacon_at(view, str(i), 1500 + i, 0) for i in range(3)]
        engine = ClusterEngine(projection, cluster_radius=50, min_cluster_size=3)

        assert engine.cluster(beacons, view) == []

    def test_has_active(self, view: ViewportState, projection: Projection) -> None:
        inactive = [_beacon_at(view, str(i), i, 0, status="inactive") for i in range(3)]
        mixed = [*inactive[:2], _beacon_at(view, "on", 2, 0)]
        engine = ClusterEngine(projection, cluster_radius=50, min_cluster_size=3)

        (quiet,) = engine.cluster(inactive, view)
        (lit,) = engine.cluster(mixed, view)

        assert quiet.has_active is False
        assert lit.has_active is True

    def test_every_visible_beacon_appears_once(self, view: ViewportState, projection: Projection) -> None:
        offsets = [(0, 0), (30, 10), (200, 200), (210, 190), (220, 205), (-400, 50), (60, -30)]
        beacons = [_beacon_at(view, str(i), x, y) for i, (x, y) in enumerate(offsets)]
        engine = ClusterEngine(projection, cluster_radius=50, min_cluster_size=2)

        groups = engine.cluster(beacons, view)

        ids: list[str | None] = []
        for group in groups:
            if isinstance(group, ClusterMarker):
                ids.extend(m.id for m in group.members)
            else:
                ids.append(group.beacon.id)
        assert sorted(ids) == sorted(b.id for b in beacons)

    def test_from_config(self, projection: Projection) -> None:
        config = V16Config(cluster_radius=80.0, min_cluster_size=4, cluster_max_zoom=10, enable_clustering=False)
        engine = ClusterEngine.from_config(config, projection)

        assert engine.projection is projection
        assert engine.cluster_radius == 80.0
        assert engine.min_cluster_size == 4
        assert engine.should_cluster(5) is False
