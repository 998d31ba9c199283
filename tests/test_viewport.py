"""Tests for viewport state: clamping, wrapping, panning and notifications."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyv16.config import V16Config
from pyv16.models.beacon import BeaconRecord
from pyv16.state.events import ViewportChange, ViewportEvent
from pyv16.state.viewport import ViewportState, clamp_latitude, wrap_longitude


def _recorder(viewport: ViewportState) -> list[ViewportEvent]:
    events: list[ViewportEvent] = []
    viewport.subscribe(events.append)
    return events


class TestNormalization:
    @pytest.mark.parametrize(
        ("lon", "expected"),
        [(0.0, 0.0), (180.0, 180.0), (-180.0, 180.0), (200.0, -160.0), (-190.0, 170.0), (540.0, 180.0), (725.0, 5.0)],
    )
    def test_wrap_longitude(self, lon: float, expected: float) -> None:
        assert wrap_longitude(lon) == pytest.approx(expected)

    @pytest.mark.parametrize(("lat", "expected"), [(95.0, 85.0), (-120.0, -85.0), (12.5, 12.5)])
    def test_clamp_latitude(self, lat: float, expected: float) -> None:
        assert clamp_latitude(lat) == expected

    def test_set_center_clamps_everything(self) -> None:
        viewport = ViewportState()
        viewport.set_center(95.0, 200.0, 99)

        assert viewport.latitude == 85.0
        assert viewport.longitude == pytest.approx(-160.0)
        assert viewport.zoom == 18

    def test_initial_values_are_normalized(self) -> None:
        viewport = ViewportState(zoom=1, latitude=-89.0, longitude=-540.0)
        assert viewport.zoom == 4
        assert viewport.latitude == -85.0
        assert viewport.longitude == pytest.approx(180.0)

    def test_from_config(self) -> None:
        config = V16Config(initial_zoom=9, initial_latitude=41.39, initial_longitude=2.17, min_zoom=5, max_zoom=16)
        viewport = ViewportState.from_config(config)
        assert (viewport.latitude, viewport.longitude, viewport.zoom) == (41.39, 2.17, 9)
        assert (viewport.min_zoom, viewport.max_zoom) == (5, 16)

    def test_rejects_inverted_bounds(self) -> None:
        with pytest.raises(ValueError):
            ViewportState(min_zoom=10, max_zoom=5)

    @pytest.mark.parametrize(
        ("zoom", "name"),
        [(4, "País"), (5, "País"), (6, "Comunidad"), (9, "Provincia"), (12, "Ciudad"), (15, "Calle")],
    )
    def test_zoom_level_name(self, zoom: int, name: str) -> None:
        assert ViewportState(zoom=zoom).zoom_level_name == name


class TestZoom:
    def test_zoom_in_and_out_emit(self) -> None:
        viewport = ViewportState(zoom=6)
        events = _recorder(viewport)

        viewport.zoom_in()
        viewport.zoom_out()

        assert [e.kind for e in events] == [ViewportChange.ZOOM, ViewportChange.ZOOM]
        assert [e.zoom for e in events] == [7, 6]

    def test_zoom_in_at_max_is_silent_noop(self) -> None:
        viewport = ViewportState(zoom=18)
        events = _recorder(viewport)

        viewport.zoom_in()

        assert viewport.zoom == 18
        assert events == []

    def test_zoom_out_at_min_is_silent_noop(self) -> None:
        viewport = ViewportState(zoom=4)
        events = _recorder(viewport)

        viewport.zoom_out()

        assert viewport.zoom == 4
        assert events == []

    def test_set_zoom_clamps(self) -> None:
        viewport = ViewportState(zoom=6)
        viewport.set_zoom(42)
        assert viewport.zoom == 18


class TestCenter:
    def test_set_center_emits_center_then_zoom(self) -> None:
        viewport = ViewportState(zoom=6)
        events = _recorder(viewport)

        viewport.set_center(41.0, 2.0, 8)

        assert [e.kind for e in events] == [ViewportChange.CENTER, ViewportChange.ZOOM]
        assert events[0].latitude == 41.0
        assert events[0].zoom == 8

    def test_unchanged_center_is_silent(self) -> None:
        viewport = ViewportState(latitude=41.0, longitude=2.0, zoom=6)
        events = _recorder(viewport)

        viewport.set_center(41.0, 2.0)

        assert events == []

    def test_pan_moves_center_against_drag(self) -> None:
        viewport = ViewportState(latitude=40.0, longitude=-3.0, zoom=6)
        scale = viewport.projection.scale(6)

        viewport.pan(scale / 360.0, scale / 180.0)

        assert viewport.longitude == pytest.approx(-4.0)
        assert viewport.latitude == pytest.approx(39.0)

    def test_pan_across_antimeridian_wraps(self) -> None:
        viewport = ViewportState(latitude=0.0, longitude=-179.5, zoom=4)
        scale = viewport.projection.scale(4)

        viewport.pan(scale / 360.0, 0.0)

        assert viewport.longitude == pytest.approx(179.5)

    def test_center_on_beacon_uses_focus_zoom(self) -> None:
        viewport = ViewportState(zoom=6)
        beacon = BeaconRecord(id="1", latitude=37.38, longitude=-5.98)

        viewport.center_on(beacon)

        assert (viewport.latitude, viewport.longitude, viewport.zoom) == (37.38, -5.98, 15)

    def test_expand_cluster_zooms_two_levels(self) -> None:
        viewport = ViewportState(zoom=7)
        beacon = BeaconRecord(id="1", latitude=42.0, longitude=-8.0)

        viewport.expand_cluster(beacon)

        assert viewport.zoom == 9
        assert (viewport.latitude, viewport.longitude) == (42.0, -8.0)

    def test_to_screen_and_back(self) -> None:
        viewport = ViewportState(latitude=40.0, longitude=-3.0, zoom=10)
        lat, lon = viewport.to_geo(viewport.to_screen(40.5, -2.5))
        assert (lat, lon) == pytest.approx((40.5, -2.5))


class TestListeners:
    def test_failing_listener_does_not_block_others(self) -> None:
        viewport = ViewportState(zoom=6)
        seen: list[ViewportEvent] = []

        def _boom(event: ViewportEvent) -> None:
            raise RuntimeError("listener failure")

        viewport.subscribe(_boom)
        viewport.subscribe(seen.append)

        viewport.zoom_in()

        assert viewport.zoom == 7
        assert len(seen) == 1

    def test_unsubscribe(self) -> None:
        viewport = ViewportState(zoom=6)
        seen: list[ViewportEvent] = []
        unsubscribe = viewport.subscribe(seen.append)

        viewport.zoom_in()
        unsubscribe()
        viewport.zoom_in()
        unsubscribe()

        assert len(seen) == 1

    def test_events_are_immutable(self) -> None:
        viewport = ViewportState(zoom=6)
        events = _recorder(viewport)
        viewport.zoom_in()

        with pytest.raises(ValidationError):
            events[0].zoom = 3  # type: ignore[misc]
