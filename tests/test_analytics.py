"""Tests for batch summaries and filters."""

from __future__ import annotations

from pyv16.analytics import count_by, filter_by_region, search_by_road, summarize
from pyv16.models.beacon import BeaconRecord


def _beacon(beacon_id: str, region: str, province: str, road: str, status: str = "active") -> BeaconRecord:
    return BeaconRecord(
        id=beacon_id,
        status=status,
        latitude=40.0,
        longitude=-3.0,
        region=region,
        province=province,
        road=road,
    )


BATCH = [
    _beacon("1", "Andalucía", "Sevilla", "A-4"),
    _beacon("2", "Cataluña", "Barcelona", "AP-7", status="inactive"),
    _beacon("3", "Andalucía", "Córdoba", "A-4"),
    _beacon("4", "Madrid", "Madrid", "M-30"),
    _beacon("5", "Cataluña", "Girona", "AP-7"),
    _beacon("6", "Andalucía", "Sevilla", ""),
]


def test_summarize_counts() -> None:
    summary = summarize(BATCH)

    assert summary.total == 6
    assert summary.active == 5
    assert summary.by_region == [("Andalucía", 3), ("Cataluña", 2), ("Madrid", 1)]
    assert summary.by_province[0] == ("Sevilla", 2)
    assert summary.by_road == [("A-4", 2), ("AP-7", 2), ("M-30", 1)]


def test_summarize_empty_batch() -> None:
    summary = summarize([])
    assert (summary.total, summary.active) == (0, 0)
    assert summary.by_region == []


def test_count_by_buckets_blank_keys() -> None:
    assert count_by(BATCH[:2], lambda b: "") == [("Desconocida", 2)]


def test_summary_text_lists_top_regions() -> None:
    text = summarize(BATCH).to_text(top=2)

    assert "Total: 6" in text
    assert "Activas: 5" in text
    assert "  • Andalucía: 3" in text
    assert "  • Cataluña: 2" in text
    assert "Madrid" not in text


def test_search_by_road_is_case_insensitive_substring() -> None:
    assert [b.id for b in search_by_road(BATCH, "ap-")] == ["2", "5"]
    assert search_by_road(BATCH, "N-6") == []


def test_filter_by_region() -> None:
    assert [b.id for b in filter_by_region(BATCH, "andaluc")] == ["1", "3", "6"]
