"""Aggregate views over a beacon batch."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Sequence

from pydantic import BaseModel, ConfigDict

from pyv16._constants import UNKNOWN_FEMININE
from pyv16.models.beacon import BeaconRecord


class BeaconSummary(BaseModel):
    """Counts for one batch.

    Grouped counts are ``(label, count)`` pairs, largest first; ties keep
    first-seen order.
    """

    model_config = ConfigDict(frozen=True)

    total: int
    active: int
    by_region: list[tuple[str, int]]
    by_province: list[tuple[str, int]]
    by_road: list[tuple[str, int]]

    def to_text(self, top: int = 5) -> str:
        lines = [
            "Resumen de Balizas V16",
            "",
            f"Total: {self.total}",
            f"Activas: {self.active}",
            "",
            "Por Comunidad Autónoma:",
        ]
        lines.extend(f"  • {name}: {count}" for name, count in self.by_region[:top])
        return "\n".join(lines)


def _ranked(values: Iterable[str]) -> list[tuple[str, int]]:
    return Counter(values).most_common()


def count_by(beacons: Iterable[BeaconRecord], key: Callable[[BeaconRecord], str | None]) -> list[tuple[str, int]]:
    """Count beacons per ``key(beacon)``; empty keys count as ``"Desconocida"``."""
    return _ranked(key(b) or UNKNOWN_FEMININE for b in beacons)


def summarize(beacons: Sequence[BeaconRecord]) -> BeaconSummary:
    return BeaconSummary(
        total=len(beacons),
        active=sum(1 for b in beacons if b.is_active),
        by_region=count_by(beacons, lambda b: b.region),
        by_province=count_by(beacons, lambda b: b.province),
        # Beacons without a road are left out rather than bucketed.
        by_road=_ranked(b.road for b in beacons if b.road),
    )


def search_by_road(beacons: Iterable[BeaconRecord], road: str) -> list[BeaconRecord]:
    """Beacons whose road name contains *road* (case-insensitive)."""
    needle = road.lower()
    return [b for b in beacons if needle in b.road.lower()]


def filter_by_region(beacons: Iterable[BeaconRecord], region: str) -> list[BeaconRecord]:
    """Beacons whose autonomous community contains *region* (case-insensitive)."""
    needle = region.lower()
    return [b for b in beacons if needle in b.region.lower()]
