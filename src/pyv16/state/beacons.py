"""In-memory beacon store.

Holds the latest successfully decoded batch. A refresh replaces the
whole list in one assignment; a failed refresh leaves it untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from pyv16.ingestion.decode import DecodeResult, DroppedRecord
from pyv16.models.beacon import BeaconRecord
from pyv16.state.events import BeaconsEvent

_logger = logging.getLogger(__name__)

BeaconsListener = Callable[[BeaconsEvent], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BeaconStore:
    """Latest beacon batch plus refresh bookkeeping."""

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._beacons: tuple[BeaconRecord, ...] = ()
        self._dropped: tuple[DroppedRecord, ...] = ()
        self._refreshed_at: datetime | None = None
        self._last_error: str | None = None
        self._listeners: list[BeaconsListener] = []

    @property
    def beacons(self) -> list[BeaconRecord]:
        return list(self._beacons)

    @property
    def dropped(self) -> list[DroppedRecord]:
        """Records skipped by the last successful decode."""
        return list(self._dropped)

    @property
    def refreshed_at(self) -> datetime | None:
        return self._refreshed_at

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def __len__(self) -> int:
        return len(self._beacons)

    def subscribe(self, listener: BeaconsListener) -> Callable[[], None]:
        """Register *listener* for refresh outcomes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self, event: BeaconsEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                _logger.debug("beacon listener failed", exc_info=True)

    def replace(self, batch: DecodeResult | Sequence[BeaconRecord]) -> BeaconsEvent:
        """Swap in a freshly decoded batch."""
        if isinstance(batch, DecodeResult):
            beacons, dropped = tuple(batch.beacons), tuple(batch.dropped)
        else:
            beacons, dropped = tuple(batch), ()

        now = self._clock()
        self._beacons, self._dropped = beacons, dropped
        self._refreshed_at = now
        self._last_error = None

        event = BeaconsEvent(count=len(beacons), dropped=len(dropped), observed_at=now)
        self._emit(event)
        return event

    def record_failure(self, error: BaseException | str) -> BeaconsEvent:
        """Note a failed refresh; the current batch is kept."""
        message = str(error) or type(error).__name__
        self._last_error = message
        _logger.warning("Beacon refresh failed, keeping %d beacons: %s", len(self._beacons), message)

        event = BeaconsEvent(count=len(self._beacons), error=message, observed_at=self._clock())
        self._emit(event)
        return event
