"""Change notifications emitted by the state layer.

Consumers subscribe to :class:`~pyv16.state.viewport.ViewportState` and
:class:`~pyv16.state.beacons.BeaconStore` and re-run clustering on
these events; the state layer does not schedule or debounce anything.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class ViewportChange(StrEnum):
    CENTER = "center"
    ZOOM = "zoom"


class ViewportEvent(BaseModel):
    """Viewport state right after a center or zoom change."""

    model_config = ConfigDict(frozen=True)

    kind: ViewportChange
    latitude: float
    longitude: float
    zoom: int


class BeaconsEvent(BaseModel):
    """Outcome of one refresh applied to the beacon store.

    ``error`` is set when the refresh failed; ``count`` is then the size
    of the retained list.
    """

    model_config = ConfigDict(frozen=True)

    count: int = Field(..., ge=0)
    dropped: int = Field(default=0, ge=0)
    error: str | None = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def ok(self) -> bool:
        return self.error is None
