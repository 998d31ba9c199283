"""Normalized V16 beacon model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from pyv16._constants import ACTIVE_STATUS, UNKNOWN_MASCULINE


def parse_activation_time(value: str | None) -> datetime | None:
    """Parse the feed's ISO-like activation timestamp.

    Returns ``None`` when the value is missing or cannot be parsed.
    Naive values are taken as local time.
    """
    if not value:
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.astimezone()


def format_elapsed(started_at: datetime, now: datetime) -> str:
    """Format the elapsed time between two aware datetimes as a short label."""
    seconds = max(0.0, (now - started_at).total_seconds())
    minutes = seconds / 60
    if minutes < 60:
        return f"hace {int(minutes)} min"
    hours = minutes / 60
    if hours < 24:
        return f"hace {int(hours)} h"
    days = hours / 24
    if days < 30:
        return f"hace {int(days)} días"
    return f"hace {int(days / 30)} meses"


class BeaconRecord(BaseModel):
    """A decoded V16 beacon.

    Immutable; a refresh replaces the whole list rather than editing
    records in place.

    Parameters
    ----------
    id : str
        Record identifier.
    situation_id : str
        Situation identifier.
    status : str
        Feed status token; ``"active"`` (any case) marks an active beacon.
    latitude, longitude : float
        WGS84 degrees taken from the first geometry vertex.
    road : str
        Road name.
    km_marker : float
        Kilometer marker on ``road``.
    direction : str
        Sense token (``positive``/``negative``/``both``/``unknown``).
    orientation : str
        Human label derived from ``direction``.
    region, province, municipality : str
        Administrative names.
    cause, subcause, road_type : str
        Classification labels.
    started_at : str or None
        Activation timestamp as sent by the feed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str | None = None
    situation_id: str | None = None
    status: str = ACTIVE_STATUS
    latitude: float
    longitude: float
    road: str = ""
    km_marker: float = 0.0
    direction: str = ""
    orientation: str = ""
    region: str = ""
    province: str = ""
    municipality: str = ""
    cause: str = ""
    subcause: str = ""
    road_type: str = ""
    started_at: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status.lower() == ACTIVE_STATUS

    @property
    def activation_datetime(self) -> datetime | None:
        return parse_activation_time(self.started_at)

    def time_since_activation(self, now: datetime | None = None) -> str:
        """Human label for how long the beacon has been on, e.g. ``"hace 12 min"``.

        Returns ``"Desconocido"`` when the activation time is unknown.
        """
        started = self.activation_datetime
        if started is None:
            return UNKNOWN_MASCULINE
        current = datetime.now().astimezone() if now is None else now.astimezone()
        return format_elapsed(started, current)

    @property
    def display_name(self) -> str:
        return f"Baliza {self.id}"

    @property
    def location(self) -> str:
        return f"{self.municipality}, {self.province}"

    @property
    def google_maps_url(self) -> str:
        return f"https://www.google.com/maps?q={self.latitude},{self.longitude}"

    @property
    def waze_url(self) -> str:
        return f"https://waze.com/ul?ll={self.latitude},{self.longitude}&navigate=yes"
