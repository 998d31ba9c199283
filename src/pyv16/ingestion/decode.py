"""Feed payload decoding.

Pipeline: Base64 → XOR → UTF-8 → JSON → per-record conversion.

Each stage raises its own :class:`~pyv16.exceptions.V16DecodeError`
subclass, except per-record conversion: an entry that is not an object,
fails validation or has unreadable geometry is dropped and reported in
:attr:`DecodeResult.dropped` so one bad situation does not discard the
batch.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from pyv16._codec import EnvelopeCodec, ObfuscationCodec
from pyv16._constants import (
    ACTIVE_STATUS,
    DEFAULT_CAUSE,
    UNKNOWN_FEMININE,
    UNKNOWN_MASCULINE,
    UNKNOWN_SENSE,
    orientation_label,
)
from pyv16.exceptions import V16MalformedStructureError, V16TextEncodingError
from pyv16.ingestion.normalize import safe_str, text_or
from pyv16.models.beacon import BeaconRecord
from pyv16.models.situation import FilteredDataResponse, SituationRecord

_logger = logging.getLogger(__name__)

# Plain decimal literal; rejects "1_0", "nan", "inf" and comma decimals.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_DEFAULT_CODEC = ObfuscationCodec()


@dataclass(frozen=True, slots=True)
class DroppedRecord:
    """A situation record left out of the batch, with the reason why."""

    record_id: str | None
    situation_id: str | None
    reason: str


@dataclass(frozen=True, slots=True)
class DecodeResult:
    """Beacons decoded from one payload plus the records that were skipped."""

    beacons: list[BeaconRecord] = field(default_factory=list)
    dropped: list[DroppedRecord] = field(default_factory=list)


def _parse_decimal(text: str) -> float | None:
    candidate = text.strip()
    if not _DECIMAL_RE.fullmatch(candidate):
        return None
    value = float(candidate)
    return value if math.isfinite(value) else None


def parse_geometry(geometry: str | None) -> tuple[float, float] | None:
    """Extract the first ``(lat, lon)`` pair from a geometry string.

    Accepts ``{"type":"LineString","coordinates":[[lon,lat],...]}`` or a
    bare nested array. The first ``[[`` (or failing that the first ``[``)
    opens the pair and the next ``]`` closes it; the pair is stored
    longitude first.

    Returns ``None`` when no pair can be read.
    """
    if not geometry:
        return None

    start = geometry.find("[[")
    if start < 0:
        start = geometry.find("[")
    if start < 0:
        return None
    end = geometry.find("]", start + 2)
    if end < 0:
        return None

    pair = geometry[start : end + 1].replace("[", "").replace("]", "")
    parts = pair.split(",")
    if len(parts) < 2:
        return None

    lon = _parse_decimal(parts[0])
    lat = _parse_decimal(parts[1])
    if lon is None or lat is None:
        return None
    return lat, lon


def situation_to_beacon(record: SituationRecord) -> BeaconRecord | DroppedRecord:
    """Convert one wire record, or describe why it was dropped."""
    coords = parse_geometry(record.geometria)
    if coords is None:
        reason = "missing geometry" if not record.geometria else "unparseable geometry"
        return DroppedRecord(record_id=record.id, situation_id=record.situation_id, reason=reason)

    lat, lon = coords
    if not (-90.0 < lat < 90.0 and -180.0 <= lon <= 180.0):
        return DroppedRecord(
            record_id=record.id,
            situation_id=record.situation_id,
            reason=f"coordinates out of range ({lat}, {lon})",
        )

    sense = text_or(record.sentido, UNKNOWN_SENSE)
    return BeaconRecord(
        id=record.id,
        situation_id=record.situation_id,
        status=text_or(record.estado, ACTIVE_STATUS),
        latitude=lat,
        longitude=lon,
        road=text_or(record.carretera, UNKNOWN_FEMININE),
        km_marker=record.pk_ini,
        direction=sense,
        orientation=orientation_label(sense),
        region=text_or(record.c_autonoma_ini, UNKNOWN_FEMININE),
        province=text_or(record.provincia_ini, UNKNOWN_FEMININE),
        municipality=text_or(record.municipio_ini, UNKNOWN_MASCULINE),
        cause=text_or(record.causa, DEFAULT_CAUSE),
        subcause=record.subcausa or "",
        road_type=record.subtipo_vialidad or "",
        started_at=record.fecha_inicio,
    )


def _convert_entry(entry: Any) -> BeaconRecord | DroppedRecord:
    if not isinstance(entry, dict):
        return DroppedRecord(record_id=None, situation_id=None, reason="malformed record")
    try:
        record = SituationRecord.model_validate(entry)
    except ValidationError:
        return DroppedRecord(
            record_id=safe_str(entry.get("id")),
            situation_id=safe_str(entry.get("situationId")),
            reason="malformed record",
        )
    return situation_to_beacon(record)


def parse_feed_text(text: str) -> DecodeResult:
    """Parse decoded feed JSON into beacons.

    Raises
    ------
    V16MalformedStructureError
        If *text* is not JSON or not a feed document.
    """
    try:
        document = json.loads(text.lstrip("\ufeff"))
    except json.JSONDecodeError as exc:
        raise V16MalformedStructureError(f"Feed payload is not JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise V16MalformedStructureError(f"Feed payload must be a JSON object, got {type(document).__name__}")

    try:
        response = FilteredDataResponse.model_validate(document)
    except ValidationError as exc:
        raise V16MalformedStructureError(f"Feed payload has unexpected shape: {exc}") from exc

    if response.situations_records is None:
        _logger.debug("Feed payload has no situation records")
        return DecodeResult()

    converted = [_convert_entry(entry) for entry in response.situations_records]
    beacons = [item for item in converted if isinstance(item, BeaconRecord)]
    dropped = [item for item in converted if isinstance(item, DroppedRecord)]

    for item in dropped:
        _logger.debug("Dropped situation record id=%s situation=%s: %s", item.record_id, item.situation_id, item.reason)

    _logger.debug("Decoded %d beacons (%d records dropped)", len(beacons), len(dropped))
    return DecodeResult(beacons=beacons, dropped=dropped)


def decode_payload(raw: bytes | str, codec: EnvelopeCodec | None = None) -> DecodeResult:
    """Decode a raw feed response body.

    Parameters
    ----------
    raw : bytes or str
        Response body exactly as received (Base64 text).
    codec : EnvelopeCodec or None
        Envelope codec; defaults to :class:`ObfuscationCodec` with the
        protocol key.

    Returns
    -------
    DecodeResult
        Decoded beacons in feed order and the records that were dropped.

    Raises
    ------
    V16EncodingError
        Malformed Base64.
    V16TextEncodingError
        De-obfuscated bytes are not UTF-8.
    V16MalformedStructureError
        Text is not a feed JSON document.
    """
    plain = (codec or _DEFAULT_CODEC).decode_envelope(raw)
    try:
        text = plain.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise V16TextEncodingError(f"Feed payload is not valid UTF-8 at byte {exc.start}") from exc
    return parse_feed_text(text)


def decode_beacons(raw: bytes | str) -> list[BeaconRecord]:
    """Shortcut for ``decode_payload(raw).beacons``."""
    return decode_payload(raw).beacons
