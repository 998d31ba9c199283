"""Wire models for the DGT ``getFilteredData`` response."""

from __future__ import annotations

import json
from typing import Any

from pydantic import field_validator

from pyv16.ingestion.normalize import safe_float, safe_str
from pyv16.models._base import V16BaseModel


class SituationRecord(V16BaseModel):
    """One situation record as sent by the feed.

    Field names follow the feed (Spanish) so the camelCase aliases line
    up; :class:`~pyv16.models.beacon.BeaconRecord` is the normalized form.

    Parameters
    ----------
    situation_id : str or None
        Situation identifier shared by related records.
    id : str or None
        Record identifier.
    geometria : str or None
        GeoJSON-like geometry text, usually a ``LineString``.
    pk_ini, pk_fin : float
        Start/end kilometer markers. ``0.0`` when absent.
    """

    situation_id: str | None = None
    id: str | None = None
    subtipo_vialidad: str | None = None
    fecha_inicio: str | None = None
    fecha_fin: str | None = None
    caracter: str | None = None
    estado: str | None = None
    causa: str | None = None
    subcausa: str | None = None
    carretera: str | None = None
    sentido: str | None = None
    orientacion: str | None = None
    hacia: str | None = None
    pk_ini: float = 0.0
    pk_fin: float = 0.0
    c_autonoma_ini: str | None = None
    provincia_ini: str | None = None
    municipio_ini: str | None = None
    c_autonoma_fin: str | None = None
    provincia_fin: str | None = None
    municipio_fin: str | None = None
    geometria: str | None = None

    @field_validator(
        "situation_id",
        "id",
        "subtipo_vialidad",
        "fecha_inicio",
        "fecha_fin",
        "caracter",
        "estado",
        "causa",
        "subcausa",
        "carretera",
        "sentido",
        "orientacion",
        "hacia",
        "c_autonoma_ini",
        "provincia_ini",
        "municipio_ini",
        "c_autonoma_fin",
        "provincia_fin",
        "municipio_fin",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("pk_ini", "pk_fin", mode="before")
    @classmethod
    def _coerce_km(cls, value: Any) -> float:
        parsed = safe_float(value)
        return 0.0 if parsed is None else parsed

    @field_validator("geometria", mode="before")
    @classmethod
    def _coerce_geometry(cls, value: Any) -> str | None:
        # Some responses inline the geometry as an object instead of text.
        if isinstance(value, (dict, list)):
            return json.dumps(value, separators=(",", ":"))
        return safe_str(value)


class FilteredDataResponse(V16BaseModel):
    """Top-level decoded feed document.

    ``situations_records`` is ``None`` when the feed sends ``null`` or
    omits the key; callers treat that as an empty batch. Entries are
    left unvalidated so one bad entry can be dropped on its own.
    """

    situations_records: list[Any] | None = None
