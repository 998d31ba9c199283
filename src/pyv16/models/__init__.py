"""Data models for the DGT V16 feed."""

from pyv16.models._base import V16BaseModel
from pyv16.models.beacon import BeaconRecord, format_elapsed, parse_activation_time
from pyv16.models.situation import FilteredDataResponse, SituationRecord

__all__ = [
    "BeaconRecord",
    "FilteredDataResponse",
    "SituationRecord",
    "V16BaseModel",
    "format_elapsed",
    "parse_activation_time",
]
