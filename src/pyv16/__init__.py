"""pyv16 - Async Python client for the DGT V16 emergency beacon feed."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyv16")
except PackageNotFoundError:
    __version__ = "0+local"
from pyv16.analytics import BeaconSummary, filter_by_region, search_by_road, summarize
from pyv16.client import V16Client
from pyv16.config import V16Config
from pyv16.exceptions import (
    V16ConfigError,
    V16DecodeError,
    V16EncodingError,
    V16Error,
    V16MalformedStructureError,
    V16RefreshInProgressError,
    V16TextEncodingError,
    V16TransportError,
)
from pyv16.geo.cluster import BeaconMarker, ClusterEngine, ClusterMarker, RenderGroup
from pyv16.geo.projection import Projection, ScreenPosition, TileCoordinate, TilePlacement
from pyv16.ingestion.decode import DecodeResult, DroppedRecord, decode_beacons, decode_payload
from pyv16.models import BeaconRecord
from pyv16.state.beacons import BeaconStore
from pyv16.state.events import BeaconsEvent, ViewportChange, ViewportEvent
from pyv16.state.viewport import ViewportState

__all__ = [
    "__version__",
    "BeaconMarker",
    "BeaconRecord",
    "BeaconStore",
    "BeaconSummary",
    "BeaconsEvent",
    "ClusterEngine",
    "ClusterMarker",
    "DecodeResult",
    "DroppedRecord",
    "Projection",
    "RenderGroup",
    "ScreenPosition",
    "TileCoordinate",
    "TilePlacement",
    "V16Client",
    "V16Config",
    "V16ConfigError",
    "V16DecodeError",
    "V16EncodingError",
    "V16Error",
    "V16MalformedStructureError",
    "V16RefreshInProgressError",
    "V16TextEncodingError",
    "V16TransportError",
    "ViewportChange",
    "ViewportEvent",
    "ViewportState",
    "decode_beacons",
    "decode_payload",
    "filter_by_region",
    "search_by_road",
    "summarize",
]
