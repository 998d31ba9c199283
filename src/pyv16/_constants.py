"""Internal constants shared across the library."""

API_URL = "https://etraffic.dgt.es/etrafficWEB/api/cache/getFilteredData"
USER_AGENT = "V16BeaconTracker/1.0"

# Fixed request body; the feed is filtered server-side to beacon situations.
REQUEST_BODY = '{"filtrosVia":["Otras vialidades"],"filtrosCausa":[]}'

# Protocol constant, not a secret.
XOR_KEY = 0x4B

TILE_URL_TEMPLATE = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"

# Madrid
DEFAULT_LATITUDE = 40.4168
DEFAULT_LONGITUDE = -3.7038
DEFAULT_ZOOM = 6

MAX_LATITUDE = 85.0

# ------------------------------------------------------------------
# Field fallbacks applied when a situation record omits a value
# ------------------------------------------------------------------

ACTIVE_STATUS = "active"
UNKNOWN_SENSE = "unknown"
DEFAULT_CAUSE = "V16"
UNKNOWN_FEMININE = "Desconocida"
UNKNOWN_MASCULINE = "Desconocido"

_ORIENTATION_LABELS: dict[str, str] = {
    "positive": "Creciente",
    "negative": "Decreciente",
    "both": "Ambos sentidos",
}


def orientation_label(sense: str | None) -> str:
    """Translate a sense token (``positive``/``negative``/``both``) to its label.

    Matching is case-insensitive; anything else maps to ``"Desconocido"``.
    """
    if sense is None:
        return UNKNOWN_MASCULINE
    return _ORIENTATION_LABELS.get(sense.strip().lower(), UNKNOWN_MASCULINE)


# ------------------------------------------------------------------
# Zoom level names  (upper bound inclusive → label)
# ------------------------------------------------------------------

_ZOOM_LEVEL_NAMES: tuple[tuple[int, str], ...] = (
    (5, "País"),
    (8, "Comunidad"),
    (11, "Provincia"),
    (14, "Ciudad"),
)


def zoom_level_name(zoom: int) -> str:
    """Return the human label for a zoom level (``"País"`` … ``"Calle"``)."""
    for upper, name in _ZOOM_LEVEL_NAMES:
        if zoom <= upper:
            return name
    return "Calle"
