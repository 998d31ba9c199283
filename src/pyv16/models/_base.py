"""Base model for DGT feed payloads.

Every wire model inherits from :class:`V16BaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase feed keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips feed sentinel
  values (``None``, ``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Sentinel strings the feed uses for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan"})


class V16BaseModel(BaseModel):
    """Base for DGT feed models.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * sentinel values → dropped so the field default is used instead
    * Stashes the original feed dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original feed dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_feed_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = V16BaseModel._clean_dict(original)
        # Keep an explicitly supplied raw= (kwargs construction).
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned
