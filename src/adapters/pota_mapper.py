"""POTA API to core Spot mapping adapter.

This keeps the upstream JSON shape out of the core pipeline.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from core.models import Spot

LOGGER = logging.getLogger(__name__)


def _text(item: dict[str, Any], key: str) -> str:
    value = item.get(key)
    if value is None:
        return ""
    return str(value)


def _spot_id(item: dict[str, Any]) -> Optional[int]:
    raw = item.get("spotId")
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def build_spot(item: Any) -> Optional[Spot]:
    """Map one spot payload; return None when it has no usable identity."""

    if not isinstance(item, dict):
        return None
    spot_id = _spot_id(item)
    if spot_id is None:
        return None
    spot_time = item.get("spotTime")
    return Spot(
        spot_id=spot_id,
        spotter=_text(item, "spotter"),
        activator=_text(item, "activator"),
        reference=_text(item, "reference"),
        comments=_text(item, "comments"),
        mode=_text(item, "mode"),
        frequency=_text(item, "frequency"),
        name=_text(item, "name"),
        park_name=_text(item, "parkName"),
        location_desc=_text(item, "locationDesc"),
        spot_time=str(spot_time) if spot_time else None,
    )


def build_spots(payload: Any) -> List[Spot]:
    """Map an API response body, keeping the upstream order."""

    if not isinstance(payload, list):
        LOGGER.warning("Unexpected spots payload type: %s", type(payload).__name__)
        return []
    spots: List[Spot] = []
    dropped = 0
    for item in payload:
        spot = build_spot(item)
        if spot is None:
            dropped += 1
            continue
        spots.append(spot)
    if dropped:
        LOGGER.debug("Dropped %s spot payloads without spotId", dropped)
    return spots


def sample_spot(**overrides: Any) -> Spot:
    """Return a representative spot for manual speech and sound tests."""

    values: dict[str, Any] = {
        "spot_id": 0,
        "spotter": "JA1ABC",
        "activator": "JA1ABC/1",
        "reference": "JA-0001",
        "comments": "QRV now",
        "mode": "SSB",
        "frequency": "7144",
        "name": "Sample Park",
        "location_desc": "JP-13",
    }
    values.update(overrides)
    return Spot(**values)
