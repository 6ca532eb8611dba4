"""In-memory config document shared by the panel tabs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ConfigState:
    data: dict[str, Any] | None = None
    dirty: bool = False
    error: str | None = None

    def section(self, key: str) -> dict[str, Any]:
        """Return the named top-level section, or an empty dict if absent."""

        value = (self.data or {}).get(key)
        if isinstance(value, dict):
            return value
        return {}
