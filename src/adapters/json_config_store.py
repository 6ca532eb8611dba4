"""JSON file adapter for the config.json document.

The document is loaded and saved as a whole; unknown keys survive a round
trip so newer and older versions can share one file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from adapters.config_parsing import default_document
from core.errors import ConfigurationMissing

LOGGER = logging.getLogger(__name__)


class JsonConfigStore:
    """Thin wrapper around one JSON config file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        """Return the raw document.

        Raises ConfigurationMissing when the file does not exist and
        ValueError when it is not a JSON object.
        """

        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigurationMissing(f"Config file not found: {self._path}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"config.json error: {exc.msg}") from exc
        if not isinstance(data, dict):
            raise ValueError("config root must be an object")
        return data

    def load_or_default(self) -> dict[str, Any]:
        """Return the raw document, or the defaults when it is missing or broken."""

        try:
            return self.load()
        except ConfigurationMissing:
            LOGGER.info("No config at %s, using defaults", self._path)
        except ValueError as exc:
            LOGGER.error("Unreadable config at %s (%s), using defaults", self._path, exc)
        return default_document()

    def save(self, data: dict[str, Any]) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
