"""Key/value stores that persist shipping settings between runs."""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from tcg_easypost.errors import SettingsError

logger = logging.getLogger(__name__)


class SettingsStore(ABC):
    """Base class for stores holding JSON-compatible values by name."""

    @abstractmethod
    def get(self, name: str) -> Any | None:
        """Return the value saved under *name*, or None if there is none."""

    @abstractmethod
    def set(self, name: str, value: Any) -> None:
        """Save *value* under *name*, replacing any previous value."""


class InMemorySettingsStore(SettingsStore):
    """Store that lives only as long as the process."""

    def __init__(self, values: dict | None = None):
        self._values: dict[str, str] = {}
        for name, value in (values or {}).items():
            self.set(name, value)

    def get(self, name: str) -> Any | None:
        raw = self._values.get(name)
        return None if raw is None else json.loads(raw)

    def set(self, name: str, value: Any) -> None:
        # Round-trip through JSON so callers never share mutable state with us.
        self._values[name] = json.dumps(value)


class JsonFileSettingsStore(SettingsStore):
    """Store that keeps every key in a single JSON document on disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise SettingsError(f"Could not read settings file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self.path} must contain a JSON object")
        return data

    def get(self, name: str) -> Any | None:
        return self._read().get(name)

    def set(self, name: str, value: Any) -> None:
        data = self._read()
        data[name] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.debug("Saved %r to %s", name, self.path)
