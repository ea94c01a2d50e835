# src/fleetform/forms/profiles.py
"""Named configuration profiles per plugin.

Profiles live in an opaque key-value store of strings. Each plugin gets one
key holding a JSON object that maps profile names to configurations:

    key:   "plugin-profiles.<plugin_name>"
    value: {"Staging": {...}, "Production": {...}}

Loading a profile does not touch the form by itself; apply it with
FormController.apply_template().
"""

import copy
import json
import os
import tempfile
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from fleetform.contracts import ProfileError
from fleetform.core.canonical import parse_json
from fleetform.core.logging import get_logger

logger = get_logger(__name__)

KEY_PREFIX = "plugin-profiles."


class KeyValueStore(Protocol):
    """Minimal string store, shaped like browser localStorage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStore:
    """In-process store, used by tests and one-shot CLI runs."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JSONFileStore:
    """Store persisted as one JSON object in a file.

    Writes go through a temporary file and an atomic rename.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        parsed = parse_json(self.path.read_text(encoding="utf-8"))
        if not parsed.ok or not isinstance(parsed.value, dict):
            logger.warning("Ignoring unreadable profile store", path=str(self.path))
            return {}
        return {str(k): v for k, v in parsed.value.items() if isinstance(v, str)}

    def _write(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".profiles-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._read()
            items[key] = value
            self._write(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._read()
            if items.pop(key, None) is not None:
                self._write(items)


class ProfileManager:
    """Save, list, load and delete named profiles of one plugin."""

    def __init__(self, store: KeyValueStore, plugin_name: str) -> None:
        self._store = store
        self.plugin_name = plugin_name

    @property
    def key(self) -> str:
        return f"{KEY_PREFIX}{self.plugin_name}"

    def _profiles(self) -> dict[str, dict[str, Any]]:
        raw = self._store.get_item(self.key)
        if raw is None:
            return {}
        parsed = parse_json(raw)
        if not parsed.ok or not isinstance(parsed.value, dict):
            logger.warning("Discarding corrupt profiles", plugin=self.plugin_name)
            return {}
        return {
            name: config for name, config in parsed.value.items() if isinstance(config, dict)
        }

    def list_profiles(self) -> list[str]:
        """Profile names in the order they were first saved."""
        return list(self._profiles())

    def save_profile(self, name: str, config: Mapping[str, Any]) -> None:
        """Save (or overwrite) a profile.

        Raises:
            ValueError: If the name is blank
        """
        name = name.strip()
        if not name:
            raise ValueError("Profile name cannot be empty")
        profiles = self._profiles()
        profiles[name] = copy.deepcopy(dict(config))
        self._store.set_item(self.key, json.dumps(profiles))
        logger.info("Profile saved", plugin=self.plugin_name, profile=name)

    def load_profile(self, name: str) -> dict[str, Any]:
        """Return a copy of a saved profile.

        Raises:
            ProfileError: If no profile has that name
        """
        profiles = self._profiles()
        if name not in profiles:
            raise ProfileError(f"No profile named '{name}' for plugin '{self.plugin_name}'")
        return copy.deepcopy(profiles[name])

    def delete_profile(self, name: str) -> bool:
        """Delete a profile. Returns False if it did not exist."""
        profiles = self._profiles()
        if profiles.pop(name, None) is None:
            return False
        if profiles:
            self._store.set_item(self.key, json.dumps(profiles))
        else:
            self._store.remove_item(self.key)
        return True
