# -*- coding: utf-8 -*-
"""
Key-value blob storage backends.

The planner treats storage as opaque: a key maps to a string or to nothing.
Serialization of what goes inside the string lives in `schemas`.
"""
from __future__ import annotations

import contextlib
import os
import typing as t
from pathlib import Path

from .errors import PersistenceError

# Fixed keys for the two independently stored blobs
EVENTS_KEY = "events"
SETTINGS_KEY = "settings"


class KeyValueStorage(t.Protocol):
    """Anything that can get and set string blobs by key."""

    def get(self, key: str) -> t.Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """In-process storage; forgets everything when the process exits."""

    def __init__(self, initial: t.Optional[dict[str, str]] = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> t.Optional[str]:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value


class JsonFileStorage:
    """Stores each key as `<directory>/<key>.json`.

    Writes go through a temporary file and `os.replace` so a reader never
    sees a half-written blob.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> t.Optional[str]:
        path = self._path(key)
        if not path.is_file():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise PersistenceError(f"Could not write {path}: {e}") from e
