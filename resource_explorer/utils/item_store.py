"""
Persistent item store.

A durable string key-value store with one JSON file per key under a state
directory. History and favorites build their collections on top of it with
full read-modify-write cycles, which is only safe with a single writer per
key.
"""
from __future__ import annotations

import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Callable, List, Optional, TypeVar

from .config import config
from .errors import CorruptStateError
from .logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class JsonFileItemStore:
    """Key-value store persisting each key as ``<state_dir>/<key>.json``."""

    def __init__(self, directory: Optional[str] = None):
        self._directory = Path(directory or config.explorer.state_dir).expanduser()

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        return self._directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def read(self, key: str) -> Optional[str]:
        """Return the stored string, or ``None`` when the key is absent.

        Raises:
            CorruptStateError: the file exists but cannot be read or is not
                valid UTF-8.
        """
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            raise CorruptStateError(f"{path} is not valid UTF-8", cause=exc) from exc
        except OSError as exc:
            raise CorruptStateError(f"{path} cannot be read: {exc}", cause=exc) from exc

    def write(self, key: str, value: str) -> None:
        """Atomically replace the value stored under ``key``."""
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)


def load_json_list(store: Any, key: str, decode: Callable[[Any], T]) -> List[T]:
    """Read a JSON array from ``store`` and decode each element.

    An absent key yields ``[]``. Any unreadable, unparsable or structurally
    wrong blob is logged and also yields ``[]``.
    """
    try:
        blob = store.read(key)
        if not blob:
            return []
        try:
            data = json.loads(blob)
        except ValueError as exc:
            raise CorruptStateError(f"{key} is not valid JSON", cause=exc) from exc
        if not isinstance(data, list):
            raise CorruptStateError(f"{key} is not a JSON array")
        try:
            return [decode(item) for item in data]
        except (KeyError, TypeError, ValueError) as exc:
            raise CorruptStateError(f"{key} holds malformed records", cause=exc) from exc
    except CorruptStateError as exc:
        logger.warning("Discarding corrupt stored data for %s: %s", key, exc.message)
        return []


def dump_json_list(store: Any, key: str, items: List[Any]) -> None:
    """Write ``items`` (objects with ``to_dict``) as a JSON array."""
    store.write(key, json.dumps([item.to_dict() for item in items]))
