"""
Local key-value store.

Each key holds an independent JSON blob; the whole store is persisted to a
single JSON file. Pass ``filepath=None`` for a memory-only store.
"""
import json
import os
from typing import Any, Dict, List, Optional
from loguru import logger


class LocalStore:
    def __init__(self, filepath: Optional[str] = "data/store.json"):
        self.filepath = filepath
        self._blobs: Dict[str, str] = {}
        self._load()

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        blob = self._blobs.get(key)
        if blob is None:
            return default
        try:
            return json.loads(blob)
        except ValueError as e:
            logger.error(f"Corrupt value under '{key}': {e}")
            return default

    def set(self, key: str, value: Any) -> None:
        self._blobs[key] = json.dumps(value)
        self._save()

    def set_raw(self, key: str, blob: str) -> None:
        """Store a pre-serialized blob as-is."""
        self._blobs[key] = blob
        self._save()

    def remove(self, key: str) -> None:
        if self._blobs.pop(key, None) is not None:
            self._save()

    def keys(self) -> List[str]:
        return list(self._blobs)

    def _load(self):
        if not self.filepath or not os.path.isfile(self.filepath):
            return
        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                raw = json.load(f)
            self._blobs = {str(k): str(v) for k, v in raw.items()}
        except (OSError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load store from {self.filepath}: {e}")

    def _save(self):
        if not self.filepath:
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._blobs, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save store to {self.filepath}: {e}")
