"""
Local key/value store.

A single JSON object on disk holding string values, standing in for the
browser's local storage. Reads and writes are synchronous and best-effort.
"""
import json
import logging
import threading
from pathlib import Path
from typing import Dict, Optional

from shared.constants import STORE_FILENAME
from shared.config import config_dir

logger = logging.getLogger(__name__)


class JsonFileStore:
    """String key/value pairs persisted to one JSON file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else config_dir() / STORE_FILENAME
        self._lock = threading.Lock()
        self._values: Optional[Dict[str, str]] = None

    def _read(self) -> Dict[str, str]:
        if self._values is not None:
            return self._values
        self._values = {}
        if not self.path.exists():
            return self._values
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Store file {self.path} unreadable ({e}), starting empty")
            return self._values
        if isinstance(data, dict):
            self._values = {str(k): v for k, v in data.items() if isinstance(v, str)}
        else:
            logger.warning(f"Store file {self.path} is not an object, starting empty")
        return self._values

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            values = self._read()
            values[key] = value
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(json.dumps(values, indent=2), encoding="utf-8")
            except OSError as e:
                logger.warning(f"Could not write store file {self.path}: {e}")
