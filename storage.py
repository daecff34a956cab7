"""
Durable key-value storage backends for the flight log
"""
import os
import sys
import json
import logging
import tempfile
from typing import Any, Dict, Optional

from models import StorageUnavailable


def default_storage_directory() -> str:
    """Per-user data directory; the working directory when run as a script"""
    if getattr(sys, 'frozen', False):
        app_data = os.path.join(os.path.expanduser("~"), ".flight_hours_log")
        os.makedirs(app_data, exist_ok=True)
        return app_data
    return os.path.abspath(".")


class JsonFileStorage:
    """Stores each key as `<directory>/<key>.json`"""

    def __init__(self, directory: Optional[str] = None):
        self.directory = directory or default_storage_directory()
        self.logger = logging.getLogger(__name__)

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Load the blob stored under key

        Returns:
            The decoded blob, or None if nothing was ever saved

        Raises:
            StorageUnavailable: If the file exists but cannot be read or decoded
        """
        path = self._path(key)
        if not os.path.exists(path):
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                blob = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageUnavailable(key, str(e))

        self.logger.debug(f"Loaded '{key}' from {path}")
        return blob

    def save(self, key: str, blob: Dict[str, Any]) -> None:
        """
        Write the blob under key, replacing any previous value atomically

        Raises:
            StorageUnavailable: If the blob cannot be serialized or written
        """
        path = self._path(key)
        tmp_path = None
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(blob, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as e:
            raise StorageUnavailable(key, str(e))
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

        self.logger.debug(f"Saved '{key}' to {path}")


class MemoryStorage:
    """In-process storage; blobs are copied through JSON so nothing is shared"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.blobs: Dict[str, str] = {}
        for key, blob in (initial or {}).items():
            self.blobs[key] = json.dumps(blob)

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        if key not in self.blobs:
            return None
        return json.loads(self.blobs[key])

    def save(self, key: str, blob: Dict[str, Any]) -> None:
        try:
            self.blobs[key] = json.dumps(blob)
        except (TypeError, ValueError) as e:
            raise StorageUnavailable(key, str(e))
