"""Storage backend abstractions for documents and preferences.

The editor persists small string values addressed by a flat key such as
``code-python`` or ``editor-theme``.  To decouple the session from the
underlying storage mechanism, an abstract backend is defined with a common
interface.  Three concrete backends are provided:

* ``LocalStorageBackend`` – stores one file per key under a configurable
  base directory.  Suitable for a single-user deployment with a volume.

* ``GCSStorageBackend`` – stores one blob per key in Google Cloud Storage.
  Suitable when deploying to Cloud Run and requiring durable storage.

* ``MemoryStorageBackend`` – keeps values in a dict.  Used by tests and
  when durability is not wanted.

Reads never fail: a backend error while reading is logged and reported as a
missing value.  Writes raise :class:`~codepad.errors.PersistenceError` so the
caller can fall back to keeping the value in memory.

Backends are not thread‑safe and should be instantiated per worker process.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Optional

from .errors import PersistenceError

try:
    from google.cloud import storage  # type: ignore
except ImportError:
    storage = None  # type: ignore


logger = logging.getLogger(__name__)

THEME_KEY = "editor-theme"

_KEY_RE = re.compile(r"^[A-Za-z0-9._-]+$")


def validate_key(key: str) -> str:
    if not _KEY_RE.match(key) or key.startswith("."):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class StorageBackend:
    """Protocol for storage backends."""

    def read_string(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write_string(self, key: str, value: str) -> None:
        raise NotImplementedError


class LocalStorageBackend(StorageBackend):
    """Store each key as a UTF-8 text file on the local filesystem."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{validate_key(key)}.txt"

    def read_string(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Unable to read %s: %s", path, exc)
            return None

    def write_string(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except (OSError, UnicodeError) as exc:
            try:
                tmp_path.unlink()
            except OSError:
                pass
            raise PersistenceError(key, str(exc)) from exc


class GCSStorageBackend(StorageBackend):
    """Store values in Google Cloud Storage.

    Values are stored as blobs named ``<prefix><key>``.  This backend requires
    ``google-cloud-storage`` to be installed and appropriate service
    credentials to be available (Cloud Run automatically provides credentials
    via its service account).
    """

    def __init__(self, bucket_name: str, prefix: str = "codepad/") -> None:
        if storage is None:
            raise RuntimeError(
                "google-cloud-storage is not installed; cannot use GCSStorageBackend"
            )
        client = storage.Client()
        self.bucket = client.bucket(bucket_name)
        self.prefix = prefix

    def _blob(self, key: str):
        return self.bucket.blob(f"{self.prefix}{validate_key(key)}")

    def read_string(self, key: str) -> Optional[str]:
        blob = self._blob(key)
        try:
            if not blob.exists():
                return None
            return blob.download_as_text(encoding="utf-8")
        except Exception as exc:
            logger.warning("Unable to read gs://%s/%s: %s", self.bucket.name, blob.name, exc)
            return None

    def write_string(self, key: str, value: str) -> None:
        blob = self._blob(key)
        try:
            blob.upload_from_string(value, content_type="text/plain; charset=utf-8")
        except Exception as exc:
            raise PersistenceError(key, str(exc)) from exc


class MemoryStorageBackend(StorageBackend):
    """Keep values in a dictionary.

    Setting ``available`` to ``False`` makes every write fail, which mimics a
    browser store that is full or disabled.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.values: Dict[str, str] = dict(initial or {})
        self.available = True
        self.writes: list[tuple[str, str]] = []

    def read_string(self, key: str) -> Optional[str]:
        return self.values.get(validate_key(key))

    def write_string(self, key: str, value: str) -> None:
        validate_key(key)
        if not self.available:
            raise PersistenceError(key, "storage unavailable")
        self.values[key] = value
        self.writes.append((key, value))


def build_storage(config) -> StorageBackend:
    """Instantiate the backend selected by ``config.storage_backend``."""
    if config.storage_backend == "gcs":
        if config.gcs_bucket is None:
            raise RuntimeError("CODEPAD_GCS_BUCKET must be set when using GCS storage backend")
        return GCSStorageBackend(config.gcs_bucket)
    if config.storage_backend == "memory":
        return MemoryStorageBackend()
    return LocalStorageBackend(config.storage_path)
