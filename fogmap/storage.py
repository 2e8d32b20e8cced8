"""Key-value blob storage backends used to persist fog.

All backends are synchronous and best effort. Writes raise StorageError
(or StorageQuotaError when ``max_bytes`` is exceeded); reads of a missing
key return None.
"""
from __future__ import annotations

from contextlib import suppress
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from PyQt6.QtCore import QByteArray, QSettings

from .exceptions import StorageError, StorageQuotaError


class KeyValueStorage(Protocol):
    def read(self, key: str) -> bytes | None: ...

    def write(self, key: str, blob: bytes) -> None: ...


def _check_quota(key: str, blob: bytes, max_bytes: int | None) -> None:
    if max_bytes is not None and len(blob) > max_bytes:
        raise StorageQuotaError(key, len(blob), max_bytes)


def encode_key(key: str) -> str:
    """Reversible, separator-free form of ``key`` (percent-quoted)."""
    return quote(key, safe="")


class MemoryStorage:
    def __init__(self, max_bytes: int | None = None):
        self.max_bytes = max_bytes
        self.blobs: dict[str, bytes] = {}

    def read(self, key: str) -> bytes | None:
        return self.blobs.get(key)

    def write(self, key: str, blob: bytes) -> None:
        _check_quota(key, blob, self.max_bytes)
        self.blobs[key] = bytes(blob)


class SettingsStorage:
    """Blobs kept in QSettings under a ``fog/`` group."""

    GROUP = "fog"

    def __init__(self, settings: QSettings, max_bytes: int | None = 5 * 1024 * 1024):
        self.settings = settings
        self.max_bytes = max_bytes

    def _k(self, key: str) -> str:
        # QSettings treats '/' and '\' as group separators
        return f"{self.GROUP}/{encode_key(key)}"

    def read(self, key: str) -> bytes | None:
        v = self.settings.value(self._k(key), None)
        if v is None:
            return None
        # PyQt/QSettings can return: QByteArray, bytes, or str depending on the backend.
        if isinstance(v, QByteArray):
            return bytes(v.data())
        if isinstance(v, (bytes, bytearray)):
            return bytes(v)
        if isinstance(v, str):
            return v.encode("utf-8")
        return None

    def write(self, key: str, blob: bytes) -> None:
        _check_quota(key, blob, self.max_bytes)
        self.settings.setValue(self._k(key), QByteArray(bytes(blob)))
        self.settings.sync()
        if self.settings.status() != QSettings.Status.NoError:
            raise StorageError(key, f"QSettings status {self.settings.status().name}")


class DirectoryStorage:
    """One file per key inside ``root``."""

    def __init__(self, root: str | Path, max_bytes: int | None = None):
        self.root = Path(root)
        self.max_bytes = max_bytes

    def path_for(self, key: str) -> Path:
        return self.root / (encode_key(key) + ".json")

    def read(self, key: str) -> bytes | None:
        p = self.path_for(key)
        try:
            return p.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(key, str(e)) from e

    def write(self, key: str, blob: bytes) -> None:
        _check_quota(key, blob, self.max_bytes)
        p = self.path_for(key)
        tmp = p.with_name(p.name + ".tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(blob)
            tmp.replace(p)
        except OSError as e:
            with suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise StorageError(key, str(e)) from e
