from __future__ import annotations

import json

import structlog

from .exceptions import FogDataError, StorageError
from .storage import KeyValueStorage
from .strokes import FogStroke, StrokeStore

log = structlog.get_logger(__name__)

SCHEMA_TAG = "v1"
BASE_KEY = f"fog_{SCHEMA_TAG}"


def storage_key(namespace: str = "") -> str:
    """Versioned key, optionally scoped to one map (``fog_v1:<namespace>``)."""
    return f"{BASE_KEY}:{namespace}" if namespace else BASE_KEY


def encode_strokes(strokes) -> bytes:
    return json.dumps([s.to_dict() for s in strokes], separators=(",", ":"), allow_nan=False).encode("utf-8")


def decode_strokes(blob: bytes) -> list[FogStroke]:
    try:
        obj = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise FogDataError(f"unparseable fog blob: {e}") from e
    if not isinstance(obj, list):
        raise FogDataError(f"fog blob must be an array, got {type(obj).__name__}")
    return [FogStroke.from_dict(d) for d in obj]


class FogPersistence:
    """Moves a StrokeStore in and out of a key-value storage backend.

    Neither operation raises: corrupt data loads as an empty store and
    failed writes are reported through the return value.
    """

    def __init__(self, storage: KeyValueStorage, namespace: str = ""):
        self.storage = storage
        self.key = storage_key(namespace)
        self.last_error: str | None = None

    def save(self, store: StrokeStore) -> bool:
        try:
            blob = encode_strokes(store.all())
            self.storage.write(self.key, blob)
        except (StorageError, ValueError) as e:
            self.last_error = str(e)
            log.warning("Fog save failed", key=self.key, strokes=len(store), error=str(e))
            return False
        self.last_error = None
        log.debug("Fog saved", key=self.key, strokes=len(store), size=len(blob))
        return True

    def load(self) -> StrokeStore:
        store = StrokeStore()
        try:
            blob = self.storage.read(self.key)
        except StorageError as e:
            log.warning("Fog storage unreadable", key=self.key, error=str(e))
            return store
        if blob is None:
            log.debug("No saved fog", key=self.key)
            return store
        try:
            store.replace(decode_strokes(blob))
        except FogDataError as e:
            log.warning("Discarding corrupt fog data", key=self.key, error=str(e))
            return store
        log.info("Fog loaded", key=self.key, strokes=len(store))
        return store
