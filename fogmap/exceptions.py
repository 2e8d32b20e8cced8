"""Exception hierarchy for fogmap."""


class FogMapError(Exception):
    """Base exception for all fogmap errors."""

    pass


class StorageError(FogMapError):
    """A key-value storage backend could not complete a read or write."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Storage failure for '{key}': {reason}")


class StorageQuotaError(StorageError):
    """A write would exceed the backend's size limit."""

    def __init__(self, key: str, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(key, f"{size} bytes exceeds quota of {limit} bytes")


class FogDataError(FogMapError):
    """Persisted fog data does not match the stroke schema."""

    pass


class CatalogError(FogMapError):
    """The point-of-interest catalog could not be loaded."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load catalog '{path}': {reason}")


class MapLoadError(FogMapError):
    """The background map asset could not be decoded."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load map '{path}': {reason}")
