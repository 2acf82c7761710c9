from sqlalchemy.orm import Session

from benefit_tracker.config import settings
from benefit_tracker.storage.base import StorageBackend, StorageError
from benefit_tracker.storage.cloud_store import CloudStore
from benefit_tracker.storage.local_store import LocalStore


def get_storage_backend(db: Session) -> StorageBackend:
    """Build the backend selected by ``settings.storage_backend``."""
    if settings.storage_backend == "cloud":
        return CloudStore(settings.cloud_store_url, timeout=settings.cloud_timeout_seconds)
    if settings.storage_backend != "local":
        raise StorageError(f"Unknown storage backend {settings.storage_backend!r}")
    return LocalStore(db)


__all__ = ["CloudStore", "LocalStore", "StorageBackend", "StorageError", "get_storage_backend"]
