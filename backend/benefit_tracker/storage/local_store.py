import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from benefit_tracker.config import STORAGE_KEY
from benefit_tracker.models.stored_dataset import StoredDataset
from benefit_tracker.storage.base import StorageBackend, StorageError

logger = logging.getLogger(__name__)


class LocalStore(StorageBackend):
    """Keeps the record set as one JSON row in the application database."""

    name = "local"

    def __init__(self, db: Session, key: str = STORAGE_KEY):
        self.db = db
        self.key = key

    def load_data(self) -> list[dict]:
        try:
            row = self.db.get(StoredDataset, self.key)
        except SQLAlchemyError as exc:
            logger.exception("Failed to load record set %r", self.key)
            raise StorageError(f"Failed to load data: {exc}") from exc
        if row is None or not isinstance(row.payload, list):
            return []
        return list(row.payload)

    def save_data(self, data: list[dict]) -> None:
        try:
            row = self.db.get(StoredDataset, self.key)
            if row is None:
                self.db.add(StoredDataset(key=self.key, payload=data))
            else:
                row.payload = data
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to save record set %r", self.key)
            raise StorageError(f"Failed to save data: {exc}") from exc
        logger.debug("Saved %d card record(s) under %r", len(data), self.key)
