from abc import ABC, abstractmethod


class StorageError(Exception):
    """Loading or saving the record set failed."""


class StorageBackend(ABC):
    """Persistence for the whole record set: a JSON array of card records.

    Callers load, mutate and save the complete set; there are no partial
    writes, so the last successful save wins.
    """

    name = "unknown"

    @abstractmethod
    def load_data(self) -> list[dict]:
        """Return the stored record set, or an empty list when nothing is stored."""

    @abstractmethod
    def save_data(self, data: list[dict]) -> None:
        """Replace the stored record set with ``data``."""
