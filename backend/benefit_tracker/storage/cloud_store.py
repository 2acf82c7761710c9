import logging
import time

import httpx

from benefit_tracker.storage.base import StorageBackend, StorageError

logger = logging.getLogger(__name__)


class CloudStore(StorageBackend):
    """Reads and writes the record set at a pre-authenticated object-store URL."""

    name = "cloud"

    def __init__(self, url: str, timeout: float = 10.0, transport: httpx.BaseTransport | None = None):
        if not url:
            raise StorageError("Cloud storage URL is not configured")
        self.url = url
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self.transport)

    def load_data(self) -> list[dict]:
        # Timestamp defeats caches sitting between us and the bucket
        params = {"t": str(int(time.time() * 1000))}
        try:
            with self._client() as client:
                resp = client.get(self.url, params=params, headers={"Cache-Control": "no-store"})
            if resp.status_code == 404:
                return []
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.exception("Cloud load failed with status %s", exc.response.status_code)
            raise StorageError(f"Failed to load data: {exc.response.status_code} {exc.response.reason_phrase}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.exception("Cloud load failed")
            raise StorageError(f"Failed to load data: {exc}") from exc

        if not isinstance(data, list):
            logger.warning("Cloud payload is not a list, treating as empty")
            return []
        return data

    def save_data(self, data: list[dict]) -> None:
        try:
            with self._client() as client:
                resp = client.put(self.url, json=data)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.exception("Cloud save failed with status %s", exc.response.status_code)
            raise StorageError(f"Cloud Save Error: {exc.response.status_code} {exc.response.reason_phrase}") from exc
        except httpx.HTTPError as exc:
            logger.exception("Cloud save failed")
            raise StorageError(f"Cloud Save Error: {exc}") from exc
