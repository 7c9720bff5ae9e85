"""In-memory client storage for development and testing."""

import copy

from storefront.storage.port import ClientStorage


class MemoryStorage(ClientStorage):
    """Dictionary-backed storage. Values are deep-copied in both directions."""

    def __init__(self) -> None:
        self._data: dict[str, dict] = {}
        self.writes: list[str] = []

    def load(self, key: str) -> dict | None:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def save(self, key: str, value: dict) -> None:
        self._data[key] = copy.deepcopy(value)
        self.writes.append(key)
