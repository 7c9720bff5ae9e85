"""Client storage port (abstract interface).

Cart and wishlist state lives on the shopper's side, in a key-value store
scoped to one browser or device. Sessions write through this port after
every mutation and read from it once on load, so the concrete store can be
browser local storage behind an API, a JSON file, or memory in tests.
"""

from abc import ABC, abstractmethod


class ClientStorage(ABC):
    """Abstract key-value storage for client-held state."""

    @abstractmethod
    def load(self, key: str) -> dict | None:
        """Return the envelope stored under ``key``, or None if nothing is stored."""
        ...

    @abstractmethod
    def save(self, key: str, value: dict) -> None:
        """Replace whatever is stored under ``key``."""
        ...
