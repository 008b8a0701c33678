from abc import ABC, abstractmethod
from typing import Optional

from banking_ledger.domain.models import LedgerSnapshot

class CorruptSnapshotError(Exception):
    """Raised when a stored ledger snapshot cannot be decoded."""
    pass

class KeyValueStore(ABC):
    """
    Abstract local storage holding one text value per key.

    Stands in for browser local storage: the ledger snapshot, the exchange
    rate cache and the theme preference each live under a fixed key.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one.

        Args:
            key: Storage key
            value: Text to store
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if deleted, False if not found
        """
        pass

class LedgerRepository(ABC):
    """
    Abstract repository for the ledger snapshot.

    The whole snapshot is written on every save and read back whole on load.
    """

    @abstractmethod
    def load(self) -> Optional[LedgerSnapshot]:
        """
        Load the saved snapshot.

        Returns:
            The snapshot, or None if nothing has been saved

        Raises:
            CorruptSnapshotError: If the stored value cannot be decoded
        """
        pass

    @abstractmethod
    def save(self, snapshot: LedgerSnapshot) -> None:
        """
        Replace the saved snapshot.

        Args:
            snapshot: Balance and transactions to persist
        """
        pass
