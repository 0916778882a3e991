"""Abstract base class for URL table persistence."""

from abc import ABC, abstractmethod
from typing import List, Tuple

from ..models import URLEntry


class URLStoreBase(ABC):
    """Abstract base class for loading and saving the whole URL table."""

    @abstractmethod
    async def load(self) -> List[Tuple[str, URLEntry]]:
        """Load every persisted entry.

        Returns:
            List of (short_id, entry) pairs in stored order

        Raises:
            StorageError: If the backing storage cannot be initialized or read
        """
        pass

    @abstractmethod
    async def save(self, items: List[Tuple[str, URLEntry]]) -> bool:
        """Overwrite the persisted table with ``items``.

        Implementations log failures instead of raising them.

        Args:
            items: Every (short_id, entry) pair of the table

        Returns:
            True if saved, False if the write failed
        """
        pass

    async def close(self) -> None:
        """Release storage resources."""
        pass
