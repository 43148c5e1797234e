from abc import ABC, abstractmethod
from typing import Optional


class Destination(ABC):
    """Remote record collection addressed by a natural key"""

    @abstractmethod
    def find(self, key: str) -> Optional[dict]:
        """Existing record for the natural key, or None"""
        pass

    @abstractmethod
    def create(self, payload: dict) -> str:
        """Create a record, returns its ID"""
        pass


class UpsertDestination(Destination):
    """Destination whose records can also be updated in place"""

    @abstractmethod
    def update(self, record_id: str, payload: dict):
        pass
