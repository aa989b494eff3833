"""
Record store contract shared by every registry backend.
The registry only needs four operations against two collections.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

PERMITS = "permits"
USERS = "users"
COLLECTIONS = (PERMITS, USERS)


class RecordStoreError(Exception):
    """Raised when the remote store is unreachable or rejects a request"""

    def __init__(self, message: str, collection: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message)
        self.collection = collection
        self.status_code = status_code


class RecordStore(ABC):
    """
    Request/response CRUD access to the `permits` and `users` collections.

    Implementations raise RecordStoreError for any failure so callers only
    have one exception type to translate.
    """

    @abstractmethod
    def select(self, collection: str, order_by: Optional[str] = None,
               descending: bool = False) -> List[Dict[str, Any]]:
        """Return every record of a collection, optionally ordered by one field"""

    @abstractmethod
    def insert(self, collection: str, records: List[Dict[str, Any]]) -> None:
        """Insert records into a collection"""

    @abstractmethod
    def update(self, collection: str, record_id: str, fields: Dict[str, Any]) -> None:
        """Apply a partial update to the record with the given id"""

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None:
        """Delete the record with the given id"""

    @staticmethod
    def _check_collection(collection: str):
        if collection not in COLLECTIONS:
            raise RecordStoreError(f"Unknown collection: {collection}", collection=collection)
