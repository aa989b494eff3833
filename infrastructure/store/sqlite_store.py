"""
SQLite-backed record store for local and development runs.
Mirrors the remote schema so the registry behaves the same against either backend.
"""

import sqlite3
from contextlib import closing
from typing import Any, Dict, List, Optional

from infrastructure.store.record_store import RecordStore, RecordStoreError, PERMITS, USERS
from utils.logging_config import get_logger


TABLE_COLUMNS = {
    PERMITS: [
        "id", "permitNumber", "operatorName", "companyId", "vehicleReg",
        "route", "issueDate", "expiryDate", "status", "createdAt"
    ],
    USERS: ["id", "username", "password", "role", "name"],
}


class SQLiteRecordStore(RecordStore):
    """
    Record store persisted in a single SQLite file
    """

    def __init__(self, db_path: str = "pta_registry.db"):
        """
        Initialize the store

        Args:
            db_path: Path to the SQLite database file
        """
        self.logger = get_logger(__name__)
        self.db_path = db_path

        self._init_database()

    def _init_database(self):
        """Initialize registry tables"""
        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                cursor = conn.cursor()

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS permits (
                        "id" TEXT PRIMARY KEY,
                        "permitNumber" TEXT NOT NULL,
                        "operatorName" TEXT NOT NULL,
                        "companyId" TEXT DEFAULT '',
                        "vehicleReg" TEXT NOT NULL,
                        "route" TEXT DEFAULT '',
                        "issueDate" TEXT NOT NULL,
                        "expiryDate" TEXT NOT NULL,
                        "status" TEXT NOT NULL,
                        "createdAt" TEXT NOT NULL
                    )
                """)

                # Usernames are deliberately not UNIQUE; lookups take the first match
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS users (
                        "id" TEXT PRIMARY KEY,
                        "username" TEXT NOT NULL,
                        "password" TEXT NOT NULL,
                        "role" TEXT NOT NULL,
                        "name" TEXT NOT NULL
                    )
                """)

                conn.commit()
        except sqlite3.Error as e:
            raise RecordStoreError(f"Failed to initialize registry database: {e}")

        self.logger.info(f"Registry database initialized at {self.db_path}")

    def _columns(self, collection: str) -> List[str]:
        self._check_collection(collection)
        return TABLE_COLUMNS[collection]

    def select(self, collection: str, order_by: Optional[str] = None,
               descending: bool = False) -> List[Dict[str, Any]]:
        columns = self._columns(collection)
        column_list = ", ".join(f'"{c}"' for c in columns)
        query = f"SELECT {column_list} FROM {collection}"

        if order_by:
            if order_by not in columns:
                raise RecordStoreError(f"Cannot order {collection} by {order_by}", collection=collection)
            query += f' ORDER BY "{order_by}" {"DESC" if descending else "ASC"}'
        else:
            query += " ORDER BY rowid ASC"

        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                cursor = conn.cursor()
                cursor.execute(query)
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            self.logger.error(f"Error reading {collection}: {e}")
            raise RecordStoreError(f"Failed to read {collection}", collection=collection)

        return [dict(zip(columns, row)) for row in rows]

    def insert(self, collection: str, records: List[Dict[str, Any]]) -> None:
        columns = self._columns(collection)
        placeholders = ", ".join("?" for _ in columns)
        column_list = ", ".join(f'"{c}"' for c in columns)

        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                cursor = conn.cursor()
                for record in records:
                    cursor.execute(
                        f"INSERT INTO {collection} ({column_list}) VALUES ({placeholders})",
                        tuple(record.get(c) for c in columns)
                    )
                conn.commit()
        except sqlite3.Error as e:
            self.logger.error(f"Error inserting into {collection}: {e}")
            raise RecordStoreError(f"Failed to insert into {collection}", collection=collection)

        self.logger.debug(f"Inserted {len(records)} record(s) into {collection}")

    def update(self, collection: str, record_id: str, fields: Dict[str, Any]) -> None:
        columns = self._columns(collection)
        unknown = [key for key in fields if key not in columns or key == "id"]
        if unknown:
            raise RecordStoreError(f"Cannot update {', '.join(unknown)} on {collection}", collection=collection)
        if not fields:
            return

        assignments = ", ".join(f'"{key}" = ?' for key in fields)

        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f'UPDATE {collection} SET {assignments} WHERE "id" = ?',
                    (*fields.values(), record_id)
                )
                conn.commit()
        except sqlite3.Error as e:
            self.logger.error(f"Error updating {collection} record {record_id}: {e}")
            raise RecordStoreError(f"Failed to update {collection}", collection=collection)

    def delete(self, collection: str, record_id: str) -> None:
        self._check_collection(collection)

        try:
            with closing(sqlite3.connect(self.db_path)) as conn:
                cursor = conn.cursor()
                cursor.execute(f'DELETE FROM {collection} WHERE "id" = ?', (record_id,))
                conn.commit()
        except sqlite3.Error as e:
            self.logger.error(f"Error deleting {collection} record {record_id}: {e}")
            raise RecordStoreError(f"Failed to delete from {collection}", collection=collection)
