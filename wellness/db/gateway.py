"""
Persistence gateway interface and in-memory implementation

The progress engine only talks to storage through this interface:
get/select/insert/update against named tables with equality filters.
Every failure surfaces as a StorageError. There are no cross-table
transactions.
"""

import asyncio
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from wellness.exceptions import QueryError, StorageError

logger = logging.getLogger(__name__)

PROGRESS_TABLE = "user_progress"
BADGES_TABLE = "user_badges"
REWARDS_TABLE = "user_rewards"

Row = Dict[str, Any]
Filters = Dict[str, Any]


class PersistenceGateway(ABC):
    """Record store used by the progress engine"""

    @abstractmethod
    async def get(self, table: str, filters: Filters) -> Optional[Row]:
        """First row matching all filters, or None"""

    @abstractmethod
    async def select(self, table: str, filters: Filters) -> List[Row]:
        """All rows matching all filters, in insertion order"""

    @abstractmethod
    async def insert(self, table: str, row: Row) -> Row:
        """Insert a row and return it as stored (with generated id)"""

    @abstractmethod
    async def update(self, table: str, filters: Filters, partial: Row) -> None:
        """Apply a partial update to every row matching the filters"""

    async def close(self) -> None:
        """Release backend resources"""


class InMemoryGateway(PersistenceGateway):
    """
    Dict-backed gateway for development and tests

    Rows are copied in and out so callers never share state with the store.
    Unique keys mirror the SQL schema constraints. Each call yields to the
    event loop once, so interleaved coroutines behave like they would
    against a real backend.
    """

    UNIQUE_KEYS: Dict[str, Tuple[str, ...]] = {
        PROGRESS_TABLE: ("user_id",),
        BADGES_TABLE: ("user_id", "badge_id"),
        REWARDS_TABLE: ("id",),
    }

    def __init__(self):
        self._tables: Dict[str, List[Row]] = {}
        self._failures: Dict[Tuple[str, str], StorageError] = {}
        self.calls: List[Tuple[str, str]] = []

    def rows(self, table: str) -> List[Row]:
        """Snapshot of a table's rows"""
        return copy.deepcopy(self._tables.get(table, []))

    def clear(self) -> None:
        self._tables.clear()
        self._failures.clear()
        self.calls.clear()

    def fail_next(self, operation: str, table: str, error: Optional[StorageError] = None) -> None:
        """Make the next ``operation`` against ``table`` raise a StorageError"""
        self._failures[(operation, table)] = error or StorageError(
            f"Simulated {operation} failure on {table}",
            table=table,
            operation=operation
        )

    async def _enter(self, operation: str, table: str) -> None:
        await asyncio.sleep(0)
        self.calls.append((operation, table))
        error = self._failures.pop((operation, table), None)
        if error is not None:
            raise error

    @staticmethod
    def _matches(row: Row, filters: Filters) -> bool:
        return all(row.get(key) == value for key, value in filters.items())

    async def get(self, table: str, filters: Filters) -> Optional[Row]:
        await self._enter("get", table)
        for row in self._tables.get(table, []):
            if self._matches(row, filters):
                return copy.deepcopy(row)
        return None

    async def select(self, table: str, filters: Filters) -> List[Row]:
        await self._enter("select", table)
        return [
            copy.deepcopy(row)
            for row in self._tables.get(table, [])
            if self._matches(row, filters)
        ]

    async def insert(self, table: str, row: Row) -> Row:
        await self._enter("insert", table)
        stored = copy.deepcopy(row)
        if table != PROGRESS_TABLE:
            stored.setdefault("id", str(uuid4()))

        rows = self._tables.setdefault(table, [])
        unique = self.UNIQUE_KEYS.get(table)
        if unique:
            key = {column: stored.get(column) for column in unique}
            if any(self._matches(existing, key) for existing in rows):
                raise QueryError(
                    f"Duplicate key in {table}: {key}",
                    table=table,
                    operation="insert"
                )

        rows.append(stored)
        logger.debug(f"Inserted row into {table}")
        return copy.deepcopy(stored)

    async def update(self, table: str, filters: Filters, partial: Row) -> None:
        await self._enter("update", table)
        updated = 0
        for row in self._tables.get(table, []):
            if self._matches(row, filters):
                row.update(copy.deepcopy(partial))
                updated += 1
        logger.debug(f"Updated {updated} row(s) in {table}")
