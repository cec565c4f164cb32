"""PostgreSQL persistence gateway (psycopg 3, async pool)"""
import logging
from typing import Any, List, Optional
from uuid import UUID

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from wellness.db.connection import Database
from wellness.db.gateway import (
    BADGES_TABLE,
    PROGRESS_TABLE,
    REWARDS_TABLE,
    Filters,
    PersistenceGateway,
    Row,
)
from wellness.exceptions import QueryError, wrap_external_exception

logger = logging.getLogger(__name__)

KNOWN_TABLES = frozenset({PROGRESS_TABLE, BADGES_TABLE, REWARDS_TABLE})

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS user_progress (
    user_id TEXT PRIMARY KEY,
    level INTEGER NOT NULL DEFAULT 1 CHECK (level >= 1),
    experience_points INTEGER NOT NULL DEFAULT 0 CHECK (experience_points >= 0),
    total_tasks_completed INTEGER NOT NULL DEFAULT 0 CHECK (total_tasks_completed >= 0),
    streak_days INTEGER NOT NULL DEFAULT 0 CHECK (streak_days >= 0),
    last_activity_date DATE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS user_badges (
    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
    user_id TEXT NOT NULL,
    badge_id TEXT NOT NULL,
    earned_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (user_id, badge_id)
);

CREATE TABLE IF NOT EXISTS user_rewards (
    id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
    user_id TEXT NOT NULL,
    reward_type TEXT NOT NULL,
    reward_data JSONB NOT NULL,
    claimed BOOLEAN NOT NULL DEFAULT FALSE,
    earned_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_user_rewards_unclaimed
    ON user_rewards (user_id) WHERE NOT claimed;
"""


def _adapt(value: Any) -> Any:
    """Wrap structured values for JSONB columns"""
    if isinstance(value, (dict, list)):
        return Jsonb(value)
    return value


def _normalize_row(row: Optional[dict]) -> Optional[Row]:
    if row is None:
        return None
    return {key: str(value) if isinstance(value, UUID) else value for key, value in row.items()}


def _where(filters: Filters) -> sql.Composable:
    if not filters:
        return sql.SQL("TRUE")
    return sql.SQL(" AND ").join(
        sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder())
        for column in filters
    )


class PostgresGateway(PersistenceGateway):
    """
    Gateway backed by PostgreSQL

    Each call runs on its own pooled connection and commits immediately,
    so multi-call sequences are not transactional.
    """

    def __init__(self, database: Database):
        self.db = database

    def _check_table(self, table: str) -> None:
        if table not in KNOWN_TABLES:
            raise QueryError(f"Unknown table '{table}'", table=table)

    async def _fetch(self, operation: str, table: str, query: sql.Composable, params: list) -> List[Row]:
        try:
            async with self.db.connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    rows = await cur.fetchall() if cur.description else []
                    await conn.commit()
                    return [_normalize_row(row) for row in rows]
        except psycopg.Error as e:
            raise wrap_external_exception(e, operation=operation, table=table) from e

    async def get(self, table: str, filters: Filters) -> Optional[Row]:
        self._check_table(table)
        query = sql.SQL("SELECT * FROM {} WHERE {} LIMIT 1").format(
            sql.Identifier(table), _where(filters)
        )
        rows = await self._fetch("get", table, query, list(filters.values()))
        return rows[0] if rows else None

    async def select(self, table: str, filters: Filters) -> List[Row]:
        self._check_table(table)
        order = "user_id" if table == PROGRESS_TABLE else "earned_at"
        query = sql.SQL("SELECT * FROM {} WHERE {} ORDER BY {}").format(
            sql.Identifier(table), _where(filters), sql.Identifier(order)
        )
        return await self._fetch("select", table, query, list(filters.values()))

    async def insert(self, table: str, row: Row) -> Row:
        self._check_table(table)
        columns = list(row)
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            sql.Identifier(table),
            sql.SQL(", ").join(map(sql.Identifier, columns)),
            sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )
        rows = await self._fetch("insert", table, query, [_adapt(row[c]) for c in columns])
        logger.debug(f"Inserted row into {table}")
        return rows[0]

    async def update(self, table: str, filters: Filters, partial: Row) -> None:
        self._check_table(table)
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(column), sql.Placeholder())
            for column in partial
        )
        query = sql.SQL("UPDATE {} SET {} WHERE {}").format(
            sql.Identifier(table), assignments, _where(filters)
        )
        params = [_adapt(v) for v in partial.values()] + list(filters.values())
        await self._fetch("update", table, query, params)

    async def close(self) -> None:
        await self.db.close_pool()


async def init_schema(database: Database) -> None:
    """Create the progress tables if they do not exist"""
    logger.info("Ensuring progress schema exists")
    try:
        async with database.connection() as conn:
            await conn.execute(SCHEMA_SQL)
            await conn.commit()
    except psycopg.Error as e:
        raise wrap_external_exception(e, operation="init_schema") from e
