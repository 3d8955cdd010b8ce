# counter_api/db/store.py
from loguru import logger
from sqlalchemy import select, text, update
from sqlalchemy.ext.asyncio import AsyncEngine

from counter_api.core.config import Settings
from counter_api.db.database import create_engine
from counter_api.models.counter import (
    COUNTER_ID,
    CounterFailure,
    CounterResult,
    CounterValue,
    counter_table,
    metadata,
)
from counter_api.models.enum import CounterError

_count = counter_table.c["count"]

_SELECT_COUNT = select(_count).where(counter_table.c.id == COUNTER_ID)
_INCREMENT_COUNT = (
    update(counter_table)
    .where(counter_table.c.id == COUNTER_ID)
    .values(count=_count + 1)
    .returning(_count)
)
# ON CONFLICT DO NOTHING is understood by both PostgreSQL and SQLite
_INSERT_SINGLETON = text(
    "INSERT INTO counter (id, count) VALUES (:id, 0) ON CONFLICT DO NOTHING"
)


class CounterStore:
    """Access to the singleton counter row.

    Holds the async engine shared by every request. `get_count` and
    `increment` never raise: storage faults come back as a
    `CounterFailure(DATABASE_ERROR)` and a missing row as
    `CounterFailure(COUNTER_NOT_FOUND)`.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "CounterStore":
        return cls(create_engine(settings))

    async def initialize(self) -> None:
        """Ensure the table and the singleton row exist.

        Safe to run repeatedly; an existing count is left untouched. Errors
        propagate to the caller.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all, checkfirst=True)
            await conn.execute(_INSERT_SINGLETON, {"id": COUNTER_ID})
        logger.info("Counter table ready.")

    async def get_count(self) -> CounterResult:
        return await self._run_counter_statement("read", _SELECT_COUNT)

    async def increment(self) -> CounterResult:
        # Single UPDATE ... RETURNING: the database applies and reports the new value atomically
        return await self._run_counter_statement("increment", _INCREMENT_COUNT)

    async def _run_counter_statement(self, action: str, statement) -> CounterResult:
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(statement)
                row = result.first()
        except Exception:
            logger.exception(f"Database error during counter {action}")
            return CounterFailure(CounterError.DATABASE_ERROR)

        if row is None:
            logger.warning(f"Counter {action}: row id={COUNTER_ID} not found")
            return CounterFailure(CounterError.COUNTER_NOT_FOUND)

        count = row[0]
        logger.debug(f"Counter {action} -> {count}")
        return CounterValue(count)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    async def close(self) -> None:
        await self.engine.dispose()
