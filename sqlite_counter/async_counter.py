"""
asyncio flavour of Counter, backed by aiosqlite.

    async with AsyncCounter("app.db") as counter:
        await counter.increment("hits")
        await counter.get("hits")

Uses the same schema and the same BEGIN IMMEDIATE increment protocol as the
synchronous store. Like Counter, it has no dry-run mode.
"""
import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import Dict, Optional, Union

import aiosqlite

from sqlite_counter import engine
from sqlite_counter.errors import StoreError
from sqlite_counter.schema import COUNTER_SCHEMA, ensure_schema_async
from sqlite_counter.storage import DEFAULT_TIMEOUT, resolve_db_path

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


class AsyncCounter:
    def __init__(
        self,
        path: Optional[PathLike] = None,
        *,
        home: Optional[PathLike] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.path = resolve_db_path(path, home)
        self.timeout = timeout

        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def open(self) -> "AsyncCounter":
        try:
            self._db = await aiosqlite.connect(self.path, timeout=self.timeout, isolation_level=None)
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open counter database {self.path!r}: {exc}") from exc

        try:
            await ensure_schema_async(self._db, COUNTER_SCHEMA)
        except BaseException:
            await self.close()
            raise
        log.debug("opened async counter store at %s", self.path)
        return self

    async def close(self):
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def __aenter__(self) -> "AsyncCounter":
        return await self.open()

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            raise StoreError("counter store is not open")
        return self._db

    async def _fetchone(self, sql: str, params=()):
        async with self._conn().execute(sql, params) as cursor:
            return await cursor.fetchone()

    # ======================
    # public API
    # ======================
    async def increment(self, counter: Optional[str] = None, increment: int = 1) -> int:
        name = engine.counter_name(counter)
        amount = engine.check_amount(increment)
        db = self._conn()

        async with self._lock:
            try:
                await db.execute("BEGIN IMMEDIATE")
                try:
                    await db.execute(engine.INSERT_IF_ABSENT_SQL, (name, 0))
                    row = await self._fetchone(engine.SELECT_VALUE_SQL, (name,))
                    value = engine.next_value(row, name, amount)
                    await db.execute(engine.UPDATE_VALUE_SQL, (value, name))
                except BaseException:
                    await db.rollback()
                    raise
                await db.commit()
            except (sqlite3.Error, OverflowError) as exc:
                raise StoreError(f"{exc} (database {self.path!r})") from exc

        log.debug("incremented %r by %d to %d", name, amount, value)
        return value

    async def get(self, counter: Optional[str] = None) -> Optional[int]:
        async with self._lock:
            try:
                row = await self._fetchone(engine.SELECT_VALUE_SQL, (engine.counter_name(counter),))
            except sqlite3.Error as exc:
                raise StoreError(f"{exc} (database {self.path!r})") from exc
        return None if row is None else row[0]

    async def dump(self) -> Dict[str, int]:
        async with self._lock:
            try:
                async with self._conn().execute(engine.SELECT_ALL_SQL) as cursor:
                    rows = await cursor.fetchall()
            except sqlite3.Error as exc:
                raise StoreError(f"{exc} (database {self.path!r})") from exc
        return {name: value for name, value in rows}
