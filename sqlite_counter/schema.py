"""
Versioned schema for the counter database.

The schema version lives in the SQLite header (PRAGMA user_version), so the
database file holds nothing but the counter table itself.

    SchemaSpec.install      statements that build latest_version from nothing
    SchemaSpec.upgrades[v]  statements that migrate version v to v + 1
"""
import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from sqlite_counter.errors import SchemaError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaSpec:
    latest_version: int
    install: Tuple[str, ...]
    upgrades: Dict[int, Tuple[str, ...]] = field(default_factory=dict)


COUNTER_SCHEMA = SchemaSpec(
    latest_version=1,
    install=(
        "CREATE TABLE IF NOT EXISTS counter (name TEXT PRIMARY KEY, value INTEGER)",
    ),
)


def pending_statements(current: int, spec: SchemaSpec) -> List[str]:
    """
    Return the statements needed to bring a store at `current` up to
    spec.latest_version. Empty when the store is already current.
    """
    if current > spec.latest_version:
        raise SchemaError(
            f"database schema version {current} is newer than supported version {spec.latest_version}"
        )
    if current == spec.latest_version:
        return []
    if current == 0:
        return list(spec.install)

    statements: List[str] = []
    for version in range(current, spec.latest_version):
        if version not in spec.upgrades:
            raise SchemaError(f"no upgrade path from schema version {version}")
        statements.extend(spec.upgrades[version])
    return statements


def _set_version_sql(spec: SchemaSpec) -> str:
    # PRAGMA does not take bound parameters
    return f"PRAGMA user_version = {int(spec.latest_version)}"


def _read_version(conn: sqlite3.Connection) -> int:
    return int(conn.execute("PRAGMA user_version").fetchone()[0])


def ensure_schema(conn: sqlite3.Connection, spec: SchemaSpec = COUNTER_SCHEMA) -> int:
    """
    Create or upgrade the schema on an open sqlite3 connection and return the
    resulting version. Calling it on a current store is a no-op.
    """
    try:
        if _read_version(conn) == spec.latest_version:
            return spec.latest_version

        conn.execute("BEGIN IMMEDIATE")
        try:
            # re-read under the write lock: another connection may have won the race
            current = _read_version(conn)
            statements = pending_statements(current, spec)
            if statements:
                log.info("upgrading counter schema from version %d to %d", current, spec.latest_version)
            for sql in statements:
                conn.execute(sql)
            conn.execute(_set_version_sql(spec))
        except BaseException:
            conn.rollback()
            raise
        conn.commit()
    except sqlite3.Error as exc:
        raise SchemaError(f"cannot create or upgrade schema: {exc}") from exc
    return spec.latest_version


async def _read_version_async(db) -> int:
    async with db.execute("PRAGMA user_version") as cursor:
        row = await cursor.fetchone()
    return int(row[0])


async def ensure_schema_async(db, spec: SchemaSpec = COUNTER_SCHEMA) -> int:
    """Same as ensure_schema() for an aiosqlite connection."""
    try:
        if await _read_version_async(db) == spec.latest_version:
            return spec.latest_version

        await db.execute("BEGIN IMMEDIATE")
        try:
            current = await _read_version_async(db)
            statements = pending_statements(current, spec)
            if statements:
                log.info("upgrading counter schema from version %d to %d", current, spec.latest_version)
            for sql in statements:
                await db.execute(sql)
            await db.execute(_set_version_sql(spec))
        except BaseException:
            await db.rollback()
            raise
        await db.commit()
    except sqlite3.Error as exc:
        raise SchemaError(f"cannot create or upgrade schema: {exc}") from exc
    return spec.latest_version
