"""
Counter operations on top of a StoreHandle.

increment() is a create-if-absent-then-add read-modify-write:

    BEGIN IMMEDIATE
    INSERT OR IGNORE (name, 0)
    SELECT value
    UPDATE value = value + amount     (skipped in dry-run)
    COMMIT

The insert is committed even in dry-run mode, so a dry-run against a new
name leaves that counter behind at 0.
"""
import logging
from typing import Dict, Optional

from sqlite_counter.errors import InternalError, StoreError
from sqlite_counter.storage import StoreHandle

log = logging.getLogger(__name__)

DEFAULT_COUNTER = "default"

INSERT_IF_ABSENT_SQL = "INSERT OR IGNORE INTO counter (name, value) VALUES (?, ?)"
SELECT_VALUE_SQL = "SELECT value FROM counter WHERE name = ?"
UPDATE_VALUE_SQL = "UPDATE counter SET value = ? WHERE name = ?"
SELECT_ALL_SQL = "SELECT name, value FROM counter"

# SQLite INTEGER is a signed 64-bit value
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def counter_name(name: Optional[str]) -> str:
    """Apply the default counter name to None or an empty string."""
    return name or DEFAULT_COUNTER


def check_amount(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"increment must be an int, got {type(amount).__name__}")
    return amount


def next_value(row: Optional[tuple], name: str, amount: int) -> int:
    """
    Value a counter takes after adding `amount` to the freshly read `row`.
    Raises the same errors whether or not the result is going to be written.
    """
    if row is None or row[0] is None:
        raise InternalError(f"cannot create counter {name!r}")
    value = row[0] + amount
    if not INT64_MIN <= value <= INT64_MAX:
        raise StoreError(f"counter {name!r} would overflow: {row[0]} + {amount} does not fit in a 64-bit integer")
    return value


def get(handle: StoreHandle, name: Optional[str] = None) -> Optional[int]:
    """Current value of a counter, or None if it has never been created."""
    row = handle.fetchone(SELECT_VALUE_SQL, (counter_name(name),))
    if row is None:
        return None
    return row[0]


def increment(
    handle: StoreHandle,
    name: Optional[str] = None,
    amount: int = 1,
    dry_run: bool = False,
) -> int:
    """
    Add `amount` to a counter, creating it at 0 first if needed, and return
    the new value. With dry_run the new value is computed but not written.
    """
    name = counter_name(name)
    amount = check_amount(amount)

    with handle.transaction():
        handle.execute(INSERT_IF_ABSENT_SQL, (name, 0))
        row = handle.fetchone(SELECT_VALUE_SQL, (name,))
        value = next_value(row, name, amount)
        if not dry_run:
            handle.execute(UPDATE_VALUE_SQL, (value, name))

    if dry_run:
        log.debug("dry-run increment of %r by %d would give %d", name, amount, value)
    else:
        log.debug("incremented %r by %d to %d", name, amount, value)
    return value


def dump(handle: StoreHandle) -> Dict[str, int]:
    return {name: value for name, value in handle.fetchall(SELECT_ALL_SQL)}
