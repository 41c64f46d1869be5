#!/usr/bin/env python3
"""
Init SQLite DB for sqlite-counter.
Creates the counter table, or upgrades an older schema, without touching any counter.

    python scripts/init_db.py [path]
"""
import sys
from typing import Optional

from config.config import load_config
from sqlite_counter.errors import CounterError
from sqlite_counter.schema import COUNTER_SCHEMA
from sqlite_counter.storage import DEFAULT_TIMEOUT, StoreHandle


def init_db(path: Optional[str] = None, home: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    print(f"[init_db] Ensuring DB file at: {path or '<home>/counter.db'}")
    with StoreHandle.open(path, home=home, timeout=timeout) as handle:
        tables = [r[0] for r in handle.fetchall("SELECT name FROM sqlite_master WHERE type='table'")]
        print(f"[init_db] Schema version {COUNTER_SCHEMA.latest_version}. Tables: {tables}")
        return handle.path


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    try:
        cfg = load_config()
        path = argv[0] if argv else cfg.COUNTER_DB_PATH
        init_db(path, home=cfg.COUNTER_HOME, timeout=cfg.BUSY_TIMEOUT)
    except CounterError as exc:
        print(f"[init_db] failed: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
