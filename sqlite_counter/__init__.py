"""
Persistent named counters stored in a single SQLite file.
"""
from sqlite_counter.async_counter import AsyncCounter
from sqlite_counter.counter import (
    Counter,
    DumpConfig,
    GetConfig,
    IncrementConfig,
    Result,
    Status,
    StoreConfig,
    dump_counters,
    get_counter,
    increment_counter,
)
from sqlite_counter.errors import (
    ConfigError,
    CounterError,
    InternalError,
    SchemaError,
    StoreError,
)
from sqlite_counter.storage import MEMORY, StoreHandle

__all__ = [
    "AsyncCounter",
    "Counter",
    "DumpConfig",
    "GetConfig",
    "IncrementConfig",
    "Result",
    "Status",
    "StoreConfig",
    "dump_counters",
    "get_counter",
    "increment_counter",
    "ConfigError",
    "CounterError",
    "InternalError",
    "SchemaError",
    "StoreError",
    "MEMORY",
    "StoreHandle",
]
