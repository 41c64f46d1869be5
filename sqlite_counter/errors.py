"""
Error types raised by the counter store.

NotFound is deliberately absent: a missing counter is a normal result
(None, or Status.NOT_FOUND in the functional API), not an exception.
"""


class CounterError(Exception):
    """Base class for every error raised by sqlite_counter."""


class ConfigError(CounterError):
    """A required default (e.g. the home directory) could not be resolved."""


class StoreError(CounterError):
    """The database file could not be opened, read or written."""


class SchemaError(StoreError):
    """Creating or upgrading the database schema failed."""


class InternalError(CounterError):
    """An invariant was violated; indicates a bug rather than bad input."""
