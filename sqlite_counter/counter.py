"""
Public entry points.

Functional style: every call takes a config dataclass, opens its own store,
runs one operation and returns a Result instead of raising.

    increment_counter(IncrementConfig(path="app.db", counter="hits"))
    get_counter(GetConfig(counter="hits"))
    dump_counters()

Object style: Counter keeps one store open and raises on errors. It has no
dry-run mode; use increment_counter(IncrementConfig(dry_run=True)) for that.
"""
import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from sqlite_counter import engine
from sqlite_counter.errors import CounterError
from sqlite_counter.storage import DEFAULT_TIMEOUT, StoreHandle

log = logging.getLogger(__name__)

PathLike = Union[str, Path]


# ======================
# configs
# ======================
@dataclass
class StoreConfig:
    path: Optional[PathLike] = None
    home: Optional[PathLike] = None
    timeout: float = DEFAULT_TIMEOUT


@dataclass
class GetConfig(StoreConfig):
    counter: Optional[str] = None


@dataclass
class IncrementConfig(StoreConfig):
    counter: Optional[str] = None
    increment: int = 1
    dry_run: bool = False


@dataclass
class DumpConfig(StoreConfig):
    pass


# ======================
# results
# ======================
class Status(enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


_EXIT_CODES = {
    Status.OK: 0,
    Status.NOT_FOUND: 1,
    Status.ERROR: 2,
}


@dataclass
class Result:
    status: Status
    message: str
    value: Any = None
    error: Optional[CounterError] = None

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self.status]


def _run(config: StoreConfig, op: Callable[[StoreHandle], Result]) -> Result:
    try:
        with StoreHandle.open(config.path, home=config.home, timeout=config.timeout) as handle:
            return op(handle)
    except CounterError as exc:
        log.debug("counter operation failed", exc_info=True)
        return Result(Status.ERROR, str(exc), error=exc)


# ======================
# functional API
# ======================
def increment_counter(config: Optional[IncrementConfig] = None) -> Result:
    """
    Increment a counter and return the new value.

    A new counter starts at 0, so the first plain increment returns 1. With
    dry_run the returned value is what the counter would become; only the
    creation of a missing counter (at 0) is persisted.
    """
    config = config or IncrementConfig()
    engine.check_amount(config.increment)

    def op(handle: StoreHandle) -> Result:
        value = engine.increment(handle, config.counter, config.increment, config.dry_run)
        return Result(Status.OK, "OK (dry-run)" if config.dry_run else "OK", value)

    return _run(config, op)


def get_counter(config: Optional[GetConfig] = None) -> Result:
    """Current value of a counter; Status.NOT_FOUND when it does not exist."""
    config = config or GetConfig()

    def op(handle: StoreHandle) -> Result:
        name = engine.counter_name(config.counter)
        value = engine.get(handle, name)
        if value is None:
            return Result(Status.NOT_FOUND, f"counter {name!r} not found")
        return Result(Status.OK, "OK", value)

    return _run(config, op)


def dump_counters(config: Optional[DumpConfig] = None) -> Result:
    """All counters in the database as a {name: value} dict."""
    config = config or DumpConfig()
    return _run(config, lambda handle: Result(Status.OK, "OK", engine.dump(handle)))


# ======================
# object API
# ======================
class Counter:
    def __init__(
        self,
        path: Optional[PathLike] = None,
        *,
        home: Optional[PathLike] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._handle = StoreHandle.open(path, home=home, timeout=timeout)
        self.path = self._handle.path

    def increment(self, counter: Optional[str] = None, increment: int = 1) -> int:
        return engine.increment(self._handle, counter, increment)

    def get(self, counter: Optional[str] = None) -> Optional[int]:
        return engine.get(self._handle, counter)

    def dump(self) -> Dict[str, int]:
        return engine.dump(self._handle)

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "Counter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
