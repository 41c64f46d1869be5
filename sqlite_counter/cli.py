# sqlite_counter/cli.py
"""
Console scripts: increment-counter, get-counter, dump-counters.

Exit codes: 0 success, 1 counter not found (get-counter only), 2 error.
Defaults not given on the command line come from config.config (environment
or .env file).
"""
from argparse import ArgumentParser, ArgumentTypeError, Namespace
import json
import os
import sys
from typing import List, Optional

from config.config import Config, load_config
from sqlite_counter.counter import (
    DumpConfig,
    GetConfig,
    IncrementConfig,
    Result,
    Status,
    dump_counters,
    get_counter,
    increment_counter,
)
from sqlite_counter.errors import ConfigError
from sqlite_counter.logging_setup import setup_logging

EXIT_ERROR = 2


def existing_file(p: str) -> str:
    if not os.path.exists(p):
        raise ArgumentTypeError(f"env file not found: {p}")
    return p


def _base_parser(prog: str, description: str, with_counter: bool = True) -> ArgumentParser:
    p = ArgumentParser(prog=prog, description=description)
    p.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Database path (default: $COUNTER_DB_PATH or ~/counter.db). Use :memory: for a throwaway store",
    )
    if with_counter:
        p.add_argument(
            "counter",
            nargs="?",
            default=None,
            help='Counter name (default: $COUNTER_NAME or "default")',
        )
    p.add_argument(
        "--home",
        default=None,
        help="Directory holding counter.db when no path is given (default: your home directory)",
    )
    p.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for a lock held by another writer",
    )
    p.add_argument(
        "--env-file",
        type=existing_file,
        default=None,
        help="Load environment variables from this .env file before reading defaults",
    )
    p.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return p


def build_increment_parser() -> ArgumentParser:
    p = _base_parser(
        "increment-counter",
        "Increment a counter in a SQLite database and print the new value",
    )
    p.add_argument(
        "--increment",
        "-i",
        type=int,
        default=1,
        help="Amount to add, may be negative (default: 1)",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the value the counter would have, without incrementing it",
    )
    return p


def build_get_parser() -> ArgumentParser:
    return _base_parser(
        "get-counter",
        "Print the current value of a counter; exit 1 if it does not exist",
    )


def build_dump_parser() -> ArgumentParser:
    return _base_parser(
        "dump-counters",
        "Print all counters in a SQLite database as JSON",
        with_counter=False,
    )


def _prepare(ns: Namespace) -> Config:
    cfg = load_config(ns.env_file)
    setup_logging("sqlite_counter", ns.log_level or cfg.LOG_LEVEL, cfg.LOG_FILE)

    ns.path = ns.path or cfg.COUNTER_DB_PATH
    ns.home = ns.home or cfg.COUNTER_HOME
    if ns.timeout is None:
        ns.timeout = cfg.BUSY_TIMEOUT
    if hasattr(ns, "counter"):
        ns.counter = ns.counter or cfg.COUNTER_NAME
    return cfg


def _fail(result: Result) -> int:
    print(f"error: {result.message}", file=sys.stderr)
    return result.exit_code


def _fail_setup(exc: Exception) -> int:
    # bad configuration or an unwritable log file; never the "not found" status
    print(f"error: {exc}", file=sys.stderr)
    return EXIT_ERROR


def increment_main(argv: Optional[List[str]] = None) -> int:
    ns = build_increment_parser().parse_args(args=argv)
    try:
        _prepare(ns)
    except (ConfigError, OSError) as exc:
        return _fail_setup(exc)
    result = increment_counter(
        IncrementConfig(
            path=ns.path,
            home=ns.home,
            timeout=ns.timeout,
            counter=ns.counter,
            increment=ns.increment,
            dry_run=ns.dry_run,
        )
    )
    if not result.ok:
        return _fail(result)
    print(result.value)
    return 0


def get_main(argv: Optional[List[str]] = None) -> int:
    ns = build_get_parser().parse_args(args=argv)
    try:
        _prepare(ns)
    except (ConfigError, OSError) as exc:
        return _fail_setup(exc)
    result = get_counter(GetConfig(path=ns.path, home=ns.home, timeout=ns.timeout, counter=ns.counter))
    if result.status is Status.NOT_FOUND:
        return result.exit_code
    if not result.ok:
        return _fail(result)
    print(result.value)
    return 0


def dump_main(argv: Optional[List[str]] = None) -> int:
    ns = build_dump_parser().parse_args(args=argv)
    try:
        _prepare(ns)
    except (ConfigError, OSError) as exc:
        return _fail_setup(exc)
    result = dump_counters(DumpConfig(path=ns.path, home=ns.home, timeout=ns.timeout))
    if not result.ok:
        return _fail(result)
    print(json.dumps(result.value, ensure_ascii=False, indent=2, sort_keys=True))
    return 0
