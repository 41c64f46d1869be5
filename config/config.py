from dataclasses import dataclass, field
import os
from typing import Optional

from dotenv import load_dotenv

from sqlite_counter.errors import ConfigError

# Load .env from the working directory if present
load_dotenv()


def _env(name: str, default: Optional[str] = None):
    return field(default_factory=lambda: os.getenv(name, default))


def _parse_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {raw!r}") from None


def _env_float(name: str, default: float):
    return field(default_factory=lambda: _parse_float(name, default))


@dataclass
class Config:
    # database file; None means <COUNTER_HOME or ~>/counter.db
    COUNTER_DB_PATH: Optional[str] = _env("COUNTER_DB_PATH")
    COUNTER_HOME: Optional[str] = _env("COUNTER_HOME")
    COUNTER_NAME: str = _env("COUNTER_NAME", "default")

    # seconds to wait for another writer's lock
    BUSY_TIMEOUT: float = _env_float("COUNTER_BUSY_TIMEOUT", 30.0)

    LOG_LEVEL: str = _env("LOG_LEVEL", "WARNING")
    LOG_FILE: Optional[str] = _env("COUNTER_LOG_FILE")


def load_config(env_file: Optional[str] = None) -> Config:
    """
    Build a fresh Config, loading `env_file` into the environment first.
    Built on demand rather than at import so a bad value surfaces as a
    ConfigError in the caller.
    """
    if env_file:
        load_dotenv(env_file, override=True)
    return Config()
