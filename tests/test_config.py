import pytest

from config.config import Config, load_config
from sqlite_counter.errors import ConfigError


def test_defaults(monkeypatch):
    for name in ("COUNTER_DB_PATH", "COUNTER_HOME", "COUNTER_NAME", "COUNTER_BUSY_TIMEOUT", "LOG_LEVEL", "COUNTER_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    cfg = Config()
    assert cfg.COUNTER_DB_PATH is None
    assert cfg.COUNTER_HOME is None
    assert cfg.COUNTER_NAME == "default"
    assert cfg.BUSY_TIMEOUT == 30.0
    assert cfg.LOG_LEVEL == "WARNING"
    assert cfg.LOG_FILE is None


def test_environment_is_read_per_instance(monkeypatch):
    monkeypatch.setenv("COUNTER_NAME", "hits")
    monkeypatch.setenv("COUNTER_BUSY_TIMEOUT", "2.5")
    cfg = Config()
    assert cfg.COUNTER_NAME == "hits"
    assert cfg.BUSY_TIMEOUT == 2.5


def test_load_config_from_env_file(tmp_path, monkeypatch):
    monkeypatch.setenv("COUNTER_DB_PATH", "")
    monkeypatch.setenv("LOG_LEVEL", "")
    env_file = tmp_path / ".env"
    env_file.write_text("COUNTER_DB_PATH=/data/app-counter.db\nLOG_LEVEL=DEBUG\n", encoding="utf-8")
    cfg = load_config(str(env_file))
    assert cfg.COUNTER_DB_PATH == "/data/app-counter.db"
    assert cfg.LOG_LEVEL == "DEBUG"


def test_bad_timeout_is_config_error(monkeypatch):
    monkeypatch.setenv("COUNTER_BUSY_TIMEOUT", "soon")
    with pytest.raises(ConfigError, match="COUNTER_BUSY_TIMEOUT"):
        load_config()


def test_blank_timeout_uses_default(monkeypatch):
    monkeypatch.setenv("COUNTER_BUSY_TIMEOUT", "  ")
    assert load_config().BUSY_TIMEOUT == 30.0
