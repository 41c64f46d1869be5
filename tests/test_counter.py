import pytest

from sqlite_counter import storage
from sqlite_counter.counter import (
    Counter,
    DumpConfig,
    GetConfig,
    IncrementConfig,
    Status,
    dump_counters,
    get_counter,
    increment_counter,
)
from sqlite_counter.errors import ConfigError, StoreError


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "counter.db")


def _no_home():
    raise RuntimeError("Could not determine home directory.")


def test_functional_scenario(db_path):
    values = [
        increment_counter(IncrementConfig(path=db_path)).value,
        increment_counter(IncrementConfig(path=db_path)).value,
        increment_counter(IncrementConfig(path=db_path, dry_run=True)).value,
        increment_counter(IncrementConfig(path=db_path, dry_run=True)).value,
        increment_counter(IncrementConfig(path=db_path, increment=10)).value,
    ]
    assert values == [1, 2, 3, 3, 12]

    res = get_counter(GetConfig(path=db_path))
    assert res.status is Status.OK and res.value == 12

    res = get_counter(GetConfig(path=db_path, counter="foo"))
    assert res.status is Status.NOT_FOUND
    assert res.value is None
    assert res.exit_code == 1


def test_increment_result_messages(db_path):
    res = increment_counter(IncrementConfig(path=db_path, counter="c1"))
    assert res.ok and res.message == "OK" and res.exit_code == 0
    res = increment_counter(IncrementConfig(path=db_path, counter="c1", dry_run=True))
    assert res.ok and res.message == "OK (dry-run)" and res.value == 2


def test_home_default_path(tmp_path):
    res = increment_counter(IncrementConfig(home=tmp_path, counter="c1", increment=10))
    assert res.value == 10
    assert (tmp_path / "counter.db").exists()
    assert get_counter(GetConfig(home=tmp_path, counter="c1")).value == 10


def test_dump_counters(db_path):
    increment_counter(IncrementConfig(path=db_path, counter="a"))
    increment_counter(IncrementConfig(path=db_path, counter="b", increment=-4))
    res = dump_counters(DumpConfig(path=db_path))
    assert res.ok
    assert res.value == {"a": 1, "b": -4}


def test_memory_store_is_discarded_between_calls():
    assert increment_counter(IncrementConfig(path=":memory:")).value == 1
    assert increment_counter(IncrementConfig(path=":memory:")).value == 1
    assert get_counter(GetConfig(path=":memory:")).status is Status.NOT_FOUND


def test_store_error_becomes_result(tmp_path):
    bad = str(tmp_path / "nope" / "counter.db")
    for res in (
        increment_counter(IncrementConfig(path=bad)),
        get_counter(GetConfig(path=bad)),
        dump_counters(DumpConfig(path=bad)),
    ):
        assert res.status is Status.ERROR
        assert isinstance(res.error, StoreError)
        assert res.exit_code == 2
        assert res.message


def test_config_error_becomes_result(monkeypatch):
    monkeypatch.setattr(storage.Path, "home", staticmethod(_no_home))
    res = increment_counter()
    assert res.status is Status.ERROR
    assert isinstance(res.error, ConfigError)


def test_bad_amount_raises(db_path):
    with pytest.raises(TypeError):
        increment_counter(IncrementConfig(path=db_path, increment="3"))


def test_object_api(db_path):
    with Counter(db_path) as counter:
        assert counter.path == db_path
        assert counter.get() is None
        assert counter.increment() == 1
        assert counter.increment(increment=5) == 6
        assert counter.increment("other", -2) == -2
        assert counter.get() == 6
        assert counter.get("missing") is None
        assert counter.dump() == {"default": 6, "other": -2}

    # the functional API sees the same store
    assert get_counter(GetConfig(path=db_path)).value == 6


def test_object_api_has_no_dry_run(db_path):
    with Counter(db_path) as counter:
        with pytest.raises(TypeError):
            counter.increment(dry_run=True)


def test_object_constructor_fails_fast(tmp_path, monkeypatch):
    with pytest.raises(StoreError):
        Counter(tmp_path / "nope" / "counter.db")
    monkeypatch.setattr(storage.Path, "home", staticmethod(_no_home))
    with pytest.raises(ConfigError):
        Counter()
