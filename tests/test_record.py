import threading

import pytest

from logweave.record import (
    Level,
    LevelFilter,
    Record,
    mdc_clear,
    mdc_get,
    mdc_insert,
    mdc_items,
    mdc_remove,
    parse_level_filter,
)


@pytest.fixture(autouse=True)
def clean_mdc():
    mdc_clear()
    yield
    mdc_clear()


def test_level_names():
    assert str(Record(level=Level.INFO).level) == "INFO"
    assert str(Record(level=Level.DEBUG).level) == "DEBUG"


def test_levels_ordered_by_verbosity():
    parsed = [
        parse_level_filter(name)
        for name in ("off", "error", "warn", "info", "debug", "trace")
    ]
    assert parsed == sorted(LevelFilter)
    assert Record(level=Level.ERROR).level < Record(level=Level.TRACE).level


def test_level_filter_compares_with_levels():
    off = parse_level_filter("off")
    trace = parse_level_filter("trace")
    warn = parse_level_filter("warn")
    for level in Level:
        assert off < level
        assert trace >= level
    assert not warn >= Level.INFO
    assert warn >= Level.ERROR


@pytest.mark.parametrize("lf", list(LevelFilter))
def test_parse_level_filter_round_trip(lf):
    assert parse_level_filter(str(lf)) == lf
    assert parse_level_filter(str(lf).lower()) == lf


def test_parse_level_filter_rejects_unknown():
    with pytest.raises(ValueError):
        parse_level_filter("loud")


def test_record_defaults():
    record = Record()
    assert record.level == Level.INFO
    assert record.target == ""
    assert record.message == ""
    assert record.module_path is None
    assert record.file is None
    assert record.line is None


def test_mdc_insert_get_remove():
    assert mdc_insert("user_id", "mdc value") is None
    assert mdc_get("user_id") == "mdc value"
    assert mdc_insert("user_id", "other") == "mdc value"
    assert mdc_remove("user_id") == "other"
    assert mdc_get("user_id", "missing value") == "missing value"


def test_mdc_items_and_clear():
    mdc_insert("foo", "bar")
    mdc_insert("baz", "qux")
    assert dict(mdc_items()) == {"foo": "bar", "baz": "qux"}
    mdc_clear()
    assert list(mdc_items()) == []


def test_mdc_is_per_thread():
    mdc_insert("foo", "bar")
    seen = []
    thread = threading.Thread(target=lambda: seen.append(mdc_get("foo", "none")))
    thread.start()
    thread.join()
    assert seen == ["none"]
    assert mdc_get("foo") == "bar"