import io
import json
import threading
from datetime import datetime, timedelta, timezone

import pytest

from logweave.json_encoder import JsonEncoder
from logweave.record import Level, Record, mdc_clear, mdc_insert
from logweave.style import NEWLINE
from logweave.writers import SimpleWriter


@pytest.fixture(autouse=True)
def clean_mdc():
    mdc_clear()
    yield
    mdc_clear()


def encode_at(time, record):
    buf = io.BytesIO()
    JsonEncoder().encode_at(SimpleWriter(buf), time, record)
    return buf.getvalue().decode("utf-8")


def full_record():
    return Record(
        level=Level.DEBUG,
        target="target",
        message="message",
        module_path="module_path",
        file="file",
        line=100,
    )


def test_default():
    time = datetime(2016, 3, 20, 14, 22, 20, 644420, tzinfo=timezone(timedelta(hours=-8)))
    mdc_insert("foo", "bar")

    output = encode_at(time, full_record())
    value = json.loads(output)

    assert list(value) == [
        "time", "level", "message", "module_path", "file",
        "line", "target", "thread", "thread_id", "mdc",
    ]
    assert datetime.fromisoformat(value["time"]) == time
    expected_tail = (
        '"level":"DEBUG","message":"message","module_path":"module_path",'
        '"file":"file","line":100,"target":"target",'
        f'"thread":"{threading.current_thread().name}",'
        f'"thread_id":{threading.get_native_id()},"mdc":{{"foo":"bar"}}}}'
    )
    assert output.strip().endswith(expected_tail)
    assert output.strip().startswith('{"time":"')


def test_ends_with_newline_and_is_single_line():
    time = datetime(2020, 1, 1, tzinfo=timezone.utc)
    output = encode_at(time, full_record())
    assert output.endswith(NEWLINE)
    assert output.count("\n") == 1


def test_optional_fields_are_omitted():
    time = datetime(2020, 1, 1, tzinfo=timezone.utc)
    value = json.loads(encode_at(time, Record(level=Level.WARN, message="hi", target="t")))
    assert "module_path" not in value
    assert "file" not in value
    assert "line" not in value
    assert value["level"] == "WARN"
    assert value["mdc"] == {}


def test_time_without_fraction():
    time = datetime(2020, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
    value = json.loads(encode_at(time, Record()))
    assert "." not in value["time"]
    assert datetime.fromisoformat(value["time"]) == time


def test_non_ascii_message_kept_verbatim():
    time = datetime(2020, 1, 1, tzinfo=timezone.utc)
    output = encode_at(time, Record(message="héllo"))
    assert '"message":"héllo"' in output


def test_encode_uses_current_time():
    before = datetime.now(timezone.utc).replace(microsecond=0)
    buf = io.BytesIO()
    JsonEncoder().encode(SimpleWriter(buf), Record(message="now"))
    after = datetime.now(timezone.utc) + timedelta(seconds=1)
    value = json.loads(buf.getvalue())
    stamp = datetime.fromisoformat(value["time"])
    assert before <= stamp <= after
    assert value["message"] == "now"


def test_named_thread_reported():
    current = threading.current_thread()
    original = current.name
    current.name = "worker"
    try:
        output = encode_at(datetime(2020, 1, 1, tzinfo=timezone.utc), Record())
    finally:
        current.name = original
    value = json.loads(output)
    assert value["thread"] == "worker"
    assert value["thread_id"] == threading.get_native_id()