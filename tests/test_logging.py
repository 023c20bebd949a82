from __future__ import annotations

import logging

from fleetlock.logging import KVFormatter, get_logger, warn


def test_kv_formatter_merges_fields():
    record = logging.LogRecord("fleetlock", logging.WARNING, __file__, 1, "lock_acquisition_failed", None, None)
    record.extra = {"resource": "jobs:nightly", "ttl_seconds": 5}

    line = KVFormatter().format(record)

    assert "level='WARNING'" in line
    assert "msg='lock_acquisition_failed'" in line
    assert "resource='jobs:nightly'" in line
    assert "ttl_seconds=5" in line


def test_get_logger_configures_once():
    a = get_logger("fleetlock.test_get_logger", "debug")
    b = get_logger("fleetlock.test_get_logger")
    assert a is b
    assert len(a.handlers) == 1
    assert a.level == logging.DEBUG
    assert a.propagate is False


def test_warn_attaches_fields(caplog):
    logger = logging.getLogger("tests.warn")
    with caplog.at_level(logging.WARNING, logger="tests.warn"):
        warn(logger, "lock_acquisition_failed", resource="r", ttl_seconds=5)
    assert caplog.records[0].extra == {"event": "lock_acquisition_failed", "resource": "r", "ttl_seconds": 5}
    assert caplog.records[0].getMessage() == "lock_acquisition_failed"


def test_kv_formatter_timestamp_is_utc():
    record = logging.LogRecord("fleetlock", logging.INFO, __file__, 1, "m", None, None)
    record.created = 0.0
    assert "ts='1970-01-01T00:00:00Z'" in KVFormatter().format(record)


def test_kv_formatter_renders_exception():
    try:
        raise ConnectionError("redis down")
    except ConnectionError:
        import sys
        exc_info = sys.exc_info()
    record = logging.LogRecord("fleetlock", logging.ERROR, __file__, 1, "release_failed", None, exc_info)
    assert "exc='ConnectionError: redis down'" in KVFormatter().format(record)
