"""
Core helpers: token timestamps, job timing, date parsing and query params.
"""
import calendar
import logging
from datetime import datetime, timedelta

import jwt
import pytest

from gatehouse.api.v1.params import parse_from, parse_to, parse_visitor_type
from gatehouse.config.settings import settings
from gatehouse.core.exceptions import ErrorCode, InvalidTokenError, ValidationError
from gatehouse.core.logging import RequestContextProcessor, log_execution_time
from gatehouse.core.security import create_access_token, verify_token
from gatehouse.utils.datetime_utils import DateTimeHelper


# ==================== security ====================

def test_access_token_expiry_is_utc():
    before = calendar.timegm(DateTimeHelper.utcnow().utctimetuple())
    token = create_access_token("user-1")

    payload = verify_token(token)

    expected = before + settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    assert payload["sub"] == "user-1"
    assert expected - 5 <= payload["exp"] <= expected + 5
    assert payload["iat"] <= payload["exp"]


def test_invalid_token_keeps_cause():
    with pytest.raises(InvalidTokenError) as exc_info:
        verify_token("not-a-jwt")
    assert isinstance(exc_info.value.__cause__, jwt.InvalidTokenError)


# ==================== logging ====================

def test_log_execution_time_reports_duration(caplog):
    @log_execution_time("gatehouse.jobs")
    def job(x):
        return x * 2

    with caplog.at_level(logging.INFO, logger="gatehouse.jobs"):
        assert job(21) == 42

    record = next(r for r in caplog.records if r.getMessage() == "Job finished")
    assert record.function == "job"
    assert record.execution_time >= 0


def test_log_execution_time_reraises(caplog):
    @log_execution_time("gatehouse.jobs")
    def job():
        raise RuntimeError("boom")

    with caplog.at_level(logging.INFO, logger="gatehouse.jobs"), pytest.raises(RuntimeError):
        job()
    assert any(r.getMessage() == "Job failed" and r.error_type == "RuntimeError" for r in caplog.records)


def test_request_context_timestamp_is_naive_utc():
    event = RequestContextProcessor()(None, "info", {"event": "x"})
    stamped = datetime.fromisoformat(event["timestamp"])
    assert stamped.tzinfo is None
    assert abs(stamped - DateTimeHelper.utcnow()) < timedelta(minutes=1)


# ==================== dates ====================

@pytest.mark.parametrize("value", ["2024-05-01", "20240501", " 2024-05-01 "])
def test_range_end_covers_whole_day(value):
    assert DateTimeHelper.parse_range_end(value) == datetime(2024, 5, 1, 23, 59, 59, 999999)


@pytest.mark.parametrize("value,expected", [
    ("2024-05-01T10:30:00", datetime(2024, 5, 1, 10, 30)),
    ("2024-05-01T12:30:00+02:00", datetime(2024, 5, 1, 10, 30)),
])
def test_range_end_keeps_explicit_time(value, expected):
    assert DateTimeHelper.parse_range_end(value) == expected


def test_parse_datetime_rejects_garbage():
    with pytest.raises(ValueError) as exc_info:
        DateTimeHelper.parse_datetime("yesterday")
    assert exc_info.value.__cause__ is not None


# ==================== query params ====================

def test_parse_to_basic_format_date():
    assert parse_to("20240501") == datetime(2024, 5, 1, 23, 59, 59, 999999)
    assert parse_from("20240501") == datetime(2024, 5, 1)


@pytest.mark.parametrize("parse", [parse_from, parse_to])
def test_bad_dates_keep_cause(parse):
    with pytest.raises(ValidationError) as exc_info:
        parse("yesterday")
    assert exc_info.value.error_code == ErrorCode.INVALID_FORMAT
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_unknown_visitor_type_keeps_cause():
    with pytest.raises(ValidationError) as exc_info:
        parse_visitor_type("alien")
    assert isinstance(exc_info.value.__cause__, ValueError)
    assert parse_visitor_type(" cab_auto ").value == "CAB_AUTO"
