from datetime import UTC, date

from backend.app.core.time import today, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_today_is_a_plain_date():
    value = today()
    assert isinstance(value, date)
    assert value == utc_now().date()
