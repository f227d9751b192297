from datetime import UTC, datetime, timedelta, timezone

from voicenotes.core.time import as_utc, utc_now


def test_utc_now_is_timezone_aware_utc():
    value = utc_now()
    assert value.tzinfo is UTC


def test_as_utc_attaches_utc_to_naive_values():
    naive = datetime(2025, 1, 30, 5, 36, 59)
    assert as_utc(naive) == datetime(2025, 1, 30, 5, 36, 59, tzinfo=UTC)


def test_as_utc_converts_other_offsets():
    plus_two = datetime(2025, 1, 30, 7, 0, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(plus_two) == datetime(2025, 1, 30, 5, 0, tzinfo=UTC)
