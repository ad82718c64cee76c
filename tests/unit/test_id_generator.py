"""Tests for bk_common.id_generator and bk_common.datetime_utils."""

from datetime import UTC, date, datetime

from src.bk_common.datetime_utils import end_of_day, start_of_day, utc_now
from src.bk_common.id_generator import SHORT_ID_LENGTH, SnowflakeIdGenerator, short_id


class TestSnowflakeIdGenerator:
    def test_returns_str(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        assert isinstance(gen.next_id(), str)

    def test_unique_ids(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        ids = {gen.next_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_monotonically_increasing(self) -> None:
        gen = SnowflakeIdGenerator(machine_id=1)
        prev = int(gen.next_id())
        for _ in range(100):
            current = int(gen.next_id())
            assert current > prev
            prev = current


class TestShortId:
    def test_keeps_last_characters(self) -> None:
        assert short_id("7234567890123456789") == "23456789"
        assert len(short_id("7234567890123456789")) == SHORT_ID_LENGTH

    def test_short_input_unchanged(self) -> None:
        assert short_id("abc") == "abc"


class TestDatetimeUtils:
    def test_utc_now_is_aware_utc(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo == UTC

    def test_start_of_day(self) -> None:
        assert start_of_day(date(2026, 3, 1)) == datetime(2026, 3, 1, tzinfo=UTC)

    def test_end_of_day_is_inclusive(self) -> None:
        end = end_of_day(date(2026, 3, 1))
        assert end.date() == date(2026, 3, 1)
        assert end > datetime(2026, 3, 1, 23, 59, 59, tzinfo=UTC)
        assert end < datetime(2026, 3, 2, tzinfo=UTC)
