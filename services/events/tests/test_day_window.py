from datetime import date, datetime, timedelta, timezone

import pytest

from services.events.services.day_window import (
    as_utc,
    load_timezone,
    local_day_window,
    parse_calendar_date,
    to_utc,
)


class TestParseCalendarDate:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2025-01-01", date(2025, 1, 1)),
            (" 2025-01-01 ", date(2025, 1, 1)),
            ("2025-01-01T10:30:00", date(2025, 1, 1)),
            ("2025-01-01T23:30:00-05:00", date(2025, 1, 1)),
            ("2025-01-01T00:30:00+09:00", date(2025, 1, 1)),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_calendar_date(value) == expected

    @pytest.mark.parametrize("value", [None, "", "   ", "tomorrow", "2025-13-01"])
    def test_invalid_values(self, value):
        assert parse_calendar_date(value) is None


class TestLocalDayWindow:
    def test_utc_window_is_24_hours(self):
        start, end = local_day_window(date(2025, 1, 1), "UTC")

        assert start == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert end == datetime(2025, 1, 2, tzinfo=timezone.utc)

    def test_named_zone_converted_to_utc(self):
        start, end = local_day_window(date(2025, 7, 1), "America/New_York")

        assert start == datetime(2025, 7, 1, 4, tzinfo=timezone.utc)
        assert end == datetime(2025, 7, 2, 4, tzinfo=timezone.utc)

    def test_spring_forward_day_is_23_hours(self):
        start, end = local_day_window(date(2025, 3, 30), "Europe/Paris")

        assert end - start == timedelta(hours=23)

    def test_fall_back_day_is_25_hours(self):
        start, end = local_day_window(date(2025, 10, 26), "Europe/Paris")

        assert end - start == timedelta(hours=25)

    def test_defaults_to_process_local_midnight(self):
        start, end = local_day_window(date(2025, 1, 1))

        assert start == datetime(2025, 1, 1).astimezone()
        assert end == datetime(2025, 1, 2).astimezone()
        assert start.tzinfo == timezone.utc


class TestLoadTimezone:
    @pytest.mark.parametrize("tz_name", [None, ""])
    def test_unset_means_process_local(self, tz_name):
        assert load_timezone(tz_name) is None

    def test_known_zone(self):
        assert str(load_timezone("Europe/Paris")) == "Europe/Paris"

    @pytest.mark.parametrize("tz_name", ["Mars/Olympus_Mons", "/etc/passwd"])
    def test_unknown_zone_raises_value_error(self, tz_name):
        with pytest.raises(ValueError, match="Unknown timezone"):
            load_timezone(tz_name)

    def test_day_window_rejects_unknown_zone(self):
        with pytest.raises(ValueError):
            local_day_window(date(2025, 1, 1), "Not/AZone")


class TestTimestampNormalization:
    def test_to_utc_converts_aware_values(self):
        value = datetime(2025, 1, 1, 10, tzinfo=timezone(timedelta(hours=2)))

        assert to_utc(value) == datetime(2025, 1, 1, 8, tzinfo=timezone.utc)
        assert to_utc(value).tzinfo == timezone.utc

    def test_to_utc_treats_naive_values_as_local(self):
        naive = datetime(2025, 6, 1, 12)

        assert to_utc(naive) == naive.astimezone()

    def test_as_utc_attaches_utc_to_naive_values(self):
        assert as_utc(datetime(2025, 1, 1, 10)) == datetime(
            2025, 1, 1, 10, tzinfo=timezone.utc
        )

    def test_as_utc_passes_none_through(self):
        assert as_utc(None) is None
