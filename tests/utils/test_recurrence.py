"""Unit tests for recurrence display formatting."""

from datetime import datetime

import pytest

from flowtask.models.recurrence import RecurrenceDescriptor
from flowtask.utils.recurrence import (
    FALLBACK_TIME_DISPLAY,
    describe_pattern,
    format_recurrence,
    format_reminder_date,
    format_time_display,
    is_biweekly,
    ordinal_suffix,
    parse_time_display,
)


class TestOrdinalSuffix:
    @pytest.mark.parametrize(
        "n, suffix",
        [
            (1, "st"),
            (2, "nd"),
            (3, "rd"),
            (4, "th"),
            (11, "th"),
            (12, "th"),
            (13, "th"),
            (21, "st"),
            (22, "nd"),
            (23, "rd"),
            (31, "st"),
            (111, "th"),
        ],
    )
    def test_suffix(self, n, suffix):
        assert ordinal_suffix(n) == suffix


class TestTimeDisplay:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("18:00", "6:00 PM"),
            ("00:00", "12:00 AM"),
            ("12:30", "12:30 PM"),
            ("09:05", "9:05 AM"),
            ("9:05", "9:05 AM"),
            ("23:59", "11:59 PM"),
        ],
    )
    def test_valid(self, value, expected):
        assert format_time_display(value) == expected

    @pytest.mark.parametrize("value", ["", None, "24:00", "12:60", "6pm", "abc", "1:2", 1800])
    def test_fallback(self, value):
        assert format_time_display(value) == FALLBACK_TIME_DISPLAY

    def test_round_trip_every_minute(self):
        for hours in range(24):
            for minutes in range(60):
                display = format_time_display(f"{hours:02d}:{minutes:02d}")
                assert parse_time_display(display) == (hours, minutes)

    def test_parse_rejects_garbage(self):
        assert parse_time_display("13:00 PM") is None
        assert parse_time_display("18:00") is None
        assert parse_time_display("") is None


class TestFormatRecurrence:
    def test_minutely(self):
        record = {"frequency": "minutely", "interval": 1, "time": "08:00"}
        assert format_recurrence(record) == "Every 1 minute starting at 8:00 AM"
        record["interval"] = 30
        assert format_recurrence(record) == "Every 30 minutes starting at 8:00 AM"

    def test_hourly(self):
        assert (
            format_recurrence({"frequency": "hourly", "interval": 3, "time": "14:00"})
            == "Every 3 hours starting at 2:00 PM"
        )
        assert (
            format_recurrence({"frequency": "hourly", "time": "14:00"})
            == "Every hour starting at 2:00 PM"
        )

    def test_daily_and_weekday_groups(self):
        assert format_recurrence({"frequency": "daily", "time": "18:00"}) == "Daily at 6:00 PM"
        assert format_recurrence({"frequency": "weekdays", "time": "09:30"}) == "Weekdays at 9:30 AM"
        assert format_recurrence({"frequency": "weekends", "time": "10:00"}) == "Weekends at 10:00 AM"

    def test_weekly_with_day(self):
        descriptor = RecurrenceDescriptor(frequency="weekly", time="09:00", day_of_week=2)
        assert format_recurrence(descriptor) == "Weekly on Tuesday at 9:00 AM"

    def test_biweekly(self):
        record = {
            "frequency": "weekly",
            "time": "09:00",
            "dayOfWeek": 2,
            "originalText": "every other tuesday",
        }
        assert format_recurrence(record) == "Biweekly on Tuesday at 9:00 AM"

    def test_weekly_day_from_original_text(self):
        assert (
            format_recurrence({"frequency": "weekly", "originalText": "every fri", "time": "17:00"})
            == "Weekly on Friday at 5:00 PM"
        )
        assert (
            format_recurrence({"frequency": "weekly", "originalText": "every 2nd monday"})
            == "Biweekly on Monday at 9:00 AM"
        )

    def test_weekly_without_day(self):
        assert format_recurrence({"frequency": "weekly", "time": "09:00"}) == "Weekly at 9:00 AM"

    def test_monthly(self):
        assert (
            format_recurrence({"frequency": "monthly", "dayOfMonth": 3, "time": "18:00"})
            == "Monthly on the 3rd at 6:00 PM"
        )
        assert (
            format_recurrence({"frequency": "monthly", "day_of_month": 22, "time": "09:00"})
            == "Monthly on the 22nd at 9:00 AM"
        )
        assert format_recurrence({"frequency": "monthly"}) == "Monthly at 9:00 AM"

    def test_yearly(self):
        record = {"frequency": "yearly", "monthOfYear": 8, "dayOfMonth": 3, "time": "18:00"}
        assert format_recurrence(record) == "Yearly on August 3rd at 6:00 PM"
        assert (
            format_recurrence({"frequency": "yearly", "monthOfYear": 8, "time": "18:00"})
            == "Yearly at 6:00 PM"
        )

    def test_unknown_frequency(self):
        assert (
            format_recurrence(
                {"frequency": "fortnightly", "originalText": "every fortnight", "time": "07:00"}
            )
            == "Every fortnight at 7:00 AM"
        )
        assert (
            format_recurrence({"frequency": "fortnightly", "time": "07:00"})
            == "fortnightly at 7:00 AM"
        )

    def test_frequency_case_insensitive(self):
        assert format_recurrence({"frequency": "DAILY", "time": "06:00"}) == "Daily at 6:00 AM"

    @pytest.mark.parametrize(
        "record, expected",
        [
            ({"frequency": "weekly", "dayOfWeek": 9, "time": "abc"}, "Weekly at 9:00 AM"),
            ({"frequency": "monthly", "dayOfMonth": "x"}, "Monthly at 9:00 AM"),
            ({"frequency": "monthly", "dayOfMonth": 40}, "Monthly at 9:00 AM"),
            ({"frequency": "yearly", "monthOfYear": 13, "dayOfMonth": 1}, "Yearly at 9:00 AM"),
            ({"frequency": "hourly", "interval": 0}, "Every hour starting at 9:00 AM"),
            ({"frequency": "minutely", "interval": "lots"}, "Every 1 minute starting at 9:00 AM"),
            ({}, "Repeats at 9:00 AM"),
        ],
    )
    def test_malformed_records_never_raise(self, record, expected):
        assert format_recurrence(record) == expected

    def test_model_and_record_agree(self):
        descriptor = RecurrenceDescriptor(
            frequency="yearly", time="18:00", month_of_year=8, day_of_month=3
        )
        assert format_recurrence(descriptor) == format_recurrence(descriptor.to_record())

    def test_idempotent(self):
        record = {"frequency": "weekly", "dayOfWeek": 4, "time": "07:15"}
        assert format_recurrence(record) == format_recurrence(record)


class TestHelpers:
    def test_is_biweekly(self):
        assert is_biweekly("every other tuesday")
        assert is_biweekly("Every 2nd Friday")
        assert is_biweekly("every second sunday")
        assert not is_biweekly("every tuesday")
        assert not is_biweekly(None)

    def test_describe_pattern(self):
        assert describe_pattern("every tue", "18:00") == "Every Tuesday at 6:00 PM"
        assert describe_pattern("WEEKDAYS") == "Weekdays"

    def test_format_reminder_date(self):
        assert format_reminder_date(datetime(2026, 10, 17, 17, 0)) == "Oct 17, 2026 at 5:00 PM"
        assert format_reminder_date(datetime(2026, 1, 2, 0, 5)) == "Jan 2, 2026 at 12:05 AM"
