from datetime import timedelta

import pytest

from progline.format import (
    BinaryBytes,
    DecimalBytes,
    FormattedDuration,
    HumanBytes,
    HumanCount,
    HumanDuration,
    HumanFloatCount,
)

MILLI = timedelta(milliseconds=1)
SECOND = timedelta(seconds=1)
MINUTE = timedelta(minutes=1)
HOUR = timedelta(hours=1)
DAY = timedelta(days=1)
WEEK = timedelta(weeks=1)
YEAR = timedelta(days=365)

UNITS = [(YEAR, "y"), (WEEK, "w"), (DAY, "d"), (HOUR, "h"), (MINUTE, "m"), (SECOND, "s")]


@pytest.mark.parametrize("unit,alt", UNITS)
def test_human_duration_alternate(unit, alt):
    assert format(HumanDuration(2 * unit), "#") == f"2{alt}"


def test_human_duration_less_than_one_second():
    assert str(HumanDuration(timedelta(0))) == "0 seconds"
    assert str(HumanDuration(MILLI)) == "0 seconds"
    assert str(HumanDuration(499 * MILLI)) == "0 seconds"
    assert str(HumanDuration(500 * MILLI)) == "1 second"
    assert str(HumanDuration(999 * MILLI)) == "1 second"


def test_human_duration_less_than_two_seconds():
    assert str(HumanDuration(1499 * MILLI)) == "1 second"
    assert str(HumanDuration(1500 * MILLI)) == "2 seconds"
    assert str(HumanDuration(1999 * MILLI)) == "2 seconds"


def test_human_duration_one_unit():
    assert str(HumanDuration(SECOND)) == "1 second"
    assert str(HumanDuration(MINUTE)) == "60 seconds"
    assert str(HumanDuration(HOUR)) == "60 minutes"
    assert str(HumanDuration(DAY)) == "24 hours"
    assert str(HumanDuration(WEEK)) == "7 days"
    assert str(HumanDuration(YEAR)) == "52 weeks"


def test_human_duration_less_than_one_and_a_half_unit():
    assert f"{HumanDuration(MINUTE + MINUTE / 2 - SECOND / 2 - MILLI)}" == "89 seconds"
    assert f"{HumanDuration(HOUR + HOUR / 2 - MINUTE / 2 - MILLI)}" == "89 minutes"
    assert f"{HumanDuration(DAY + DAY / 2 - HOUR / 2 - MILLI)}" == "35 hours"
    assert f"{HumanDuration(WEEK + WEEK / 2 - DAY / 2 - MILLI)}" == "10 days"
    assert f"{HumanDuration(YEAR + YEAR / 2 - WEEK / 2 - MILLI)}" == "78 weeks"


def test_human_duration_one_and_a_half_unit():
    assert f"{HumanDuration(MINUTE + MINUTE / 2 - SECOND / 2)}" == "2 minutes"
    assert f"{HumanDuration(HOUR + HOUR / 2 - MINUTE / 2)}" == "2 hours"
    assert f"{HumanDuration(DAY + DAY / 2 - HOUR / 2)}" == "2 days"
    assert f"{HumanDuration(WEEK + WEEK / 2 - DAY / 2)}" == "2 weeks"
    assert f"{HumanDuration(YEAR + YEAR / 2 - WEEK / 2)}" == "2 years"


def test_human_duration_two_units():
    assert str(HumanDuration(2 * SECOND)) == "2 seconds"
    assert str(HumanDuration(2 * MINUTE)) == "2 minutes"
    assert str(HumanDuration(2 * HOUR)) == "2 hours"
    assert str(HumanDuration(2 * DAY)) == "2 days"
    assert str(HumanDuration(2 * WEEK)) == "2 weeks"
    assert str(HumanDuration(2 * YEAR)) == "2 years"


def test_human_duration_less_than_two_and_a_half_units():
    assert str(HumanDuration(2 * SECOND + SECOND / 2 - MILLI)) == "2 seconds"
    assert str(HumanDuration(2 * MINUTE + MINUTE / 2 - MILLI)) == "2 minutes"
    assert str(HumanDuration(2 * HOUR + HOUR / 2 - MILLI)) == "2 hours"
    assert str(HumanDuration(2 * DAY + DAY / 2 - MILLI)) == "2 days"
    assert str(HumanDuration(2 * WEEK + WEEK / 2 - MILLI)) == "2 weeks"
    assert str(HumanDuration(2 * YEAR + YEAR / 2 - MILLI)) == "2 years"


def test_human_duration_two_and_a_half_units():
    assert str(HumanDuration(2 * SECOND + SECOND / 2)) == "3 seconds"
    assert str(HumanDuration(2 * MINUTE + MINUTE / 2)) == "3 minutes"
    assert str(HumanDuration(2 * HOUR + HOUR / 2)) == "3 hours"
    assert str(HumanDuration(2 * DAY + DAY / 2)) == "3 days"
    assert str(HumanDuration(2 * WEEK + WEEK / 2)) == "3 weeks"
    assert str(HumanDuration(2 * YEAR + YEAR / 2)) == "3 years"


def test_human_duration_three_units():
    assert str(HumanDuration(3 * SECOND)) == "3 seconds"
    assert str(HumanDuration(3 * MINUTE)) == "3 minutes"
    assert str(HumanDuration(3 * HOUR)) == "3 hours"
    assert str(HumanDuration(3 * DAY)) == "3 days"
    assert str(HumanDuration(3 * WEEK)) == "3 weeks"
    assert str(HumanDuration(3 * YEAR)) == "3 years"


def test_human_duration_accepts_seconds():
    assert str(HumanDuration(8)) == "8 seconds"


def test_human_duration_rejects_negative():
    with pytest.raises(ValueError):
        str(HumanDuration(-1))


def test_human_count():
    assert str(HumanCount(42)) == "42"
    assert str(HumanCount(7654)) == "7,654"
    assert str(HumanCount(12345)) == "12,345"
    assert str(HumanCount(1234567890)) == "1,234,567,890"
    assert str(HumanCount(33857009)) == "33,857,009"


def test_human_count_rejects_negative():
    with pytest.raises(ValueError):
        str(HumanCount(-5))


@pytest.mark.parametrize(
    "value,precision,expected",
    [
        (42.0, 0, "42"),
        (7654.0, 0, "7,654"),
        (12345.0, 0, "12,345"),
        (1234567890.0, 0, "1,234,567,890"),
        (42.5, 1, "42.5"),
        (42.500012345, 1, "42.5"),
        (42.502012345, 3, "42.502"),
        (7654.321, 3, "7,654.321"),
        (7654.3210123456, 3, "7,654.321"),
        (12345.6789, 4, "12,345.6789"),
        (1234567890.1234567, 4, "1,234,567,890.1235"),
        (1234567890.1234321, 4, "1,234,567,890.1234"),
        (123.45678, 0, "123"),
        (123.45678, 1, "123.5"),
        (123.45678, 2, "123.46"),
        (123.45678, 3, "123.457"),
        (123.45678, 4, "123.4568"),
        (33857009.123456, 4, "33,857,009.1235"),
    ],
)
def test_human_float_count(value, precision, expected):
    assert str(HumanFloatCount(value, precision)) == expected


def test_human_bytes():
    assert str(HumanBytes(3 * 1024 * 1024)) == "3.00 MiB"
    assert str(HumanBytes(1023)) == "1023B"
    assert str(HumanBytes(1024)) == "1.00 KiB"


def test_binary_bytes():
    assert str(BinaryBytes(3 * 1024 * 1024)) == "3.00 MiB"
    assert str(BinaryBytes(0)) == "0B"


def test_decimal_bytes():
    assert str(DecimalBytes(999)) == "999B"
    assert str(DecimalBytes(1000)) == "1.00 kB"
    assert str(DecimalBytes(3_000_000)) == "3.00 MB"


def test_bytes_reject_negative():
    with pytest.raises(ValueError):
        str(HumanBytes(-1))


def test_formatted_duration_clock():
    assert str(FormattedDuration(timedelta(0))) == "00:00:00"
    assert str(FormattedDuration(timedelta(hours=1, minutes=1, seconds=1))) == "01:01:01"


def test_formatted_duration_with_days():
    value = timedelta(days=1, hours=1, minutes=1, seconds=1)
    assert str(FormattedDuration(value, 0)) == "1d 01:01:01"


def test_formatted_duration_precision():
    assert str(FormattedDuration(timedelta(seconds=12, milliseconds=500), 1)) == "00:00:12.5"