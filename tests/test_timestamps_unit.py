"""Unit tests for publication date normalization."""

from datetime import datetime, timedelta, timezone

import pytest

from rss_reader.timestamps import (
    TIMESTAMP_LAYOUTS,
    TimestampParseError,
    format_timestamp,
    normalize,
)

UTC = timezone.utc


class TestNormalizeUnit:
    """One fixture per supported layout, checked against hand-computed instants."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            # RFC 1123 with numeric zone
            (
                "Mon, 02 Jan 2006 15:04:05 -0700",
                datetime(2006, 1, 2, 22, 4, 5, tzinfo=UTC),
            ),
            # RFC 1123 with zone name
            (
                "Mon, 02 Jan 2006 15:04:05 GMT",
                datetime(2006, 1, 2, 15, 4, 5, tzinfo=UTC),
            ),
            # RFC 822 with numeric zone
            (
                "02 Jan 06 15:04 +0530",
                datetime(2006, 1, 2, 9, 34, tzinfo=UTC),
            ),
            # RFC 822 with zone name
            (
                "02 Jan 06 15:04 UT",
                datetime(2006, 1, 2, 15, 4, tzinfo=UTC),
            ),
            # RFC 3339 with fractional seconds
            (
                "2006-01-02T15:04:05.123456789+07:00",
                datetime(2006, 1, 2, 8, 4, 5, 123456, tzinfo=UTC),
            ),
            # RFC 3339
            (
                "2006-01-02T15:04:05Z",
                datetime(2006, 1, 2, 15, 4, 5, tzinfo=UTC),
            ),
            # RFC 850
            (
                "Monday, 02-Jan-06 15:04:05 PST",
                datetime(2006, 1, 2, 23, 4, 5, tzinfo=UTC),
            ),
        ],
    )
    def test_supported_layouts(self, raw, expected):
        """Each supported layout yields the expected instant."""
        assert normalize(raw) == expected

    def test_numeric_offset_is_preserved(self):
        """The offset written in the string is kept, not converted."""
        result = normalize("Mon, 02 Jan 2006 15:04:05 -0700")

        assert result.utcoffset() == timedelta(hours=-7)
        assert format_timestamp(result) == "2006-01-02 15:04:05"

    def test_rfc822_zone_names_carry_offsets(self):
        """North American RFC 822 zone names map to their offsets."""
        result = normalize("Tue, 10 Jun 2003 04:00:00 EST")

        assert result.utcoffset() == timedelta(hours=-5)
        assert result == datetime(2003, 6, 10, 9, 0, tzinfo=UTC)

    def test_unknown_zone_name_has_zero_offset(self):
        """Unrecognized abbreviations are kept by name at UTC+0."""
        result = normalize("Mon, 02 Jan 2006 15:04:05 CET")

        assert result.utcoffset() == timedelta(0)
        assert result.tzname() == "CET"

    def test_two_digit_years(self):
        """Two-digit years pivot at 69."""
        assert normalize("02 Jan 99 15:04 GMT").year == 1999
        assert normalize("02 Jan 68 15:04 GMT").year == 2068

    def test_single_digit_day_is_accepted(self):
        """Feeds often drop the leading zero of the day."""
        assert normalize("Sun, 5 Mar 2023 08:00:00 +0000") == datetime(
            2023, 3, 5, 8, 0, tzinfo=UTC
        )

    def test_surrounding_whitespace_is_ignored(self):
        """Whitespace around the date does not prevent a match."""
        assert normalize("  2006-01-02T15:04:05Z\n") == datetime(
            2006, 1, 2, 15, 4, 5, tzinfo=UTC
        )

    def test_short_fraction_is_padded(self):
        """Fractions shorter than microseconds are scaled, not read as integers."""
        assert normalize("2006-01-02T15:04:05.5Z").microsecond == 500000

    def test_most_specific_layout_is_tried_first(self):
        """Numeric-zone layouts precede their zone-name counterparts."""
        names = [name for name, _ in TIMESTAMP_LAYOUTS]

        assert names == [
            "RFC1123Z",
            "RFC1123",
            "RFC822Z",
            "RFC822",
            "RFC3339Nano",
            "RFC3339",
            "RFC850",
        ]

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "yesterday",
            "2006-01-02",
            "2006-01-02 15:04:05",
            "2006-01-02T23:59:60Z",
            "Mon, 32 Jan 2006 15:04:05 GMT",
            "Mon, 02 Jan 2006 15:04:05 +07:00",
            "Mon, 02 Jan 2006 15:04:05 gmt",
            "Mon, 02 Jan 2006 15:04:05 +9900",
            "Mon, 02 Jan 2006 15:04:05 +2400",
            "2006-01-02T15:04:05+99:00",
            "2006-01-02T15:04:05+05:75",
        ],
    )
    def test_unparseable_dates_raise(self, raw):
        """Strings matching no layout raise TimestampParseError with the input."""
        with pytest.raises(TimestampParseError) as exc_info:
            normalize(raw)

        assert exc_info.value.raw == raw
        assert isinstance(exc_info.value, ValueError)
        assert "unable to parse time" in str(exc_info.value)
