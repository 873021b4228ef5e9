"""Property-based tests for publication date normalization."""

from datetime import datetime, timedelta, timezone

from hypothesis import given
from hypothesis import strategies as st

from rss_reader.timestamps import TimestampParseError, normalize


class TestNormalizeProperties:
    """Property-based tests for normalize."""

    @given(st.text(max_size=80))
    def test_arbitrary_text_never_crashes(self, raw):
        """
        For any string, normalize either returns an aware datetime or raises
        TimestampParseError carrying the original input.
        """
        try:
            result = normalize(raw)
        except TimestampParseError as e:
            assert e.raw == raw
        else:
            assert isinstance(result, datetime)
            assert result.tzinfo is not None

    @given(
        st.datetimes(
            min_value=datetime(1970, 1, 1), max_value=datetime(2099, 12, 31)
        ).map(lambda dt: dt.replace(microsecond=0)),
        st.integers(min_value=-12 * 60, max_value=14 * 60),
    )
    def test_rfc1123_numeric_zone_instants(self, moment, offset_minutes):
        """
        For any wall time and offset written as RFC 1123 with a numeric zone,
        the parsed instant and offset match the ones written.
        """
        sign = "-" if offset_minutes < 0 else "+"
        hours, minutes = divmod(abs(offset_minutes), 60)
        raw = f"{moment.strftime('%a, %d %b %Y %H:%M:%S')} {sign}{hours:02d}{minutes:02d}"

        zone = timezone(timedelta(minutes=offset_minutes))
        result = normalize(raw)

        assert result == moment.replace(tzinfo=zone)
        assert result.utcoffset() == timedelta(minutes=offset_minutes)
