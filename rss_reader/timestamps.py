"""Publication date normalization for RSS Reader.

Feeds in the wild use several incompatible date encodings, so a raw date is
tried against an ordered list of layouts and the first one that parses wins.
The list runs from most to least specific.
"""

import re
from collections.abc import Callable
from datetime import datetime, tzinfo

from dateutil import tz

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

# RFC 822 section 5.1 zone names, hours east of UTC
RFC822_ZONES = {
    "UT": 0,
    "UTC": 0,
    "GMT": 0,
    "EST": -5,
    "EDT": -4,
    "CST": -6,
    "CDT": -5,
    "MST": -7,
    "MDT": -6,
    "PST": -8,
    "PDT": -7,
}

_NUMERIC_ZONE = re.compile(r"^[+-][0-9]{4}$")
_NAMED_ZONE = re.compile(r"^[A-Z]{2,5}$")
_RFC3339 = re.compile(
    r"^(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"T(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?P<fraction>\.[0-9]+)?"
    r"(?P<zone>Z|[+-][0-9]{2}:[0-9]{2})$"
)


class TimestampParseError(ValueError):
    """Raised when a date string matches none of the known layouts."""

    def __init__(self, raw: str):
        super().__init__(f"unable to parse time: {raw}")
        self.raw = raw


def _numeric_zone(token: str) -> tzinfo:
    if not _NUMERIC_ZONE.match(token):
        raise ValueError(f"not a numeric zone: {token!r}")
    sign = -1 if token[0] == "-" else 1
    hours, minutes = int(token[1:3]), int(token[3:5])
    if minutes > 59 or hours * 60 + minutes >= 24 * 60:
        raise ValueError(f"zone offset out of range: {token!r}")
    return tz.tzoffset(None, sign * (hours * 3600 + minutes * 60))


def _named_zone(token: str) -> tzinfo:
    if not _NAMED_ZONE.match(token):
        raise ValueError(f"not a zone name: {token!r}")
    if RFC822_ZONES.get(token) == 0:
        return tz.UTC
    # Unknown abbreviations keep their name but carry no offset
    return tz.tzoffset(token, RFC822_ZONES.get(token, 0) * 3600)


def _zoned(layout: str, zone_parser: Callable[[str], tzinfo]) -> Callable[[str], datetime]:
    """Build a parser for ``layout`` followed by a space and a zone token."""

    def parse(raw: str) -> datetime:
        body, sep, zone = raw.rpartition(" ")
        if not sep:
            raise ValueError(f"no zone in {raw!r}")
        naive = datetime.strptime(body, layout)
        return naive.replace(tzinfo=zone_parser(zone))

    return parse


def _rfc3339(raw: str, fractional: bool) -> datetime:
    match = _RFC3339.match(raw)
    if not match:
        raise ValueError(f"not an RFC 3339 timestamp: {raw!r}")

    fraction = match.group("fraction")
    if fractional != bool(fraction):
        raise ValueError(f"fractional seconds mismatch: {raw!r}")

    zone = match.group("zone")
    if zone == "Z":
        zone_info = tz.UTC
    else:
        zone_info = _numeric_zone(zone.replace(":", ""))

    # datetime only holds microseconds, finer digits are dropped
    microsecond = int(fraction[1:7].ljust(6, "0")) if fraction else 0

    return datetime(
        int(match.group("year")),
        int(match.group("month")),
        int(match.group("day")),
        int(match.group("hour")),
        int(match.group("minute")),
        int(match.group("second")),
        microsecond,
        tzinfo=zone_info,
    )


def _rfc3339_fractional(raw: str) -> datetime:
    return _rfc3339(raw, fractional=True)


def _rfc3339_whole(raw: str) -> datetime:
    return _rfc3339(raw, fractional=False)


TIMESTAMP_LAYOUTS: tuple[tuple[str, Callable[[str], datetime]], ...] = (
    ("RFC1123Z", _zoned("%a, %d %b %Y %H:%M:%S", _numeric_zone)),
    ("RFC1123", _zoned("%a, %d %b %Y %H:%M:%S", _named_zone)),
    ("RFC822Z", _zoned("%d %b %y %H:%M", _numeric_zone)),
    ("RFC822", _zoned("%d %b %y %H:%M", _named_zone)),
    ("RFC3339Nano", _rfc3339_fractional),
    ("RFC3339", _rfc3339_whole),
    ("RFC850", _zoned("%A, %d-%b-%y %H:%M:%S", _named_zone)),
)


def normalize(raw: str) -> datetime:
    """Parse a feed publication date.

    Args:
        raw: Date string as found in the feed

    Returns:
        Timezone-aware datetime carrying the offset written in the string

    Raises:
        TimestampParseError: If no known layout matches
    """
    candidate = (raw or "").strip()

    for _, parser in TIMESTAMP_LAYOUTS:
        try:
            return parser(candidate)
        except ValueError:
            continue

    raise TimestampParseError(raw)


def format_timestamp(moment: datetime) -> str:
    """Format a normalized timestamp in its own zone for display."""
    return moment.strftime(DISPLAY_FORMAT)
