"""Evaluation time window parsing.

Date/Time: Uses `whenever` library (UTC-first, Rust-backed).

Accepted bounds are base-10 Unix seconds or strict RFC3339
(``2019-10-21T09:11:25Z``, ``2019-10-21T11:11:25.5+02:00``). Other ISO 8601
spellings (space separator, basic format, week dates, missing seconds) are
rejected.
"""

import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, timezone

from whenever import Instant

from sli_service.errors import TimeParseError

_UNIX_SECONDS = re.compile(r"[+-]?\d+", re.ASCII)
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_NANOS_PER_SECOND = 1_000_000_000


def _offset(designator: str) -> timezone:
    if designator == "Z":
        return UTC
    sign = -1 if designator[0] == "-" else 1
    hours, minutes = int(designator[1:3]), int(designator[4:6])
    if minutes > 59:
        raise ValueError(designator)
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _parse_rfc3339(value: str) -> Instant:
    match = _RFC3339.fullmatch(value)
    if match is None:
        raise ValueError(value)
    year, month, day, hour, minute, second, fraction, designator = match.groups()
    moment = datetime(
        int(year),
        int(month),
        int(day),
        int(hour),
        int(minute),
        int(second),
        tzinfo=_offset(designator),
    )
    seconds = (moment - _EPOCH) // timedelta(seconds=1)
    nanos = int(fraction[:9].ljust(9, "0")) if fraction else 0
    return Instant.from_timestamp_nanos(seconds * _NANOS_PER_SECOND + nanos)


def parse_timestamp(value: str) -> Instant:
    """Parse an RFC3339 timestamp or a base-10 Unix-seconds string."""
    try:
        if _UNIX_SECONDS.fullmatch(value):
            return Instant.from_timestamp(int(value))
        return _parse_rfc3339(value)
    except (ValueError, OverflowError):
        raise TimeParseError(value) from None


@dataclass(frozen=True)
class TimeWindow:
    """The [start, end) interval an indicator is evaluated over."""

    start: Instant
    end: Instant

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeWindow":
        """Parse both bounds independently; either failing fails the window."""
        return cls(start=parse_timestamp(start), end=parse_timestamp(end))

    @property
    def duration_seconds(self) -> int:
        """Window length in whole seconds, rounded up."""
        nanos = self.end.timestamp_nanos() - self.start.timestamp_nanos()
        return -(-nanos // _NANOS_PER_SECOND)

    @property
    def duration(self) -> str:
        """Range selector duration, e.g. ``"300s"``."""
        return f"{self.duration_seconds}s"

    @property
    def end_timestamp(self) -> int:
        return self.end.timestamp()
