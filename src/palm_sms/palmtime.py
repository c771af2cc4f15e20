"""
PalmOS Time Conversion
======================

PalmOS counts seconds from 1904-01-01 00:00:00 in an unsigned 32-bit
value, on the device's local clock. Neither the time zone nor DST is
recorded, so converted values should be displayed as if they were UTC.
"""

from datetime import datetime, timedelta

# Seconds between the Palm epoch (1904-01-01) and the Unix epoch (1970-01-01)
EPOCH_1904 = 2082844800

_UNIX_EPOCH = datetime(1970, 1, 1)


def palm_to_unix(palm_seconds: int) -> int:
    """
    Convert seconds since 1904-01-01 to seconds since 1970-01-01.

    Values before 1970 give a negative result; nothing wraps.
    """
    return palm_seconds - EPOCH_1904


def unix_to_palm(unix_seconds: int) -> int:
    """Convert seconds since 1970-01-01 to seconds since 1904-01-01."""
    return unix_seconds + EPOCH_1904


def unix_to_datetime(unix_seconds: int) -> datetime:
    """
    Render Unix seconds as a naive datetime.

    Computed by offset from the epoch, so negative values work on every
    platform.
    """
    return _UNIX_EPOCH + timedelta(seconds=unix_seconds)


def datetime_to_unix(value: datetime) -> int:
    """Convert a naive datetime to Unix seconds."""
    return int((value - _UNIX_EPOCH).total_seconds())
