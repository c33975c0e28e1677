"""UTC time and value formatting for axis ticks and hover labels."""

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_utc(instant: int) -> datetime:
    """Convert seconds since the epoch to an aware UTC datetime."""
    # Arithmetic from EPOCH instead of fromtimestamp() so negative times work everywhere.
    return EPOCH + timedelta(seconds=instant)


def from_utc(dt: datetime) -> int:
    """Convert an aware UTC datetime back to whole seconds since the epoch."""
    return (dt - EPOCH) // timedelta(seconds=1)


# Supported instants. Yearly ticks step one calendar year past the last
# point, which must still be a datetime.
MIN_TIME = from_utc(datetime(1, 1, 1, tzinfo=timezone.utc))
MAX_TIME = from_utc(datetime(9998, 12, 31, 23, 59, 59, tzinfo=timezone.utc))


def format_clock(instant: int) -> str:
    """HH:MM in UTC."""
    dt = to_utc(instant)
    return f'{dt.hour:02d}:{dt.minute:02d}'


def format_year(instant: int) -> str:
    return f'{to_utc(instant).year:04d}'


def format_date(instant: int) -> str:
    """YYYY-MM-DD in UTC."""
    dt = to_utc(instant)
    return f'{dt.year:04d}-{dt.month:02d}-{dt.day:02d}'


def format_time(instant: int, granularity, for_ticks: bool) -> str:
    """Format an instant for the active granularity.

    Axis ticks and labels share the clock format for sub-day granularities;
    for yearly axes ticks show only the year while labels show the full date.
    """
    return granularity.format(instant, for_ticks)


def format_value(value: float) -> str:
    """Render a number without a trailing .0 (10, not 10.0).

    Integral floats from 1e21 up keep exponent notation, as in the browser.
    """
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)
