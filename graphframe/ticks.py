"""
Calendar-aligned tick planning for the time axis.

The spacing is picked from the span of the data: up to three hours gets a
tick every half hour, up to a day gets one every hour, and anything longer
gets one per calendar year. There is no day, week or month tier.
"""

import enum
from datetime import datetime, timedelta
from typing import List, NamedTuple, Optional

from .timefmt import format_clock, format_date, format_year, from_utc, to_utc

HALF_HOUR_MAX_SPAN = 3 * 3600
HOUR_MAX_SPAN = 24 * 3600


class Granularity(enum.Enum):
    HALF_HOUR = 'half-hour'
    HOUR = 'hour'
    YEAR = 'year'

    def align(self, instant: int) -> datetime:
        """Floor an instant to the boundary ticks are counted from."""
        dt = to_utc(instant)
        if self is Granularity.YEAR:
            return dt.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
        # Half-hour ticks also start at the top of the hour.
        return dt.replace(minute=0, second=0, microsecond=0)

    def advance(self, dt: datetime) -> datetime:
        if self is Granularity.HALF_HOUR:
            return dt + timedelta(minutes=30)
        if self is Granularity.HOUR:
            return dt + timedelta(hours=1)
        return dt.replace(year=dt.year + 1)

    def format(self, instant: int, for_ticks: bool) -> str:
        if self is not Granularity.YEAR:
            return format_clock(instant)
        return format_year(instant) if for_ticks else format_date(instant)


class Tick(NamedTuple):
    instant: int
    label: str


def choose_granularity(span: int) -> Granularity:
    """Pick the tick granularity for a span of seconds."""
    if span <= HALF_HOUR_MAX_SPAN:
        return Granularity.HALF_HOUR
    if span <= HOUR_MAX_SPAN:
        return Granularity.HOUR
    return Granularity.YEAR


def plan_ticks(min_time: int, max_time: int, granularity: Optional[Granularity] = None) -> List[int]:
    """Return aligned tick instants t with min_time <= t < max_time."""
    if granularity is None:
        granularity = choose_granularity(max_time - min_time)

    ticks = []
    dt = granularity.align(min_time)
    end = to_utc(max_time)
    start = to_utc(min_time)
    while dt < end:
        if dt >= start:
            ticks.append(from_utc(dt))
        dt = granularity.advance(dt)
    return ticks


def axis_ticks(min_time: int, max_time: int, granularity: Optional[Granularity] = None) -> List[Tick]:
    """Plan ticks and attach their axis labels."""
    if granularity is None:
        granularity = choose_granularity(max_time - min_time)
    return [Tick(t, granularity.format(t, True)) for t in plan_ticks(min_time, max_time, granularity)]
