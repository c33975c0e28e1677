"""Affine scales from data space into plot pixels."""

import logging
import math
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from .dataset import Point
from .errors import DegenerateScaleError
from .timefmt import format_value

_logger = logging.getLogger(__name__)


class LinearScale:
    """Maps domain [d0, d1] onto range [r0, r1].

    A zero-width domain maps everything to the middle of the range.
    """

    def __init__(self, domain: Tuple[float, float], range: Tuple[float, float]):
        self.domain = (domain[0], domain[1])
        self.range = (range[0], range[1])

    @property
    def degenerate(self) -> bool:
        return self.domain[0] == self.domain[1]

    def __call__(self, value: float) -> float:
        (d0, d1), (r0, r1) = self.domain, self.range
        if self.degenerate:
            return 0.5 * (r0 + r1)
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        (d0, d1), (r0, r1) = self.domain, self.range
        if self.degenerate or r0 == r1:
            raise DegenerateScaleError(f'cannot invert scale with domain {self.domain} and range {self.range}')
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def _tick_step(self, count: int) -> Optional[float]:
        lo, hi = sorted(self.domain)
        span = hi - lo
        if not 0 < span < math.inf or count <= 0:
            return None
        step = 10 ** math.floor(math.log10(span / count))
        err = count / span * step
        if err <= 0.15:
            step *= 10
        elif err <= 0.35:
            step *= 5
        elif err <= 0.75:
            step *= 2
        return step

    def ticks(self, count: int = 10) -> List[float]:
        """Roughly `count` round values (1, 2 or 5 times a power of ten) inside the domain."""
        step = self._tick_step(count)
        if step is None:
            return [self.domain[0]]
        lo, hi = sorted(self.domain)
        digits = _precision(step)
        first = math.ceil(lo / step - 1e-9)
        last = math.floor(hi / step + 1e-9)
        return [round(i * step, digits) for i in range(first, last + 1)]

    def tick_format(self, count: int = 10) -> Callable[[float], str]:
        """Formatter with just enough decimals to tell `ticks(count)` apart."""
        step = self._tick_step(count)
        if step is None:
            return format_value
        digits = _precision(step)
        return lambda v: f'{v:,.{digits}f}'


def _precision(step: float) -> int:
    return max(0, -math.floor(math.log10(step) + 0.01))


class Scales(NamedTuple):
    x: LinearScale
    y: LinearScale
    min_time: int
    max_time: int
    min_value: float
    max_value: float


def build_scales(points: Sequence[Point], value_range: Optional[Tuple[float, float]],
                 width: float, height: float, left: float = 0, top: float = 0) -> Scales:
    """Build the time->x and value->y scales for a plot area.

    An explicit value_range replaces the extrema of the points entirely. The
    y scale is inverted since pixel rows grow downwards.
    """
    if not points:
        raise DegenerateScaleError('cannot build scales without points')

    min_time = min(p.time for p in points)
    max_time = max(p.time for p in points)
    if value_range is not None:
        min_value, max_value = value_range
    else:
        min_value = min(p.value for p in points)
        max_value = max(p.value for p in points)

    if min_time == max_time:
        _logger.warning('All points share time %d; centering them horizontally', min_time)
    if min_value == max_value:
        _logger.warning('Value domain is the single value %s; centering points vertically', min_value)

    x = LinearScale((min_time, max_time), (left, left + width))
    y = LinearScale((min_value, max_value), (top + height, top))
    return Scales(x, y, min_time, max_time, min_value, max_value)
