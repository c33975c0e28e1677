"""
Graph datasets and the registry they are selected from.

A registry maps a dataset name to a raw entry shaped like the site's iframe
YAML:

    graphs:
      temps:
        title: Temperature
        points: [{time: 1577836800, value: 3.5}, ...]
        notes: [{time: 1577840400, text: Storm}]
        range: [-10, 40]
        units: °C

Entries are only validated when they are resolved, so one broken graph does
not stop the others from rendering.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple
from urllib.parse import urlsplit

import yaml

from .errors import DatasetNotFoundError, MalformedPointError
from .timefmt import MAX_TIME, MIN_TIME

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    time: int  # seconds since the Unix epoch, UTC
    value: float


@dataclass(frozen=True)
class Annotation:
    time: int  # seconds since the Unix epoch, UTC
    text: str


@dataclass(frozen=True)
class Dataset:
    name: str
    title: str
    points: Tuple[Point, ...]
    notes: Tuple[Annotation, ...] = ()
    units: Optional[str] = None
    value_range: Optional[Tuple[float, float]] = None

    @classmethod
    def from_dict(cls, name: str, raw: Any) -> 'Dataset':
        """Validate a raw registry entry and build a Dataset from it."""
        if not isinstance(raw, Mapping):
            raise MalformedPointError(f'{name}: entry must be a mapping, got {type(raw).__name__}')

        title = raw.get('title') or ''
        if not isinstance(title, str):
            raise MalformedPointError(f'{name}: title must be a string')

        raw_points = raw.get('points')
        if not isinstance(raw_points, list) or not raw_points:
            raise MalformedPointError(f'{name}: points must be a non-empty list')
        points = tuple(_parse_point(name, i, p) for i, p in enumerate(raw_points))
        for i in range(1, len(points)):
            if points[i].time < points[i - 1].time:
                raise MalformedPointError(
                    f'{name}: points[{i}] at {points[i].time} precedes points[{i - 1}] at {points[i - 1].time}')

        raw_notes = raw.get('notes')
        if raw_notes is None:
            raw_notes = []
        if not isinstance(raw_notes, list):
            raise MalformedPointError(f'{name}: notes must be a list')
        notes = tuple(_parse_note(name, i, n) for i, n in enumerate(raw_notes))

        units = raw.get('units')
        if units is not None and not isinstance(units, str):
            raise MalformedPointError(f'{name}: units must be a string')

        value_range = _parse_range(name, raw.get('range'))

        return cls(name=name, title=title, points=points, notes=notes,
                   units=units or None, value_range=value_range)


def _parse_time(name: str, where: str, raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise MalformedPointError(f'{name}: {where}.time must be an integer epoch time, got {raw!r}')
    if isinstance(raw, float):
        if not raw.is_integer():
            raise MalformedPointError(f'{name}: {where}.time must be an integer epoch time, got {raw!r}')
        raw = int(raw)
    if not MIN_TIME <= raw <= MAX_TIME:
        raise MalformedPointError(f'{name}: {where}.time {raw} is outside years 1 to 9998')
    return raw


def _parse_number(name: str, where: str, raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise MalformedPointError(f'{name}: {where} must be a finite number, got {raw!r}')
    try:
        finite = math.isfinite(float(raw))
    except OverflowError:
        finite = False
    if not finite:
        raise MalformedPointError(f'{name}: {where} must be a finite number, got {raw!r}')
    return raw


def _parse_point(name: str, index: int, raw: Any) -> Point:
    where = f'points[{index}]'
    if not isinstance(raw, Mapping):
        raise MalformedPointError(f'{name}: {where} must be a mapping')
    if 'time' not in raw or 'value' not in raw:
        raise MalformedPointError(f'{name}: {where} needs both time and value')
    return Point(time=_parse_time(name, where, raw['time']),
                 value=_parse_number(name, f'{where}.value', raw['value']))


def _parse_note(name: str, index: int, raw: Any) -> Annotation:
    where = f'notes[{index}]'
    if not isinstance(raw, Mapping):
        raise MalformedPointError(f'{name}: {where} must be a mapping')
    if 'time' not in raw or 'text' not in raw:
        raise MalformedPointError(f'{name}: {where} needs both time and text')
    text = raw['text']
    if not isinstance(text, str):
        raise MalformedPointError(f'{name}: {where}.text must be a string')
    return Annotation(time=_parse_time(name, where, raw['time']), text=text)


def _parse_range(name: str, raw: Any) -> Optional[Tuple[float, float]]:
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise MalformedPointError(f'{name}: range must be [min, max]')
    lo = _parse_number(name, 'range[0]', raw[0])
    hi = _parse_number(name, 'range[1]', raw[1])
    if lo > hi:
        raise MalformedPointError(f'{name}: range min {lo} exceeds max {hi}')
    return (lo, hi)


def name_from_query(location: str) -> str:
    """Return the dataset name carried by a URL's query string.

    Mirrors what a browser page reads from location.search: everything after
    the '?' and before any '#', without percent-decoding.
    """
    if '?' not in location:
        return ''
    return urlsplit(location).query


class DatasetRegistry(Mapping):
    """Read-only mapping of dataset name to its raw registry entry."""

    def __init__(self, raw: Mapping[str, Any]):
        self._raw: Dict[str, Any] = dict(raw)
        self._resolved: Dict[str, Dataset] = {}

    def __getitem__(self, name: str) -> Any:
        return self._raw[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._raw)

    def __len__(self) -> int:
        return len(self._raw)

    def names(self) -> List[str]:
        return sorted(self._raw)

    def resolve(self, name: str) -> Dataset:
        """Return the validated dataset called `name`."""
        if name in self._resolved:
            return self._resolved[name]
        if name not in self._raw:
            raise DatasetNotFoundError(name)
        dataset = Dataset.from_dict(name, self._raw[name])
        _logger.debug('Resolved dataset %r: %d points, %d notes',
                      name, len(dataset.points), len(dataset.notes))
        self._resolved[name] = dataset
        return dataset


def parse_registry(doc: Any) -> DatasetRegistry:
    """Build a registry from a parsed YAML/JSON document."""
    if isinstance(doc, Mapping) and 'graphs' in doc:
        wrapped = doc['graphs']
        # A dataset that happens to be named 'graphs' has points; the wrapper does not.
        if wrapped is None or (isinstance(wrapped, Mapping) and 'points' not in wrapped):
            doc = wrapped
    if doc is None:
        doc = {}
    if not isinstance(doc, Mapping):
        raise MalformedPointError(f'registry must be a mapping of name to dataset, got {type(doc).__name__}')
    for key in doc:
        if not isinstance(key, str):
            raise MalformedPointError(f'registry key {key!r} is not a string')
    return DatasetRegistry(doc)


def load_registry(path: str) -> DatasetRegistry:
    """Load a registry from a YAML or JSON file."""
    text = Path(path).read_text(encoding='utf-8')
    registry = parse_registry(yaml.safe_load(text))
    _logger.info('Loaded %d graph(s) from %s', len(registry), path)
    return registry
