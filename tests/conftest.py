"""Pytest fixtures shared across the graphframe tests."""

import calendar

import pytest
import yaml

from graphframe.dataset import parse_registry


def utc(*fields) -> int:
    """Epoch seconds for a UTC (year, month, day[, hour, minute, second])."""
    fields = tuple(fields) + (0,) * (6 - len(fields))
    return calendar.timegm(fields)


@pytest.fixture
def registry_doc():
    """Raw registry in the iframe YAML shape, with a mix of good and bad graphs."""
    return {
        'graphs': {
            'hourly': {
                'title': 'Snow depth',
                'points': [{'time': 0, 'value': 0}, {'time': 3600, 'value': 10}],
                'notes': [{'time': 1800, 'text': 'Plow'}],
                'units': 'cm',
            },
            'yearly': {
                'title': 'Elevation gain',
                'points': [
                    {'time': utc(2019, 6, 15), 'value': 12},
                    {'time': utc(2020, 8, 1), 'value': 15.5},
                    {'time': utc(2022, 3, 1), 'value': 20},
                ],
                'range': [0, 100],
            },
            'broken': {
                'title': 'Broken',
                'points': [{'time': 'noon', 'value': 1}],
            },
        },
    }


@pytest.fixture
def registry(registry_doc):
    return parse_registry(registry_doc)


@pytest.fixture
def registry_file(tmp_path, registry_doc):
    """Registry written to a YAML file, minus the graph that fails validation."""
    doc = {'graphs': {k: v for k, v in registry_doc['graphs'].items() if k != 'broken'}}
    path = tmp_path / 'graphs.yaml'
    path.write_text(yaml.safe_dump(doc), encoding='utf-8')
    return path
