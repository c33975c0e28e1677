"""Exceptions raised while resolving, scaling and rendering a graph."""


class GraphError(Exception):
    """Base class for every graphframe failure."""


class DatasetNotFoundError(GraphError, KeyError):
    """The requested dataset name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f'Data not found for "{self.name}"'


class MalformedPointError(GraphError, ValueError):
    """A dataset entry is missing a required field or has a bad value."""


class DegenerateScaleError(GraphError, ValueError):
    """A scale has a zero-width domain and cannot be inverted."""
