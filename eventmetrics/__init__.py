"""Event/metric analytics engine."""

__version__ = "1.0.0"
