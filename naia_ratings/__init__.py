"""NAIA basketball ratings, rankings and bracket projection."""

__version__ = "0.1.0"
