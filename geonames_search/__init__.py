"""Harvest GeoNames dumps into a Whoosh index and query it."""

__version__ = "0.3.0"
