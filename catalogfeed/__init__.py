"""Catalog Feed API.

Extracts a flat, aggregator-ready product feed from a hierarchical
product/variation catalog.
"""

__version__ = "1.3.2"
