"""Duplicate footage consolidation for compositing projects."""

__version__ = "0.1.0"
