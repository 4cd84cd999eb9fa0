"""Replicates published content entries into other locales through a translation provider."""

__version__ = "0.1.0"
