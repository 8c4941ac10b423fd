"""Viral Eats MY — map-first restaurant discovery API for Malaysia."""

__version__ = "1.0.0"
