"""Spectral: an in-memory catalog of observed spectral objects."""

__version__ = "0.1.0"
