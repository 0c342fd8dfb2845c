"""Kernel k-means clustering, plain and with Elkan's bounds, plus seeding helpers and an experiment runner."""

__version__ = "0.1.0"

__all__ = ["__version__"]