"""Curricula: a curated directory of educational resources."""

__version__ = "0.1.0"
