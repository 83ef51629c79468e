"""Cityscope: a neighborhood social feed."""

__version__ = "1.0.0"
