"""Shapegen: Go client generation from service shape models."""

__version__ = "0.1.0"
