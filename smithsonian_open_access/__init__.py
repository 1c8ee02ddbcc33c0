"""Smithsonian Open Access API integration."""

__version__ = "1.0.0"
