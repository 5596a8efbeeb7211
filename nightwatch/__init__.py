"""Nightwatch - a night-shift survival simulation core."""

__version__ = "0.1.0"
