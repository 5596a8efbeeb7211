"""Utilities."""

from .threading_utils import NightRunner, run_in_background

__all__ = ["NightRunner", "run_in_background"]
