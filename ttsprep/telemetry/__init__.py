"""Telemetry helpers.

This package emits deterministic phase events for preparation runs.
"""

from .logger import RunLogger

__all__ = ["RunLogger"]
