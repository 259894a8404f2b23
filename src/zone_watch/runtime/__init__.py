"""Telemetry and configuration shared across zone_watch components."""

from . import telemetry
from .config import Settings

__all__ = ["Settings", "telemetry"]
