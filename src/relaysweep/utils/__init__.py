"""Utility modules for relaysweep."""

from relaysweep.utils.units import format_units

__all__ = ["format_units"]
