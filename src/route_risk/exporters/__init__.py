"""Exporters for zone analysis results."""

from .gpx import export_zones_to_gpx

__all__ = ["export_zones_to_gpx"]
