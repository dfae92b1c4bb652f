"""Hazard record loaders."""

from .csv_records import load_hazard_records

__all__ = ["load_hazard_records"]
