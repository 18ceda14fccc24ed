"""Mandalart planner - AI-generated 9x9 goal grids."""

__version__ = "0.1.0"
