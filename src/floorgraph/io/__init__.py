"""Floorplan document records and JSON file handling."""
