"""Palettes, pixel pipeline and image export."""
