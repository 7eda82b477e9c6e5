"""Partitioned rendering backends."""
