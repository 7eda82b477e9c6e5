"""Core configuration, math and algorithm definitions."""
