"""Pytest configuration and fixtures."""

import pytest

from fractal_engine.core.config import FractalConfig, JuliaConfig
from fractal_engine.core.fractal_types import (
    BurningShip,
    FractalRegistry,
    JuliaSet,
    MandelbrotSet,
    create_default_registry,
)


@pytest.fixture
def registry() -> FractalRegistry:
    """Create an isolated registry with the built-in algorithms."""
    return create_default_registry()


@pytest.fixture
def small_config() -> FractalConfig:
    """Create a small Mandelbrot-style configuration."""
    return FractalConfig(width=16, height=12, max_iterations=30)


@pytest.fixture
def small_julia_config() -> JuliaConfig:
    """Create a small Julia configuration with an explicit constant."""
    return JuliaConfig(width=12, height=10, center_x=0.0, max_iterations=30,
                       julia_c=complex(-0.4, 0.6))


@pytest.fixture
def mandelbrot() -> MandelbrotSet:
    return MandelbrotSet()


@pytest.fixture
def julia() -> JuliaSet:
    return JuliaSet()


@pytest.fixture
def burning_ship() -> BurningShip:
    return BurningShip()
