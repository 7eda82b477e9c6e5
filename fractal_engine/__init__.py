"""
Escape-time fractal evaluation and rendering engine.

This library maps a viewport configuration onto the complex plane, iterates
every pixel with a pluggable fractal algorithm (Mandelbrot, Julia, Burning
Ship, or your own) and colors the result into an RGBA pixel buffer.

Key Features:
- Shared generation pipeline for every registered algorithm
- Palettes interpolated from a few control colors
- Explicit algorithm registry with config merging and validation
- Row-partitioned rendering on thread or process pools

Example usage:
    >>> from fractal_engine import create_default_registry
    >>> registry = create_default_registry()
    >>> config = registry.get_merged_config('mandelbrot', {'width': 320, 'height': 240})
    >>> buffer = registry.generate_fractal('mandelbrot', config)
    >>> len(buffer) == 320 * 240 * 4
    True
"""

__version__ = "1.0.0"
__author__ = "Fractal Engine Team"

from fractal_engine.core.config import FractalConfig, JuliaConfig, has_julia_constant, INTERESTING_POINTS
from fractal_engine.core.exceptions import (
    FractalEngineError,
    InvalidConfigurationError,
    UnknownAlgorithmError,
)
from fractal_engine.core.math_functions import (
    ComplexPlane,
    ConvergenceType,
    IterationResult,
    PlaneBounds,
    calculate_bounds,
    calculate_set_boundary,
    is_in_mandelbrot_set,
    mandelbrot_iteration,
)
from fractal_engine.core.fractal_types import (
    FractalAlgorithm,
    MandelbrotSet,
    JuliaSet,
    BurningShip,
    FractalRegistry,
    JULIA_PRESETS,
    create_default_registry,
    get_default_registry,
)
from fractal_engine.rendering.coloring import (
    Palette,
    get_color,
    get_color_hex,
    hex_to_rgb,
    rgb_to_hex,
)
from fractal_engine.rendering.pipeline import generate_data
from fractal_engine.acceleration.parallel import ParallelRenderer, generate_data_parallel

__all__ = [
    "FractalConfig",
    "JuliaConfig",
    "has_julia_constant",
    "INTERESTING_POINTS",
    "FractalEngineError",
    "InvalidConfigurationError",
    "UnknownAlgorithmError",
    "ComplexPlane",
    "ConvergenceType",
    "IterationResult",
    "PlaneBounds",
    "calculate_bounds",
    "calculate_set_boundary",
    "is_in_mandelbrot_set",
    "mandelbrot_iteration",
    "FractalAlgorithm",
    "MandelbrotSet",
    "JuliaSet",
    "BurningShip",
    "FractalRegistry",
    "JULIA_PRESETS",
    "create_default_registry",
    "get_default_registry",
    "Palette",
    "get_color",
    "get_color_hex",
    "hex_to_rgb",
    "rgb_to_hex",
    "generate_data",
    "ParallelRenderer",
    "generate_data_parallel",
]
