"""
Core mathematical functions for fractal iteration.

This module provides the screen-to-complex-plane mapping, the shared
bounded escape-time loop used by every algorithm, and a few quick
Mandelbrot helpers for point queries and boundary sampling.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple
import logging

from .config import FractalConfig

logger = logging.getLogger(__name__)

# Height of the imaginary range shown at zoom 1 ([-2, 2])
BASE_RANGE = 4.0


class PlaneBounds(NamedTuple):
    """Rectangular region of the complex plane."""
    min_real: float
    max_real: float
    min_imag: float
    max_imag: float


def calculate_bounds(config: FractalConfig) -> PlaneBounds:
    """
    Calculate the complex plane bounds shown by a configuration.

    The imaginary span is ``4 / zoom``; the real span is scaled by the image
    aspect ratio so non-square images are not distorted. Both spans are
    centered on ``(center_x, center_y)``.

    Args:
        config: Fractal configuration

    Returns:
        PlaneBounds for the viewport
    """
    imaginary_range = BASE_RANGE / config.zoom
    real_range = imaginary_range * (config.width / config.height)

    return PlaneBounds(
        min_real=config.center_x - real_range / 2,
        max_real=config.center_x + real_range / 2,
        min_imag=config.center_y - imaginary_range / 2,
        max_imag=config.center_y + imaginary_range / 2,
    )


class ComplexPlane:
    """Represents a complex plane region with coordinate mapping utilities."""

    def __init__(self, bounds: PlaneBounds, width: int, height: int):
        """
        Initialize complex plane bounds and resolution.

        Args:
            bounds: Real and imaginary extents
            width, height: Image resolution in pixels
        """
        self.bounds = bounds
        self.width = width
        self.height = height

        # Calculate scaling factors
        self.real_step = (bounds.max_real - bounds.min_real) / width
        self.imag_step = (bounds.max_imag - bounds.min_imag) / height

    @classmethod
    def from_config(cls, config: FractalConfig) -> "ComplexPlane":
        """Create the plane shown by a configuration."""
        return cls(calculate_bounds(config), config.width, config.height)

    def pixel_to_complex(self, px: int, py: int) -> complex:
        """Convert pixel coordinates to complex number. Screen y grows downward."""
        real = self.bounds.min_real + px * self.real_step
        imag = self.bounds.max_imag - py * self.imag_step
        return complex(real, imag)

    def complex_to_pixel(self, c: complex) -> Tuple[int, int]:
        """Convert complex number to pixel coordinates."""
        px = int((c.real - self.bounds.min_real) / self.real_step)
        py = int((self.bounds.max_imag - c.imag) / self.imag_step)
        return px, py

    def __repr__(self) -> str:
        b = self.bounds
        return (f"ComplexPlane([{b.min_real:.6f}, {b.max_real:.6f}] x "
                f"[{b.min_imag:.6f}, {b.max_imag:.6f}], {self.width}x{self.height})")


class ConvergenceType(str, Enum):
    """How an orbit ended."""
    ESCAPED = "escaped"
    MAX_ITERATIONS = "max_iterations"
    CONVERGED = "converged"


@dataclass(frozen=True)
class IterationResult:
    """Container for the outcome of iterating a single point."""

    iterations: int
    escaped: bool
    final_z: Optional[complex] = None
    convergence_type: ConvergenceType = ConvergenceType.MAX_ITERATIONS
    metadata: Dict[str, Any] = field(default_factory=dict)


def escape_time(z0: complex, step: Callable[[complex], complex],
                max_iterations: int, escape_radius: float = 2.0,
                metadata: Optional[Dict[str, Any]] = None) -> IterationResult:
    """
    Run a bounded escape-time iteration.

    The escape condition ``|z|^2 > escape_radius^2`` is checked before every
    step, so a starting value outside the radius escapes with 0 iterations.

    Args:
        z0: Starting value
        step: Function mapping z_n to z_{n+1}
        max_iterations: Maximum number of steps
        escape_radius: Radius for escape condition
        metadata: Extra data attached to the result

    Returns:
        IterationResult for the orbit
    """
    escape_radius_sq = escape_radius * escape_radius
    metadata = metadata or {}
    z = z0
    iterations = 0

    while iterations < max_iterations:
        if z.real * z.real + z.imag * z.imag > escape_radius_sq:
            return IterationResult(iterations, True, z, ConvergenceType.ESCAPED, metadata)
        z = step(z)
        iterations += 1

    return IterationResult(iterations, False, z, ConvergenceType.MAX_ITERATIONS, metadata)


def mandelbrot_iteration(cx: float, cy: float, max_iterations: int,
                         escape_radius: float = 2.0) -> int:
    """
    Count Mandelbrot iterations for a point before it escapes.

    Args:
        cx: Real part of c
        cy: Imaginary part of c
        max_iterations: Maximum number of iterations
        escape_radius: Escape radius threshold

    Returns:
        Number of iterations performed (max_iterations if the point stayed bounded)
    """
    x = 0.0
    y = 0.0
    iteration = 0
    escape_radius_sq = escape_radius * escape_radius

    while iteration < max_iterations and (x * x + y * y) < escape_radius_sq:
        x_temp = x * x - y * y + cx
        y = 2 * x * y + cy
        x = x_temp
        iteration += 1

    return iteration


def is_in_mandelbrot_set(cx: float, cy: float, max_iterations: int = 100) -> bool:
    """Quick membership test: True if the point never escaped."""
    return mandelbrot_iteration(cx, cy, max_iterations) >= max_iterations


@dataclass(frozen=True)
class BoundaryPoint:
    """Sampled point close to the Mandelbrot set boundary."""
    x: float
    y: float
    iterations: int


def calculate_set_boundary(config: FractalConfig, samples: int = 1000) -> List[BoundaryPoint]:
    """
    Sample the approximate boundary of the Mandelbrot set.

    A point counts as "on the boundary" when its iteration count lies strictly
    between 50% and 100% of ``max_iterations``. This is a heuristic with no
    accuracy guarantee.

    Args:
        config: Configuration providing the viewport and iteration bound
        samples: Grid resolution along each axis

    Returns:
        List of boundary points
    """
    if samples <= 0:
        raise ValueError("samples must be positive")

    bounds = calculate_bounds(config)
    max_iterations = config.max_iterations
    real_step = (bounds.max_real - bounds.min_real) / samples
    imag_step = (bounds.max_imag - bounds.min_imag) / samples

    boundary_points = []
    for px in range(samples):
        for py in range(samples):
            cx = bounds.min_real + px * real_step
            cy = bounds.max_imag - py * imag_step

            iterations = mandelbrot_iteration(cx, cy, max_iterations)
            if max_iterations * 0.5 < iterations < max_iterations:
                boundary_points.append(BoundaryPoint(cx, cy, iterations))

    logger.debug(f"Boundary sampling kept {len(boundary_points)} of {samples * samples} points")
    return boundary_points
