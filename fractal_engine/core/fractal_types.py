"""
Fractal algorithm definitions and the algorithm registry.

This module defines the shared algorithm contract and the built-in
escape-time fractals, providing a plugin-style architecture in which every
algorithm reuses one generation pipeline.
"""

import cmath
import math
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple, Any
import logging

import numpy as np

from .config import FractalConfig, JuliaConfig, ParameterSchema, has_julia_constant
from .exceptions import InvalidConfigurationError, UnknownAlgorithmError
from .math_functions import IterationResult, escape_time
from ..acceleration.parallel import generate_data_parallel
from ..rendering import coloring
from ..rendering.pipeline import generate_data

logger = logging.getLogger(__name__)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value > 0


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_positive_number(value: Any) -> bool:
    return _is_finite_number(value) and value > 0


_MAX_ITERATIONS_SCHEMA = ParameterSchema(
    key='max_iterations',
    label='Max Iterations',
    type='number',
    default=100,
    min=10,
    max=2000,
    step=10,
    description='Maximum number of iterations to test',
    group='computation',
)

_ESCAPE_RADIUS_SCHEMA = ParameterSchema(
    key='escape_radius',
    label='Escape Radius',
    type='number',
    default=2.0,
    min=1,
    max=10,
    step=0.1,
    description='Threshold for considering a point escaped',
    group='computation',
)


def _palette_schema(default: str) -> ParameterSchema:
    return ParameterSchema(
        key='color_palette',
        label='Color Palette',
        type='select',
        default=default,
        options=tuple((name, name.capitalize()) for name in coloring.list_palettes()),
        description='Color scheme for visualization',
        group='appearance',
    )


class FractalAlgorithm(ABC):
    """Abstract base class for fractal algorithms."""

    #: Unique identifier used by the registry
    id: str = ""
    #: Human-readable name
    name: str = ""
    description: str = ""
    default_config: FractalConfig = FractalConfig()
    parameter_schema: Tuple[ParameterSchema, ...] = ()

    @abstractmethod
    def iterate(self, point: complex, config: FractalConfig) -> IterationResult:
        """
        Iterate a single point of the complex plane.

        Args:
            point: Point to test
            config: Generation configuration

        Returns:
            IterationResult with escape information
        """

    def get_color(self, result: IterationResult, config: FractalConfig) -> Tuple[int, int, int]:
        """Map an iteration result to an RGB color."""
        return coloring.get_color(result.iterations, config.max_iterations, config.color_palette)

    def validate_config(self, config: FractalConfig) -> bool:
        """
        Check that a configuration can be rendered by this algorithm.

        Dimensions and iteration bound must be positive integers; zoom and
        escape radius positive finite numbers; the center finite.
        """
        return (
            _is_positive_int(config.width)
            and _is_positive_int(config.height)
            and _is_positive_int(config.max_iterations)
            and _is_positive_number(config.zoom)
            and _is_positive_number(config.escape_radius)
            and _is_finite_number(config.center_x)
            and _is_finite_number(config.center_y)
        )

    def generate_data(self, config: FractalConfig) -> np.ndarray:
        """Generate the RGBA pixel buffer for a configuration."""
        return generate_data(self, config)

    def get_description(self) -> str:
        """Get a description of this fractal type."""
        return f"{self.name} fractal"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r})"


class MandelbrotSet(FractalAlgorithm):
    """Mandelbrot set fractal implementation."""

    id = 'mandelbrot'
    name = 'Mandelbrot Set'
    description = 'Classic Mandelbrot fractal using the iteration z^2 + c'

    default_config = FractalConfig(
        width=800,
        height=600,
        center_x=-0.5,
        center_y=0.0,
        zoom=1.0,
        max_iterations=100,
        escape_radius=2.0,
        color_palette='rainbow',
    )

    parameter_schema = (
        _MAX_ITERATIONS_SCHEMA,
        _ESCAPE_RADIUS_SCHEMA,
        _palette_schema('rainbow'),
    )

    def iterate(self, point: complex, config: FractalConfig) -> IterationResult:
        """Compute Mandelbrot iterations: z0 = 0, z = z^2 + c."""
        c = point
        return escape_time(0j, lambda z: z * z + c,
                           config.max_iterations, config.escape_radius)

    def get_description(self) -> str:
        """Get description of Mandelbrot set."""
        return "Mandelbrot set: z_{n+1} = z_n^2 + c, where c is the complex coordinate and z_0 = 0"


# Default Julia constant ("dragon")
DEFAULT_JULIA_C = complex(-0.7269, 0.1889)

# Predefined interesting Julia set constants
JULIA_PRESETS: Dict[str, complex] = {
    'dragon': DEFAULT_JULIA_C,
    'airplane': complex(-0.75, 0.11),
    'spiral': complex(-0.4, 0.6),
    'dendrite': complex(0.0, 1.0),
    'rabbit': complex(-0.123, 0.745),
}


class JuliaSet(FractalAlgorithm):
    """Julia set fractal implementation."""

    id = 'julia'
    name = 'Julia Sets'
    description = 'Julia sets with customizable constant c parameter'

    default_config = JuliaConfig(
        width=800,
        height=600,
        center_x=0.0,
        center_y=0.0,
        zoom=1.0,
        max_iterations=100,
        escape_radius=2.0,
        color_palette='rainbow',
        julia_c=DEFAULT_JULIA_C,
    )

    parameter_schema = (
        _MAX_ITERATIONS_SCHEMA,
        _ESCAPE_RADIUS_SCHEMA,
        ParameterSchema(
            key='julia_c',
            label='Julia Constant (c)',
            type='complex',
            default=DEFAULT_JULIA_C,
            description='Constant c value for Julia set generation',
            group='fractal',
        ),
        _palette_schema('rainbow'),
    )

    @staticmethod
    def resolve_constant(config: FractalConfig) -> complex:
        """
        Get the Julia constant of a configuration.

        A missing constant resolves to the default one. A constant that is not
        a number resolves to NaN, so unvalidated configurations give
        degenerate output instead of raising.
        """
        if not has_julia_constant(config):
            return DEFAULT_JULIA_C

        julia_c = config.julia_c
        if isinstance(julia_c, numbers.Complex) and not isinstance(julia_c, bool):
            return complex(julia_c)
        return complex(math.nan, math.nan)

    def iterate(self, point: complex, config: FractalConfig) -> IterationResult:
        """Compute Julia iterations: z0 = point, z = z^2 + c for constant c."""
        c = self.resolve_constant(config)
        return escape_time(point, lambda z: z * z + c,
                           config.max_iterations, config.escape_radius,
                           metadata={'julia_c': c})

    def validate_config(self, config: FractalConfig) -> bool:
        """Validate base fields and require a finite Julia constant."""
        if not super().validate_config(config):
            return False

        if not has_julia_constant(config):
            return False

        julia_c = config.julia_c
        if not isinstance(julia_c, numbers.Complex) or isinstance(julia_c, bool):
            return False
        return cmath.isfinite(complex(julia_c))

    def get_description(self) -> str:
        """Get description of Julia set."""
        return ("Julia set: z_{n+1} = z_n^2 + c, where c is a constant "
                "and z_0 is the complex coordinate")

    @staticmethod
    def get_presets() -> Dict[str, complex]:
        """Get predefined interesting Julia constants."""
        return dict(JULIA_PRESETS)


class BurningShip(FractalAlgorithm):
    """Burning Ship fractal implementation."""

    id = 'burning-ship'
    name = 'Burning Ship'
    description = 'Burning Ship fractal using (|Re z| + i|Im z|)^2 + c'

    default_config = FractalConfig(
        width=800,
        height=600,
        center_x=-0.5,
        center_y=-0.6,
        zoom=1.0,
        max_iterations=100,
        escape_radius=2.0,
        color_palette='fire',
    )

    parameter_schema = (
        _MAX_ITERATIONS_SCHEMA,
        _palette_schema('fire'),
    )

    def iterate(self, point: complex, config: FractalConfig) -> IterationResult:
        """Compute Burning Ship iterations."""
        c = point

        def step(z: complex) -> complex:
            # Fold into the first quadrant before squaring
            folded = complex(abs(z.real), abs(z.imag))
            return folded * folded + c

        return escape_time(0j, step, config.max_iterations, config.escape_radius)

    def get_description(self) -> str:
        """Get description of Burning Ship fractal."""
        return "Burning Ship: z_{n+1} = (|Re(z_n)| + i|Im(z_n)|)^2 + c"


@dataclass(frozen=True)
class AlgorithmInfo:
    """Algorithm metadata for building a dynamic UI."""
    id: str
    name: str
    description: str
    category: str  # 'escape_time', 'newton', 'ifs' or 'other'
    default_config: FractalConfig
    parameter_schema: Tuple[ParameterSchema, ...]


class FractalRegistry:
    """Registry for managing available fractal algorithms."""

    def __init__(self):
        self._algorithms: Dict[str, FractalAlgorithm] = {}
        self._default_id: Optional[str] = None

    def register(self, algorithm: FractalAlgorithm) -> None:
        """
        Register a fractal algorithm.

        The first registered algorithm becomes the default.

        Args:
            algorithm: Algorithm instance, stored under its id
        """
        if not isinstance(algorithm, FractalAlgorithm):
            raise TypeError("Fractal algorithm must inherit from FractalAlgorithm")

        self._algorithms[algorithm.id] = algorithm
        if self._default_id is None:
            self._default_id = algorithm.id
        logger.info(f"Registered fractal algorithm: {algorithm.id}")

    def get_algorithm(self, algorithm_id: str) -> Optional[FractalAlgorithm]:
        """Get algorithm by id, or None if it is not registered."""
        return self._algorithms.get(algorithm_id)

    def get_default_algorithm(self) -> Optional[FractalAlgorithm]:
        """Get the first registered algorithm."""
        if self._default_id is None:
            return None
        return self._algorithms[self._default_id]

    def ids(self) -> List[str]:
        return list(self._algorithms.keys())

    def __contains__(self, algorithm_id: str) -> bool:
        return algorithm_id in self._algorithms

    def __len__(self) -> int:
        return len(self._algorithms)

    def get_all_algorithms(self) -> List[AlgorithmInfo]:
        """Get metadata for every registered algorithm."""
        return [
            AlgorithmInfo(
                id=algorithm.id,
                name=algorithm.name,
                description=algorithm.description,
                category=self._categorize(algorithm),
                default_config=algorithm.default_config,
                parameter_schema=algorithm.parameter_schema,
            )
            for algorithm in self._algorithms.values()
        ]

    def generate_fractal(self, algorithm_id: str, config: FractalConfig,
                         num_workers: int = 1) -> np.ndarray:
        """
        Generate fractal data using the specified algorithm.

        Args:
            algorithm_id: Algorithm to use
            config: Generation configuration
            num_workers: Split rows across this many threads when greater than 1

        Returns:
            RGBA pixel buffer

        Raises:
            UnknownAlgorithmError: If the id is not registered
            InvalidConfigurationError: If the algorithm rejects the configuration
        """
        algorithm = self._require_valid(algorithm_id, config)
        if num_workers > 1:
            return generate_data_parallel(algorithm, config, num_workers)
        return algorithm.generate_data(config)

    def iterate_point(self, algorithm_id: str, point: complex,
                      config: FractalConfig) -> IterationResult:
        """Iterate a single point with the specified algorithm."""
        algorithm = self._require_valid(algorithm_id, config)
        return algorithm.iterate(point, config)

    def get_merged_config(self, algorithm_id: str,
                          partial_config: Optional[Mapping[str, Any]] = None) -> FractalConfig:
        """
        Get the algorithm's default configuration overridden by the given fields.

        This is a shallow, field-by-field merge.
        """
        algorithm = self._require(algorithm_id)
        overrides = dict(partial_config or {})
        default = algorithm.default_config

        unknown = sorted(set(overrides) - set(default.field_names()))
        if unknown:
            raise InvalidConfigurationError(
                f"Unknown configuration fields for algorithm '{algorithm_id}': {', '.join(unknown)}",
                algorithm_id=algorithm_id,
            )
        return default.with_overrides(**overrides)

    def _require(self, algorithm_id: str) -> FractalAlgorithm:
        algorithm = self._algorithms.get(algorithm_id)
        if algorithm is None:
            raise UnknownAlgorithmError(algorithm_id, self._algorithms.keys())
        return algorithm

    def _require_valid(self, algorithm_id: str, config: FractalConfig) -> FractalAlgorithm:
        algorithm = self._require(algorithm_id)
        if not algorithm.validate_config(config):
            raise InvalidConfigurationError(
                f"Invalid configuration for algorithm: {algorithm_id}",
                algorithm_id=algorithm_id,
            )
        return algorithm

    @staticmethod
    def _categorize(algorithm: FractalAlgorithm) -> str:
        # Coarse categorization based on the algorithm id
        if 'newton' in algorithm.id:
            return 'newton'
        if 'ifs' in algorithm.id or 'barnsley' in algorithm.id:
            return 'ifs'
        return 'escape_time'


def create_default_registry() -> FractalRegistry:
    """Create a registry with all built-in algorithms."""
    registry = FractalRegistry()
    registry.register(MandelbrotSet())
    registry.register(JuliaSet())
    registry.register(BurningShip())
    return registry


# Global registry
_default_registry = None


def get_default_registry() -> FractalRegistry:
    """Get the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = create_default_registry()
    return _default_registry
