"""
Configuration objects for fractal generation.

A configuration is an immutable value describing one generation call: image
size, viewport (center and zoom), iteration bound, escape radius and palette.
Algorithm-specific fields live on subclasses (see ``JuliaConfig``) and are
resolved through capability checks such as ``has_julia_constant``.
"""

import numbers
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from .exceptions import InvalidConfigurationError


def coerce_complex(value: Any) -> Any:
    """
    Convert a ``(real, imag)`` pair or ``{"real", "imag"}`` mapping to complex.

    Values that cannot be interpreted are returned unchanged so that
    validation can reject them later.
    """
    if isinstance(value, Mapping):
        parts = (value.get("real"), value.get("imag"))
    elif isinstance(value, (tuple, list)) and len(value) == 2:
        parts = tuple(value)
    else:
        return value

    if all(isinstance(p, numbers.Real) and not isinstance(p, bool) for p in parts):
        return complex(parts[0], parts[1])
    return value


@dataclass(frozen=True)
class FractalConfig:
    """Base configuration shared by every fractal algorithm."""

    # Image dimensions
    width: int = 800
    height: int = 600

    # Complex plane navigation
    center_x: float = -0.5
    center_y: float = 0.0
    zoom: float = 1.0

    # Rendering settings
    max_iterations: int = 100
    escape_radius: float = 2.0
    color_palette: str = "rainbow"

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height."""
        return self.width / self.height

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def _check_fields(cls, names) -> None:
        unknown = sorted(set(names) - set(cls.field_names()))
        if unknown:
            raise InvalidConfigurationError(
                f"Unknown configuration fields for {cls.__name__}: {', '.join(unknown)}"
            )

    def with_overrides(self, **changes: Any) -> "FractalConfig":
        """
        Return a copy of this configuration with the given fields replaced.

        Args:
            **changes: Field values to override

        Returns:
            New configuration of the same type

        Raises:
            InvalidConfigurationError: If a field name is not part of this configuration
        """
        self._check_fields(changes)
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FractalConfig":
        """Create configuration from dictionary."""
        cls._check_fields(data)
        return cls(**data)


@dataclass(frozen=True)
class JuliaConfig(FractalConfig):
    """Configuration extended with the Julia constant ``c``."""

    julia_c: Optional[complex] = None

    def __post_init__(self):
        object.__setattr__(self, "julia_c", coerce_complex(self.julia_c))

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if isinstance(self.julia_c, complex):
            data["julia_c"] = [self.julia_c.real, self.julia_c.imag]
        return data


def has_julia_constant(config: FractalConfig) -> bool:
    """Check whether a configuration carries a Julia constant."""
    return getattr(config, "julia_c", None) is not None


@dataclass(frozen=True)
class ParameterSchema:
    """Parameter definition used to build parameter forms in a UI."""

    key: str
    label: str
    type: str  # 'number', 'complex', 'select', 'boolean' or 'color'
    default: Any
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    options: Tuple[Tuple[str, str], ...] = ()
    description: Optional[str] = None
    group: Optional[str] = None


@dataclass(frozen=True)
class InterestingPoint:
    """A named viewport worth visiting."""

    center_x: float
    center_y: float
    zoom: float
    description: str

    def apply_to(self, config: FractalConfig) -> FractalConfig:
        """Move a configuration's viewport to this location."""
        return config.with_overrides(
            center_x=self.center_x, center_y=self.center_y, zoom=self.zoom
        )


INTERESTING_POINTS: Dict[str, InterestingPoint] = {
    "classic": InterestingPoint(-0.5, 0.0, 1.0, "Classic view of the entire Mandelbrot set"),
    "elephant": InterestingPoint(-0.7269, 0.1889, 100.0, "Elephant Valley"),
    "seahorse": InterestingPoint(-0.7463, 0.1102, 1000.0, "Seahorse Valley"),
    "lightning": InterestingPoint(-1.25066, 0.02012, 2000.0, "Lightning patterns"),
    "spiral": InterestingPoint(-0.8, 0.156, 500.0, "Spiral patterns"),
}
