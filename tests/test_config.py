"""Unit tests for configuration objects."""

import dataclasses

import pytest

from fractal_engine.core.config import (
    INTERESTING_POINTS,
    FractalConfig,
    JuliaConfig,
    coerce_complex,
    has_julia_constant,
)
from fractal_engine.core.exceptions import InvalidConfigurationError


class TestFractalConfig:
    """Test the base configuration value object."""

    def test_defaults(self):
        """Test default configuration values."""
        config = FractalConfig()
        assert config.width == 800
        assert config.height == 600
        assert config.center_x == -0.5
        assert config.center_y == 0.0
        assert config.zoom == 1.0
        assert config.max_iterations == 100
        assert config.escape_radius == 2.0
        assert config.color_palette == "rainbow"

    def test_is_immutable(self):
        """Test that configurations cannot be mutated."""
        config = FractalConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.width = 10

    def test_with_overrides_copies(self):
        """Test that overrides produce a new configuration."""
        config = FractalConfig()
        derived = config.with_overrides(width=50, zoom=4.0)

        assert derived.width == 50
        assert derived.zoom == 4.0
        assert derived.height == config.height
        assert config.width == 800

    def test_with_overrides_rejects_unknown_fields(self):
        """Test that unknown fields are rejected."""
        with pytest.raises(InvalidConfigurationError):
            FractalConfig().with_overrides(julia_c=1j)

    def test_invalid_values_can_be_constructed(self):
        """Test that validation is left to the algorithms."""
        config = FractalConfig(width=0, height=-1, zoom=0)
        assert config.width == 0

    def test_from_dict(self):
        """Test creating a configuration from a dictionary."""
        config = FractalConfig.from_dict({"width": 10, "height": 5, "color_palette": "fire"})
        assert config == FractalConfig(width=10, height=5, color_palette="fire")
        assert FractalConfig.from_dict(config.to_dict()) == config

    def test_from_dict_rejects_unknown_fields(self):
        with pytest.raises(InvalidConfigurationError):
            FractalConfig.from_dict({"widht": 10})

    def test_aspect_ratio(self):
        assert FractalConfig(width=800, height=400).aspect_ratio == 2.0


class TestJuliaConfig:
    """Test the Julia configuration extension."""

    def test_constant_absent_by_default(self):
        config = JuliaConfig()
        assert config.julia_c is None
        assert not has_julia_constant(config)

    def test_pair_is_coerced(self):
        """Test that (real, imag) pairs become complex numbers."""
        config = JuliaConfig(julia_c=(-0.4, 0.6))
        assert config.julia_c == complex(-0.4, 0.6)
        assert has_julia_constant(config)

    def test_mapping_is_coerced(self):
        config = JuliaConfig(julia_c={"real": 0, "imag": 1})
        assert config.julia_c == 1j

    def test_coercion_survives_overrides(self):
        config = JuliaConfig().with_overrides(julia_c=[-0.123, 0.745])
        assert config.julia_c == complex(-0.123, 0.745)

    def test_to_dict_is_json_friendly(self):
        data = JuliaConfig(julia_c=complex(-0.75, 0.11)).to_dict()
        assert data["julia_c"] == [-0.75, 0.11]
        assert JuliaConfig.from_dict(data).julia_c == complex(-0.75, 0.11)

    def test_base_config_has_no_constant(self):
        assert not has_julia_constant(FractalConfig())


class TestCoerceComplex:
    """Test complex coercion helper."""

    def test_uninterpretable_values_are_unchanged(self):
        assert coerce_complex("abc") == "abc"
        assert coerce_complex(("a", 1)) == ("a", 1)
        assert coerce_complex({"real": None, "imag": 1}) == {"real": None, "imag": 1}

    def test_complex_passthrough(self):
        assert coerce_complex(1 + 2j) == 1 + 2j
        assert coerce_complex(None) is None

    def test_nan_is_kept(self):
        value = coerce_complex((float("nan"), 0.1))
        assert isinstance(value, complex)
        assert value.real != value.real


class TestInterestingPoints:
    """Test predefined viewports."""

    def test_known_locations(self):
        assert set(INTERESTING_POINTS) == {"classic", "elephant", "seahorse", "lightning", "spiral"}

    def test_apply_to(self):
        """Test moving a configuration to a named location."""
        config = INTERESTING_POINTS["elephant"].apply_to(FractalConfig(width=10, height=10))
        assert config.center_x == -0.7269
        assert config.center_y == 0.1889
        assert config.zoom == 100.0
        assert config.width == 10
