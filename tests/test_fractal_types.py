"""Unit tests for the built-in fractal algorithms."""

import cmath

import pytest

from fractal_engine.core.config import FractalConfig, JuliaConfig
from fractal_engine.core.fractal_types import (
    DEFAULT_JULIA_C,
    JULIA_PRESETS,
    FractalAlgorithm,
    JuliaSet,
)
from fractal_engine.core.math_functions import ConvergenceType, mandelbrot_iteration


class TestMandelbrotSet:
    """Test Mandelbrot iteration."""

    def test_origin_is_inside(self, mandelbrot):
        result = mandelbrot.iterate(0j, FractalConfig())
        assert result.iterations == 100
        assert not result.escaped
        assert result.convergence_type == ConvergenceType.MAX_ITERATIONS

    def test_far_point_escapes(self, mandelbrot):
        """Test that c = 2 + 2i escapes after one step."""
        result = mandelbrot.iterate(2 + 2j, FractalConfig())
        assert result.iterations == 1
        assert result.escaped
        assert result.final_z == 2 + 2j
        assert result.convergence_type == ConvergenceType.ESCAPED

    def test_zero_iteration_bound(self, mandelbrot):
        result = mandelbrot.iterate(0.3 + 0.1j, FractalConfig(max_iterations=0))
        assert result.iterations == 0
        assert not result.escaped

    @pytest.mark.parametrize("point", [0.25 + 0.5j, -0.75 + 0.1j, -1.8 + 0j, 0.4 - 0.3j])
    def test_agrees_with_quick_helper(self, mandelbrot, point):
        config = FractalConfig(max_iterations=80)
        assert mandelbrot.iterate(point, config).iterations == \
            mandelbrot_iteration(point.real, point.imag, 80)

    def test_iterations_never_exceed_bound(self, mandelbrot):
        config = FractalConfig(max_iterations=17)
        for point in (0j, -1 + 0j, 0.3 + 0.5j, 1 + 1j):
            assert 0 <= mandelbrot.iterate(point, config).iterations <= 17

    def test_default_config(self, mandelbrot):
        assert mandelbrot.default_config.center_x == -0.5
        assert mandelbrot.default_config.color_palette == "rainbow"

    def test_describes_itself(self, mandelbrot):
        assert "z_0 = 0" in mandelbrot.get_description()


class TestJuliaSet:
    """Test Julia iteration and validation."""

    def test_uses_config_constant(self, julia):
        config = JuliaConfig(max_iterations=50, julia_c=complex(-0.4, 0.6))
        result = julia.iterate(0.1 + 0.1j, config)
        assert result.metadata["julia_c"] == complex(-0.4, 0.6)

    def test_missing_constant_uses_default(self, julia):
        """Test that iterating without a constant matches the default constant."""
        without = FractalConfig(max_iterations=60)
        explicit = JuliaConfig(max_iterations=60, julia_c=DEFAULT_JULIA_C)

        for point in (0j, 0.3 + 0.2j, -0.5 + 0.5j, 1.5 + 0j):
            assert julia.iterate(point, without).iterations == \
                julia.iterate(point, explicit).iterations

    def test_starts_at_point(self, julia):
        """Test that a start point outside the radius escapes immediately."""
        result = julia.iterate(3 + 0j, JuliaConfig(julia_c=0j))
        assert result.iterations == 0
        assert result.escaped

    def test_zero_constant(self, julia):
        config = JuliaConfig(max_iterations=40, julia_c=0j)
        assert not julia.iterate(0.5 + 0.5j, config).escaped
        assert julia.iterate(1.2 + 0j, config).escaped

    def test_validation(self, julia):
        assert julia.validate_config(julia.default_config)
        assert julia.validate_config(JuliaConfig(julia_c=(-0.75, 0.11)))

    @pytest.mark.parametrize("julia_c", [
        None,
        complex(float("nan"), 0.1),
        complex(0.1, float("inf")),
        "abc",
        True,
    ])
    def test_invalid_constants(self, julia, julia_c):
        assert not julia.validate_config(JuliaConfig(julia_c=julia_c))

    @pytest.mark.parametrize("julia_c", [{"real": 0.1}, "abc", True, [None, 1]])
    def test_malformed_constant_degrades_without_raising(self, julia, julia_c):
        """Test that iterating without validation never raises on a bad constant."""
        config = JuliaConfig(width=4, height=4, max_iterations=25, julia_c=julia_c)

        result = julia.iterate(0j, config)
        assert result.iterations == 25
        assert not result.escaped
        assert cmath.isnan(result.metadata["julia_c"])

        # Start values outside the radius still escape before the first step
        assert julia.iterate(3 + 0j, config).iterations == 0
        assert len(julia.generate_data(config)) == 4 * 4 * 4

    def test_base_config_is_invalid(self, julia):
        assert not julia.validate_config(FractalConfig())

    def test_presets(self):
        presets = JuliaSet.get_presets()
        assert presets == JULIA_PRESETS
        assert presets["dragon"] == DEFAULT_JULIA_C
        assert presets["rabbit"] == complex(-0.123, 0.745)
        presets["dragon"] = 0j
        assert JULIA_PRESETS["dragon"] == DEFAULT_JULIA_C


class TestBurningShip:
    """Test Burning Ship iteration."""

    def test_origin_never_escapes(self, burning_ship):
        result = burning_ship.iterate(0j, FractalConfig(max_iterations=64))
        assert result.iterations == 64
        assert not result.escaped

    @pytest.mark.parametrize("real", [-2.5, -1.9, -1.0, -0.5, 0.1, 0.25, 0.3, 1.0])
    def test_matches_mandelbrot_on_real_axis(self, burning_ship, mandelbrot, real):
        """Test that both agree for real c, where folding does not change the square."""
        config = FractalConfig(max_iterations=50)
        point = complex(real, 0.0)
        assert burning_ship.iterate(point, config).iterations == \
            mandelbrot.iterate(point, config).iterations

    def test_differs_from_mandelbrot(self, burning_ship, mandelbrot):
        """Test that the fold changes the orbit for a point with negative parts."""
        config = FractalConfig(max_iterations=100)
        samples = [complex(x / 10, y / 10) for x in range(-20, 10) for y in range(-15, 15)]
        assert any(
            burning_ship.iterate(c, config).iterations != mandelbrot.iterate(c, config).iterations
            for c in samples
        )

    def test_default_config(self, burning_ship):
        config = burning_ship.default_config
        assert (config.center_x, config.center_y) == (-0.5, -0.6)
        assert config.color_palette == "fire"


@pytest.mark.parametrize("point", [0j, 2 + 2j, -0.7 + 0.3j, 10 + 0j])
def test_zero_iteration_bound_for_every_algorithm(registry, point):
    """Test that no algorithm iterates past a zero bound, even for escaping points."""
    for algorithm_id in registry.ids():
        algorithm = registry.get_algorithm(algorithm_id)
        config = algorithm.default_config.with_overrides(max_iterations=0)
        assert algorithm.iterate(point, config).iterations == 0


class TestValidation:
    """Test the shared configuration validation."""

    def test_defaults_are_valid(self, mandelbrot, burning_ship):
        assert mandelbrot.validate_config(mandelbrot.default_config)
        assert burning_ship.validate_config(burning_ship.default_config)

    @pytest.mark.parametrize("changes", [
        {"width": 0},
        {"height": -5},
        {"width": 10.5},
        {"zoom": 0},
        {"zoom": -1.0},
        {"zoom": float("inf")},
        {"escape_radius": 0},
        {"max_iterations": 0},
        {"center_x": float("nan")},
        {"center_y": float("inf")},
    ])
    def test_invalid_values(self, mandelbrot, burning_ship, changes):
        config = FractalConfig().with_overrides(**changes)
        assert not mandelbrot.validate_config(config)
        assert not burning_ship.validate_config(config)


class TestCustomAlgorithm:
    """Test that new algorithms only need to provide iterate."""

    def test_subclass_reuses_pipeline(self, small_config):
        class Constant(FractalAlgorithm):
            id = 'constant'
            name = 'Constant'

            def iterate(self, point, config):
                from fractal_engine.core.math_functions import IterationResult
                return IterationResult(iterations=0, escaped=True)

        buffer = Constant().generate_data(small_config)
        assert len(buffer) == small_config.width * small_config.height * 4
        assert tuple(buffer[:4]) == (66, 30, 15, 255)
        assert repr(Constant()) == "Constant(id='constant')"

    def test_iterate_is_abstract(self):
        with pytest.raises(TypeError):
            FractalAlgorithm()
