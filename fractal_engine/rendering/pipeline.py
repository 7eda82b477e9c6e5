"""
Pixel generation pipeline shared by every fractal algorithm.

The pipeline walks an image row by row, maps each pixel to the complex
plane, iterates it with the algorithm and writes the algorithm's color into
an RGBA buffer.
"""

import logging
import time
from typing import TYPE_CHECKING

import numpy as np

from ..core.config import FractalConfig
from ..core.math_functions import ComplexPlane

if TYPE_CHECKING:
    from ..core.fractal_types import FractalAlgorithm

logger = logging.getLogger(__name__)

CHANNELS = 4  # RGBA
OPAQUE = 255


def render_rows(algorithm: "FractalAlgorithm", config: FractalConfig, plane: ComplexPlane,
                start_row: int, end_row: int) -> np.ndarray:
    """
    Render a contiguous range of rows.

    Args:
        algorithm: Algorithm providing ``iterate`` and ``get_color``
        config: Generation configuration
        plane: Complex plane for the whole image
        start_row: First row (inclusive)
        end_row: Last row (exclusive)

    Returns:
        Flat RGBA uint8 array for the rows
    """
    width = config.width
    rows = np.zeros((end_row - start_row) * width * CHANNELS, dtype=np.uint8)

    index = 0
    for py in range(start_row, end_row):
        for px in range(width):
            point = plane.pixel_to_complex(px, py)
            result = algorithm.iterate(point, config)
            r, g, b = algorithm.get_color(result, config)

            rows[index] = r
            rows[index + 1] = g
            rows[index + 2] = b
            rows[index + 3] = OPAQUE
            index += CHANNELS

    return rows


def generate_data(algorithm: "FractalAlgorithm", config: FractalConfig) -> np.ndarray:
    """
    Generate the RGBA pixel buffer for a configuration.

    No validation happens here; the iteration loop is always bounded by
    ``config.max_iterations``.

    Args:
        algorithm: Fractal algorithm to evaluate
        config: Generation configuration

    Returns:
        uint8 array of length ``width * height * 4``, row-major, top row first
    """
    start_time = time.time()
    plane = ComplexPlane.from_config(config)

    logger.info(f"Generating {algorithm.name} fractal {config.width}x{config.height}")
    logger.debug(f"Plane: {plane}, max iterations: {config.max_iterations}")

    image_data = render_rows(algorithm, config, plane, 0, config.height)

    logger.info(f"Generation complete: {time.time() - start_time:.2f}s")
    return image_data
