"""
Image export for generated pixel buffers.

Converts flat RGBA buffers to Pillow images and saves them as PNG with the
generation parameters embedded as text chunks, or as SVG documents made of
square cells colored with hex fills.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING
from xml.sax.saxutils import escape

import numpy as np
from PIL import Image, PngImagePlugin

from .. import __version__
from ..core.config import FractalConfig
from ..core.math_functions import ComplexPlane
from .coloring import INSIDE_COLOR, rgb_to_hex
from .pipeline import CHANNELS

if TYPE_CHECKING:
    from ..core.fractal_types import FractalAlgorithm

logger = logging.getLogger(__name__)

SVG_NAMESPACE = "http://www.w3.org/2000/svg"
DEFAULT_SVG_PIXEL_SIZE = 2
SUPPORTED_FORMATS = ('.png', '.svg')


def buffer_to_image(buffer: np.ndarray, width: int, height: int) -> Image.Image:
    """
    Convert a flat RGBA buffer to a Pillow image.

    Args:
        buffer: uint8 array of length ``width * height * 4``
        width, height: Image size in pixels

    Returns:
        RGBA image
    """
    _check_buffer_size(buffer, width, height)
    pixels = np.asarray(buffer, dtype=np.uint8).reshape((height, width, CHANNELS))
    return Image.fromarray(pixels)


def _check_buffer_size(buffer: np.ndarray, width: int, height: int) -> None:
    expected = width * height * CHANNELS
    if buffer.size != expected:
        raise ValueError(f"Expected buffer of {expected} bytes for {width}x{height}, got {buffer.size}")


def _svg_document(width: int, height: int, cells: List[str],
                  metadata: Optional[Dict[str, Any]] = None) -> str:
    """Wrap ``<rect>`` cells in an SVG document with title and description."""
    metadata = metadata or {}
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg width="{width}" height="{height}" xmlns="{SVG_NAMESPACE}">',
        f"<title>{escape('Fractal: ' + str(metadata.get('algorithm', 'unknown')))}</title>",
    ]
    if all(key in metadata for key in ('center_x', 'center_y', 'zoom', 'max_iterations')):
        lines.append(
            f"<desc>Center: ({metadata['center_x']}, {metadata['center_y']}), "
            f"Zoom: {metadata['zoom']}x, Iterations: {metadata['max_iterations']}</desc>"
        )
    lines.extend(cells)
    lines.append('</svg>')
    return '\n'.join(lines) + '\n'


def _svg_cell(px: int, py: int, pixel_size: int, fill: str) -> str:
    return f'<rect x="{px}" y="{py}" width="{pixel_size}" height="{pixel_size}" fill="{fill}"/>'


def _check_pixel_size(pixel_size: int) -> None:
    if pixel_size < 1:
        raise ValueError(f"pixel_size must be at least 1, got {pixel_size}")


def generate_svg(algorithm: "FractalAlgorithm", config: FractalConfig,
                 pixel_size: int = DEFAULT_SVG_PIXEL_SIZE) -> str:
    """
    Render a fractal directly to an SVG document.

    The image is covered by ``pixel_size`` square cells. Each cell is colored
    by the point at its top-left pixel; cells whose point never escaped are
    left out, so the set itself shows the document background.

    Args:
        algorithm: Fractal algorithm to evaluate
        config: Generation configuration
        pixel_size: Edge length of one cell in pixels

    Returns:
        SVG document text
    """
    _check_pixel_size(pixel_size)
    plane = ComplexPlane.from_config(config)

    cells = []
    for py in range(0, config.height, pixel_size):
        for px in range(0, config.width, pixel_size):
            result = algorithm.iterate(plane.pixel_to_complex(px, py), config)
            if result.iterations >= config.max_iterations:
                continue
            fill = rgb_to_hex(*algorithm.get_color(result, config))
            cells.append(_svg_cell(px, py, pixel_size, fill))

    logger.debug(f"SVG for {algorithm.id}: {len(cells)} cells of {pixel_size}px")
    metadata = {'algorithm': algorithm.id}
    metadata.update(config.to_dict())
    return _svg_document(config.width, config.height, cells, metadata)


def buffer_to_svg(buffer: np.ndarray, width: int, height: int,
                  pixel_size: int = DEFAULT_SVG_PIXEL_SIZE,
                  metadata: Optional[Dict[str, Any]] = None) -> str:
    """
    Convert a flat RGBA buffer to an SVG document.

    Cells are sampled at their top-left pixel like ``generate_svg``. Only
    the colors are known here, so cells painted with the inside color
    (black) are the ones left out.

    Args:
        buffer: uint8 array of length ``width * height * 4``
        width, height: Image size in pixels
        pixel_size: Edge length of one cell in pixels
        metadata: Generation parameters for the title and description

    Returns:
        SVG document text
    """
    _check_buffer_size(buffer, width, height)
    _check_pixel_size(pixel_size)
    pixels = np.asarray(buffer, dtype=np.uint8).reshape((height, width, CHANNELS))

    cells = []
    for py in range(0, height, pixel_size):
        for px in range(0, width, pixel_size):
            r, g, b = (int(c) for c in pixels[py, px, :3])
            if (r, g, b) == INSIDE_COLOR:
                continue
            cells.append(_svg_cell(px, py, pixel_size, rgb_to_hex(r, g, b)))

    return _svg_document(width, height, cells, metadata)


def save_image(buffer: np.ndarray, width: int, height: int, filepath: Union[str, Path],
               metadata: Optional[Dict[str, Any]] = None) -> Path:
    """
    Save an RGBA buffer as PNG or SVG with metadata.

    The format is chosen by the file suffix.

    Args:
        buffer: Flat RGBA pixel buffer
        width, height: Image size in pixels
        filepath: Output file path
        metadata: Generation parameters to embed

    Returns:
        Path of the written file
    """
    filepath = Path(filepath)
    suffix = filepath.suffix.lower()
    if suffix not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported format '{filepath.suffix}'. "
                         f"Supported: {', '.join(SUPPORTED_FORMATS)}")

    if suffix == '.svg':
        document = buffer_to_svg(buffer, width, height, metadata=metadata)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(document, encoding='utf-8')
        logger.info(f"Saved SVG: {filepath} ({width}x{height})")
        return filepath

    pil_image = buffer_to_image(buffer, width, height)

    pnginfo = PngImagePlugin.PngInfo()
    pnginfo.add_text("Software", f"fractal-engine v{__version__}")
    pnginfo.add_text("Creation Time", datetime.now().isoformat())
    if metadata:
        pnginfo.add_text("Title", f"Fractal: {metadata.get('algorithm', 'unknown')}")
        pnginfo.add_text("FractalMetadata", json.dumps(metadata, indent=2, default=str))

    filepath.parent.mkdir(parents=True, exist_ok=True)
    pil_image.save(filepath, "PNG", pnginfo=pnginfo)

    logger.info(f"Saved image: {filepath} ({width}x{height})")
    return filepath
