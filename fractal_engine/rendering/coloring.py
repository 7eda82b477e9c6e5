"""
Palette construction and iteration-to-color mapping.

Palettes are generated once at import time from a handful of control colors
by piecewise linear interpolation and are read-only afterwards. Iteration
counts are mapped onto a palette by their fraction of the iteration bound;
points that never escaped are painted black.
"""

import math
import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

DEFAULT_PALETTE = "rainbow"
DEFAULT_PALETTE_SIZE = 256
INSIDE_COLOR: RGB = (0, 0, 0)


def interpolate_color(color1: Union[Sequence[float], np.ndarray],
                      color2: Union[Sequence[float], np.ndarray],
                      factor: Union[float, np.ndarray]) -> np.ndarray:
    """
    Linearly interpolate between two RGB colors.

    Channels are rounded half-up to the nearest integer. ``factor`` may be an
    array broadcastable against the colors to interpolate many samples at once.

    Args:
        color1: Start color(s)
        color2: End color(s)
        factor: Interpolation factor(s) in [0, 1]

    Returns:
        uint8 array of interpolated colors
    """
    c1 = np.asarray(color1, dtype=np.float64)
    c2 = np.asarray(color2, dtype=np.float64)
    return np.floor(c1 + (c2 - c1) * factor + 0.5).astype(np.uint8)


def generate_palette(control_colors: Sequence[Sequence[int]],
                     size: int = DEFAULT_PALETTE_SIZE) -> np.ndarray:
    """
    Generate a color palette from control colors.

    The output is split into ``len(control_colors) - 1`` equal segments and
    each segment interpolates between two neighbouring control colors. The
    last sample is exactly the last control color.

    Args:
        control_colors: Ordered RGB control colors (0-255)
        size: Number of colors to generate

    Returns:
        Array of shape (size, 3) with dtype uint8
    """
    controls = np.asarray(control_colors, dtype=np.float64)

    if controls.ndim != 2 or controls.shape[1] != 3:
        raise ValueError(f"Control colors must be RGB triplets, got shape {controls.shape}")
    if len(controls) < 2:
        raise ValueError("Palette must contain at least 2 colors")
    if np.any(controls < 0) or np.any(controls > 255):
        raise ValueError("RGB components must be between 0 and 255")
    if size < 2:
        raise ValueError("Palette size must be at least 2")

    segments = len(controls) - 1
    positions = np.arange(size) / (size - 1) * segments

    # Map positions to segments; the final sample lands on the last segment end
    segment_indices = np.clip(np.floor(positions).astype(int), 0, segments - 1)
    local_t = positions - segment_indices

    return interpolate_color(controls[segment_indices],
                             controls[segment_indices + 1],
                             local_t[:, np.newaxis])


class Palette:
    """Named, read-only color palette."""

    def __init__(self, control_colors: Sequence[Sequence[int]], name: str = "Custom",
                 size: int = DEFAULT_PALETTE_SIZE):
        """
        Initialize color palette.

        Args:
            control_colors: Colors the palette is interpolated from
            name: Palette name
            size: Number of generated colors
        """
        self.name = name
        self.control_colors = tuple(tuple(int(c) for c in color) for color in control_colors)
        self.colors = generate_palette(self.control_colors, size)
        self.colors.flags.writeable = False

    def __len__(self) -> int:
        return len(self.colors)

    def __getitem__(self, index: int) -> RGB:
        r, g, b = self.colors[index]
        return int(r), int(g), int(b)

    def to_hex(self) -> List[str]:
        """Get all palette colors as hex strings."""
        return [rgb_to_hex(*self[i]) for i in range(len(self))]

    def __repr__(self) -> str:
        return f"Palette({self.name!r}, {len(self.control_colors)} control colors, size={len(self)})"


def _create_builtin_palettes() -> Dict[str, Palette]:
    """Create built-in color palettes."""
    palettes = {}

    palettes['rainbow'] = Palette([
        (66, 30, 15),     # Dark brown
        (25, 7, 26),      # Dark purple
        (9, 1, 47),       # Dark blue
        (4, 4, 73),       # Blue
        (0, 7, 100),      # Light blue
        (12, 44, 138),    # Cyan
        (24, 82, 177),    # Light cyan
        (57, 125, 209),   # Light blue
        (134, 181, 229),  # Very light blue
        (211, 236, 248),  # White blue
        (241, 233, 191),  # Light yellow
        (248, 201, 95),   # Yellow
        (255, 170, 0),    # Orange
        (204, 128, 0),    # Dark orange
        (153, 87, 0),     # Brown
        (106, 52, 3),     # Dark brown
    ], name="Rainbow")

    palettes['fire'] = Palette([
        (0, 0, 0),        # Black
        (32, 0, 0),       # Dark red
        (64, 0, 0),       # Red
        (96, 32, 0),      # Red-orange
        (128, 64, 0),     # Orange
        (160, 96, 32),    # Light orange
        (192, 128, 64),   # Yellow-orange
        (255, 192, 128),  # Light yellow
        (255, 255, 192),  # Very light yellow
        (255, 255, 255),  # White
    ], name="Fire")

    palettes['blue'] = Palette([
        (0, 0, 0),        # Black
        (0, 0, 64),       # Dark blue
        (0, 0, 128),      # Blue
        (0, 64, 192),     # Light blue
        (0, 128, 255),    # Cyan
        (64, 192, 255),   # Light cyan
        (128, 224, 255),  # Very light cyan
        (192, 240, 255),  # White blue
        (255, 255, 255),  # White
    ], name="Blue")

    palettes['grayscale'] = Palette([
        (0, 0, 0),
        (64, 64, 64),
        (128, 128, 128),
        (192, 192, 192),
        (255, 255, 255),
    ], name="Grayscale")

    palettes['purple'] = Palette([
        (0, 0, 0),        # Black
        (32, 0, 32),      # Dark purple
        (64, 0, 64),      # Purple
        (96, 32, 96),     # Light purple
        (128, 64, 128),   # Pink-purple
        (160, 96, 160),   # Light pink-purple
        (192, 128, 192),  # Pink
        (224, 160, 224),  # Light pink
        (255, 192, 255),  # Very light pink
        (255, 255, 255),  # White
    ], name="Purple")

    palettes['sunset'] = Palette([
        (25, 25, 112),    # Midnight blue
        (70, 130, 180),   # Steel blue
        (135, 206, 235),  # Sky blue
        (255, 165, 0),    # Orange
        (255, 69, 0),     # Red-orange
        (220, 20, 60),    # Crimson
        (139, 0, 139),    # Dark magenta
        (75, 0, 130),     # Indigo
    ], name="Sunset")

    palettes['ocean'] = Palette([
        (0, 0, 51),       # Deep blue
        (0, 0, 204),      # Blue
        (0, 128, 255),    # Light blue
        (0, 255, 255),    # Cyan
        (128, 255, 255),  # Light cyan
        (255, 255, 255),  # White
    ], name="Ocean")

    return palettes


COLOR_PALETTES: Dict[str, Palette] = _create_builtin_palettes()


def get_palette(name: Optional[str]) -> Palette:
    """
    Get color palette by name.

    Unknown names fall back to the rainbow palette instead of raising.
    """
    palette = COLOR_PALETTES.get(name) if name is not None else None
    if palette is None:
        logger.debug(f"Unknown color palette '{name}', using '{DEFAULT_PALETTE}'")
        palette = COLOR_PALETTES[DEFAULT_PALETTE]
    return palette


def list_palettes() -> List[str]:
    """Get list of available color palettes."""
    return list(COLOR_PALETTES.keys())


def get_color(iterations: int, max_iterations: int, palette: Optional[str] = DEFAULT_PALETTE) -> RGB:
    """
    Get color for given iteration count.

    Args:
        iterations: Number of iterations before escape
        max_iterations: Maximum iterations allowed
        palette: Palette name

    Returns:
        RGB color tuple, black for points that never escaped
    """
    if iterations >= max_iterations:
        return INSIDE_COLOR

    colors = get_palette(palette)
    index = math.floor((iterations / max_iterations) * (len(colors) - 1))
    return colors[max(0, index)]


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to a ``#rrggbb`` hex string.

    Raises:
        ValueError: If a channel is outside 0-255
    """
    for component in (r, g, b):
        if not 0 <= component <= 255:
            raise ValueError(f"RGB components must be between 0 and 255, got {component}")
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def hex_to_rgb(code: str) -> RGB:
    """
    Convert a hex color string to an RGB tuple.

    Accepts ``#rrggbb``, ``rrggbb`` and the three digit shorthand ``#rgb``.
    """
    s = code.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(c * 2 for c in s)
    if len(s) != 6:
        raise ValueError(f"Invalid hex color: {code!r}")
    try:
        return int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16)
    except ValueError:
        raise ValueError(f"Invalid hex color: {code!r}") from None


def get_color_hex(iterations: int, max_iterations: int, palette: Optional[str] = DEFAULT_PALETTE) -> str:
    """Get color in hex format for given iteration count."""
    return rgb_to_hex(*get_color(iterations, max_iterations, palette))
