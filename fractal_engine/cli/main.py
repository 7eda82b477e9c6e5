"""
Command-line interface for the fractal engine.

Provides commands to list algorithms and palettes, iterate single points
and render fractal images.
"""

import click
import sys
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from .. import __version__
from ..core.config import INTERESTING_POINTS
from ..core.exceptions import FractalEngineError
from ..core.fractal_types import JULIA_PRESETS, get_default_registry
from ..rendering.coloring import get_color_hex, get_palette, list_palettes

logger = logging.getLogger(__name__)


def parse_julia_constant(value: str) -> complex:
    """Parse a Julia constant given as a preset name or "real,imag"."""
    if value in JULIA_PRESETS:
        return JULIA_PRESETS[value]
    try:
        parts = [float(x.strip()) for x in value.split(',')]
    except ValueError:
        parts = []
    if len(parts) != 2:
        presets = ', '.join(JULIA_PRESETS)
        raise click.BadParameter(f"Use 'real,imag' or a preset name ({presets})")
    return complex(parts[0], parts[1])


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    """Load configuration overrides from a JSON file."""
    if not path:
        return {}
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Could not read configuration file {path}: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"Configuration file {path} must contain a JSON object")
    return data


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='JSON configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, verbose, quiet):
    """
    Fractal Engine - escape-time fractal generation tool.

    Render Mandelbrot, Julia and Burning Ship fractals through a shared
    algorithm registry.
    """
    # Setup logging
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"Fractal Engine v{__version__}")
        click.echo(f"Python: {sys.version}")
        if ctx.invoked_subcommand is None:
            sys.exit(0)

    # Store global options in context
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose


@main.command('list')
def list_algorithms():
    """List registered fractal algorithms."""
    registry = get_default_registry()
    default = registry.get_default_algorithm()

    for info in registry.get_all_algorithms():
        marker = '*' if default is not None and info.id == default.id else ' '
        click.echo(f"{marker} {info.id:<14} {info.category:<12} {info.description}")


@main.command()
def palettes():
    """List color palettes with their first, middle and last colors."""
    for name in list_palettes():
        colors = get_palette(name).to_hex()
        middle = len(colors) // 2
        click.echo(f"{name:<10} {len(colors):>4} colors  "
                   f"{colors[0]} {colors[middle]} {colors[-1]}")


@main.command()
@click.argument('algorithm_id')
@click.argument('real', type=float)
@click.argument('imag', type=float)
@click.option('--max-iter', type=int, help='Maximum iterations')
@click.option('--escape-radius', type=float, help='Escape radius')
@click.option('--julia-c', type=str, help='Julia constant (real,imag) or preset name')
@click.pass_context
def point(ctx, algorithm_id, real, imag, max_iter, escape_radius, julia_c):
    """
    Iterate a single point of the complex plane.

    ALGORITHM_ID: Registered algorithm (mandelbrot, julia, burning-ship)
    REAL, IMAG: Coordinates of the point
    """
    registry = get_default_registry()

    overrides = load_config_file(ctx.obj.get('config_file'))
    if max_iter is not None:
        overrides['max_iterations'] = max_iter
    if escape_radius is not None:
        overrides['escape_radius'] = escape_radius
    if julia_c:
        overrides['julia_c'] = parse_julia_constant(julia_c)

    try:
        config = registry.get_merged_config(algorithm_id, overrides)
        result = registry.iterate_point(algorithm_id, complex(real, imag), config)
    except FractalEngineError as e:
        raise click.ClickException(e.message)

    click.echo(f"Point: {complex(real, imag)}")
    click.echo(f"Iterations: {result.iterations}/{config.max_iterations}")
    click.echo(f"Escaped: {result.escaped}")
    click.echo(f"Convergence: {result.convergence_type.value}")
    if result.final_z is not None:
        click.echo(f"Final z: {result.final_z}")
    click.echo(f"Color: {get_color_hex(result.iterations, config.max_iterations, config.color_palette)}")


@main.command()
@click.argument('algorithm_id')
@click.argument('output', type=click.Path())
@click.option('--width', '-w', type=int, help='Image width')
@click.option('--height', '-h', type=int, help='Image height')
@click.option('--center-x', type=float, help='Real coordinate of the view center')
@click.option('--center-y', type=float, help='Imaginary coordinate of the view center')
@click.option('--zoom', type=float, help='Zoom factor')
@click.option('--max-iter', type=int, help='Maximum iterations')
@click.option('--escape-radius', type=float, help='Escape radius')
@click.option('--palette', help='Color palette name')
@click.option('--julia-c', type=str, help='Julia constant (real,imag) or preset name')
@click.option('--location', type=click.Choice(sorted(INTERESTING_POINTS)),
              help='Named viewport to render')
@click.option('--workers', type=int, default=1, show_default=True,
              help='Number of threads for row-partitioned rendering')
@click.pass_context
def render(ctx, algorithm_id, output, width, height, center_x, center_y, zoom,
           max_iter, escape_radius, palette, julia_c, location, workers):
    """
    Render a fractal to a PNG or SVG image.

    ALGORITHM_ID: Registered algorithm (mandelbrot, julia, burning-ship)
    OUTPUT: Output image file path (.png or .svg)
    """
    from ..rendering.image_output import save_image

    registry = get_default_registry()

    # File configuration first, command-line options override it
    overrides = load_config_file(ctx.obj.get('config_file'))

    if location:
        spot = INTERESTING_POINTS[location]
        overrides.update(center_x=spot.center_x, center_y=spot.center_y, zoom=spot.zoom)

    cli_values = {
        'width': width,
        'height': height,
        'center_x': center_x,
        'center_y': center_y,
        'zoom': zoom,
        'max_iterations': max_iter,
        'escape_radius': escape_radius,
        'color_palette': palette,
    }
    overrides.update({k: v for k, v in cli_values.items() if v is not None})

    if julia_c:
        overrides['julia_c'] = parse_julia_constant(julia_c)

    try:
        config = registry.get_merged_config(algorithm_id, overrides)

        click.echo(f"Rendering {algorithm_id} fractal {config.width}x{config.height}...")
        start_time = time.time()
        buffer = registry.generate_fractal(algorithm_id, config, num_workers=workers)
        render_time = time.time() - start_time
    except FractalEngineError as e:
        raise click.ClickException(e.message)

    metadata = {'algorithm': algorithm_id, 'render_time_seconds': render_time}
    metadata.update(config.to_dict())

    try:
        save_image(buffer, config.width, config.height, Path(output), metadata)
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(f"Render complete: {render_time:.2f}s")
    click.echo(f"Saved: {output}")


if __name__ == '__main__':
    main()
