"""
Row-partitioned parallel rendering.

The image is split into contiguous row ranges; each range is rendered by a
worker from a ``concurrent.futures`` pool into its own array and copied into
a disjoint slice of the output buffer. The result is byte-identical to the
sequential pipeline.
"""

import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

import numpy as np

from ..core.config import FractalConfig
from ..core.math_functions import ComplexPlane
from ..rendering.pipeline import CHANNELS, render_rows

if TYPE_CHECKING:
    from ..core.fractal_types import FractalAlgorithm

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowChunk:
    """Row range rendered by a single worker."""
    chunk_id: int
    start_row: int
    end_row: int

    @property
    def rows(self) -> int:
        return self.end_row - self.start_row


def create_row_chunks(height: int, num_chunks: int) -> List[RowChunk]:
    """
    Split image rows into contiguous chunks.

    Every chunk except possibly the last holds ``ceil(height / num_chunks)``
    rows; chunks that would be empty are dropped.

    Args:
        height: Total image height
        num_chunks: Requested number of chunks

    Returns:
        List of RowChunk objects covering rows 0..height
    """
    if num_chunks <= 0:
        raise ValueError("num_chunks must be positive")

    rows_per_chunk = -(-height // num_chunks)
    chunks = []
    for chunk_id in range(num_chunks):
        start_row = chunk_id * rows_per_chunk
        end_row = min(start_row + rows_per_chunk, height)
        if start_row >= end_row:
            break
        chunks.append(RowChunk(chunk_id, start_row, end_row))

    logger.debug(f"Created {len(chunks)} row chunks of up to {rows_per_chunk} rows")
    return chunks


def get_optimal_worker_count() -> int:
    """Get a worker count that leaves one core for the system."""
    return max(1, (os.cpu_count() or 1) - 1)


class ParallelRenderer:
    """Fan-out/fan-in renderer over a thread or process pool."""

    def __init__(self, num_workers: Optional[int] = None, use_processes: bool = False):
        """
        Initialize parallel renderer.

        Args:
            num_workers: Number of workers and row chunks (None for an automatic count)
            use_processes: Use a process pool instead of a thread pool
        """
        if num_workers is None:
            self.num_workers = get_optimal_worker_count()
        else:
            self.num_workers = max(1, num_workers)

        self.use_processes = use_processes
        logger.info(f"Parallel renderer: {self.num_workers} "
                    f"{'processes' if use_processes else 'threads'}")

    def render(self, algorithm: "FractalAlgorithm", config: FractalConfig) -> np.ndarray:
        """
        Render the RGBA buffer with one chunk of rows per worker.

        Args:
            algorithm: Fractal algorithm to evaluate
            config: Generation configuration

        Returns:
            uint8 array of length ``width * height * 4``
        """
        start_time = time.time()
        plane = ComplexPlane.from_config(config)
        chunks = create_row_chunks(config.height, self.num_workers)
        row_bytes = config.width * CHANNELS

        image_data = np.zeros(config.height * row_bytes, dtype=np.uint8)

        logger.info(f"Generating {algorithm.name} fractal {config.width}x{config.height} "
                    f"with {len(chunks)} workers")

        executor_class = ProcessPoolExecutor if self.use_processes else ThreadPoolExecutor
        with executor_class(max_workers=self.num_workers) as executor:
            future_to_chunk = {
                executor.submit(render_rows, algorithm, config, plane,
                                chunk.start_row, chunk.end_row): chunk
                for chunk in chunks
            }

            for future in as_completed(future_to_chunk):
                chunk = future_to_chunk[future]
                rows = future.result()
                image_data[chunk.start_row * row_bytes:chunk.end_row * row_bytes] = rows
                logger.debug(f"Worker {chunk.chunk_id + 1}/{len(chunks)} completed "
                             f"(rows {chunk.start_row}-{chunk.end_row - 1})")

        logger.info(f"Parallel generation complete: {time.time() - start_time:.2f}s")
        return image_data


def generate_data_parallel(algorithm: "FractalAlgorithm", config: FractalConfig,
                           num_workers: int = 4, use_processes: bool = False) -> np.ndarray:
    """Generate the RGBA buffer using a row-partitioned worker pool."""
    return ParallelRenderer(num_workers, use_processes).render(algorithm, config)
