"""
Row-band parallelism for per-pixel loops.

Each output row of a neighborhood filter depends only on a read-only window
of the input, so an image can be split into horizontal bands that run on a
thread pool and are stacked back together in order.
"""

import concurrent.futures
from typing import Callable, List, Optional, Tuple

import numpy as np

from PS_Libs.constants import MIN_ROWS_PER_BAND

BandFunction = Callable[[int, int], np.ndarray]


def split_rows(height: int, bands: int) -> List[Tuple[int, int]]:
    """Split [0, height) into at most ``bands`` contiguous (start, end) ranges."""
    bands = max(1, min(bands, height))
    step, extra = divmod(height, bands)
    ranges = []
    start = 0
    for index in range(bands):
        end = start + step + (1 if index < extra else 0)
        ranges.append((start, end))
        start = end
    return ranges


def run_in_bands(
    band_fn: BandFunction,
    height: int,
    workers: Optional[int] = None,
) -> np.ndarray:
    """
    Evaluate ``band_fn(row_start, row_end)`` over the image rows.

    Args:
        band_fn: Returns the output rows [row_start, row_end) as an array
        height: Total number of rows
        workers: Thread count; None or 1 runs sequentially

    Returns:
        The band results concatenated along axis 0, in row order
    """
    if not workers or workers <= 1 or height < MIN_ROWS_PER_BAND * 2:
        return band_fn(0, height)

    bands = min(workers, max(1, height // MIN_ROWS_PER_BAND))
    ranges = split_rows(height, bands)

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(band_fn, start, end) for start, end in ranges]
        results = [future.result() for future in futures]

    return np.concatenate(results, axis=0)
