"""Multinomial count generation for depth-variability simulation."""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Iterator, Optional, Sequence

import numpy as np
import pandas as pd
from numpy.random import Generator

from ..exceptions import DimensionMismatch, InvalidDepth, InvalidParameters, InvalidProfile
from ..random_source import RandomSource
from .depth import make_cellnames
from .profile import make_genenames

logger = logging.getLogger(__name__)

PROFILE_TOLERANCE = 1e-6


def validate_profile(profile: Sequence[float]) -> np.ndarray:
    """Check a gene profile and return it as multinomial probabilities.

    Args:
        profile: Nonnegative gene weights summing to 1.

    Returns:
        Float array of the weights, renormalized to absorb rounding error.

    Raises:
        InvalidProfile: If the profile is empty, not one-dimensional, has
            negative or non-finite entries, or does not sum to 1 within
            PROFILE_TOLERANCE.
    """
    weights = np.asarray(profile, dtype=float)
    if weights.ndim != 1 or weights.size == 0:
        raise InvalidProfile("profile must be a non-empty 1-D sequence")
    if not np.all(np.isfinite(weights)):
        raise InvalidProfile("profile contains non-finite weights")
    if np.any(weights < 0):
        raise InvalidProfile("profile contains negative weights")
    total = weights.sum()
    if abs(total - 1.0) > PROFILE_TOLERANCE:
        raise InvalidProfile(f"profile must sum to 1, got {total:.6g}")
    return weights / total


def validate_depths(depths: Sequence[float]) -> np.ndarray:
    """Check that every depth is finite and strictly positive."""
    values = np.asarray(depths, dtype=float)
    if values.ndim != 1:
        raise InvalidDepth("depths must be a 1-D sequence")
    bad = np.flatnonzero(~np.isfinite(values) | (values <= 0))
    if bad.size:
        raise InvalidDepth(f"depth of cell {bad[0]} must be positive, got {values[bad[0]]}")
    return values


def round_depth(depth: float) -> int:
    """Number of multinomial trials for a depth: nearest integer, halves to even."""
    return int(np.rint(depth))


def _draw_cell(rng: Generator, pvals: np.ndarray, depth: float) -> np.ndarray:
    return rng.multinomial(round_depth(depth), pvals).astype(np.int64)


def simulate_cell(
    rng: Generator,
    profile: Sequence[float],
    depth: float,
) -> np.ndarray:
    """Draw one cell's count vector.

    A single multinomial trial distributes round(depth) counts across genes
    with probabilities given by the profile, so the vector sums to exactly
    round(depth).

    Args:
        rng: NumPy random generator.
        profile: Gene weights summing to 1.
        depth: Total depth of the cell (rounded to the nearest integer).

    Returns:
        Integer count vector, one entry per gene.
    """
    pvals = validate_profile(profile)
    (value,) = validate_depths([depth])
    return _draw_cell(rng, pvals, value)


def _labels(values: object, n: int, default: Callable[[int], list[str]]) -> list:
    if isinstance(values, pd.Series):
        return list(values.index)
    return default(n)


def _simulate_chunk(
    random_source: RandomSource,
    pvals: np.ndarray,
    depths: np.ndarray,
    start: int,
    stop: int,
    executor: Optional[Executor],
) -> np.ndarray:
    def draw(index: int) -> np.ndarray:
        return _draw_cell(random_source.cell_stream(index), pvals, depths[index])

    if executor is None:
        columns = [draw(i) for i in range(start, stop)]
    else:
        columns = list(executor.map(draw, range(start, stop)))
    return np.column_stack(columns)


def iter_count_chunks(
    random_source: RandomSource,
    profile: Sequence[float],
    depths: Sequence[float],
    nworkers: int = 1,
    chunksize: Optional[int] = None,
) -> Iterator[pd.DataFrame]:
    """Yield the count matrix in blocks of at most ``chunksize`` cells.

    Cell i always draws from ``random_source.cell_stream(i)``, so the
    concatenated blocks are identical for any chunk size or worker count.

    Args:
        random_source: Source of per-cell random streams.
        profile: Gene weights summing to 1 (a Series supplies gene labels).
        depths: Per-cell depths (a Series supplies cell labels).
        nworkers: Threads used to draw cells within a chunk.
        chunksize: Cells per block (None = one block with every cell).

    Returns:
        Iterator of integer DataFrames with genes as rows and the chunk's
        cells as columns.
    """
    pvals = validate_profile(profile)
    depth_values = validate_depths(depths)
    ncells = len(depth_values)
    if ncells == 0:
        raise InvalidParameters("at least one cell depth is required")
    if nworkers <= 0:
        raise InvalidParameters("nworkers must be positive")
    if chunksize is None:
        chunksize = ncells
    elif chunksize <= 0:
        raise InvalidParameters("chunksize must be positive")

    genenames = _labels(profile, len(pvals), make_genenames)
    cellnames = _labels(depths, ncells, make_cellnames)

    def blocks(executor: Optional[Executor]) -> Iterator[pd.DataFrame]:
        for start in range(0, ncells, chunksize):
            stop = min(start + chunksize, ncells)
            logger.debug(f"Simulating cells {start} to {stop - 1}")
            block = _simulate_chunk(
                random_source, pvals, depth_values, start, stop, executor
            )
            yield pd.DataFrame(block, index=genenames, columns=cellnames[start:stop])

    def run() -> Iterator[pd.DataFrame]:
        if nworkers == 1:
            yield from blocks(None)
        else:
            logger.debug(f"Drawing cells on {nworkers} threads")
            with ThreadPoolExecutor(max_workers=nworkers) as executor:
                yield from blocks(executor)

    # Inputs are validated on the call, not on first iteration
    return run()


def simulate_batch(
    random_source: RandomSource,
    profile: Sequence[float],
    depths: Sequence[float],
    nworkers: int = 1,
    chunksize: Optional[int] = None,
) -> pd.DataFrame:
    """Simulate a genes x cells count matrix, one multinomial draw per cell.

    Cell order in the result matches the order of ``depths``.

    Args:
        random_source: Source of per-cell random streams.
        profile: Gene weights summing to 1.
        depths: Per-cell depths.
        nworkers: Threads used to draw cells.
        chunksize: Cells materialized per block while drawing.

    Returns:
        Integer DataFrame with genes as rows and cells as columns.

    Raises:
        InvalidProfile: If the profile is malformed.
        InvalidDepth: If any depth is not positive.
    """
    chunks = list(
        iter_count_chunks(
            random_source, profile, depths, nworkers=nworkers, chunksize=chunksize
        )
    )
    if len(chunks) == 1:
        return chunks[0]
    return pd.concat(chunks, axis=1)


def check_dimensions(
    counts: pd.DataFrame,
    profile: Optional[Sequence[float]] = None,
    ncells: Optional[int] = None,
) -> None:
    """Check a genes x cells matrix against a profile length and cell count.

    Raises:
        DimensionMismatch: If the number of rows differs from the profile
            length or the number of columns differs from ncells.
    """
    ngenes_obs, ncells_obs = counts.shape
    if profile is not None and len(profile) != ngenes_obs:
        raise DimensionMismatch(
            f"matrix has {ngenes_obs} genes but profile has {len(profile)}"
        )
    if ncells is not None and ncells != ncells_obs:
        raise DimensionMismatch(f"matrix has {ncells_obs} cells, expected {ncells}")
