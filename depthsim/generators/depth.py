"""Per-cell sequencing depth sampling."""

from typing import Optional, Sequence

import numpy as np
import pandas as pd
from numpy.random import Generator

from ..exceptions import InvalidParameters


def make_cellnames(ncells: int) -> list[str]:
    return [f"Cell{i}" for i in range(1, ncells + 1)]


def _cell_index(ncells: int, cellnames: Optional[Sequence[str]]) -> list[str]:
    if ncells <= 0:
        raise InvalidParameters("ncells must be positive")
    if cellnames is None:
        return make_cellnames(ncells)
    if len(cellnames) != ncells:
        raise InvalidParameters(
            f"cellnames length ({len(cellnames)}) must match ncells ({ncells})"
        )
    return list(cellnames)


def constant_depths(
    depth: float,
    ncells: int,
    cellnames: Optional[Sequence[str]] = None,
) -> pd.Series:
    """Give every cell the same total depth.

    Args:
        depth: Total counts per cell.
        ncells: Number of cells.
        cellnames: Optional cell labels (defaults to Cell1..CellN).

    Returns:
        Series of depths indexed by cell.
    """
    index = _cell_index(ncells, cellnames)
    if not (depth > 0 and np.isfinite(depth)):
        raise InvalidParameters("depth must be positive and finite")
    return pd.Series(np.full(ncells, float(depth)), index=index, name="depth")


def variable_depths(
    rng: Generator,
    ncells: int,
    low: float,
    high: float,
    cellnames: Optional[Sequence[str]] = None,
) -> pd.Series:
    """Draw each cell's depth uniformly from [low, high].

    Depths are not rounded here; the count simulator rounds on receipt.

    Args:
        rng: NumPy random generator.
        ncells: Number of cells.
        low: Smallest allowed depth (must be positive).
        high: Largest allowed depth.
        cellnames: Optional cell labels (defaults to Cell1..CellN).

    Returns:
        Series of depths indexed by cell.
    """
    index = _cell_index(ncells, cellnames)
    if not (np.isfinite(low) and np.isfinite(high)):
        raise InvalidParameters("low and high must be finite")
    if not low > 0:
        raise InvalidParameters("low must be positive")
    if low > high:
        raise InvalidParameters("low cannot exceed high")
    depths = rng.uniform(low=low, high=high, size=ncells)
    return pd.Series(depths, index=index, name="depth")


def sample_depths(
    rng: Generator,
    policy: str,
    ncells: int,
    depth: float,
    low: float,
    high: float,
    cellnames: Optional[Sequence[str]] = None,
) -> pd.Series:
    """Sample depths under the named policy ("constant" or "variable")."""
    if policy == "constant":
        return constant_depths(depth, ncells, cellnames=cellnames)
    if policy == "variable":
        return variable_depths(rng, ncells, low, high, cellnames=cellnames)
    raise InvalidParameters(f"Unknown depth policy: {policy!r}")
