"""Per-cell normalization of genes x cells count matrices."""

import math

import numpy as np
import pandas as pd

from .exceptions import InvalidParameters, ZeroDepthCell

CPM_SCALE = 1e6

NORMALIZATION_LEVELS = ("counts", "fraction", "cpm", "scaled")


def _as_frame(matrix) -> pd.DataFrame:
    if isinstance(matrix, pd.DataFrame):
        return matrix
    return pd.DataFrame(np.asarray(matrix))


def to_fraction(matrix: pd.DataFrame) -> pd.DataFrame:
    """Divide each cell's column by that column's total count.

    Args:
        matrix: Genes x cells DataFrame of nonnegative values.

    Returns:
        New float DataFrame whose columns each sum to 1.

    Raises:
        InvalidParameters: If a column contains NaN or infinite values.
        ZeroDepthCell: If a column sums to zero.
    """
    matrix = _as_frame(matrix)
    totals = matrix.sum(axis=0, skipna=False)
    unusable = np.flatnonzero(~np.isfinite(totals.to_numpy(dtype=float)))
    if unusable.size:
        raise InvalidParameters(
            f"cell {int(unusable[0])} ({matrix.columns[unusable[0]]}) has non-finite values"
        )
    empty = np.flatnonzero(totals.to_numpy() == 0)
    if empty.size:
        index = int(empty[0])
        raise ZeroDepthCell(index, matrix.columns[index])
    return matrix.div(totals, axis=1).astype(float)


def to_cpm(matrix: pd.DataFrame) -> pd.DataFrame:
    """Counts per million: per-cell fractions times 1e6."""
    return to_fraction(matrix) * CPM_SCALE


def to_scaled_fraction(matrix: pd.DataFrame, scale_factor: float) -> pd.DataFrame:
    """Per-cell fractions times an arbitrary positive scale factor."""
    if not (scale_factor > 0 and math.isfinite(scale_factor)):
        raise InvalidParameters("scale_factor must be positive")
    return to_fraction(matrix) * scale_factor


def normalize_all(matrix: pd.DataFrame, scale_factor: float) -> dict[str, pd.DataFrame]:
    """Return the matrix at every normalization level.

    The fraction is computed once and reused for the scaled levels.
    Keys follow NORMALIZATION_LEVELS.
    """
    if not (scale_factor > 0 and math.isfinite(scale_factor)):
        raise InvalidParameters("scale_factor must be positive")
    fraction = to_fraction(matrix)
    return {
        "counts": _as_frame(matrix),
        "fraction": fraction,
        "cpm": fraction * CPM_SCALE,
        "scaled": fraction * scale_factor,
    }
