"""Per-gene summary statistics over the cell dimension.

All reductions run per gene across cells (axis 1 of a genes x cells matrix).
"""

from typing import Iterable, Optional, Self

import numpy as np
import pandas as pd

from .exceptions import DimensionMismatch, InvalidParameters
from .theory import poisson_dropout, poisson_variance

SUMMARY_COLUMNS = ["mean", "variance", "dropout_prob"]


def _as_frame(matrix) -> pd.DataFrame:
    if isinstance(matrix, pd.DataFrame):
        return matrix
    values = np.asarray(matrix)
    if values.ndim != 2:
        raise DimensionMismatch(f"expected a 2-D genes x cells matrix, got {values.ndim}-D")
    return pd.DataFrame(values)


def _values(frame: pd.DataFrame, min_cells: int) -> np.ndarray:
    ncells = frame.shape[1]
    if ncells < min_cells:
        raise DimensionMismatch(
            f"matrix has {ncells} cells, at least {min_cells} required"
        )
    return frame.to_numpy(dtype=float)


def mean_variance(matrix: pd.DataFrame) -> pd.DataFrame:
    """Per-gene mean and unbiased (n - 1) sample variance across cells.

    Args:
        matrix: Genes x cells matrix.

    Returns:
        DataFrame indexed by gene with "mean" and "variance" columns.

    Raises:
        DimensionMismatch: If the matrix has fewer than two cells, since a
            sample variance needs at least two observations.
    """
    frame = _as_frame(matrix)
    values = _values(frame, min_cells=2)
    return pd.DataFrame(
        {
            "mean": values.mean(axis=1),
            "variance": values.var(axis=1, ddof=1),
        },
        index=frame.index,
    )


def dropout_probability(matrix: pd.DataFrame) -> pd.Series:
    """Per-gene fraction of cells whose entry is exactly zero.

    Raises:
        DimensionMismatch: If the matrix has no cells.
    """
    frame = _as_frame(matrix)
    values = _values(frame, min_cells=1)
    return pd.Series((values == 0).mean(axis=1), index=frame.index, name="dropout_prob")


def gene_summary(matrix: pd.DataFrame) -> pd.DataFrame:
    """Mean, variance and dropout probability for every gene."""
    frame = _as_frame(matrix)
    summary = mean_variance(frame)
    summary["dropout_prob"] = dropout_probability(frame)
    return summary


def compare_to_poisson(summary: pd.DataFrame) -> pd.DataFrame:
    """Add the Poisson variance and dropout predicted from each gene's mean."""
    compared = summary.copy()
    compared["poisson_variance"] = poisson_variance(compared["mean"].to_numpy())
    compared["poisson_dropout"] = poisson_dropout(compared["mean"].to_numpy())
    return compared


def dispersion_ratio(summary: pd.DataFrame, min_mean: float = 0.0) -> pd.Series:
    """Variance-to-mean ratio for genes whose mean exceeds ``min_mean``.

    Genes at or below ``min_mean`` are left out rather than reported as NaN.
    A Poisson gene has a ratio of 1; overdispersed genes exceed it.
    """
    if min_mean < 0:
        raise InvalidParameters("min_mean must be non-negative")
    expressed = summary.loc[summary["mean"] > min_mean]
    ratio = expressed["variance"] / expressed["mean"]
    ratio.name = "dispersion_ratio"
    return ratio


class GeneStatsAccumulator:
    """Combine per-gene statistics from successive blocks of cells.

    Blocks are merged with the pairwise update of Chan, Golub and LeVeque,
    in the order they are added, so the same blocks in the same order always
    give the same result. Useful with ``iter_count_chunks`` to summarize a
    matrix too large to hold at once.

    Example:
        >>> acc = GeneStatsAccumulator()
        >>> for chunk in iter_count_chunks(source, profile, depths, chunksize=500):
        ...     acc.add(chunk)
        >>> summary = acc.summary()
    """

    def __init__(self) -> None:
        self.ncells = 0
        self._index: Optional[pd.Index] = None
        self._mean: Optional[np.ndarray] = None
        self._m2: Optional[np.ndarray] = None
        self._zeros: Optional[np.ndarray] = None

    def add(self, chunk: pd.DataFrame) -> Self:
        """Merge a genes x cells block into the running statistics."""
        frame = _as_frame(chunk)
        values = frame.to_numpy(dtype=float)
        n_b = values.shape[1]
        if n_b == 0:
            return self

        mean_b = values.mean(axis=1)
        m2_b = ((values - mean_b[:, np.newaxis]) ** 2).sum(axis=1)
        zeros_b = (values == 0).sum(axis=1)

        if self._mean is None:
            self._index = frame.index
            self._mean, self._m2, self._zeros = mean_b, m2_b, zeros_b
            self.ncells = n_b
            return self

        if len(frame.index) != len(self._index):
            raise DimensionMismatch(
                f"block has {len(frame.index)} genes, expected {len(self._index)}"
            )
        n_a = self.ncells
        n = n_a + n_b
        delta = mean_b - self._mean
        self._mean = self._mean + delta * (n_b / n)
        self._m2 = self._m2 + m2_b + delta**2 * (n_a * n_b / n)
        self._zeros = self._zeros + zeros_b
        self.ncells = n
        return self

    def summary(self) -> pd.DataFrame:
        """GeneSummary of every cell added so far.

        Raises:
            DimensionMismatch: If fewer than two cells were added.
        """
        if self.ncells < 2:
            raise DimensionMismatch(
                f"accumulated {self.ncells} cells, at least 2 required"
            )
        return pd.DataFrame(
            {
                "mean": self._mean,
                "variance": self._m2 / (self.ncells - 1),
                "dropout_prob": self._zeros / self.ncells,
            },
            index=self._index,
        )


def summarize_chunks(chunks: Iterable[pd.DataFrame]) -> pd.DataFrame:
    """GeneSummary of a matrix supplied as consecutive blocks of cells."""
    accumulator = GeneStatsAccumulator()
    for chunk in chunks:
        accumulator.add(chunk)
    return accumulator.summary()
