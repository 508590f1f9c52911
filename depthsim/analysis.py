"""Mean-variance and dropout comparison across normalization levels.

This is also the entry point for real data: an already-parsed genes x cells
matrix goes straight to normalization and summary statistics, without any
of the generators.
"""

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .exceptions import DimensionMismatch, InvalidParameters
from .normalization import NORMALIZATION_LEVELS, normalize_all
from .statistics import compare_to_poisson, gene_summary

logger = logging.getLogger(__name__)


def as_count_matrix(
    data,
    genenames: Optional[Sequence[str]] = None,
    cellnames: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Validate a caller-supplied genes x cells matrix.

    Args:
        data: 2-D array or DataFrame of nonnegative numbers, genes as rows.
        genenames: Optional row labels, replacing a DataFrame's own index.
        cellnames: Optional column labels.

    Returns:
        DataFrame copy of the data.

    Raises:
        DimensionMismatch: If the data is not 2-D, has no genes or no
            cells, or the label lengths do not match.
        InvalidParameters: If the data is not numeric, not finite, or has
            negative entries.
    """
    frame = data.copy() if isinstance(data, pd.DataFrame) else None
    values = np.asarray(data)
    if values.ndim != 2:
        raise DimensionMismatch(f"expected a 2-D genes x cells matrix, got {values.ndim}-D")
    ngenes, ncells = values.shape
    if ngenes == 0 or ncells == 0:
        raise DimensionMismatch(f"matrix must have genes and cells, got shape {values.shape}")
    if not (np.issubdtype(values.dtype, np.number) or values.dtype == bool):
        raise InvalidParameters(f"matrix must be numeric, got dtype {values.dtype}")
    if not np.all(np.isfinite(values)):
        raise InvalidParameters("matrix contains non-finite values")
    if np.any(values < 0):
        raise InvalidParameters("matrix contains negative values")

    if frame is None:
        frame = pd.DataFrame(values)
    if genenames is not None:
        if len(genenames) != ngenes:
            raise DimensionMismatch(
                f"genenames length ({len(genenames)}) must match genes ({ngenes})"
            )
        frame.index = list(genenames)
    if cellnames is not None:
        if len(cellnames) != ncells:
            raise DimensionMismatch(
                f"cellnames length ({len(cellnames)}) must match cells ({ncells})"
            )
        frame.columns = list(cellnames)
    return frame


def summarize_levels(
    levels: dict[str, pd.DataFrame],
) -> dict[str, pd.DataFrame]:
    """GeneSummary with Poisson predictions for each normalized matrix."""
    summaries = {}
    for name, matrix in levels.items():
        logger.debug(f"Summarizing {name} level")
        summaries[name] = compare_to_poisson(gene_summary(matrix))
    return summaries


def analyze_counts(
    counts,
    scale_factor: float,
) -> dict[str, pd.DataFrame]:
    """Normalize a count matrix and summarize every normalization level.

    Args:
        counts: Nonnegative genes x cells matrix.
        scale_factor: Multiplier for the rescaled-fraction level.

    Returns:
        Dict keyed by NORMALIZATION_LEVELS of per-gene summaries with
        "mean", "variance", "dropout_prob", "poisson_variance" and
        "poisson_dropout" columns.
    """
    matrix = as_count_matrix(counts)
    logger.info(f"Analyzing {matrix.shape[0]} genes x {matrix.shape[1]} cells")
    return summarize_levels(normalize_all(matrix, scale_factor))


def summary_table(summaries: dict[str, pd.DataFrame]) -> pd.DataFrame:
    """Stack per-level summaries into one long table for plotting.

    Returns:
        DataFrame with a "normalization" column, a "gene" column, and the
        summary columns of each level.

    Raises:
        DimensionMismatch: If no summaries are given.
    """
    if not summaries:
        raise DimensionMismatch("at least one normalization level is required")
    frames = []
    for name in summaries:
        frame = summaries[name].rename_axis("gene").reset_index()
        frame.insert(0, "normalization", name)
        frames.append(frame)
    table = pd.concat(frames, axis=0, ignore_index=True)
    order = [n for n in NORMALIZATION_LEVELS if n in summaries]
    order += [n for n in summaries if n not in order]
    table["normalization"] = pd.Categorical(table["normalization"], categories=order)
    return table
