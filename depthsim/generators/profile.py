"""Relative gene-abundance profile generation."""

import math
from typing import Optional, Sequence

import pandas as pd
from numpy.random import Generator

from ..exceptions import InvalidParameters


def make_genenames(ngenes: int) -> list[str]:
    return [f"Gene{i}" for i in range(1, ngenes + 1)]


def generate_profile(
    rng: Generator,
    ngenes: int,
    min_exponent: float,
    max_exponent: float,
    genenames: Optional[Sequence[str]] = None,
) -> pd.Series:
    """Sample a fixed relative-abundance profile over genes.

    Each raw weight is 10 raised to an exponent drawn uniformly from
    [min_exponent, max_exponent], independently per gene. The weights are
    then normalized to sum to 1.

    Args:
        rng: NumPy random generator.
        ngenes: Number of genes.
        min_exponent: Lower bound of the log10 raw weight.
        max_exponent: Upper bound of the log10 raw weight.
        genenames: Optional gene labels (defaults to Gene1..GeneN).

    Returns:
        Series of strictly positive weights summing to 1, indexed by gene.

    Raises:
        InvalidParameters: If ngenes is not positive or the exponent range
            is inverted or not finite.
    """
    if ngenes <= 0:
        raise InvalidParameters("ngenes must be positive")
    if not (math.isfinite(min_exponent) and math.isfinite(max_exponent)):
        raise InvalidParameters("profile exponents must be finite")
    if min_exponent > max_exponent:
        raise InvalidParameters("min_exponent cannot exceed max_exponent")
    if genenames is None:
        genenames = make_genenames(ngenes)
    elif len(genenames) != ngenes:
        raise InvalidParameters(
            f"genenames length ({len(genenames)}) must match ngenes ({ngenes})"
        )

    exponents = rng.uniform(low=min_exponent, high=max_exponent, size=ngenes)
    weights = 10.0**exponents
    weights = weights / weights.sum()

    return pd.Series(weights, index=list(genenames), name="weight")
