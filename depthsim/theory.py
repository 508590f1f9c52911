"""Closed-form mean-variance and dropout curves.

Poisson curves are the null model for counts at a fixed depth. The
negative-binomial curves describe the overdispersion that appears when the
Poisson rate itself varies between cells, which is what variable sequencing
depth does to an otherwise Poisson gene.
"""

from typing import Sequence, Union

import numpy as np
import pandas as pd

from .exceptions import InvalidParameters

ArrayLike = Union[float, Sequence[float], np.ndarray, pd.Series]


def _as_means(mean: ArrayLike) -> np.ndarray:
    values = np.asarray(mean, dtype=float)
    if np.any(np.isnan(values)) or np.any(values < 0):
        raise InvalidParameters("mean must be non-negative")
    return values


def _unwrap(values: np.ndarray, like: ArrayLike):
    if isinstance(like, pd.Series):
        return pd.Series(values, index=like.index)
    if values.ndim == 0:
        return float(values)
    return values


def _check_theta(theta: float) -> None:
    if not theta > 0:
        raise InvalidParameters("theta must be positive")


def poisson_variance(mean: ArrayLike):
    """Poisson variance: equal to the mean."""
    return _unwrap(_as_means(mean).copy(), mean)


def poisson_dropout(mean: ArrayLike):
    """Poisson probability of a zero count: exp(-mean)."""
    return _unwrap(np.exp(-_as_means(mean)), mean)


def negative_binomial_variance(mean: ArrayLike, theta: float):
    """Negative-binomial variance: mean + mean**2 / theta."""
    _check_theta(theta)
    values = _as_means(mean)
    return _unwrap(values + values**2 / theta, mean)


def negative_binomial_dropout(mean: ArrayLike, theta: float):
    """Negative-binomial probability of a zero count: (theta / (theta + mean))**theta."""
    _check_theta(theta)
    values = _as_means(mean)
    if np.isinf(theta):
        return _unwrap(np.exp(-values), mean)
    return _unwrap((theta / (theta + values)) ** theta, mean)


def depth_overdispersion(depths: Sequence[float]) -> float:
    """Inverse dispersion implied by cell-to-cell depth variation.

    A gene with fraction p in every cell has mean p*E[D] and variance of
    about p*E[D] + (p*E[D])**2 * Var[D] / E[D]**2, so its counts follow the
    negative-binomial mean-variance curve with theta = E[D]**2 / Var[D].
    Constant depths give an infinite theta, the Poisson limit.
    """
    values = np.asarray(depths, dtype=float)
    if values.size == 0:
        raise InvalidParameters("at least one depth is required")
    if np.any(~np.isfinite(values)) or np.any(values <= 0):
        raise InvalidParameters("depths must be positive")
    spread = values.var()
    if spread == 0:
        return float("inf")
    return float(values.mean() ** 2 / spread)


def poisson_curve(means: ArrayLike) -> pd.DataFrame:
    """Evaluate the Poisson variance and dropout curves at the given means."""
    values = np.atleast_1d(_as_means(means))
    return pd.DataFrame(
        {
            "mean": values,
            "variance": poisson_variance(values),
            "dropout_prob": poisson_dropout(values),
        }
    )
