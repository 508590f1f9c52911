"""Configuration classes for depth-variability simulation."""

import math
from dataclasses import dataclass
from typing import Optional

from .exceptions import InvalidParameters

DEPTH_POLICIES = ("constant", "variable")


@dataclass
class SimulationConfig:
    """Configuration parameters for a depth-variability simulation.

    Attributes:
        ngenes: Number of genes to simulate.
        ncells: Number of cells to simulate.
        seed: Random seed for reproducibility (nonnegative).
        depth_policy: "constant" for identical depths across cells, or
            "variable" for depths drawn uniformly from [min_depth, max_depth].
        depth: Total counts per cell under the constant policy.
        min_depth: Lower bound of the depth range under the variable policy.
        max_depth: Upper bound of the depth range under the variable policy.
        min_exponent: Lower bound of the log10 raw gene weights.
        max_exponent: Upper bound of the log10 raw gene weights.
        scale_factor: Multiplier applied to per-cell fractions for the
            rescaled normalization level.
        nworkers: Number of threads used to draw per-cell counts.
        chunksize: Number of cells materialized at once (None = all cells).
    """

    ngenes: int = 300
    ncells: int = 1000
    seed: int = 42
    depth_policy: str = "variable"
    depth: float = 1e5
    min_depth: float = 5000.0
    max_depth: float = 100000.0
    min_exponent: float = 0.0
    max_exponent: float = 3.0
    scale_factor: float = 3.5e4
    nworkers: int = 1
    chunksize: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        self._validate()

    def _validate(self) -> None:
        """Validate that all parameters are within acceptable ranges."""
        # Validate positive integers
        if self.ngenes <= 0:
            raise InvalidParameters("ngenes must be positive")
        if self.ncells <= 0:
            raise InvalidParameters("ncells must be positive")
        if self.seed < 0:
            raise InvalidParameters("seed must be non-negative")
        if self.nworkers <= 0:
            raise InvalidParameters("nworkers must be positive")
        if self.chunksize is not None and self.chunksize <= 0:
            raise InvalidParameters("chunksize must be positive")

        # Validate depth policy
        if self.depth_policy not in DEPTH_POLICIES:
            raise InvalidParameters(
                f"depth_policy must be one of {DEPTH_POLICIES}, "
                f"got {self.depth_policy!r}"
            )
        if self.depth_policy == "constant":
            if not (self.depth > 0 and math.isfinite(self.depth)):
                raise InvalidParameters("depth must be positive and finite")
        else:
            if not (math.isfinite(self.min_depth) and math.isfinite(self.max_depth)):
                raise InvalidParameters("depth bounds must be finite")
            if not self.min_depth > 0:
                raise InvalidParameters("min_depth must be positive")
            if self.min_depth > self.max_depth:
                raise InvalidParameters("min_depth cannot exceed max_depth")

        # Validate profile exponent range
        if not (math.isfinite(self.min_exponent) and math.isfinite(self.max_exponent)):
            raise InvalidParameters("profile exponents must be finite")
        if self.min_exponent > self.max_exponent:
            raise InvalidParameters("min_exponent cannot exceed max_exponent")

        if not (self.scale_factor > 0 and math.isfinite(self.scale_factor)):
            raise InvalidParameters("scale_factor must be positive")
