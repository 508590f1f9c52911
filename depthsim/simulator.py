"""Simulation of sequencing-depth-induced overdispersion in single-cell counts."""

import logging
import warnings
from typing import TYPE_CHECKING, Optional, Self

import pandas as pd

from .analysis import summarize_levels, summary_table
from .config import SimulationConfig
from .exporters import to_anndata
from .generators import (
    check_dimensions,
    generate_profile,
    sample_depths,
    simulate_batch,
)
from .normalization import normalize_all
from .random_source import RandomSource
from .theory import depth_overdispersion

if TYPE_CHECKING:
    import anndata

# Configure module logger
logger = logging.getLogger(__name__)


class DepthSim:
    """Simulator of Poisson gene expression observed at varying sequencing depth.

    Every cell shares one relative gene-abundance profile, so the only
    source of cell-to-cell variation besides multinomial sampling is the
    cell's total depth. With a constant depth the per-gene counts are
    Poisson-like; with a variable depth they become overdispersed, following
    a negative-binomial mean-variance curve.

    Example:
        >>> config = SimulationConfig(ngenes=300, ncells=1000, depth_policy="variable")
        >>> sim = DepthSim(config).simulate().normalize().summarize()
        >>> counts = sim.counts  # genes x cells DataFrame
        >>> sim.summaries["cpm"].head()
    """

    def __init__(self, config: SimulationConfig) -> None:
        """Initialize the simulator.

        Args:
            config: SimulationConfig object with all parameters.
        """
        self.config = config
        self.random_source = RandomSource(config.seed)

        # Will be populated during simulation
        self.profile: pd.Series
        self.depths: pd.Series
        self.counts: pd.DataFrame
        self.cellparams: pd.DataFrame
        self.normalized: Optional[dict[str, pd.DataFrame]] = None
        self.summaries: Optional[dict[str, pd.DataFrame]] = None
        self._simulated = False

    def simulate(self) -> Self:
        """Run the generative pipeline.

        1. Sample the gene profile
        2. Sample per-cell depths under the configured policy
        3. Draw one multinomial count vector per cell

        Returns:
            Self for method chaining.
        """
        cfg = self.config

        if self._simulated:
            warnings.warn(
                "Simulation already exists. Overwriting with a new simulation.",
                UserWarning,
                stacklevel=2,
            )
            self.normalized = None
            self.summaries = None

        logger.info("Sampling gene profile")
        self.profile = generate_profile(
            rng=self.random_source.stream("profile"),
            ngenes=cfg.ngenes,
            min_exponent=cfg.min_exponent,
            max_exponent=cfg.max_exponent,
        )

        logger.info(f"Sampling {cfg.depth_policy} depths")
        self.depths = sample_depths(
            rng=self.random_source.stream("depth"),
            policy=cfg.depth_policy,
            ncells=cfg.ncells,
            depth=cfg.depth,
            low=cfg.min_depth,
            high=cfg.max_depth,
        )

        logger.info("Simulating counts")
        self.counts = simulate_batch(
            random_source=self.random_source,
            profile=self.profile,
            depths=self.depths,
            nworkers=cfg.nworkers,
            chunksize=cfg.chunksize,
        )
        check_dimensions(self.counts, profile=self.profile, ncells=cfg.ncells)

        self.cellparams = pd.DataFrame(
            {
                "depth": self.depths,
                "total_counts": self.counts.sum(axis=0),
                "ngenes_detected": (self.counts > 0).sum(axis=0),
            }
        )
        self._simulated = True
        return self

    def normalize(self) -> Self:
        """Derive the fraction, CPM and rescaled-fraction matrices.

        Returns:
            Self for method chaining.

        Raises:
            ValueError: If simulate() hasn't been called.
            ZeroDepthCell: If a simulated cell has no counts.
        """
        self._require_simulation("normalize")
        logger.info("Normalizing counts")
        self.normalized = normalize_all(self.counts, self.config.scale_factor)
        return self

    def summarize(self) -> Self:
        """Compute per-gene summaries and Poisson predictions at each level.

        Normalizes first if normalize() hasn't been called.

        Returns:
            Self for method chaining.
        """
        if self.normalized is None:
            self.normalize()
        logger.info("Summarizing normalization levels")
        self.summaries = summarize_levels(self.normalized)
        return self

    def summary_table(self) -> pd.DataFrame:
        """Long-form table of every level's per-gene summary."""
        if self.summaries is None:
            self.summarize()
        return summary_table(self.summaries)

    def expected_theta(self) -> float:
        """Negative-binomial inverse dispersion implied by the sampled depths."""
        self._require_simulation("expected_theta")
        return depth_overdispersion(self.depths)

    def to_anndata(self) -> "anndata.AnnData":
        """Export simulation results to an AnnData object.

        Requires the `anndata` package to be installed.
        Install with: `pip install depthsim[anndata]`

        Returns:
            AnnData object with:
            - X: count matrix (cells x genes)
            - obs: cell parameters (depth, total_counts, ngenes_detected)
            - var: gene profile weights and per-level summaries (if computed)
            - layers: normalized matrices (if computed)
            - uns["depthsim_config"]: simulation config as dict

        Raises:
            ImportError: If anndata is not installed.
        """
        self._require_simulation("to_anndata")
        return to_anndata(
            counts=self.counts,
            cellparams=self.cellparams,
            profile=self.profile,
            config=self.config,
            normalized=self.normalized,
            summaries=self.summaries,
        )

    def _require_simulation(self, caller: str) -> None:
        if not self._simulated:
            raise ValueError(f"Must call simulate() first before {caller}()")
