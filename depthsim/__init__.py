"""Simulation of how variable sequencing depth makes Poisson counts overdispersed."""

from .analysis import analyze_counts, as_count_matrix, summary_table
from .config import SimulationConfig
from .exceptions import (
    DepthSimError,
    DimensionMismatch,
    InvalidDepth,
    InvalidParameters,
    InvalidProfile,
    ZeroDepthCell,
)
from .random_source import RandomSource
from .simulator import DepthSim

__all__ = [
    "DepthSim",
    "DepthSimError",
    "DimensionMismatch",
    "InvalidDepth",
    "InvalidParameters",
    "InvalidProfile",
    "RandomSource",
    "SimulationConfig",
    "ZeroDepthCell",
    "analyze_counts",
    "as_count_matrix",
    "summary_table",
]
