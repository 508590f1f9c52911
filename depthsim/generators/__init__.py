"""Generator modules for depth-variability simulation."""

from .counts import (
    PROFILE_TOLERANCE,
    check_dimensions,
    iter_count_chunks,
    round_depth,
    simulate_batch,
    simulate_cell,
    validate_depths,
    validate_profile,
)
from .depth import constant_depths, sample_depths, variable_depths
from .profile import generate_profile

__all__ = [
    "PROFILE_TOLERANCE",
    "check_dimensions",
    "constant_depths",
    "generate_profile",
    "iter_count_chunks",
    "round_depth",
    "sample_depths",
    "simulate_batch",
    "simulate_cell",
    "validate_depths",
    "validate_profile",
    "variable_depths",
]
