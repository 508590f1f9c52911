"""Shared fixtures for depthsim tests."""

import numpy as np
import pandas as pd
import pytest

from depthsim import RandomSource
from depthsim.generators import generate_profile


@pytest.fixture
def random_source():
    return RandomSource(1234)


@pytest.fixture
def profile(random_source):
    return generate_profile(
        rng=random_source.stream("profile"),
        ngenes=300,
        min_exponent=0.0,
        max_exponent=3.0,
    )


@pytest.fixture
def small_counts():
    """3 genes x 4 cells matrix with labeled axes."""
    return pd.DataFrame(
        np.array(
            [
                [1, 0, 5, 2],
                [3, 4, 0, 2],
                [6, 6, 5, 0],
            ]
        ),
        index=["GeneA", "GeneB", "GeneC"],
        columns=["Cell1", "Cell2", "Cell3", "Cell4"],
    )
