"""Tests for per-cell normalization transforms."""

import numpy as np
import pandas as pd
import pytest

from depthsim import InvalidParameters, ZeroDepthCell
from depthsim.normalization import (
    CPM_SCALE,
    NORMALIZATION_LEVELS,
    normalize_all,
    to_cpm,
    to_fraction,
    to_scaled_fraction,
)


def test_fraction_columns_sum_to_one(small_counts):
    fraction = to_fraction(small_counts)
    np.testing.assert_allclose(fraction.sum(axis=0).to_numpy(), 1.0)
    assert fraction.loc["GeneC", "Cell1"] == pytest.approx(0.6)
    assert list(fraction.columns) == list(small_counts.columns)


def test_fraction_does_not_mutate_source(small_counts):
    before = small_counts.copy()
    to_fraction(small_counts)
    pd.testing.assert_frame_equal(small_counts, before)


def test_cpm_is_fraction_times_one_million(small_counts):
    pd.testing.assert_frame_equal(to_cpm(small_counts), to_fraction(small_counts) * 1e6)
    assert CPM_SCALE == 1e6


def test_scaled_fraction(small_counts):
    scaled = to_scaled_fraction(small_counts, 3.5e4)
    np.testing.assert_allclose(scaled.sum(axis=0).to_numpy(), 3.5e4)
    with pytest.raises(InvalidParameters):
        to_scaled_fraction(small_counts, 0)
    with pytest.raises(InvalidParameters):
        to_scaled_fraction(small_counts, -2.0)


def test_zero_depth_cell_names_column(small_counts):
    small_counts["Cell3"] = 0
    with pytest.raises(ZeroDepthCell) as excinfo:
        to_fraction(small_counts)
    assert excinfo.value.cell_index == 2
    assert excinfo.value.cell_name == "Cell3"
    assert "Cell3" in str(excinfo.value)


def test_zero_depth_cell_from_array():
    matrix = np.array([[1, 0], [2, 0]])
    with pytest.raises(ZeroDepthCell) as excinfo:
        to_cpm(matrix)
    assert excinfo.value.cell_index == 1


def test_normalize_all_levels(small_counts):
    levels = normalize_all(small_counts, scale_factor=100.0)
    assert tuple(levels) == NORMALIZATION_LEVELS
    pd.testing.assert_frame_equal(levels["counts"], small_counts)
    pd.testing.assert_frame_equal(levels["cpm"], to_cpm(small_counts))
    pd.testing.assert_frame_equal(
        levels["scaled"], to_scaled_fraction(small_counts, 100.0)
    )


@pytest.mark.parametrize("bad", [np.nan, np.inf])
def test_non_finite_entries_rejected(bad):
    matrix = pd.DataFrame([[1.0, 2.0], [bad, 3.0]], columns=["Cell1", "Cell2"])
    with pytest.raises(InvalidParameters, match="Cell1"):
        to_fraction(matrix)
    with pytest.raises(InvalidParameters):
        normalize_all(matrix, scale_factor=10.0)
