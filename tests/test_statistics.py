"""Tests for per-gene summary statistics."""

import numpy as np
import pandas as pd
import pytest

from depthsim import DimensionMismatch, InvalidParameters
from depthsim.statistics import (
    GeneStatsAccumulator,
    compare_to_poisson,
    dispersion_ratio,
    dropout_probability,
    gene_summary,
    mean_variance,
    summarize_chunks,
)


def test_mean_variance_uses_unbiased_variance(small_counts):
    result = mean_variance(small_counts)
    assert list(result.columns) == ["mean", "variance"]
    assert result.loc["GeneA", "mean"] == pytest.approx(2.0)
    # (1, 0, 5, 2): squared deviations 1 + 4 + 9 + 0 over n - 1 = 3
    assert result.loc["GeneA", "variance"] == pytest.approx(14 / 3)
    np.testing.assert_allclose(
        result["variance"].to_numpy(), small_counts.to_numpy().var(axis=1, ddof=1)
    )


def test_dropout_probability(small_counts):
    dropout = dropout_probability(small_counts)
    assert dropout.tolist() == [0.25, 0.25, 0.25]
    assert dropout.between(0, 1).all()


def test_all_positive_matrix_has_no_dropout():
    matrix = np.random.default_rng(0).integers(1, 50, size=(20, 30))
    assert (dropout_probability(matrix) == 0).all()


def test_dropout_counts_exact_zeros_only():
    matrix = pd.DataFrame([[0.0, 1e-12, 0.0, 3.0]])
    assert dropout_probability(matrix).iloc[0] == 0.5


def test_zero_cells_rejected():
    empty = pd.DataFrame(np.zeros((3, 0)))
    with pytest.raises(DimensionMismatch):
        mean_variance(empty)
    with pytest.raises(DimensionMismatch):
        dropout_probability(empty)


def test_single_cell_has_no_sample_variance():
    one = pd.DataFrame(np.ones((3, 1)))
    with pytest.raises(DimensionMismatch):
        mean_variance(one)
    assert (dropout_probability(one) == 0).all()


def test_non_matrix_rejected():
    with pytest.raises(DimensionMismatch):
        mean_variance(np.arange(5))


def test_gene_summary_and_poisson_comparison(small_counts):
    summary = compare_to_poisson(gene_summary(small_counts))
    assert list(summary.columns) == [
        "mean",
        "variance",
        "dropout_prob",
        "poisson_variance",
        "poisson_dropout",
    ]
    np.testing.assert_allclose(summary["poisson_variance"], summary["mean"])
    np.testing.assert_allclose(summary["poisson_dropout"], np.exp(-summary["mean"]))


def test_dispersion_ratio_filters_low_means():
    summary = pd.DataFrame(
        {"mean": [0.0, 5.0, 20.0], "variance": [0.0, 5.0, 60.0]},
        index=["a", "b", "c"],
    )
    ratio = dispersion_ratio(summary)
    assert ratio.to_dict() == {"b": 1.0, "c": 3.0}
    assert dispersion_ratio(summary, min_mean=10).to_dict() == {"c": 3.0}
    with pytest.raises(InvalidParameters):
        dispersion_ratio(summary, min_mean=-1)


def test_accumulator_matches_full_summary():
    matrix = pd.DataFrame(
        np.random.default_rng(11).poisson(lam=[[0.5], [4.0], [30.0]], size=(3, 25))
    )
    chunks = [matrix.iloc[:, 0:3], matrix.iloc[:, 3:10], matrix.iloc[:, 10:25]]
    merged = summarize_chunks(chunks)
    expected = gene_summary(matrix)
    pd.testing.assert_frame_equal(merged, expected, check_exact=False, rtol=1e-10)


def test_accumulator_is_reproducible():
    matrix = np.random.default_rng(2).random((4, 40))
    chunks = [matrix[:, i : i + 7] for i in range(0, 40, 7)]
    first = summarize_chunks(chunks)
    second = summarize_chunks(chunks)
    pd.testing.assert_frame_equal(first, second, check_exact=True)


def test_accumulator_rejects_mismatched_blocks():
    acc = GeneStatsAccumulator().add(np.ones((3, 2)))
    with pytest.raises(DimensionMismatch):
        acc.add(np.ones((4, 2)))


def test_accumulator_needs_two_cells():
    acc = GeneStatsAccumulator().add(np.ones((3, 1)))
    with pytest.raises(DimensionMismatch):
        acc.summary()
