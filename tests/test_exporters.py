"""Tests for AnnData import and the real-data path built on it."""

import numpy as np
import pandas as pd
import pytest

anndata = pytest.importorskip("anndata")

from depthsim import DepthSim, SimulationConfig, analyze_counts  # noqa: E402
from depthsim.exporters import from_anndata  # noqa: E402


def test_from_anndata_returns_genes_by_cells():
    X = np.array([[1, 0, 2], [3, 4, 0]])  # 2 cells x 3 genes
    adata = anndata.AnnData(
        X=X,
        obs=pd.DataFrame(index=["c1", "c2"]),
        var=pd.DataFrame(index=["g1", "g2", "g3"]),
    )
    matrix = from_anndata(adata)
    assert matrix.shape == (3, 2)
    assert list(matrix.index) == ["g1", "g2", "g3"]
    assert list(matrix.columns) == ["c1", "c2"]
    assert matrix.loc["g2", "c2"] == 4


def test_from_anndata_densifies_sparse_layers():
    sparse = pytest.importorskip("scipy.sparse")
    adata = anndata.AnnData(
        X=np.zeros((2, 2)),
        obs=pd.DataFrame(index=["c1", "c2"]),
        var=pd.DataFrame(index=["g1", "g2"]),
    )
    adata.layers["counts"] = sparse.csr_matrix(np.array([[5, 0], [0, 7]]))
    matrix = from_anndata(adata, layer="counts")
    assert matrix.to_numpy().tolist() == [[5, 0], [0, 7]]


def test_round_trip_through_anndata():
    sim = DepthSim(SimulationConfig(ngenes=30, ncells=50, seed=4)).simulate()
    restored = from_anndata(sim.to_anndata())
    np.testing.assert_array_equal(restored.to_numpy(), sim.counts.to_numpy())
    assert list(restored.index) == list(sim.counts.index)

    summaries = analyze_counts(restored, scale_factor=3.5e4)
    np.testing.assert_allclose(
        summaries["counts"]["mean"].to_numpy(), sim.counts.mean(axis=1).to_numpy()
    )
