"""AnnData import and export for depth-variability simulation results."""

from dataclasses import asdict
from typing import TYPE_CHECKING, Optional

import numpy as np
import pandas as pd

from .config import SimulationConfig

if TYPE_CHECKING:
    import anndata


def _require_anndata(caller: str):
    try:
        import anndata
    except ImportError as e:
        raise ImportError(
            f"anndata is required for {caller}(). "
            "Install with: pip install depthsim[anndata]"
        ) from e
    return anndata


def to_anndata(
    counts: pd.DataFrame,
    cellparams: pd.DataFrame,
    profile: pd.Series,
    config: SimulationConfig,
    normalized: Optional[dict[str, pd.DataFrame]] = None,
    summaries: Optional[dict[str, pd.DataFrame]] = None,
) -> "anndata.AnnData":
    """Export simulation results to an AnnData object.

    AnnData stores cells as observations, so every genes x cells matrix is
    transposed on the way out.

    Requires the `anndata` package to be installed.
    Install with: `pip install depthsim[anndata]`

    Args:
        counts: Genes x cells count matrix.
        cellparams: Per-cell parameters indexed by cell.
        profile: Gene profile weights indexed by gene.
        config: Simulation configuration.
        normalized: Matrices keyed by normalization level (if computed).
        summaries: Per-gene summaries keyed by normalization level (if computed).

    Returns:
        AnnData object with:
        - X: count matrix (cells x genes)
        - obs: cell parameters
        - var: "weight" column plus "<level>_<statistic>" summary columns
        - layers: one layer per normalization level other than "counts"
        - uns["depthsim_config"]: simulation config as dict

    Raises:
        ImportError: If anndata is not installed.
    """
    anndata = _require_anndata("to_anndata")

    var = profile.to_frame(name="weight")
    if summaries is not None:
        for level, summary in summaries.items():
            for column in summary.columns:
                var[f"{level}_{column}"] = summary[column].to_numpy()

    adata = anndata.AnnData(
        X=counts.T.to_numpy(),
        obs=cellparams.copy(),
        var=var,
    )
    if normalized is not None:
        for level, matrix in normalized.items():
            if level != "counts":
                adata.layers[level] = matrix.T.to_numpy()

    adata.uns["depthsim_config"] = asdict(config)
    return adata


def from_anndata(
    adata: "anndata.AnnData",
    layer: Optional[str] = None,
) -> pd.DataFrame:
    """Read a genes x cells matrix from an already-loaded AnnData object.

    Args:
        adata: AnnData with cells as observations and genes as variables.
        layer: Layer to read instead of X.

    Returns:
        Dense DataFrame with genes as rows and cells as columns.
    """
    _require_anndata("from_anndata")
    matrix = adata.X if layer is None else adata.layers[layer]
    if hasattr(matrix, "toarray"):
        matrix = matrix.toarray()
    return pd.DataFrame(
        np.asarray(matrix).T,
        index=list(adata.var_names),
        columns=list(adata.obs_names),
    )
