"""Error types raised by depth-variability simulation and analysis."""

from typing import Hashable, Optional


class DepthSimError(Exception):
    """Base class for all depthsim errors."""


class InvalidParameters(DepthSimError, ValueError):
    """Malformed configuration: non-positive sizes, inverted ranges."""


class InvalidProfile(DepthSimError, ValueError):
    """Gene profile with negative weights or not summing to 1."""


class InvalidDepth(DepthSimError, ValueError):
    """Non-positive or non-finite sequencing depth."""


class DimensionMismatch(DepthSimError, ValueError):
    """Matrix shape inconsistent with the profile, cell count or reduction."""


class ZeroDepthCell(DepthSimError, ValueError):
    """A cell with zero total count cannot be normalized.

    Attributes:
        cell_index: Position of the offending column.
        cell_name: Label of the offending column, if the matrix has labels.
    """

    def __init__(self, cell_index: int, cell_name: Optional[Hashable] = None) -> None:
        self.cell_index = cell_index
        self.cell_name = cell_name
        label = f" ({cell_name})" if cell_name is not None else ""
        super().__init__(
            f"Cell {cell_index}{label} has zero total count and cannot be normalized"
        )
