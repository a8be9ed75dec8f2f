from dataclasses import dataclass
from typing import Optional, Union

import torch

from .errors import DimensionMismatchError, EmptyGridError, GridIndexError


@dataclass(frozen=True)
class Lattice:
    """
    Seed prototypes on a regular mesh covering the plotting range.

    Prototype (i, j) starts at (low + cell_size/2 + i*cell_size,
    low + cell_size/2 + j*cell_size); extra components start at zero.
    """
    low: float = -300.0
    high: float = 300.0
    cell_size: float = 60.0

    def __post_init__(self):
        if self.cell_size <= 0:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")
        if self.low >= self.high:
            raise ValueError(f"Lattice bounds must satisfy low < high, got ({self.low}, {self.high})")


@dataclass(frozen=True)
class UniformRandom:
    """Draw every weight component independently from U[low, high)."""
    low: float = 0.0
    high: float = 1.0
    seed: Optional[int] = None

    def __post_init__(self):
        if self.low >= self.high:
            raise ValueError(f"Uniform range must satisfy low < high, got ({self.low}, {self.high})")


InitStrategy = Union[Lattice, UniformRandom]


def lattice_edges(rows: int, cols: int) -> list[tuple[tuple[int, int], tuple[int, int]]]:
    """Pairs of grid-adjacent positions: each cell with the cell above it and the cell to its left."""
    edges = []
    for i in range(rows):
        for j in range(cols):
            if i > 0:
                edges.append(((i, j), (i - 1, j)))
            if j > 0:
                edges.append(((i, j), (i, j - 1)))
    return edges


class Grid:
    """
    A rows x cols map of prototype vectors.

    The shape is fixed at construction; only the weights change afterwards.
    Weights are held in a float64 tensor of shape (rows, cols, input_dim), of
    which the first two components are the (x, y) position of the prototype.
    """
    def __init__(self,
                 rows: int,
                 cols: int,
                 input_dim: int = 2,
                 init: InitStrategy = Lattice(),
                ):
        """
        Args:
            rows (int): Number of grid rows.
            cols (int): Number of grid columns.
            input_dim (int): Dimension of each prototype, at least 2.
            init (Lattice | UniformRandom): Weight initialization policy.
        """
        if rows <= 0 or cols <= 0:
            raise EmptyGridError(f"Grid needs at least one row and one column, got {rows}x{cols}")
        if input_dim < 2:
            raise DimensionMismatchError(f"Prototypes need at least 2 components, got {input_dim}")

        self.rows = rows
        self.cols = cols
        self.input_dim = input_dim
        self.init = init
        self.weights = self._initial_weights(init)

    def _initial_weights(self, init: InitStrategy) -> torch.Tensor:
        shape = (self.rows, self.cols, self.input_dim)
        if isinstance(init, Lattice):
            weights = torch.zeros(shape, dtype=torch.float64)
            offset = init.low + init.cell_size / 2
            rows = torch.arange(self.rows, dtype=torch.float64)
            cols = torch.arange(self.cols, dtype=torch.float64)
            weights[:, :, 0] = (offset + rows * init.cell_size).unsqueeze(1)
            weights[:, :, 1] = (offset + cols * init.cell_size).unsqueeze(0)
            return weights
        if isinstance(init, UniformRandom):
            generator = torch.Generator()
            if init.seed is not None:
                generator.manual_seed(init.seed)
            else:
                generator.seed()
            weights = torch.rand(shape, generator=generator, dtype=torch.float64)
            return init.low + (init.high - init.low) * weights
        raise TypeError(f"Unsupported init strategy: {init!r}")

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    @property
    def num_neurons(self) -> int:
        return self.rows * self.cols

    def _check_position(self, row: int, col: int):
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise GridIndexError(f"Position ({row}, {col}) is outside the {self.rows}x{self.cols} grid")

    def prototype(self, row: int, col: int) -> torch.Tensor:
        """Returns a copy of the weight vector at (row, col)."""
        self._check_position(row, col)
        return self.weights[row, col].clone()

    def update(self, row: int, col: int, delta):
        """Adds `delta` component-wise to the prototype at (row, col)."""
        self._check_position(row, col)
        delta = torch.as_tensor(delta, dtype=torch.float64)
        if delta.shape != (self.input_dim,):
            raise DimensionMismatchError(f"Delta must have shape ({self.input_dim},), got {tuple(delta.shape)}")
        self.weights[row, col] += delta

    def update_block(self, row_start: int, row_stop: int, col_start: int, col_stop: int, delta: torch.Tensor):
        """
        Adds `delta` to the leading components of a rectangular block of prototypes.

        Args:
            row_start, row_stop (int): Half-open row range [row_start, row_stop).
            col_start, col_stop (int): Half-open column range [col_start, col_stop).
            delta (torch.Tensor): Shape (row_stop-row_start, col_stop-col_start, k), k <= input_dim.
                                  Only the first k components of each prototype change.
        """
        if not (0 <= row_start < row_stop <= self.rows and 0 <= col_start < col_stop <= self.cols):
            raise GridIndexError(
                f"Block rows [{row_start}, {row_stop}) x cols [{col_start}, {col_stop}) "
                f"does not fit the {self.rows}x{self.cols} grid"
            )
        expected = (row_stop - row_start, col_stop - col_start)
        if delta.dim() != 3 or tuple(delta.shape[:2]) != expected or delta.shape[2] > self.input_dim:
            raise DimensionMismatchError(
                f"Delta of shape {tuple(delta.shape)} does not match block {expected} "
                f"with at most {self.input_dim} components"
            )
        self.weights[row_start:row_stop, col_start:col_stop, :delta.shape[2]] += delta

    def get_weights(self) -> torch.Tensor:
        """Returns a copy of the current weights, shape (rows, cols, input_dim)."""
        return self.weights.clone().detach()

    def lattice_edges(self) -> list[tuple[tuple[int, int], tuple[int, int]]]:
        return lattice_edges(self.rows, self.cols)

    def __repr__(self) -> str:
        return f"Grid(rows={self.rows}, cols={self.cols}, input_dim={self.input_dim}, init={self.init!r})"
