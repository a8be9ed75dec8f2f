import math

import torch

from .errors import DimensionMismatchError, EmptyGridError
from .grid import Grid
from .vector_math import pairwise_distances


def _check_point(point) -> torch.Tensor:
    point = torch.as_tensor(point, dtype=torch.float64)
    if point.shape != (2,):
        raise DimensionMismatchError(f"A point must have exactly 2 components, got shape {tuple(point.shape)}")
    return point


def _check_points(points) -> torch.Tensor:
    points = torch.as_tensor(points, dtype=torch.float64)
    if points.dim() != 2 or points.shape[1] != 2:
        raise DimensionMismatchError(f"Points must have shape (N, 2). Got shape {tuple(points.shape)}")
    return points


def find_winner(point, grid: Grid) -> tuple[int, int]:
    """
    Finds the best matching unit for `point`.

    Every prototype is compared on its first two components. Ties go to the
    first minimum in row-major order, i.e. the smallest (row, col).

    Returns:
        tuple[int, int]: (row, col) of the winning prototype.
    """
    if grid.rows == 0 or grid.cols == 0:
        raise EmptyGridError("Cannot search for a winner in an empty grid")
    point = _check_point(point)

    dists = pairwise_distances(point, grid.weights[:, :, :2]).flatten()
    # a NaN distance never compares smaller; argmin returns the first minimal index
    dists = torch.where(torch.isnan(dists), torch.full_like(dists, math.inf), dists)
    index = int(torch.argmin(dists).item())
    return divmod(index, grid.cols)


def map_to_winners(points, grid: Grid) -> torch.Tensor:
    """
    Maps input points to the (row, col) positions of their winners.

    Args:
        points: Tensor or nested sequence of shape (num_points, 2).

    Returns:
        torch.Tensor: Long tensor of shape (num_points, 2).
    """
    points = _check_points(points)
    winners = [find_winner(p, grid) for p in points]
    return torch.tensor(winners, dtype=torch.long).reshape(len(winners), 2)


def quantization_error(points, grid: Grid) -> float:
    """
    Average distance between each point and the position of its winner.

    Args:
        points: Tensor or nested sequence of shape (num_points, 2).

    Returns:
        float: The quantization error.
    """
    points = _check_points(points)
    if points.shape[0] == 0:
        raise ValueError("Quantization error is undefined for an empty point set")
    winners = map_to_winners(points, grid)
    winner_positions = grid.weights[winners[:, 0], winners[:, 1], :2]
    return torch.linalg.norm(points - winner_positions, dim=1).mean().item()
