import torch

from .errors import DimensionMismatchError


def _as_tensor(values) -> torch.Tensor:
    return torch.as_tensor(values, dtype=torch.float64)


def pairwise_distances(point, weights) -> torch.Tensor:
    """
    Euclidean distance between `point` and every vector along the last axis of `weights`.

    Args:
        point: Sequence or tensor of shape (k,).
        weights (torch.Tensor): Tensor of shape (..., k).

    Returns:
        torch.Tensor: Distances of shape weights.shape[:-1].
    """
    point = _as_tensor(point)
    weights = _as_tensor(weights)
    if point.dim() != 1 or weights.shape[-1] != point.shape[0]:
        raise DimensionMismatchError(
            f"Cannot compare a point of shape {tuple(point.shape)} "
            f"with vectors of shape {tuple(weights.shape)}"
        )
    return torch.sqrt(((point - weights) ** 2).sum(dim=-1))


def euclidean_distance(p1, p2) -> float:
    """Euclidean distance between two points of equal dimension."""
    p1 = _as_tensor(p1)
    p2 = _as_tensor(p2)
    if p1.dim() != 1 or p2.shape != p1.shape:
        raise DimensionMismatchError(
            f"Points must share one dimension, got {tuple(p1.shape)} and {tuple(p2.shape)}"
        )
    return pairwise_distances(p1, p2).item()
