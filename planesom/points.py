import math
from pathlib import Path

import torch

from .errors import PointFormatError


def load_points(path) -> torch.Tensor:
    """
    Reads 2D points from a text file.

    Each non-blank line holds whitespace separated numbers; the first two are
    x and y and any further columns are ignored.

    Args:
        path (str | Path): File to read.

    Returns:
        torch.Tensor: float64 tensor of shape (num_points, 2).
    """
    path = Path(path)
    points = []
    with path.open() as f:
        for line_nr, line in enumerate(f, start=1):
            parts = line.split()
            if not parts:
                continue
            if len(parts) < 2:
                raise PointFormatError(f"{path}:{line_nr}: expected 'x y', got {line.strip()!r}")
            try:
                x, y = float(parts[0]), float(parts[1])
            except ValueError as e:
                raise PointFormatError(f"{path}:{line_nr}: {e}") from e
            if not (math.isfinite(x) and math.isfinite(y)):
                raise PointFormatError(f"{path}:{line_nr}: coordinates must be finite, got {line.strip()!r}")
            points.append((x, y))

    if not points:
        raise PointFormatError(f"{path}: no points found")
    return torch.tensor(points, dtype=torch.float64)
