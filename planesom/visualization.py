import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import torch
from matplotlib.collections import LineCollection

from .grid import Grid, lattice_edges
from .training import Snapshot

logger = logging.getLogger(__name__)

FIGURE_PIXELS = 600
DPI = 100


def _lattice_segments(weights: torch.Tensor) -> list:
    rows, cols = weights.shape[:2]
    return [
        [weights[a][:2].tolist(), weights[b][:2].tolist()]
        for a, b in lattice_edges(rows, cols)
    ]


def render_som(
    weights: torch.Tensor,
    points: torch.Tensor,
    output_path,
    bounds: tuple[float, float] = (-300.0, 300.0),
    point: Optional[tuple[float, float]] = None,
    winner: Optional[tuple[int, int]] = None,
    title: str = "SOM Network",
):
    """
    Draws the input points and the map state to a PNG file.

    Args:
        weights: Tensor of shape (rows, cols, input_dim); only the first two components are drawn.
        points: Tensor of shape (num_points, 2).
        output_path: Destination file.
        bounds: (low, high) of both plot axes.
        point: Processed point to highlight in purple.
        winner: (row, col) of the winning prototype to highlight in red.
    """
    weights = weights.detach().cpu()
    points = torch.as_tensor(points).cpu()
    low, high = bounds

    size = FIGURE_PIXELS / DPI
    fig, ax = plt.subplots(figsize=(size, size), dpi=DPI)
    ax.set_xlim(low, high)
    ax.set_ylim(low, high)
    ax.set_title(title)

    ax.scatter(points[:, 0].numpy(), points[:, 1].numpy(), s=4, color="grey", zorder=1)
    ax.add_collection(LineCollection(_lattice_segments(weights), colors="black", linewidths=1, zorder=2))
    flat = weights[:, :, :2].reshape(-1, 2)
    ax.scatter(flat[:, 0].numpy(), flat[:, 1].numpy(), s=9, color="hotpink", zorder=3)

    if point is not None:
        ax.scatter([point[0]], [point[1]], s=25, color="purple", zorder=4)
    if winner is not None:
        w = weights[winner[0], winner[1]]
        ax.scatter([w[0].item()], [w[1].item()], s=25, color="red", zorder=5)

    fig.savefig(output_path, dpi=DPI)
    plt.close(fig)


def make_output_dir(root=".", now: Optional[datetime] = None) -> Path:
    """Creates and returns `root/plots_YYYYmmdd-HHMMSS`."""
    now = now or datetime.now()
    out_dir = Path(root) / f"plots_{now.strftime('%Y%m%d-%H%M%S')}"
    out_dir.mkdir(parents=True, exist_ok=False)
    return out_dir


class SnapshotRenderer:
    """
    Snapshot hook writing one PNG per snapshot into `output_dir`.

    Per-point snapshots go to e{epoch}_plot2_i{index+1}.png, epoch boundaries
    to e{epoch}_plot3.png. Boundary snapshots are skipped unless
    `render_epochs` is set.
    """
    def __init__(self, output_dir, points: torch.Tensor, bounds: tuple[float, float] = (-300.0, 300.0),
                 render_epochs: bool = False):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.points = points
        self.bounds = bounds
        self.render_epochs = render_epochs
        self.written: list[Path] = []

    def _render(self, weights, name, **kwargs) -> Path:
        path = self.output_dir / name
        render_som(weights, self.points, path, bounds=self.bounds, **kwargs)
        self.written.append(path)
        logger.debug(f"Wrote {path}")
        return path

    def render_initial(self, grid: Grid) -> Path:
        return self._render(grid.get_weights(), "e0_plot1.png")

    def render_final(self, grid: Grid, epoch: int) -> Path:
        return self._render(grid.get_weights(), f"e{epoch}_final.png")

    def __call__(self, snapshot: Snapshot):
        if snapshot.index is None:
            if self.render_epochs:
                self._render(snapshot.weights, f"e{snapshot.epoch}_plot3.png")
            return
        self._render(
            snapshot.weights,
            f"e{snapshot.epoch}_plot2_i{snapshot.index + 1}.png",
            point=snapshot.point,
            winner=snapshot.winner,
        )
