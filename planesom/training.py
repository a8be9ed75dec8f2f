import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import torch
from tqdm.auto import tqdm

from .errors import DimensionMismatchError
from .grid import Grid
from .schedule import DecaySchedule
from .winner import find_winner

logger = logging.getLogger(__name__)


class TrainingState(Enum):
    RUNNING = "running"
    CONVERGED = "converged"


@dataclass(frozen=True)
class Snapshot:
    """
    Consistent view of the training state handed to renderers.

    `index` is the position of the processed point within the epoch, or None
    for a snapshot taken at an epoch boundary.
    """
    epoch: int
    index: Optional[int]
    point: Optional[tuple[float, float]]
    winner: Optional[tuple[int, int]]
    weights: torch.Tensor
    learning_rate: float
    radius: float


SnapshotHook = Callable[[Snapshot], None]


class Trainer:
    """
    Online SOM training loop.

    Each epoch visits every point in input order: the winner is searched, then
    every prototype inside the square window of half-width int(radius) around
    it moves towards the point by the current learning rate. Training stops at
    the start of the first epoch whose learning rate is at or below the
    threshold.
    """
    def __init__(self,
                 grid: Grid,
                 points,
                 schedule: DecaySchedule = DecaySchedule(),
                 learning_rate_threshold: float = 0.001,
                 snapshot_hook: Optional[SnapshotHook] = None,
                 snapshot_every: Optional[int] = None,
                 show_progress: bool = False,
                ):
        """
        Args:
            grid (Grid): Map to train, mutated in place.
            points: Tensor or nested sequence of shape (num_points, 2).
            schedule (DecaySchedule): Learning rate and radius decay.
            learning_rate_threshold (float): Training converges once the rate drops to this value.
            snapshot_hook (callable | None): Receives a Snapshot after selected points and at every epoch end.
            snapshot_every (int | None): Take a per-point snapshot after every n-th point of an epoch.
                                         None disables per-point snapshots.
            show_progress (bool): Show a tqdm bar over the points of each epoch.
        """
        points = torch.as_tensor(points, dtype=torch.float64)
        if points.dim() != 2 or points.shape[1] != 2:
            raise DimensionMismatchError(f"Input points must have shape (N, 2). Got shape {tuple(points.shape)}")
        if points.shape[0] == 0:
            raise ValueError("Input point set must not be empty")
        if snapshot_every is not None and snapshot_every <= 0:
            raise ValueError(f"snapshot_every must be positive, got {snapshot_every}")

        self.grid = grid
        self.points = points.clone()
        self.schedule = schedule
        self.learning_rate_threshold = learning_rate_threshold
        self.snapshot_hook = snapshot_hook
        self.snapshot_every = snapshot_every
        self.show_progress = show_progress

        self.epoch = 0
        self.state = TrainingState.RUNNING

    @property
    def converged(self) -> bool:
        return self.state is TrainingState.CONVERGED

    def step(self, point, learning_rate: float, radius: float) -> tuple[int, int]:
        """
        Applies one update for a single point.

        Returns:
            tuple[int, int]: The winner position used for the update.
        """
        point = torch.as_tensor(point, dtype=torch.float64)
        row, col = find_winner(point, self.grid)
        window = int(radius)

        row_start, row_stop = max(0, row - window), min(self.grid.rows, row + window + 1)
        col_start, col_stop = max(0, col - window), min(self.grid.cols, col + window + 1)
        block = self.grid.weights[row_start:row_stop, col_start:col_stop, :2]
        self.grid.update_block(row_start, row_stop, col_start, col_stop, learning_rate * (point - block))
        return row, col

    def snapshot(self, index: Optional[int] = None, point=None, winner: Optional[tuple[int, int]] = None) -> Snapshot:
        """Returns a Snapshot holding a copy of the current weights."""
        if point is not None:
            point = tuple(float(v) for v in point)
        return Snapshot(
            epoch=self.epoch,
            index=index,
            point=point,
            winner=winner,
            weights=self.grid.get_weights(),
            learning_rate=self.schedule.learning_rate(self.epoch),
            radius=self.schedule.neighborhood_radius(self.epoch),
        )

    def run_epoch(self) -> bool:
        """
        Runs one epoch, or converges instead if the learning rate is too small.

        Returns:
            bool: True if the epoch was run, False once training has converged.
        """
        if self.converged:
            return False

        learning_rate = self.schedule.learning_rate(self.epoch)
        radius = self.schedule.neighborhood_radius(self.epoch)
        logger.info(f"Epoch {self.epoch}")
        logger.info(f"Learning rate: {learning_rate:.5f}")
        logger.info(f"Neighbourhood value: {radius:.3f}")

        if learning_rate <= self.learning_rate_threshold:
            logger.info(f"Learning rate under {self.learning_rate_threshold}, training converged")
            self.state = TrainingState.CONVERGED
            return False

        point_iter = enumerate(self.points)
        if self.show_progress:
            point_iter = tqdm(point_iter, total=len(self.points), desc=f"Epoch {self.epoch}", leave=False)
        for index, point in point_iter:
            winner = self.step(point, learning_rate, radius)
            if (
                self.snapshot_hook is not None
                and self.snapshot_every is not None
                and (index + 1) % self.snapshot_every == 0
            ):
                self.snapshot_hook(self.snapshot(index, point, winner))

        if self.snapshot_hook is not None:
            self.snapshot_hook(self.snapshot())
        self.epoch += 1
        return True

    def train(self, max_epochs: Optional[int] = None) -> int:
        """
        Trains until convergence, or until `max_epochs` more epochs have run.

        Returns:
            int: The epoch counter after training.
        """
        epochs_run = 0
        while max_epochs is None or epochs_run < max_epochs:
            if not self.run_epoch():
                break
            epochs_run += 1
        return self.epoch
