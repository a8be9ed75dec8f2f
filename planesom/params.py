from dataclasses import dataclass
from typing import Optional

from .grid import Grid, Lattice, UniformRandom
from .schedule import DecaySchedule


@dataclass
class SOMParameters:
    rows: int = 10  # grid rows
    cols: int = 10  # grid columns
    input_dim: int = 2  # prototype dimension, only the first two take part in training

    init: str = "lattice"  # "lattice" or "random"
    bounds: tuple[float, float] = (-300.0, 300.0)  # coordinate plane, used by lattice init and rendering
    cell_size: float = 60.0  # lattice spacing
    random_range: tuple[float, float] = (0.0, 1.0)  # component range for random init
    seed: Optional[int] = None  # seed for random init

    initial_lr: float = 0.4  # learning rate at epoch 0
    initial_radius: float = 6.1  # neighborhood radius at epoch 0
    time_constant: float = 10.0  # shared decay time constant
    lr_threshold: float = 0.001  # stop once the learning rate falls to this value

    def init_strategy(self):
        if self.init == "lattice":
            return Lattice(low=self.bounds[0], high=self.bounds[1], cell_size=self.cell_size)
        if self.init == "random":
            return UniformRandom(low=self.random_range[0], high=self.random_range[1], seed=self.seed)
        raise ValueError(f"Unknown init strategy {self.init!r}, expected 'lattice' or 'random'")

    def build_grid(self) -> Grid:
        return Grid(self.rows, self.cols, self.input_dim, init=self.init_strategy())

    def build_schedule(self) -> DecaySchedule:
        return DecaySchedule(
            initial_learning_rate=self.initial_lr,
            initial_radius=self.initial_radius,
            time_constant=self.time_constant,
        )
