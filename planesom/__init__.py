"""
planesom - A PyTorch-based Self-Organizing Map trainer for 2D point clouds.
"""
from .errors import DimensionMismatchError, EmptyGridError, GridIndexError, PointFormatError, SOMError
from .grid import Grid, Lattice, UniformRandom
from .params import SOMParameters
from .schedule import DecaySchedule
from .training import Snapshot, Trainer, TrainingState
from .vector_math import euclidean_distance, pairwise_distances
from .winner import find_winner, map_to_winners, quantization_error

__version__ = "0.1.0" # Initial version

__all__ = [
    "DecaySchedule",
    "DimensionMismatchError",
    "EmptyGridError",
    "Grid",
    "GridIndexError",
    "Lattice",
    "PointFormatError",
    "SOMError",
    "SOMParameters",
    "Snapshot",
    "Trainer",
    "TrainingState",
    "UniformRandom",
    "euclidean_distance",
    "find_winner",
    "map_to_winners",
    "pairwise_distances",
    "quantization_error",
]
