import math
from dataclasses import dataclass


@dataclass(frozen=True)
class DecaySchedule:
    """
    Exponential decay of the learning rate and the neighborhood radius.

    Both follow value(epoch) = initial * e^(-epoch / time_constant) and are pure
    functions of the epoch, so they are recomputed rather than stored.
    """
    initial_learning_rate: float = 0.4
    initial_radius: float = 6.1
    time_constant: float = 10.0

    def __post_init__(self):
        if self.time_constant <= 0:
            raise ValueError(f"time_constant must be positive, got {self.time_constant}")
        if self.initial_learning_rate < 0:
            raise ValueError(f"initial_learning_rate must be non-negative, got {self.initial_learning_rate}")
        if self.initial_radius < 0:
            raise ValueError(f"initial_radius must be non-negative, got {self.initial_radius}")

    def _decay(self, initial: float, epoch: int) -> float:
        if epoch < 0:
            raise ValueError(f"epoch must be non-negative, got {epoch}")
        return initial * math.exp(-epoch / self.time_constant)

    def learning_rate(self, epoch: int) -> float:
        return self._decay(self.initial_learning_rate, epoch)

    def neighborhood_radius(self, epoch: int) -> float:
        return self._decay(self.initial_radius, epoch)

    def window(self, epoch: int) -> int:
        """Half-width of the square update window, the radius truncated toward zero."""
        return int(self.neighborhood_radius(epoch))

    def convergence_epoch(self, threshold: float) -> int:
        """First epoch whose learning rate is at or below `threshold`."""
        if threshold <= 0:
            raise ValueError(f"threshold must be positive, got {threshold}")
        if self.initial_learning_rate <= threshold:
            return 0
        # closed form first, then settle rounding against the actual rate
        epoch = max(0, math.floor(self.time_constant * math.log(self.initial_learning_rate / threshold)))
        while epoch > 0 and self.learning_rate(epoch - 1) <= threshold:
            epoch -= 1
        while self.learning_rate(epoch) > threshold:
            epoch += 1
        return epoch
