"""
Sweep configuration.

Thickness values are generated as start + i*step for i in [0, total_steps),
never by repeated accumulation, so the partitioner and the samplers always
agree on the number of iterations.
"""
import math
import os
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .constants import (
    START_THICKNESS, END_THICKNESS, THICKNESS_INCREMENT, N_NEUTRONS, STEP_TOLERANCE,
)
from .errors import InvalidConfiguration, EmptySweep


@dataclass(frozen=True)
class SweepConfig:
    """Thickness sweep [start, end) with the given step and population size."""
    start: float = START_THICKNESS
    end: float = END_THICKNESS
    step: float = THICKNESS_INCREMENT
    neutrons_per_thickness: int = N_NEUTRONS

    def __post_init__(self):
        for name in ("start", "end", "step"):
            if not math.isfinite(getattr(self, name)):
                raise InvalidConfiguration(f"Sweep {name} must be finite, got {getattr(self, name)}")
        if not self.step > 0.0:
            raise InvalidConfiguration(f"Thickness step must be positive, got {self.step}")
        if int(self.neutrons_per_thickness) != self.neutrons_per_thickness \
                or self.neutrons_per_thickness <= 0:
            raise InvalidConfiguration(
                f"Neutrons per thickness must be a positive integer, got {self.neutrons_per_thickness}"
            )
        if not self.start < self.end:
            raise EmptySweep(f"Empty sweep: start ({self.start}) >= end ({self.end})")
        if self.start < 0.0:
            raise InvalidConfiguration(f"Plate thickness cannot be negative, got start={self.start}")
        if not math.isfinite((self.end - self.start) / self.step):
            raise InvalidConfiguration(
                f"Step {self.step} is too small for the sweep [{self.start}, {self.end})"
            )

    @property
    def total_steps(self) -> int:
        quotient = (self.end - self.start) / self.step
        nearest = round(quotient)
        if abs(quotient - nearest) <= STEP_TOLERANCE * max(1.0, abs(quotient)):
            steps = nearest
        else:
            steps = math.ceil(quotient)
        # start < end always holds at least the start thickness
        return max(1, int(steps))

    def thickness(self, index: int) -> float:
        return self.start + index * self.step

    def thicknesses(self, first: int = 0, count: Optional[int] = None) -> np.ndarray:
        """Thickness values for slots [first, first + count)."""
        if count is None:
            count = self.total_steps - first
        return self.start + np.arange(first, first + count, dtype=np.float64) * self.step

    @property
    def total_neutrons(self) -> int:
        return self.total_steps * int(self.neutrons_per_thickness)

    def to_dict(self):
        return {
            'start': float(self.start),
            'end': float(self.end),
            'step': float(self.step),
            'neutrons_per_thickness': int(self.neutrons_per_thickness),
            'total_steps': self.total_steps,
        }


def resolve_worker_count(n_workers: Optional[int] = None) -> int:
    """Number of workers to use. None or 0 selects every available CPU."""
    if n_workers is None or n_workers == 0:
        return os.cpu_count() or 1
    if n_workers < 0:
        raise InvalidConfiguration(f"Worker count must be positive, got {n_workers}")
    return int(n_workers)
