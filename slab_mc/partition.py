"""
Work partitioning for the thickness sweep.

With total_steps = ceil((end - start) / step) and
steps_per_worker = ceil(total_steps / n_workers), worker i gets slots
[i*steps_per_worker, min((i+1)*steps_per_worker, total_steps)) and the
matching thickness range. The last partition may be shorter. Slot ranges
tile [0, total_steps) exactly, in ascending thickness order.
"""
import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from .config import SweepConfig
from .errors import InvalidConfiguration, EmptySweep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkPartition:
    """Contiguous share of the sweep owned by one worker."""
    worker_id: int
    thickness_start: float
    thickness_end: float
    slot_offset: int
    slot_count: int

    @property
    def slot_range(self):
        return range(self.slot_offset, self.slot_offset + self.slot_count)

    def thicknesses(self, config: SweepConfig) -> np.ndarray:
        return config.thicknesses(self.slot_offset, self.slot_count)


def partition_sweep(config: SweepConfig, n_workers: int) -> List[WorkPartition]:
    """Split the sweep into at most n_workers contiguous partitions.

    Workers whose first slot would lie past the end of the sweep (more
    workers than thickness values) receive no partition.
    """
    if n_workers <= 0:
        raise InvalidConfiguration(f"Worker count must be positive, got {n_workers}")

    total_steps = config.total_steps
    steps_per_worker = -(-total_steps // n_workers)
    if steps_per_worker == 0:
        raise EmptySweep(f"Sweep [{config.start}, {config.end}) has no thickness values")

    range_per_worker = steps_per_worker * config.step
    partitions = []
    for i in range(n_workers):
        offset = i * steps_per_worker
        if offset >= total_steps:
            break
        partitions.append(WorkPartition(
            worker_id=i,
            thickness_start=config.start + i * range_per_worker,
            thickness_end=min(config.start + (i + 1) * range_per_worker, config.end),
            slot_offset=offset,
            slot_count=min(steps_per_worker, total_steps - offset),
        ))

    logger.debug("Partitioned %d thickness values over %d workers (%d per worker)",
                 total_steps, len(partitions), steps_per_worker)
    return partitions


def check_tiling(partitions: List[WorkPartition], total_steps: int):
    """Raise ValueError unless the slot ranges tile [0, total_steps) exactly."""
    expected = 0
    for p in sorted(partitions, key=lambda p: p.slot_offset):
        if p.slot_offset != expected:
            kind = "gap" if p.slot_offset > expected else "overlap"
            raise ValueError(f"Partition {p.worker_id}: {kind} at slot {expected}")
        expected += p.slot_count
    if expected != total_steps:
        raise ValueError(f"Partitions cover {expected} slots, expected {total_steps}")
