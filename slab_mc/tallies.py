"""
Result storage for the thickness sweep.

The ResultSink is allocated once, before any worker starts, with one slot
per thickness value. Each worker owns a contiguous slot range (see
partition.py) and only that range is ever written with its results, so no
locking is needed. Slot order equals ascending thickness order.

Counter columns: 0 = reflected, 1 = absorbed, 2 = transmitted.
"""
from dataclasses import dataclass

import numpy as np

from .errors import ResourceExhaustion


@dataclass(frozen=True)
class ThicknessResult:
    """Outcome counts for one plate thickness."""
    thickness: float
    reflected: int
    absorbed: int
    transmitted: int

    @property
    def total(self):
        return self.reflected + self.absorbed + self.transmitted

    @property
    def fractions(self):
        n = self.total
        if n == 0:
            return (0.0, 0.0, 0.0)
        return (self.reflected / n, self.absorbed / n, self.transmitted / n)


class ResultSink:
    """Pre-sized, index-partitioned buffer of per-thickness tallies."""

    def __init__(self, n_slots):
        self.n_slots = int(n_slots)
        try:
            self.thickness = np.zeros(self.n_slots, dtype=np.float64)
            self.counts = np.zeros((self.n_slots, 3), dtype=np.uint64)
            self.filled = np.zeros(self.n_slots, dtype=bool)
        except (MemoryError, ValueError, OverflowError) as exc:
            raise ResourceExhaustion(
                f"Unable to allocate result buffer for {self.n_slots} thickness values"
            ) from exc

    def __len__(self):
        return self.n_slots

    def __getitem__(self, index):
        r, a, t = (int(c) for c in self.counts[index])
        return ThicknessResult(float(self.thickness[index]), r, a, t)

    def __iter__(self):
        for i in range(self.n_slots):
            yield self[i]

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def write(self, offset, thicknesses, counts):
        """Store a worker's results in slots [offset, offset + len(thicknesses)).

        Raises ValueError if the range leaves the buffer or touches a slot
        that already holds results.
        """
        n = len(thicknesses)
        counts = np.asarray(counts, dtype=np.uint64).reshape(n, 3)
        end = offset + n
        if offset < 0 or end > self.n_slots:
            raise ValueError(
                f"Slot range [{offset}, {end}) outside result buffer of size {self.n_slots}"
            )
        if np.any(self.filled[offset:end]):
            raise ValueError(f"Slot range [{offset}, {end}) overlaps previously written results")

        self.thickness[offset:end] = thicknesses
        self.counts[offset:end] = counts
        self.filled[offset:end] = True

    def store(self, index, result: ThicknessResult):
        """Store a single ThicknessResult."""
        self.write(index, [result.thickness],
                   [[result.reflected, result.absorbed, result.transmitted]])

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def reflected(self):
        return self.counts[:, 0]

    @property
    def absorbed(self):
        return self.counts[:, 1]

    @property
    def transmitted(self):
        return self.counts[:, 2]

    @property
    def totals(self):
        return self.counts.sum(axis=1, dtype=np.uint64)

    @property
    def is_complete(self):
        return bool(np.all(self.filled))

    def fractions(self):
        """[n_slots, 3] array of reflected/absorbed/transmitted fractions."""
        totals = self.totals.astype(np.float64)
        totals[totals == 0] = 1.0
        return self.counts.astype(np.float64) / totals[:, None]

    def check_complete(self):
        if not self.is_complete:
            missing = np.flatnonzero(~self.filled)
            raise ValueError(f"{len(missing)} result slots never written (first: {missing[0]})")

    def check_conservation(self, n_neutrons):
        """Every neutron must end in exactly one outcome."""
        bad = np.flatnonzero(self.totals != np.uint64(n_neutrons))
        if len(bad):
            i = bad[0]
            raise ValueError(
                f"Outcome counts at thickness {self.thickness[i]:f} sum to "
                f"{int(self.totals[i])}, expected {n_neutrons}"
            )

    def to_dict(self):
        return {
            'thickness': self.thickness.tolist(),
            'reflected': [int(c) for c in self.reflected],
            'absorbed': [int(c) for c in self.absorbed],
            'transmitted': [int(c) for c in self.transmitted],
        }
