"""
CPU Backend: multiprocessing + Numba JIT

Parallelization strategy:
- One worker process per WorkPartition (contiguous thickness range)
- Each worker seeds its own random stream from (entropy, worker_id)
- Each worker runs the sampler over its thickness values
- Worker results are written into disjoint slot ranges of the ResultSink

Numba JIT compiles the random-walk loop to native code; the pure-Python
kernels in physics.py are used when use_numba=False.
"""
import logging
import math
from multiprocessing import Pool
from typing import List, Optional

import numpy as np
from numba import njit

from ..config import SweepConfig, resolve_worker_count
from ..constants import SimulationConstants
from ..errors import ResourceExhaustion
from ..partition import WorkPartition
from ..physics import sample_thicknesses
from ..rng import RandomStream, worker_seed
from ..tallies import ResultSink
from .base import SweepBackend

logger = logging.getLogger(__name__)


# ===================================================================
# Numba JIT kernels (module-level, compiled once)
# ===================================================================

@njit(cache=True)
def _uniform_jit():
    """Uniform draw in (0, 1); an exact zero is discarded."""
    u = np.random.random()
    while u == 0.0:
        u = np.random.random()
    return u


@njit(cache=True)
def _transport_jit(thickness, mean_free_path, p_abs):
    """Follow one neutron. Returns 0 (reflected), 1 (absorbed) or 2 (transmitted).

    Mirrors physics.transport exactly.
    """
    x = 0.0
    theta = 0.0
    while True:
        u = _uniform_jit()
        x += -mean_free_path * math.log(u) * math.cos(theta)
        if x < 0.0:
            return 0
        if x >= thickness:
            return 2
        if u < p_abs:
            return 1
        theta = u * math.pi


@njit(cache=True)
def _sample_chunk_jit(thicknesses, n_neutrons, mean_free_path, p_abs, seed):
    """Tally n_neutrons histories for each thickness in the chunk.

    Returns:
        int64 array [len(thicknesses), 3] of (reflected, absorbed, transmitted)
    """
    # Seed Numba's random state for this worker
    np.random.seed(seed)

    n = thicknesses.shape[0]
    counts = np.zeros((n, 3), dtype=np.int64)
    for i in range(n):
        w = thicknesses[i]
        n_r = 0
        n_a = 0
        n_t = 0
        for _ in range(n_neutrons):
            outcome = _transport_jit(w, mean_free_path, p_abs)
            if outcome == 0:
                n_r += 1
            elif outcome == 1:
                n_a += 1
            else:
                n_t += 1
        counts[i, 0] = n_r
        counts[i, 1] = n_a
        counts[i, 2] = n_t
    return counts


# ===================================================================
# Multiprocessing worker functions (top-level for pickle)
# ===================================================================

def _worker_sweep(args):
    """Numba worker: receives plain arrays/scalars, returns its slice of results."""
    (worker_id, offset, thicknesses, n_neutrons,
     mean_free_path, p_abs, seed) = args

    counts = _sample_chunk_jit(
        np.ascontiguousarray(thicknesses, dtype=np.float64),
        n_neutrons, mean_free_path, p_abs, seed,
    )
    return worker_id, offset, thicknesses, counts.astype(np.uint64)


def _worker_sweep_fallback(args):
    """Pure-Python worker using the reference kernels from physics.py."""
    (worker_id, offset, thicknesses, n_neutrons,
     capture, scatter, entropy) = args

    constants = SimulationConstants(capture=capture, scatter=scatter)
    rng = RandomStream.for_worker(entropy, worker_id)
    counts = sample_thicknesses(thicknesses, n_neutrons, rng, constants)
    return worker_id, offset, thicknesses, counts


# ===================================================================
# CPUBackend class
# ===================================================================

class CPUBackend(SweepBackend):
    """CPU-parallel thickness sweep backend.

    Uses multiprocessing.Pool for inter-core parallelism and (by default)
    Numba JIT for the per-neutron loop.

    Parameters
    ----------
    n_workers : int or None
        Number of worker processes. ``None`` or ``0`` -> ``os.cpu_count()``.
    use_numba : bool
        If True (default), use the JIT-compiled kernels; otherwise the
        pure-Python reference kernels.
    """

    def __init__(self, n_workers: Optional[int] = None, use_numba: bool = True):
        self._n_workers = resolve_worker_count(n_workers)
        self._use_numba = use_numba

    # ------------------------------------------------------------------
    # SweepBackend interface
    # ------------------------------------------------------------------

    @property
    def n_workers(self) -> int:
        return self._n_workers

    def run_partitions(
        self,
        partitions: List[WorkPartition],
        config: SweepConfig,
        constants: SimulationConstants,
        sink: ResultSink,
        entropy: int,
    ) -> None:
        """Run one worker per partition and write the results into sink.

        Blocks until every worker has finished. An exception in any
        worker aborts the whole run.
        """
        if not partitions:
            return

        n_neutrons = int(config.neutrons_per_thickness)
        if self._use_numba:
            worker = _worker_sweep
            worker_args = [
                (p.worker_id, p.slot_offset, p.thicknesses(config), n_neutrons,
                 constants.mean_free_path, constants.absorption_probability,
                 worker_seed(entropy, p.worker_id))
                for p in partitions
            ]
        else:
            worker = _worker_sweep_fallback
            worker_args = [
                (p.worker_id, p.slot_offset, p.thicknesses(config), n_neutrons,
                 constants.capture, constants.scatter, entropy)
                for p in partitions
            ]

        results = self._dispatch(worker, worker_args)

        for worker_id, offset, thicknesses, counts in results:
            sink.write(offset, thicknesses, counts)
            logger.debug("Worker %d wrote slots [%d, %d)",
                         worker_id, offset, offset + len(thicknesses))

    def get_name(self) -> str:
        n = self._n_workers
        mode = "Numba JIT" if self._use_numba else "pure-Python"
        return f"CPU ({n} core{'s' if n > 1 else ''}, {mode})"

    def is_available(self) -> bool:
        return True  # CPU is always available

    # ------------------------------------------------------------------
    # Internal: dispatch
    # ------------------------------------------------------------------

    def _dispatch(self, worker, worker_args):
        """Run worker over worker_args, in-process for a single partition."""
        try:
            if len(worker_args) == 1:
                return [worker(worker_args[0])]

            try:
                pool = Pool(processes=len(worker_args))
            except OSError as exc:
                raise ResourceExhaustion(
                    f"Unable to start {len(worker_args)} worker processes"
                ) from exc

            with pool:
                return pool.map(worker, worker_args)
        except MemoryError as exc:
            raise ResourceExhaustion("Worker ran out of memory") from exc
