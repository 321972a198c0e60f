"""
Thickness Sweep Driver

1. Allocate a ResultSink with one slot per thickness value
2. Partition the sweep into contiguous ranges, one per worker
3. Launch the workers (backend); each writes only its own slots
4. Wait for all workers, then validate the sink:
   every slot written, R + A + T == neutrons per thickness
"""
import logging
import time
from dataclasses import dataclass
from typing import Optional

from .config import SweepConfig
from .constants import SimulationConstants
from .partition import partition_sweep, check_tiling
from .rng import base_entropy
from .tallies import ResultSink

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    """Complete results from a thickness sweep."""
    sink: ResultSink
    config: SweepConfig
    constants: SimulationConstants
    n_workers: int
    n_partitions: int
    backend_name: str
    total_time: float               # seconds
    seed: int

    def summary(self):
        """Print human-readable summary."""
        print("=" * 60)
        print(f"  Thickness Sweep Result ({self.backend_name})")
        print("=" * 60)
        print(f"  Thickness: [{self.config.start:g}, {self.config.end:g}) "
              f"step {self.config.step:g} ({self.config.total_steps} values)")
        print(f"  Cc = {self.constants.capture:g}, Cs = {self.constants.scatter:g}, "
              f"P(abs) = {self.constants.absorption_probability:.4f}")
        print(f"  Neutrons/thickness: {self.config.neutrons_per_thickness:,}")
        print(f"  Total histories: {self.config.total_neutrons:,}")
        print(f"  Workers: {self.n_partitions} of {self.n_workers}")
        print(f"  Elapsed time = {self.total_time:f} seconds = {self.total_time / 60.0:f} minutes")
        if self.total_time > 0:
            rate = self.config.total_neutrons / self.total_time
            print(f"  Rate: {rate:,.0f} neutrons/s")
        print("=" * 60)

    def to_dict(self):
        """Convert to JSON-serializable dict."""
        return {
            'config': self.config.to_dict(),
            'constants': self.constants.to_dict(),
            'n_workers': self.n_workers,
            'n_partitions': self.n_partitions,
            'backend_name': self.backend_name,
            'total_time': float(self.total_time),
            'seed': int(self.seed),
            'results': self.sink.to_dict(),
        }


class ThicknessSweep:
    """Parallel thickness-sweep driver.

    Uses any SweepBackend for the per-partition simulation.
    """

    def __init__(
        self,
        backend,                          # SweepBackend instance
        config: SweepConfig = None,
        constants: SimulationConstants = None,
        seed: Optional[int] = None,
    ):
        self.backend = backend
        self.config = config or SweepConfig()
        self.constants = constants or SimulationConstants()
        self.seed = seed

    def solve(self, verbose=True) -> SweepResult:
        """Run the full sweep.

        Returns:
            SweepResult holding the filled ResultSink
        """
        entropy = base_entropy(self.seed)
        n_workers = self.backend.n_workers
        total_steps = self.config.total_steps

        sink = ResultSink(total_steps)
        partitions = partition_sweep(self.config, n_workers)
        check_tiling(partitions, total_steps)

        if verbose:
            print("Starting thickness sweep")
            print(f"  Backend: {self.backend.get_name()}")
            print(f"  Thickness values: {total_steps} ({len(partitions)} partitions)")
            print(f"  Neutrons/thickness: {self.config.neutrons_per_thickness:,}")
            print()

        logger.info("Sweep of %d thickness values on %s, entropy=%d",
                    total_steps, self.backend.get_name(), entropy)

        t_start = time.time()
        self.backend.run_partitions(partitions, self.config, self.constants, sink, entropy)
        total_time = time.time() - t_start

        sink.check_complete()
        sink.check_conservation(self.config.neutrons_per_thickness)
        logger.info("Sweep finished in %.3f s", total_time)

        result = SweepResult(
            sink=sink,
            config=self.config,
            constants=self.constants,
            n_workers=n_workers,
            n_partitions=len(partitions),
            backend_name=self.backend.get_name(),
            total_time=total_time,
            seed=entropy,
        )

        if verbose:
            result.summary()

        return result


def run(config: SweepConfig, constants: SimulationConstants = None,
        worker_count: Optional[int] = None, seed: Optional[int] = None,
        use_numba: bool = True) -> ResultSink:
    """Simulate the whole sweep and return the filled ResultSink.

    worker_count of None or 0 uses every available CPU.
    """
    from .backends.cpu import CPUBackend

    backend = CPUBackend(n_workers=worker_count, use_numba=use_numba)
    solver = ThicknessSweep(backend, config=config, constants=constants, seed=seed)
    return solver.solve(verbose=False).sink
