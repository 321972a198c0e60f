"""Abstract base class for thickness-sweep backends."""
from abc import ABC, abstractmethod
from typing import List

from ..constants import SimulationConstants
from ..config import SweepConfig
from ..partition import WorkPartition
from ..tallies import ResultSink


class SweepBackend(ABC):
    """Abstract interface for sweep execution backends.

    The driver (ThicknessSweep) partitions the sweep and allocates the
    ResultSink; the backend runs one worker per partition and must not
    return until every partition's slots have been written.
    """

    @abstractmethod
    def run_partitions(
        self,
        partitions: List[WorkPartition],
        config: SweepConfig,
        constants: SimulationConstants,
        sink: ResultSink,
        entropy: int,
    ) -> None:
        """Simulate every partition and write its tallies into sink.

        Args:
            partitions: disjoint WorkPartitions tiling the sweep
            config: SweepConfig (thickness values, neutrons per thickness)
            constants: SimulationConstants
            sink: pre-sized ResultSink, written at each partition's slots
            entropy: run-wide seed, combined with each worker id
        """
        pass

    @property
    @abstractmethod
    def n_workers(self) -> int:
        """Maximum number of concurrent workers."""
        pass

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable backend name, e.g. 'CPU (8 cores, Numba JIT)'."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this backend's hardware/libraries are available."""
        pass
