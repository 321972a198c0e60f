"""
slab_mc - Parallel Monte Carlo Neutron Transport through a Homogeneous Plate

Neutrons strike a plate of thickness W from the left and random-walk until
they are reflected, absorbed or transmitted. The plate thickness is swept
over a range and the three outcome counts are tallied per thickness.

Parallelization: the sweep is split into contiguous thickness ranges, one
per worker process (multiprocessing + Numba JIT), each writing its own
disjoint slice of a pre-sized result buffer.
"""
__version__ = "0.1.0"

from .constants import SimulationConstants
from .config import SweepConfig
from .errors import SlabMCError, InvalidConfiguration, EmptySweep, ResourceExhaustion
from .physics import Outcome, transport, sample_thickness
from .partition import WorkPartition, partition_sweep
from .tallies import ThicknessResult, ResultSink
from .sweep import ThicknessSweep, SweepResult, run
