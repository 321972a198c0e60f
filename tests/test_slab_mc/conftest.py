"""
Shared pytest fixtures for slab_mc test suite.
"""
import pytest

from slab_mc.backends.cpu import CPUBackend
from slab_mc.config import SweepConfig
from slab_mc.constants import SimulationConstants
from slab_mc.rng import RandomStream


@pytest.fixture
def rng():
    """RandomStream with fixed seed for reproducible tests."""
    return RandomStream(42)


@pytest.fixture
def constants():
    """Default cross-sections: Cc = 2, Cs = 4."""
    return SimulationConstants(capture=2.0, scatter=4.0)


@pytest.fixture
def small_sweep():
    """Eight thickness values, 2000 neutrons each."""
    return SweepConfig(start=0.1, end=0.9, step=0.1, neutrons_per_thickness=2000)


@pytest.fixture
def cpu_backend():
    """CPUBackend with 2 workers (no Numba to keep tests fast)."""
    return CPUBackend(n_workers=2, use_numba=False)
