"""
Backend registry.

Only the CPU backend exists; the JIT and pure-Python kernels are two
modes of it.
"""
from .base import SweepBackend
from .cpu import CPUBackend


def list_backends():
    """List all backends with their status."""
    return [
        ('CPU', CPUBackend(use_numba=True).get_name(), True),
        ('CPU-python', CPUBackend(use_numba=False).get_name(), True),
    ]


def get_backend(name: str, n_workers=None) -> SweepBackend:
    """Get a backend by name.

    Args:
        name: 'cpu' (Numba JIT) or 'python' (pure-Python reference kernels)
        n_workers: worker processes, None or 0 for every available CPU

    Raises:
        ValueError if the name is unknown
    """
    name = name.lower()

    if name == 'cpu':
        return CPUBackend(n_workers=n_workers, use_numba=True)
    elif name == 'python':
        return CPUBackend(n_workers=n_workers, use_numba=False)
    else:
        raise ValueError(f"Unknown backend: {name}. Choose from: cpu, python")
