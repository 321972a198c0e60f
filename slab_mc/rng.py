"""
Per-worker random streams.

Each worker owns one RandomStream for its whole lifetime. Streams are
decorrelated by hashing the run's base entropy together with the worker id
(numpy SeedSequence spawn keys), so workers started in the same instant
still get distinct, independent sequences.
"""
import time

import numpy as np

from .constants import RNG_BLOCK_SIZE


def base_entropy(seed=None) -> int:
    """Run-wide entropy: the explicit seed, or the wall clock in nanoseconds."""
    if seed is None:
        return time.time_ns()
    return int(seed)


def worker_seed_sequence(entropy: int, worker_id: int) -> np.random.SeedSequence:
    """SeedSequence for one worker, hashing (entropy, worker_id) together."""
    return np.random.SeedSequence(entropy, spawn_key=(int(worker_id),))


def worker_seed(entropy: int, worker_id: int) -> int:
    """32-bit integer seed for kernels that take a plain integer (Numba)."""
    state = worker_seed_sequence(entropy, worker_id).generate_state(1, dtype=np.uint32)
    return int(state[0])


class RandomStream:
    """Uniform doubles in the open interval (0, 1).

    Uniforms are drawn from a numpy Generator in blocks and handed out one
    at a time. An exact 0.0 would make the free-path logarithm -inf, so it
    is discarded and the next value is used instead.
    """

    def __init__(self, seed=None, block_size: int = RNG_BLOCK_SIZE):
        if isinstance(seed, np.random.Generator):
            self._gen = seed
        else:
            self._gen = np.random.default_rng(seed)
        self._block_size = block_size
        self._buffer = []
        self._pos = 0

    @classmethod
    def for_worker(cls, entropy: int, worker_id: int, block_size: int = RNG_BLOCK_SIZE):
        return cls(worker_seed_sequence(entropy, worker_id), block_size=block_size)

    def _refill(self):
        self._buffer = self._gen.random(self._block_size).tolist()
        self._pos = 0

    def next(self) -> float:
        while True:
            if self._pos >= len(self._buffer):
                self._refill()
            u = self._buffer[self._pos]
            self._pos += 1
            if u > 0.0:
                return u

    __next__ = next

    def __iter__(self):
        return self
