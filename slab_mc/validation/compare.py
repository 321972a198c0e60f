"""
Statistical comparison of sweep results.

Two runs with different random streams (e.g. 1 worker vs k workers) are
not bit-identical, but each outcome fraction is a binomial estimate of
the same probability. The difference of two estimates, divided by its
combined standard error, should be a few sigma at most.
"""
import numpy as np

from ..constants import SimulationConstants
from ..tallies import ResultSink


def binomial_sigma(p, n):
    """Standard error of a binomial fraction p estimated from n trials."""
    p = np.asarray(p, dtype=np.float64)
    return np.sqrt(np.clip(p * (1.0 - p), 0.0, None) / n)


def compare_sinks(a: ResultSink, b: ResultSink) -> np.ndarray:
    """Per-thickness, per-outcome z-scores between two sinks.

    Returns:
        float array [n_slots, 3]
    """
    if len(a) != len(b):
        raise ValueError(f"Sinks differ in length: {len(a)} vs {len(b)}")
    if not np.allclose(a.thickness, b.thickness):
        raise ValueError("Sinks cover different thickness values")

    n_a = a.totals.astype(np.float64)[:, None]
    n_b = b.totals.astype(np.float64)[:, None]
    f_a = a.fractions()
    f_b = b.fractions()

    # Pooled estimate under the hypothesis that both runs sample the same p
    pooled = (f_a * n_a + f_b * n_b) / (n_a + n_b)
    sigma = np.sqrt(np.clip(pooled * (1.0 - pooled), 0.0, None) * (1.0 / n_a + 1.0 / n_b))

    diff = np.abs(f_a - f_b)
    z = np.zeros_like(diff)
    nonzero = sigma > 0
    z[nonzero] = diff[nonzero] / sigma[nonzero]
    z[~nonzero & (diff > 0)] = np.inf
    return z


def consistent(a: ResultSink, b: ResultSink, n_sigma=5.0) -> bool:
    """True if every outcome fraction agrees within n_sigma."""
    return bool(np.max(compare_sinks(a, b), initial=0.0) <= n_sigma)


def first_flight_check(sink: ResultSink, constants: SimulationConstants, n_sigma=5.0) -> bool:
    """Transmitted fraction must not fall below exp(-C W).

    The first flight always travels straight into the plate, so at least
    that fraction of neutrons crosses without interacting.
    """
    bound = np.exp(-constants.total * sink.thickness)
    frac = sink.fractions()[:, 2]
    n = sink.totals.astype(np.float64)
    n[n == 0] = 1.0
    return bool(np.all(frac >= bound - n_sigma * binomial_sigma(bound, n)))
