"""
Random-walk physics for a neutron in a homogeneous plate.

One uniform draw u per flight is used three ways:
- free-flight distance: L = -(1/C) * ln(u)
- absorption test:      u < Cc/C
- new scattering angle: theta = u * pi

Reusing the same draw couples path length, absorption and direction.
That coupling is part of the model and must not be replaced by
independent draws.

Decision order after each flight (first match wins):
reflected (x < 0), transmitted (x >= W), absorbed, scattered.

These are the pure-Python reference kernels; backends/cpu.py carries
Numba-compiled copies of the same loop.
"""
import math
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from .constants import SimulationConstants
from .tallies import ThicknessResult


class Outcome(IntEnum):
    """Terminal state of a neutron history. Values index the counter columns."""
    REFLECTED = 0
    ABSORBED = 1
    TRANSMITTED = 2


@dataclass
class ParticleState:
    """Worker-local state of the neutron being tracked."""
    position: float = 0.0   # horizontal displacement from the entry face
    angle: float = 0.0      # direction of travel in [0, pi], 0 = into the plate
    active: bool = True


def transport(thickness, rng, constants: SimulationConstants) -> Outcome:
    """Follow one neutron through a plate of the given thickness.

    Args:
        thickness: plate thickness W
        rng: RandomStream producing uniforms in (0, 1)
        constants: SimulationConstants

    Returns:
        Outcome of the history
    """
    mean_free_path = constants.mean_free_path
    p_abs = constants.absorption_probability

    state = ParticleState()
    outcome = Outcome.ABSORBED
    while state.active:
        u = rng.next()
        state.position += -mean_free_path * math.log(u) * math.cos(state.angle)

        if state.position < 0.0:
            outcome = Outcome.REFLECTED
            state.active = False
        elif state.position >= thickness:
            outcome = Outcome.TRANSMITTED
            state.active = False
        elif u < p_abs:
            outcome = Outcome.ABSORBED
            state.active = False
        else:
            state.angle = u * math.pi

    return outcome


def sample_thickness(thickness, n_neutrons, rng, constants: SimulationConstants) -> ThicknessResult:
    """Fire n_neutrons at a plate and tally the outcomes."""
    counts = [0, 0, 0]
    for _ in range(int(n_neutrons)):
        counts[transport(thickness, rng, constants)] += 1

    return ThicknessResult(
        thickness=float(thickness),
        reflected=counts[Outcome.REFLECTED],
        absorbed=counts[Outcome.ABSORBED],
        transmitted=counts[Outcome.TRANSMITTED],
    )


def sample_thicknesses(thicknesses, n_neutrons, rng, constants: SimulationConstants) -> np.ndarray:
    """Run sample_thickness over consecutive thickness values.

    Returns:
        uint64 array [len(thicknesses), 3] of (reflected, absorbed, transmitted)
    """
    counts = np.zeros((len(thicknesses), 3), dtype=np.uint64)
    for i, w in enumerate(thicknesses):
        result = sample_thickness(w, n_neutrons, rng, constants)
        counts[i] = (result.reflected, result.absorbed, result.transmitted)
    return counts
