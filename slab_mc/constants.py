"""
Physics constants and default sweep parameters for the plate model.
Lengths are in the inverse units of the cross-sections (1/C = mean free path).
"""
import math
from dataclasses import dataclass, field

from .errors import InvalidConfiguration

# ---------------------------------------------------------------------------
# Cross-sections
# ---------------------------------------------------------------------------
CAPTURE_XS = 2.0                  # Cc, capture cross-section
SCATTER_XS = 4.0                  # Cs, scattering cross-section

# ---------------------------------------------------------------------------
# Thickness sweep
# ---------------------------------------------------------------------------
START_THICKNESS = 0.10
END_THICKNESS = 2.0
THICKNESS_INCREMENT = 0.01
N_NEUTRONS = 10_000_000           # neutrons fired per thickness value

# Relative distance within which (end - start) / step snaps to the nearest integer
STEP_TOLERANCE = 1.0e-12

# ---------------------------------------------------------------------------
# Random stream
# ---------------------------------------------------------------------------
RNG_BLOCK_SIZE = 4096             # uniforms drawn per refill

DEFAULT_OUTPUT = "data/WRAT_parallel.dat"


@dataclass(frozen=True)
class SimulationConstants:
    """Cross-section derived constants shared read-only by all workers."""
    capture: float = CAPTURE_XS
    scatter: float = SCATTER_XS
    total: float = field(init=False)
    absorption_probability: float = field(init=False)
    mean_free_path: float = field(init=False)

    def __post_init__(self):
        if not (self.capture > 0.0 and self.scatter > 0.0):
            raise InvalidConfiguration(
                f"Cross-sections must be positive (Cc={self.capture}, Cs={self.scatter})"
            )
        total = self.capture + self.scatter
        object.__setattr__(self, 'total', total)
        object.__setattr__(self, 'absorption_probability', self.capture / total)
        object.__setattr__(self, 'mean_free_path', 1.0 / total)

    @classmethod
    def from_cross_sections(cls, capture, scatter):
        return cls(capture=float(capture), scatter=float(scatter))

    def first_flight_transmission(self, thickness):
        """Probability that the first (straight-ahead) flight crosses the plate."""
        return math.exp(-self.total * thickness)

    def to_dict(self):
        return {
            'capture': self.capture,
            'scatter': self.scatter,
            'total': self.total,
            'absorption_probability': self.absorption_probability,
            'mean_free_path': self.mean_free_path,
        }
