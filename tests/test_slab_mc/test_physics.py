"""
Tests for slab_mc.physics module.
"""
import math

import pytest

from slab_mc.physics import Outcome, ParticleState, transport, sample_thickness, sample_thicknesses
from slab_mc.rng import RandomStream
from slab_mc.tallies import ThicknessResult


class _Scripted:
    """RandomStream stand-in that replays a fixed list of draws."""
    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def next(self):
        u = self.values[self.calls]
        self.calls += 1
        return u


class TestParticleState:
    def test_initial_state(self):
        state = ParticleState()
        assert state.position == 0.0
        assert state.angle == 0.0
        assert state.active is True


class TestTransportDecisions:
    def test_absorbed_inside_plate(self, constants):
        # L = -ln(0.2)/6 = 0.268 < W, and 0.2 < 1/3
        assert transport(1.0, _Scripted([0.2]), constants) is Outcome.ABSORBED

    def test_transmission_checked_before_absorption(self, constants):
        # Same draw, thinner plate: crossing the far face wins
        assert transport(0.1, _Scripted([0.2]), constants) is Outcome.TRANSMITTED

    def test_scatter_then_reflect(self, constants):
        # 0.9 scatters to theta = 0.9*pi (backwards), then a long flight exits left
        rng = _Scripted([0.9, 0.5])
        assert transport(1.0, rng, constants) is Outcome.REFLECTED
        assert rng.calls == 2

    def test_reflection_checked_before_absorption(self, constants):
        # Second draw would absorb (0.01 < 1/3) but the neutron is already outside
        assert transport(1.0, _Scripted([0.9, 0.01]), constants) is Outcome.REFLECTED

    @pytest.mark.parametrize("u", [0.001, 0.05, 0.2, 0.33])
    def test_first_flight_never_reflects(self, constants, u):
        # theta starts at 0, so the first flight always moves into the plate;
        # draws below Cc/C end the history after one flight
        assert transport(0.05, _Scripted([u]), constants) is not Outcome.REFLECTED

    def test_always_terminates(self, constants, rng):
        for _ in range(2000):
            assert transport(0.5, rng, constants) in tuple(Outcome)


class TestSampleThickness:
    def test_counts_sum_to_population(self, constants, rng):
        result = sample_thickness(0.5, 3000, rng, constants)
        assert isinstance(result, ThicknessResult)
        assert result.total == 3000
        assert result.thickness == 0.5

    def test_reproducible_with_fixed_seed(self, constants):
        a = sample_thickness(0.10, 5000, RandomStream(2024), constants)
        b = sample_thickness(0.10, 5000, RandomStream(2024), constants)
        assert a == b

    def test_thin_plate_outcomes(self, constants):
        """W = 0.1: at least exp(-C W) transmitted, little absorption."""
        n = 5000
        result = sample_thickness(0.10, n, RandomStream(11), constants)
        reflected, absorbed, transmitted = result.fractions
        bound = math.exp(-constants.total * 0.10)
        assert transmitted > bound - 5 * math.sqrt(bound * (1 - bound) / n)
        assert transmitted > reflected > absorbed

    def test_thick_plate_transmits_nothing(self, constants):
        result = sample_thickness(3.0, 1000, RandomStream(5), constants)
        assert result.transmitted / result.total < 0.01
        assert result.reflected + result.absorbed > 0.99 * result.total

    def test_absorption_grows_with_thickness(self, constants):
        thin = sample_thickness(0.1, 4000, RandomStream(3), constants)
        thick = sample_thickness(1.0, 4000, RandomStream(3), constants)
        assert thick.absorbed > thin.absorbed
        assert thick.transmitted < thin.transmitted

    def test_zero_population(self, constants, rng):
        result = sample_thickness(0.5, 0, rng, constants)
        assert result.total == 0


class TestSampleThicknesses:
    def test_shape_and_conservation(self, constants, rng):
        counts = sample_thicknesses([0.1, 0.2, 0.3], 400, rng, constants)
        assert counts.shape == (3, 3)
        assert list(counts.sum(axis=1)) == [400, 400, 400]

    def test_matches_sequential_sampling(self, constants):
        counts = sample_thicknesses([0.1, 0.4], 300, RandomStream(8), constants)
        rng = RandomStream(8)
        first = sample_thickness(0.1, 300, rng, constants)
        second = sample_thickness(0.4, 300, rng, constants)
        assert tuple(counts[0]) == (first.reflected, first.absorbed, first.transmitted)
        assert tuple(counts[1]) == (second.reflected, second.absorbed, second.transmitted)
