"""
Tests for slab_mc.tallies module.
"""
import numpy as np
import pytest

import slab_mc.tallies as tallies_mod
from slab_mc.errors import ResourceExhaustion
from slab_mc.tallies import ResultSink, ThicknessResult


class TestThicknessResult:
    def test_total(self):
        assert ThicknessResult(0.1, 5, 3, 2).total == 10

    def test_fractions(self):
        assert ThicknessResult(0.1, 5, 3, 2).fractions == pytest.approx((0.5, 0.3, 0.2))

    def test_fractions_of_empty_result(self):
        assert ThicknessResult(0.1, 0, 0, 0).fractions == (0.0, 0.0, 0.0)


class TestResultSinkWrite:
    def test_presized(self):
        sink = ResultSink(6)
        assert len(sink) == 6
        assert sink.counts.shape == (6, 3)
        assert sink.counts.dtype == np.uint64
        assert not sink.is_complete

    def test_write_and_read_back(self):
        sink = ResultSink(4)
        sink.write(2, [0.3, 0.4], [[1, 2, 3], [4, 5, 6]])
        assert sink[2] == ThicknessResult(0.3, 1, 2, 3)
        assert sink[3] == ThicknessResult(0.4, 4, 5, 6)
        assert list(sink.filled) == [False, False, True, True]

    def test_disjoint_writes_complete_sink(self):
        sink = ResultSink(4)
        sink.write(0, [0.1, 0.2], [[1, 0, 0], [0, 1, 0]])
        sink.write(2, [0.3, 0.4], [[0, 0, 1], [1, 0, 0]])
        assert sink.is_complete
        sink.check_complete()

    def test_overlapping_write_rejected(self):
        sink = ResultSink(4)
        sink.write(0, [0.1, 0.2], [[1, 0, 0], [1, 0, 0]])
        with pytest.raises(ValueError, match="overlaps"):
            sink.write(1, [0.2, 0.3], [[1, 0, 0], [1, 0, 0]])

    def test_out_of_bounds_write_rejected(self):
        sink = ResultSink(2)
        with pytest.raises(ValueError, match="outside"):
            sink.write(1, [0.2, 0.3], [[1, 0, 0], [1, 0, 0]])

    def test_store_single_result(self):
        sink = ResultSink(1)
        sink.store(0, ThicknessResult(0.5, 7, 8, 9))
        assert sink[0] == ThicknessResult(0.5, 7, 8, 9)

    def test_large_counts_kept_exact(self):
        sink = ResultSink(1)
        big = 2**63 + 5
        sink.write(0, [1.0], [[big, 0, 0]])
        assert sink[0].reflected == big


class TestResultSinkChecks:
    def test_check_complete_reports_missing(self):
        sink = ResultSink(3)
        sink.write(0, [0.1], [[1, 0, 0]])
        with pytest.raises(ValueError, match="never written"):
            sink.check_complete()

    def test_conservation_holds(self):
        sink = ResultSink(2)
        sink.write(0, [0.1, 0.2], [[5, 3, 2], [1, 1, 8]])
        sink.check_conservation(10)

    def test_conservation_violation(self):
        sink = ResultSink(2)
        sink.write(0, [0.1, 0.2], [[5, 3, 2], [1, 1, 7]])
        with pytest.raises(ValueError, match="sum to 9"):
            sink.check_conservation(10)


class TestResultSinkViews:
    def test_columns(self):
        sink = ResultSink(2)
        sink.write(0, [0.1, 0.2], [[5, 3, 2], [1, 1, 8]])
        assert list(sink.reflected) == [5, 1]
        assert list(sink.absorbed) == [3, 1]
        assert list(sink.transmitted) == [2, 8]
        assert list(sink.totals) == [10, 10]

    def test_fractions(self):
        sink = ResultSink(1)
        sink.write(0, [0.1], [[5, 3, 2]])
        np.testing.assert_allclose(sink.fractions(), [[0.5, 0.3, 0.2]])

    def test_iteration_in_slot_order(self):
        sink = ResultSink(3)
        sink.write(0, [0.1, 0.2, 0.3], [[1, 0, 0]] * 3)
        assert [r.thickness for r in sink] == [0.1, 0.2, 0.3]

    def test_to_dict(self):
        sink = ResultSink(1)
        sink.write(0, [0.1], [[5, 3, 2]])
        d = sink.to_dict()
        assert d['reflected'] == [5]
        assert d['thickness'] == [0.1]


class TestAllocationFailure:
    def test_memory_error_becomes_resource_exhaustion(self, monkeypatch):
        def _fail(*args, **kwargs):
            raise MemoryError

        monkeypatch.setattr(tallies_mod.np, 'zeros', _fail)
        with pytest.raises(ResourceExhaustion):
            ResultSink(10)

    def test_oversized_buffer_becomes_resource_exhaustion(self):
        with pytest.raises(ResourceExhaustion):
            ResultSink(10**300)
