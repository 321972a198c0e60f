"""
Tests for slab_mc.output module.
"""
import io
import json

import pytest

from slab_mc.output import format_wrat_line, write_wrat, read_wrat, write_json
from slab_mc.sweep import ThicknessSweep
from slab_mc.tallies import ResultSink, ThicknessResult


@pytest.fixture
def sink():
    s = ResultSink(3)
    s.write(0, [0.1, 0.11, 0.12], [[10, 2, 88], [11, 3, 86], [12, 4, 84]])
    return s


class TestFormat:
    def test_line_format(self):
        assert format_wrat_line(ThicknessResult(0.1, 1, 2, 3)) == "0.100000 1 2 3"

    def test_large_counter(self):
        line = format_wrat_line(ThicknessResult(1.99, 10_000_000, 0, 0))
        assert line == "1.990000 10000000 0 0"


class TestWrite:
    def test_write_to_handle(self, sink):
        buf = io.StringIO()
        write_wrat(sink, buf)
        assert buf.getvalue().splitlines() == [
            "0.100000 10 2 88",
            "0.110000 11 3 86",
            "0.120000 12 4 84",
        ]

    def test_creates_missing_directory(self, sink, tmp_path):
        path = tmp_path / "data" / "WRAT.dat"
        write_wrat(sink, path)
        assert path.read_text().count("\n") == 3

    def test_read_back(self, sink, tmp_path):
        path = tmp_path / "WRAT.dat"
        write_wrat(sink, path)
        loaded = read_wrat(path)
        assert list(loaded) == list(sink)

    def test_read_rejects_malformed_line(self, tmp_path):
        path = tmp_path / "bad.dat"
        path.write_text("0.1 1 2\n")
        with pytest.raises(ValueError, match="expected 4 fields"):
            read_wrat(path)


class TestJson:
    def test_write_json(self, cpu_backend, small_sweep, constants, tmp_path):
        result = ThicknessSweep(cpu_backend, small_sweep, constants, seed=2).solve(verbose=False)
        path = tmp_path / "out" / "summary.json"
        write_json(result, path)
        data = json.loads(path.read_text())
        assert data['seed'] == 2
        assert data['n_partitions'] == 2
