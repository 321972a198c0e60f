"""
WRAT result files.

One line per thickness value, in ascending thickness order:

    W R A T

with W printed as a six-decimal float and R, A, T (reflected, absorbed,
transmitted) as unsigned integers.
"""
import json
import os

import numpy as np

from .tallies import ResultSink, ThicknessResult


def format_wrat_line(result: ThicknessResult) -> str:
    return f"{result.thickness:f} {result.reflected:d} {result.absorbed:d} {result.transmitted:d}"


def iter_wrat_lines(sink: ResultSink):
    for result in sink:
        yield format_wrat_line(result)


def write_wrat(sink: ResultSink, destination):
    """Write sink to a path or an open text handle.

    Parent directories of a path are created if missing.
    """
    if hasattr(destination, 'write'):
        for line in iter_wrat_lines(sink):
            destination.write(line + "\n")
        return

    parent = os.path.dirname(os.fspath(destination))
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(destination, 'w') as f:
        for line in iter_wrat_lines(sink):
            f.write(line + "\n")


def read_wrat(path) -> ResultSink:
    """Parse a WRAT file written by write_wrat."""
    rows = []
    with open(path) as f:
        for lineno, line in enumerate(f, 1):
            fields = line.split()
            if not fields:
                continue
            if len(fields) != 4:
                raise ValueError(f"{path}:{lineno}: expected 4 fields, got {len(fields)}")
            rows.append((float(fields[0]), int(fields[1]), int(fields[2]), int(fields[3])))

    sink = ResultSink(len(rows))
    if rows:
        sink.write(0, [r[0] for r in rows], np.array([r[1:] for r in rows], dtype=np.uint64))
    return sink


def write_json(result, path):
    """Save SweepResult.to_dict() as indented JSON."""
    parent = os.path.dirname(os.fspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(result.to_dict(), f, indent=2)
