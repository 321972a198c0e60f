"""
CLI entry point for the parallel plate-thickness sweep.

Usage:
    python -m slab_mc                                 # All CPU cores, default sweep
    python -m slab_mc --workers 4 -o data/WRAT.dat    # 4 workers, explicit output file
    python -m slab_mc --quick                         # Quick test (10k neutrons/thickness)
    python -m slab_mc --production                    # Production run (1e7 neutrons/thickness)
    python -m slab_mc --list-backends                 # Show available backends
"""
import argparse
import logging
import sys

from .errors import SlabMCError


def build_parser():
    from .constants import (
        CAPTURE_XS, SCATTER_XS, START_THICKNESS, END_THICKNESS, THICKNESS_INCREMENT,
        DEFAULT_OUTPUT,
    )

    parser = argparse.ArgumentParser(
        description='Parallel Monte Carlo neutron transport through a plate of varying thickness',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m slab_mc --workers 0                     Use every CPU core
  python -m slab_mc --workers 4 -o data/WRAT.dat    Four workers, custom output file
  python -m slab_mc --quick --backend python        Pure-Python kernels
  python -m slab_mc --start 0.5 --end 1.0 --step 0.05 --neutrons 100000
        """,
    )

    parser.add_argument('--workers', '-w', type=int, default=0,
                        help='Worker processes (0 = all available CPU cores)')
    parser.add_argument('--quick', action='store_true', help='Quick test: 10k neutrons per thickness')
    parser.add_argument('--production', action='store_true',
                        help='Production: 1e7 neutrons per thickness')
    parser.add_argument('--neutrons', '-n', type=int, default=None, help='Neutrons per thickness')
    parser.add_argument('--start', type=float, default=START_THICKNESS, help='First plate thickness')
    parser.add_argument('--end', type=float, default=END_THICKNESS, help='Sweep end (exclusive)')
    parser.add_argument('--step', type=float, default=THICKNESS_INCREMENT, help='Thickness increment')
    parser.add_argument('--capture', type=float, default=CAPTURE_XS, help='Capture cross-section Cc')
    parser.add_argument('--scatter', type=float, default=SCATTER_XS, help='Scattering cross-section Cs')
    parser.add_argument('--backend', choices=['cpu', 'python'], default='cpu',
                        help='cpu = Numba JIT kernels, python = pure-Python kernels')
    parser.add_argument('--seed', type=int, default=None, help='Random seed (default: wall clock)')
    parser.add_argument('--output', '-o', type=str, default=DEFAULT_OUTPUT, help='WRAT output file')
    parser.add_argument('--json', type=str, default=None, help='Also save a JSON summary')
    parser.add_argument('--print-results', action='store_true', help='Echo WRAT lines to stdout')
    parser.add_argument('--list-backends', action='store_true', help='List available backends')
    parser.add_argument('--quiet', '-q', action='store_true', help='Minimal output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
    )

    # List backends
    if args.list_backends:
        from .backends import list_backends
        print("Available backends:")
        print(f"  {'Name':<12} {'Description':<40} {'Available'}")
        print(f"  {'-'*12} {'-'*40} {'-'*9}")
        for name, desc, avail in list_backends():
            status = "YES" if avail else "NO"
            print(f"  {name:<12} {desc:<40} {status}")
        return 0

    # Determine run parameters
    if args.quick:
        n_neutrons = args.neutrons or 10_000
    elif args.production:
        n_neutrons = args.neutrons or 10_000_000
    else:
        n_neutrons = args.neutrons or 100_000

    from .backends import get_backend
    from .config import SweepConfig
    from .constants import SimulationConstants
    from .output import write_wrat, write_json, iter_wrat_lines
    from .sweep import ThicknessSweep

    try:
        config = SweepConfig(start=args.start, end=args.end, step=args.step,
                             neutrons_per_thickness=n_neutrons)
        constants = SimulationConstants.from_cross_sections(args.capture, args.scatter)
        backend = get_backend(args.backend, n_workers=args.workers)

        solver = ThicknessSweep(backend, config=config, constants=constants, seed=args.seed)
        result = solver.solve(verbose=not args.quiet)
    except SlabMCError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.print_results:
        for line in iter_wrat_lines(result.sink):
            print(line)

    write_wrat(result.sink, args.output)
    if not args.quiet:
        print(f"\nResults saved to {args.output}")

    if args.json:
        write_json(result, args.json)
        if not args.quiet:
            print(f"Summary saved to {args.json}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
