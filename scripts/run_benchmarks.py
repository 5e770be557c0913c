"""CLI entry point for mode benchmarking and roundtrip verification.

Usage:
    python scripts/run_benchmarks.py                                  # all modes, SM4
    python scripts/run_benchmarks.py --modes CTR CBC --sizes 4096     # subset
    python scripts/run_benchmarks.py --algorithm aes --repeats 1      # quick AES run

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from modelab.config import load_settings
from modelab.evaluation.benchmark import BenchmarkConfig, run_benchmark
from modelab.evaluation.roundtrip import DEFAULT_LENGTHS, run_all_modes
from modelab.modes.context import CipherMode
from modelab.utils.repro import make_run_dir, write_json


def _cli_progress(message: str, current: int, total: int) -> None:
    """Print progress to stderr."""
    pct = (current / total * 100) if total > 0 else 0
    print(f"  [{current + 1}/{total}] ({pct:.0f}%) {message}", file=sys.stderr)


def main() -> int:
    settings = load_settings()

    parser = argparse.ArgumentParser(
        description="Block cipher mode benchmark runner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python scripts/run_benchmarks.py --repeats 1                 # quick test\n"
            "  python scripts/run_benchmarks.py --modes CTR --sizes 1048576 # one large CTR run\n"
        ),
    )

    parser.add_argument(
        "--algorithm", type=str, default=settings.default_algorithm,
        help=f"Block cipher primitive (default: {settings.default_algorithm})",
    )
    parser.add_argument(
        "--modes", nargs="+", default=[m.value for m in CipherMode],
        help="Modes to benchmark (default: all)",
    )
    parser.add_argument(
        "--sizes", nargs="+", type=int, default=settings.benchmark_sizes,
        help="Payload sizes in bytes",
    )
    parser.add_argument(
        "--repeats", type=int, default=settings.benchmark_repeats,
        help=f"Timed calls per (mode, size) (default: {settings.benchmark_repeats})",
    )
    parser.add_argument(
        "--seed", type=int, default=settings.global_seed,
        help=f"Random seed (default: {settings.global_seed})",
    )
    parser.add_argument(
        "--output-dir", type=str, default=settings.runs_dir,
        help=f"Output directory (default: {settings.runs_dir})",
    )
    parser.add_argument(
        "--skip-roundtrip", action="store_true",
        help="Skip roundtrip verification before benchmarking",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = BenchmarkConfig(
            algorithm=args.algorithm,
            modes=args.modes,
            sizes=args.sizes,
            repeats=args.repeats,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    paths = make_run_dir(args.output_dir, f"{config.algorithm}_modes")

    # ------------------------------------------------------------------
    # Roundtrip verification
    # ------------------------------------------------------------------
    if not args.skip_roundtrip:
        print("Roundtrip verification:")
        results = run_all_modes(
            algorithm=config.algorithm,
            num_vectors=max(1, settings.roundtrip_vectors // len(DEFAULT_LENGTHS)),
            seed=args.seed,
            progress_callback=_cli_progress,
        )
        for r in results:
            print(f"  {r.summary()}")
        write_json(paths.roundtrip_json, results)
        if not all(r.is_perfect for r in results):
            print(f"Roundtrip failures recorded in {paths.roundtrip_json}", file=sys.stderr)
            return 1

    # ------------------------------------------------------------------
    # Benchmark
    # ------------------------------------------------------------------
    result = run_benchmark(config, progress_callback=_cli_progress)
    print(result.summary())
    write_json(paths.results_json, result)

    print(f"\nAll results saved to: {paths.run_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
