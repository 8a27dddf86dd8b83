"""
Run the predefined poses benchmark.

Usage:
    posebench-combine-poses --config benchmark.yaml
"""

import argparse
import logging
import sys

from posebench.benchmark.BenchmarkOptions import BenchmarkOptions
from posebench.benchmark.CombinePredefinedPosesBenchmark import CombinePredefinedPosesBenchmark
from posebench.benchmark.PlanningSceneProvider import PlanningSceneProvider
from posebench.errors import OptionsError

logger = logging.getLogger("posebench.combine_predefined_poses_benchmark")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_OPTIONS = 2


def build_parser():
    parser = argparse.ArgumentParser(
        description="Plan between all combinations of a robot's predefined poses")
    parser.add_argument("--config", required=True, help="Benchmark options (YAML)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    # Read benchmark options
    try:
        opts = BenchmarkOptions.from_file(args.config)
    except OptionsError as e:
        logger.error(str(e))
        return EXIT_OPTIONS

    # Setup benchmark server
    server = CombinePredefinedPosesBenchmark(
        PlanningSceneProvider(robot_description=opts.robot_description),
        show_progress=not args.no_progress,
    )
    server.initialize(opts.getPlanningPipelineNames())

    # Running benchmarks
    if not server.run_benchmarks(opts):
        logger.error("Failed to run all benchmarks")
        return EXIT_FAILED

    n_success = int(server.results["Success"].sum())
    logger.info(f"Finished {len(server.results)} runs, {n_success} successful")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
