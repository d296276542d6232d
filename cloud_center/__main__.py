import argparse
import logging
import sys
from typing import Optional, Sequence

from cloud_center import (
    CachedRandomCloudSource,
    CorruptDataError,
    DistanceEvaluator,
    get_search_config,
    search,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = get_search_config()
    parser = argparse.ArgumentParser(description="Approximate the center of a 3D point cloud")
    parser.add_argument(
        "--cloud-file",
        default=config.cloud_path,
        help=f"Binary cache of the cloud (default: {config.cloud_path})",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=config.cloud_size,
        help=f"Number of points to generate or expect (default: {config.cloud_size})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed used when generating a new cloud",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=config.iterations,
        help=f"Number of refinement rounds (default: {config.iterations})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=config.max_workers,
        help=f"Maximum number of distance worker threads (default: {config.max_workers})",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    source = CachedRandomCloudSource(args.cloud_file, args.size, seed=args.seed)
    if source.path.exists():
        print("Cloud exists")
    else:
        print("Cloud does not exist. Creating it.")

    try:
        cloud = source.get_points()
    except CorruptDataError as exc:
        logger.error("Sanity check failed: %s", exc)
        print("Sanity check failed")
        return 1
    if not source.created:
        print("Sanity check succeeded")

    result = search(cloud, args.iterations, evaluator=DistanceEvaluator(max_workers=args.workers))
    center = result.center

    print(f"Elapsed time in milliseconds : {result.elapsed_s * 1000.0:.0f} ms")
    print(f"Cloud center is ({center.x:.6g},{center.y:.6g},{center.z:.6g})")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
