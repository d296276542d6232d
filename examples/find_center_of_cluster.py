"""Example: approximate the center of two noisy clusters."""

import numpy as np

from cloud_center import DistanceEvaluator, search

ITERATIONS = 10


def main() -> None:
    rng = np.random.default_rng(123)
    near = rng.normal((0.25, 0.3, 0.4), 0.02, size=(20_000, 3))
    far = rng.normal((0.8, 0.7, 0.6), 0.05, size=(5_000, 3))
    cloud = np.clip(np.vstack([near, far]), 0.0, 1.0)

    result = search(cloud, ITERATIONS, evaluator=DistanceEvaluator(max_workers=4))

    print(f"Workers: {result.workers}")
    for record in result.rounds:
        lx, ly, lz = record.lower_corner
        print(
            f"  round {record.round_index:2d}: sub-cube {record.offset} "
            f"cost={record.cost:.6g} lower=({lx:.4f}, {ly:.4f}, {lz:.4f})"
        )
    center = result.center
    print(f"Center: ({center.x:.6f}, {center.y:.6f}, {center.z:.6f})")
    print(f"Elapsed: {result.elapsed_s * 1000.0:.1f} ms")


if __name__ == "__main__":
    main()
