"""Octree-guided refinement search for the center of a point cloud."""

from __future__ import annotations

import logging
from typing import List, Optional

from .config import get_search_config
from .evaluator import DistanceEvaluator
from .logging_utils import debug_log_call, log_elapsed
from .model import CubeState, Point, PointCloud, RoundRecord, SearchResult, as_cloud_array
from .validate import validate_search_inputs

logger = logging.getLogger(__name__)

if not logging.getLogger().handlers:  # pragma: no cover - depends on host application
    logging.basicConfig(level=logging.INFO)

STATE_INIT = "init"
STATE_REFINE = "refine"
STATE_DONE = "done"


class RefinementController:
    """Greedy cube-subdivision search driven by a :class:`DistanceEvaluator`.

    Each round evaluates the 19 new lattice vertices, keeps the cheapest of the
    8 overlapping sub-cubes and halves the cube around it. There is no
    backtracking; the answer is the center of the final cube.
    """

    def __init__(self, evaluator: DistanceEvaluator, iterations: int) -> None:
        self.evaluator = evaluator
        self.iterations = iterations
        self.state = STATE_INIT
        self.cube: Optional[CubeState] = None
        self.rounds: List[RoundRecord] = []

    def _initialize(self, cloud: PointCloud) -> None:
        self.cube = CubeState.unit(0.5)
        for vertex in self.cube.corners():
            self.evaluator.submit(vertex)
        self.evaluator.evaluate(cloud)
        logger.debug("Evaluated initial corners of the unit cube")

    def _refine(self, round_index: int, cloud: PointCloud) -> None:
        cube = self.cube
        for vertex in cube.place_pending():
            self.evaluator.submit(vertex)
        self.evaluator.evaluate(cloud)

        costs = cube.sub_cube_costs()
        offset, cost = cube.select_sub_cube(costs)
        self.rounds.append(
            RoundRecord(
                round_index=round_index,
                offset=offset,
                cost=cost,
                costs=costs,
                half_side=cube.half_side,
                lower_corner=cube.lower_corner,
            )
        )
        logger.info(
            "Round %d/%d: sub-cube %s cost=%.6g half_side=%.6g",
            round_index,
            self.iterations,
            offset,
            cost,
            cube.half_side,
        )
        self.cube = cube.shrink(offset)

    def run(self, cloud: PointCloud) -> Point:
        if self.state != STATE_INIT:
            raise RuntimeError("RefinementController instances run a single search")
        self._initialize(cloud)
        self.state = STATE_REFINE
        for round_index in range(1, self.iterations + 1):
            self._refine(round_index, cloud)
        self.state = STATE_DONE
        return self.cube.center()


@debug_log_call(logger)
def search(
    cloud,
    iterations: Optional[int] = None,
    *,
    evaluator: Optional[DistanceEvaluator] = None,
) -> SearchResult:
    """Run the refinement search and return the center with its round trace."""

    if iterations is None:
        iterations = get_search_config().iterations
    array = as_cloud_array(cloud)
    validate_search_inputs(array, iterations)

    evaluator = evaluator or DistanceEvaluator()
    logger.info(
        "Searching center of %d points with %d round(s) and %d worker(s)",
        array.shape[0],
        iterations,
        evaluator.workers,
    )
    controller = RefinementController(evaluator, iterations)
    with log_elapsed(logger, "Center search") as timer:
        center = controller.run(array)
    return SearchResult(
        center=center,
        iterations=iterations,
        rounds=controller.rounds,
        workers=evaluator.workers,
        elapsed_s=timer.elapsed_s,
    )


def find_center(
    cloud,
    iterations: Optional[int] = None,
    *,
    evaluator: Optional[DistanceEvaluator] = None,
) -> Point:
    """Approximate the point minimizing the summed distance to ``cloud``.

    ``cloud`` is an ``(N, 3)`` array or a sequence of points inside the unit
    cube. Raises :class:`~cloud_center.model.InvalidInputError` for an empty
    cloud or a negative ``iterations`` before any evaluation happens.
    """

    return search(cloud, iterations, evaluator=evaluator).center
