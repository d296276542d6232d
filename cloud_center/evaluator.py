"""Worker-pool evaluation of distance-sums for batches of lattice vertices."""

from __future__ import annotations

import logging
import os
import threading
from typing import List, Optional

import numpy as np

from .config import get_search_config
from .model import CandidateVertex, Point, PointCloud

logger = logging.getLogger(__name__)


def distance_sum(coord: Point, cloud: PointCloud, chunk_size: int = 1_000_000) -> float:
    """Sum of Euclidean distances from ``coord`` to every point of ``cloud``.

    Rows are processed in fixed-size chunks to bound temporary memory; the
    chunking is independent of the worker count so results are reproducible.
    """

    origin = np.asarray(coord.as_tuple(), dtype=np.float64)
    total = 0.0
    for start in range(0, cloud.shape[0], chunk_size):
        diff = cloud[start : start + chunk_size] - origin
        total += float(np.sqrt(np.einsum("ij,ij->i", diff, diff)).sum())
    return total


def resolve_worker_count(max_workers: int, cpu_count: Optional[int] = None) -> int:
    """Clamp the pool size to ``[1, max_workers]`` using the detected parallelism."""

    detected = os.cpu_count() if cpu_count is None else cpu_count
    if not detected:
        logger.debug("Hardware parallelism reported as %r; using a single worker", detected)
        detected = 1
    return max(1, min(detected, max_workers))


class DistanceEvaluator:
    """Computes distance-sums for submitted vertices with a fixed pool of threads.

    Vertices are queued with :meth:`submit` and computed by :meth:`evaluate`,
    which blocks until the whole batch is processed. Workers claim vertices
    through a shared cursor guarded by a lock; the distance computation runs
    outside the lock and writes only into the claimed vertex.

    The evaluator is not reentrant: a batch cannot be submitted to or
    evaluated while another ``evaluate`` call is in flight.
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        chunk_size: Optional[int] = None,
        *,
        cpu_count: Optional[int] = None,
    ) -> None:
        config = get_search_config()
        cap = config.max_workers if max_workers is None else max_workers
        if cap < 1:
            raise ValueError(f"max_workers must be positive, got {cap}")
        self.workers = resolve_worker_count(cap, cpu_count)
        self.chunk_size = config.chunk_size if chunk_size is None else chunk_size
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        self._lock = threading.Lock()
        self._pending: List[CandidateVertex] = []
        self._cursor = 0
        self._busy = False
        self._errors: List[BaseException] = []

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def submit(self, vertex: CandidateVertex) -> None:
        with self._lock:
            if self._busy:
                raise RuntimeError("cannot submit while a batch is being evaluated")
            self._pending.append(vertex)

    def _claim(self) -> Optional[CandidateVertex]:
        with self._lock:
            if self._errors:
                return None
            while self._cursor < len(self._pending):
                vertex = self._pending[self._cursor]
                self._cursor += 1
                if not vertex.processed:
                    return vertex
            return None

    def _work(self, cloud: PointCloud) -> None:
        while True:
            vertex = self._claim()
            if vertex is None:
                return
            try:
                vertex.record(distance_sum(vertex.coord, cloud, self.chunk_size))
            except Exception as exc:
                logger.exception("Distance evaluation failed for vertex at %s", vertex.coord)
                with self._lock:
                    self._errors.append(exc)
                return

    def evaluate(self, cloud: PointCloud) -> None:
        """Compute every pending vertex against ``cloud`` and clear the batch."""

        with self._lock:
            if self._busy:
                raise RuntimeError("evaluate() is not reentrant")
            if not self._pending:
                return
            self._busy = True
            self._cursor = 0
            self._errors = []
            batch_size = len(self._pending)

        try:
            workers = min(self.workers, batch_size)
            logger.debug("Evaluating %d vertices with %d worker(s)", batch_size, workers)
            threads = [
                threading.Thread(target=self._work, args=(cloud,), name=f"distance-worker-{i}", daemon=True)
                for i in range(workers)
            ]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()
        finally:
            with self._lock:
                errors = self._errors
                self._errors = []
                self._pending = []
                self._cursor = 0
                self._busy = False

        if errors:
            raise errors[0]
