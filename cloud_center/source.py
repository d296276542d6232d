"""Providers of the point cloud consumed by the search."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

import numpy as np

from .logging_utils import debug_log_call
from .model import CorruptDataError, PointCloud, as_cloud_array
from .validate import validate_cloud

logger = logging.getLogger(__name__)

# three little-endian 8-byte floats per point
CLOUD_DTYPE = np.dtype("<f8")
BYTES_PER_POINT = 3 * CLOUD_DTYPE.itemsize


class PointCloudSource(ABC):
    """Supplies a fixed, read-only cloud for the duration of a search."""

    @abstractmethod
    def get_points(self) -> PointCloud:
        raise NotImplementedError()  # pragma: no cover


class ArrayPointCloudSource(PointCloudSource):
    """Wrap an in-memory sequence of points."""

    def __init__(self, points) -> None:
        self._cloud = as_cloud_array(points)

    def get_points(self) -> PointCloud:
        return self._cloud


def write_cloud(path: Union[str, Path], cloud: PointCloud) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.ascontiguousarray(cloud, dtype=CLOUD_DTYPE).tofile(path)


def read_cloud(path: Union[str, Path]) -> PointCloud:
    path = Path(path)
    size = path.stat().st_size
    if size % BYTES_PER_POINT:
        raise CorruptDataError(f"{path}: {size} bytes is not a whole number of points")
    flat = np.fromfile(path, dtype=CLOUD_DTYPE)
    return as_cloud_array(flat.reshape(-1, 3).astype(np.float64, copy=False))


class CachedRandomCloudSource(PointCloudSource):
    """Uniform random cloud in ``[0, 1]^3`` cached in a flat binary file.

    The first call generates ``size`` points and writes them to ``path``;
    later calls (and later runs) load the file and sanity check it.

    Args:
        path: Location of the binary cache.
        size: Number of points to generate, and expected when loading.
        seed: Seed for ``numpy.random.default_rng``.
    """

    def __init__(self, path: Union[str, Path], size: int, seed: Optional[int] = None) -> None:
        if size < 1:
            raise ValueError(f"cloud size must be positive, got {size}")
        self.path = Path(path)
        self.size = size
        self.seed = seed
        self.created = False

    def generate(self) -> PointCloud:
        rng = np.random.default_rng(self.seed)
        return as_cloud_array(rng.random((self.size, 3)))

    @debug_log_call(logger, name="CachedRandomCloudSource.get_points")
    def get_points(self) -> PointCloud:
        if self.path.exists():
            logger.info("Loading cached cloud from %s", self.path)
            cloud = read_cloud(self.path)
            validate_cloud(cloud, expected_size=self.size)
            self.created = False
            return cloud

        logger.info("Generating %d random points into %s", self.size, self.path)
        cloud = self.generate()
        write_cloud(self.path, cloud)
        self.created = True
        return cloud
