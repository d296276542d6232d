from typing import Optional

import numpy as np

from .model import CorruptDataError, InvalidInputError, PointCloud


def validate_cloud(cloud: PointCloud, expected_size: Optional[int] = None) -> None:
    """Sanity check a loaded cloud: every coordinate must be finite and inside [0, 1]."""
    if cloud.ndim != 2 or cloud.shape[1] != 3:
        raise CorruptDataError(f'cloud must have shape (N, 3), got {cloud.shape}')
    if expected_size is not None and cloud.shape[0] != expected_size:
        raise CorruptDataError(f'expected {expected_size} points, found {cloud.shape[0]}')
    # NaN compares False on both sides, so it is caught by the negated test
    ok = (cloud >= 0.0) & (cloud <= 1.0)
    if not ok.all():
        row = int(np.argwhere(~ok)[0][0])
        raise CorruptDataError(f'point {row} out of bounds or NaN: {tuple(cloud[row].tolist())}')


def validate_search_inputs(cloud: PointCloud, iterations) -> None:
    if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)):
        raise InvalidInputError(f'iterations must be an integer, got {iterations!r}')
    if iterations < 0:
        raise InvalidInputError(f'iterations must be >= 0, got {iterations}')
    if cloud.ndim != 2 or cloud.shape[1] != 3:
        raise InvalidInputError(f'point cloud must have shape (N, 3), got {cloud.shape}')
    if cloud.shape[0] == 0:
        raise InvalidInputError('point cloud is empty')
