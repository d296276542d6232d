import numpy as np
import pytest

from cloud_center.model import CorruptDataError, InvalidInputError
from cloud_center.validate import validate_cloud, validate_search_inputs


def test_validate_cloud_accepts_unit_cube_bounds():
    validate_cloud(np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0], [0.3, 0.2, 0.9]]))


def test_validate_cloud_reports_first_offending_point():
    cloud = np.full((5, 3), 0.5)
    cloud[3, 0] = 2.0
    cloud[4, 2] = np.nan
    with pytest.raises(CorruptDataError) as exc:
        validate_cloud(cloud)
    assert 'point 3' in str(exc.value)


def test_validate_cloud_rejects_wrong_shape():
    with pytest.raises(CorruptDataError):
        validate_cloud(np.zeros((4, 2)))


@pytest.mark.parametrize(
    'cloud, iterations, message',
    [
        (np.empty((0, 3)), 3, 'empty'),
        (np.zeros((2, 3)), -1, '>= 0'),
        (np.zeros((2, 3)), 1.0, 'integer'),
        (np.zeros((2, 4)), 1, 'shape'),
    ],
)
def test_validate_search_inputs(cloud, iterations, message):
    with pytest.raises(InvalidInputError) as exc:
        validate_search_inputs(cloud, iterations)
    assert message in str(exc.value)


def test_numpy_integer_iterations_are_accepted():
    validate_search_inputs(np.zeros((1, 3)), np.int64(4))
