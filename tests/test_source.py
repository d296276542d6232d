import numpy as np
import pytest

from cloud_center.model import CorruptDataError, Point
from cloud_center.source import (
    BYTES_PER_POINT,
    ArrayPointCloudSource,
    CachedRandomCloudSource,
    read_cloud,
    write_cloud,
)


def test_array_source_returns_read_only_cloud():
    source = ArrayPointCloudSource([Point(0.1, 0.2, 0.3), Point(0.4, 0.5, 0.6)])
    cloud = source.get_points()
    assert cloud.shape == (2, 3)
    assert not cloud.flags.writeable


def test_cached_cloud_round_trips_point_for_point(tmp_path):
    path = tmp_path / 'cloud.bin'
    source = CachedRandomCloudSource(path, 1000, seed=42)

    generated = source.get_points()
    assert source.created
    assert path.stat().st_size == 1000 * BYTES_PER_POINT
    assert ((generated >= 0.0) & (generated <= 1.0)).all()

    reloaded = CachedRandomCloudSource(path, 1000).get_points()
    np.testing.assert_array_equal(reloaded, generated)

    again = source.get_points()
    assert not source.created
    np.testing.assert_array_equal(again, generated)


def test_file_layout_is_three_doubles_per_point(tmp_path):
    path = tmp_path / 'cloud.bin'
    write_cloud(path, np.array([[0.0, 0.5, 1.0], [0.25, 0.75, 0.125]]))
    raw = np.frombuffer(path.read_bytes(), dtype='<f8')
    assert raw.tolist() == [0.0, 0.5, 1.0, 0.25, 0.75, 0.125]


def test_same_seed_generates_same_cloud(tmp_path):
    a = CachedRandomCloudSource(tmp_path / 'a.bin', 20, seed=1).get_points()
    b = CachedRandomCloudSource(tmp_path / 'b.bin', 20, seed=1).get_points()
    np.testing.assert_array_equal(a, b)


@pytest.mark.parametrize('bad_value', [1.5, -0.1, float('nan')])
def test_cached_cloud_with_bad_values_is_corrupt(tmp_path, bad_value):
    path = tmp_path / 'cloud.bin'
    cloud = np.full((4, 3), 0.5)
    cloud[2, 1] = bad_value
    write_cloud(path, cloud)

    with pytest.raises(CorruptDataError, match='point 2'):
        CachedRandomCloudSource(path, 4).get_points()


def test_truncated_file_is_corrupt(tmp_path):
    path = tmp_path / 'cloud.bin'
    path.write_bytes(b'\x00' * (BYTES_PER_POINT + 5))
    with pytest.raises(CorruptDataError, match='whole number'):
        read_cloud(path)


def test_size_mismatch_is_corrupt(tmp_path):
    path = tmp_path / 'cloud.bin'
    write_cloud(path, np.full((3, 3), 0.5))
    with pytest.raises(CorruptDataError, match='expected 5 points'):
        CachedRandomCloudSource(path, 5).get_points()


def test_non_positive_size_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        CachedRandomCloudSource(tmp_path / 'cloud.bin', 0)
