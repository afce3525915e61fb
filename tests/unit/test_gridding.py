"""
Unittests for normalization and regridding
"""

import logging

import numpy as np
import pytest

from behr_column_map.gridding import (
    axis_points,
    drop_no_data,
    normalize,
    output_mesh,
    regrid,
)


@pytest.mark.parametrize(
    "bdy, resolution, expected",
    [
        ((0.0, 1.0), 0.25, [0.0, 0.25, 0.5, 0.75, 1.0]),
        ((0.0, 1.0), 0.3, [0.0, 0.3, 0.6, 0.9]),
        ((-0.15, 0.15), 0.05, [-0.15, -0.1, -0.05, 0.0, 0.05, 0.1, 0.15]),
        ((2.0, 2.0), 0.5, [2.0]),
    ],
)
def test_axis_points(bdy, resolution, expected):
    np.testing.assert_allclose(axis_points(bdy, resolution), expected, atol=1e-12)


def test_output_mesh():
    longrid, latgrid = output_mesh((-100.0, -99.0), (30.0, 30.5), 0.5)

    assert longrid.shape == latgrid.shape == (2, 3)
    np.testing.assert_allclose(longrid[0], [-100.0, -99.5, -99.0])
    np.testing.assert_allclose(latgrid[:, 0], [30.0, 30.5])


def test_normalize():
    weighted_sum = np.array([[10 * 2 + 20 * 3, 4.0], [0.0, 1e-6]])
    weight_sum = np.array([[2 + 3, 2.0], [0.0, 1e-9]])

    mean = normalize(weighted_sum, weight_sum)

    assert mean[0, 0] == 16  # noqa: PLR2004
    assert mean[0, 1] == 2  # noqa: PLR2004
    assert np.isnan(mean[1, 0])
    assert np.isfinite(mean[1, 1])

    assert np.isnan(normalize(weighted_sum, weight_sum, min_weight=1e-6)[1, 1])


def test_drop_no_data_keeps_alignment():
    mean = np.array([[1.0, np.nan], [3.0, 4.0]])
    lon = np.array([[0.0, 1.0], [0.0, 1.0]])
    lat = np.array([[0.0, 0.0], [1.0, 1.0]])
    count = np.array([[5, 0], [7, 8]])

    points = drop_no_data(mean, lon, lat, count)

    np.testing.assert_array_equal(points.value, [1.0, 3.0, 4.0])
    np.testing.assert_array_equal(points.longitude, [0.0, 0.0, 1.0])
    np.testing.assert_array_equal(points.latitude, [0.0, 1.0, 1.0])
    np.testing.assert_array_equal(points.count, [5.0, 7.0, 8.0])


def test_regrid_constant_surface():
    lon, lat = np.meshgrid(np.arange(-102.0, -97.0), np.arange(28.0, 33.0))
    values = np.full(lon.size, 5.0)
    longrid, latgrid = output_mesh((-101.0, -99.0), (29.0, 31.0), 0.25)

    gridded = regrid(lon.ravel(), lat.ravel(), values, longrid, latgrid)

    np.testing.assert_allclose(gridded, 5.0)


def test_regrid_outside_hull_is_nan():
    lon, lat = np.meshgrid([-101.0, -100.0, -99.0], [29.0, 30.0, 31.0])
    values = np.full(lon.size, 5.0)
    longrid, latgrid = output_mesh((-102.0, -98.0), (29.0, 31.0), 1.0)

    gridded = regrid(lon.ravel(), lat.ravel(), values, longrid, latgrid)

    assert np.isnan(gridded[:, 0]).all()
    assert np.isnan(gridded[:, -1]).all()
    np.testing.assert_allclose(gridded[1, 2], 5.0)


def test_regrid_too_few_points():
    longrid, latgrid = output_mesh((0.0, 1.0), (0.0, 1.0), 0.5)

    gridded = regrid(np.array([0.5]), np.array([0.5]), np.array([1.0]), longrid, latgrid)

    assert gridded.shape == longrid.shape
    assert np.isnan(gridded).all()


@pytest.mark.parametrize(
    "lon, lat",
    [
        pytest.param([-101.0, -101.0, -101.0], [29.0, 30.0, 31.0], id="same-longitude"),
        pytest.param([-101.0, -100.0, -99.0], [29.0, 30.0, 31.0], id="diagonal"),
    ],
)
def test_regrid_collinear_points(lon, lat, caplog):
    longrid, latgrid = output_mesh((-101.0, -99.0), (29.0, 31.0), 0.5)

    with caplog.at_level(logging.WARNING):
        gridded = regrid(np.array(lon), np.array(lat), np.ones(3), longrid, latgrid)

    assert gridded.shape == longrid.shape
    assert np.isnan(gridded).all()
    assert "collinear" in caplog.text
