"""
Normalize accumulated sums and regrid them to a regular lat/lon mesh
"""

from __future__ import annotations

import logging
from typing import NamedTuple, cast

import numpy as np
import numpy.typing as npt
from prefect import task
from scipy.interpolate import griddata  # type: ignore
from scipy.spatial import QhullError  # type: ignore

from behr_column_map import CONFIG


class ScatteredPoints(NamedTuple):
    """
    Index-aligned pixels left after dropping no-data positions
    """

    longitude: npt.NDArray[np.float64]
    latitude: npt.NDArray[np.float64]
    value: npt.NDArray[np.float64]
    count: npt.NDArray[np.float64]


def axis_points(bdy: tuple[float, float], resolution: float) -> npt.NDArray[np.float64]:
    """
    Points from min to max (inclusive when reached) in resolution steps
    """
    n = int(np.floor((bdy[1] - bdy[0]) / resolution + 1e-9)) + 1
    return bdy[0] + resolution * np.arange(n)


@task(
    name="output_mesh",
    description="Build the regular lon/lat output mesh",
    cache_policy=CONFIG.CACHE_POLICIES,
)
def output_mesh(
    lon_bdy: tuple[float, float], lat_bdy: tuple[float, float], resolution: float
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Build the output mesh

    Parameters
    ----------
    lon_bdy :
        (min, max) longitude

    lat_bdy :
        (min, max) latitude

    resolution :
        grid spacing in degrees

    Returns
    -------
    :
        longitude and latitude meshes, shape (n_lat, n_lon)
    """
    longrid, latgrid = np.meshgrid(
        axis_points(lon_bdy, resolution), axis_points(lat_bdy, resolution)
    )
    return longrid, latgrid


def normalize(
    weighted_sum: npt.NDArray[np.float64],
    weight_sum: npt.NDArray[np.float64],
    min_weight: float = 0.0,
) -> npt.NDArray[np.float64]:
    """
    Weighted mean per pixel

    Parameters
    ----------
    weighted_sum :
        accumulated weighted values

    weight_sum :
        accumulated weights

    min_weight :
        pixels with a weight at or below this value get NaN

    Returns
    -------
    :
        mean value, NaN where there is no data
    """
    has_data = weight_sum > min_weight
    mean = np.full(weighted_sum.shape, np.nan)
    np.divide(weighted_sum, weight_sum, out=mean, where=has_data)
    return mean


def drop_no_data(
    mean: npt.NDArray[np.float64],
    longitude: npt.NDArray[np.float64],
    latitude: npt.NDArray[np.float64],
    count: npt.NDArray[np.int64],
) -> ScatteredPoints:
    """
    Remove no-data pixels from the mean and its paired arrays

    The same index set is dropped from all four arrays; the results
    are flattened.
    """
    keep = np.isfinite(mean) & np.isfinite(longitude) & np.isfinite(latitude)
    return ScatteredPoints(
        longitude=np.asarray(longitude)[keep],
        latitude=np.asarray(latitude)[keep],
        value=np.asarray(mean)[keep],
        count=np.asarray(count, dtype=np.float64)[keep],
    )


@task(
    name="regrid",
    description="Interpolate scattered pixels onto the output mesh",
    cache_policy=CONFIG.CACHE_POLICIES,
)
def regrid(
    longitude: npt.NDArray[np.float64],
    latitude: npt.NDArray[np.float64],
    values: npt.NDArray[np.float64],
    longrid: npt.NDArray[np.float64],
    latgrid: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """
    Linearly interpolate scattered values onto a mesh

    Parameters
    ----------
    longitude, latitude :
        coordinates of the scattered values

    values :
        values to interpolate

    longrid, latgrid :
        output mesh

    Returns
    -------
    :
        gridded values; NaN outside the convex hull of the input
        and everywhere if too few points are given or all points
        lie on one line
    """
    if values.size < CONFIG.MIN_POINTS_FOR_INTERPOLATION:
        return np.full(longrid.shape, np.nan)

    try:
        gridded = griddata(
            points=(longitude, latitude),
            values=values,
            xi=(longrid, latgrid),
            method="linear",
        )
    except QhullError:
        logging.warning(
            f"Cannot triangulate {values.size} collinear points, grid is all NaN"
        )
        return np.full(longrid.shape, np.nan)

    return cast(npt.NDArray[np.float64], gridded)
