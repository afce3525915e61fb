"""
Column map workflow

Average per-day products over date ranges, regrid the mean onto a
regular lat/lon mesh and optionally draw it on a map
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union

import numpy as np
import numpy.typing as npt
import pandas as pd
import xarray as xr
from prefect import flow

from behr_column_map.accumulate import accumulate_days, load_day
from behr_column_map.day_weighting import day_weighted_field
from behr_column_map.gridding import drop_no_data, normalize, output_mesh, regrid
from behr_column_map.utils import save_dataset
from behr_column_map.validation import (
    DateSpec,
    MapOptions,
    check_boundaries,
    parse_date_ranges,
    resolve_options,
)


@dataclass
class GriddedResult:
    """
    Gridded mean column and count with the options used to make them
    """

    column: npt.NDArray[np.float64]
    longitude: npt.NDArray[np.float64]
    latitude: npt.NDArray[np.float64]
    count: npt.NDArray[np.float64]
    options: MapOptions
    colorbar: Optional[Any] = None
    days: list[pd.Timestamp] = field(default_factory=list)

    def to_dataset(self) -> xr.Dataset:
        """
        Gridded result as a dataset on (lat, lon) coordinates
        """
        ds = xr.Dataset(
            {
                "column": (("lat", "lon"), self.column),
                "count": (("lat", "lon"), self.count),
            },
            coords={"lat": self.latitude[:, 0], "lon": self.longitude[0, :]},
        )
        ds.attrs = {
            "mapfield": self.options.mapfield,
            "resolution": self.options.resolution,
            "cloud_source": self.options.cloud_source,
            "cloud_fraction_max": self.options.cloud_fraction_max,
            "row_anomaly_mode": self.options.row_anomaly_mode.value,
            "max_solar_zenith_angle": self.options.max_solar_zenith_angle,
            "flags": ",".join(self.options.flags),
            "days_averaged": len(self.days),
        }
        return ds

    def to_netcdf(self, save_to_path: Union[str, Path]) -> None:
        """Save the gridded result as netCDF"""
        save_dataset(self.to_dataset(), save_to_path)


@flow(name="column_map", validate_parameters=False)
def run_column_map(  # noqa: PLR0913
    date_ranges: list[tuple[pd.Timestamp, pd.Timestamp]],
    lon_bdy: tuple[float, float],
    lat_bdy: tuple[float, float],
    options: MapOptions,
    day_filter: Optional[Callable[[pd.Timestamp], bool]] = None,
    loader: Callable[[Path], xr.Dataset] = load_day,
    day_weighting: Callable[..., tuple] = day_weighted_field,
) -> GriddedResult:
    """
    Accumulate, normalize, regrid and draw validated inputs

    See :func:`column_map` for the parameters.
    """
    longrid, latgrid = output_mesh(lon_bdy, lat_bdy, options.resolution)

    acc = accumulate_days(
        date_ranges,
        options,
        day_filter=day_filter,
        loader=loader,
        day_weighting=day_weighting,
    )

    if acc is None:
        logging.warning("no data found for the requested days")
        gridded_column = np.full(longrid.shape, np.nan)
        gridded_count = np.full(longrid.shape, np.nan)
        days = []
    else:
        mean = normalize(acc.weighted_sum, acc.weight_sum, options.min_weight)
        points = drop_no_data(mean, acc.longitude, acc.latitude, acc.count)
        gridded_column = regrid(
            points.longitude, points.latitude, points.value, longrid, latgrid
        )
        gridded_count = regrid(
            points.longitude, points.latitude, points.count, longrid, latgrid
        )
        days = acc.days

    cbhandle = None
    if options.make_figure:
        from behr_column_map.plotting import render_map

        cbhandle = render_map(
            longrid, latgrid, gridded_column, options, lon_bdy, lat_bdy
        )

    return GriddedResult(
        column=gridded_column,
        longitude=longrid,
        latitude=latgrid,
        count=gridded_count,
        options=options,
        colorbar=cbhandle,
        days=days,
    )


def column_map(  # noqa: PLR0913
    start_date: DateSpec,
    end_date: DateSpec,
    lon_bdy: Sequence[float],
    lat_bdy: Sequence[float],
    day_filter: Optional[Callable[[pd.Timestamp], bool]] = None,
    loader: Callable[[Path], xr.Dataset] = load_day,
    day_weighting: Callable[..., tuple] = day_weighted_field,
    **kwargs: Any,
) -> GriddedResult:
    """
    Map the average NO2 column over one or more periods

    Parameters
    ----------
    start_date :
        first day of the period, e.g. "2014/06/01"; a list of
        dates averages several, noncontiguous periods

    end_date :
        same structure as `start_date`, the last day of each period

    lon_bdy :
        (min, max) longitude of the output grid

    lat_bdy :
        (min, max) latitude of the output grid

    day_filter :
        business-day predicate; built from the flags if None

    loader :
        reads the per-day product of a file

    day_weighting :
        computes (weighted, weight, count) of one day

    **kwargs :
        options, see :class:`~behr_column_map.validation.MapOptions`

    Returns
    -------
    :
        gridded column, meshes, gridded count, options and
        colorbar (None if no figure was made)

    Raises
    ------
    ConfigurationError
        if an option, a boundary or a date range is invalid;
        raised before any file is read

    LatLonMismatchError
        if an overpass is not on the lat/lon arrays of the run
    """
    options = resolve_options(**kwargs)
    lon_bounds, lat_bounds = check_boundaries(lon_bdy, lat_bdy)
    date_ranges = parse_date_ranges(start_date, end_date)

    return run_column_map(
        date_ranges,
        lon_bounds,
        lat_bounds,
        options,
        day_filter=day_filter,
        loader=loader,
        day_weighting=day_weighting,
    )
