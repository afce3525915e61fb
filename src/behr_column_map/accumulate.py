"""
Accumulate per-day products

Loop over every day of the requested periods and sum the weighted
columns, weights and valid counts of the days that pass the filters
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

import numpy as np
import numpy.typing as npt
import pandas as pd
import xarray as xr
from prefect import task

from behr_column_map import CONFIG
from behr_column_map.calendar_filter import iter_days, make_day_filter
from behr_column_map.day_weighting import day_weighted_field
from behr_column_map.exceptions import LatLonMismatchError
from behr_column_map.utils import day_file_name
from behr_column_map.validation import MapOptions


@dataclass
class Accumulator:
    """
    Running sums of a column map run

    All arrays share the shape of the first loaded overpass
    """

    weighted_sum: npt.NDArray[np.float64]
    weight_sum: npt.NDArray[np.float64]
    count: npt.NDArray[np.int64]
    latitude: npt.NDArray[np.float64]
    longitude: npt.NDArray[np.float64]
    days: list[pd.Timestamp] = field(default_factory=list)

    @classmethod
    def from_day(cls, day: xr.Dataset, mapfield: str) -> "Accumulator":
        """
        Allocate zeroed sums shaped like the first overpass of `day`
        """
        shape = day[mapfield].isel(overpass=0).shape
        return cls(
            weighted_sum=np.zeros(shape),
            weight_sum=np.zeros(shape),
            count=np.zeros(shape, dtype=np.int64),
            latitude=day["Latitude"].isel(overpass=0).values.copy(),
            longitude=day["Longitude"].isel(overpass=0).values.copy(),
        )

    def check_lat_lon(self, day: xr.Dataset, date: pd.Timestamp) -> None:
        """
        Raise if any overpass is not on the reference lat/lon arrays
        """
        for overpass in range(day.sizes["overpass"]):
            lat = day["Latitude"].isel(overpass=overpass).values
            lon = day["Longitude"].isel(overpass=overpass).values
            if not (
                np.array_equal(lat, self.latitude, equal_nan=True)
                and np.array_equal(lon, self.longitude, equal_nan=True)
            ):
                raise LatLonMismatchError(f"{date:%Y-%m-%d}", overpass)

    def add(
        self,
        weighted: npt.NDArray[np.float64],
        weight: npt.NDArray[np.float64],
        count: npt.NDArray[np.int64],
    ) -> None:
        """Add one day's sums"""
        self.weighted_sum += weighted
        self.weight_sum += weight
        self.count += count


def load_day(path: Path) -> xr.Dataset:
    """
    Load a per-day product into memory and close the file
    """
    with xr.open_dataset(path) as ds:
        return ds.load()


def is_empty_day(day: xr.Dataset) -> bool:
    """
    Whether a per-day product holds no overpasses
    """
    return len(day.data_vars) == 0 or day.sizes.get("overpass", 0) == 0


@task(
    name="accumulate_days",
    description="Sum weighted columns over all requested days",
    cache_policy=CONFIG.IO_CACHE_POLICY,
)
def accumulate_days(  # noqa: PLR0913
    date_ranges: Sequence[tuple[pd.Timestamp, pd.Timestamp]],
    options: MapOptions,
    day_filter: Optional[Callable[[pd.Timestamp], bool]] = None,
    loader: Callable[[Path], xr.Dataset] = load_day,
    day_weighting: Callable[..., tuple] = day_weighted_field,
) -> Optional[Accumulator]:
    """
    Accumulate weighted columns over the union of date ranges

    Parameters
    ----------
    date_ranges :
        inclusive (start, end) periods to average over

    options :
        resolved options

    day_filter :
        business-day predicate; built from `options` if None

    loader :
        reads the per-day product of a file

    day_weighting :
        computes (weighted, weight, count) of one day

    Returns
    -------
    :
        running sums, or None if no day was accumulated

    Raises
    ------
    LatLonMismatchError
        if an overpass is not on the lat/lon arrays of the run
    """
    if day_filter is None:
        day_filter = make_day_filter(options, date_ranges)

    acc: Optional[Accumulator] = None

    for date in iter_days(date_ranges):
        if options.debug_level > 0:
            logging.info(f"Now on {date:%Y-%m-%d}")

        filename = day_file_name(date, options.file_prefix, options.file_suffix)
        path = Path(options.data_dir) / filename

        if not path.is_file():
            logging.info(f"{filename} not found")
            continue

        if not day_filter(date):
            if options.debug_level > 1:
                logging.info(f"{date:%Y-%m-%d} will not be considered for averaging")
            continue

        t_start = time.perf_counter()
        day = loader(path)

        if is_empty_day(day):
            logging.warning(f"No gridded data found in {path!s}, skipping")
            continue

        if acc is None:
            if options.debug_level > 0:
                logging.info("Initializing weighted column and weight sums")
            acc = Accumulator.from_day(day, options.mapfield)

        acc.check_lat_lon(day, date)

        weighted, weight, count = day_weighting(
            day,
            mapfield=options.mapfield,
            cloud_source=options.cloud_source,
            cloud_fraction_max=options.cloud_fraction_max,
            row_anomaly_mode=options.row_anomaly_mode,
            row_range=options.row_range,
            max_solar_zenith_angle=options.max_solar_zenith_angle,
            date=date,
        )
        acc.add(weighted, weight, count)
        acc.days.append(date)

        if options.debug_level > 2:  # noqa: PLR2004
            logging.info(f"{filename} took {time.perf_counter() - t_start:.2f} s")

    return acc
