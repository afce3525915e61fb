"""
Per-day weighting

Reject pixels of one day's overpasses by cloud fraction, solar zenith
angle, row and row anomaly and sum the remaining pixels weighted by
their area weight
"""

from typing import Optional

import numpy as np
import numpy.typing as npt
import pandas as pd
import xarray as xr

from behr_column_map import CONFIG
from behr_column_map.validation import RowAnomalyMode

# lowest three bits of XTrackQualityFlags: affected and not corrected (1),
# severely affected (3) and processing error (7)
UNCORRECTED_XTRACK_FLAGS = (1, 3, 7)


def anomalous_rows(date: Optional[pd.Timestamp] = None) -> tuple[int, ...]:
    """
    Rows affected by the row anomaly

    Parameters
    ----------
    date :
        day of the observation; if None, all rows that were
        ever affected are returned

    Returns
    -------
    :
        0-based row indices
    """
    if date is None:
        return tuple(
            sorted({row for _, rows in CONFIG.ROW_ANOMALY_HISTORY for row in rows})
        )

    affected: tuple[int, ...] = ()
    for start, rows in CONFIG.ROW_ANOMALY_HISTORY:
        if pd.Timestamp(date) >= pd.Timestamp(start):
            affected = rows
    return affected


def row_anomaly_rejection(
    day: xr.Dataset,
    mode: RowAnomalyMode,
    date: Optional[pd.Timestamp] = None,
) -> npt.NDArray[np.bool_]:
    """
    Pixels rejected by a row anomaly policy

    Parameters
    ----------
    day :
        per-day product with dims (overpass, y, x)

    mode :
        row anomaly policy

    date :
        day of the observation, required for RowsByTime

    Returns
    -------
    :
        boolean array, True where the pixel is rejected
    """
    mode = RowAnomalyMode(mode)

    if mode is RowAnomalyMode.XTRACK_FLAGS:
        return day["XTrackQualityFlags"].values != 0

    if mode is RowAnomalyMode.XTRACK_FLAGS_LIGHT:
        flags = np.nan_to_num(day["XTrackQualityFlags"].values, nan=7)
        return np.isin(flags.astype(np.int64) & 0b111, UNCORRECTED_XTRACK_FLAGS)

    if mode is RowAnomalyMode.ROWS_BY_TIME:
        if date is None:
            raise ValueError("RowsByTime requires the date of the observation")  # noqa: TRY003
        return np.isin(day["Row"].values, anomalous_rows(date))

    return np.isin(day["Row"].values, anomalous_rows())


def day_weighted_field(  # noqa: PLR0913
    day: xr.Dataset,
    mapfield: str = CONFIG.DEFAULT_MAPFIELD,
    cloud_source: str = "omi",
    cloud_fraction_max: float = 0.2,
    row_anomaly_mode: RowAnomalyMode = RowAnomalyMode.XTRACK_FLAGS,
    row_range: Optional[tuple[int, int]] = None,
    max_solar_zenith_angle: float = 180.0,
    date: Optional[pd.Timestamp] = None,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.int64]]:
    """
    Weighted field, weight and valid count of one day

    Parameters
    ----------
    day :
        per-day product with dims (overpass, y, x)

    mapfield :
        variable to average

    cloud_source :
        "omi", "modis" or "rad"; selects the cloud fraction variable

    cloud_fraction_max :
        pixels with a larger cloud fraction are rejected

    row_anomaly_mode :
        policy used to reject row anomaly pixels

    row_range :
        (min, max) 0-based rows to keep; None keeps all rows

    max_solar_zenith_angle :
        pixels with a larger solar zenith angle are rejected

    date :
        day of the observation

    Returns
    -------
    :
        weighted sum, sum of weights and number of valid pixels,
        each summed over the overpasses
    """
    values = day[mapfield].values.astype(np.float64)
    reject = ~np.isfinite(values) | (values <= CONFIG.FILL_VALUE)

    # NaN cloud fractions fail the comparison and are rejected
    cloud_fraction = day[CONFIG.CLOUD_FIELDS[cloud_source]].values
    reject |= ~(cloud_fraction <= cloud_fraction_max)

    reject |= day["SolarZenithAngle"].values > max_solar_zenith_angle

    if row_range is not None:
        rows = day["Row"].values
        reject |= (rows < row_range[0]) | (rows > row_range[1])

    reject |= row_anomaly_rejection(day, row_anomaly_mode, date)

    if "Areaweight" in day:
        weight = day["Areaweight"].values.astype(np.float64)
        reject |= ~np.isfinite(weight)
    else:
        weight = np.ones_like(values)

    valid = ~reject
    weighted = np.where(valid, values * weight, 0.0).sum(axis=0)
    weights = np.where(valid, weight, 0.0).sum(axis=0)
    count = valid.sum(axis=0).astype(np.int64)

    return weighted, weights, count
