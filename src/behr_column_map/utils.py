"""
Module including helper functions
"""

import datetime as dt
import logging
import os
from pathlib import Path
from typing import Any, Union

import numpy as np
import pandas as pd
import xarray as xr

logging.basicConfig(
    level=logging.INFO,  # Default level
    format="%(levelname)s: %(message)s",
)


def parse_date(date: Any) -> pd.Timestamp:
    """
    Convert a date specification to a normalized timestamp

    Parameters
    ----------
    date :
        date object, timestamp or string such as "2014/06/01"
        or "2014-06-01"

    Returns
    -------
    :
        timestamp at midnight of that day
    """
    if isinstance(date, str):
        date = date.replace("/", "-")
    elif not isinstance(date, (dt.date, pd.Timestamp, np.datetime64)):
        raise ValueError(f"cannot interpret {date!r} as a date")  # noqa: TRY003

    try:
        return pd.Timestamp(date).normalize()
    except (ValueError, TypeError) as exc:
        raise ValueError(f"cannot interpret {date!r} as a date") from exc  # noqa: TRY003


def day_file_name(date: pd.Timestamp, file_prefix: str, file_suffix: str) -> str:
    """
    Name of the per-day file, the prefix followed by yyyymmdd
    """
    return f"{file_prefix}{date:%Y%m%d}{file_suffix}"


def save_dataset(ds: xr.Dataset, save_to_path: Union[str, Path]) -> None:
    """
    Save a gridded dataset as netCDF

    Parameters
    ----------
    ds :
        dataset to save

    save_to_path :
        netCDF file to write; parent directories are created
    """
    save_to_path = Path(save_to_path)
    os.makedirs(save_to_path.parent, exist_ok=True)

    ds.to_netcdf(save_to_path)

    logging.info(f"saved gridded column to {save_to_path!s}")
