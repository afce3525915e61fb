from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import xarray as xr
from prefect.testing.utilities import prefect_test_harness

TEST_PREFIX = "OMI_BEHR_test_"

# 3 x 3 pixels centred on (-100, 30)
PIXEL_LON, PIXEL_LAT = np.meshgrid([-101.0, -100.0, -99.0], [29.0, 30.0, 31.0])


@pytest.fixture(scope="session", autouse=True)
def prefect_backend():
    """
    Run flows and tasks against a temporary prefect database
    """
    with prefect_test_harness():
        yield


def make_day(  # noqa: PLR0913
    value=10.0,
    weight=2.0,
    n_overpass=1,
    lon=PIXEL_LON,
    lat=PIXEL_LAT,
    **fields,
) -> xr.Dataset:
    """
    Synthetic per-day product, every pixel valid unless `fields` says otherwise
    """
    shape = (n_overpass, *lon.shape)
    dims = ("overpass", "y", "x")

    def full(v):
        return (dims, np.broadcast_to(np.asarray(v, dtype=float), shape).copy())

    data = {
        "BEHRColumnAmountNO2Trop": full(value),
        "Areaweight": full(weight),
        "Latitude": full(lat),
        "Longitude": full(lon),
        "CloudFraction": full(0.0),
        "MODISCloud": full(0.0),
        "CloudRadianceFraction": full(0.0),
        "Row": full(np.array([10, 11, 12])),
        "XTrackQualityFlags": full(0.0),
        "SolarZenithAngle": full(30.0),
    }
    for name, v in fields.items():
        data[name] = full(v)
    return xr.Dataset(data)


@pytest.fixture
def write_day(tmp_path):
    """
    Write a synthetic per-day product to the temporary data directory
    """

    def _write_day(date, day=None, **kwargs) -> Path:
        if day is None:
            day = make_day(**kwargs)
        path = tmp_path / f"{TEST_PREFIX}{pd.Timestamp(date):%Y%m%d}.nc"
        day.to_netcdf(path)
        return path

    return _write_day


@pytest.fixture
def data_options(tmp_path):
    """
    Options pointing at the temporary data directory
    """
    return dict(
        data_dir=tmp_path,
        file_prefix=TEST_PREFIX,
        resolution=0.5,
        make_figure=False,
        debug_level=0,
    )
