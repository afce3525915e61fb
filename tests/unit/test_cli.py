"""
Unittests for the command line interface
"""

from unittest.mock import MagicMock

import numpy as np
import pytest
import xarray as xr
from conftest import TEST_PREFIX

from behr_column_map.cli import build_parser, main
from behr_column_map.exceptions import ConfigurationError


def base_args(tmp_path):
    return [
        "--start", "2014/06/01",
        "--end", "2014/06/05",
        "--lon", "-100.5", "-99.5",
        "--lat", "29.5", "30.5",
        "--resolution", "0.5",
        "--data-dir", str(tmp_path),
        "--file-prefix", TEST_PREFIX,
        "--debug-level", "0",
    ]  # fmt: skip


def test_parser_defaults(tmp_path):
    args = build_parser().parse_args(base_args(tmp_path))

    assert args.flags == []
    assert args.cloud_source == "omi"
    assert args.cloud_fraction_max is None
    assert args.row_anomaly == "XTrackFlags"
    assert not args.no_figure


def test_no_figure_requires_output(tmp_path):
    with pytest.raises(ConfigurationError):
        main([*base_args(tmp_path), "--no-figure"])


def test_writes_netcdf(write_day, tmp_path):
    write_day("2014-06-02", value=10.0, weight=2.0)
    write_day("2014-06-03", value=20.0, weight=3.0)
    output = tmp_path / "column.nc"

    main([*base_args(tmp_path), "--no-figure", "--output", str(output), "--flags", "weekday"])

    with xr.open_dataset(output) as ds:
        np.testing.assert_allclose(ds["column"], 16.0)
        assert ds.attrs["days_averaged"] == 2  # noqa: PLR2004


class FakeResult:
    def __init__(self, colorbar):
        self.colorbar = colorbar


@pytest.fixture
def shown(monkeypatch):
    plt = pytest.importorskip("matplotlib.pyplot")
    calls = []
    monkeypatch.setattr(plt, "show", lambda: calls.append("show"))
    return calls


def test_figure_is_shown_without_figure_path(tmp_path, monkeypatch, shown):
    colorbar = MagicMock()
    monkeypatch.setattr("behr_column_map.cli.column_map", lambda *a, **kw: FakeResult(colorbar))

    main(base_args(tmp_path))

    assert shown == ["show"]
    colorbar.ax.figure.savefig.assert_not_called()


def test_figure_is_saved_to_figure_path(tmp_path, monkeypatch, shown):
    colorbar = MagicMock()
    monkeypatch.setattr("behr_column_map.cli.column_map", lambda *a, **kw: FakeResult(colorbar))
    figure = tmp_path / "map.png"

    main([*base_args(tmp_path), "--figure", str(figure)])

    colorbar.ax.figure.savefig.assert_called_once_with(str(figure))
    assert shown == []
