"""
Command line interface of the column map workflow
"""

import argparse
import logging
from typing import Optional, Sequence

from behr_column_map import CONFIG
from behr_column_map.column_map import column_map
from behr_column_map.validation import RowAnomalyMode


def build_parser() -> argparse.ArgumentParser:
    """
    Parser of the behr-column-map command
    """
    parser = argparse.ArgumentParser(
        prog="behr-column-map",
        description="Average BEHR NO2 columns over date ranges and map them",
    )
    parser.add_argument(
        "--start", nargs="+", required=True, help="first day of each period, yyyy/mm/dd"
    )
    parser.add_argument(
        "--end", nargs="+", required=True, help="last day of each period, yyyy/mm/dd"
    )
    parser.add_argument(
        "--lon", nargs=2, type=float, required=True, metavar=("MIN", "MAX")
    )
    parser.add_argument(
        "--lat", nargs=2, type=float, required=True, metavar=("MIN", "MAX")
    )
    parser.add_argument("--mapfield", default=CONFIG.DEFAULT_MAPFIELD)
    parser.add_argument("--resolution", type=float, default=CONFIG.DEFAULT_RESOLUTION)
    parser.add_argument("--projection", default="conic")
    parser.add_argument("--coast", default="default")
    parser.add_argument("--color", default="w")
    parser.add_argument("--no-states", action="store_true", help="skip state lines")
    parser.add_argument("--cbrange", nargs=2, type=float, metavar=("MIN", "MAX"))
    parser.add_argument("--data-dir", default=CONFIG.DATA_DIR)
    parser.add_argument("--file-prefix", default=CONFIG.FILE_PREFIX)
    parser.add_argument("--file-suffix", default=CONFIG.FILE_SUFFIX)
    parser.add_argument(
        "--flags",
        nargs="*",
        default=[],
        help="weekend, weekday, r_weekend, r_weekday and/or US_holidays",
    )
    parser.add_argument("--clouds", dest="cloud_source", default="omi")
    parser.add_argument("--cloud-fraction-max", type=float)
    parser.add_argument(
        "--row-anomaly",
        default=RowAnomalyMode.XTRACK_FLAGS.value,
        choices=[mode.value for mode in RowAnomalyMode],
    )
    parser.add_argument("--rows", nargs=2, type=int, metavar=("MIN", "MAX"))
    parser.add_argument("--sza", type=float, default=180.0)
    parser.add_argument("--min-weight", type=float, default=0.0)
    parser.add_argument("--debug-level", type=int, default=2)
    parser.add_argument("--output", help="netCDF file for the gridded column")
    parser.add_argument(
        "--figure", help="image file for the map; the map is shown when omitted"
    )
    parser.add_argument(
        "--no-figure", action="store_true", help="do not draw a map"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Run the column map workflow from the command line
    """
    args = build_parser().parse_args(argv)

    result = column_map(
        args.start if len(args.start) > 1 else args.start[0],
        args.end if len(args.end) > 1 else args.end[0],
        args.lon,
        args.lat,
        mapfield=args.mapfield,
        resolution=args.resolution,
        projection=args.projection,
        coast=args.coast,
        color=args.color,
        states=not args.no_states,
        cbrange=args.cbrange,
        data_dir=args.data_dir,
        file_prefix=args.file_prefix,
        file_suffix=args.file_suffix,
        flags=args.flags,
        cloud_source=args.cloud_source,
        cloud_fraction_max=args.cloud_fraction_max,
        row_anomaly_mode=args.row_anomaly,
        row_range=args.rows,
        max_solar_zenith_angle=args.sza,
        min_weight=args.min_weight,
        debug_level=args.debug_level,
        make_figure=not args.no_figure,
        return_grid=args.output is not None,
    )

    if args.output is not None:
        result.to_netcdf(args.output)

    if result.colorbar is None:
        return

    if args.figure is not None:
        result.colorbar.ax.figure.savefig(args.figure)
        logging.info(f"saved map to {args.figure}")
    else:
        import matplotlib.pyplot as plt

        plt.show()


if __name__ == "__main__":
    main()
