"""
Plotting functions for gridded column maps

"""

from typing import Any, Optional

import numpy as np
import numpy.typing as npt

from behr_column_map import CONFIG
from behr_column_map.exceptions import MissingOptionalDependencyError
from behr_column_map.validation import MapOptions

# GSHHS scale letter of each coastline detail level
COAST_SCALES = {
    "full": "f",
    "high": "h",
    "intermediate": "i",
    "medium": "i",
    "low": "l",
    "crude": "c",
}


def map_projection(
    projection: str, lon_bdy: tuple[float, float], lat_bdy: tuple[float, float]
) -> Any:
    """
    Cartopy projection of a map

    Parameters
    ----------
    projection :
        "conic" for Albers equal-area conic or "mercator"

    lon_bdy :
        (min, max) longitude of the map

    lat_bdy :
        (min, max) latitude of the map

    Returns
    -------
    :
        cartopy CRS
    """
    try:
        import cartopy.crs as ccrs  # type: ignore[import-untyped]
    except ImportError as exc:
        raise MissingOptionalDependencyError("plotting", requirement="cartopy") from exc

    central_longitude = (lon_bdy[0] + lon_bdy[1]) / 2
    if projection == "mercator":
        return ccrs.Mercator(central_longitude=central_longitude)

    return ccrs.AlbersEqualArea(
        central_longitude=central_longitude,
        central_latitude=(lat_bdy[0] + lat_bdy[1]) / 2,
        standard_parallels=lat_bdy,
    )


def draw_coast(ax: Any, coast: str, color: str) -> None:
    """
    Draw the coastline at the requested detail level

    "default" uses the Natural Earth coastline, every other
    level the GSHHS coastline of that resolution
    """
    import cartopy.feature as cfeature  # type: ignore[import-untyped]

    if coast in COAST_SCALES:
        ax.add_feature(
            cfeature.GSHHSFeature(scale=COAST_SCALES[coast]),
            edgecolor=color,
            facecolor="none",
        )
    else:
        ax.coastlines(color=color)


def render_map(  # noqa: PLR0913
    longrid: npt.NDArray[np.float64],
    latgrid: npt.NDArray[np.float64],
    column: npt.NDArray[np.float64],
    options: MapOptions,
    lon_bdy: tuple[float, float],
    lat_bdy: tuple[float, float],
    ax: Optional[Any] = None,
) -> Any:
    """
    Draw a gridded column on a map

    Parameters
    ----------
    longrid, latgrid :
        output mesh

    column :
        gridded values

    options :
        resolved options; projection, coast, color, states
        and cbrange are used

    lon_bdy, lat_bdy :
        (min, max) boundaries of the map

    ax :
        cartopy GeoAxes to draw into; a new figure is opened if None

    Returns
    -------
    :
        colorbar of the map
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError as exc:
        raise MissingOptionalDependencyError(
            "plotting", requirement="matplotlib"
        ) from exc

    try:
        import cartopy.crs as ccrs  # type: ignore[import-untyped]
        import cartopy.feature as cfeature  # type: ignore[import-untyped]
    except ImportError as exc:
        raise MissingOptionalDependencyError("plotting", requirement="cartopy") from exc

    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(
            1, 1, 1, projection=map_projection(options.projection, lon_bdy, lat_bdy)
        )

    ax.set_extent([*lon_bdy, *lat_bdy], crs=ccrs.PlateCarree())

    mesh = ax.pcolormesh(
        longrid, latgrid, column, transform=ccrs.PlateCarree(), shading="auto"
    )

    draw_coast(ax, options.coast, options.color)

    if options.states:
        ax.add_feature(cfeature.STATES, edgecolor=options.color, facecolor="none")

    # labels only, no grid lines
    ax.gridlines(draw_labels=True, linewidth=0)

    cbhandle = ax.figure.colorbar(mesh, ax=ax)
    if options.cbrange is not None:
        mesh.set_clim(*options.cbrange)

    return cbhandle


def us_mercator_wide(ax: Optional[Any] = None) -> Any:
    """
    Prepare a wide Mercator map of the US

    The extended boundaries are useful to see full satellite
    swaths. Coast and states are drawn in black.

    Parameters
    ----------
    ax :
        cartopy GeoAxes to draw into; a new figure is opened if None

    Returns
    -------
    :
        the map axes
    """
    try:
        import matplotlib.pyplot as plt
    except ImportError as exc:
        raise MissingOptionalDependencyError(
            "us_mercator_wide", requirement="matplotlib"
        ) from exc

    try:
        import cartopy.crs as ccrs  # type: ignore[import-untyped]
        import cartopy.feature as cfeature  # type: ignore[import-untyped]
    except ImportError as exc:
        raise MissingOptionalDependencyError(
            "us_mercator_wide", requirement="cartopy"
        ) from exc

    lon_bdy, lat_bdy = CONFIG.US_MERCATOR_WIDE_LON, CONFIG.US_MERCATOR_WIDE_LAT

    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(
            1, 1, 1, projection=map_projection("mercator", lon_bdy, lat_bdy)
        )

    ax.set_extent([*lon_bdy, *lat_bdy], crs=ccrs.PlateCarree())
    ax.coastlines(color="k")
    ax.add_feature(cfeature.STATES, edgecolor="k", facecolor="none")
    ax.gridlines(draw_labels=True, linewidth=0)

    return ax
