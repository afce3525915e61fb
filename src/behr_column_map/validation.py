"""
In this module the option schemes are stored

used to resolve and validate the options of a column map run
before any data is read
"""

from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional, Sequence, Union

import pandas as pd
from pandas.tseries.holiday import AbstractHolidayCalendar, USFederalHolidayCalendar
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from behr_column_map import CONFIG
from behr_column_map.exceptions import ConfigurationError
from behr_column_map.utils import parse_date

HOLIDAY_FLAG = "us_holidays"


class DayOfWeek(str, Enum):
    """
    Day-of-week selection used for averaging

    1. ALL: every day of the week
    2. WEEKEND: Saturday and Sunday
    3. WEEKDAY: Monday to Friday
    4. R_WEEKEND: restricted weekend, Sunday only
    5. R_WEEKDAY: restricted weekdays, Tuesday to Friday
    """

    ALL = "all"
    WEEKEND = "weekend"
    WEEKDAY = "weekday"
    R_WEEKEND = "r_weekend"
    R_WEEKDAY = "r_weekday"

    @property
    def description(self) -> str:
        """Human readable name of the setting"""
        return {
            DayOfWeek.ALL: "All Days",
            DayOfWeek.WEEKEND: "Weekend (Sa-Su)",
            DayOfWeek.WEEKDAY: "Weekdays (M-F)",
            DayOfWeek.R_WEEKEND: "Restricted Weekend (Sun only)",
            DayOfWeek.R_WEEKDAY: "Restricted Weekdays (Tu-F)",
        }[self]


DAY_OF_WEEK_FLAGS = {day.value for day in DayOfWeek if day is not DayOfWeek.ALL}


class RowAnomalyMode(str, Enum):
    """
    Policies used to reject pixels affected by the OMI row anomaly
    """

    ALWAYS_BY_ROW = "AlwaysByRow"
    ROWS_BY_TIME = "RowsByTime"
    XTRACK_FLAGS = "XTrackFlags"
    XTRACK_FLAGS_LIGHT = "XTrackFlagsLight"


class MapOptions(BaseModel):
    """
    Validated options of a column map run
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    mapfield: str = Field(default=CONFIG.DEFAULT_MAPFIELD, min_length=1)
    resolution: float = Field(default=CONFIG.DEFAULT_RESOLUTION, gt=0)
    projection: Literal["conic", "mercator"] = "conic"
    coast: Literal[
        "default", "full", "high", "intermediate", "medium", "low", "crude"
    ] = "default"
    color: str = "w"
    states: bool = True
    cbrange: Optional[tuple[float, float]] = None

    data_dir: Path = Path(CONFIG.DATA_DIR)
    file_prefix: str = CONFIG.FILE_PREFIX
    file_suffix: str = CONFIG.FILE_SUFFIX

    flags: tuple[str, ...] = ()
    cloud_source: Literal["omi", "modis", "rad"] = "omi"
    cloud_fraction_max: Optional[float] = None
    row_anomaly_mode: RowAnomalyMode = RowAnomalyMode.XTRACK_FLAGS
    row_range: Optional[tuple[int, int]] = None
    max_solar_zenith_angle: float = Field(default=180.0, ge=0)

    make_figure: bool = True
    return_grid: bool = True
    debug_level: int = Field(default=2, ge=0, le=3)
    holiday_calendar: AbstractHolidayCalendar = Field(
        default_factory=USFederalHolidayCalendar
    )
    min_weight: float = Field(default=0.0, ge=0)

    @field_validator("projection", "coast", "cloud_source", mode="before")
    @classmethod
    def lower_case(cls, v: Any) -> Any:
        """Compare choices case-insensitively"""
        return v.lower() if isinstance(v, str) else v

    @field_validator("flags", mode="before")
    @classmethod
    def normalize_flags(cls, v: Any) -> Any:
        """Accept a single flag or any iterable of flags"""
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        return tuple(str(flag).lower() for flag in v)

    @field_validator("flags")
    @classmethod
    def validate_flags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Only known flags and at most one day-of-week flag"""
        unknown = set(v).difference(DAY_OF_WEEK_FLAGS | {HOLIDAY_FLAG})
        if unknown:
            raise ValueError(f"unknown flags {sorted(unknown)}")  # noqa: TRY003

        if len(DAY_OF_WEEK_FLAGS.intersection(v)) > 1:
            raise ValueError("More than one day-of-week flag set")  # noqa: TRY003
        return v

    @field_validator("row_anomaly_mode", mode="before")
    @classmethod
    def match_row_anomaly_mode(cls, v: Any) -> Any:
        """Compare row anomaly modes case-insensitively"""
        if isinstance(v, str):
            for mode in RowAnomalyMode:
                if mode.value.lower() == v.lower():
                    return mode
        return v

    @field_validator("row_range", mode="before")
    @classmethod
    def empty_row_range(cls, v: Any) -> Any:
        """An empty row range means all rows"""
        if isinstance(v, (list, tuple)) and len(v) == 0:
            return None
        return v

    @field_validator("row_range")
    @classmethod
    def validate_row_range(
        cls, v: Optional[tuple[int, int]]
    ) -> Optional[tuple[int, int]]:
        """Rows are 0-based and given as (min, max)"""
        if v is not None and not 0 <= v[0] <= v[1]:
            raise ValueError(f"row range must be 0 <= min <= max, got {v}")  # noqa: TRY003
        return v

    @model_validator(mode="after")
    def resolve_cloud_fraction(self) -> "MapOptions":
        """Default the cloud fraction criterion by cloud source"""
        if self.cloud_fraction_max is None:
            self.cloud_fraction_max = CONFIG.DEFAULT_CLOUD_FRACTION_MAX[
                self.cloud_source
            ]
        if not 0 <= self.cloud_fraction_max <= 1:
            raise ValueError(  # noqa: TRY003
                "Cloud fraction criterion must be between 0 and 1"
            )
        return self

    @model_validator(mode="after")
    def check_outputs(self) -> "MapOptions":
        """A run without figure must hand back the grid"""
        if not self.make_figure and not self.return_grid:
            raise ValueError(  # noqa: TRY003
                "make_figure is false, but the gridded column is not returned either"
            )
        return self

    @property
    def day_of_week(self) -> DayOfWeek:
        """Day-of-week selection set by the flags"""
        for flag in self.flags:
            if flag in DAY_OF_WEEK_FLAGS:
                return DayOfWeek(flag)
        return DayOfWeek.ALL

    @property
    def use_holidays(self) -> bool:
        """Whether holidays are excluded from averaging"""
        return HOLIDAY_FLAG in self.flags


def resolve_options(**kwargs: Any) -> MapOptions:
    """
    Resolve named options into validated MapOptions

    Parameters
    ----------
    **kwargs :
        any field of :class:`MapOptions`

    Returns
    -------
    :
        validated options with defaults filled in

    Raises
    ------
    ConfigurationError
        if an option is unknown, invalid or conflicts with another one
    """
    try:
        return MapOptions(**kwargs)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc


def check_boundaries(
    lon_bdy: Sequence[float], lat_bdy: Sequence[float]
) -> tuple[tuple[float, float], tuple[float, float]]:
    """
    Validate longitude and latitude boundaries

    Parameters
    ----------
    lon_bdy :
        (min, max) longitude

    lat_bdy :
        (min, max) latitude

    Returns
    -------
    :
        boundaries as tuples of floats
    """
    bounds = []
    for name, bdy in (("Longitude", lon_bdy), ("Latitude", lat_bdy)):
        if len(bdy) != 2:  # noqa: PLR2004
            raise ConfigurationError(f"{name} boundary must have 2 elements")  # noqa: TRY003
        if bdy[0] > bdy[1]:
            raise ConfigurationError(  # noqa: TRY003
                f"{name} minimum is greater than {name.lower()} maximum."
            )
        bounds.append((float(bdy[0]), float(bdy[1])))
    return bounds[0], bounds[1]


DateSpec = Union[str, pd.Timestamp, Sequence[Any]]


def parse_date_ranges(
    start_date: DateSpec, end_date: DateSpec
) -> list[tuple[pd.Timestamp, pd.Timestamp]]:
    """
    Pair start and end dates into inclusive date ranges

    Parameters
    ----------
    start_date :
        a single date or a list of dates starting each period

    end_date :
        same structure as `start_date`, the last day of each period

    Returns
    -------
    :
        list of (start, end) timestamps
    """
    start_is_list = isinstance(start_date, (list, tuple))
    end_is_list = isinstance(end_date, (list, tuple))

    if start_is_list != end_is_list:
        raise ConfigurationError(  # noqa: TRY003
            "Start and end dates must both be lists or both not be lists"
        )
    if not start_is_list:
        start_date, end_date = [start_date], [end_date]

    if len(start_date) != len(end_date):
        raise ConfigurationError(  # noqa: TRY003
            "start_date and end_date are unequal lengths"
        )

    ranges = []
    for start, end in zip(start_date, end_date):
        try:
            start_ts, end_ts = parse_date(start), parse_date(end)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        if start_ts > end_ts:
            raise ConfigurationError(  # noqa: TRY003
                f"start date {start_ts.date()} is after end date {end_ts.date()}"
            )
        ranges.append((start_ts, end_ts))
    return ranges
