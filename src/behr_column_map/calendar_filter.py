"""
Calendar filter

Translate the day-of-week selection into an exclusion mask and
decide which days count toward the average
"""

import logging
from typing import Callable, Iterator, Optional, Sequence

import numpy as np
import numpy.typing as npt
import pandas as pd
from pandas.tseries.holiday import AbstractHolidayCalendar

from behr_column_map.validation import DayOfWeek, MapOptions

# excluded days of the week, Sunday first
EXCLUSION_MASKS = {
    DayOfWeek.WEEKEND: (0, 1, 1, 1, 1, 1, 0),
    DayOfWeek.WEEKDAY: (1, 0, 0, 0, 0, 0, 1),
    # Sunday only avoids Friday emissions spilling into Saturday
    DayOfWeek.R_WEEKEND: (0, 1, 1, 1, 1, 1, 1),
    # Tuesday to Friday avoids the low Sunday emissions rolling into Monday
    DayOfWeek.R_WEEKDAY: (1, 1, 0, 0, 0, 0, 1),
    DayOfWeek.ALL: (0, 0, 0, 0, 0, 0, 0),
}


def excluded_weekdays(day_of_week: DayOfWeek) -> npt.NDArray[np.bool_]:
    """
    Exclusion mask for a day-of-week selection

    Parameters
    ----------
    day_of_week :
        day-of-week selection

    Returns
    -------
    :
        7-element boolean array, Sunday to Saturday,
        True where the weekday is excluded
    """
    return np.array(EXCLUSION_MASKS[DayOfWeek(day_of_week)], dtype=bool)


def holiday_dates(
    calendar: AbstractHolidayCalendar, start: pd.Timestamp, end: pd.Timestamp
) -> npt.NDArray[np.datetime64]:
    """
    Holidays of a calendar between start and end (inclusive)
    """
    return calendar.holidays(start=start, end=end).values.astype("datetime64[D]")


def is_business_day(
    date: pd.Timestamp,
    use_holidays: bool,
    excluded: Sequence[bool],
    holidays: Optional[npt.NDArray[np.datetime64]] = None,
) -> bool:
    """
    Check whether a day counts toward the average

    Parameters
    ----------
    date :
        day to test

    use_holidays :
        whether holidays are excluded as well

    excluded :
        7-element exclusion mask, Sunday to Saturday

    holidays :
        holiday dates, only used if `use_holidays`

    Returns
    -------
    :
        True if the day passes the mask and is not a holiday
    """
    # numpy weekmasks start on Monday
    weekmask = [not excluded[(i + 1) % 7] for i in range(7)]
    if not any(weekmask):
        return False

    if not use_holidays or holidays is None:
        holidays = np.array([], dtype="datetime64[D]")

    day = pd.Timestamp(date).to_datetime64().astype("datetime64[D]")
    return bool(np.is_busday(day, weekmask=weekmask, holidays=holidays))


def iter_days(
    date_ranges: Sequence[tuple[pd.Timestamp, pd.Timestamp]],
) -> Iterator[pd.Timestamp]:
    """
    Iterate over the union of inclusive date ranges in calendar order
    """
    days = pd.DatetimeIndex([])
    for start, end in date_ranges:
        days = days.union(pd.date_range(start, end, freq="D"))
    yield from days


def make_day_filter(
    options: MapOptions,
    date_ranges: Sequence[tuple[pd.Timestamp, pd.Timestamp]],
) -> Callable[[pd.Timestamp], bool]:
    """
    Build the business-day predicate of a run

    Parameters
    ----------
    options :
        resolved options

    date_ranges :
        requested date ranges, used to look up the holidays once

    Returns
    -------
    :
        predicate telling whether a day is considered for averaging
    """
    excluded = excluded_weekdays(options.day_of_week)

    if options.debug_level > 1:
        logging.info(f"week mask = {excluded.astype(int).tolist()}")
        logging.info(f"week setting = {options.day_of_week.description}")

    holidays = None
    if options.use_holidays and date_ranges:
        holidays = holiday_dates(
            options.holiday_calendar,
            start=min(start for start, _ in date_ranges),
            end=max(end for _, end in date_ranges),
        )

    def day_filter(date: pd.Timestamp) -> bool:
        return is_business_day(date, options.use_holidays, excluded, holidays)

    return day_filter
