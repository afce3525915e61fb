"""
In this module all global configurations for the column map pipeline are stored
"""

from prefect.cache_policies import INPUTS, NO_CACHE, RUN_ID, TASK_SOURCE

CACHE_POLICIES = TASK_SOURCE + INPUTS + RUN_ID
"""policies for task caching"""

IO_CACHE_POLICY = NO_CACHE
"""tasks reading the data store are never cached"""

BEHR_VERSION = "v2-1C"
"""version string of the BEHR product found in the file names"""

DEFAULT_MAPFIELD = "BEHRColumnAmountNO2Trop"
"""field of the per-day product that is averaged by default"""

DATA_DIR = "data/behr"
"""directory where the per-day files are stored"""

FILE_PREFIX = f"OMI_BEHR_{BEHR_VERSION}_"
"""part of the per-day file name before the date"""

FILE_SUFFIX = ".nc"
"""part of the per-day file name after the date"""

DEFAULT_RESOLUTION = 0.05
"""size of output grid cells in degrees"""

# maximum cloud fraction used when none is given
DEFAULT_CLOUD_FRACTION_MAX = {"omi": 0.2, "modis": 0.0, "rad": 0.5}

CLOUD_FIELDS = {
    "omi": "CloudFraction",
    "modis": "MODISCloud",
    "rad": "CloudRadianceFraction",
}
"""variable in the per-day product holding each cloud fraction"""

FILL_VALUE = -1e29
"""values at or below this are treated as fill"""

MIN_POINTS_FOR_INTERPOLATION = 3
"""minimum number of scattered points needed to triangulate"""

# first day (ISO date) and 0-based rows affected by the OMI row anomaly from
# that day on
ROW_ANOMALY_HISTORY = [
    ("2007-06-25", tuple(range(52, 54))),
    ("2008-05-11", tuple(range(36, 45)) + tuple(range(52, 54))),
    ("2009-01-24", tuple(range(26, 54))),
    ("2011-07-05", tuple(range(23, 55))),
]

US_MERCATOR_WIDE_LON = (-135, -55)
US_MERCATOR_WIDE_LAT = (15, 60)
"""longitude and latitude limits of the wide US Mercator map"""
