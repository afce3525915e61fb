"""
Average BEHR / OMI NO2 columns over date ranges and map them.

"""

import importlib.metadata

__version__ = importlib.metadata.version("behr_column_map")
