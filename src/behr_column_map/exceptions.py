"""
Exceptions raised by behr_column_map
"""


class ConfigurationError(ValueError):
    """
    Invalid or contradicting options, raised before any data is read
    """


class LatLonMismatchError(RuntimeError):
    """
    Latitude/longitude of an overpass disagree with the reference arrays
    """

    def __init__(self, date: str, overpass: int) -> None:
        error_msg = (
            f"Lat and lons for {date}, overpass {overpass} do not agree "
            "with previous lat/lon arrays"
        )
        super().__init__(error_msg)


class MissingOptionalDependencyError(ImportError):
    """
    An optional dependency is needed for this functionality
    """

    def __init__(self, callable_name: str, requirement: str) -> None:
        """
        Initialise the error

        Parameters
        ----------
        callable_name :
            name of the callable (or extra) which requires the dependency

        requirement :
            name of the missing package
        """
        error_msg = f"`{callable_name}` requires {requirement} to be installed"
        super().__init__(error_msg)
