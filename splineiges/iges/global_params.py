from datetime import datetime, timezone

from splineiges import IGESEnumerationError, IGESRangeError
from splineiges.iges import (parameter_delimiter, record_delimiter, system_id, G_INT_BITS, G_FLOAT_EXP,
                             G_FLOAT_DIGITS, G_DOUBLE_EXP, G_DOUBLE_DIGITS, VERSION_FLAG, DRAFTING_STANDARD_NONE)
from splineiges.iges.param_list import IGESParamList

UNITS_UNSPECIFIED = 3


class GlobalParams:
    """Global parameter section setup for the IGES file format containing defaults for each value"""

    units_indicators = {
        "inches": (1, "IN"),
        "millimeters": (2, "MM"),
        "unspecified": (UNITS_UNSPECIFIED, None),
        "feet": (4, "FT"),
        "miles": (5, "MI"),
        "meters": (6, "M"),
        "kilometers": (7, "KM"),
        "mils": (8, "MIL"),
        "microns": (9, "UM"),
        "centimeters": (10, "CM"),
        "microinches": (11, "UIN"),
    }

    def __init__(self, product_id: str, file_name: str = "", units: int or str = "meters",
                 units_name: str or None = None, line_weight_gradations: int = 1, max_line_width: float = 0.0,
                 min_resolution: float = 1.0e-5, max_coordinate: float = 0.0, timestamp: datetime or None = None):
        """
        Parameters
        ==========
        product_id: str
            Product identification from the sending system

        file_name: str
            File name to embed in the file. May be empty.

        units: int or str
            Either an IGES units flag (1 through 11) or one of the keys of ``GlobalParams.units_indicators``

        units_name: str or None
            Name of the unit. Required for the unspecified units flag (3), and must match the standard name for the
            other flags if given.

        line_weight_gradations: int
            Number of different line thicknesses, at least 1

        max_line_width: float
            Width of the thickest line, in the selected units

        min_resolution: float
            Smallest distance between coordinates that is considered to be nonzero

        max_coordinate: float
            Maximum absolute value of any coordinate, or 0.0 if unknown

        timestamp: datetime or None
            Date and time of file generation. Defaults to the current UTC time.
        """
        self.product_id = product_id
        self.file_name = file_name
        self.units_flag, self.units_name = self.resolve_units(units, units_name)

        if line_weight_gradations < 1:
            raise IGESRangeError(f"Number of line weight gradations must be at least 1. Found "
                                 f"{line_weight_gradations}.", field="line_weight_gradations",
                                 value=line_weight_gradations)
        for name, value in (("max_line_width", max_line_width), ("min_resolution", min_resolution),
                            ("max_coordinate", max_coordinate)):
            if not value >= 0.0:
                raise IGESRangeError(f"{name} must be non-negative. Found {value}.", field=name, value=value)

        self.line_weight_gradations = line_weight_gradations
        self.max_line_width = max_line_width
        self.min_resolution = min_resolution
        self.max_coordinate = max_coordinate
        self.timestamp = datetime.now(timezone.utc) if timestamp is None else timestamp

    @classmethod
    def resolve_units(cls, units: int or str, units_name: str or None = None):
        """
        Looks up the units flag and units name.

        Returns
        =======
        typing.Tuple[int, str]
            The units flag and the units name
        """
        if isinstance(units, str):
            if units not in cls.units_indicators:
                raise IGESEnumerationError(f"Invalid units: {units}. Choose one of "
                                           f"{list(cls.units_indicators.keys())}.", field="units", value=units)
            flag, standard_name = cls.units_indicators[units]
        else:
            by_flag = {flag: name for flag, name in cls.units_indicators.values()}
            if units not in by_flag:
                raise IGESEnumerationError(f"Invalid units flag: {units}", field="units", value=units)
            flag, standard_name = units, by_flag[units]

        if standard_name is None:
            if not units_name:
                raise IGESEnumerationError("A units name is required when the units flag is 3 (unspecified)",
                                           field="units_name", value=units_name)
            return flag, units_name
        if units_name is not None and units_name != standard_name:
            raise IGESEnumerationError(f"Units name {units_name} does not match units flag {flag} "
                                       f"({standard_name})", field="units_name", value=units_name)
        return flag, standard_name

    def write_param_list(self) -> IGESParamList:
        gp = IGESParamList()

        # Delimiters
        gp.add_string(parameter_delimiter)
        gp.add_string(record_delimiter)

        gp.add_string(self.product_id)  # Product identification from sender
        gp.add_string(self.file_name)
        gp.add_string(system_id)  # Native system ID
        gp.add_string(system_id)  # Preprocessor version

        # Numeric characteristics
        gp.add_integer(G_INT_BITS)
        gp.add_integer(G_FLOAT_EXP)
        gp.add_integer(G_FLOAT_DIGITS)
        gp.add_integer(G_DOUBLE_EXP)
        gp.add_integer(G_DOUBLE_DIGITS)

        gp.add_string()  # Product identification for receiver
        gp.add_float(1.0)  # Model space scale

        gp.add_integer(self.units_flag)
        gp.add_string(self.units_name)

        gp.add_integer(self.line_weight_gradations)
        gp.add_float(self.max_line_width)
        gp.add_date(self.timestamp)
        gp.add_double(self.min_resolution)
        gp.add_double(self.max_coordinate)

        # Author and author's organization
        gp.add_string()
        gp.add_string()

        gp.add_integer(VERSION_FLAG)
        gp.add_integer(DRAFTING_STANDARD_NONE)
        return gp
