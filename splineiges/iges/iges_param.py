import numbers
import typing
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

import numpy as np

from splineiges import IGESRangeError, IGESConversionError, IGESEnumerationError, CardLengthError
from splineiges.iges import (G_INT_MIN, G_INT_MAX, G_FLOAT_MIN, G_FLOAT_MAX, G_FLOAT_DIGITS, G_DOUBLE_MIN,
                             G_DOUBLE_MAX, G_POINTER_MIN, G_POINTER_MAX, fixed_field_width, pointer_field_width)


class IGESType(Enum):
    """The closed set of IGES field types. The values are the short names accepted by ``IGESParam``."""
    INTEGER = "int"
    FLOAT = "real"
    DOUBLE = "double"
    STRING = "string"
    LITERAL_STRING = "literal_string"
    POINTER = "pointer"
    INTEGER_OR_POINTER = "int_or_pointer"
    BOOLEAN = "bool"
    DATE = "datetime"
    RESERVED = "none"


_INTEGRAL_RANGES = {
    IGESType.INTEGER: (G_INT_MIN, G_INT_MAX),
    IGESType.POINTER: (0, G_POINTER_MAX),
    IGESType.INTEGER_OR_POINTER: (G_POINTER_MIN, G_INT_MAX),
}

# (smallest magnitude kept, largest magnitude allowed)
_REAL_LIMITS = {
    IGESType.FLOAT: (G_FLOAT_MIN, G_FLOAT_MAX),
    IGESType.DOUBLE: (G_DOUBLE_MIN, G_DOUBLE_MAX),
}


def _to_iges_type(dtype) -> IGESType:
    try:
        return IGESType(dtype)
    except ValueError:
        raise IGESEnumerationError(f"IGESParam dtype must be one of {[t.value for t in IGESType]}. "
                                   f"Chosen value was {dtype}.", field="dtype", value=dtype) from None


def _normalize(value, dtype: IGESType):
    """Validates a raw payload for the given type and returns the stored form (``None`` for a defaulted value)."""
    if value is None or dtype is IGESType.RESERVED:
        return None

    if dtype in _INTEGRAL_RANGES:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise IGESConversionError(f"{dtype.name} requires an integer value. Found {value!r} of type "
                                      f"{type(value).__name__}.", value=value)
        low, high = _INTEGRAL_RANGES[dtype]
        if not low <= value <= high:
            raise IGESRangeError(f"{dtype.name} value out of range [{low}, {high}]: {value}", value=value)
        return int(value)

    if dtype in _REAL_LIMITS:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise IGESConversionError(f"{dtype.name} requires a real value. Found {value!r} of type "
                                      f"{type(value).__name__}.", value=value)
        tiny, huge = _REAL_LIMITS[dtype]
        value = float(value)
        if not -huge <= value <= huge:
            raise IGESRangeError(f"{dtype.name} value out of range [{-huge}, {huge}]: {value}", value=value)
        if -tiny <= value <= tiny:
            return 0.0
        return value

    if dtype in (IGESType.STRING, IGESType.LITERAL_STRING):
        if not isinstance(value, str):
            raise IGESConversionError(f"{dtype.name} requires a str value. Found {value!r} of type "
                                      f"{type(value).__name__}.", value=value)
        if len(value) == 0:
            return None
        if not all(32 <= ord(ch) <= 126 for ch in value):
            raise IGESRangeError(f"{dtype.name} may only contain printable ASCII characters: {value!r}",
                                 value=value)
        return value

    if dtype is IGESType.BOOLEAN:
        if not isinstance(value, (bool, np.bool_)):
            raise IGESConversionError(f"BOOLEAN requires a bool value. Found {value!r} of type "
                                      f"{type(value).__name__}.", value=value)
        return bool(value)

    if dtype is IGESType.DATE:
        if not isinstance(value, datetime):
            raise IGESConversionError(f"datetime was selected as the dtype for IGESParam with value {value}, but "
                                      f"the type was {type(value)}. 'value' must be of type datetime.datetime.",
                                      value=value)
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    raise IGESEnumerationError(f"Unhandled IGES type {dtype}", value=dtype)


def _strip_trailing_zeros(result: str) -> str:
    """
    Removes trailing zeros after the decimal point of the mantissa, leaving at least one digit after the point.
    For example, ``"1.50000E+05"`` becomes ``"1.5E+05"`` and ``"2.00000"`` becomes ``"2.0"``.
    """
    mantissa, marker, exponent = result.partition("E")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0")
        if mantissa.endswith("."):
            mantissa += "0"
    return mantissa + marker + exponent


def format_single_precision(value: float) -> str:
    """
    Formats a real number to six significant digits. IGES requires a decimal point or an exponent (or both) in every
    real, so whole numbers that come out of the significant-digit format with nothing after the point are written in
    exponent form instead (``123456.0`` becomes ``1.23456E+05``).
    """
    result = f"{value:#.{G_FLOAT_DIGITS}G}"
    if result.endswith("."):
        result = f"{value:.{G_FLOAT_DIGITS - 1}E}"
    return _strip_trailing_zeros(result)


def format_double_precision(value: float) -> str:
    """Formats a real number in exponent form with 14 fractional digits and the double-precision marker ``D``."""
    return _strip_trailing_zeros(f"{value:.14E}").replace("E", "D")


def _int_to_boolean(value: int):
    if value in (0, 1):
        return IGESParam(bool(value), IGESType.BOOLEAN)
    return None


def _int_to_integer_or_pointer(value: int):
    if value >= 0:
        return IGESParam(value, IGESType.INTEGER_OR_POINTER)
    return None


def _integer_or_pointer_to_int(value: int):
    if value >= 0:
        return IGESParam(value, IGESType.INTEGER)
    return None


def _integer_or_pointer_to_pointer(value: int):
    if value <= 0:
        return IGESParam(-value, IGESType.POINTER)
    return None


# Allowed (source, target) conversions. Every converter returns None when the payload is outside the target's domain.
_CONVERSIONS = {
    (IGESType.INTEGER, IGESType.BOOLEAN): _int_to_boolean,
    (IGESType.INTEGER, IGESType.INTEGER_OR_POINTER): _int_to_integer_or_pointer,
    (IGESType.POINTER, IGESType.INTEGER_OR_POINTER): lambda v: IGESParam(-v, IGESType.INTEGER_OR_POINTER),
    (IGESType.STRING, IGESType.LITERAL_STRING): lambda v: IGESParam(v, IGESType.LITERAL_STRING),
    (IGESType.LITERAL_STRING, IGESType.STRING): lambda v: IGESParam(v, IGESType.STRING),
    (IGESType.BOOLEAN, IGESType.INTEGER): lambda v: IGESParam(int(v), IGESType.INTEGER),
    (IGESType.INTEGER_OR_POINTER, IGESType.INTEGER): _integer_or_pointer_to_int,
    (IGESType.INTEGER_OR_POINTER, IGESType.POINTER): _integer_or_pointer_to_pointer,
}


@dataclass(frozen=True)
class IGESParam:
    """
    A single IGES field value. Instances are immutable.

    Parameters
    ==========
    value
        The payload, or ``None`` for a defaulted (blank) field. An empty string is also stored as a defaulted value.
        Values of type ``"none"`` (reserved fields) are always defaulted.

    dtype: IGESType or str
        The field type, either a member of ``IGESType`` or its short name (``"int"``, ``"real"``, ``"double"``,
        ``"string"``, ``"literal_string"``, ``"pointer"``, ``"int_or_pointer"``, ``"bool"``, ``"datetime"``,
        ``"none"``)
    """
    value: typing.Any
    dtype: IGESType

    def __post_init__(self):
        dtype = _to_iges_type(self.dtype)
        object.__setattr__(self, "dtype", dtype)
        object.__setattr__(self, "value", _normalize(self.value, dtype))

    @property
    def is_defaulted(self) -> bool:
        return self.value is None

    def is_null(self) -> bool:
        """Whether this is a defaulted or zero pointer (or integer-or-pointer)"""
        return self.value is None or self.value == 0

    def is_pointer(self) -> bool:
        """Whether this integer-or-pointer value holds a (negated) pointer"""
        return self.dtype is IGESType.INTEGER_OR_POINTER and self.value is not None and self.value < 0

    def write_value_to_python_str(self) -> str:
        if self.value is None:
            return ""
        if self.dtype in _INTEGRAL_RANGES:
            return str(self.value)
        elif self.dtype is IGESType.BOOLEAN:
            return "1" if self.value else "0"
        elif self.dtype is IGESType.FLOAT:
            return format_single_precision(self.value)
        elif self.dtype is IGESType.DOUBLE:
            return format_double_precision(self.value)
        elif self.dtype is IGESType.STRING:
            return f"{len(self.value)}H{self.value}"  # Hollerith format string
        elif self.dtype is IGESType.LITERAL_STRING:
            return self.value
        elif self.dtype is IGESType.DATE:
            return f"15H{self.value.strftime('%Y%m%d.%H%M%S')}"
        raise IGESEnumerationError(f"Unhandled IGES type {self.dtype}", value=self.dtype)

    def __str__(self):
        return self.write_value_to_python_str()

    def write_fixed_field_str(self, width: int = fixed_field_width) -> str:
        """Returns the value right-justified in a field of ``width`` characters (8 for directory entry fields)"""
        result = f"{self.write_value_to_python_str():>{width}}"
        if len(result) != width:
            raise CardLengthError(f"Fixed representation conversion length error: [{result}]", value=self.value)
        return result

    def write_fixed_pointer_str(self) -> str:
        """Returns the value right-justified in a 7-character sequence-number field"""
        return self.write_fixed_field_str(width=pointer_field_width)

    def try_convert(self, dtype: IGESType or str):
        """
        Converts this value to another IGES type along the allowed conversion paths:

        - ``INTEGER`` to ``BOOLEAN`` (0 or 1 only) or ``INTEGER_OR_POINTER`` (non-negative only)
        - ``POINTER`` to ``INTEGER_OR_POINTER`` (stored negated)
        - ``STRING`` to ``LITERAL_STRING`` and back
        - ``BOOLEAN`` to ``INTEGER``
        - ``INTEGER_OR_POINTER`` to ``INTEGER`` (non-negative only) or ``POINTER`` (non-positive only, negated)

        Defaulted values convert to defaulted values of the target type.

        Returns
        =======
        IGESParam or None
            The converted value, or ``None`` if the conversion is not allowed for this type or payload
        """
        dtype = _to_iges_type(dtype)
        if dtype is self.dtype:
            return self
        converter = _CONVERSIONS.get((self.dtype, dtype))
        if converter is None:
            return None
        if self.value is None:
            return IGESParam(None, dtype)
        return converter(self.value)

    def as_type(self, dtype: IGESType or str) -> "IGESParam":
        """Same as ``try_convert``, but raises an ``IGESConversionError`` instead of returning ``None``"""
        converted = self.try_convert(dtype)
        if converted is None:
            raise IGESConversionError(f"{self.dtype.name}: Cannot convert to {_to_iges_type(dtype).name} "
                                      f"[{self.write_value_to_python_str()}]", value=self.value)
        return converted
