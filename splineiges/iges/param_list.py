import typing
from datetime import datetime

import numpy as np

from splineiges import IGESConversionError, IGESOrderError
from splineiges.iges.iges_param import IGESParam, IGESType


class IGESParamList:
    """
    Ordered, append-only list of ``IGESParam`` values making up one record (the global section, the directory entry
    of an entity, or the parameter data of an entity).

    Each ``add_*`` method appends one value of the matching IGES type. Called with no argument (or ``None``), it
    appends the defaulted value of that type. Called with an ``IGESParam``, the value is converted to the required
    type, raising an ``IGESConversionError`` when no conversion exists.

    The list is handed to the card assembler with ``take()``, after which it can no longer be modified or taken
    again.
    """
    def __init__(self):
        self._params: typing.List[IGESParam] = []
        self._taken = False

    def __len__(self):
        return len(self._params)

    def __getitem__(self, idx: int) -> IGESParam:
        return self._params[idx]

    def __iter__(self):
        return iter(self._params)

    def __repr__(self):
        return f"IGESParamList({[str(p) for p in self._params]})"

    @property
    def taken(self) -> bool:
        return self._taken

    def take(self) -> typing.Tuple[IGESParam, ...]:
        """
        Hands the values over to the card assembler. The list is closed afterward.

        Returns
        =======
        typing.Tuple[IGESParam, ...]
            The values in order
        """
        if self._taken:
            raise IGESOrderError("IGESParamList has already been taken by a section")
        self._taken = True
        return tuple(self._params)

    def copy(self) -> "IGESParamList":
        """Returns a new, untaken list holding the same values"""
        new_list = IGESParamList()
        new_list._params = list(self._params)
        return new_list

    def _add(self, value, dtype: IGESType):
        if self._taken:
            raise IGESOrderError("Cannot add to an IGESParamList after it has been taken by a section")
        if isinstance(value, IGESParam):
            self._params.append(value.as_type(dtype))
        else:
            self._params.append(IGESParam(value, dtype))

    def add_param(self, param: IGESParam):
        """Appends a value as-is, keeping its type"""
        self._add(param, param.dtype)

    def add_integer(self, value: int or IGESParam = None):
        self._add(value, IGESType.INTEGER)

    def add_float(self, value: float or IGESParam = None):
        self._add(value, IGESType.FLOAT)

    def add_double(self, value: float or IGESParam = None):
        self._add(value, IGESType.DOUBLE)

    def add_string(self, value: str or IGESParam = None):
        self._add(value, IGESType.STRING)

    def add_literal_string(self, value: str or IGESParam = None):
        self._add(value, IGESType.LITERAL_STRING)

    def add_boolean(self, value: bool or IGESParam = None):
        self._add(value, IGESType.BOOLEAN)

    def add_date(self, value: datetime or IGESParam = None):
        self._add(value, IGESType.DATE)

    def add_reserved(self):
        self._add(None, IGESType.RESERVED)

    def add_pointer(self, value: int or IGESParam = None):
        """
        Appends a pointer. ``value`` can be ``None`` (defaulted pointer), the integer ``0`` (an explicit null
        pointer), or an ``IGESParam`` that converts to a pointer.
        """
        if isinstance(value, IGESParam) or value is None:
            self._add(value, IGESType.POINTER)
        elif isinstance(value, (int, np.integer)) and not isinstance(value, bool):
            if value != 0:
                raise IGESConversionError(f"add_pointer: Nonzero integer value: {value}. Pass an IGESParam of type "
                                          f"'pointer' to add a non-null pointer.", field="pointer", value=value)
            self._add(0, IGESType.POINTER)
        else:
            raise IGESConversionError(f"add_pointer: Invalid data type {type(value).__name__}", field="pointer",
                                      value=value)

    def add_integer_or_pointer(self, value: int or IGESParam = None):
        """
        Appends an integer-or-pointer. ``value`` can be ``None`` (defaulted), a non-negative integer, or an
        ``IGESParam`` of type integer, pointer, or integer-or-pointer.
        """
        if isinstance(value, IGESParam) or value is None:
            self._add(value, IGESType.INTEGER_OR_POINTER)
        else:
            self._add(IGESParam(value, IGESType.INTEGER), IGESType.INTEGER_OR_POINTER)

    def add_double_array(self, values: typing.Iterable[float]):
        for value in values:
            self.add_double(float(value))

    def add_double_grid(self, grid: np.ndarray):
        """Appends every element of a 2-D array in row-major order (last index varies fastest)"""
        self.add_double_array(np.asarray(grid, dtype=float).reshape(-1))

    def add_double_repeated(self, value: float, count: int):
        for _ in range(count):
            self.add_double(value)

    def get(self, idx: int, dtype: IGESType or str) -> IGESParam:
        """Returns the value at ``idx`` converted to ``dtype``"""
        return self._params[idx].as_type(dtype)

    def get_integer(self, idx: int) -> IGESParam:
        return self.get(idx, IGESType.INTEGER)

    def get_pointer(self, idx: int) -> IGESParam:
        return self.get(idx, IGESType.POINTER)

    def get_integer_or_pointer(self, idx: int) -> IGESParam:
        return self.get(idx, IGESType.INTEGER_OR_POINTER)

    def get_literal_string(self, idx: int) -> IGESParam:
        return self.get(idx, IGESType.LITERAL_STRING)

    def get_string(self, idx: int) -> IGESParam:
        return self.get(idx, IGESType.STRING)

    def get_boolean(self, idx: int) -> IGESParam:
        return self.get(idx, IGESType.BOOLEAN)
