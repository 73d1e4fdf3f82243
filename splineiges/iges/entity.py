import numbers

from splineiges import IGESRangeError, IGESEnumerationError, IGESError, IGESShapeError
from splineiges.iges.iges_param import IGESParam, IGESType
from splineiges.iges.param_list import IGESParamList

line_fonts = {
    "no_pattern": 0,
    "solid": 1,
    "dashed": 2,
    "phantom": 3,
    "centerline": 4,
    "dotted": 5,
}

color_numbers = {
    "no_color": 0,
    "black": 1,
    "red": 2,
    "green": 3,
    "blue": 4,
    "yellow": 5,
    "magenta": 6,
    "cyan": 7,
    "white": 8,
}

# Entity status sub-fields, concatenated in this order into the 8-digit status number
status_blank = {"visible": 0, "blanked": 1}
status_subordinate = {"independent": 0, "physically_dependent": 1, "logically_dependent": 2, "both": 3}
status_use = {"geometry": 0, "annotation": 1, "definition": 2, "other": 3, "logical_positional": 4,
              "parametric_2d": 5, "construction": 6}
status_hierarchy = {"global_top_down": 0, "global_defer": 1, "use_hierarchy_property": 2}

MAX_LABEL_LENGTH = 8
MAX_SUBSCRIPT = 99999999

# Positions of each field in a directory entry parameter list
DE_STRUCTURE = 0
DE_LINE_FONT = 1
DE_LEVEL = 2
DE_VIEW = 3
DE_TRANSFORM = 4
DE_LABEL_ASSOC = 5
DE_STATUS_BLANK = 6
DE_STATUS_SUBORD = 7
DE_STATUS_USE = 8
DE_STATUS_HIER = 9
DE_LINE_WEIGHT = 10
DE_COLOR = 11
DE_FORM = 12
DE_LABEL = 13
DE_SUBSCRIPT = 14
DE_PARAM_COUNT = 15


def _lookup(value, table: dict, field: str):
    if isinstance(value, str):
        if value not in table:
            raise IGESEnumerationError(f"Invalid {field}: {value}. Choose one of {list(table.keys())}.",
                                       field=field, value=value)
        return table[value]
    return value


def check_range(value: int, low: int, high: int or None, field: str):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise IGESRangeError(f"Invalid {field}: {value!r} (expected an integer)", field=field, value=value)
    value = int(value)
    if value < low or (high is not None and value > high):
        raise IGESRangeError(f"Invalid {field}: {value}. Must be in [{low}, {'inf' if high is None else high}].",
                             field=field, value=value)
    return value


def check_status(value: int or str, table: dict, field: str):
    value = _lookup(value, table, field)
    if isinstance(value, numbers.Integral) and not isinstance(value, bool) and value not in table.values():
        raise IGESEnumerationError(f"Invalid {field}: {value}. Must be one of {sorted(table.values())}.",
                                   field=field, value=value)
    return check_range(value, 0, max(table.values()), field)


def check_literal(param: IGESParam, max_literal: int or None, field: str) -> IGESParam:
    """
    Converts a structure/line font/level/color value to an integer-or-pointer and checks its literal (non-pointer)
    value against ``max_literal``
    """
    converted = param.as_type(IGESType.INTEGER_OR_POINTER)
    if converted.is_pointer() or converted.is_defaulted:
        return converted
    if max_literal is not None and converted.value > max_literal:
        raise IGESEnumerationError(f"Invalid {field}: {converted.value}. Literal values must not exceed "
                                   f"{max_literal}.", field=field, value=converted.value)
    return converted


def check_label(label: str or None):
    if label is not None and len(label) > MAX_LABEL_LENGTH:
        raise IGESRangeError(f"Invalid label: {label}. Labels can be at most {MAX_LABEL_LENGTH} characters.",
                             field="label", value=label)
    return label


def _add_attribute(de: IGESParamList, value, field: str, max_literal: int or None, table: dict or None = None):
    """Appends a structure/line font/level/color field, which may hold a literal number or a negated pointer"""
    if table is not None:
        value = _lookup(value, table, field)
    if value is None:
        de.add_integer_or_pointer()
        return
    if not isinstance(value, IGESParam):
        value = IGESParam(check_range(value, 0, None, field), IGESType.INTEGER)
    de.add_integer_or_pointer(check_literal(value, max_literal, field))


def _add_pointer_attribute(de: IGESParamList, value, field: str):
    """Appends a view/transformation/label association field, which may only hold a pointer"""
    try:
        de.add_pointer(value)
    except IGESError as e:
        raise type(e)(f"Invalid {field}: {e}", field=field, value=value) from e


def dir_entry_param_list(structure=None, line_font=None, level=None, view=None, transform=None, label_assoc=None,
                         blank: int or str = 0, subordinate: int or str = 0, use: int or str = 0,
                         hierarchy: int or str = 0, line_weight: int = 0, color=None, form: int = 0,
                         label: str = "", subscript: int = 0) -> IGESParamList:
    """
    Builds the directory entry parameters of an entity, excluding the entity type, parameter data pointer, and
    parameter line count (which are filled in when the cards are laid out).

    Parameters
    ==========
    structure, line_font, level, color
        ``None`` for a defaulted (blank) field, a non-negative integer, or an ``IGESParam`` (integer, pointer, or
        integer-or-pointer). A pointer is written negated. The structure literal must be 0, line font literals must
        not exceed 5 (dotted), and color literals must not exceed 8 (white). ``line_font`` and ``color`` also accept
        the keys of ``line_fonts`` and ``color_numbers``.

    view, transform, label_assoc
        ``None`` for a defaulted field, ``0`` for an explicit null pointer, or a pointer ``IGESParam``

    blank, subordinate, use, hierarchy
        Entity status sub-fields, as numbers or as keys of ``status_blank``, ``status_subordinate``, ``status_use``,
        and ``status_hierarchy``

    line_weight: int
        Line weight number, 0 for the receiving system default

    form: int
        Form number

    label: str
        Entity label, at most 8 characters

    subscript: int
        Entity subscript number, in [0, 99999999]

    Returns
    =======
    IGESParamList
        The 15 directory entry values in order
    """
    de = IGESParamList()

    _add_attribute(de, structure, "structure", max_literal=0)
    _add_attribute(de, line_font, "line_font", max_literal=max(line_fonts.values()), table=line_fonts)
    _add_attribute(de, level, "level", max_literal=None)

    _add_pointer_attribute(de, view, "view")
    _add_pointer_attribute(de, transform, "transform")
    _add_pointer_attribute(de, label_assoc, "label_assoc")

    de.add_integer(check_status(blank, status_blank, "status_blank"))
    de.add_integer(check_status(subordinate, status_subordinate, "status_subordinate"))
    de.add_integer(check_status(use, status_use, "status_use"))
    de.add_integer(check_status(hierarchy, status_hierarchy, "status_hierarchy"))

    de.add_integer(check_range(line_weight, 0, None, "line_weight"))
    _add_attribute(de, color, "color", max_literal=max(color_numbers.values()), table=color_numbers)
    de.add_integer(check_range(form, 0, None, "form"))

    de.add_literal_string(check_label(label))
    de.add_integer(check_range(subscript, 0, MAX_SUBSCRIPT, "subscript"))

    return de


class Entity:
    """
    An IGES entity: its type number, its parameter data (which must begin with the entity type), and its directory
    entry parameters.
    """

    def __init__(self, ID: int, parameter_data: IGESParamList, dir_entry_data: IGESParamList or None = None):
        if len(parameter_data) == 0 or parameter_data.get_integer(0).value != ID:
            raise IGESShapeError(f"The parameter data of entity {ID} must begin with the entity type",
                                 field="parameter_data", value=ID)
        if dir_entry_data is None:
            dir_entry_data = dir_entry_param_list()
        if len(dir_entry_data) != DE_PARAM_COUNT:
            raise IGESShapeError(f"Expected {DE_PARAM_COUNT} directory entry parameters, found {len(dir_entry_data)}",
                                 field="dir_entry_data", value=len(dir_entry_data))
        self.entity_ID = ID
        self.parameter_data = parameter_data
        self.dir_entry_data = dir_entry_data

    @property
    def label(self) -> str:
        return self.dir_entry_data[DE_LABEL].write_value_to_python_str()

    def __repr__(self):
        return f"{type(self).__name__}(type={self.entity_ID}, label={self.label!r})"
