import typing
from abc import ABC, abstractmethod

from splineiges import CardLengthError, EmptySectionError, FieldTooWideError
from splineiges.iges import (card_width, start_section_col_width, global_section_col_width,
                             data_section_col_width, parameter_delimiter, record_delimiter, START_LETTER,
                             GLOBAL_LETTER, DIR_ENTRY_LETTER, PARAM_DATA_LETTER, TERMINATE_LETTER)
from splineiges.iges import entity
from splineiges.iges.iges_param import IGESParam, IGESType

content_width = card_width - 8  # Columns 1-72


def join_free_form(params: typing.Sequence[IGESParam], end_of_record: bool) -> str:
    """
    Joins the values of one free-form card. Every value is followed by the parameter delimiter, except that the last
    value of the record is followed by the record delimiter.
    """
    pieces = []
    for idx, param in enumerate(params):
        pieces.append(param.write_value_to_python_str())
        pieces.append(record_delimiter if end_of_record and idx == len(params) - 1 else parameter_delimiter)
    return "".join(pieces)


class Card(ABC):
    """
    One 80-column record of an IGES file: 72 columns of content, the section letter, and the sequence number
    right-justified in the last 7 columns. Cards are immutable once created.
    """
    letter_code = None

    def __init__(self, seq_num: int, end_of_record: bool = False):
        self._seq_num = IGESParam(seq_num, IGESType.POINTER)
        self._end_of_record = end_of_record

    @property
    def seq_num(self) -> int:
        return self._seq_num.value

    @property
    def end_of_record(self) -> bool:
        return self._end_of_record

    @abstractmethod
    def write_content_str(self) -> str:
        """Returns the first 72 columns of the card (shorter content is padded with spaces)"""
        pass

    def write_card_string(self) -> str:
        content = self.write_content_str()
        if len(content) > content_width:
            raise CardLengthError(f"{type(self).__name__}: Card content too long: [{content}]", value=content)
        result = f"{content:<{content_width}}{self.letter_code}{self._seq_num.write_fixed_pointer_str()}"
        if len(result) != card_width:
            raise CardLengthError(f"{type(self).__name__}: Card length error: [{result}]", value=result)
        return result

    def __str__(self):
        return self.write_card_string()


class StartCard(Card):
    letter_code = START_LETTER

    def __init__(self, seq_num: int, text: str, end_of_record: bool = False):
        super().__init__(seq_num, end_of_record)
        if len(text) > start_section_col_width:
            raise FieldTooWideError(f"Start section text longer than {start_section_col_width} characters: {text}",
                                    field="text", value=text)
        self.text = IGESParam(text, IGESType.LITERAL_STRING)

    def write_content_str(self) -> str:
        return self.text.write_value_to_python_str()


class GlobalCard(Card):
    letter_code = GLOBAL_LETTER

    def __init__(self, seq_num: int, params: typing.Sequence[IGESParam], end_of_record: bool = False):
        super().__init__(seq_num, end_of_record)
        self.params = tuple(params)

    def write_content_str(self) -> str:
        content = join_free_form(self.params, self.end_of_record)
        if len(content) > global_section_col_width:
            raise CardLengthError(f"GlobalCard: Parameters too long: [{content}]", value=content)
        return content


def _check_status_field(param: IGESParam, table: dict, field: str) -> IGESParam:
    if not param.is_defaulted:
        entity.check_status(param.value, table, field)
    return param


def _check_integer_field(param: IGESParam, high: int or None, field: str) -> IGESParam:
    if not param.is_defaulted:
        entity.check_range(param.value, 0, high, field)
    return param


class DirectoryEntryCard1(Card):
    """
    First line of a directory entry: entity type, parameter data pointer, structure, line font pattern, level, view,
    transformation matrix, label display associativity, and the 8-digit status number.
    """
    letter_code = DIR_ENTRY_LETTER

    def __init__(self, seq_num: int, entity_type: IGESParam, param_data_ptr: IGESParam, structure: IGESParam,
                 line_font: IGESParam, level: IGESParam, view: IGESParam, transform: IGESParam,
                 label_assoc: IGESParam, status_blank: IGESParam, status_subord: IGESParam, status_use: IGESParam,
                 status_hier: IGESParam):
        super().__init__(seq_num)
        self.entity_type = entity_type.as_type(IGESType.INTEGER)
        self.param_data_ptr = param_data_ptr.as_type(IGESType.POINTER)
        self.structure = entity.check_literal(structure, 0, "structure")
        self.line_font = entity.check_literal(line_font, max(entity.line_fonts.values()), "line_font")
        self.level = entity.check_literal(level, None, "level")
        self.view = view.as_type(IGESType.POINTER)
        self.transform = transform.as_type(IGESType.POINTER)
        self.label_assoc = label_assoc.as_type(IGESType.POINTER)
        self.status = tuple(
            _check_status_field(s.as_type(IGESType.INTEGER), table, field) for s, table, field in (
                (status_blank, entity.status_blank, "status_blank"),
                (status_subord, entity.status_subordinate, "status_subordinate"),
                (status_use, entity.status_use, "status_use"),
                (status_hier, entity.status_hierarchy, "status_hierarchy"),
            ))

    @property
    def status_number(self) -> int:
        blank, subord, use, hier = (0 if s.value is None else s.value for s in self.status)
        return blank * 1000000 + subord * 10000 + use * 100 + hier

    def write_content_str(self) -> str:
        fields = (self.entity_type, self.param_data_ptr, self.structure, self.line_font, self.level, self.view,
                  self.transform, self.label_assoc)
        return "".join(f.write_fixed_field_str() for f in fields) + f"{self.status_number:08d}"


class DirectoryEntryCard2(Card):
    """
    Second line of a directory entry: entity type, line weight, color, parameter line count, form number, two reserved
    fields, entity label, and entity subscript.
    """
    letter_code = DIR_ENTRY_LETTER

    def __init__(self, seq_num: int, entity_type: IGESParam, line_weight: IGESParam, color: IGESParam,
                 param_line_count: IGESParam, form: IGESParam, label: IGESParam, subscript: IGESParam):
        super().__init__(seq_num)
        self.entity_type = entity_type.as_type(IGESType.INTEGER)
        self.line_weight = _check_integer_field(line_weight.as_type(IGESType.INTEGER), None, "line_weight")
        self.color = entity.check_literal(color, max(entity.color_numbers.values()), "color")
        self.param_line_count = param_line_count.as_type(IGESType.INTEGER)
        self.form = _check_integer_field(form.as_type(IGESType.INTEGER), None, "form")
        self.label = label.as_type(IGESType.LITERAL_STRING)
        entity.check_label(self.label.value)
        self.subscript = _check_integer_field(subscript.as_type(IGESType.INTEGER), entity.MAX_SUBSCRIPT, "subscript")

    def write_content_str(self) -> str:
        reserved = IGESParam(None, IGESType.RESERVED)
        fields = (self.entity_type, self.line_weight, self.color, self.param_line_count, self.form, reserved,
                  reserved, self.label, self.subscript)
        return "".join(f.write_fixed_field_str() for f in fields)


class ParameterDataCard(Card):
    """
    One line of an entity's parameter data: up to 64 columns of values, a blank column, and a 7-column pointer back to
    the entity's first directory entry line.
    """
    letter_code = PARAM_DATA_LETTER

    def __init__(self, seq_num: int, de_backptr: int, params: typing.Sequence[IGESParam],
                 end_of_record: bool = False):
        super().__init__(seq_num, end_of_record)
        self.de_backptr = IGESParam(de_backptr, IGESType.POINTER)
        self.params = tuple(params)

    def write_content_str(self) -> str:
        content = join_free_form(self.params, self.end_of_record)
        if len(content) > data_section_col_width:
            raise CardLengthError(f"ParameterDataCard: Parameters too long: [{content}]", value=content)
        return f"{content:<{data_section_col_width}} {self.de_backptr.write_fixed_pointer_str()}"


class TerminateCard(Card):
    """The single terminate record, holding the number of lines in each of the other four sections"""
    letter_code = TERMINATE_LETTER

    def __init__(self, seq_num: int, last_start: int, last_global: int, last_dir_entry: int, last_param_data: int):
        super().__init__(seq_num, end_of_record=True)
        self.last_pointers = {}
        for letter, name, value in ((START_LETTER, "last_start", last_start),
                                    (GLOBAL_LETTER, "last_global", last_global),
                                    (DIR_ENTRY_LETTER, "last_dir_entry", last_dir_entry),
                                    (PARAM_DATA_LETTER, "last_param_data", last_param_data)):
            if not value > 0:
                raise EmptySectionError(f"TerminateCard: Invalid {name}: {value}. Section {letter} is empty.",
                                        field=name, value=value)
            self.last_pointers[letter] = IGESParam(value, IGESType.POINTER)

    def write_content_str(self) -> str:
        return "".join(f"{letter}{ptr.write_fixed_pointer_str()}" for letter, ptr in self.last_pointers.items())
