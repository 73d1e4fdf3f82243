import unittest

from splineiges import (CardLengthError, EmptySectionError, FieldTooWideError, IGESConversionError,
                        IGESEnumerationError, IGESRangeError)
from splineiges.iges.card import (StartCard, GlobalCard, DirectoryEntryCard1, DirectoryEntryCard2,
                                  ParameterDataCard, TerminateCard, join_free_form)
from splineiges.iges.iges_param import IGESParam


def _int(value):
    return IGESParam(value, "int")


class StartCardTest(unittest.TestCase):

    def test_card_string(self):
        card = StartCard(1, "hello", end_of_record=True)
        self.assertEqual("hello" + " " * 67 + "S      1", card.write_card_string())

    def test_blank_card(self):
        self.assertEqual(" " * 72 + "S     12", str(StartCard(12, "")))

    def test_text_too_long(self):
        self.assertEqual(80, len(StartCard(1, "x" * 72).write_card_string()))
        with self.assertRaises(FieldTooWideError):
            StartCard(1, "x" * 73)


class FreeFormCardTest(unittest.TestCase):

    def test_join_free_form(self):
        params = [IGESParam(",", "string"), IGESParam(None, "string"), _int(3)]
        self.assertEqual("1H,,,3;", join_free_form(params, True))
        self.assertEqual("1H,,,3,", join_free_form(params, False))

    def test_global_card(self):
        card = GlobalCard(2, [IGESParam(",", "string"), IGESParam(";", "string")], end_of_record=True)
        self.assertEqual("1H,,1H;;" + " " * 64 + "G      2", card.write_card_string())

    def test_global_card_too_long(self):
        with self.assertRaises(CardLengthError):
            GlobalCard(1, [_int(1234567)] * 10).write_card_string()

    def test_parameter_data_card(self):
        card = ParameterDataCard(3, 1, [_int(128), _int(1)], end_of_record=True)
        line = card.write_card_string()
        self.assertEqual("128,1;" + " " * 58 + " " + "      1" + "P      3", line)
        self.assertEqual(80, len(line))

    def test_parameter_data_card_too_long(self):
        with self.assertRaises(CardLengthError):
            ParameterDataCard(1, 1, [_int(1234567)] * 9).write_card_string()


class DirectoryEntryCardTest(unittest.TestCase):

    def test_first_card(self):
        card = DirectoryEntryCard1(
            1, _int(128), IGESParam(1, "pointer"), structure=IGESParam(None, "int_or_pointer"),
            line_font=IGESParam(0, "int_or_pointer"), level=IGESParam(-3, "int_or_pointer"),
            view=IGESParam(0, "pointer"), transform=IGESParam(None, "pointer"), label_assoc=IGESParam(0, "pointer"),
            status_blank=_int(1), status_subord=_int(2), status_use=_int(3), status_hier=_int(1))
        self.assertEqual(1020301, card.status_number)
        self.assertEqual("     128       1               0      -3       0               0"
                         "01020301D      1", card.write_card_string())

    def test_zero_status(self):
        card = DirectoryEntryCard1(
            1, _int(128), IGESParam(1, "pointer"), *[IGESParam(None, "int_or_pointer")] * 3,
            *[IGESParam(None, "pointer")] * 3, *[_int(0)] * 4)
        self.assertEqual("00000000", card.write_card_string()[64:72])

    def test_second_card(self):
        card = DirectoryEntryCard2(2, _int(128), line_weight=_int(0), color=IGESParam(None, "int_or_pointer"),
                                   param_line_count=_int(5), form=_int(0), label=IGESParam("SURF0", "literal_string"),
                                   subscript=_int(0))
        self.assertEqual("     128       0               5       0                   SURF0       0"
                         "D      2", card.write_card_string())

    def test_rejects_unconvertible_fields(self):
        with self.assertRaises(IGESConversionError):
            DirectoryEntryCard2(2, _int(128), line_weight=IGESParam(0.0, "real"),
                                color=IGESParam(None, "int_or_pointer"), param_line_count=_int(5), form=_int(0),
                                label=IGESParam("", "literal_string"), subscript=_int(0))

    def test_first_card_range_checks(self):
        def make_card(line_font=0, use=0, hier=0):
            return DirectoryEntryCard1(
                1, _int(128), IGESParam(1, "pointer"), structure=IGESParam(None, "int_or_pointer"),
                line_font=IGESParam(line_font, "int_or_pointer"), level=IGESParam(None, "int_or_pointer"),
                view=IGESParam(None, "pointer"), transform=IGESParam(None, "pointer"),
                label_assoc=IGESParam(None, "pointer"), status_blank=_int(0), status_subord=_int(0),
                status_use=_int(use), status_hier=_int(hier))

        self.assertEqual(602, make_card(line_font=5, use=6, hier=2).status_number)
        with self.assertRaises(IGESEnumerationError) as context:
            make_card(use=9)
        self.assertEqual("status_use", context.exception.field)
        with self.assertRaises(IGESEnumerationError):
            make_card(hier=3)
        with self.assertRaises(IGESEnumerationError):
            make_card(line_font=7)

    def test_second_card_range_checks(self):
        def make_card(color=0, line_weight=0, label="S0", subscript=0):
            return DirectoryEntryCard2(2, _int(128), line_weight=_int(line_weight),
                                       color=IGESParam(color, "int_or_pointer"), param_line_count=_int(5),
                                       form=_int(0), label=IGESParam(label, "literal_string"),
                                       subscript=_int(subscript))

        self.assertEqual("     128       0      -3", make_card(color=-3).write_card_string()[:24])
        with self.assertRaises(IGESEnumerationError):
            make_card(color=42)
        with self.assertRaises(IGESRangeError):
            make_card(line_weight=-1)
        with self.assertRaises(IGESRangeError):
            make_card(label="TOOLONGLABEL")
        with self.assertRaises(IGESRangeError):
            make_card(subscript=100000000)


class TerminateCardTest(unittest.TestCase):

    def test_card_string(self):
        card = TerminateCard(1, 1, 4, 2, 7)
        self.assertEqual("S      1G      4D      2P      7" + " " * 40 + "T      1", card.write_card_string())

    def test_empty_section(self):
        with self.assertRaises(EmptySectionError) as context:
            TerminateCard(1, 0, 4, 2, 7)
        self.assertEqual("last_start", context.exception.field)
        with self.assertRaises(EmptySectionError):
            TerminateCard(1, 1, 4, 0, 7)
