import unittest

import pytest

from splineiges import FieldTooWideError, IGESShapeError, IGESError
from splineiges.iges.card import GlobalCard, StartCard
from splineiges.iges.iges_param import IGESParam
from splineiges.iges.param_list import IGESParamList
from splineiges.iges.section import Section, find_range_in, split_param_ranges


def seven_digit_params(n: int):
    return [IGESParam(1234567, "int") for _ in range(n)]


class FindRangeTest(unittest.TestCase):

    def test_greedy_packing(self):
        params = seven_digit_params(5)
        self.assertEqual(2, find_range_in(params, 0, 16))
        self.assertEqual(5, find_range_in(params, 3, 16))
        self.assertEqual(5, find_range_in(params, 0, 64))
        self.assertEqual(1, find_range_in(params, 0, 15))

    def test_exact_fit(self):
        self.assertEqual(8, find_range_in(seven_digit_params(9), 0, 64))

    def test_field_too_wide(self):
        params = [IGESParam("A" * 61, "string")]
        with self.assertRaises(FieldTooWideError):
            find_range_in(params, 0, 64)
        self.assertEqual(1, find_range_in(params, 0, 65))


def test_split_param_ranges():
    ranges = list(split_param_ranges(seven_digit_params(5), 16))
    assert ranges == [(0, 2, False), (2, 4, False), (4, 5, True)]


def test_split_empty_params():
    with pytest.raises(IGESShapeError):
        list(split_param_ranges([], 64))


class SectionTest(unittest.TestCase):

    def test_append_numbers_cards(self):
        section = Section("S")
        self.assertEqual(0, section.last_pointer())
        self.assertEqual(1, section.append_card(lambda seq: StartCard(seq, "first")))
        self.assertEqual(2, section.append_card(lambda seq: StartCard(seq, "second", end_of_record=True)))
        self.assertEqual(2, section.last_pointer())
        self.assertEqual(3, section.next_pointer())
        self.assertEqual([1, 2], [card.seq_num for card in section.cards])

    def test_append_rejects_mismatched_card(self):
        section = Section("S")
        with self.assertRaises(IGESShapeError):
            section.append_card(lambda seq: StartCard(seq + 1, "wrong"))
        with self.assertRaises(IGESShapeError):
            section.append_card(lambda seq: GlobalCard(seq, []))
        self.assertEqual(0, len(section))

    def test_free_form_cards(self):
        pl = IGESParamList()
        for _ in range(10):
            pl.add_integer(1234567)
        section = Section("G")
        n_cards = section.add_free_form_cards(pl, 72, lambda seq, params, eor: GlobalCard(seq, params, eor))
        self.assertEqual(2, n_cards)
        self.assertTrue(pl.taken)
        lines = section.write_section_string().splitlines()
        self.assertEqual("1234567," * 9, lines[0][:72])
        self.assertEqual("1234567;", lines[1][:72].rstrip())
        self.assertTrue(all(len(line) == 80 for line in lines))

    def test_free_form_cards_too_wide_leaves_section_unchanged(self):
        pl = IGESParamList()
        pl.add_integer(1)
        pl.add_string("A" * 70)
        section = Section("G")
        with self.assertRaises(FieldTooWideError):
            section.add_free_form_cards(pl, 72, lambda seq, params, eor: GlobalCard(seq, params, eor))
        self.assertEqual(0, len(section))
        with self.assertRaises(IGESError):
            section.add_free_form_cards(pl, 72, lambda seq, params, eor: GlobalCard(seq, params, eor))
