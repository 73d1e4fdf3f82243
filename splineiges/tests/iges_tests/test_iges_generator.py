import os
import unittest
from datetime import datetime

import numpy as np
import pytest

from splineiges import (IGESOrderError, IGESRangeError, IGESEnumerationError, EmptySectionError,
                        FieldTooWideError)
from splineiges.iges.global_params import GlobalParams
from splineiges.iges.iges_generator import IGESGenerator, wrap_start_text
from splineiges.iges.param_list import IGESParamList
from splineiges.iges.surfaces import RationalBSplineSurfaceIGES


def make_surface(label: str = "S0", z_offset: float = 0.0) -> RationalBSplineSurfaceIGES:
    u, v = np.meshgrid(np.linspace(0.0, 30.0, 4), np.linspace(0.0, 20.0, 3))
    P = np.stack((u, v, z_offset + 0.1 * u * v), axis=-1)
    return RationalBSplineSurfaceIGES(knots_u=[0.0, 0.0, 0.0, 0.5, 1.0, 1.0, 1.0],
                                      knots_v=[0.0, 0.0, 0.0, 1.0, 1.0, 1.0], control_points_XYZ=P,
                                      degree_u=2, degree_v=2, label=label)


def hand_built_dir_entry(line_font: int = 0, use: int = 0, color: int = 0, line_weight: int = 0, label: str = "S0",
                         subscript: int = 0) -> IGESParamList:
    de = IGESParamList()
    de.add_integer_or_pointer()
    de.add_integer_or_pointer(line_font)
    de.add_integer_or_pointer()
    de.add_pointer()
    de.add_pointer()
    de.add_pointer()
    for status in (0, 0, use, 0):
        de.add_integer(status)
    de.add_integer(line_weight)
    de.add_integer_or_pointer(color)
    de.add_integer(0)
    de.add_literal_string(label)
    de.add_integer(subscript)
    return de


def make_global_params() -> GlobalParams:
    return GlobalParams(product_id="Test product", file_name="test.igs", units="meters",
                        timestamp=datetime(2024, 1, 2, 3, 4, 5))


def split_sections(iges_string: str):
    sections = {letter: [] for letter in "SGDPT"}
    for line in iges_string.splitlines():
        sections[line[72]].append(line)
    return sections


class IGESGeneratorTest(unittest.TestCase):

    def setUp(self):
        self.entities = [make_surface("S0"), make_surface("S1", z_offset=5.0)]
        self.generator = IGESGenerator(entities=self.entities, global_params=make_global_params(),
                                       start_text="Test surfaces")
        self.iges_string = self.generator.build()
        self.sections = split_sections(self.iges_string)

    def test_every_line_is_80_columns(self):
        lines = self.iges_string.split("\n")
        self.assertEqual("", lines[-1])
        self.assertTrue(all(len(line) == 80 for line in lines[:-1]))

    def test_section_order_and_sequence_numbers(self):
        letters = [line[72] for line in self.iges_string.splitlines()]
        self.assertEqual(sorted(letters, key="SGDPT".index), letters)
        for letter, lines in self.sections.items():
            self.assertEqual(list(range(1, len(lines) + 1)), [int(line[73:]) for line in lines])

    def test_start_section(self):
        self.assertEqual(["Test surfaces"], [line[:72].rstrip() for line in self.sections["S"]])

    def test_global_section(self):
        expected = ",".join(str(p) for p in make_global_params().write_param_list()) + ";"
        self.assertEqual(expected, "".join(line[:72].rstrip() for line in self.sections["G"]))

    def test_directory_entries(self):
        d_lines = self.sections["D"]
        p_lines = self.sections["P"]
        self.assertEqual(4, len(d_lines))
        first_p_of_second = None
        for idx, line in enumerate(p_lines):
            if int(line[65:72]) == 3:
                first_p_of_second = idx + 1
                break
        n_p_first = first_p_of_second - 1

        self.assertEqual("     128", d_lines[0][:8])
        self.assertEqual(1, int(d_lines[0][8:16]))
        self.assertEqual("00000000", d_lines[0][64:72])
        self.assertEqual(n_p_first, int(d_lines[1][24:32]))
        self.assertEqual("      S0", d_lines[1][56:64])

        self.assertEqual(first_p_of_second, int(d_lines[2][8:16]))
        self.assertEqual(len(p_lines) - n_p_first, int(d_lines[3][24:32]))
        self.assertEqual("      S1", d_lines[3][56:64])

    def test_parameter_data(self):
        p_lines = self.sections["P"]
        first = [line for line in p_lines if int(line[65:72]) == 1]
        second = [line for line in p_lines if int(line[65:72]) == 3]
        self.assertEqual(len(p_lines), len(first) + len(second))
        self.assertTrue(all(line[64] == " " for line in p_lines))

        expected = ",".join(str(p) for p in make_surface().parameter_data) + ";"
        self.assertEqual(expected, "".join(line[:64].rstrip() for line in first))
        self.assertTrue(expected.startswith("128,3,2,2,2,0,0,1,0,0,0.0D+00,0.0D+00,0.0D+00,5.0D-01,"))
        self.assertTrue(expected.endswith(",0.0D+00,1.0D+00,0.0D+00,1.0D+00;"))

    def test_record_delimiter_closes_each_record(self):
        # One record in the global section, one per entity in the parameter data section
        for lines, width, n_records in ((self.sections["G"], 72, 1), (self.sections["P"], 64, 2)):
            contents = [line[:width].rstrip() for line in lines]
            self.assertEqual(n_records, sum(content.endswith(";") for content in contents))
            self.assertTrue(contents[-1].endswith(";"))

    def test_terminate_card(self):
        n = {letter: len(lines) for letter, lines in self.sections.items()}
        self.assertEqual(1, n["T"])
        self.assertEqual(f"S{n['S']:7d}G{n['G']:7d}D{n['D']:7d}P{n['P']:7d}" + " " * 40 + "T      1",
                         self.sections["T"][0])

    def test_build_is_repeatable(self):
        self.assertEqual(self.iges_string, self.generator.build())

    def test_add_entity_returns_directory_pointer(self):
        generator = IGESGenerator(global_params=make_global_params())
        generator.add_start_section()
        generator.add_global_cards(make_global_params())
        self.assertEqual(1, generator.add_entity(self.entities[0]))
        self.assertEqual(3, generator.add_entity(self.entities[1]))
        self.assertEqual(1, generator.add_terminate_card())


class ConstructionOrderTest(unittest.TestCase):

    def setUp(self):
        self.generator = IGESGenerator()
        self.entity = make_surface()

    def test_global_before_start(self):
        with self.assertRaises(IGESOrderError):
            self.generator.add_global_cards(make_global_params())

    def test_entity_before_global(self):
        self.generator.add_start_card("text", end_of_record=True)
        with self.assertRaises(IGESOrderError):
            self.generator.add_entity(self.entity)

    def test_start_or_global_after_entity(self):
        self.generator.add_start_card("text", end_of_record=True)
        self.generator.add_global_cards(make_global_params())
        self.generator.add_entity(self.entity)
        with self.assertRaises(IGESOrderError):
            self.generator.add_global_cards(make_global_params())
        with self.assertRaises(IGESOrderError):
            self.generator.add_start_card("late")

    def test_nothing_after_terminate(self):
        self.generator.add_start_section("text")
        self.generator.add_global_cards(make_global_params())
        self.generator.add_entity(self.entity)
        self.generator.add_terminate_card()
        with self.assertRaises(IGESOrderError):
            self.generator.add_entity(self.entity)
        with self.assertRaises(IGESOrderError):
            self.generator.add_terminate_card()

    def test_terminate_without_entities(self):
        self.generator.add_start_section("text")
        self.generator.add_global_cards(make_global_params())
        with self.assertRaises(EmptySectionError):
            self.generator.add_terminate_card()

    def test_start_card_too_long(self):
        with self.assertRaises(FieldTooWideError):
            self.generator.add_start_card("x" * 73)
        self.assertEqual(0, len(self.generator.start_section))


def test_wrap_start_text():
    assert wrap_start_text("") == [""]
    assert wrap_start_text("a" * 100) == ["a" * 72, "a" * 28]
    assert wrap_start_text("first\nsecond") == ["first", "second"]


def test_generate_adds_extension(tmp_path):
    generator = IGESGenerator(entities=[make_surface()], global_params=make_global_params())
    iges_string = generator.generate(os.path.join(tmp_path, "surface"))
    file_name = os.path.join(tmp_path, "surface.igs")
    assert os.path.exists(file_name)
    with open(file_name, "r") as f:
        assert f.read() == iges_string


def test_generate_keeps_iges_extension(tmp_path):
    generator = IGESGenerator(entities=[make_surface()], global_params=make_global_params())
    generator.generate(os.path.join(tmp_path, "surface.iges"))
    assert os.listdir(tmp_path) == ["surface.iges"]


def test_generate_default_global_params(tmp_path):
    generator = IGESGenerator(entities=[make_surface()])
    iges_string = generator.generate(os.path.join(tmp_path, "default.igs"))
    global_content = "".join(line[:72].rstrip() for line in split_sections(iges_string)["G"])
    assert global_content.startswith("1H,,1H;,10Hsplineiges,11Hdefault.igs,")


def test_failed_build_writes_nothing(tmp_path):
    bad_globals = GlobalParams(product_id="Prodüct")
    generator = IGESGenerator(entities=[make_surface()], global_params=bad_globals)
    with pytest.raises(IGESRangeError):
        generator.generate(os.path.join(tmp_path, "bad.igs"))
    assert not os.path.exists(os.path.join(tmp_path, "bad.igs"))


@pytest.mark.parametrize("overrides, error", [
    ({"use": 9}, IGESEnumerationError),
    ({"line_font": 7}, IGESEnumerationError),
    ({"color": 42}, IGESEnumerationError),
    ({"line_weight": -1}, IGESRangeError),
    ({"label": "TOOLONGLABEL"}, IGESRangeError),
    ({"subscript": 100000000}, IGESRangeError),
])
def test_add_param_cards_rejects_bad_dir_entry(overrides, error):
    generator = IGESGenerator()
    generator.add_start_section("text")
    generator.add_global_cards(make_global_params())
    with pytest.raises(error):
        generator.add_param_cards(hand_built_dir_entry(**overrides), make_surface().parameter_data.copy())
    assert len(generator.dir_entry_section) == 0
    assert len(generator.param_data_section) == 0


def test_add_param_cards_accepts_hand_built_dir_entry():
    generator = IGESGenerator()
    generator.add_start_section("text")
    generator.add_global_cards(make_global_params())
    assert generator.add_param_cards(hand_built_dir_entry(line_font=5, use=6, color=8, label="S0"),
                                     make_surface().parameter_data.copy()) == 1
    d_lines = generator.dir_entry_section.write_section_string().splitlines()
    assert d_lines[0][64:72] == "00000600"
    assert d_lines[1][16:24] == "       8"
