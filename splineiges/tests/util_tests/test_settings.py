import os
import tempfile
import unittest

from splineiges.utils.read_write_files import save_data, load_data
from splineiges.utils.settings import get_setting, set_setting, reset_settings

temp_dir = tempfile.gettempdir()


class SettingsTest(unittest.TestCase):

    def tearDown(self):
        reset_settings()

    def test_defaults(self):
        self.assertEqual("meters", get_setting("units"))
        self.assertAlmostEqual(0.003, get_setting("line_width_factor"))
        self.assertAlmostEqual(1.0e-5, get_setting("resolution_factor"))

    def test_override_and_reset(self):
        set_setting("units", "feet")
        self.assertEqual("feet", get_setting("units"))
        reset_settings()
        self.assertEqual("meters", get_setting("units"))

    def test_unknown_key(self):
        with self.assertRaises(KeyError):
            get_setting("not_a_setting")
        with self.assertRaises(KeyError):
            set_setting("not_a_setting", 1)


class ReadWriteFilesTest(unittest.TestCase):

    def test_round_trip_json(self):
        file_name = os.path.join(temp_dir, "splineiges_read_write_test.json")
        data = {"U": [0.0, 1.0], "pu": 1}
        try:
            save_data(data, file_name)
            self.assertEqual(data, load_data(file_name))
        finally:
            if os.path.exists(file_name):
                os.remove(file_name)

    def test_bad_extension(self):
        with self.assertRaises(ValueError):
            save_data({}, "data.txt")
        with self.assertRaises(ValueError):
            load_data("data.txt")
        with self.assertRaises(ValueError):
            save_data({}, "data.pkl")
