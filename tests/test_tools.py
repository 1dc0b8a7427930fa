import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from tools import MathTools


class MathToolsTestCase(unittest.TestCase):
    def test_parse_float_is_forgiving(self) -> None:
        self.assertEqual(MathTools.parse_float("135.5"), 135.5)
        self.assertEqual(MathTools.parse_float(" 20 "), 20.0)
        self.assertEqual(MathTools.parse_float(45), 45.0)
        self.assertEqual(MathTools.parse_float("abc"), 0.0)
        self.assertEqual(MathTools.parse_float(""), 0.0)
        self.assertEqual(MathTools.parse_float(None), 0.0)
        self.assertEqual(MathTools.parse_float("-5"), 0.0)
        self.assertEqual(MathTools.parse_float("nan"), 0.0)
        self.assertEqual(MathTools.parse_float("inf"), 0.0)
        self.assertEqual(MathTools.parse_float(True), 0.0)
        self.assertEqual(MathTools.parse_float([1]), 0.0)
        self.assertEqual(MathTools.parse_float(10 ** 400), 0.0)
        self.assertEqual(MathTools.parse_float("1e400"), 0.0)

    def test_parse_int_truncates(self) -> None:
        self.assertEqual(MathTools.parse_int("8"), 8)
        self.assertEqual(MathTools.parse_int("8.9"), 8)
        self.assertEqual(MathTools.parse_int("x"), 0)
        self.assertEqual(MathTools.parse_int(-3), 0)
        self.assertEqual(MathTools.parse_int(10 ** 400), 0)

    def test_volume(self) -> None:
        sets = [(10, 100.0), (5, 150.0)]
        self.assertEqual(MathTools.volume(sets), 10 * 100.0 + 5 * 150.0)
        self.assertEqual(MathTools.volume([]), 0.0)

    def test_percent_change(self) -> None:
        self.assertEqual(MathTools.percent_change(100, 120), 20.0)
        self.assertEqual(MathTools.percent_change(120, 100), -16.7)
        self.assertEqual(MathTools.percent_change(0, 50), 0.0)

    def test_format_number(self) -> None:
        self.assertEqual(MathTools.format_number(225.0), "225")
        self.assertEqual(MathTools.format_number(102.5), "102.5")
        self.assertEqual(MathTools.format_number(1.25), "1.25")


if __name__ == "__main__":
    unittest.main()
