#!/usr/bin/env python3
"""Test suite for chi-square and GDOP validation"""

import unittest
import numpy as np
from pyspp.core.constants import D2R, NX
from pyspp.core.options import ProcessingOptions
from pyspp.core.results import FailureReason
from pyspp.gnss.validation import CHISQR, chisqr_threshold, dops, validate_solution


def _azel(pairs_deg):
    return np.array(pairs_deg, dtype=float) * D2R


GOOD_SKY = _azel([(0, 90), (0, 30), (90, 30), (180, 30), (270, 30), (45, 60)])


class TestChiSquareTable(unittest.TestCase):
    """Test chi-square critical values (alpha = 0.001)"""

    def test_known_values(self):
        self.assertEqual(len(CHISQR), 100)
        self.assertAlmostEqual(chisqr_threshold(1), 10.828, delta=0.01)
        self.assertAlmostEqual(chisqr_threshold(5), 20.515, delta=0.01)
        self.assertAlmostEqual(chisqr_threshold(10), 29.588, delta=0.01)
        self.assertAlmostEqual(chisqr_threshold(100), 149.449, delta=0.01)

    def test_beyond_table(self):
        self.assertGreater(chisqr_threshold(150), chisqr_threshold(100))

    def test_monotonic(self):
        self.assertTrue(np.all(np.diff(CHISQR) > 0))


class TestDops(unittest.TestCase):
    """Test dilution of precision"""

    def test_good_geometry(self):
        gdop, pdop, hdop, vdop = dops(GOOD_SKY)
        self.assertGreater(gdop, pdop)
        self.assertGreater(pdop, hdop)
        self.assertLess(gdop, 5.0)
        self.assertAlmostEqual(pdop ** 2, hdop ** 2 + vdop ** 2)

    def test_too_few_satellites(self):
        np.testing.assert_array_equal(dops(GOOD_SKY[:3]), np.zeros(4))

    def test_elevation_mask(self):
        np.testing.assert_array_equal(dops(GOOD_SKY, elmin=45.0 * D2R), np.zeros(4))

    def test_degenerate_geometry(self):
        sky = _azel([(0, 20), (10, 25), (20, 20), (30, 25), (15, 30)])
        self.assertGreater(dops(sky)[0], 30.0)


class TestValidateSolution(unittest.TestCase):
    """Test acceptance of converged solutions"""

    def setUp(self):
        self.opt = ProcessingOptions()
        self.vsat = np.ones(len(GOOD_SKY), dtype=bool)

    def test_accept(self):
        v = np.full(10, 0.5)
        val = validate_solution(GOOD_SKY, self.vsat, self.opt, v, NX)
        self.assertTrue(val.ok)
        self.assertIsNone(val.reason)
        self.assertEqual(val.message, "")
        self.assertAlmostEqual(val.chisq, 2.5)
        self.assertGreater(val.gdop, 0.0)

    def test_chi_square_rejection(self):
        v = np.zeros(10)
        v[0] = 10.0
        val = validate_solution(GOOD_SKY, self.vsat, self.opt, v, NX)
        self.assertFalse(val.ok)
        self.assertEqual(val.reason, FailureReason.CHI_SQUARE)
        self.assertEqual(val.message, "chi-square error nv=10 vv=100.0 cs=13.8")

    def test_no_degrees_of_freedom_skips_chi_square(self):
        v = np.full(NX, 100.0)
        val = validate_solution(GOOD_SKY, self.vsat, self.opt, v, NX)
        self.assertTrue(val.ok)

    def test_gdop_rejection(self):
        opt = self.opt.updated(maxgdop=1.0)
        val = validate_solution(GOOD_SKY, self.vsat, opt, np.zeros(10), NX)
        self.assertFalse(val.ok)
        self.assertEqual(val.reason, FailureReason.GDOP)
        self.assertTrue(val.message.startswith("gdop error nv=10 gdop="))

    def test_unused_satellites_do_not_count(self):
        vsat = np.zeros(len(GOOD_SKY), dtype=bool)
        vsat[:3] = True
        val = validate_solution(GOOD_SKY, vsat, self.opt, np.zeros(10), NX)
        self.assertEqual(val.reason, FailureReason.GDOP)
        self.assertEqual(val.gdop, 0.0)


if __name__ == '__main__':
    unittest.main()
