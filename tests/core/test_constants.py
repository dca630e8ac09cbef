#!/usr/bin/env python3
"""Test suite for constants and satellite numbering"""

import unittest
import numpy as np
from pyspp.core.constants import (
    CLIGHT, FREQ_L1, FREQ_L2, FREQ_L5, FREQ_G1, FREQ_G2, DFREQ_G1,
    RE_WGS84, FE_WGS84, OMGE, NX, MAXITR,
    SYS_GPS, SYS_GLO, SYS_GAL, SYS_BDS, SYS_QZS, SYS_SBS, SYS_IRN, SYS_NONE,
    sat2sys, sat2prn, prn2sat, sys2char, char2sys
)
from pyspp.core.satellite_numbering import MAXSAT, id2sat, sat2id


class TestPhysicalConstants(unittest.TestCase):
    """Test physical constants values"""

    def test_speed_of_light(self):
        self.assertEqual(CLIGHT, 299792458.0)

    def test_gps_frequencies(self):
        self.assertAlmostEqual(FREQ_L1, 1575.42e6)
        self.assertAlmostEqual(FREQ_L2, 1227.60e6)
        self.assertAlmostEqual(FREQ_L5, 1176.45e6)

    def test_glonass_frequencies(self):
        self.assertAlmostEqual(FREQ_G1, 1602.0e6)
        self.assertAlmostEqual(FREQ_G2, 1246.0e6)
        self.assertAlmostEqual(DFREQ_G1, 0.5625e6)

    def test_wgs84(self):
        self.assertEqual(RE_WGS84, 6378137.0)
        self.assertAlmostEqual(1.0 / FE_WGS84, 298.257223563)
        # one sidereal day
        self.assertAlmostEqual(2 * np.pi / OMGE, 86164.09, delta=0.01)

    def test_estimator_dimensions(self):
        self.assertEqual(NX, 8)
        self.assertEqual(MAXITR, 10)


class TestSatelliteNumbering(unittest.TestCase):
    """Test unified satellite numbers"""

    def test_prn2sat(self):
        self.assertEqual(prn2sat(1, SYS_GPS), 1)
        self.assertEqual(prn2sat(32, SYS_GPS), 32)
        self.assertEqual(prn2sat(1, SYS_GLO), 65)
        self.assertEqual(prn2sat(1, SYS_GAL), 97)
        self.assertEqual(prn2sat(1, SYS_BDS), 141)
        self.assertEqual(prn2sat(1, SYS_QZS), 210)
        self.assertEqual(prn2sat(120, SYS_SBS), 33)
        self.assertEqual(prn2sat(14, SYS_IRN), MAXSAT)

    def test_invalid_prn(self):
        self.assertEqual(prn2sat(33, SYS_GPS), 0)
        self.assertEqual(prn2sat(1, SYS_NONE), 0)

    def test_sat2sys(self):
        self.assertEqual(sat2sys(5), SYS_GPS)
        self.assertEqual(sat2sys(70), SYS_GLO)
        self.assertEqual(sat2sys(100), SYS_GAL)
        self.assertEqual(sat2sys(150), SYS_BDS)
        self.assertEqual(sat2sys(211), SYS_QZS)
        self.assertEqual(sat2sys(40), SYS_SBS)
        self.assertEqual(sat2sys(231), SYS_IRN)
        self.assertEqual(sat2sys(0), SYS_NONE)
        self.assertEqual(sat2sys(300), SYS_NONE)

    def test_round_trip_all_systems(self):
        for sys in (SYS_GPS, SYS_GLO, SYS_GAL, SYS_BDS, SYS_QZS, SYS_IRN):
            sat = prn2sat(3, sys)
            self.assertEqual(sat2sys(sat), sys)
            self.assertEqual(sat2prn(sat), 3)

    def test_system_chars(self):
        self.assertEqual(sys2char(SYS_GAL), 'E')
        self.assertEqual(char2sys('c'), SYS_BDS)
        self.assertEqual(char2sys('X'), 0)

    def test_satellite_ids(self):
        self.assertEqual(sat2id(5), 'G05')
        self.assertEqual(sat2id(97 + 10), 'E11')
        self.assertEqual(sat2id(33), 'S20')
        self.assertEqual(id2sat('G05'), 5)
        self.assertEqual(id2sat('R01'), 65)
        self.assertEqual(id2sat('S20'), 33)
        self.assertEqual(id2sat('Z01'), 0)
        self.assertEqual(id2sat('G'), 0)
        self.assertEqual(sat2id(0), '')


if __name__ == '__main__':
    unittest.main()
