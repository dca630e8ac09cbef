#!/usr/bin/env python3
"""Test suite for satellite geometry kernels"""

import unittest
import numpy as np
from pyspp.coordinate import ecef2llh, llh2ecef
from pyspp.core.constants import CLIGHT, D2R, OMGE
from pyspp.gnss.geometry import geodist, los_from_azel, satazel
from pyspp.gnss.simulation import ORBIT_RADIUS, satellite_at

RR = llh2ecef(np.array([35.0 * D2R, 139.0 * D2R, 50.0]))


class TestGeodist(unittest.TestCase):
    """Test geometric range with Sagnac correction"""

    def test_range_and_unit_vector(self):
        rs = RR + np.array([1.0e7, 1.5e7, 1.2e7])
        r, e = geodist(rs, RR)
        d = np.linalg.norm(rs - RR)
        sagnac = OMGE * (rs[0] * RR[1] - rs[1] * RR[0]) / CLIGHT
        self.assertAlmostEqual(r, d + sagnac, places=6)
        self.assertAlmostEqual(np.linalg.norm(e), 1.0)
        np.testing.assert_allclose(e, (rs - RR) / d)

    def test_satellite_inside_earth(self):
        r, _ = geodist(np.array([1.0e6, 0.0, 0.0]), RR)
        self.assertEqual(r, -1.0)


class TestAzimuthElevation(unittest.TestCase):
    """Test azimuth/elevation and line-of-sight"""

    def test_zenith(self):
        pos = ecef2llh(RR)
        up = np.array([np.cos(pos[0]) * np.cos(pos[1]),
                       np.cos(pos[0]) * np.sin(pos[1]),
                       np.sin(pos[0])])
        az, el = satazel(pos, up)
        self.assertAlmostEqual(el, np.pi / 2, places=9)

    def test_uninitialized_receiver(self):
        az, el = satazel(ecef2llh(np.zeros(3)), np.array([1.0, 0.0, 0.0]))
        self.assertEqual(az, 0.0)
        self.assertEqual(el, np.pi / 2)

    def test_los_round_trip(self):
        pos = ecef2llh(RR)
        for az_deg, el_deg in [(10.0, 45.0), (123.0, 10.0), (250.0, 70.0), (359.0, 5.0)]:
            e = los_from_azel(pos, az_deg * D2R, el_deg * D2R)
            az, el = satazel(pos, e)
            self.assertAlmostEqual(az, az_deg * D2R, places=9)
            self.assertAlmostEqual(el, el_deg * D2R, places=9)

    def test_satellite_placement(self):
        rs, vs = satellite_at(RR, 60.0 * D2R, 35.0 * D2R)
        self.assertAlmostEqual(np.linalg.norm(rs), ORBIT_RADIUS, delta=1e-3)
        self.assertAlmostEqual(np.dot(rs, vs), 0.0, delta=1e-3 * np.linalg.norm(rs))
        _, e = geodist(rs, RR)
        az, el = satazel(ecef2llh(RR), e)
        self.assertAlmostEqual(el, 35.0 * D2R, places=9)
        self.assertAlmostEqual(az, 60.0 * D2R, places=9)


if __name__ == '__main__':
    unittest.main()
