import unittest
import numpy as np
from pyspp.coordinate.transforms import (
    covecef2enu, ecef2enu, ecef2llh, llh2ecef, xyz2enu
)
from pyspp.core.constants import RE_WGS84


class TestCoordinateTransforms(unittest.TestCase):

    def setUp(self):
        self.tokyo_llh = np.array([np.radians(35.6762), np.radians(139.6503), 40.0])
        self.newyork_llh = np.array([np.radians(40.7128), np.radians(-74.0060), 10.0])
        self.equator_llh = np.array([0.0, 0.0, 0.0])
        self.pole_llh = np.array([np.radians(90.0), 0.0, 0.0])

    def test_llh2ecef_ecef2llh_round_trip(self):
        test_points = [
            self.tokyo_llh,
            self.newyork_llh,
            self.equator_llh,
            self.pole_llh,
            np.array([np.radians(-35.0), np.radians(150.0), 100.0]),
            np.array([np.radians(10.0), np.radians(20.0), -80.0]),
        ]
        for llh in test_points:
            back = ecef2llh(llh2ecef(llh))
            self.assertAlmostEqual(back[0], llh[0], places=9)
            self.assertAlmostEqual(back[1], llh[1], places=9)
            self.assertAlmostEqual(back[2], llh[2], places=3)

    def test_equator(self):
        xyz = llh2ecef(self.equator_llh)
        np.testing.assert_allclose(xyz, [RE_WGS84, 0.0, 0.0], atol=1e-6)

    def test_geocenter_marks_uninitialized(self):
        llh = ecef2llh(np.zeros(3))
        self.assertAlmostEqual(llh[0], -np.pi / 2)
        self.assertAlmostEqual(llh[2], -RE_WGS84)

    def test_rotation_is_orthonormal(self):
        E = xyz2enu(self.tokyo_llh)
        np.testing.assert_allclose(E @ E.T, np.eye(3), atol=1e-12)

    def test_ecef2enu_up(self):
        up = llh2ecef(self.tokyo_llh + np.array([0.0, 0.0, 100.0]))
        enu = ecef2enu(up, self.tokyo_llh)
        np.testing.assert_allclose(enu, [0.0, 0.0, 100.0], atol=1e-6)

    def test_covariance_rotation_preserves_trace(self):
        P = np.array([[4.0, 1.0, 0.5], [1.0, 3.0, 0.2], [0.5, 0.2, 2.0]])
        P_enu = covecef2enu(self.newyork_llh, P)
        self.assertAlmostEqual(np.trace(P_enu), np.trace(P))
        np.testing.assert_allclose(P_enu, P_enu.T, atol=1e-12)


if __name__ == '__main__':
    unittest.main()
