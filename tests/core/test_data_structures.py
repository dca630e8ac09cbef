#!/usr/bin/env python3
"""Test suite for data structures"""

import unittest
import numpy as np
from pyspp.core.constants import CLIGHT, SOLQ_NONE, SYS_GAL, SYS_GPS, prn2sat
from pyspp.core.data_structures import (
    NavigationData, Observation, SatelliteState, Solution, empty_satellite_status
)
from pyspp.core.satellite_numbering import MAXSAT


class TestObservation(unittest.TestCase):
    """Test observation data structure"""

    def test_slots_are_padded(self):
        obs = Observation(time=100.0, sat=5, P=[2.1e7], code=('1C',))

        self.assertEqual(obs.P.shape, (2,))
        self.assertEqual(obs.P[0], 2.1e7)
        self.assertEqual(obs.P[1], 0.0)
        self.assertTrue(np.all(obs.L == 0.0))
        self.assertTrue(np.all(obs.D == 0.0))
        self.assertEqual(obs.code, ('1C', ''))

    def test_system_properties(self):
        obs = Observation(time=0.0, sat=prn2sat(11, SYS_GAL))
        self.assertEqual(obs.system, SYS_GAL)
        self.assertEqual(obs.prn, 11)
        self.assertEqual(obs.sat_id, 'E11')

    def test_immutable(self):
        obs = Observation(time=0.0, sat=1)
        with self.assertRaises(AttributeError):
            obs.sat = 2


class TestSatelliteState(unittest.TestCase):
    """Test satellite state"""

    def test_missing(self):
        st = SatelliteState.missing()
        self.assertEqual(st.svh, -1)
        self.assertTrue(np.all(st.rs == 0.0))

    def test_arrays(self):
        st = SatelliteState(rs=[1.0, 2.0, 3.0], dts=1e-4)
        self.assertIsInstance(st.rs, np.ndarray)
        self.assertEqual(st.vs.shape, (3,))
        self.assertEqual(st.svh, 0)


class TestNavigationData(unittest.TestCase):
    """Test navigation data lookups"""

    def test_tgd_in_meters(self):
        nav = NavigationData(tgd={5: [-1.0e-8]})
        self.assertAlmostEqual(nav.get_tgd(5), -1.0e-8 * CLIGHT)
        self.assertEqual(nav.get_tgd(5, 3), 0.0)
        self.assertEqual(nav.get_tgd(6), 0.0)

    def test_glonass_tgd_from_tau_n(self):
        sat = 65
        nav = NavigationData(dtaun={sat: 2.0e-9})
        self.assertAlmostEqual(nav.get_tgd(sat), -2.0e-9 * CLIGHT)

    def test_cbias(self):
        nav = NavigationData(cbias={3: [0.1, 0.2, 0.3]})
        self.assertEqual(nav.get_cbias(3, 1), 0.2)
        self.assertEqual(nav.get_cbias(4, 1), 0.0)


class TestSolution(unittest.TestCase):
    """Test solution data structure"""

    def test_defaults(self):
        sol = Solution(time=1000.0)
        self.assertEqual(sol.stat, SOLQ_NONE)
        self.assertEqual(sol.dtr.shape, (5,))
        self.assertEqual(sol.qr.shape, (3, 3))
        self.assertEqual(sol.ns, 0)

    def test_copy_is_deep(self):
        sol = Solution(time=0.0)
        sol.rr = np.array([1.0, 2.0, 3.0])
        other = sol.copy()
        other.rr[0] = 10.0
        self.assertEqual(sol.rr[0], 1.0)

    def test_enu_covariance(self):
        sol = Solution(time=0.0)
        sol.rr = np.array([6378137.0, 0.0, 0.0])
        sol.qr = np.diag([1.0, 2.0, 3.0])
        # at lat=lon=0 the up axis is ECEF x
        cov = sol.get_enu_cov()
        np.testing.assert_allclose(np.diag(cov), [2.0, 3.0, 1.0], atol=1e-9)


class TestSatelliteStatus(unittest.TestCase):

    def test_empty_slots(self):
        statuses = empty_satellite_status()
        self.assertEqual(len(statuses), MAXSAT)
        self.assertEqual(statuses[0].sat, 1)
        self.assertFalse(any(st.valid for st in statuses))


if __name__ == '__main__':
    unittest.main()
