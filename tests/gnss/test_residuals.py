#!/usr/bin/env python3
"""Test suite for pseudorange residuals and satellite eligibility"""

import unittest
import numpy as np
from pyspp.coordinate import llh2ecef
from pyspp.core.constants import (
    D2R, MAX_VAR_EPH, NX, SYS_GAL, SYS_GLO, SYS_GPS, SYS_QZS, VAR_ISB_CONSTRAINT, prn2sat
)
from pyspp.core.data_structures import Observation, SatelliteState
from pyspp.core.options import ProcessingOptions, SnrMask
from pyspp.core.results import SatelliteRejection
from pyspp.gnss.ephemeris import EphemerisProvider, satellite_states, satexclude
from pyspp.gnss.residuals import CLOCK_COLUMNS, ISB_COLUMNS, REF_CLOCK, rescode
from pyspp.gnss.simulation import synthesize_epoch

RR = llh2ecef(np.array([35.0 * D2R, 139.0 * D2R, 50.0]))
G = [prn2sat(p, SYS_GPS) for p in range(1, 9)]
E = [prn2sat(p, SYS_GAL) for p in range(1, 5)]


def _state_vector(epoch):
    x = np.zeros(NX)
    x[:3] = epoch.rr
    x[REF_CLOCK] = epoch.clock
    for sys, value in epoch.isb.items():
        x[ISB_COLUMNS[sys]] = value
    return x


class TestRescode(unittest.TestCase):
    """Test residual rows, design matrix and constraints"""

    def setUp(self):
        self.opt = ProcessingOptions()
        sats = [(G[0], 10.0, 70.0), (G[1], 100.0, 40.0), (G[2], 200.0, 35.0),
                (G[3], 300.0, 50.0), (E[0], 50.0, 30.0), (E[1], 250.0, 60.0)]
        self.epoch = synthesize_epoch(RR, sats, clock=150.0, isb={SYS_GAL: 12.0},
                                      opt=self.opt)

    def test_residuals_vanish_at_truth(self):
        res = rescode(1, self.epoch.obs, self.epoch.states, self.epoch.nav,
                      _state_vector(self.epoch), self.opt)
        self.assertEqual(res.ns, 6)
        self.assertTrue(np.all(res.vsat))
        np.testing.assert_allclose(res.resp, 0.0, atol=1e-6)

    def test_design_matrix_and_constraints(self):
        res = rescode(1, self.epoch.obs, self.epoch.states, self.epoch.nav,
                      _state_vector(self.epoch), self.opt)
        # 6 satellites + GLO, BDS, IRN constraint rows
        self.assertEqual(res.nv, 9)
        self.assertEqual(res.H.shape, (9, NX))
        np.testing.assert_allclose(np.linalg.norm(res.H[:6, :3], axis=1), 1.0)
        np.testing.assert_array_equal(res.H[:6, REF_CLOCK], 1.0)
        np.testing.assert_array_equal(res.H[:4, ISB_COLUMNS[SYS_GAL]], 0.0)
        np.testing.assert_array_equal(res.H[4:6, ISB_COLUMNS[SYS_GAL]], 1.0)

        constraint_cols = [int(np.argmax(h)) for h in res.H[6:]]
        self.assertEqual(constraint_cols, [ISB_COLUMNS[SYS_GLO], 6, 7])
        np.testing.assert_array_equal(res.v[6:], 0.0)
        np.testing.assert_array_equal(res.var[6:], VAR_ISB_CONSTRAINT)

    def test_galileo_only_pins_reference_clock(self):
        sats = [(E[0], 0.0, 60.0), (E[1], 90.0, 45.0), (E[2], 180.0, 50.0),
                (E[3], 270.0, 40.0)]
        epoch = synthesize_epoch(RR, sats, opt=self.opt)
        res = rescode(1, epoch.obs, epoch.states, epoch.nav, _state_vector(epoch), self.opt)
        constraint_cols = sorted(int(np.argmax(h)) for h in res.H[4:])
        self.assertEqual(constraint_cols, [c for c in CLOCK_COLUMNS if c != ISB_COLUMNS[SYS_GAL]])

    def test_masks_only_after_first_iteration(self):
        sats = [(G[0], 10.0, 70.0), (G[1], 100.0, 8.0)]
        epoch = synthesize_epoch(RR, sats, opt=self.opt)
        x = _state_vector(epoch)
        first = rescode(0, epoch.obs, epoch.states, epoch.nav, x, self.opt)
        later = rescode(1, epoch.obs, epoch.states, epoch.nav, x, self.opt)
        self.assertTrue(first.vsat[1])
        self.assertFalse(later.vsat[1])
        self.assertEqual(later.rejections[1], SatelliteRejection.ELEVATION_MASK)
        # angles are reported even for masked satellites
        self.assertAlmostEqual(later.azel[1, 1], 8.0 * D2R, places=6)

    def test_snr_mask(self):
        opt = self.opt.updated(snrmask=SnrMask(enabled=True, mask=[[50.0] * 9, [0.0] * 9]))
        res = rescode(1, self.epoch.obs, self.epoch.states, self.epoch.nav,
                      _state_vector(self.epoch), opt)
        self.assertEqual(res.ns, 0)
        self.assertTrue(all(r == SatelliteRejection.SNR_MASK for r in res.rejections))

    def test_duplicate_observation(self):
        obs = list(self.epoch.obs)
        states = list(self.epoch.states)
        obs.insert(1, obs[0])
        states.insert(1, states[0])
        with self.assertLogs('pyspp.gnss.residuals', level='WARNING') as logs:
            res = rescode(1, obs, states, self.epoch.nav, _state_vector(self.epoch), self.opt)
        self.assertIn('duplicated observation', logs.output[0])
        self.assertFalse(res.vsat[0])
        self.assertFalse(res.vsat[1])
        self.assertEqual(res.rejections[0], SatelliteRejection.DUPLICATE)
        self.assertEqual(res.rejections[1], SatelliteRejection.DUPLICATE)
        self.assertTrue(res.vsat[2])
        self.assertEqual(res.ns, 5)

    def test_duplicate_pair_does_not_hide_next_satellite(self):
        obs = list(self.epoch.obs)
        states = list(self.epoch.states)
        obs.insert(2, obs[1])
        states.insert(2, states[1])
        with self.assertLogs('pyspp.gnss.residuals', level='WARNING'):
            res = rescode(1, obs, states, self.epoch.nav, _state_vector(self.epoch), self.opt)
        np.testing.assert_array_equal(res.vsat, [True, False, False, True, True, True, True])
        self.assertIsNone(res.rejections[3])

    def test_excluded_and_missing_ephemeris(self):
        states = list(self.epoch.states)
        states[2] = SatelliteState.missing()
        opt = self.opt.updated(exsats={G[1]})
        res = rescode(1, self.epoch.obs, states, self.epoch.nav,
                      _state_vector(self.epoch), opt)
        self.assertEqual(res.rejections[1], SatelliteRejection.EXCLUDED)
        self.assertEqual(res.rejections[2], SatelliteRejection.EXCLUDED)
        self.assertEqual(res.ns, 4)

    def test_missing_pseudorange(self):
        obs = list(self.epoch.obs)
        o = obs[3]
        obs[3] = Observation(time=o.time, sat=o.sat, P=[0.0, 0.0], code=o.code)
        res = rescode(1, obs, self.epoch.states, self.epoch.nav,
                      _state_vector(self.epoch), self.opt)
        self.assertEqual(res.rejections[3], SatelliteRejection.NO_PSEUDORANGE)


class TestSatelliteEligibility(unittest.TestCase):
    """Test satellite exclusion policy"""

    def setUp(self):
        self.opt = ProcessingOptions()

    def test_healthy(self):
        self.assertFalse(satexclude(G[0], 1.0, 0, self.opt))

    def test_no_ephemeris(self):
        self.assertTrue(satexclude(G[0], 1.0, -1, self.opt))
        self.assertTrue(satexclude(G[0], 1.0, -1, self.opt.updated(incsats={G[0]})))

    def test_unhealthy_unless_included(self):
        self.assertTrue(satexclude(G[0], 1.0, 1, self.opt))
        self.assertFalse(satexclude(G[0], 1.0, 1, self.opt.updated(incsats={G[0]})))

    def test_system_disabled(self):
        self.assertTrue(satexclude(E[0], 1.0, 0, self.opt.updated(navsys=SYS_GPS)))

    def test_qzss_lex_health_ignored(self):
        qzs = prn2sat(1, SYS_QZS)
        self.assertFalse(satexclude(qzs, 1.0, 0x01, self.opt))
        self.assertTrue(satexclude(qzs, 1.0, 0x02, self.opt))

    def test_ephemeris_variance(self):
        self.assertTrue(satexclude(G[0], MAX_VAR_EPH * 1.01, 0, self.opt))


class FixedEphemeris(EphemerisProvider):
    """Ephemeris returning the states of a synthetic epoch"""

    def __init__(self, states):
        self.states = states
        self.requests = []

    def clock_bias(self, sat, time):
        return self.states[sat].dts if sat in self.states else None

    def satellite_state(self, sat, time):
        self.requests.append((sat, time))
        return self.states.get(sat)


class TestSatelliteStates(unittest.TestCase):
    """Test satellite state evaluation at transmission time"""

    def test_transmission_time(self):
        epoch = synthesize_epoch(RR, [(G[0], 0.0, 60.0), (G[1], 90.0, 45.0)])
        provider = FixedEphemeris({G[0]: epoch.states[0]})
        states = satellite_states(epoch.obs, provider)

        self.assertIs(states[0], epoch.states[0])
        self.assertEqual(states[1].svh, -1)
        sat, time = provider.requests[0]
        o = epoch.obs[0]
        expected = o.time - o.P[0] / 299792458.0 - epoch.states[0].dts
        self.assertAlmostEqual(time, expected, places=9)


if __name__ == '__main__':
    unittest.main()
