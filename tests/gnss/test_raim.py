#!/usr/bin/env python3
"""Test suite for RAIM fault detection and exclusion"""

import unittest
from unittest.mock import patch
import numpy as np
from pyspp.coordinate import llh2ecef
from pyspp.core.constants import D2R, SYS_GAL, SYS_GPS, prn2sat
from pyspp.core.options import IonoOption, ProcessingOptions, TropOption
from pyspp.core.results import FailureReason
from pyspp.gnss.raim import RaimCandidate, raim_candidate, raim_fde
from pyspp.gnss.simulation import synthesize_epoch
from pyspp.gnss.spp import single_point_positioning

RR = llh2ecef(np.array([35.0 * D2R, 139.0 * D2R, 50.0]))
G = [prn2sat(p, SYS_GPS) for p in range(1, 9)]
E = [prn2sat(p, SYS_GAL) for p in range(1, 5)]

SKY = [(G[0], 0.0, 70.0), (G[1], 45.0, 50.0), (G[2], 100.0, 35.0), (G[3], 150.0, 60.0),
       (G[4], 200.0, 40.0), (G[5], 250.0, 30.0), (G[6], 300.0, 55.0), (G[7], 330.0, 12.0),
       (E[0], 20.0, 40.0), (E[1], 120.0, 50.0), (E[2], 220.0, 25.0), (E[3], 280.0, 65.0)]
FAULTY = G[7]


class TestRaim(unittest.TestCase):
    """Test leave-one-out exclusion of a faulty pseudorange"""

    def setUp(self):
        self.opt = ProcessingOptions(ionoopt=IonoOption.EST, tropopt=TropOption.OFF,
                                     elmin=5.0 * D2R, raim=True)
        self.epoch = synthesize_epoch(RR, SKY, clock=500.0, isb={SYS_GAL: 8.0},
                                      faults={FAULTY: 50.0}, opt=self.opt)

    def _solve(self, opt):
        return single_point_positioning(self.epoch.obs, self.epoch.nav, opt, self.epoch.states)

    def test_fault_excluded(self):
        result = self._solve(self.opt)

        self.assertTrue(result.ok, result.message)
        self.assertEqual(result.excluded_sat, FAULTY)
        self.assertLess(np.linalg.norm(result.solution.rr - RR), 1e-3)
        self.assertEqual(result.solution.ns, len(SKY) - 1)

        status = result.satellites[FAULTY - 1]
        self.assertFalse(status.valid)
        self.assertAlmostEqual(status.el, 12.0 * D2R, places=4)
        self.assertTrue(result.satellites[G[0] - 1].valid)

    def test_fault_detected_without_raim(self):
        result = self._solve(self.opt.updated(raim=False))

        self.assertFalse(result.ok)
        self.assertEqual(result.reason, FailureReason.CHI_SQUARE)
        self.assertTrue(result.message.startswith("chi-square error"))
        self.assertEqual(result.excluded_sat, 0)
        self.assertIsNotNone(result.solution)
        self.assertGreater(np.linalg.norm(result.solution.rr - RR), 1.0)

    def test_no_exclusion_on_clean_epoch(self):
        epoch = synthesize_epoch(RR, SKY, clock=500.0, opt=self.opt)
        result = single_point_positioning(epoch.obs, epoch.nav, self.opt, epoch.states)
        self.assertTrue(result.ok)
        self.assertEqual(result.excluded_sat, 0)

    def test_candidate(self):
        i = [sat for sat, _, _ in SKY].index(FAULTY)
        cand = raim_candidate(i, self.epoch.obs, self.epoch.states, self.epoch.nav, self.opt)

        self.assertIsNotNone(cand)
        self.assertEqual(cand.index, i)
        self.assertEqual(cand.sat, FAULTY)
        self.assertLess(cand.rms, 1e-3)
        self.assertFalse(cand.fix.vsat[i])
        self.assertEqual(len(cand.fix.vsat), len(SKY))
        self.assertEqual(np.count_nonzero(cand.fix.vsat), len(SKY) - 1)

    def test_fde(self):
        fde = raim_fde(self.epoch.obs, self.epoch.states, self.epoch.nav, self.opt)
        self.assertIsNotNone(fde)
        fix, sat = fde
        self.assertEqual(sat, FAULTY)
        self.assertTrue(fix.ok)

    def test_too_few_observations(self):
        epoch = synthesize_epoch(RR, SKY[:5], faults={G[0]: 50.0}, opt=self.opt)
        self.assertIsNone(raim_fde(epoch.obs, epoch.states, epoch.nav, self.opt))

    @patch('pyspp.gnss.raim.raim_candidate')
    def test_tie_keeps_first_observation(self, mock_candidate):
        obs = self.epoch.obs
        rms = [5.0, 2.0, None, 2.0, 3.0, 2.0] + [None] * (len(obs) - 6)

        def candidate(i, *args):
            if rms[i] is None:
                return None
            return RaimCandidate(i, obs[i].sat, 'fix-%d' % i, rms[i])

        mock_candidate.side_effect = candidate
        fix, sat = raim_fde(obs, self.epoch.states, self.epoch.nav, self.opt)

        self.assertEqual(mock_candidate.call_count, len(obs))
        self.assertEqual(fix, 'fix-1')
        self.assertEqual(sat, obs[1].sat)

    @patch('pyspp.gnss.raim.raim_candidate')
    def test_rms_limit(self, mock_candidate):
        obs = self.epoch.obs
        mock_candidate.side_effect = lambda i, *args: RaimCandidate(i, obs[i].sat, None, 100.0)
        self.assertIsNone(raim_fde(obs, self.epoch.states, self.epoch.nav, self.opt))


if __name__ == '__main__':
    unittest.main()
