#!/usr/bin/env python3
"""
Basic Single Point Positioning (SPP) Example using pyspp

This example demonstrates:
1. Generating noiseless multi-GNSS epochs of a moving receiver
2. Solving position, clock and inter-system offsets epoch by epoch
3. Excluding a faulty pseudorange with RAIM
4. Exporting satellite status and corrected measurements with pandas
"""

import argparse

import numpy as np
import pandas as pd

from pyspp.coordinate import ecef2llh, llh2ecef
from pyspp.core.constants import CLIGHT, D2R, R2D, SYS_GAL, SYS_GLO, SYS_GPS, prn2sat
from pyspp.core.options import ProcessingOptions, load_options
from pyspp.core.time import time_str
from pyspp.gnss import (
    corrected_measurements, measurements_frame, satellite_status_frame,
    single_point_positioning, synthesize_epoch
)
from pyspp.gnss.simulation import DEFAULT_TIME
from pyspp.logger import setup_logger

# receiver start point near Tokyo
START_LLH = np.array([35.68 * D2R, 139.76 * D2R, 40.0])
VELOCITY = np.array([5.0, -3.0, 0.5])

SKY = [
    (prn2sat(3, SYS_GPS), 30.0, 65.0),
    (prn2sat(7, SYS_GPS), 95.0, 40.0),
    (prn2sat(12, SYS_GPS), 160.0, 25.0),
    (prn2sat(17, SYS_GPS), 220.0, 55.0),
    (prn2sat(22, SYS_GPS), 290.0, 35.0),
    (prn2sat(30, SYS_GPS), 340.0, 18.0),
    (prn2sat(5, SYS_GAL), 60.0, 50.0),
    (prn2sat(11, SYS_GAL), 200.0, 30.0),
    (prn2sat(24, SYS_GAL), 310.0, 70.0),
    (prn2sat(2, SYS_GLO), 120.0, 60.0),
    (prn2sat(9, SYS_GLO), 250.0, 45.0),
]


def process_epochs(opt, n_epochs=10, fault_epoch=5):
    """
    Process synthetic epochs and collect solutions

    Parameters
    ----------
    opt : ProcessingOptions
        Processing options
    n_epochs : int
        Number of 1 Hz epochs
    fault_epoch : int
        Epoch whose lowest satellite gets a 60 m pseudorange error

    Returns
    -------
    results : pd.DataFrame
        One row per epoch
    """
    logger = setup_logger(level="INFO")
    rr0 = llh2ecef(START_LLH)
    isb = {SYS_GAL: 12.0, SYS_GLO: -25.0}

    rows = []
    solution = None
    for k in range(n_epochs):
        t = DEFAULT_TIME + k
        truth = rr0 + VELOCITY * k
        faults = {SKY[5][0]: 60.0} if k == fault_epoch else None
        epoch = synthesize_epoch(truth, SKY, time=t, clock=150.0 + 0.2 * k, isb=isb,
                                 vel=VELOCITY, drift=0.2, faults=faults, opt=opt)

        result = single_point_positioning(epoch.obs, epoch.nav, opt, epoch.states, solution)
        if not result.ok:
            logger.warning(f"{time_str(t)}: {result.message}")
            continue
        solution = result.solution

        llh = ecef2llh(solution.rr)
        rows.append({
            'time': time_str(t),
            'lat_deg': llh[0] * R2D,
            'lon_deg': llh[1] * R2D,
            'height': llh[2],
            'error': np.linalg.norm(solution.rr - truth),
            'speed': np.linalg.norm(solution.vv),
            'clock': solution.dtr[0] * CLIGHT,
            'ns': solution.ns,
            'excluded': result.excluded_sat,
        })

        if k == fault_epoch:
            logger.info("Satellite status:\n%s", satellite_status_frame(result.satellites))
            records = corrected_measurements(epoch.obs, epoch.states, epoch.nav, opt,
                                             solution, result.azel)
            frame = measurements_frame(records)
            logger.info("Corrected measurements:\n%s",
                        frame[['sat', 'system', 'elevation', 'pseudorange', 'iono', 'tropo']])

    return pd.DataFrame(rows)


def main():
    parser = argparse.ArgumentParser(description="Single point positioning on synthetic data")
    parser.add_argument('--config', help="YAML/JSON processing options")
    parser.add_argument('--epochs', type=int, default=10)
    parser.add_argument('--output', help="CSV file for the solutions")
    args = parser.parse_args()

    if args.config:
        opt = load_options(args.config)
    else:
        opt = ProcessingOptions(raim=True)

    results = process_epochs(opt, args.epochs)
    print(results.to_string(index=False))

    if args.output:
        results.to_csv(args.output, index=False)
        print(f"Saved {len(results)} epochs to {args.output}")


if __name__ == '__main__':
    main()
