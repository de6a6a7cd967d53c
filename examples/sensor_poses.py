#!/usr/bin/env python3
"""Print the sensor poses of a calibration file."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np

from a2d2convert.calibration import SensorCalibration


def main():
    parser = argparse.ArgumentParser(description="Show sensor poses from a calibration")
    parser.add_argument("config", type=str, help="Vehicle/sensor config JSON (cams_lidars.json)")
    parser.add_argument("--schema", "-s", type=str, default=None,
                        help="Schema for the config (default: packaged schema)")
    args = parser.parse_args()

    calib = SensorCalibration.from_files(args.config, args.schema)

    box = calib.ego_box().unwrap()
    print(f"Ego box: {box.dimensions[0]:.2f} x {box.dimensions[1]:.2f} x {box.dimensions[2]:.2f} m")

    np.set_printoptions(precision=3, suppress=True)
    for t in calib.transform_tree().unwrap():
        qx, qy, qz, qw = t.transform.quaternion
        print(f"  {t.parent:>8} -> {t.child:<22} | t={t.transform.translation} "
              f"| q=({qx:.3f}, {qy:.3f}, {qz:.3f}, {qw:.3f})")


if __name__ == "__main__":
    main()
