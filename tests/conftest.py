"""Shared fixtures for a2d2convert tests."""

import copy
import json

import numpy as np
import pytest

BASE_US = 1_533_651_000_000_000


def make_dataset(n: int = 3) -> dict:
    """A valid lidar dataset with `n` points."""
    return {
        "pcloud_points": np.arange(n * 3, dtype=np.float64).reshape(n, 3),
        "pcloud_attr.azimuth": np.linspace(0.0, 1.0, n),
        "pcloud_attr.boundary": np.zeros(n, dtype=bool),
        "pcloud_attr.col": np.arange(n, dtype=np.float64),
        "pcloud_attr.depth": np.full(n, 5.0),
        "pcloud_attr.distance": np.full(n, 6.0),
        "pcloud_attr.lidar_id": np.arange(n, dtype=np.int64) % 5,
        "pcloud_attr.rectime": np.full(n, BASE_US, dtype=np.int64),
        "pcloud_attr.reflectance": np.arange(n, dtype=np.int64) * 10,
        "pcloud_attr.row": np.arange(n, dtype=np.float64) + 0.5,
        "pcloud_attr.timestamp": BASE_US + np.arange(n, dtype=np.int64) * 10,
        "pcloud_attr.valid": np.ones(n, dtype=bool),
    }


def _sensor(origin, x_axis=(1.0, 0.0, 0.0), y_axis=(0.0, 1.0, 0.0)) -> dict:
    return {"view": {"origin": list(origin), "x-axis": list(x_axis), "y-axis": list(y_axis)}}


CALIBRATION = {
    "vehicle": {
        "ego-dimensions": {
            "x-range": [-1.0, 3.5],
            "y-range": [-1.0, 1.0],
            "z-range": [-0.5, 1.5],
        }
    },
    "cameras": {
        "front_center": _sensor((1.7, 0.0, 1.4)),
        "front_left": _sensor((1.5, 0.5, 1.4), (0.0, 1.0, 0.0), (-1.0, 0.0, 0.0)),
        "front_right": _sensor((1.5, -0.5, 1.4)),
        "side_left": _sensor((0.5, 0.9, 1.0)),
        "side_right": _sensor((0.5, -0.9, 1.0)),
        "rear_center": _sensor((-0.9, 0.0, 1.0)),
    },
    "lidars": {
        "front_center": _sensor((1.7, 0.0, 1.5)),
        "front_left": _sensor((1.6, 0.7, 1.5)),
        "front_right": _sensor((1.6, -0.7, 1.5)),
        "rear_left": _sensor((-0.9, 0.7, 1.5)),
        "rear_right": _sensor((-0.9, -0.7, 1.5)),
    },
}


@pytest.fixture
def dataset():
    return make_dataset(3)


@pytest.fixture
def calibration_doc():
    return copy.deepcopy(CALIBRATION)


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document to a file in tmp_path and return the path."""
    def _write(document, name="config.json"):
        path = tmp_path / name
        path.write_text(json.dumps(document))
        return path
    return _write
