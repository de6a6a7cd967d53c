"""Vehicle and sensor calibration."""

from .loader import (
    SensorCalibration,
    FrameTransform,
    check_schema,
    default_schema_path,
    load_json,
    parse_json,
    read_text,
)

__all__ = [
    "SensorCalibration",
    "FrameTransform",
    "check_schema",
    "default_schema_path",
    "load_json",
    "parse_json",
    "read_text",
]
