"""a2d2convert - Validated conversion of A2D2 sensor recordings."""

__version__ = "0.1.0"

from .core import (
    ConversionError,
    OutputTime,
    to_output_time,
    is_representable,
    RigidTransform,
    BoundingBox,
    build_basis,
    compose_transform,
    SensorKind,
    SensorPosition,
    Field,
    validate_dataset,
    PointRecord,
    PointRecordIterator,
    TimestampedValue,
    ConversionConfig,
)

from .calibration import SensorCalibration

from .storage import (
    RecordWriter,
    RecordReader,
)

__all__ = [
    "ConversionError",
    "OutputTime",
    "to_output_time",
    "is_representable",
    "RigidTransform",
    "BoundingBox",
    "build_basis",
    "compose_transform",
    "SensorKind",
    "SensorPosition",
    "Field",
    "validate_dataset",
    "PointRecord",
    "PointRecordIterator",
    "TimestampedValue",
    "ConversionConfig",
    "SensorCalibration",
    "RecordWriter",
    "RecordReader",
]
