"""Core components: timestamps, geometry, frames, dataset validation, records."""

from .errors import (
    ConversionError,
    ConfigIOError,
    ConfigParseError,
    SchemaViolationError,
    GeometryError,
    BoundingBoxError,
    DatasetError,
    DatasetStructureError,
    DatasetSignError,
    DatasetTimestampRangeError,
    Outcome,
)
from .timestamp import OutputTime, to_output_time, is_representable, to_microseconds
from .geometry import (
    RigidTransform,
    BoundingBox,
    build_basis,
    basis_is_valid,
    compose_transform,
    validate_bounding_box,
    box_dimensions,
)
from .frames import SensorKind, SensorPosition, tf_frame_name
from .dataset import Field, FieldTable, validate_dataset
from .records import PointRecord, PointRecordIterator, POINT_DTYPE, pack_records
from .signals import TimestampedValue, Unit, BusSignal, merge_values
from .config import ConversionConfig

__all__ = [
    "ConversionError",
    "ConfigIOError",
    "ConfigParseError",
    "SchemaViolationError",
    "GeometryError",
    "BoundingBoxError",
    "DatasetError",
    "DatasetStructureError",
    "DatasetSignError",
    "DatasetTimestampRangeError",
    "Outcome",
    "OutputTime",
    "to_output_time",
    "is_representable",
    "to_microseconds",
    "RigidTransform",
    "BoundingBox",
    "build_basis",
    "basis_is_valid",
    "compose_transform",
    "validate_bounding_box",
    "box_dimensions",
    "SensorKind",
    "SensorPosition",
    "tf_frame_name",
    "Field",
    "FieldTable",
    "validate_dataset",
    "PointRecord",
    "PointRecordIterator",
    "POINT_DTYPE",
    "pack_records",
    "TimestampedValue",
    "Unit",
    "BusSignal",
    "merge_values",
    "ConversionConfig",
]
