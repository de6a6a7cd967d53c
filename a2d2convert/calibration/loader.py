"""Loading and validating the vehicle/sensor calibration document."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple
import json
import logging

import jsonschema
import numpy as np

from ..core.errors import (
    ConfigIOError,
    ConfigParseError,
    Outcome,
    SchemaViolationError,
)
from ..core.frames import (
    PARENT_FRAME,
    VEHICLE_FRAME,
    SensorKind,
    SensorPosition,
    positions_for,
    tf_frame_name,
)
from ..core.geometry import EPSILON, BoundingBox, RigidTransform, sensor_transform

logger = logging.getLogger(__name__)

SCHEMA_FILENAME = "sensor_config.schema.json"
MIN_IDX = 0
MAX_IDX = 1


def default_schema_path() -> Path:
    """Path of the schema shipped with the package."""
    return Path(__file__).with_name(SCHEMA_FILENAME)


def read_text(path) -> str:
    """Read a text file, returning an empty string on any I/O failure."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read {path}: {e}")
        return ""


def parse_json(text: str, source: str) -> Any:
    """Parse JSON text, reporting the byte offset of a syntax error."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        offset = len(e.doc[:e.pos].encode("utf-8"))
        raise ConfigParseError(source, offset, e.msg) from e


def load_json(path) -> Any:
    text = read_text(path)
    if not text:
        raise ConfigIOError(str(path))
    return parse_json(text, str(path))


def _pointer(path: Sequence) -> str:
    parts = [str(p).replace("~", "~0").replace("/", "~1") for p in path]
    return "#/" + "/".join(parts) if parts else "#"


def check_schema(document: Any, schema: Any) -> Optional[SchemaViolationError]:
    """
    Validate `document` against a JSON schema.

    Returns:
        None if the document conforms, otherwise a SchemaViolationError
        naming the schema pointer, keyword and document pointer.
    """
    validator_cls = jsonschema.validators.validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except jsonschema.exceptions.SchemaError as e:
        return SchemaViolationError(
            _pointer(e.schema_path), str(e.validator), "#", f"Schema is invalid: {e.message}"
        )

    error = jsonschema.exceptions.best_match(validator_cls(schema).iter_errors(document))
    if error is None:
        return None
    return SchemaViolationError(
        _pointer(error.schema_path),
        str(error.validator),
        _pointer(error.absolute_path),
        error.message,
    )


@dataclass(frozen=True)
class FrameTransform:
    """Transform of `child` expressed in `parent`."""
    parent: str
    child: str
    transform: RigidTransform


class SensorCalibration:
    """
    Sensor poses and ego vehicle box from a validated calibration document.

    Example:
        calib = SensorCalibration.from_files("cams_lidars.json")
        tree = calib.transform_tree().unwrap()
        box = calib.ego_box().unwrap()
    """

    def __init__(self, document: dict, epsilon: float = EPSILON):
        self._document = document
        self._epsilon = epsilon

    @classmethod
    def from_files(
        cls,
        config_path,
        schema_path=None,
        epsilon: float = EPSILON,
    ) -> "SensorCalibration":
        """Read, parse and schema-validate a calibration file."""
        if schema_path is None:
            schema_path = default_schema_path()

        document = load_json(config_path)
        schema = load_json(schema_path)

        error = check_schema(document, schema)
        if error is not None:
            raise error
        logger.info(f"Validated: {schema_path}")

        return cls(document, epsilon=epsilon)

    @property
    def document(self) -> dict:
        return self._document

    def _view(self, kind: SensorKind, position: SensorPosition) -> dict:
        return self._document[kind.value][position.value]["view"]

    def sensor_axes(
        self, kind: SensorKind, position: SensorPosition
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """(origin, x_axis, y_axis) of one sensor."""
        view = self._view(kind, position)
        return (
            np.array(view["origin"], dtype=np.float64),
            np.array(view["x-axis"], dtype=np.float64),
            np.array(view["y-axis"], dtype=np.float64),
        )

    def sensor_transform(self, kind: SensorKind, position: SensorPosition) -> Outcome[RigidTransform]:
        origin, x_axis, y_axis = self.sensor_axes(kind, position)
        label = f"{kind.value}::{position.value}"
        return sensor_transform(origin, x_axis, y_axis, label, self._epsilon)

    def transform_tree(self) -> Outcome[List[FrameTransform]]:
        """
        All sensor transforms relative to the chassis, plus the identity
        chassis transform relative to the wheels.
        """
        transforms = []
        for kind in (SensorKind.CAMERA, SensorKind.LIDAR):
            for position in positions_for(kind):
                outcome = self.sensor_transform(kind, position)
                if not outcome.ok:
                    return Outcome.failure(outcome.error)
                transforms.append(FrameTransform(
                    parent=PARENT_FRAME,
                    child=tf_frame_name(kind, position),
                    transform=outcome.value,
                ))

        transforms.append(FrameTransform(
            parent=VEHICLE_FRAME,
            child=PARENT_FRAME,
            transform=RigidTransform.identity(),
        ))
        return Outcome.success(transforms)

    def ego_box(self) -> Outcome[BoundingBox]:
        dims = self._document["vehicle"]["ego-dimensions"]
        x_range = dims["x-range"]
        y_range = dims["y-range"]
        z_range = dims["z-range"]
        box = BoundingBox(
            x_min=float(x_range[MIN_IDX]),
            x_max=float(x_range[MAX_IDX]),
            y_min=float(y_range[MIN_IDX]),
            y_max=float(y_range[MAX_IDX]),
            z_min=float(z_range[MIN_IDX]),
            z_max=float(z_range[MAX_IDX]),
        )
        return box.verified()
