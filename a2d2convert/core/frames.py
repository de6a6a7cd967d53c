"""Sensor position names, file-name tokens and output frame identifiers."""

from enum import Enum
from types import MappingProxyType
from typing import Optional, Tuple

PARENT_FRAME = "chassis"
VEHICLE_FRAME = "wheels"


class SensorKind(Enum):
    """Sensor families present in the calibration."""
    CAMERA = "cameras"
    LIDAR = "lidars"


class SensorPosition(Enum):
    """Canonical mounting positions on the vehicle."""
    FRONT_CENTER = "front_center"
    FRONT_LEFT = "front_left"
    FRONT_RIGHT = "front_right"
    SIDE_LEFT = "side_left"
    SIDE_RIGHT = "side_right"
    REAR_CENTER = "rear_center"
    REAR_LEFT = "rear_left"
    REAR_RIGHT = "rear_right"

    @property
    def token(self) -> str:
        """Name used for this position in dataset file names."""
        return POSITION_TOKENS[self]


POSITION_TOKENS = MappingProxyType({
    position: position.value.replace("_", "") for position in SensorPosition
})

TOKEN_POSITIONS = MappingProxyType({
    token: position for position, token in POSITION_TOKENS.items()
})

# No cameras at the rear corners; no lidars at the sides or rear center
CAMERA_POSITIONS: Tuple[SensorPosition, ...] = tuple(
    p for p in SensorPosition
    if p not in (SensorPosition.REAR_LEFT, SensorPosition.REAR_RIGHT)
)
LIDAR_POSITIONS: Tuple[SensorPosition, ...] = tuple(
    p for p in SensorPosition
    if p not in (SensorPosition.SIDE_LEFT, SensorPosition.SIDE_RIGHT, SensorPosition.REAR_CENTER)
)


def positions_for(kind: SensorKind) -> Tuple[SensorPosition, ...]:
    if kind is SensorKind.CAMERA:
        return CAMERA_POSITIONS
    return LIDAR_POSITIONS


def tf_frame_name(kind: SensorKind, position: SensorPosition) -> str:
    """Frame identifier of a sensor, e.g. 'lidars_front_center'."""
    return f"{kind.value}_{position.value}"


def position_from_token(token: str) -> Optional[SensorPosition]:
    return TOKEN_POSITIONS.get(token)


def frame_from_filename(filename: str) -> Optional[str]:
    """
    Find the position token embedded in a dataset file name.

    Returns:
        The token if exactly one known token occurs in `filename`,
        otherwise None.
    """
    found = [token for token in POSITION_TOKENS.values() if token in filename]
    if len(found) != 1:
        return None
    return found[0]


def camera_name_from_lidar_name(basename: str) -> Optional[str]:
    """
    Name of the camera file paired with a lidar file.

    Example:
        >>> camera_name_from_lidar_name("20180807145028_lidar_frontcenter_000000091")
        '20180807145028_camera_frontcenter_000000091'
    """
    if "lidar" not in basename:
        return None
    return basename.replace("lidar", "camera", 1)
