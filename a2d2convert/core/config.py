"""Conversion settings and naming utilities."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .frames import position_from_token

EPS = 1e-8


@dataclass
class ConversionConfig:
    """Settings shared by the conversion commands."""
    epsilon: float = EPS
    tf_frequency: float = 10.0
    output_path: str = "."
    namespace: str = "/a2d2"
    compression: Optional[str] = "gzip"
    verbose: bool = False

    def validate(self) -> None:
        if not self.tf_frequency > 0.0:
            raise ValueError(
                f"TF publish frequency must be > 0. Value given: {self.tf_frequency}."
            )
        if not self.epsilon > 0.0:
            raise ValueError(f"Epsilon must be > 0. Value given: {self.epsilon}.")

    def lidar_topic(self, position: str) -> str:
        return f"{self.namespace}/lidars/{position}/points"

    def bus_topic(self, signal: str) -> str:
        return f"{self.namespace}/bus/{signal}"

    @property
    def ego_shape_topic(self) -> str:
        return f"{self.namespace}/ego_shape"

    @property
    def tf_topic(self) -> str:
        return "/tf"


def generate_filename(reference: str, suffix: str = "_tf", extension: str = ".h5") -> str:
    """
    Output filename derived from a reference recording.

    Example:
        >>> generate_filename("/data/20180807_lidar.h5")
        '20180807_lidar_tf.h5'
    """
    return f"{Path(reference).stem}{suffix}{extension}"


def parse_filename(filename: str) -> dict:
    """
    Parse an A2D2 sensor filename.

    Args:
        filename: Name like 20180807145028_lidar_frontcenter_000000091.npz

    Returns:
        Dict with 'recording', 'sensor', 'token', 'position', 'sequence'
        (values are None when the name does not follow the pattern)
    """
    parts = Path(filename).stem.split("_")

    if len(parts) == 4 and parts[0].isdigit() and parts[3].isdigit():
        token = parts[2]
        position = position_from_token(token)
        return {
            "recording": parts[0],
            "sensor": parts[1],
            "token": token,
            "position": position,
            "sequence": int(parts[3]),
        }

    return {
        "recording": None,
        "sensor": None,
        "token": None,
        "position": None,
        "sequence": None,
    }
