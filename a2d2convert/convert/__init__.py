"""Conversion drivers."""

from .lidar import convert_lidar_file, convert_lidar_files
from .bus import convert_bus_file
from .transforms import convert_transforms, publish_instants, write_transform_stream

__all__ = [
    "convert_lidar_file",
    "convert_lidar_files",
    "convert_bus_file",
    "convert_transforms",
    "publish_instants",
    "write_transform_stream",
]
