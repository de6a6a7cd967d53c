"""Lidar `.npz` to point cloud topic conversion."""

from pathlib import Path
from typing import Iterable
import logging

from ..core.config import ConversionConfig, parse_filename
from ..core.dataset import Field, any_points_invalid, validate_dataset
from ..core.frames import SensorKind, frame_from_filename, position_from_token, tf_frame_name
from ..core.records import PointRecordIterator, pack_records
from ..core.timestamp import to_output_time
from ..storage import RecordWriter, load_dataset

logger = logging.getLogger(__name__)


def convert_lidar_file(path, writer: RecordWriter, config: ConversionConfig) -> int:
    """
    Validate one lidar file and write it as a single point cloud.

    The cloud is stamped with the earliest point timestamp.

    Returns:
        Number of points written
    """
    path = Path(path)
    parsed = parse_filename(path.name)
    position = parsed["position"]
    if position is None:
        token = frame_from_filename(path.name)
        if token is None:
            raise ValueError(f"Cannot determine sensor position from file name '{path.name}'")
        position = position_from_token(token)

    table = validate_dataset(load_dataset(path)).unwrap()
    if table.num_points == 0:
        logger.warning(f"{path.name} has no points, skipping")
        return 0
    if any_points_invalid(table):
        logger.debug(f"{path.name} contains points flagged invalid")

    points = pack_records(PointRecordIterator(table))
    stamp = to_output_time(int(table[Field.TIMESTAMP].min()))

    writer.write_point_cloud(
        config.lidar_topic(position.value),
        tf_frame_name(SensorKind.LIDAR, position),
        stamp,
        points,
    )
    logger.debug(f"{path.name}: frame {parsed['sequence']}, {table.num_points} points at {stamp}")
    return table.num_points


def convert_lidar_files(paths: Iterable, writer: RecordWriter, config: ConversionConfig) -> int:
    """Convert lidar files in the given order. Returns the total point count."""
    total = 0
    for count, path in enumerate(paths, start=1):
        total += convert_lidar_file(path, writer, config)
        if count % 100 == 0:
            logger.info(f"Converted {count} lidar files")
    return total
