"""Periodic transform tree and ego shape output."""

from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple
import logging

from ..calibration import FrameTransform, SensorCalibration
from ..core.config import ConversionConfig, generate_filename
from ..core.timestamp import ONE_MILLION, OutputTime, to_microseconds, to_output_time
from ..storage import RecordReader, RecordWriter

logger = logging.getLogger(__name__)


def publish_instants(begin_us: int, end_us: int, frequency: float) -> Iterator[int]:
    """Instants in [begin_us, end_us) spaced 1/frequency seconds apart."""
    if not frequency > 0.0:
        raise ValueError(f"Frequency must be > 0. Value given: {frequency}.")
    step = int(round(ONE_MILLION / frequency))
    if step < 1:
        raise ValueError(f"Frequency {frequency} Hz is finer than one microsecond.")
    return iter(range(begin_us, end_us, step))


def write_transform_stream(
    writer: RecordWriter,
    tree: Sequence[FrameTransform],
    box_dimensions: Tuple[float, float, float],
    begin: OutputTime,
    end: OutputTime,
    config: ConversionConfig,
) -> int:
    """
    Write the transform tree and ego box at a fixed cadence.

    Returns:
        Number of instants written
    """
    count = 0
    for t in publish_instants(to_microseconds(begin), to_microseconds(end), config.tf_frequency):
        stamp = to_output_time(t)
        writer.write_transforms(config.tf_topic, stamp, tree)
        writer.write_box(config.ego_shape_topic, stamp, box_dimensions)
        count += 1
    return count


def convert_transforms(
    config_path,
    reference_path,
    config: ConversionConfig,
    schema_path=None,
    output: Optional[str] = None,
) -> Path:
    """
    Build the sensor transform tree from a calibration file and write it
    over the time span of a reference recording.

    Args:
        config_path: Vehicle/sensor calibration JSON
        reference_path: Converted recording whose time span is covered
        config: Conversion settings
        schema_path: Calibration schema (packaged schema if None)
        output: Output file (default: <output_path>/<reference stem>_tf.h5)

    Returns:
        Path of the written file
    """
    config.validate()

    calibration = SensorCalibration.from_files(config_path, schema_path, epsilon=config.epsilon)
    box = calibration.ego_box().unwrap()
    tree = calibration.transform_tree().unwrap()

    with RecordReader(reference_path) as reader:
        begin, end = reader.time_span()
    if begin is None:
        raise ValueError(f"Reference recording {reference_path} has no messages")

    if output is None:
        output = str(Path(config.output_path) / generate_filename(str(reference_path)))

    with RecordWriter(output, compression=config.compression) as writer:
        writer.set_metadata({"reference": str(reference_path), "tf_frequency": config.tf_frequency})
        count = write_transform_stream(writer, tree, box.dimensions, begin, end, config)

    if count == 0:
        logger.warning(f"Reference recording {reference_path} spans a single instant, no transforms written")

    logger.info(f"Wrote {count} transform snapshots of {len(tree)} frames to {output}")
    return Path(output)
