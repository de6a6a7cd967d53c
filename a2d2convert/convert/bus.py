"""Vehicle bus signal conversion."""

from typing import Dict
import logging

from ..calibration import load_json
from ..core.config import ConversionConfig
from ..core.errors import DatasetTimestampRangeError
from ..core.frames import PARENT_FRAME
from ..core.signals import BusSignal, decode_bus_signals, merge_values
from ..core.timestamp import is_representable
from ..storage import RecordWriter

logger = logging.getLogger(__name__)


def check_signal_range(signal: BusSignal) -> None:
    """Raise DatasetTimestampRangeError for the first unrepresentable sample."""
    for i, us in enumerate(signal.timestamps_us):
        if not is_representable(us):
            raise DatasetTimestampRangeError(
                f"Timestamp {us} of signal '{signal.name}' has unsupported magnitude",
                field=signal.name,
                index=i,
                value=us,
            )


def convert_bus_file(
    path,
    writer: RecordWriter,
    config: ConversionConfig,
    frame_id: str = PARENT_FRAME,
) -> Dict[str, int]:
    """
    Write every signal of a bus signal file to its own topic, in time order.

    Returns:
        Dict of signal name to number of samples written
    """
    signals = decode_bus_signals(load_json(path), frame_id)

    counts = {}
    for name, signal in signals.items():
        check_signal_range(signal)
        writer.write_values(config.bus_topic(name), merge_values(signal.values), unit=signal.unit.value)
        counts[name] = len(signal)
        logger.debug(f"{name}: {len(signal)} samples ({signal.unit.value})")

    logger.info(f"Converted {len(signals)} bus signals from {path}")
    return counts
