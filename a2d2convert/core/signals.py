"""Timestamped scalar values and vehicle bus signal decoding."""

from dataclasses import dataclass, field
from enum import Enum
from itertools import chain
from typing import Any, Dict, Iterable, List, Mapping

from .timestamp import OutputTime, to_output_time


class Unit(Enum):
    """Units used by the vehicle bus signal recordings."""
    NULL = "null"
    BAR = "Unit_Bar"
    PERCENT = "Unit_PerCent"
    DEGREE_OF_ARC = "Unit_DegreOfArc"
    KILOMETER_PER_HOUR = "Unit_KiloMeterPerHour"
    METER_PER_SECOND_SQUARED = "Unit_MeterPerSeconSquar"
    DEGREE_OF_ARC_PER_SECOND = "Unit_DegreOfArcPerSecon"
    UNKNOWN = "UNKNOWN"


def unit_from_name(name: Any) -> Unit:
    if name is None:
        return Unit.NULL
    try:
        unit = Unit(name)
    except ValueError:
        return Unit.UNKNOWN
    return unit


@dataclass(frozen=True, order=True)
class TimestampedValue:
    """
    A scalar sample tagged with its output time and frame.

    Ordering and equality use the stamp only: samples from different
    frames at the same instant compare equal.
    """
    stamp: OutputTime
    value: float = field(compare=False)
    frame_id: str = field(compare=False, default="")

    @classmethod
    def build(cls, value: float, us: int, frame_id: str) -> "TimestampedValue":
        """Build from a microsecond timestamp. No range check is applied."""
        return cls(stamp=to_output_time(us), value=float(value), frame_id=frame_id)


@dataclass
class BusSignal:
    """One named bus signal and its samples in recording order."""
    name: str
    unit: Unit
    values: List[TimestampedValue]
    timestamps_us: List[int]

    def __len__(self) -> int:
        return len(self.values)


def decode_bus_signals(document: Mapping[str, Any], frame_id: str) -> Dict[str, BusSignal]:
    """
    Decode a bus signal document.

    Args:
        document: {signal_name: {"unit": str | None, "values": [[us, value], ...]}}
        frame_id: Frame identifier attached to every sample

    Returns:
        Dict of signal name to BusSignal
    """
    signals = {}
    for name, entry in document.items():
        values = []
        timestamps = []
        for us, value in entry.get("values", []):
            timestamps.append(int(us))
            values.append(TimestampedValue.build(value, int(us), frame_id))
        signals[name] = BusSignal(
            name=name,
            unit=unit_from_name(entry.get("unit")),
            values=values,
            timestamps_us=timestamps,
        )
    return signals


def merge_values(*streams: Iterable[TimestampedValue]) -> List[TimestampedValue]:
    """Merge value streams into one list ordered by time; ties keep input order."""
    return sorted(chain.from_iterable(streams))
