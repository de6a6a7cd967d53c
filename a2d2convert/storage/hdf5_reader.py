"""HDF5 reader for converted record streams."""

from typing import Optional, Dict, List, Generator, Any, Tuple
from dataclasses import dataclass
from pathlib import Path
import json

import numpy as np
import h5py

from ..core.signals import TimestampedValue
from ..core.timestamp import OutputTime
from .hdf5_writer import group_path


@dataclass
class RecordingInfo:
    """Information about a converted recording."""
    filepath: str
    created: str
    message_count: int
    topics: List[str]
    begin_time: Optional[OutputTime]
    end_time: Optional[OutputTime]
    user_metadata: Dict[str, Any]


def _stamp(value) -> Optional[OutputTime]:
    if value is None:
        return None
    return OutputTime(int(value[0]), int(value[1]))


class RecordReader:
    """
    Read records written by RecordWriter.

    Example:
        with RecordReader("drive.h5") as reader:
            begin, end = reader.time_span()
            for stamp, points in reader.point_clouds("/a2d2/lidars/front_center/points"):
                print(stamp, len(points))
    """

    def __init__(self, filepath: str):
        self._filepath = Path(filepath)
        self._file: Optional[h5py.File] = None

    @property
    def filepath(self) -> Path:
        return self._filepath

    def open(self) -> None:
        if not self._filepath.exists():
            raise FileNotFoundError(f"Recording not found: {self._filepath}")
        self._file = h5py.File(self._filepath, "r")

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None

    def _require_open(self) -> h5py.File:
        if self._file is None:
            raise RuntimeError("File not open")
        return self._file

    def topics(self) -> List[str]:
        """Topics in the file; every topic group holds a 'stamps' dataset."""
        f = self._require_open()
        found = []

        def visit(name, obj):
            if isinstance(obj, h5py.Group) and "stamps" in obj:
                found.append("/" + name)

        f.visititems(visit)
        return sorted(found)

    def time_span(self) -> Tuple[Optional[OutputTime], Optional[OutputTime]]:
        """(begin, end) over all messages, or (None, None) for an empty file."""
        f = self._require_open()
        return (_stamp(f.attrs.get("begin_time")), _stamp(f.attrs.get("end_time")))

    @property
    def info(self) -> RecordingInfo:
        f = self._require_open()

        user_metadata = {}
        if "user_metadata" in f.attrs:
            user_metadata = json.loads(f.attrs["user_metadata"])

        begin, end = self.time_span()
        return RecordingInfo(
            filepath=str(self._filepath),
            created=f.attrs.get("created", "unknown"),
            message_count=int(f.attrs.get("message_count", 0)),
            topics=self.topics(),
            begin_time=begin,
            end_time=end,
            user_metadata=user_metadata,
        )

    def _group(self, topic: str) -> h5py.Group:
        f = self._require_open()
        path = group_path(topic)
        if path not in f:
            raise KeyError(f"Topic not found: {topic}")
        return f[path]

    def stamps(self, topic: str) -> List[OutputTime]:
        return [OutputTime(int(s), int(n)) for s, n in self._group(topic)["stamps"][:]]

    def point_clouds(self, topic: str) -> Generator[Tuple[OutputTime, np.ndarray], None, None]:
        """Yield (stamp, points) per stored point cloud."""
        group = self._group(topic)
        counts = group["point_counts"][:]
        all_points = group["points"][:]

        start = 0
        for stamp, count in zip(self.stamps(topic), counts):
            yield stamp, all_points[start:start + count]
            start += count

    def values(self, topic: str) -> List[TimestampedValue]:
        group = self._group(topic)
        frame_id = group.attrs.get("frame_id", "")
        return [
            TimestampedValue(stamp=stamp, value=float(v), frame_id=frame_id)
            for stamp, v in zip(self.stamps(topic), group["values"][:])
        ]

    def transforms(self, topic: str = "/tf") -> Dict[str, Any]:
        """Transform snapshots: stamps, parent/child frames and 4x4 matrices."""
        group = self._group(topic)
        return {
            "stamps": self.stamps(topic),
            "parents": json.loads(group.attrs["parents"]),
            "children": json.loads(group.attrs["children"]),
            "matrices": group["matrices"][:],
        }

    def boxes(self, topic: str) -> Tuple[List[OutputTime], np.ndarray]:
        group = self._group(topic)
        return self.stamps(topic), group["dimensions"][:]

    def __enter__(self) -> "RecordReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
