"""HDF5 writer for converted A2D2 record streams."""

from typing import Optional, Dict, Any, List, Sequence, Tuple
from datetime import datetime
from pathlib import Path
import json
import logging

import numpy as np
import h5py

from .. import __version__
from ..calibration import FrameTransform
from ..core.records import POINT_DTYPE
from ..core.signals import TimestampedValue
from ..core.timestamp import OutputTime

logger = logging.getLogger(__name__)

STAMP_DTYPE = np.uint32


def group_path(topic: str) -> str:
    """HDF5 group path for a topic name."""
    return topic.strip("/")


def _stamps_array(stamps: Sequence[OutputTime]) -> np.ndarray:
    return np.array([[s.secs, s.nsecs] for s in stamps], dtype=STAMP_DTYPE).reshape(-1, 2)


class RecordWriter:
    """
    Write converted records to HDF5, one group per topic.

    File structure:
        /<topic>/                 - point cloud topic
            points                - packed points (POINT_DTYPE)
            point_counts          - number of points per cloud
            stamps                - (N, 2) [secs, nsecs] per cloud
        /<topic>/                 - scalar signal topic
            values, stamps
        /tf/
            stamps                - (N, 2)
            matrices              - (N, K, 4, 4) child-in-parent transforms
            translations          - (N, K, 3)
            rotations             - (N, K, 4) quaternions (x, y, z, w)
        /<topic>/                 - ego shape topic
            dimensions, stamps

    Example:
        with RecordWriter("drive.h5") as writer:
            writer.write_point_cloud("/a2d2/lidars/front_center/points",
                                     "lidars_front_center", stamp, points)
    """

    def __init__(
        self,
        filepath: str,
        compression: Optional[str] = "gzip",
        compression_level: int = 4,
        flush_size: int = 100,
    ):
        """
        Initialize the writer.

        Args:
            filepath: Output file path (.h5)
            compression: Compression algorithm ("gzip", "lzf", or None)
            compression_level: gzip level (1-9)
            flush_size: Number of buffered point clouds per topic before writing
        """
        self._filepath = Path(filepath)
        self._compression = compression
        self._compression_level = compression_level
        self._flush_size = flush_size

        self._file: Optional[h5py.File] = None
        self._cloud_buffers: Dict[str, dict] = {}
        self._tf_frames: Optional[Tuple[List[str], List[str]]] = None
        self._begin: Optional[OutputTime] = None
        self._end: Optional[OutputTime] = None
        self._message_count = 0

    @property
    def filepath(self) -> Path:
        return self._filepath

    @property
    def message_count(self) -> int:
        return self._message_count

    def open(self) -> None:
        """Open the HDF5 file for writing."""
        self._filepath.parent.mkdir(parents=True, exist_ok=True)
        self._file = h5py.File(self._filepath, "w")
        self._file.attrs["created"] = datetime.now().isoformat()
        self._file.attrs["converter_version"] = __version__
        logger.debug(f"Opened {self._filepath} for writing")

    def close(self) -> None:
        """Flush buffers, record the time span and close the file."""
        if self._file is None:
            return

        for topic in list(self._cloud_buffers):
            self._flush_clouds(topic)

        self._file.attrs["message_count"] = self._message_count
        if self._begin is not None:
            self._file.attrs["begin_time"] = np.array(self._begin, dtype=STAMP_DTYPE)
            self._file.attrs["end_time"] = np.array(self._end, dtype=STAMP_DTYPE)

        self._file.close()
        self._file = None
        logger.info(f"Wrote {self._message_count} messages to {self._filepath}")

    def discard(self) -> None:
        """Close without flushing and remove the partial file."""
        if self._file is None:
            return

        self._file.close()
        self._file = None
        self._cloud_buffers.clear()
        self._filepath.unlink(missing_ok=True)
        logger.warning(f"Discarded partial output {self._filepath}")

    def set_metadata(self, metadata: Dict[str, Any]) -> None:
        """Set session metadata."""
        self._require_open()
        self._file.attrs["user_metadata"] = json.dumps(metadata)

    def _require_open(self) -> None:
        if self._file is None:
            raise RuntimeError("File not open")

    def _track(self, stamps: Sequence[OutputTime]) -> None:
        if not stamps:
            return
        first = min(stamps)
        last = max(stamps)
        self._begin = first if self._begin is None else min(self._begin, first)
        self._end = last if self._end is None else max(self._end, last)
        self._message_count += len(stamps)

    def _append(self, group: h5py.Group, name: str, data: np.ndarray, compress: bool = False) -> None:
        """Append rows to a resizable dataset, creating it on first use."""
        if name not in group:
            options = {}
            if compress and self._compression:
                options["compression"] = self._compression
                if self._compression == "gzip":
                    options["compression_opts"] = self._compression_level
            group.create_dataset(
                name,
                data=data,
                maxshape=(None,) + data.shape[1:],
                chunks=True,
                **options,
            )
            return

        ds = group[name]
        old_size = ds.shape[0]
        ds.resize(old_size + data.shape[0], axis=0)
        ds[old_size:] = data

    def write_point_cloud(
        self,
        topic: str,
        frame_id: str,
        stamp: OutputTime,
        points: np.ndarray,
    ) -> None:
        """Buffer one point cloud for `topic`."""
        self._require_open()
        if points.dtype != POINT_DTYPE:
            raise ValueError(f"Expected points with dtype {POINT_DTYPE}, got {points.dtype}")

        buffer = self._cloud_buffers.setdefault(
            topic, {"frame_id": frame_id, "points": [], "stamps": []}
        )
        buffer["points"].append(points)
        buffer["stamps"].append(stamp)
        self._track([stamp])

        if len(buffer["points"]) >= self._flush_size:
            self._flush_clouds(topic)

    def _flush_clouds(self, topic: str) -> None:
        """Flush buffered point clouds of one topic to disk."""
        buffer = self._cloud_buffers.get(topic)
        if not buffer or not buffer["points"]:
            return

        group = self._file.require_group(group_path(topic))
        group.attrs["frame_id"] = buffer["frame_id"]
        group.attrs["kind"] = "point_cloud"

        all_points = np.concatenate(buffer["points"])
        counts = np.array([len(p) for p in buffer["points"]], dtype=np.int64)

        self._append(group, "points", all_points, compress=True)
        self._append(group, "point_counts", counts)
        self._append(group, "stamps", _stamps_array(buffer["stamps"]))

        buffer["points"].clear()
        buffer["stamps"].clear()

    def write_values(self, topic: str, values: Sequence[TimestampedValue], unit: str = "") -> None:
        """Write scalar samples for `topic` in the given order."""
        self._require_open()
        if not values:
            return

        group = self._file.require_group(group_path(topic))
        group.attrs["kind"] = "values"
        group.attrs["frame_id"] = values[0].frame_id
        group.attrs["unit"] = unit

        stamps = [v.stamp for v in values]
        self._append(group, "values", np.array([v.value for v in values], dtype=np.float64))
        self._append(group, "stamps", _stamps_array(stamps))
        self._track(stamps)

    def write_transforms(self, topic: str, stamp: OutputTime, transforms: Sequence[FrameTransform]) -> None:
        """Write one snapshot of a transform tree."""
        self._require_open()

        frames = ([t.parent for t in transforms], [t.child for t in transforms])
        if self._tf_frames is None:
            self._tf_frames = frames
        elif frames != self._tf_frames:
            raise ValueError("Transform tree frames changed between snapshots")

        group = self._file.require_group(group_path(topic))
        group.attrs["kind"] = "transforms"
        group.attrs["parents"] = json.dumps(frames[0])
        group.attrs["children"] = json.dumps(frames[1])

        matrices = np.stack([t.transform.matrix for t in transforms])
        translations = np.stack([t.transform.translation for t in transforms])
        rotations = np.array([t.transform.quaternion for t in transforms])

        self._append(group, "matrices", matrices[np.newaxis])
        self._append(group, "translations", translations[np.newaxis])
        self._append(group, "rotations", rotations[np.newaxis])
        self._append(group, "stamps", _stamps_array([stamp]))
        self._track([stamp])

    def write_box(self, topic: str, stamp: OutputTime, dimensions: Tuple[float, float, float]) -> None:
        """Write one box shape sample."""
        self._require_open()

        group = self._file.require_group(group_path(topic))
        group.attrs["kind"] = "box"

        self._append(group, "dimensions", np.array([dimensions], dtype=np.float64))
        self._append(group, "stamps", _stamps_array([stamp]))
        self._track([stamp])

    def __enter__(self) -> "RecordWriter":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.close()
        else:
            self.discard()
