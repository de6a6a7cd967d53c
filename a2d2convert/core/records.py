"""Per-point records drawn from a validated lidar dataset."""

from dataclasses import dataclass, astuple
from typing import Iterator, Optional

import numpy as np

from .dataset import Field, FieldTable

# Packed layout of a point in the output container. bool is stored as uint8.
POINT_DTYPE = np.dtype([
    ("x", np.float32),
    ("y", np.float32),
    ("z", np.float32),
    ("azimuth", np.float32),
    ("boundary", np.uint8),
    ("col", np.float32),
    ("depth", np.float32),
    ("distance", np.float32),
    ("lidar_id", np.uint8),
    ("rectime", np.uint64),
    ("reflectance", np.uint8),
    ("row", np.float32),
    ("timestamp", np.uint64),
    ("valid", np.uint8),
])


@dataclass(frozen=True)
class PointRecord:
    """One lidar point: position plus the same-index value of every attribute."""
    x: float
    y: float
    z: float
    azimuth: float
    boundary: bool
    col: float
    depth: float
    distance: float
    lidar_id: int
    rectime: int
    reflectance: int
    row: float
    timestamp: int
    valid: bool

    def __str__(self) -> str:
        return (
            f"{{x: {self.x}, y: {self.y}, z: {self.z}, azimuth: {self.azimuth}, "
            f"boundary: {self.boundary}, col: {self.col}, depth: {self.depth}, "
            f"distance: {self.distance}, lidar_id: {self.lidar_id}, "
            f"rectime: {self.rectime}, reflectance: {self.reflectance}, "
            f"row: {self.row}, timestamp: {self.timestamp}, valid: {self.valid}}}"
        )


# attribute slot -> role, in PointRecord order after x, y, z
_ATTRIBUTE_SLOTS = (
    ("azimuth", Field.AZIMUTH, float),
    ("boundary", Field.BOUNDARY, bool),
    ("col", Field.COL, float),
    ("depth", Field.DEPTH, float),
    ("distance", Field.DISTANCE, float),
    ("lidar_id", Field.LIDAR_ID, int),
    ("rectime", Field.RECTIME, int),
    ("reflectance", Field.REFLECTANCE, int),
    ("row", Field.ROW, float),
    ("timestamp", Field.TIMESTAMP, int),
    ("valid", Field.VALID, bool),
)


class PointRecordIterator:
    """
    Forward-only traversal of a validated dataset, one PointRecord per row.

    All arrays share a single cursor, so they always advance together.
    The iterator is exhausted after num_points records; build a new one
    to traverse again.

    Example:
        table = validate_dataset(arrays).unwrap()
        for record in PointRecordIterator(table):
            print(record.x, record.timestamp)
    """

    def __init__(self, table: FieldTable):
        self._num_points = table.num_points
        self._points = table[Field.POINTS]
        self._columns = tuple(table[role] for _, role, _ in _ATTRIBUTE_SLOTS)
        self._casts = tuple(cast for _, _, cast in _ATTRIBUTE_SLOTS)
        self._index = 0

    @property
    def index(self) -> int:
        """Row index of the next record."""
        return self._index

    @property
    def num_points(self) -> int:
        return self._num_points

    def has_more(self) -> bool:
        return self._index < self._num_points

    def _record(self, i: int) -> PointRecord:
        x, y, z = self._points[i]
        attributes = (cast(col[i]) for cast, col in zip(self._casts, self._columns))
        return PointRecord(float(x), float(y), float(z), *attributes)

    def __iter__(self) -> Iterator[PointRecord]:
        return self

    def __next__(self) -> PointRecord:
        if not self.has_more():
            raise StopIteration
        record = self._record(self._index)
        self._index += 1
        return record

    def __len__(self) -> int:
        return self._num_points - self._index


def pack_records(records: PointRecordIterator, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Drain `records` into a POINT_DTYPE array.

    Args:
        records: Iterator positioned at the first record to pack
        out: Optional preallocated array with room for the remaining records

    Returns:
        Array of packed points, one row per record
    """
    rows = [astuple(record) for record in records]
    if out is None:
        out = np.zeros(len(rows), dtype=POINT_DTYPE)
    if not rows:
        return out

    # Wider attribute values wrap into the packed field type.
    for name, column in zip(POINT_DTYPE.names, zip(*rows)):
        out[name][:len(rows)] = np.asarray(column).astype(POINT_DTYPE[name], casting="unsafe")
    return out
