"""
Validation of A2D2 lidar point cloud datasets.

A dataset is a structure of arrays: one (N, 3) points array and eleven
length-N attribute arrays, keyed by the names stored in the `.npz` file.
Names are resolved to Field roles once, here; everything downstream uses
the resolved FieldTable.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional

import numpy as np

from .errors import (
    DatasetError,
    DatasetSignError,
    DatasetStructureError,
    DatasetTimestampRangeError,
    Outcome,
)
from .timestamp import MAX_OUTPUT_SECONDS, ONE_MILLION

ROW_SHAPE_IDX = 0
COL_SHAPE_IDX = 1


class Field(Enum):
    """Roles of the arrays in a lidar dataset, valued by their stored name."""
    POINTS = "pcloud_points"
    AZIMUTH = "pcloud_attr.azimuth"
    BOUNDARY = "pcloud_attr.boundary"
    COL = "pcloud_attr.col"
    DEPTH = "pcloud_attr.depth"
    DISTANCE = "pcloud_attr.distance"
    LIDAR_ID = "pcloud_attr.lidar_id"
    RECTIME = "pcloud_attr.rectime"
    REFLECTANCE = "pcloud_attr.reflectance"
    ROW = "pcloud_attr.row"
    TIMESTAMP = "pcloud_attr.timestamp"
    VALID = "pcloud_attr.valid"


FIELD_NAMES = MappingProxyType({f: f.value for f in Field})
ATTRIBUTE_FIELDS = tuple(f for f in Field if f is not Field.POINTS)

# interpreted as int64
INTEGER_SIGNED_FIELDS = (Field.TIMESTAMP, Field.RECTIME, Field.LIDAR_ID)
# interpreted as float64; row/col may be negative until the dataset says otherwise
FLOAT_SIGNED_FIELDS = (Field.DEPTH, Field.DISTANCE)

Dataset = Mapping[str, np.ndarray]


@dataclass(frozen=True)
class FieldTable:
    """Arrays of a dataset that passed validate_dataset(), keyed by role."""
    arrays: Mapping[Field, np.ndarray]
    num_points: int

    def __getitem__(self, field: Field) -> np.ndarray:
        return self.arrays[field]


def _as_int64(values: np.ndarray) -> np.ndarray:
    values = np.asarray(values)
    if values.dtype.kind in "iu" and values.dtype.itemsize == 8:
        return values.view(np.int64)
    return values.astype(np.int64)


def _first_negative(values: np.ndarray) -> Optional[int]:
    negative = np.flatnonzero(values < 0)
    if negative.size == 0:
        return None
    return int(negative[0])


def _check_structure(dataset: Dataset) -> Optional[DatasetError]:
    if len(dataset) != len(Field):
        return DatasetStructureError(
            f"Expected dataset to have {len(Field)} fields, but it has {len(dataset)}"
        )

    for f in Field:
        if f.value not in dataset:
            return DatasetStructureError(
                f"Expected dataset to have field '{f.value}', but it does not.",
                field=f.value,
            )

    points_shape = np.shape(dataset[Field.POINTS.value])
    if len(points_shape) != 2:
        return DatasetStructureError(
            f"Points array must have exactly two dimensions. Instead it has {len(points_shape)}",
            field=Field.POINTS.value,
        )
    if points_shape[COL_SHAPE_IDX] != 3:
        return DatasetStructureError(
            "Points in the points array must have three dimensions. "
            f"Instead they have {points_shape[COL_SHAPE_IDX]}",
            field=Field.POINTS.value,
        )

    num_points = points_shape[ROW_SHAPE_IDX]
    for f in ATTRIBUTE_FIELDS:
        shape = np.shape(dataset[f.value])
        rows = shape[ROW_SHAPE_IDX] if shape else None
        if rows != num_points:
            return DatasetStructureError(
                f"Expected {f.value} to have exactly {num_points} rows. Instead it has {rows}",
                field=f.value,
            )

    for f in ATTRIBUTE_FIELDS:
        ndim = len(np.shape(dataset[f.value]))
        if ndim != 1:
            return DatasetStructureError(
                f"Expected {f.value} data to have exactly one dimension. Instead it has {ndim}",
                field=f.value,
            )
    return None


def _check_signs(dataset: Dataset) -> Optional[DatasetError]:
    for f in ATTRIBUTE_FIELDS:
        if f in INTEGER_SIGNED_FIELDS:
            values = _as_int64(dataset[f.value])
        elif f in FLOAT_SIGNED_FIELDS:
            values = np.asarray(dataset[f.value]).astype(np.float64)
        else:
            continue

        index = _first_negative(values)
        if index is not None:
            return DatasetSignError(
                f"Expected {f.value} to be strictly non-negative. Instead, it has "
                f"negative values (first at index {index}: {values[index]}).",
                field=f.value,
                index=index,
            )
    return None


def _check_timestamps(dataset: Dataset) -> Optional[DatasetError]:
    # sign check guarantees non-negative values
    stamps = _as_int64(dataset[Field.TIMESTAMP.value]).astype(np.uint64)
    too_large = np.flatnonzero(stamps // np.uint64(ONE_MILLION) > np.uint64(MAX_OUTPUT_SECONDS))
    if too_large.size == 0:
        return None

    index = int(too_large[0])
    value = int(stamps[index])
    return DatasetTimestampRangeError(
        f"Timestamp {value} has unsupported magnitude: output times do not support "
        "timestamps on or after 4294967296000000 (Sunday, February 7, 2106 6:28:16 AM GMT)",
        field=Field.TIMESTAMP.value,
        index=index,
        value=value,
    )


def validate_dataset(dataset: Dataset) -> Outcome[FieldTable]:
    """
    Validate a lidar dataset and resolve its arrays by role.

    Checks run in order and the first failure is reported: field count,
    field presence, points shape, row counts, attribute dimensions, sign
    constraints, timestamp range. The dataset is never modified.

    Args:
        dataset: Mapping of stored field name to array

    Returns:
        Outcome holding a FieldTable, or the DatasetError that failed
    """
    for check in (_check_structure, _check_signs, _check_timestamps):
        error = check(dataset)
        if error is not None:
            return Outcome.failure(error)

    arrays: Dict[Field, np.ndarray] = {f: np.asarray(dataset[f.value]) for f in Field}
    num_points = int(arrays[Field.POINTS].shape[ROW_SHAPE_IDX])
    return Outcome.success(FieldTable(arrays=MappingProxyType(arrays), num_points=num_points))


def any_points_invalid(table: FieldTable) -> bool:
    """True if any point is flagged invalid by the sensor."""
    return not bool(np.all(table[Field.VALID]))
