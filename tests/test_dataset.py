"""Tests for lidar dataset validation."""

import numpy as np
import pytest

from a2d2convert.core.dataset import Field, any_points_invalid, validate_dataset
from a2d2convert.core.errors import (
    DatasetSignError,
    DatasetStructureError,
    DatasetTimestampRangeError,
)

from conftest import make_dataset

ATTRIBUTE_NAMES = [f.value for f in Field if f is not Field.POINTS]


def _error(dataset):
    outcome = validate_dataset(dataset)
    assert not outcome.ok
    return outcome.error


class TestValidDataset:
    def test_valid(self, dataset):
        outcome = validate_dataset(dataset)
        assert outcome.ok
        table = outcome.unwrap()
        assert table.num_points == 3
        assert set(table.arrays) == set(Field)

    def test_empty_dataset_is_valid(self):
        table = validate_dataset(make_dataset(0)).unwrap()
        assert table.num_points == 0

    def test_not_mutated(self, dataset):
        before = {k: v.copy() for k, v in dataset.items()}
        validate_dataset(dataset)
        assert dataset.keys() == before.keys()
        for name, values in before.items():
            np.testing.assert_array_equal(dataset[name], values)

    @pytest.mark.parametrize("name", ["pcloud_attr.row", "pcloud_attr.col"])
    def test_negative_row_col_allowed(self, dataset, name):
        dataset[name] = dataset[name] - 10.0
        assert validate_dataset(dataset).ok

    def test_any_points_invalid(self, dataset):
        assert not any_points_invalid(validate_dataset(dataset).unwrap())
        dataset["pcloud_attr.valid"][1] = False
        assert any_points_invalid(validate_dataset(dataset).unwrap())


class TestStructure:
    @pytest.mark.parametrize("name", [f.value for f in Field])
    def test_missing_field(self, dataset, name):
        del dataset[name]
        error = _error(dataset)
        assert isinstance(error, DatasetStructureError)
        assert "12 fields" in str(error)

    def test_extra_field(self, dataset):
        dataset["pcloud_attr.intensity"] = np.zeros(3)
        assert isinstance(_error(dataset), DatasetStructureError)

    def test_renamed_field(self, dataset):
        dataset["pcloud_attr.intensity"] = dataset.pop("pcloud_attr.reflectance")
        error = _error(dataset)
        assert isinstance(error, DatasetStructureError)
        assert error.field == "pcloud_attr.reflectance"

    def test_points_must_be_2d(self, dataset):
        dataset["pcloud_points"] = np.zeros(9)
        error = _error(dataset)
        assert isinstance(error, DatasetStructureError)
        assert error.field == "pcloud_points"
        assert "two dimensions" in str(error)

    def test_points_must_have_three_columns(self, dataset):
        dataset["pcloud_points"] = np.zeros((3, 4))
        error = _error(dataset)
        assert isinstance(error, DatasetStructureError)
        assert "three dimensions" in str(error)

    @pytest.mark.parametrize("name", ATTRIBUTE_NAMES)
    def test_row_count_mismatch(self, dataset, name):
        dataset[name] = dataset[name][:2]
        error = _error(dataset)
        assert isinstance(error, DatasetStructureError)
        assert error.field == name
        assert "exactly 3 rows" in str(error)

    def test_attribute_must_be_1d(self, dataset):
        dataset["pcloud_attr.depth"] = dataset["pcloud_attr.depth"].reshape(3, 1)
        error = _error(dataset)
        assert isinstance(error, DatasetStructureError)
        assert error.field == "pcloud_attr.depth"
        assert "one dimension" in str(error)


class TestSigns:
    @pytest.mark.parametrize("name", [
        "pcloud_attr.depth",
        "pcloud_attr.distance",
        "pcloud_attr.timestamp",
        "pcloud_attr.rectime",
        "pcloud_attr.lidar_id",
    ])
    def test_negative_value(self, dataset, name):
        dataset[name][1] = -1
        error = _error(dataset)
        assert isinstance(error, DatasetSignError)
        assert error.field == name
        assert error.index == 1
        assert name in str(error)

    def test_depth_negative_among_valid(self):
        dataset = make_dataset(10)
        dataset["pcloud_attr.depth"][7] = -0.25
        error = _error(dataset)
        assert isinstance(error, DatasetSignError)
        assert error.field == "pcloud_attr.depth"
        assert error.index == 7

    def test_unsigned_timestamp_read_as_signed(self, dataset):
        stamps = dataset["pcloud_attr.timestamp"].astype(np.uint64)
        stamps[0] = np.uint64(2**63)
        dataset["pcloud_attr.timestamp"] = stamps
        assert isinstance(_error(dataset), DatasetSignError)


class TestTimestampRange:
    def test_unrepresentable_timestamp(self, dataset):
        dataset["pcloud_attr.timestamp"][2] = 4_294_967_296_000_000
        error = _error(dataset)
        assert type(error) is DatasetTimestampRangeError
        assert error.field == "pcloud_attr.timestamp"
        assert error.index == 2
        assert error.value == 4_294_967_296_000_000

    def test_last_representable_timestamp(self, dataset):
        dataset["pcloud_attr.timestamp"][2] = 4_294_967_295_999_999
        assert validate_dataset(dataset).ok

    def test_rectime_not_range_checked(self, dataset):
        dataset["pcloud_attr.rectime"][0] = 4_294_967_296_000_000
        assert validate_dataset(dataset).ok

    def test_unwrap_raises(self, dataset):
        dataset["pcloud_attr.timestamp"][0] = 5_000_000_000_000_000
        with pytest.raises(DatasetTimestampRangeError, match="unsupported magnitude"):
            validate_dataset(dataset).unwrap()
