"""Tests for sensor naming tables and filename helpers."""

import pytest

from a2d2convert.core.config import ConversionConfig, generate_filename, parse_filename
from a2d2convert.core.frames import (
    CAMERA_POSITIONS,
    LIDAR_POSITIONS,
    POSITION_TOKENS,
    SensorKind,
    SensorPosition,
    camera_name_from_lidar_name,
    frame_from_filename,
    position_from_token,
    positions_for,
    tf_frame_name,
)


class TestNamingTables:
    def test_eight_positions_with_distinct_tokens(self):
        assert len(SensorPosition) == 8
        assert len(set(POSITION_TOKENS.values())) == 8
        assert SensorPosition.FRONT_CENTER.token == "frontcenter"
        assert SensorPosition.REAR_RIGHT.token == "rearright"

    def test_token_round_trip(self):
        for position in SensorPosition:
            assert position_from_token(position.token) is position
        assert position_from_token("roof") is None

    def test_camera_positions(self):
        assert len(CAMERA_POSITIONS) == 6
        assert SensorPosition.REAR_LEFT not in CAMERA_POSITIONS
        assert SensorPosition.REAR_RIGHT not in CAMERA_POSITIONS
        assert positions_for(SensorKind.CAMERA) == CAMERA_POSITIONS

    def test_lidar_positions(self):
        assert set(LIDAR_POSITIONS) == {
            SensorPosition.FRONT_CENTER,
            SensorPosition.FRONT_LEFT,
            SensorPosition.FRONT_RIGHT,
            SensorPosition.REAR_LEFT,
            SensorPosition.REAR_RIGHT,
        }
        assert positions_for(SensorKind.LIDAR) == LIDAR_POSITIONS

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            POSITION_TOKENS[SensorPosition.FRONT_CENTER] = "x"

    def test_tf_frame_name(self):
        assert tf_frame_name(SensorKind.LIDAR, SensorPosition.FRONT_CENTER) == "lidars_front_center"
        assert tf_frame_name(SensorKind.CAMERA, SensorPosition.SIDE_LEFT) == "cameras_side_left"


class TestFilenames:
    def test_frame_from_filename(self):
        assert frame_from_filename("20180807145028_lidar_frontcenter_000000091.npz") == "frontcenter"
        assert frame_from_filename("20180807145028_lidar_rearleft_000000091.npz") == "rearleft"

    def test_frame_from_filename_no_match(self):
        assert frame_from_filename("20180807145028_bus_signals.json") is None

    def test_frame_from_filename_ambiguous(self):
        assert frame_from_filename("frontleft_frontright.npz") is None

    def test_camera_name_from_lidar_name(self):
        name = "20180807145028_lidar_frontcenter_000000091"
        assert camera_name_from_lidar_name(name) == "20180807145028_camera_frontcenter_000000091"
        assert camera_name_from_lidar_name("20180807145028_camera_frontcenter") is None

    def test_parse_filename(self):
        parsed = parse_filename("20180807145028_lidar_frontcenter_000000091.npz")
        assert parsed["recording"] == "20180807145028"
        assert parsed["sensor"] == "lidar"
        assert parsed["position"] is SensorPosition.FRONT_CENTER
        assert parsed["sequence"] == 91

    def test_parse_filename_unknown(self):
        assert parse_filename("notes.txt")["position"] is None

    def test_generate_filename(self):
        assert generate_filename("/data/drive_lidar.h5") == "drive_lidar_tf.h5"


class TestConversionConfig:
    def test_defaults(self):
        config = ConversionConfig()
        config.validate()
        assert config.epsilon == 1e-8
        assert config.tf_frequency == 10.0
        assert config.lidar_topic("front_center") == "/a2d2/lidars/front_center/points"
        assert config.bus_topic("vehicle_speed") == "/a2d2/bus/vehicle_speed"
        assert config.ego_shape_topic == "/a2d2/ego_shape"
        assert config.tf_topic == "/tf"

    @pytest.mark.parametrize("frequency", [0.0, -1.0, float("nan")])
    def test_bad_frequency(self, frequency):
        with pytest.raises(ValueError, match="frequency must be > 0"):
            ConversionConfig(tf_frequency=frequency).validate()
