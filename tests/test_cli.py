"""Tests for the a2d2convert command line."""

import json

import numpy as np

from a2d2convert.cli.main import build_parser, main

from conftest import make_dataset


class TestParser:
    def test_tf_defaults(self):
        args = build_parser().parse_args(["tf", "-c", "config.json", "-r", "ref.h5"])
        assert args.tf_frequency == 10.0
        assert args.output_path == "."
        assert args.sensor_config_schema_path is None

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestCommands:
    def test_lidar_then_tf_then_info(self, tmp_path, calibration_doc, write_json, capsys):
        npz = tmp_path / "20180807145028_lidar_frontleft_000000001.npz"
        np.savez(npz, **make_dataset(3))
        lidar_out = str(tmp_path / "lidar.h5")

        assert main(["lidar", str(npz), "-o", lidar_out]) == 0

        config = write_json(calibration_doc)
        assert main(["tf", "-c", str(config), "-r", lidar_out, "-o", str(tmp_path)]) == 0
        assert (tmp_path / "lidar_tf.h5").exists()

        capsys.readouterr()
        assert main(["info", lidar_out]) == 0
        info = json.loads(capsys.readouterr().out)
        assert info["topics"] == ["/a2d2/lidars/front_left/points"]
        assert info["messages"] == 1

    def test_bus(self, tmp_path, write_json, capsys):
        path = write_json({"vehicle_speed": {"unit": "Unit_KiloMeterPerHour", "values": [[1, 2.0]]}}, name="bus.json")
        assert main(["bus", str(path), "-o", str(tmp_path / "bus.h5")]) == 0
        assert "1 signals" in capsys.readouterr().out

    def test_conversion_error_exits_with_failure(self, tmp_path, caplog):
        npz = tmp_path / "20180807145028_lidar_frontleft_000000001.npz"
        dataset = make_dataset(3)
        del dataset["pcloud_attr.valid"]
        np.savez(npz, **dataset)

        assert main(["lidar", str(npz), "-o", str(tmp_path / "lidar.h5")]) == 1
        assert "DatasetStructureError" in caplog.text

    def test_bad_frequency(self, tmp_path, calibration_doc, write_json):
        config = write_json(calibration_doc)
        assert main(["tf", "-c", str(config), "-r", "ref.h5", "-f", "0"]) == 1

    def test_missing_config(self, tmp_path, caplog):
        assert main(["tf", "-c", str(tmp_path / "none.json"), "-r", "ref.h5"]) == 1
        assert "ConfigIOError" in caplog.text

    def test_failed_lidar_conversion_leaves_no_output(self, tmp_path, caplog):
        good = tmp_path / "20180807145028_lidar_frontcenter_000000001.npz"
        bad = tmp_path / "20180807145028_lidar_frontcenter_000000002.npz"
        np.savez(good, **make_dataset(3))
        dataset = make_dataset(3)
        dataset["pcloud_attr.depth"][2] = -1.0
        np.savez(bad, **dataset)
        out = tmp_path / "lidar.h5"

        assert main(["lidar", str(good), str(bad), "-o", str(out)]) == 1
        assert "DatasetSignError" in caplog.text
        assert not out.exists()

    def test_failed_bus_conversion_leaves_no_output(self, tmp_path, write_json):
        path = write_json({
            "brake_pressure": {"unit": "Unit_Bar", "values": [[1_000_000, 2.0]]},
            "vehicle_speed": {"unit": None, "values": [[4_294_967_296_000_000, 1.0]]},
        }, name="bus.json")
        out = tmp_path / "bus.h5"

        assert main(["bus", str(path), "-o", str(out)]) == 1
        assert not out.exists()
