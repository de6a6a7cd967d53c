#!/usr/bin/env python3
"""a2d2convert CLI - Convert A2D2 recordings to validated record files."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .. import __version__
from ..core.config import ConversionConfig
from ..core.errors import ConversionError

logger = logging.getLogger("a2d2convert")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )


def _config(args) -> ConversionConfig:
    config = ConversionConfig(
        namespace=args.namespace,
        compression=None if args.no_compression else "gzip",
        verbose=args.verbose,
    )
    if getattr(args, "tf_frequency", None) is not None:
        config.tf_frequency = args.tf_frequency
    if getattr(args, "output_path", None) is not None:
        config.output_path = args.output_path
    return config


def cmd_lidar(args) -> int:
    """Convert lidar .npz files to point cloud topics."""
    from ..convert import convert_lidar_files
    from ..storage import RecordWriter

    config = _config(args)
    files = sorted(args.files)

    with RecordWriter(args.output, compression=config.compression) as writer:
        writer.set_metadata({"source": "lidar", "files": len(files)})
        total = convert_lidar_files(files, writer, config)

    print(f"Converted {len(files)} files ({total} points) to {args.output}")
    return 0


def cmd_bus(args) -> int:
    """Convert a bus signal JSON file to value topics."""
    from ..convert import convert_bus_file
    from ..storage import RecordWriter

    config = _config(args)
    with RecordWriter(args.output, compression=config.compression) as writer:
        writer.set_metadata({"source": "bus", "file": Path(args.file).name})
        counts = convert_bus_file(args.file, writer, config)

    print(f"Converted {len(counts)} signals ({sum(counts.values())} samples) to {args.output}")
    return 0


def cmd_tf(args) -> int:
    """Write the transform tree over the span of a reference recording."""
    from ..convert import convert_transforms

    config = _config(args)
    output = convert_transforms(
        args.sensor_config_path,
        args.reference_path,
        config,
        schema_path=args.sensor_config_schema_path,
    )
    print(f"Saved: {output}")
    return 0


def cmd_info(args) -> int:
    """Show information about a converted recording."""
    from ..storage import RecordReader

    with RecordReader(args.file) as reader:
        info = reader.info
        print(json.dumps({
            "file": info.filepath,
            "created": info.created,
            "messages": info.message_count,
            "begin_time": str(info.begin_time) if info.begin_time else None,
            "end_time": str(info.end_time) if info.end_time else None,
            "topics": info.topics,
            "metadata": info.user_metadata,
        }, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="a2d2convert",
        description="Convert A2D2 sensor recordings to validated HDF5 record files",
    )
    parser.add_argument("--version", action="version", version=f"a2d2convert {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--namespace", type=str, default="/a2d2", help="Topic namespace")
    parser.add_argument("--no-compression", action="store_true", help="Disable compression")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    lidar = subparsers.add_parser("lidar", help="Convert lidar .npz files")
    lidar.add_argument("files", type=str, nargs="+", help="Lidar .npz files")
    lidar.add_argument("-o", "--output", type=str, required=True, help="Output file (.h5)")
    lidar.set_defaults(func=cmd_lidar)

    bus = subparsers.add_parser("bus", help="Convert a bus signal JSON file")
    bus.add_argument("file", type=str, help="Bus signal JSON file")
    bus.add_argument("-o", "--output", type=str, required=True, help="Output file (.h5)")
    bus.set_defaults(func=cmd_bus)

    tf = subparsers.add_parser(
        "tf",
        help="Write the sensor transform tree and ego shape",
        description=(
            "Write a transform file containing the vehicle box model and the "
            "transform tree of the sensor configuration, covering the begin and "
            "end times of a reference recording."
        ),
    )
    tf.add_argument("-c", "--sensor-config-path", type=str, required=True,
                    help="Path to the JSON for vehicle/sensor config")
    tf.add_argument("-s", "--sensor-config-schema-path", type=str, default=None,
                    help="Path to the JSON schema (default: packaged schema)")
    tf.add_argument("-r", "--reference-path", type=str, required=True,
                    help="Converted recording containing the desired time span")
    tf.add_argument("-f", "--tf-frequency", type=float, default=10.0,
                    help="Publish frequency for transforms and ego shape (Hz)")
    tf.add_argument("-o", "--output-path", type=str, default=".", help="Output directory")
    tf.set_defaults(func=cmd_tf)

    info = subparsers.add_parser("info", help="Show recording info")
    info.add_argument("file", type=str, help="HDF5 file")
    info.set_defaults(func=cmd_info)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    try:
        return args.func(args)
    except ConversionError as e:
        logger.error(f"{type(e).__name__}: {e}")
    except (ValueError, FileNotFoundError) as e:
        logger.error(str(e))
    return 1


if __name__ == "__main__":
    sys.exit(main())
