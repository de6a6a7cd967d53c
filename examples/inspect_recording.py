#!/usr/bin/env python3
"""Print the contents of a converted recording."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from a2d2convert.storage import RecordReader


def main():
    parser = argparse.ArgumentParser(description="Inspect a converted recording")
    parser.add_argument("file", type=str, help="HDF5 record file")
    parser.add_argument("--clouds", "-n", type=int, default=10,
                        help="Number of point clouds to list per topic")
    args = parser.parse_args()

    with RecordReader(args.file) as reader:
        info = reader.info

        print(f"=== Recording Info ===")
        print(f"File: {info.filepath}")
        print(f"Created: {info.created}")
        print(f"Messages: {info.message_count}")
        print(f"Span: {info.begin_time} .. {info.end_time}")
        print(f"Metadata: {info.user_metadata}")

        for topic in info.topics:
            if not topic.endswith("/points"):
                print(f"\n{topic}: {len(reader.stamps(topic))} messages")
                continue

            print(f"\n=== {topic} (first {args.clouds}) ===")
            for i, (stamp, points) in enumerate(reader.point_clouds(topic)):
                if i >= args.clouds:
                    break
                valid = int(points["valid"].sum())
                print(f"  Cloud {i:3d} | t={stamp} | {len(points)} pts | {valid} valid")


if __name__ == "__main__":
    main()
