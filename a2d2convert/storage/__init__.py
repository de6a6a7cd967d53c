"""Storage components for converted records."""

from .hdf5_writer import RecordWriter
from .hdf5_reader import RecordReader, RecordingInfo
from .npz_reader import load_dataset

__all__ = [
    "RecordWriter",
    "RecordReader",
    "RecordingInfo",
    "load_dataset",
]
