"""Loading A2D2 lidar `.npz` files."""

from pathlib import Path
from typing import Dict

import numpy as np


def load_dataset(filepath) -> Dict[str, np.ndarray]:
    """
    Load every array of an `.npz` file into memory.

    Args:
        filepath: Path to a lidar file such as
            20180807145028_lidar_frontcenter_000000091.npz

    Returns:
        Dict of stored array name to array
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Dataset not found: {filepath}")

    with np.load(filepath, allow_pickle=False) as npz:
        return {name: npz[name] for name in npz.files}
