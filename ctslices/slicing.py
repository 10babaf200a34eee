"""
Axial Slice Selection
=====================
Chooses and extracts matching axial slices from paired CT volumes.
Indices are 0-based along the third (Z) axis of an (H, W, Z[, T]) volume.
"""

import math
from typing import Callable, Optional, Tuple

import numpy as np

from .errors import UnsupportedShapeError


def volume_depth(volume: np.ndarray) -> int:
    """Number of axial slices: 1 for a 2D plane, the Z size for 3D/4D volumes."""
    if volume.ndim == 2:
        return 1
    if volume.ndim in (3, 4):
        return int(volume.shape[2])
    raise UnsupportedShapeError(f"Unsupported volume dims: {volume.ndim}")


def pick_slice_index(
    depth: int,
    exclude_slices: int = 0,
    phase: str = 'train',
    randomize: bool = True,
    rng: Optional[np.random.Generator] = None
) -> int:
    """
    Pick an axial slice index.

    Slices within ``exclude_slices`` of either end are never chosen. If the
    exclusion covers the whole volume the centre slice is used instead.

    Args:
        depth: Number of slices available
        exclude_slices: Slices to skip at each end (negative counts as 0)
        phase: 'train' allows random selection; anything else is deterministic
        randomize: Draw at random in train phase (False for serial batches)
        rng: Random generator used for the train-phase draw

    Returns:
        0-based slice index in [0, depth - 1]
    """
    exclude = max(0, exclude_slices)
    start = exclude
    end = depth - 1 - exclude

    if end < start:
        return max(0, math.ceil(depth / 2) - 1)

    if phase == 'train' and randomize:
        if rng is None:
            rng = np.random.default_rng()
        return int(rng.integers(start, end + 1))

    return (start + end) // 2


def reconcile_depths(
    depth_a: int,
    depth_b: int,
    pick: Callable[[int], int]
) -> Tuple[int, int, int]:
    """
    Choose one slice position valid for two volumes of possibly unequal depth.

    Args:
        depth_a: Depth of volume A
        depth_b: Depth of volume B
        pick: Callable mapping a depth to a slice index within it

    Returns:
        Tuple of (shared_depth, index_a, index_b)
    """
    shared = min(depth_a, depth_b)
    idx = pick(shared)
    return shared, min(idx, depth_a - 1), min(idx, depth_b - 1)


def extract_slice(volume: np.ndarray, index: int) -> np.ndarray:
    """
    Extract a 2D axial plane.

    Args:
        volume: Array of shape (H, W), (H, W, Z) or (H, W, Z, T)
        index: Slice index along Z; ignored for 2D input

    Returns:
        2D array of shape (H, W). For 4D input only T=0 is used.
    """
    if volume.ndim == 2:
        return volume
    if volume.ndim == 3:
        return volume[:, :, index]
    if volume.ndim == 4:
        return volume[:, :, index, 0]
    raise UnsupportedShapeError(f"Unsupported volume dims: {volume.ndim}")
