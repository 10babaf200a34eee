"""
HU Intensity Normalization
==========================
Linear mapping between Hounsfield Units and the [-1, 1] model range.
"""

import numpy as np

from .errors import RangeError


def _check_bounds(hu_min: float, hu_max: float) -> None:
    if hu_max <= hu_min:
        raise RangeError(f"hu_max ({hu_max}) must be greater than hu_min ({hu_min})")


def normalize_hu(
    plane: np.ndarray,
    hu_min: float = -1000.0,
    hu_max: float = 3000.0
) -> np.ndarray:
    """
    Clamp intensities to [hu_min, hu_max] and map them linearly to [-1, 1].

    Args:
        plane: Array of raw HU values (any shape)
        hu_min: Value mapped to -1
        hu_max: Value mapped to 1

    Returns:
        float32 array with values in [-1, 1]

    Raises:
        RangeError: if hu_max <= hu_min
    """
    _check_bounds(hu_min, hu_max)
    # float32 rounding of the bounds can push clamped values past 1
    plane = np.clip(np.asarray(plane, dtype=np.float64), hu_min, hu_max)
    result = 2.0 * (plane - hu_min) / (hu_max - hu_min) - 1.0
    return np.clip(result, -1.0, 1.0).astype(np.float32)


def denormalize_hu(
    plane: np.ndarray,
    hu_min: float = -1000.0,
    hu_max: float = 3000.0
) -> np.ndarray:
    """Inverse of ``normalize_hu`` for values inside [-1, 1]."""
    _check_bounds(hu_min, hu_max)
    plane = np.asarray(plane, dtype=np.float32)
    return ((plane + 1.0) * 0.5 * (hu_max - hu_min) + hu_min).astype(np.float32)
