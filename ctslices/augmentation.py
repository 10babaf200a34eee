"""
2D Geometric Augmentation for CT Slices
=======================================
Resize, crop and flip applied to each extracted axial plane.
"""

import math
from typing import Optional

import numpy as np
from scipy.ndimage import zoom

from .config import RunConfig


def resize_plane(plane: np.ndarray, size: int, order: int = 1) -> np.ndarray:
    """
    Resample a 2D plane to ``size x size``.

    Args:
        plane: 2D numpy array (H, W)
        size: Target side length
        order: Interpolation order (0=nearest, 1=bilinear, 3=cubic)

    Returns:
        float32 array of shape (size, size)
    """
    plane = np.asarray(plane, dtype=np.float32)
    zoom_factors = (size / plane.shape[0], size / plane.shape[1])
    resized = zoom(plane, zoom_factors, order=order, mode='nearest')

    # zoom rounds the output shape; force the exact size
    if resized.shape != (size, size):
        resized = _crop_or_pad(resized, (size, size))

    return resized.astype(np.float32)


def _crop_or_pad(plane: np.ndarray, target_shape) -> np.ndarray:
    """Center crop or edge pad a plane to the exact target shape."""
    for axis in range(2):
        if plane.shape[axis] > target_shape[axis]:
            start = (plane.shape[axis] - target_shape[axis]) // 2
            slc = [slice(None)] * 2
            slc[axis] = slice(start, start + target_shape[axis])
            plane = plane[tuple(slc)]

    pad = []
    for axis in range(2):
        missing = max(0, target_shape[axis] - plane.shape[axis])
        pad.append((missing // 2, missing - missing // 2))
    return np.pad(plane, pad, mode='edge')


def crop_plane(
    plane: np.ndarray,
    fine_size: int,
    train: bool,
    rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """
    Crop a ``fine_size x fine_size`` window.

    Train: offsets drawn as ceil(uniform(0.01, dim - fine_size)) per axis,
    or 0 when the axis already equals ``fine_size``.
    Eval: centred offsets ceil((dim - fine_size) / 2).
    """
    h, w = plane.shape
    if h < fine_size or w < fine_size:
        raise ValueError(f"Cannot crop {fine_size}x{fine_size} from plane of shape {plane.shape}")

    if train:
        if rng is None:
            rng = np.random.default_rng()
        top = 0 if h == fine_size else math.ceil(rng.uniform(1e-2, h - fine_size))
        left = 0 if w == fine_size else math.ceil(rng.uniform(1e-2, w - fine_size))
    else:
        top = math.ceil((h - fine_size) / 2)
        left = math.ceil((w - fine_size) / 2)

    return plane[top:top + fine_size, left:left + fine_size]


def random_hflip(
    plane: np.ndarray,
    rng: Optional[np.random.Generator] = None,
    prob: float = 0.5
) -> np.ndarray:
    """Flip the plane left-right when a uniform draw exceeds ``prob``."""
    if rng is None:
        rng = np.random.default_rng()
    if rng.random() > prob:
        return np.fliplr(plane).copy()
    return plane


class GeometricTransform:
    """
    Resize -> crop -> optional flip for one channel of a paired sample.

    Example:
        transform = GeometricTransform(load_size=286, fine_size=256, phase='train', flip=True)
        plane = transform(plane)
    """

    def __init__(
        self,
        load_size: int,
        fine_size: int,
        phase: str = 'train',
        flip: bool = False,
        rng: Optional[np.random.Generator] = None
    ):
        self.load_size = load_size
        self.fine_size = fine_size
        self.phase = phase
        self.flip = flip
        self.rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def from_config(cls, config: RunConfig, rng: Optional[np.random.Generator] = None):
        return cls(
            load_size=config.load_size,
            fine_size=config.fine_size,
            phase=config.phase,
            flip=config.flip,
            rng=rng
        )

    def __call__(self, plane: np.ndarray) -> np.ndarray:
        train = self.phase == 'train'
        result = resize_plane(plane, self.load_size)
        result = crop_plane(result, self.fine_size, train, self.rng)
        if self.flip and train:
            result = random_hflip(result, self.rng)
        return np.ascontiguousarray(result, dtype=np.float32)

    def __repr__(self) -> str:
        return (f"GeometricTransform(load_size={self.load_size}, fine_size={self.fine_size}, "
                f"phase={self.phase!r}, flip={self.flip})")
