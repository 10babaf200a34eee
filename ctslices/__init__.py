"""
Paired CT Slice Loading
=======================
Samples matching axial slices from paired NIfTI CT volumes for 2D
image-translation training.
"""

import logging

from .config import RunConfig
from .errors import (
    SliceLoaderError,
    DecodeError,
    MissingPairError,
    UnsupportedShapeError,
    RangeError
)
from .loader import (
    load_nifti,
    derive_pair_path,
    require_pair
)
from .slicing import (
    volume_depth,
    pick_slice_index,
    reconcile_depths,
    extract_slice
)
from .augmentation import (
    resize_plane,
    crop_plane,
    random_hflip,
    GeometricTransform
)
from .preprocessing import (
    normalize_hu,
    denormalize_hu
)
from .sampler import PairSampler, SampleInfo
from .dataset import PairedVolumeDataset

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'RunConfig',
    'SliceLoaderError',
    'DecodeError',
    'MissingPairError',
    'UnsupportedShapeError',
    'RangeError',
    'load_nifti',
    'derive_pair_path',
    'require_pair',
    'volume_depth',
    'pick_slice_index',
    'reconcile_depths',
    'extract_slice',
    'resize_plane',
    'crop_plane',
    'random_hflip',
    'GeometricTransform',
    'normalize_hu',
    'denormalize_hu',
    'PairSampler',
    'SampleInfo',
    'PairedVolumeDataset',
]
