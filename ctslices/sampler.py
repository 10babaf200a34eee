"""
Paired Slice Sampler
====================
Turns an A-domain CT volume path into a 2-channel (A, B) training sample.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import numpy as np

from .augmentation import GeometricTransform
from .config import RunConfig
from .loader import load_nifti, require_pair
from .preprocessing import normalize_hu
from .slicing import extract_slice, pick_slice_index, reconcile_depths, volume_depth

logger = logging.getLogger(__name__)


@dataclass
class SampleInfo:
    """Where a sample came from."""
    path_a: Path
    path_b: Path
    depth_a: int
    depth_b: int
    shared_depth: int
    index_a: int
    index_b: int


class PairSampler:
    """
    Loads an A/B volume pair and emits matching normalized axial slices.

    Each call re-reads both volumes from disk. A and B receive independent
    crop and flip draws from the sampler's random generator. The B path
    comes from ``pair_path`` when given, else from ``derive_pair_path``.

    Example:
        sampler = PairSampler(RunConfig(phase='eval', load_size=286, fine_size=256))
        sample = sampler.sample('/data/A/eval/case01.nii.gz')  # (2, 256, 256)
    """

    def __init__(
        self,
        config: RunConfig,
        rng: Optional[np.random.Generator] = None,
        reader: Callable[[Union[str, Path]], np.ndarray] = load_nifti,
        domain_a: str = "A",
        domain_b: str = "B",
        pair_path: Optional[Callable[[Path], Path]] = None
    ):
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        self.reader = reader
        self.domain_a = domain_a
        self.domain_b = domain_b
        self.pair_path = pair_path
        self.transform = GeometricTransform.from_config(config, self.rng)

    def _pick(self, depth: int) -> int:
        return pick_slice_index(
            depth,
            exclude_slices=self.config.exclude_slices,
            phase=self.config.phase,
            randomize=self.config.randomize,
            rng=self.rng
        )

    def sample_with_info(self, path_a: Union[str, Path]) -> Tuple[np.ndarray, SampleInfo]:
        """
        Build one sample and report the slices it was drawn from.

        Returns:
            Tuple of (sample of shape (2, fine_size, fine_size), SampleInfo)

        Raises:
            MissingPairError: if the B-domain volume does not exist
            DecodeError: if either volume cannot be read
            UnsupportedShapeError: if either volume is not 2D, 3D or 4D
        """
        path_a = Path(path_a)
        path_b = require_pair(path_a, self.domain_a, self.domain_b, self.pair_path)

        vol_a = self.reader(path_a)
        vol_b = self.reader(path_b)

        depth_a = volume_depth(vol_a)
        depth_b = volume_depth(vol_b)
        shared, idx_a, idx_b = reconcile_depths(depth_a, depth_b, self._pick)

        slice_a = self.transform(extract_slice(vol_a, idx_a))
        slice_b = self.transform(extract_slice(vol_b, idx_b))

        slice_a = normalize_hu(slice_a, self.config.hu_min, self.config.hu_max)
        slice_b = normalize_hu(slice_b, self.config.hu_min, self.config.hu_max)

        sample = np.stack([slice_a, slice_b], axis=0)
        assert sample.max() <= 1 and sample.min() >= -1, 'badly scaled HU input'

        info = SampleInfo(
            path_a=path_a,
            path_b=path_b,
            depth_a=depth_a,
            depth_b=depth_b,
            shared_depth=shared,
            index_a=idx_a,
            index_b=idx_b
        )
        logger.debug(
            "Sampled %s: depths %d/%d, slices %d/%d",
            path_a.name, depth_a, depth_b, idx_a, idx_b
        )
        return sample, info

    def sample(self, path_a: Union[str, Path]) -> np.ndarray:
        """Return the (2, fine_size, fine_size) sample for ``path_a``."""
        sample, _ = self.sample_with_info(path_a)
        return sample

    __call__ = sample

    def __repr__(self) -> str:
        return f"PairSampler({self.config!r})"
