"""
Paired CT Dataset
=================
Indexes A-domain volumes under ``<root>/A/<phase>`` and serves paired
samples whose B counterparts live under ``<root>/B/<phase>``.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

import numpy as np

from .config import RunConfig
from .loader import NIFTI_PATTERNS
from .sampler import PairSampler

logger = logging.getLogger(__name__)


class PairedVolumeDataset:
    """
    Dataset of co-registered A/B CT volume pairs.

    Every file under ``A/<phase>/`` is expected to have a same-named
    counterpart under ``B/<phase>/``. Training and evaluation both go
    through ``PairSampler.sample``; the phase lives in the config.
    """

    def __init__(
        self,
        config: RunConfig,
        data_root: Optional[Union[str, Path]] = None,
        rng: Optional[np.random.Generator] = None,
        domain_a: str = "A",
        domain_b: str = "B"
    ):
        """
        Initialize the dataset.

        Args:
            config: Loader configuration
            data_root: Root holding the A/ and B/ trees; defaults to $DATA_ROOT
            rng: Random generator shared by sampling and shuffling
            domain_a: Name of the input-domain directory
            domain_b: Name of the target-domain directory
        """
        if data_root is None:
            data_root = os.environ.get('DATA_ROOT')
            if not data_root:
                raise ValueError("No data root given and DATA_ROOT is not set")

        self.config = config
        self.data_root = Path(data_root)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.dir_a = self.data_root / domain_a / config.phase
        self.dir_b = self.data_root / domain_b / config.phase

        for directory in (self.dir_a, self.dir_b):
            if not directory.is_dir():
                raise NotADirectoryError(f"Did not find directory: {directory}")

        self.domain_a = domain_a
        self.domain_b = domain_b
        self.sampler = PairSampler(
            config, rng=self.rng, domain_a=domain_a, domain_b=domain_b, pair_path=self.pair_path_for
        )
        self.paths: List[Path] = []

        self._discover_samples()

    def _discover_samples(self):
        """Scan the A-domain directory and catalog all volumes."""
        found = set()
        for pattern in NIFTI_PATTERNS:
            found.update(p for p in self.dir_a.glob(pattern) if p.is_file())
        self.paths = sorted(found)

        if not self.paths:
            raise ValueError(f"No NIfTI volumes found in {self.dir_a}")

        logger.info("Found %d %s volumes in %s", len(self.paths), self.domain_a, self.dir_a)

    def __len__(self) -> int:
        return len(self.paths)

    def __getitem__(self, idx: int) -> np.ndarray:
        """Load and return the paired sample for the idx-th A volume."""
        return self.sampler.sample(self.paths[idx])

    def sample_with_info(self, idx: int):
        """Paired sample for the idx-th A volume plus its SampleInfo."""
        return self.sampler.sample_with_info(self.paths[idx])

    def __iter__(self) -> Iterator[np.ndarray]:
        """Yield samples in file order, shuffled when selection is randomized."""
        for idx in self.order():
            yield self[idx]

    def order(self) -> List[int]:
        """Indices in file order, shuffled by the dataset's generator when randomized."""
        indices = np.arange(len(self.paths))
        if self.config.randomize:
            self.rng.shuffle(indices)
        return [int(idx) for idx in indices]

    def pair_path_for(self, path_a: Path) -> Path:
        """B-domain path of an A volume, relative to the phase directories."""
        return self.dir_b / Path(path_a).relative_to(self.dir_a)

    def find_unpaired(self) -> List[Path]:
        """Return A-domain volumes without a B-domain counterpart."""
        return [
            path for path in self.paths
            if not self.pair_path_for(path).is_file()
        ]
