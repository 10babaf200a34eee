"""
Run Configuration
=================
Immutable settings shared by every stage of the paired-slice pipeline.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

from .errors import RangeError


DEFAULT_HU_MIN = -1000.0
DEFAULT_HU_MAX = 3000.0


@dataclass(frozen=True)
class RunConfig:
    """Loader configuration, set once at construction."""
    phase: str                        # 'train' or any evaluation phase name
    load_size: int                    # Side length after resizing
    fine_size: int                    # Side length after cropping
    exclude_slices: int = 0           # Slices skipped at each end of the volume
    hu_min: float = DEFAULT_HU_MIN
    hu_max: float = DEFAULT_HU_MAX
    flip: bool = False                # Horizontal flip augmentation (train only)
    serial_batches: bool = False      # Disables train-time randomization
    input_nc: int = 1
    output_nc: int = 1

    def __post_init__(self):
        if not self.phase:
            raise ValueError("phase must be a non-empty string")
        if self.input_nc != 1 or self.output_nc != 1:
            raise ValueError(
                f"HU slice loading requires input_nc=1 and output_nc=1, "
                f"got input_nc={self.input_nc}, output_nc={self.output_nc}"
            )
        if self.load_size <= 0 or self.fine_size <= 0:
            raise ValueError(
                f"Sizes must be positive: load_size={self.load_size}, fine_size={self.fine_size}"
            )
        if self.fine_size > self.load_size:
            raise ValueError(
                f"fine_size ({self.fine_size}) cannot exceed load_size ({self.load_size})"
            )
        if self.hu_max <= self.hu_min:
            raise RangeError(f"hu_max ({self.hu_max}) must be greater than hu_min ({self.hu_min})")

    @property
    def is_train(self) -> bool:
        return self.phase == 'train'

    @property
    def randomize(self) -> bool:
        """True when slice and crop selection should be random."""
        return self.is_train and not self.serial_batches

    @classmethod
    def from_namespace(cls, args) -> 'RunConfig':
        """
        Build a config from parsed command-line options.

        Args:
            args: argparse.Namespace using the loader's option names
                (loadSize, fineSize, hu_min, ...)

        Returns:
            RunConfig
        """
        return cls(
            phase=args.phase,
            load_size=int(args.loadSize),
            fine_size=int(args.fineSize),
            exclude_slices=int(getattr(args, 'exclude_slices', 0)),
            hu_min=float(getattr(args, 'hu_min', DEFAULT_HU_MIN)),
            hu_max=float(getattr(args, 'hu_max', DEFAULT_HU_MAX)),
            flip=bool(getattr(args, 'flip', False)),
            serial_batches=bool(getattr(args, 'serial_batches', False)),
            input_nc=int(getattr(args, 'input_nc', 1)),
            output_nc=int(getattr(args, 'output_nc', 1)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
