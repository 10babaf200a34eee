"""
CT Volume Loader
================
Reads NIfTI (.nii, .nii.gz) CT volumes and resolves A/B domain pairs.
"""

import logging
import zlib
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

import numpy as np
import nibabel as nib
from nibabel.filebasedimages import ImageFileError
from nibabel.spatialimages import HeaderDataError

from .errors import DecodeError, MissingPairError

logger = logging.getLogger(__name__)

NIFTI_PATTERNS = ("*.nii", "*.nii.gz")


def load_nifti(
    filepath: Union[str, Path],
    return_header: bool = False
) -> Union[np.ndarray, Tuple[np.ndarray, dict]]:
    """
    Load a NIfTI file (.nii or .nii.gz) as raw intensities.

    Args:
        filepath: Path to NIfTI file
        return_header: If True, return header info with volume

    Returns:
        float32 array of rank 2, 3 or 4, optionally with header dict

    Raises:
        FileNotFoundError: if the file does not exist
        DecodeError: if nibabel cannot parse the file or it holds no voxels
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"NIfTI file not found: {filepath}")

    try:
        nii = nib.load(str(filepath))
        volume = np.asarray(nii.get_fdata(), dtype=np.float32)
    except (ImageFileError, HeaderDataError, OSError, EOFError, ValueError, zlib.error) as e:
        raise DecodeError(f"Failed to read NIfTI volume at {filepath}: {e}") from e

    if volume.size == 0:
        raise DecodeError(f"Failed to read NIfTI volume at {filepath}: no voxel data")

    logger.debug("Loaded %s with shape %s", filepath, volume.shape)

    if return_header:
        header_info = {
            'affine': nii.affine,
            'spacing': tuple(float(z) for z in nii.header.get_zooms()[:3]),
            'shape': volume.shape,
            'dtype': str(volume.dtype),
        }
        return volume, header_info

    return volume


def derive_pair_path(
    path_a: Union[str, Path],
    domain_a: str = "A",
    domain_b: str = "B"
) -> Path:
    """
    Map an A-domain volume path to its B-domain counterpart.

    The first path segment equal to ``domain_a`` is replaced with ``domain_b``,
    e.g. ``/data/A/train/case01.nii.gz`` -> ``/data/B/train/case01.nii.gz``.

    Raises:
        MissingPairError: if the path has no ``domain_a`` segment
    """
    parts = list(Path(path_a).parts)
    try:
        pos = parts.index(domain_a)
    except ValueError:
        raise MissingPairError(
            f"No '{domain_a}' directory in path {path_a}; cannot locate its pair"
        ) from None
    parts[pos] = domain_b
    return Path(*parts)


def require_pair(
    path_a: Union[str, Path],
    domain_a: str = "A",
    domain_b: str = "B",
    pair_path: Optional[Callable[[Path], Path]] = None
) -> Path:
    """
    Return the existing B-domain path for ``path_a`` or raise MissingPairError.

    ``pair_path`` overrides the segment substitution of ``derive_pair_path``.
    """
    if pair_path is not None:
        path_b = Path(pair_path(Path(path_a)))
    else:
        path_b = derive_pair_path(path_a, domain_a, domain_b)
    if not path_b.is_file():
        raise MissingPairError(f"Missing paired volume for {path_a} (expected {path_b})")
    return path_b
