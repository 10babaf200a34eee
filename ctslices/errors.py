"""
Loader Errors
=============
Exceptions raised while turning a pair of CT volumes into a training sample.
"""


class SliceLoaderError(Exception):
    """Base class for all paired-slice loading failures."""


class DecodeError(SliceLoaderError):
    """A volume file could not be parsed or contained no data."""


class MissingPairError(SliceLoaderError, FileNotFoundError):
    """The B-domain counterpart of an A-domain volume does not exist."""


class UnsupportedShapeError(SliceLoaderError, ValueError):
    """A volume has a rank other than 2, 3 or 4."""


class RangeError(SliceLoaderError, ValueError):
    """Intensity bounds are invalid (max <= min)."""
