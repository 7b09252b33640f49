"""
Exceptions raised by the stitching pipeline.
"""


class StitchingError(Exception):
    """Base class for every error raised while building a panorama."""


class InputError(StitchingError, IOError):
    """An input image could not be read or decoded."""


class DimensionMismatch(StitchingError, ValueError):
    """Two buffers that must share a size do not."""

    def __init__(self, expected, actual, what='buffer'):
        self.expected = tuple(expected)
        self.actual = tuple(actual)
        super().__init__(
            f"{what} size mismatch: expected {self.expected}, got {self.actual}"
        )


class InsufficientCorrespondences(StitchingError, ValueError):
    """Not enough matches between two frames to estimate their offset."""

    def __init__(self, message="images do not overlap enough", pair=None):
        self.pair = pair
        if pair is not None:
            message = f"frames {pair[0]} and {pair[1]}: {message}"
        super().__init__(message)
