"""
Projection of planar frames onto a cylindrical or spherical surface
using only NumPy - no OpenCV dependencies.

Once frames are projected with the right focal length, rotating the
camera about its centre becomes a plain translation on the surface.
"""

from enum import Enum

import numpy as np


# Samples whose direction has (almost) no depth component are skipped
DEPTH_EPSILON = 1e-9


class Projection(Enum):
    CYLINDRICAL = 'cylindrical'
    SPHERICAL = 'spherical'


def round_half_away(values):
    """Round to the nearest integer, halves away from zero."""
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def sample_coordinates(shape, focal_length, projection=Projection.SPHERICAL):
    """
    Compute the inverse map from surface pixels to source pixels.

    Args:
        shape: Image shape, only (height, width) is used
        focal_length: Focal length in pixels (> 0)
        projection: Projection.CYLINDRICAL or Projection.SPHERICAL

    Returns:
        x_in: Source column for every destination pixel (H x W, int)
        y_in: Source row for every destination pixel (H x W, int)
        valid: Boolean mask of destination pixels with an in-bounds sample
    """
    if focal_length <= 0:
        raise ValueError(f"Focal length must be positive, got {focal_length}")

    projection = Projection(projection)
    h, w = shape[:2]
    x_center = w // 2
    y_center = h // 2

    y_coords, x_coords = np.indices((h, w), dtype=np.float64)
    theta = (x_coords - x_center) / focal_length

    if projection is Projection.CYLINDRICAL:
        x_dir = np.sin(theta)
        y_dir = (y_coords - y_center) / focal_length
        z_dir = np.cos(theta)
    else:
        phi = (y_coords - y_center) / focal_length
        x_dir = np.sin(theta) * np.cos(phi)
        y_dir = np.sin(phi)
        z_dir = np.cos(theta) * np.cos(phi)

    has_depth = np.abs(z_dir) >= DEPTH_EPSILON
    z_safe = np.where(has_depth, z_dir, 1.0)

    x_in = round_half_away(focal_length * x_dir / z_safe + x_center)
    y_in = round_half_away(focal_length * y_dir / z_safe + y_center)

    valid = has_depth & (x_in > -1) & (x_in < w) & (y_in > -1) & (y_in < h)

    # Invalid entries are parked at 0 so the int cast never sees huge values
    x_in = np.where(valid, x_in, 0).astype(np.intp)
    y_in = np.where(valid, y_in, 0).astype(np.intp)

    return x_in, y_in, valid


class SurfaceProjector:
    """
    Nearest-sample inverse warp onto a radial surface.

    Every destination pixel looks up exactly one source pixel; pixels
    whose sample falls outside the source stay at zero.
    """

    def __init__(self, focal_length=2800.0, projection=Projection.SPHERICAL):
        """
        Initialize Surface Projector.

        Args:
            focal_length: Focal length in pixels
            projection: Projection mode (enum member or its string value)
        """
        if focal_length <= 0:
            raise ValueError(f"Focal length must be positive, got {focal_length}")
        self.focal_length = float(focal_length)
        self.projection = Projection(projection)
        self._maps = {}

    def project(self, image):
        """
        Project an image (H x W x C or H x W) onto the surface.

        Returns:
            Projected image with the input's shape and dtype
        """
        x_in, y_in, valid = self._coordinates(image.shape)

        output = np.zeros_like(image)
        output[valid] = image[y_in[valid], x_in[valid]]

        return output

    def project_mask(self, mask):
        """Project a single-channel float mask with the same mapping."""
        mask = np.asarray(mask, dtype=np.float64)
        return self.project(mask)

    def _coordinates(self, shape):
        # Frames of one sequence share a size, so the map is computed once
        key = tuple(shape[:2])
        if key not in self._maps:
            self._maps[key] = sample_coordinates(
                key, self.focal_length, self.projection
            )
        return self._maps[key]
