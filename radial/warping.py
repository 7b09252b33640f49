"""
Translation transforms and image resampling onto the panorama canvas
using only NumPy - no OpenCV dependencies.

Placements are kept as 3x3 homogeneous matrices with only the
translation column populated.
"""

import numpy as np


def translation_matrix(dx, dy):
    """Homogeneous 3x3 matrix translating by (dx, dy)."""
    return np.array([
        [1, 0, dx],
        [0, 1, dy],
        [0, 0, 1]
    ], dtype=np.float64)


def translation_of(transform):
    """Extract (dx, dy) from a translation matrix."""
    return float(transform[0, 2]), float(transform[1, 2])


def compose_translation(transform, dx, dy):
    """
    Chain a pairwise translation onto an accumulated placement.

    Only translations are chained, so composition is addition of the
    translation columns.
    """
    tx, ty = translation_of(transform)
    return translation_matrix(tx + dx, ty + dy)


def warp_translation(image, transform, output_shape):
    """
    Shift an image onto a larger canvas.

    Args:
        image: Input image (H x W x C) or (H x W)
        transform: 3x3 translation matrix from image to canvas coordinates
        output_shape: Canvas shape (height, width)

    Returns:
        Shifted image with the canvas size and the input dtype
    """
    h, w = output_shape[:2]
    dx, dy = translation_of(transform)

    # Backward mapping: canvas pixel (x, y) reads image pixel (x - dx, y - dy)
    y_coords, x_coords = np.meshgrid(np.arange(h), np.arange(w), indexing='ij')
    src_x = x_coords - dx
    src_y = y_coords - dy

    return bilinear_interpolate(image, src_x, src_y)


def bilinear_interpolate(image, x, y):
    """
    Bilinear interpolation for image warping.

    Samples outside the image are zero.

    Args:
        image: Input image (H x W x C) or (H x W)
        x: X coordinates (h x w)
        y: Y coordinates (h x w)

    Returns:
        Interpolated values (h x w x C) or (h x w), in the input dtype
    """
    h, w = image.shape[:2]

    # Get integer coordinates
    x0 = np.floor(x).astype(int)
    y0 = np.floor(y).astype(int)

    # Get fractional parts before clipping
    fx = x - x0
    fy = y - y0

    # Handle out of bounds
    inside = (x >= 0) & (x <= w - 1) & (y >= 0) & (y <= h - 1)

    # Clip to image boundaries
    x0 = np.clip(x0, 0, w - 1)
    x1 = np.clip(x0 + 1, 0, w - 1)
    y0 = np.clip(y0, 0, h - 1)
    y1 = np.clip(y0 + 1, 0, h - 1)

    w00 = (1 - fx) * (1 - fy)
    w01 = (1 - fx) * fy
    w10 = fx * (1 - fy)
    w11 = fx * fy

    if image.ndim == 3:
        w00, w01, w10, w11 = (wt[:, :, np.newaxis] for wt in (w00, w01, w10, w11))
        inside_c = inside[:, :, np.newaxis]
    else:
        inside_c = inside

    image_f = image.astype(np.float64)
    values = (w00 * image_f[y0, x0] + w01 * image_f[y1, x0] +
              w10 * image_f[y0, x1] + w11 * image_f[y1, x1])
    values = values * inside_c

    if np.issubdtype(image.dtype, np.integer):
        info = np.iinfo(image.dtype)
        values = np.clip(np.round(values), info.min, info.max)

    return values.astype(image.dtype)
