"""
Feathering masks and alpha compositing for panorama stitching
using only NumPy - no OpenCV dependencies.
"""

import numpy as np

from .errors import DimensionMismatch


def build_blend_mask(width, height):
    """
    Create a feathering mask that fades linearly from the centre to the edges.

    Distances to each edge are counted 1-based, so border pixels sit at
    distance 1 and get weight exactly 0.

    Args:
        width: Mask width in pixels
        height: Mask height in pixels

    Returns:
        mask: Float mask (height x width) with values in [0, 1]
    """
    max_dist = min(width, height) // 2
    if max_dist == 0:
        return np.zeros((height, width), dtype=np.float64)

    x = np.arange(width)
    y = np.arange(height)

    x_dist = np.minimum(x + 1, width - x)
    y_dist = np.minimum(y + 1, height - y)

    dist = np.minimum(y_dist[:, np.newaxis], x_dist[np.newaxis, :])

    return (dist - 1) / float(max_dist)


def blend_mask_for(image, mask=None):
    """
    Build the feathering mask for an image.

    Args:
        image: Image the mask belongs to
        mask: Optional float array to fill in place

    Returns:
        mask: Feathering mask with the image's height and width
    """
    h, w = image.shape[:2]
    weights = build_blend_mask(w, h)

    if mask is None:
        return weights

    if mask.shape[:2] != (h, w):
        raise DimensionMismatch((h, w), mask.shape[:2], what='blend mask')

    mask[...] = weights
    return mask


class Compositor:
    """
    Alpha compositing of a new frame into the panorama canvas.

    A canvas pixel counts as populated when its first channel is non-zero.
    Where both the canvas and the new frame are populated, the pixel becomes
    the mask-weighted average of the two; where the canvas is empty the new
    pixel is copied as is. A genuinely black first channel therefore reads
    as empty.
    """

    def blend(self, new_image, new_mask, canvas, canvas_mask):
        """
        Blend new_image into canvas in place.

        Args:
            new_image: Frame already resampled onto the canvas (H x W x C)
            new_mask: Feathering weights of new_image (H x W)
            canvas: Panorama canvas, updated in place (H x W x C)
            canvas_mask: Feathering weights of the canvas content (H x W)

        Returns:
            canvas
        """
        if new_image.shape != canvas.shape:
            raise DimensionMismatch(canvas.shape, new_image.shape, what='image')
        for weights in (new_mask, canvas_mask):
            if weights.shape[:2] != canvas.shape[:2]:
                raise DimensionMismatch(canvas.shape[:2], weights.shape[:2], what='mask')

        if canvas.ndim == 2:
            new_pixels = new_image[:, :, np.newaxis]
            canvas_pixels = canvas[:, :, np.newaxis]
        else:
            new_pixels = new_image
            canvas_pixels = canvas

        canvas_filled = canvas_pixels[:, :, 0] != 0
        new_filled = new_pixels[:, :, 0] != 0

        alpha_new = np.asarray(new_mask, dtype=np.float64)
        alpha_canvas = np.asarray(canvas_mask, dtype=np.float64)
        alpha_sum = alpha_new + alpha_canvas

        # Zero total weight keeps whatever the canvas already holds
        feather = canvas_filled & new_filled & (alpha_sum != 0)
        copy = ~canvas_filled

        if np.any(feather):
            a_n = alpha_new[feather][:, np.newaxis]
            a_c = alpha_canvas[feather][:, np.newaxis]
            mixed = (a_n * new_pixels[feather] + a_c * canvas_pixels[feather]) / (a_n + a_c)
            canvas_pixels[feather] = self._to_dtype(mixed, canvas.dtype)

        canvas_pixels[copy] = new_pixels[copy]

        return canvas

    def _to_dtype(self, values, dtype):
        """Truncate blended values into the canvas dtype."""
        if np.issubdtype(dtype, np.integer):
            info = np.iinfo(dtype)
            values = np.clip(values, info.min, info.max)
        return values.astype(dtype)
