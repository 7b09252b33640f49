"""
Image I/O utilities using PIL (Pillow)
No OpenCV dependencies.
"""

import numpy as np
from PIL import Image

from .errors import InputError


def read_image(filepath):
    """
    Read image from file.

    Args:
        filepath: Path to image file

    Returns:
        Image as numpy array (H x W x 3), RGB, uint8
    """
    try:
        with Image.open(filepath) as img:
            if img.mode != 'RGB':
                img = img.convert('RGB')
            return np.array(img)

    except (OSError, ValueError) as e:
        raise InputError(f"Failed to read image from {filepath}: {str(e)}") from e


def write_image(filepath, image):
    """
    Write image to file.

    Args:
        filepath: Path to save image
        image: Image as numpy array
    """
    try:
        img = _to_pil(image)
        img.save(filepath)

    except (OSError, ValueError) as e:
        raise IOError(f"Failed to write image to {filepath}: {str(e)}") from e


def read_images(filepaths):
    """
    Read multiple images.

    Args:
        filepaths: List of image file paths

    Returns:
        List of images as numpy arrays
    """
    return [read_image(filepath) for filepath in filepaths]


def show_image(image, title='panorama'):
    """Open the image in the platform's default viewer."""
    _to_pil(image).show(title=title)


def _to_pil(image):
    # Ensure image is in correct format
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)
    return Image.fromarray(image)
