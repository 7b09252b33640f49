"""
Harris corner detection with normalised patch descriptors
using only NumPy and SciPy - no OpenCV dependencies.
"""

import logging

import numpy as np
from scipy.ndimage import gaussian_filter, maximum_filter, sobel

logger = logging.getLogger(__name__)


class Keypoint:
    """Simple keypoint class to store keypoint information."""

    def __init__(self, x, y, response=0.0):
        self.pt = (float(x), float(y))  # (x, y) coordinates
        self.response = response

    def __repr__(self):
        return f"Keypoint(pt=({self.pt[0]:.1f}, {self.pt[1]:.1f}), response={self.response:.3g})"


def to_grayscale(image):
    """Convert image to float grayscale if needed."""
    if image.ndim == 3:
        # RGB to grayscale using standard weights
        return np.dot(image[..., :3].astype(np.float64), [0.299, 0.587, 0.114])
    return image.astype(np.float64)


class HarrisDetector:
    """
    Harris corner detector.

    Corners are local maxima of the Harris response
    R = det(M) - k * trace(M)^2 computed on the smoothed structure tensor.
    Each corner is described by a blurred square patch around it,
    normalised to zero mean and unit variance.
    """

    def __init__(self, sigma_derivative=1.0, sigma_integration=2.0, k=0.04,
                 threshold_ratio=0.001, max_features=2000, patch_radius=4,
                 descriptor_sigma=1.5):
        """
        Initialize Harris detector.

        Args:
            sigma_derivative: Gaussian blur applied before taking gradients
            sigma_integration: Gaussian window for the structure tensor
            k: Harris sensitivity constant
            threshold_ratio: Keep responses above this fraction of the maximum
            max_features: Keep at most this many strongest corners
            patch_radius: Descriptor patch is (2r + 1) x (2r + 1)
            descriptor_sigma: Blur applied before sampling descriptor patches
        """
        self.sigma_derivative = sigma_derivative
        self.sigma_integration = sigma_integration
        self.k = k
        self.threshold_ratio = threshold_ratio
        self.max_features = max_features
        self.patch_radius = patch_radius
        self.descriptor_sigma = descriptor_sigma

    def detect_and_compute(self, image):
        """
        Detect keypoints and compute descriptors.

        Args:
            image: Grayscale or RGB image

        Returns:
            keypoints: List of Keypoint objects
            descriptors: Array of descriptors (N x D)
        """
        gray = to_grayscale(image)
        keypoints = self.detect(gray)
        keypoints, descriptors = self.compute(keypoints, gray)
        logger.debug("Detected %d keypoints with descriptors", len(keypoints))
        return keypoints, descriptors

    def detect(self, gray):
        """Find Harris corners, strongest first."""
        response = self._harris_response(gray)

        if response.max() <= 0:
            return []

        threshold = response.max() * self.threshold_ratio

        footprint = np.ones((3, 3), dtype=bool)
        footprint[1, 1] = False
        neighbour_max = maximum_filter(response, footprint=footprint, mode='constant')

        peaks = (response > threshold) & (response > neighbour_max)

        # Corners too close to the border cannot be described
        r = self.patch_radius
        if r > 0:
            peaks[:r, :] = False
            peaks[-r:, :] = False
            peaks[:, :r] = False
            peaks[:, -r:] = False

        ys, xs = np.nonzero(peaks)
        strengths = response[ys, xs]

        # Stable sort keeps raster order among equal responses
        order = np.argsort(-strengths, kind='stable')
        if self.max_features is not None:
            order = order[:self.max_features]

        return [Keypoint(xs[i], ys[i], strengths[i]) for i in order]

    def compute(self, keypoints, gray):
        """
        Compute normalised patch descriptors.

        Keypoints on flat patches (no variance) are dropped.

        Returns:
            keypoints: Keypoints that received a descriptor
            descriptors: Array of descriptors (N x D)
        """
        r = self.patch_radius
        size = 2 * r + 1
        blurred = gaussian_filter(gray, self.descriptor_sigma)

        kept = []
        descriptors = []
        for kp in keypoints:
            x, y = int(kp.pt[0]), int(kp.pt[1])
            patch = blurred[y - r:y + r + 1, x - r:x + r + 1]
            if patch.shape != (size, size):
                continue

            patch = patch - patch.mean()
            std = patch.std()
            if std < 1e-8:
                continue

            kept.append(kp)
            descriptors.append((patch / std).ravel())

        if not descriptors:
            return [], np.zeros((0, size * size), dtype=np.float32)

        return kept, np.array(descriptors, dtype=np.float32)

    def _harris_response(self, gray):
        smoothed = gaussian_filter(gray, self.sigma_derivative)

        I_x = sobel(smoothed, axis=1, mode='reflect') / 8.0
        I_y = sobel(smoothed, axis=0, mode='reflect') / 8.0

        S_x2 = gaussian_filter(I_x * I_x, self.sigma_integration)
        S_y2 = gaussian_filter(I_y * I_y, self.sigma_integration)
        S_xy = gaussian_filter(I_x * I_y, self.sigma_integration)

        det_M = S_x2 * S_y2 - S_xy * S_xy
        trace_M = S_x2 + S_y2

        return det_M - self.k * trace_M * trace_M
