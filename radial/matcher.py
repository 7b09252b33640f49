"""
Feature matching using L2 distance (Euclidean distance).
Pure implementation without OpenCV.
"""

import numpy as np


class FeatureMatcher:
    """
    Brute-force feature matcher using L2 (Euclidean) distance.

    Every query descriptor is paired with its nearest train descriptor.
    Cross-check and Lowe's ratio test are available but off by default.
    """

    def __init__(self, cross_check=False, ratio_threshold=None):
        """
        Initialize feature matcher.

        Args:
            cross_check: Keep only mutual nearest neighbours
            ratio_threshold: Lowe's ratio test threshold, None to disable
        """
        self.cross_check = cross_check
        self.ratio_threshold = ratio_threshold

    def match(self, descriptors1, descriptors2):
        """
        Match features between two sets of descriptors.

        Args:
            descriptors1: Query descriptors (N x D)
            descriptors2: Train descriptors (M x D)

        Returns:
            matches: List of dicts with queryIdx, trainIdx and distance,
                     in query order
        """
        if len(descriptors1) == 0 or len(descriptors2) == 0:
            return []

        desc1 = np.asarray(descriptors1, dtype=np.float32)
        desc2 = np.asarray(descriptors2, dtype=np.float32)

        distances = self._compute_distance_matrix(desc1, desc2)

        matches = self._find_best_matches(distances)

        if self.cross_check:
            reverse = self._find_best_matches(distances.T, use_ratio=False)
            matches = self._cross_check_matches(matches, reverse)

        return matches

    def _compute_distance_matrix(self, desc1, desc2):
        """
        Compute L2 distance matrix between two sets of descriptors.

        Returns:
            distances: N x M matrix, distances[i, j] = ||desc1[i] - desc2[j]||
        """
        # ||a - b||^2 = ||a||^2 + ||b||^2 - 2*a·b
        sq_norms1 = np.sum(desc1 ** 2, axis=1, keepdims=True)
        sq_norms2 = np.sum(desc2 ** 2, axis=1, keepdims=True)

        sq_distances = sq_norms1 + sq_norms2.T - 2 * np.dot(desc1, desc2.T)

        # Ensure non-negative (numerical stability)
        return np.sqrt(np.maximum(sq_distances, 0))

    def _find_best_matches(self, distances, use_ratio=True):
        """Nearest neighbour of every row, optionally filtered by the ratio test."""
        nearest = np.argmin(distances, axis=1)
        nearest_dist = distances[np.arange(len(distances)), nearest]

        keep = np.ones(len(distances), dtype=bool)
        if use_ratio and self.ratio_threshold is not None and distances.shape[1] >= 2:
            second_dist = np.partition(distances, 1, axis=1)[:, 1]
            keep = (second_dist > 0) & (nearest_dist < self.ratio_threshold * second_dist)

        return [
            {
                'queryIdx': int(i),
                'trainIdx': int(nearest[i]),
                'distance': float(nearest_dist[i]),
            }
            for i in np.nonzero(keep)[0]
        ]

    def _cross_check_matches(self, matches_1to2, matches_2to1):
        """Keep only mutually consistent matches."""
        reverse = {m['queryIdx']: m['trainIdx'] for m in matches_2to1}
        return [m for m in matches_1to2 if reverse.get(m['trainIdx']) == m['queryIdx']]


def filter_good_matches(matches, factor=3.0):
    """
    Drop matches much worse than the best one.

    Keeps matches whose distance is below factor times the smallest
    distance. When the best distance is exactly 0, the exact matches are kept.

    Args:
        matches: List of match dicts
        factor: Multiple of the minimum distance to accept

    Returns:
        List of retained matches, order preserved
    """
    if not matches:
        return []

    min_distance = min(m['distance'] for m in matches)
    threshold = factor * min_distance

    if threshold <= 0:
        return [m for m in matches if m['distance'] <= threshold]

    return [m for m in matches if m['distance'] < threshold]
