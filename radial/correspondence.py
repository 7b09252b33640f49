"""
Point correspondences between two frames.

The provider glues a keypoint detector and a descriptor matcher together.
Any detector with detect_and_compute(image) -> (keypoints, descriptors)
and any matcher with match(desc1, desc2) -> matches can be plugged in.
"""

import logging

from .features import HarrisDetector
from .matcher import FeatureMatcher, filter_good_matches

logger = logging.getLogger(__name__)


class CorrespondenceProvider:
    """Detects, matches and trims correspondences between two images."""

    def __init__(self, detector=None, matcher=None, good_match_factor=3.0):
        """
        Initialize Correspondence Provider.

        Args:
            detector: Keypoint detector, defaults to HarrisDetector()
            matcher: Descriptor matcher, defaults to FeatureMatcher()
            good_match_factor: Keep matches closer than this multiple
                               of the best match distance
        """
        self.detector = detector if detector is not None else HarrisDetector()
        self.matcher = matcher if matcher is not None else FeatureMatcher()
        self.good_match_factor = good_match_factor

    def correspond(self, image_a, image_b):
        """
        Find matched points between two images.

        Args:
            image_a: Query image (the frame being placed)
            image_b: Train image (its already placed neighbour)

        Returns:
            keypoints_a: Keypoints of image_a
            keypoints_b: Keypoints of image_b
            matches: Good matches, queryIdx into keypoints_a,
                     trainIdx into keypoints_b
        """
        keypoints_a, descriptors_a = self.detector.detect_and_compute(image_a)
        keypoints_b, descriptors_b = self.detector.detect_and_compute(image_b)
        logger.info("Found %d and %d keypoints", len(keypoints_a), len(keypoints_b))

        matches = self.matcher.match(descriptors_a, descriptors_b)
        good = filter_good_matches(matches, self.good_match_factor)
        logger.info("Kept %d of %d matches", len(good), len(matches))

        return keypoints_a, keypoints_b, good
