"""
Robust translation estimation between two projected frames
using a RANSAC-style consensus search - no OpenCV dependencies.
"""

import logging
from collections import namedtuple

import numpy as np

from .errors import InsufficientCorrespondences

logger = logging.getLogger(__name__)


Translation = namedtuple('Translation', ['dx', 'dy'])


def exact_zero_fallback(best, last, consensus):
    """
    Replace an axis of the best translation that is exactly zero with the
    last trial's hypothesis on that axis.
    """
    dx = last.dx if best.dx == 0 else best.dx
    dy = last.dy if best.dy == 0 else best.dy
    return Translation(dx, dy)


def no_consensus_fallback(best, last, consensus):
    """Use the last trial's hypothesis only when no trial found support."""
    return last if consensus == 0 else best


FALLBACK_POLICIES = {
    'exact_zero': exact_zero_fallback,
    'no_consensus': no_consensus_fallback,
}

SAMPLING_MODES = ('random', 'sequential')


class TranslationEstimator:
    """
    Translation estimation using a consensus search.

    Each trial takes one match as the hypothesis and counts how many
    other matches agree with it on both axes within the tolerance. The
    trial with the largest support wins; ties go to the earlier trial.
    """

    def __init__(self, tolerance=3.0, seed=0, sampling='random',
                 fallback='exact_zero', chunk_size=512):
        """
        Initialize Translation Estimator.

        Args:
            tolerance: Per-axis agreement tolerance in pixels
            seed: Seed for drawing hypotheses, reused on every call
            sampling: 'random' draws one match per trial from [0, N),
                      'sequential' uses match i for trial i
            fallback: Name in FALLBACK_POLICIES or a callable
                      (best, last, consensus) -> Translation
            chunk_size: Trials scored at once, bounds memory use
        """
        if sampling not in SAMPLING_MODES:
            raise ValueError(f"Unknown sampling mode: {sampling}")

        if callable(fallback):
            self.fallback = fallback
        elif fallback in FALLBACK_POLICIES:
            self.fallback = FALLBACK_POLICIES[fallback]
        else:
            raise ValueError(f"Unknown fallback policy: {fallback}")

        self.tolerance = tolerance
        self.seed = seed
        self.sampling = sampling
        self.chunk_size = chunk_size

    def estimate(self, matches, keypoints_a, keypoints_b, return_consensus=False):
        """
        Estimate the translation taking keypoints_a onto keypoints_b.

        Args:
            matches: Match dicts, queryIdx into keypoints_a,
                     trainIdx into keypoints_b
            keypoints_a: Keypoints with a .pt attribute
            keypoints_b: Keypoints with a .pt attribute
            return_consensus: If True, also return the winning support

        Returns:
            translation: Translation(dx, dy)
            consensus: (Optional) Number of matches agreeing with it
        """
        points_a = [keypoints_a[m['queryIdx']].pt for m in matches]
        points_b = [keypoints_b[m['trainIdx']].pt for m in matches]

        translation, consensus = self.find_translation(points_a, points_b)

        if return_consensus:
            return translation, consensus

        return translation

    def find_translation(self, points_a, points_b):
        """
        Find the translation with the largest consensus.

        Args:
            points_a: Points in image A (N x 2)
            points_b: Corresponding points in image B (N x 2)

        Returns:
            translation: Translation(dx, dy) of points_b - points_a
            consensus: Number of other matches agreeing with the winner
        """
        points_a = np.asarray(points_a, dtype=np.float64).reshape(-1, 2)
        points_b = np.asarray(points_b, dtype=np.float64).reshape(-1, 2)

        if len(points_a) != len(points_b):
            raise ValueError("Point sets must have same length")

        n_points = len(points_a)
        if n_points == 0:
            raise InsufficientCorrespondences()

        offsets = points_b - points_a
        hypotheses = self._draw_hypotheses(n_points)
        support = self._consensus_counts(offsets, hypotheses)

        # argmax returns the first maximal trial
        best_trial = int(np.argmax(support))
        consensus = int(support[best_trial])

        if consensus > 0:
            best = Translation(*map(float, offsets[hypotheses[best_trial]]))
        else:
            best = Translation(0.0, 0.0)

        last = Translation(*map(float, offsets[hypotheses[-1]]))
        translation = self.fallback(best, last, consensus)

        logger.info(
            "Translation (%.2f, %.2f) agreed by %d of %d matches",
            translation.dx, translation.dy, consensus, n_points,
        )

        return translation, consensus

    def _draw_hypotheses(self, n_points):
        """Match index used as hypothesis for every trial (N trials)."""
        if self.sampling == 'sequential':
            return np.arange(n_points)

        rng = np.random.default_rng(self.seed)
        return rng.integers(0, n_points, size=n_points)

    def _consensus_counts(self, offsets, hypotheses):
        """Number of agreeing matches for every trial, excluding the hypothesis."""
        counts = np.empty(len(hypotheses), dtype=np.int64)
        columns = np.arange(len(offsets))

        for start in range(0, len(hypotheses), self.chunk_size):
            trial_idx = hypotheses[start:start + self.chunk_size]

            diff = np.abs(offsets[trial_idx][:, np.newaxis, :] - offsets[np.newaxis, :, :])
            agree = np.all(diff < self.tolerance, axis=2)

            # A hypothesis does not vote for itself
            agree &= columns[np.newaxis, :] != trial_idx[:, np.newaxis]

            counts[start:start + len(trial_idx)] = agree.sum(axis=1)

        return counts
