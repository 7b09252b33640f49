"""
Radial panorama assembly pipeline
using only NumPy and mathematical libraries - no OpenCV dependencies.
"""

import logging
from enum import Enum

from .blending import Compositor, blend_mask_for
from .correspondence import CorrespondenceProvider
from .errors import InsufficientCorrespondences
from .features import HarrisDetector
from .matcher import FeatureMatcher
from .projection import Projection, SurfaceProjector
from .translation import TranslationEstimator
from .warping import compose_translation, translation_matrix, translation_of, warp_translation

logger = logging.getLogger(__name__)


class AssemblyState(Enum):
    INIT = 'init'
    PLACING = 'placing'
    DONE = 'done'


def horizontal_canvas_size(frame_shape, num_images, overlap=0.5, height_scale=1.2):
    """
    Canvas size for a left-to-right sweep.

    Assumes every new frame adds (1 - overlap) of a frame width, and leaves
    vertical slack for drift. This is an upper bound, not a tight fit.

    Returns:
        (height, width)
    """
    h, w = frame_shape[:2]
    width = int(w + (num_images - 1) * (1 - overlap) * w)
    height = int(height_scale * h)
    return height, width


class PanoramaAssembler:
    """
    Complete radial panorama pipeline.

    This class coordinates all components:
    1. Surface projection of every frame and its feathering mask
    2. Correspondences between each frame and its left neighbour
    3. Consensus translation estimation
    4. Chaining translations into canvas placements
    5. Feathered compositing onto the canvas
    """

    def __init__(self,
                 focal_length=2800.0,
                 projection=Projection.SPHERICAL,
                 detector_params=None,
                 matcher_params=None,
                 estimator_params=None,
                 good_match_factor=3.0,
                 provider=None,
                 canvas_sizer=horizontal_canvas_size):
        """
        Initialize Panorama Assembler.

        Args:
            focal_length: Focal length in pixels used for projection
            projection: Projection.SPHERICAL or Projection.CYLINDRICAL
            detector_params: Parameters for the Harris detector
            matcher_params: Parameters for the feature matcher
            estimator_params: Parameters for the translation estimator
            good_match_factor: Match trimming factor (multiple of best distance)
            provider: Correspondence provider, overrides detector/matcher params
            canvas_sizer: Callable (frame_shape, num_images) -> (height, width)
        """
        self.projector = SurfaceProjector(focal_length, projection)

        if provider is None:
            provider = CorrespondenceProvider(
                detector=HarrisDetector(**(detector_params or {})),
                matcher=FeatureMatcher(**(matcher_params or {})),
                good_match_factor=good_match_factor,
            )
        self.provider = provider

        self.estimator = TranslationEstimator(**(estimator_params or {}))
        self.compositor = Compositor()
        self.canvas_sizer = canvas_sizer

        self._reset()

    def _reset(self):
        self.state = AssemblyState.INIT
        self.current_index = None
        self.frames = []
        self.masks = []
        self.transforms = []
        self.canvas = None

    def prepare(self, images):
        """
        Project every frame and its blend mask.

        Args:
            images: List of images ordered left to right

        Returns:
            frames: Projected frames
            masks: Projected feathering masks
        """
        self._reset()

        frames = []
        masks = []
        for i, image in enumerate(images):
            logger.debug("Projecting image %d (%s)", i + 1, self.projector.projection.value)
            frames.append(self.projector.project(image))
            masks.append(self.projector.project_mask(blend_mask_for(image)))

        self.frames = frames
        self.masks = masks
        return frames, masks

    def assemble(self, images, return_debug_info=False):
        """
        Stitch images into one panorama.

        Args:
            images: List of images ordered left to right
            return_debug_info: If True, return per-pair debug information

        Returns:
            canvas: Stitched panorama
            debug_info: (Optional) List with one dict per placed pair
        """
        if len(images) < 2:
            raise ValueError("Need at least 2 images to stitch")

        logger.info("Stitching %d images...", len(images))

        self.prepare(images)
        self._place_first()

        debug_infos = []
        for i in range(1, len(self.frames)):
            debug = self._place(i)
            debug_infos.append(debug)

        self.state = AssemblyState.DONE
        self.current_index = None
        logger.info("Done!")

        if return_debug_info:
            return self.canvas, debug_infos

        return self.canvas

    def _place_first(self):
        first = self.frames[0]
        first_h = first.shape[0]

        canvas_shape = self.canvas_sizer(first.shape, len(self.frames))
        canvas_h = canvas_shape[0]

        # First frame sits at the left edge, centred vertically
        offset = translation_matrix(0, canvas_h // 2 - first_h // 2)
        self.transforms = [offset]

        self.state = AssemblyState.PLACING
        self.current_index = 0
        self.canvas = warp_translation(first, offset, canvas_shape)
        logger.info("Placed image 1 at %s", translation_of(offset))

    def _place(self, i):
        self.current_index = i
        current = self.frames[i]

        logger.info("Stitching image %d with its left neighbour...", i + 1)

        keypoints_a, keypoints_b, matches = self.provider.correspond(current, self.frames[i - 1])
        try:
            translation, consensus = self.estimator.estimate(
                matches, keypoints_a, keypoints_b, return_consensus=True
            )
        except InsufficientCorrespondences as e:
            raise InsufficientCorrespondences(pair=(i - 1, i)) from e

        transform = compose_translation(self.transforms[i - 1], translation.dx, translation.dy)
        self.transforms.append(transform)

        canvas_shape = self.canvas.shape[:2]
        warped = warp_translation(current, transform, canvas_shape)
        new_mask = warp_translation(self.masks[i], transform, canvas_shape)
        left_mask = warp_translation(self.masks[i - 1], self.transforms[i - 1], canvas_shape)

        self.compositor.blend(warped, new_mask, self.canvas, left_mask)
        logger.info("Placed image %d at %s", i + 1, translation_of(transform))

        return {
            'index': i,
            'num_matches': len(matches),
            'consensus': consensus,
            'translation': translation,
            'transform': transform,
        }
