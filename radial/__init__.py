"""
Radial panorama stitching without OpenCV.

Frames shot from one viewpoint are projected onto a cylinder or sphere,
where neighbouring frames differ only by a translation. Translations are
estimated from feature matches with a consensus search, chained into
canvas placements and feather-blended into one panorama, using only
NumPy, SciPy and Pillow.

Main components:
- SurfaceProjector: cylindrical / spherical inverse warp
- CorrespondenceProvider: Harris corners + brute-force L2 matching
- TranslationEstimator: consensus search over matched points
- Compositor: mask-weighted feathering
- PanoramaAssembler: the whole pipeline

Example usage:
    from radial.image_io import read_images, write_image
    from radial.assembler import PanoramaAssembler

    images = read_images(['img1.jpg', 'img2.jpg'])
    assembler = PanoramaAssembler(focal_length=2800)
    panorama = assembler.assemble(images)
    write_image('panorama.jpg', panorama)
"""

__version__ = '1.0.0'

from .assembler import PanoramaAssembler, horizontal_canvas_size
from .blending import Compositor, build_blend_mask
from .correspondence import CorrespondenceProvider
from .errors import DimensionMismatch, InputError, InsufficientCorrespondences, StitchingError
from .image_io import read_image, read_images, write_image
from .projection import Projection, SurfaceProjector
from .translation import Translation, TranslationEstimator

__all__ = [
    'PanoramaAssembler',
    'horizontal_canvas_size',
    'Compositor',
    'build_blend_mask',
    'CorrespondenceProvider',
    'DimensionMismatch',
    'InputError',
    'InsufficientCorrespondences',
    'StitchingError',
    'read_image',
    'read_images',
    'write_image',
    'Projection',
    'SurfaceProjector',
    'Translation',
    'TranslationEstimator',
]
