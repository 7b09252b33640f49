#!/usr/bin/env python3
"""
Radial Panorama Stitching CLI
Command-line interface for stitching frames shot from one viewpoint.

Usage:
    python -m radial.panorama_cli image1.jpg image2.jpg image3.jpg [options]
"""

import argparse
import logging
import os
import sys
import time

from .assembler import PanoramaAssembler
from .errors import InputError, InsufficientCorrespondences, StitchingError
from .image_io import read_images, show_image, write_image
from .projection import Projection
from .translation import FALLBACK_POLICIES, SAMPLING_MODES


def print_banner():
    """Print ASCII art banner."""
    banner = r"""
 ____           _ _       _
|  _ \ __ _  __| (_) __ _| |
| |_) / _` |/ _` | |/ _` | |
|  _ < (_| | (_| | | (_| | |
|_| \_\__,_|\__,_|_|\__,_|_|

Radial Panorama Stitcher
    """
    print(banner)


def build_parser():
    parser = argparse.ArgumentParser(
        description='Stitch frames taken from one viewpoint into a panorama'
    )

    parser.add_argument(
        'images',
        nargs='+',
        help='Input images (left to right order)'
    )

    parser.add_argument(
        '-o', '--output',
        default='panorama.jpg',
        help='Output panorama image path (default: panorama.jpg)'
    )

    parser.add_argument(
        '--focal-length',
        type=float,
        default=2800.0,
        help='Focal length in pixels used for projection (default: 2800)'
    )

    parser.add_argument(
        '--projection',
        choices=[p.value for p in Projection],
        default=Projection.SPHERICAL.value,
        help='Projection surface (default: spherical)'
    )

    parser.add_argument(
        '--tolerance',
        type=float,
        default=3.0,
        help='Consensus tolerance in pixels per axis (default: 3.0)'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=0,
        help='Seed for hypothesis sampling (default: 0)'
    )

    parser.add_argument(
        '--sampling',
        choices=SAMPLING_MODES,
        default='random',
        help='How trials pick their hypothesis match (default: random)'
    )

    parser.add_argument(
        '--fallback',
        choices=sorted(FALLBACK_POLICIES),
        default='exact_zero',
        help='Fallback when the consensus search finds nothing (default: exact_zero)'
    )

    parser.add_argument(
        '--max-features',
        type=int,
        default=2000,
        help='Maximum corners detected per image (default: 2000)'
    )

    parser.add_argument(
        '--good-match-factor',
        type=float,
        default=3.0,
        help='Keep matches closer than this multiple of the best one (default: 3.0)'
    )

    parser.add_argument(
        '--preview',
        action='store_true',
        help='Open the panorama in an image viewer when done'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print debug output'
    )

    return parser


def main(argv=None):
    """Main function for CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='  %(message)s',
    )

    print_banner()

    # Check input files
    if len(args.images) < 2:
        print("Error: Need at least 2 images to stitch")
        return 1

    for img_path in args.images:
        if not os.path.exists(img_path):
            print(f"Error: Image not found: {img_path}")
            return 1

    print(f"Input images: {len(args.images)}")

    print("\nReading images...")
    try:
        images = read_images(args.images)
    except InputError as e:
        print(f"Error reading images: {str(e)}")
        return 1

    for i, img in enumerate(images):
        print(f"  Image {i+1}: {img.shape}")

    assembler = PanoramaAssembler(
        focal_length=args.focal_length,
        projection=args.projection,
        detector_params={
            'max_features': args.max_features,
        },
        estimator_params={
            'tolerance': args.tolerance,
            'seed': args.seed,
            'sampling': args.sampling,
            'fallback': args.fallback,
        },
        good_match_factor=args.good_match_factor,
    )

    start_time = time.time()

    try:
        result = assembler.assemble(images)
    except InsufficientCorrespondences as e:
        print(f"\nError: {str(e)}")
        return 1
    except StitchingError as e:
        print(f"\nError during stitching: {str(e)}")
        return 1

    elapsed_time = time.time() - start_time

    # Create output directory
    output_dir = os.path.dirname(args.output)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    print("\nSaving panorama...")
    try:
        write_image(args.output, result)
    except IOError as e:
        print(f"Error writing panorama: {str(e)}")
        return 1

    print("\n✓ Success!")
    print(f"  Panorama saved to: {args.output}")
    print(f"  Final size: {result.shape}")
    print(f"  Processing time: {elapsed_time:.2f} seconds")

    if args.preview:
        show_image(result)

    return 0


if __name__ == '__main__':
    sys.exit(main())
