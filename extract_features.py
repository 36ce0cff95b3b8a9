"""
featurekit - Feature Extraction Command Line

Commands:
======================

phog       - Pyramid histogram of oriented gradients of an image region
keypoints  - Detect SIFT keypoints and save them as a keypoint file
convert    - Convert a keypoint file between binary and ASCII

Usage:
======
python extract_features.py phog <image> [--rect X Y W H] [--levels N] [--bins N] [--output out.npy]
python extract_features.py keypoints <image> <output.key> [--ascii]
python extract_features.py convert <input.key> <output.key> [--ascii]
"""

import sys
import logging
import argparse
import numpy as np
from pathlib import Path

from featurekit import config
from featurekit.detection import detect_keypoints
from featurekit.geometry import Rectangle
from featurekit.image import load_image
from featurekit.keypoint_io import read_keypoints, write_keypoints
from featurekit.phog import PyramidHistogramOfGradients


def run_phog(args):
    image = load_image(args.image, args.resize)
    extractor = PyramidHistogramOfGradients(nlevels=args.levels, nbins=args.bins)
    extractor.analyse_image(image)

    rect = Rectangle(*args.rect) if args.rect else Rectangle.from_shape(image.shape)
    descriptor = extractor.extract_feature_vector(rect, normalise=args.normalise)

    print(f"✓ PHOG descriptor: {descriptor.shape[0]} values ({args.levels} levels, {args.bins} bins)")
    if args.output:
        np.save(args.output, descriptor)
        print(f"✓ Saved: {args.output}")
    else:
        np.savetxt(sys.stdout, descriptor[np.newaxis, :], fmt='%.6g')


def run_keypoints(args):
    image = load_image(args.image, args.resize)
    keypoints = detect_keypoints(image, max_keypoints=args.max_keypoints)
    write_keypoints(args.output, keypoints, binary=not args.ascii)
    print(f"✓ Saved {len(keypoints)} keypoints: {args.output}")


def run_convert(args):
    keypoints = read_keypoints(args.input)
    write_keypoints(args.output, keypoints, binary=not args.ascii)
    print(f"✓ Converted {len(keypoints)} keypoints: {args.input} -> {args.output}")


def build_parser():
    parser = argparse.ArgumentParser(description="featurekit - Feature Extraction")
    parser.add_argument("--verbose", "-v", action="store_true", help="Print progress messages")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    phog_parser = subparsers.add_parser("phog", help="Extract a PHOG descriptor")
    phog_parser.add_argument("image", help="Image file")
    phog_parser.add_argument("--rect", type=int, nargs=4, metavar=("X", "Y", "W", "H"),
                             help="Region to describe (default: whole image)")
    phog_parser.add_argument("--levels", type=int, default=config.PHOG_LEVELS,
                             help=f"Pyramid levels (default: {config.PHOG_LEVELS})")
    phog_parser.add_argument("--bins", type=int, default=config.PHOG_BINS,
                             help=f"Orientation bins (default: {config.PHOG_BINS})")
    phog_parser.add_argument("--normalise", action="store_true", help="L2-normalise the descriptor")
    phog_parser.add_argument("--resize", type=int, default=None, help="Max image dimension")
    phog_parser.add_argument("--output", "-o", help="Save the descriptor as .npy")

    kp_parser = subparsers.add_parser("keypoints", help="Detect and save keypoints")
    kp_parser.add_argument("image", help="Image file")
    kp_parser.add_argument("output", help="Keypoint file to write")
    kp_parser.add_argument("--ascii", action="store_true", help="Write the ASCII format")
    kp_parser.add_argument("--max-keypoints", type=int, default=0, help="Keep the N strongest (default: all)")
    kp_parser.add_argument("--resize", type=int, default=None, help="Max image dimension")

    convert_parser = subparsers.add_parser("convert", help="Convert a keypoint file")
    convert_parser.add_argument("input", help="Keypoint file (either format)")
    convert_parser.add_argument("output", help="Keypoint file to write")
    convert_parser.add_argument("--ascii", action="store_true", help="Write the ASCII format")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    commands = {"phog": run_phog, "keypoints": run_keypoints, "convert": run_convert}
    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        commands[args.command](args)
    except (ValueError, OSError, EOFError) as e:
        print(f"✗ Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
