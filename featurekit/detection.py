"""
Keypoint detection
Input: Grayscale image
Output: Keypoints with 128-byte descriptors
Implementation: OpenCV SIFT
"""

import logging
import cv2
import numpy as np
from typing import List
from numpy.typing import NDArray

from .gradients import to_grayscale, to_uint8
from .keypoint import Keypoint

logger = logging.getLogger(__name__)


def detect_keypoints(image: NDArray, max_keypoints: int = 0) -> List[Keypoint]:
    """
    Detect SIFT keypoints and describe them.

    Args:
        image: Grayscale or BGR image
        max_keypoints: Keep only the strongest N keypoints (0 keeps all)

    Returns:
        list: Keypoints whose descriptors hold the SIFT bytes shifted by -128
    """
    if image is None:
        raise ValueError("Cannot detect keypoints in a missing image")

    gray = to_uint8(to_grayscale(np.asarray(image)))
    sift = cv2.SIFT_create(nfeatures=max_keypoints)
    cv_keypoints, descriptors = sift.detectAndCompute(gray, None)

    if descriptors is None:
        logger.info("No keypoints detected")
        return []

    pairs = sorted(zip(cv_keypoints, descriptors), key=lambda p: p[0].response, reverse=True)
    if max_keypoints > 0:
        # SIFT's own limit can keep extra keypoints on response ties
        pairs = pairs[:max_keypoints]

    keypoints = [Keypoint.from_cv2(kp, descriptor) for kp, descriptor in pairs]
    logger.info(f"Detected {len(keypoints)} keypoints")

    return keypoints
