"""
Gradient and edge primitives
Input: Grayscale image
Output: Binary edge mask, gradient magnitude and orientation fields
Implementation: OpenCV (Canny, Sobel kernels through filter2D)
"""

import logging
import cv2
import numpy as np
from typing import Tuple
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * np.pi

SOBEL_X = np.array([[-1, 0, 1],
                    [-2, 0, 2],
                    [-1, 0, 1]], dtype=np.float32)

SOBEL_Y = np.array([[-1, -2, -1],
                    [ 0,  0,  0],
                    [ 1,  2,  1]], dtype=np.float32)


def to_grayscale(image: NDArray) -> NDArray:
    """Collapse a BGR image to a single channel, pass 2D images through."""
    if image.ndim == 3:
        if image.shape[2] == 1:
            return image[:, :, 0]
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if image.ndim != 2:
        raise ValueError(f"Expected a 2D or 3D image, got shape {image.shape}")
    return image


def to_uint8(image: NDArray) -> NDArray[np.uint8]:
    """
    Convert an image to 8-bit intensities.

    Float images with values in [0, 1] are scaled to [0, 255]; anything else
    is clipped to that range.
    """
    if image.dtype == np.uint8:
        return image

    image = image.astype(np.float32)
    if image.size > 0 and image.max() <= 1.0:
        image = image * 255.0

    return np.clip(np.round(image), 0, 255).astype(np.uint8)


def detect_edges(image: NDArray, low: float, high: float) -> NDArray[np.float32]:
    """
    Run Canny edge detection.

    Args:
        image: Grayscale image
        low: Lower hysteresis threshold (8-bit scale)
        high: Upper hysteresis threshold (8-bit scale)

    Returns:
        Float32 mask with 1.0 on edge pixels and 0.0 elsewhere
    """
    edges = cv2.Canny(to_uint8(image), low, high)
    return (edges > 0).astype(np.float32)


def compute_gradients(image: NDArray) -> Tuple[NDArray[np.float32], NDArray[np.float32]]:
    """
    Compute gradient magnitude and orientation.

    Args:
        image: Grayscale image

    Returns:
        tuple: (magnitude, orientation) with orientation in radians, [0, 2*pi)
    """
    image = image.astype(np.float32)

    grad_x = cv2.filter2D(image, -1, SOBEL_X)
    grad_y = cv2.filter2D(image, -1, SOBEL_Y)

    magnitude = np.sqrt(grad_x ** 2 + grad_y ** 2)
    orientation = np.mod(np.arctan2(grad_y, grad_x), TWO_PI).astype(np.float32)

    # float32 rounding can land exactly on 2*pi
    orientation[orientation >= TWO_PI] = 0.0

    return magnitude, orientation
