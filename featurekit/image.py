"""
Image loading
Reads images from disk or memory and brings them to a working size.
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Optional, Union
from numpy.typing import NDArray


def resize_to_fit(image: NDArray, size: Optional[int]) -> NDArray:
    """
    Shrink an image so its longest side is at most size pixels.

    Args:
        image: Input image
        size: maximum dimension (None to keep original size)
    """
    if size is None:
        return image

    h, w = image.shape[:2]
    if max(w, h) <= size:
        return image

    if w > h:
        new_size = (size, int(h * size / w))
    else:
        new_size = (int(w * size / h), size)
    return np.asarray(cv2.resize(image, new_size, interpolation=cv2.INTER_AREA))


def load_image(path: Union[str, Path], size: Optional[int] = None,
               grayscale: bool = True) -> NDArray[np.uint8]:
    """
    Load an image from disk.

    Args:
        path: path to the image
        size: maximum dimension to resize the image to (None to keep original size)
        grayscale: read a single channel instead of BGR
    """
    flags = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
    img = cv2.imread(str(path), flags)

    if img is None:
        raise ValueError(f"Could not load image from {path}")

    return resize_to_fit(np.asarray(img).astype(np.uint8), size)


def decode_image(data: bytes, size: Optional[int] = None,
                 grayscale: bool = True) -> NDArray[np.uint8]:
    """Decode an encoded image (JPEG, PNG, ...) held in memory."""
    flags = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
    img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), flags)

    if img is None:
        raise ValueError("Could not decode image data")

    return resize_to_fit(np.asarray(img).astype(np.uint8), size)
