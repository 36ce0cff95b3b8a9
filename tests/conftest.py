import sys
from pathlib import Path

import cv2
import numpy as np
import pytest

# Make the project root importable (featurekit, backend.server, extract_features)
sys.path.insert(0, str(Path(__file__).parent.parent))

from featurekit.keypoint import Keypoint


# =============================================================================
# Image Fixtures
# =============================================================================

@pytest.fixture
def square_image():
    """64x64 black image with a bright square in the middle."""
    image = np.zeros((64, 64), dtype=np.uint8)
    image[20:44, 20:44] = 255
    return image


@pytest.fixture
def vertical_edge_image():
    """Dark left half, bright right half: every gradient points along +x."""
    image = np.zeros((32, 64), dtype=np.uint8)
    image[:, 32:] = 255
    return image


@pytest.fixture
def blob_image():
    """Scattered discs of different sizes, something SIFT can latch onto."""
    image = np.full((240, 240), 40, dtype=np.uint8)
    rng = np.random.RandomState(7)
    for _ in range(25):
        center = tuple(int(v) for v in rng.randint(20, 220, size=2))
        radius = int(rng.randint(4, 14))
        cv2.circle(image, center, radius, int(rng.randint(150, 255)), -1)
    return cv2.GaussianBlur(image, (5, 5), 1.0)


@pytest.fixture
def png_bytes(square_image):
    ok, buffer = cv2.imencode('.png', square_image)
    assert ok
    return buffer.tobytes()


# =============================================================================
# Keypoint Fixtures
# =============================================================================

def make_keypoints(n, length=128, seed=42):
    rng = np.random.RandomState(seed)
    keypoints = []
    for _ in range(n):
        x, y = rng.uniform(0, 640, size=2)
        ori = rng.uniform(-np.pi, np.pi)
        scale = rng.uniform(0.5, 20)
        ivec = rng.randint(-128, 128, size=length).astype(np.int8)
        keypoints.append(Keypoint(x, y, ori, scale, ivec))
    return keypoints


@pytest.fixture
def keypoints():
    return make_keypoints(5)


@pytest.fixture
def keypoint():
    ivec = np.arange(-128, 128, 2, dtype=np.int8)
    return Keypoint(12.5, 40.25, 0.75, 3.1, ivec)
