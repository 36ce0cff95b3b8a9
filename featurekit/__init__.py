"""featurekit: pyramid gradient histograms, SIFT-style keypoints and text helpers"""

from .errors import DegenerateTransformError, NotAnalysedError
from .geometry import Rectangle
from .histogram import BinnedHistogramAnalyser, Histogram
from .sampling import QuadtreeSampler
from .phog import PyramidHistogramOfGradients
from .keypoint import Keypoint, KeypointLocation, rescale_keypoints, shift_keypoints
from .keypoint_io import read_keypoints, write_keypoints

__version__ = '1.0.0'

__all__ = [
    'DegenerateTransformError',
    'NotAnalysedError',
    'Rectangle',
    'BinnedHistogramAnalyser',
    'Histogram',
    'QuadtreeSampler',
    'PyramidHistogramOfGradients',
    'Keypoint',
    'KeypointLocation',
    'rescale_keypoints',
    'shift_keypoints',
    'read_keypoints',
    'write_keypoints',
]
