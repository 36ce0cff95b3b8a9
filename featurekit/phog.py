"""
Pyramid Histogram of Oriented Gradients (PHOG)
Input: Grayscale (or BGR) image, then any number of query rectangles
Output: One concatenated orientation histogram per rectangle

Method:
1. Detect edges with Canny to get a binary mask
2. Compute gradient magnitudes and orientations with Sobel kernels
3. Keep only the magnitudes on edge pixels
4. Pre-bin the (unmasked) orientations into nbins equal-width bins over [0, 2*pi)
5. For a query rectangle, walk its quadtree (levels 0..nlevels) and
   concatenate the edge-weighted orientation histogram of every cell

The descriptor has nbins * (4**(nlevels + 1) - 1) / 3 entries.
"""

import logging
import numpy as np
from typing import Optional
from numpy.typing import NDArray

from . import config
from .errors import NotAnalysedError
from .geometry import Rectangle
from .gradients import compute_gradients, detect_edges, to_grayscale
from .histogram import BinnedHistogramAnalyser, Histogram
from .sampling import QuadtreeSampler

logger = logging.getLogger(__name__)


class PyramidHistogramOfGradients:
    """
    Edge-gated pyramid histogram of oriented gradients.

    analyse_image() replaces all state; extract_feature() only reads it, so an
    instance must not be analysed and queried from different threads at once.
    """

    def __init__(self, nlevels: int = config.PHOG_LEVELS, nbins: int = config.PHOG_BINS,
                 canny_low: float = config.CANNY_LOW, canny_high: float = config.CANNY_HIGH):
        """
        Initialize the extractor.

        Args:
            nlevels (int): Deepest pyramid level (level 0 is the whole rectangle)
            nbins (int): Number of orientation bins
            canny_low (float): Lower Canny threshold
            canny_high (float): Upper Canny threshold
        """
        if nlevels < 1:
            raise ValueError(f"Number of levels must be positive, got {nlevels}")

        self.nlevels = int(nlevels)
        self.nbins = int(nbins)
        self.canny_low = canny_low
        self.canny_high = canny_high
        self.hist_extractor = BinnedHistogramAnalyser(self.nbins, 0.0, 2.0 * np.pi)
        self.magnitudes: Optional[NDArray[np.float32]] = None

    @property
    def feature_length(self) -> int:
        """Number of entries in every extracted descriptor."""
        return self.nbins * (4 ** (self.nlevels + 1) - 1) // 3

    def analyse_image(self, image: NDArray) -> None:
        """
        Prepare the edge-masked magnitudes and the orientation bins of an image.

        Args:
            image (np.ndarray): Grayscale or BGR image
        """
        if image is None:
            raise ValueError("Cannot analyse a missing image")

        gray = to_grayscale(np.asarray(image))
        if gray.size == 0:
            raise ValueError("Cannot analyse an empty image")

        logger.debug(f"Analysing {gray.shape[1]}x{gray.shape[0]} image")
        edges = detect_edges(gray, self.canny_low, self.canny_high)
        magnitudes, orientations = compute_gradients(gray)

        self.magnitudes = magnitudes * edges
        self.hist_extractor.analyse_image(orientations)

        logger.debug(f"{int(edges.sum())} edge pixels kept")

    def extract_feature(self, rect: Rectangle) -> Histogram:
        """
        Extract the pyramid descriptor of a rectangle.

        Args:
            rect (Rectangle): Region of the analysed image; parts outside the
                image contribute nothing

        Returns:
            Histogram: Concatenated per-cell histograms in sampler order
        """
        if self.magnitudes is None:
            raise NotAnalysedError("analyse_image() must be called before extract_feature()")
        if rect.is_empty():
            raise ValueError(f"Cannot extract a feature from empty {rect}")

        sampler = QuadtreeSampler(rect, self.nlevels)
        hist = Histogram(0)

        for r in sampler:
            hist.combine(self.hist_extractor.compute_histogram(r, self.magnitudes))

        return hist

    def extract_feature_vector(self, rect: Optional[Rectangle] = None,
                               normalise: bool = False) -> NDArray[np.float64]:
        """
        Extract a descriptor as a numpy vector.

        Args:
            rect: Region to describe (default: the whole analysed image)
            normalise: Scale the descriptor to unit L2 length

        Returns:
            np.ndarray: Descriptor of length feature_length
        """
        if self.magnitudes is None:
            raise NotAnalysedError("analyse_image() must be called before extract_feature_vector()")
        if rect is None:
            rect = Rectangle.from_shape(self.magnitudes.shape)

        hist = self.extract_feature(rect)
        if normalise:
            hist.normalise()

        return hist.values
