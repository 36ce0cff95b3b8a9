"""
Orientation histograms
Histogram vectors and a binned analyser that answers weighted histogram
queries over arbitrary rectangles of a pre-binned image.
"""

import logging
import numpy as np
from typing import List, Optional
from numpy.typing import NDArray

from .errors import NotAnalysedError
from .geometry import Rectangle

logger = logging.getLogger(__name__)


class Histogram:
    """
    Ordered vector of bin values.

    combine() concatenates: each combined histogram is kept as its own
    contiguous block at the end of the vector.
    """

    def __init__(self, values=0) -> None:
        """
        Create a new Histogram.

        Args:
            values: number of (zeroed) bins, or an array-like of bin values
        """
        if np.isscalar(values):
            self.values = np.zeros(int(values), dtype=np.float64)
        else:
            self.values = np.asarray(values, dtype=np.float64).ravel().copy()

    def combine(self, other: "Histogram") -> "Histogram":
        """Append other's bins to this histogram and return self."""
        self.values = np.concatenate([self.values, other.values])
        return self

    def normalise(self) -> "Histogram":
        """Scale to unit L2 length in place; all-zero histograms are left as is."""
        norm = np.linalg.norm(self.values)
        if norm > 1e-7:
            self.values = self.values / norm
        return self

    def blocks(self, size: int) -> List[NDArray[np.float64]]:
        """Split into consecutive blocks of the given size."""
        if size <= 0 or len(self) % size != 0:
            raise ValueError(f"Cannot split {len(self)} bins into blocks of {size}")
        return [self.values[i:i + size] for i in range(0, len(self), size)]

    def __len__(self):
        return self.values.shape[0]

    def __getitem__(self, index):
        return self.values[index]

    def __array__(self, dtype=None, copy=None):
        if dtype is None:
            return self.values
        return self.values.astype(dtype)

    def __eq__(self, other):
        if not isinstance(other, Histogram):
            return NotImplemented
        return np.array_equal(self.values, other.values)

    __hash__ = None

    def __repr__(self):
        return f"Histogram({len(self)} bins)"


class BinnedHistogramAnalyser:
    """
    Hard-assigns every pixel of an image to one of nbins equal-width bins once,
    then builds weighted histograms of any sub-rectangle on demand.

    Values at max_value fall in the last bin; values outside
    [min_value, max_value] are clamped to the first/last bin.
    """

    def __init__(self, nbins: int, min_value: float = 0.0, max_value: float = 2.0 * np.pi) -> None:
        """
        Initialize the analyser.

        Args:
            nbins (int): Number of bins
            min_value (float): Lower edge of the first bin
            max_value (float): Upper edge of the last bin
        """
        if nbins < 1:
            raise ValueError(f"Number of bins must be positive, got {nbins}")
        if max_value <= min_value:
            raise ValueError(f"Empty value range [{min_value}, {max_value}]")

        self.nbins = int(nbins)
        self.min_value = float(min_value)
        self.max_value = float(max_value)
        self.bin_map: Optional[NDArray[np.intp]] = None

    def analyse_image(self, values: NDArray) -> None:
        """Assign every pixel of values to its bin, replacing any previous analysis."""
        if values is None:
            raise ValueError("Cannot analyse a missing image")

        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"Expected a 2D image, got shape {values.shape}")

        scaled = (values - self.min_value) / (self.max_value - self.min_value) * self.nbins
        bins = np.floor(scaled).astype(np.intp)
        self.bin_map = np.clip(bins, 0, self.nbins - 1)

        logger.debug(f"Binned {values.size} pixels into {self.nbins} bins")

    def compute_histogram(self, rect: Rectangle, weights: NDArray) -> Histogram:
        """
        Weighted histogram of the pixels inside rect.

        Args:
            rect: Region to accumulate; clipped to the image bounds
            weights: Per-pixel weights with the same shape as the analysed image

        Returns:
            Histogram with nbins entries
        """
        if self.bin_map is None:
            raise NotAnalysedError("analyse_image() must be called before compute_histogram()")
        if weights.shape != self.bin_map.shape:
            raise ValueError(
                f"Weight shape {weights.shape} does not match analysed shape {self.bin_map.shape}"
            )

        hist = Histogram(self.nbins)
        region = rect.clip(self.bin_map.shape)
        if region is None:
            return hist

        rows, cols = region.slices()
        hist.values = np.bincount(
            self.bin_map[rows, cols].ravel(),
            weights=np.asarray(weights[rows, cols], dtype=np.float64).ravel(),
            minlength=self.nbins,
        )
        return hist

    def bin_mask(self, index: int) -> NDArray[np.bool_]:
        """Membership map of a single bin, built from bin_map on request."""
        if self.bin_map is None:
            raise NotAnalysedError("analyse_image() must be called first")
        if not 0 <= index < self.nbins:
            raise ValueError(f"Bin index {index} outside [0, {self.nbins})")
        return self.bin_map == index
