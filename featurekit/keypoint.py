"""
SIFT-style keypoints
A keypoint is a scale-space location (x, y, orientation, scale) plus a
byte-quantised descriptor.

Binary form (no header, no length field; the reader must know the
descriptor length):
    float32 x, float32 y, float32 orientation, float32 scale (big-endian)
    followed by len(ivec) signed bytes

ASCII form:
    "x y orientation scale" on one line, then the descriptor values offset
    by +128 (so in [0, 255]), 20 per line, each preceded by a space.
"""

import cv2
import numpy as np
from typing import List, Optional, Sequence
from numpy.typing import NDArray

from . import config
from .errors import DegenerateTransformError

DEFAULT_LENGTH = config.DESCRIPTOR_LENGTH
LOCATION_DTYPE = np.dtype('>f4')
LOCATION_BYTES = 4 * LOCATION_DTYPE.itemsize


def _f32(value) -> float:
    """Round a number to the nearest float32 value."""
    return float(np.float32(value))


def _f32_bits(value) -> int:
    """IEEE bit pattern of value as a float32."""
    return int(np.float32(value).view(np.uint32))


def _format_f32(value: float) -> str:
    # Shortest text that parses back to the same float32
    return str(np.float32(value))


def read_exactly(stream, n: int) -> bytes:
    data = stream.read(n)
    if data is None or len(data) < n:
        got = 0 if data is None else len(data)
        raise EOFError(f"Expected {n} bytes, stream ended after {got}")
    return data


class KeypointLocation:
    """Scale-space location of a keypoint."""

    def __init__(self, x: float = 0.0, y: float = 0.0, orientation: float = 0.0, scale: float = 0.0) -> None:
        self.x = _f32(x)
        self.y = _f32(y)
        self.orientation = _f32(orientation)
        self.scale = _f32(scale)

    def write_binary(self, stream) -> None:
        values = np.array([self.x, self.y, self.orientation, self.scale], dtype=LOCATION_DTYPE)
        stream.write(values.tobytes())

    def read_binary(self, stream) -> "KeypointLocation":
        values = np.frombuffer(read_exactly(stream, LOCATION_BYTES), dtype=LOCATION_DTYPE)
        self.x, self.y, self.orientation, self.scale = (float(v) for v in values)
        return self

    def write_ascii(self, stream) -> None:
        stream.write(" ".join(_format_f32(v) for v in (self.x, self.y, self.orientation, self.scale)))
        stream.write("\n")

    def read_ascii(self, stream) -> "KeypointLocation":
        line = stream.readline()
        if not line:
            raise EOFError("Stream ended before keypoint location")

        tokens = line.split()
        if len(tokens) != 4:
            raise ValueError(f"Expected 4 location values, got {len(tokens)}: {line.strip()!r}")

        self.x, self.y, self.orientation, self.scale = (_f32(float(t)) for t in tokens)
        return self

    def __eq__(self, other):
        if not isinstance(other, KeypointLocation):
            return NotImplemented
        return all(_f32_bits(a) == _f32_bits(b) for a, b in zip(
            (self.x, self.y, self.orientation, self.scale),
            (other.x, other.y, other.orientation, other.scale)))

    __hash__ = None

    def __repr__(self):
        return f"KeypointLocation({self.x}, {self.y}, {self.orientation}, {self.scale})"


class Keypoint:
    """
    A local feature: location, dominant orientation, scale and an int8
    descriptor whose length is fixed once the keypoint exists.

    Two keypoints are location-equal when x, y and scale match bit for bit; they
    are equal (==) when the descriptors match as well. Orientation takes part
    in neither.
    """

    dimensions = 3

    def __init__(self, x: float = 0.0, y: float = 0.0, ori: float = 0.0, scale: float = 0.0,
                 ivec: Optional[Sequence[int]] = None, length: Optional[int] = None) -> None:
        """
        Create a new Keypoint.

        Args:
            x, y: position
            ori: dominant orientation in radians
            scale: scale of the keypoint
            ivec: descriptor; an int8 numpy array is used as is (not copied)
            length: descriptor length when ivec is not given (default 128)
        """
        self.x = x
        self.y = y
        self.ori = ori
        self.scale = scale

        if ivec is None:
            self._ivec = np.zeros(DEFAULT_LENGTH if length is None else length, dtype=np.int8)
        else:
            self._ivec = np.asarray(ivec, dtype=np.int8)
            if self._ivec.ndim != 1:
                raise ValueError(f"Descriptor must be one-dimensional, got shape {self._ivec.shape}")
            if length is not None and length != self._ivec.shape[0]:
                raise ValueError(f"Descriptor has {self._ivec.shape[0]} values, expected {length}")

    # Location fields are held at float32 precision
    @property
    def x(self) -> float:
        return self._x

    @x.setter
    def x(self, value: float) -> None:
        self._x = _f32(value)

    @property
    def y(self) -> float:
        return self._y

    @y.setter
    def y(self, value: float) -> None:
        self._y = _f32(value)

    @property
    def ori(self) -> float:
        return self._ori

    @ori.setter
    def ori(self, value: float) -> None:
        self._ori = _f32(value)

    @property
    def scale(self) -> float:
        return self._scale

    @scale.setter
    def scale(self, value: float) -> None:
        self._scale = _f32(value)

    @property
    def ivec(self) -> NDArray[np.int8]:
        return self._ivec

    @ivec.setter
    def ivec(self, values) -> None:
        values = np.asarray(values, dtype=np.int8)
        if values.shape != self._ivec.shape:
            raise ValueError(
                f"Descriptor length is fixed at {self._ivec.shape[0]}, got shape {values.shape}"
            )
        self._ivec = values

    def __len__(self):
        return self._ivec.shape[0]

    @property
    def feature_vector(self) -> NDArray[np.int8]:
        """The descriptor (not a copy)."""
        return self._ivec

    def get_ordinate(self, dimension: int) -> Optional[float]:
        """Coordinate in (x, y, scale) space, or None past the third dimension."""
        if dimension == 0:
            return self.x
        if dimension == 1:
            return self.y
        if dimension == 2:
            return self.scale
        return None

    def copy_from(self, point) -> None:
        """Take x and y from any object exposing them."""
        self.x = point.x
        self.y = point.y

    def get_location(self) -> KeypointLocation:
        return KeypointLocation(self.x, self.y, self.ori, self.scale)

    def set_location(self, location: KeypointLocation) -> None:
        self.x = location.x
        self.y = location.y
        self.scale = location.scale
        self.ori = location.orientation

    location = property(get_location, set_location)

    def location_equals(self, other) -> bool:
        if other is self:
            return True
        if not isinstance(other, Keypoint):
            return False
        return self._location_bits() == other._location_bits()

    def __eq__(self, other):
        if other is self:
            return True
        if not isinstance(other, Keypoint):
            return NotImplemented
        return self.location_equals(other) and np.array_equal(self._ivec, other._ivec)

    def _location_bits(self):
        # Bitwise, so NaN equals itself and 0.0 differs from -0.0
        return (_f32_bits(self.y), _f32_bits(self.x), _f32_bits(self.scale))

    def __hash__(self):
        return hash(self._location_bits())

    def __repr__(self):
        return f"Keypoint({self.x}, {self.y}, {self.scale},{self.ori})"

    def clone(self) -> "Keypoint":
        """Copy with its own descriptor array."""
        return Keypoint(self.x, self.y, self.ori, self.scale, self._ivec.copy())

    def translate(self, dx: float, dy: float) -> None:
        """Move the keypoint in place; the descriptor is untouched."""
        self.x = self.x + dx
        self.y = self.y + dy

    def transform(self, matrix) -> "Keypoint":
        """
        Apply a 3x3 projective transform to the position.

        Args:
            matrix: 3x3 array-like acting on (x, y, 1)

        Returns:
            New keypoint at the transformed position with a copy of the
            descriptor; orientation and scale are carried over unchanged
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != (3, 3):
            raise ValueError(f"Expected a 3x3 transform, got shape {matrix.shape}")

        xt, yt, zt = matrix @ np.array([self.x, self.y, 1.0])
        if zt == 0:
            raise DegenerateTransformError(f"Transform sends {self!r} to infinity")

        return Keypoint(xt / zt, yt / zt, self.ori, self.scale, self._ivec.copy())

    def binary_header(self) -> bytes:
        return b""

    def ascii_header(self) -> str:
        return ""

    def write_binary(self, stream) -> None:
        self.get_location().write_binary(stream)
        stream.write(self._ivec.tobytes())

    def read_binary(self, stream) -> "Keypoint":
        """Fill this keypoint from a binary stream; reads exactly len(self) descriptor bytes."""
        self.set_location(KeypointLocation().read_binary(stream))
        data = read_exactly(stream, len(self))
        self._ivec[:] = np.frombuffer(data, dtype=np.int8)
        return self

    def write_ascii(self, stream) -> None:
        self.get_location().write_ascii(stream)
        per_line = config.ASCII_VALUES_PER_LINE
        for i, value in enumerate(self._ivec):
            if i > 0 and i % per_line == 0:
                stream.write("\n")
            stream.write(f" {int(value) + 128}")
        stream.write("\n")

    def read_ascii(self, stream) -> "Keypoint":
        """Fill this keypoint from a text stream; reads exactly len(self) descriptor values."""
        self.set_location(KeypointLocation().read_ascii(stream))

        values: List[int] = []
        if len(self) == 0:
            stream.readline()

        while len(values) < len(self):
            line = stream.readline()
            if not line:
                raise EOFError(f"Stream ended after {len(values)} of {len(self)} descriptor values")
            values.extend(int(token) for token in line.split())

        if len(values) != len(self):
            raise ValueError(f"Read {len(values)} descriptor values, expected {len(self)}")

        unsigned = np.array(values, dtype=np.int64)
        if unsigned.size and (unsigned.min() < 0 or unsigned.max() > 255):
            raise ValueError("Descriptor values must lie in [0, 255]")

        self._ivec[:] = (unsigned - 128).astype(np.int8)
        return self

    @classmethod
    def from_cv2(cls, keypoint: cv2.KeyPoint, descriptor: Optional[NDArray] = None,
                 length: Optional[int] = None) -> "Keypoint":
        """
        Convert an OpenCV keypoint.

        OpenCV angles are in degrees (-1 when undefined) and size is a
        diameter; orientation becomes radians and scale is size / 2. A uint8
        descriptor is shifted by -128 into int8.
        """
        ori = 0.0 if keypoint.angle < 0 else np.deg2rad(keypoint.angle)
        ivec = None
        if descriptor is not None:
            descriptor = np.clip(np.round(np.asarray(descriptor, dtype=np.float64)), 0, 255)
            ivec = (descriptor.astype(np.int16) - 128).astype(np.int8)

        x, y = keypoint.pt
        return cls(x, y, ori, keypoint.size / 2.0, ivec, length)

    def to_cv2(self) -> cv2.KeyPoint:
        """Convert to an OpenCV keypoint (the descriptor is not carried)."""
        return cv2.KeyPoint(self.x, self.y, 2.0 * self.scale, float(np.rad2deg(self.ori)))


def shift_keypoints(keypoints: List[Keypoint], x: float, y: float) -> List[Keypoint]:
    """
    Express keypoints relative to (x, y).

    Returns new keypoints; the inputs are not modified. The new keypoints
    SHARE their descriptor arrays with the originals, so writing into one
    descriptor changes both. Use Keypoint.clone() for independent copies.
    """
    return [Keypoint(k.x - x, k.y - y, k.ori, k.scale, k.ivec) for k in keypoints]


def rescale_keypoints(keypoints: List[Keypoint], factor: float) -> List[Keypoint]:
    """
    Scale positions and scales by factor.

    Returns new keypoints; the inputs are not modified. As with
    shift_keypoints, descriptor arrays are shared with the originals.
    """
    return [Keypoint(k.x * factor, k.y * factor, k.ori, k.scale * factor, k.ivec) for k in keypoints]
