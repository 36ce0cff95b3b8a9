"""
Keypoint list files.

ASCII files follow Lowe's .key layout: a "<count> <length>" header line,
then every keypoint in its ASCII form. Binary files start with the magic
b"KPT", then big-endian int32 count and descriptor length, then every
keypoint in its binary form.
"""

import io
import logging
import numpy as np
from pathlib import Path
from typing import List

from .keypoint import DEFAULT_LENGTH, Keypoint, read_exactly

logger = logging.getLogger(__name__)

BINARY_MAGIC = b"KPT"
HEADER_DTYPE = np.dtype('>i4')


def _descriptor_length(keypoints: List[Keypoint]) -> int:
    lengths = {len(k) for k in keypoints}
    if len(lengths) > 1:
        raise ValueError(f"Keypoints have mixed descriptor lengths: {sorted(lengths)}")
    return lengths.pop() if lengths else DEFAULT_LENGTH


def write_keypoints_binary(stream, keypoints: List[Keypoint]) -> None:
    length = _descriptor_length(keypoints)
    stream.write(BINARY_MAGIC)
    stream.write(np.array([len(keypoints), length], dtype=HEADER_DTYPE).tobytes())
    for keypoint in keypoints:
        keypoint.write_binary(stream)


def read_keypoints_binary(stream) -> List[Keypoint]:
    magic = read_exactly(stream, len(BINARY_MAGIC))
    if magic != BINARY_MAGIC:
        raise ValueError(f"Not a binary keypoint file (magic {magic!r})")

    count, length = (int(v) for v in np.frombuffer(read_exactly(stream, 8), dtype=HEADER_DTYPE))
    if count < 0 or length < 0:
        raise ValueError(f"Corrupt keypoint header: count={count}, length={length}")

    return [Keypoint(length=length).read_binary(stream) for _ in range(count)]


def write_keypoints_ascii(stream, keypoints: List[Keypoint]) -> None:
    length = _descriptor_length(keypoints)
    stream.write(f"{len(keypoints)} {length}\n")
    for keypoint in keypoints:
        keypoint.write_ascii(stream)


def read_keypoints_ascii(stream) -> List[Keypoint]:
    header = stream.readline().split()
    if len(header) != 2:
        raise ValueError(f"Expected '<count> <length>' header, got {' '.join(header)!r}")

    count, length = int(header[0]), int(header[1])
    if count < 0 or length < 0:
        raise ValueError(f"Corrupt keypoint header: count={count}, length={length}")

    return [Keypoint(length=length).read_ascii(stream) for _ in range(count)]


def _is_stream(target) -> bool:
    return hasattr(target, 'read') or hasattr(target, 'write')


def write_keypoints(path_or_stream, keypoints: List[Keypoint], binary: bool = True) -> None:
    """
    Save keypoints to a file or an open file object.

    Args:
        path_or_stream: Output path, or a file object open for writing (a
            text stream takes the ASCII format only)
        keypoints: Keypoints sharing one descriptor length
        binary: Binary format if True, ASCII otherwise
    """
    if _is_stream(path_or_stream):
        if isinstance(path_or_stream, io.TextIOBase):
            if binary:
                raise ValueError("Binary keypoints need a stream opened in binary mode")
            write_keypoints_ascii(path_or_stream, keypoints)
        else:
            path_or_stream.write(dumps_keypoints(keypoints, binary=binary))
        logger.info(f"Wrote {len(keypoints)} keypoints to stream")
        return

    path = Path(path_or_stream)
    if binary:
        with open(path, 'wb') as f:
            write_keypoints_binary(f, keypoints)
    else:
        with open(path, 'w') as f:
            write_keypoints_ascii(f, keypoints)

    logger.info(f"Wrote {len(keypoints)} keypoints to {path}")


def read_keypoints(path_or_stream) -> List[Keypoint]:
    """Load keypoints from a path or file object, detecting the format from its first bytes."""
    if _is_stream(path_or_stream):
        data = path_or_stream.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        data = Path(path_or_stream).read_bytes()
    return loads_keypoints(data)


def dumps_keypoints(keypoints: List[Keypoint], binary: bool = True) -> bytes:
    """Serialise keypoints to bytes (ASCII output is UTF-8 encoded)."""
    if binary:
        buffer = io.BytesIO()
        write_keypoints_binary(buffer, keypoints)
        return buffer.getvalue()

    text = io.StringIO()
    write_keypoints_ascii(text, keypoints)
    return text.getvalue().encode('utf-8')


def loads_keypoints(data: bytes) -> List[Keypoint]:
    """Parse keypoints from bytes in either format."""
    if data.startswith(BINARY_MAGIC):
        return read_keypoints_binary(io.BytesIO(data))
    return read_keypoints_ascii(io.StringIO(data.decode('utf-8')))
