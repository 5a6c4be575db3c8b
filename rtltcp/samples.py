"""Decoding of the rtl_tcp unsigned 8-bit I/Q sample stream."""

from typing import Optional

import numpy as np

from .common import BYTES_PER_SAMPLE
from .errors import InvalidArgument
from .transport import recv_into_exactly

# Offset binary: 127.5 is zero, 0 -> -1.0, 255 -> +1.0
IQ_OFFSET = 127.5
IQ_SCALE  = 127.5


def raw_buffer(count: int) -> np.ndarray:
    """Allocate a reusable buffer for ``count`` raw (I, Q) byte pairs."""
    return np.empty((count, BYTES_PER_SAMPLE), dtype=np.uint8)


def complex_buffer(count: int, dtype=np.complex128) -> np.ndarray:
    """Allocate a reusable buffer for ``count`` normalized complex samples."""
    return np.empty(count, dtype=dtype)


def _as_pairs(raw: np.ndarray) -> np.ndarray:
    if raw.dtype != np.uint8:
        raise InvalidArgument(f"Raw I/Q buffer must be uint8, got {raw.dtype}")
    if raw.size % BYTES_PER_SAMPLE:
        raise InvalidArgument(f"Raw I/Q buffer holds an odd number of bytes ({raw.size})")
    return raw.reshape(-1, BYTES_PER_SAMPLE)


def iq_to_complex(raw: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Convert interleaved uint8 I/Q bytes into complex samples in [-1, 1].
    ``raw`` may be flat (2N,) or shaped (N, 2). When ``out`` is given it must
    hold exactly N complex values and is filled in place without temporaries.
    """
    pairs = _as_pairs(np.asarray(raw))
    count = pairs.shape[0]
    if out is None:
        out = complex_buffer(count)
    elif out.shape != (count,):
        raise InvalidArgument(f"Output buffer shape {out.shape} does not match {count} samples")
    elif not np.iscomplexobj(out):
        raise InvalidArgument(f"Output buffer must be complex, got {out.dtype}")

    re = out.real
    im = out.imag
    np.subtract(pairs[:, 0], IQ_OFFSET, out=re, dtype=re.dtype)
    np.divide(re, IQ_SCALE, out=re)
    np.subtract(pairs[:, 1], IQ_OFFSET, out=im, dtype=im.dtype)
    np.divide(im, IQ_SCALE, out=im)
    return out


class SampleDecoder:
    """
    Reads fixed-size blocks of I/Q pairs off a connected socket.
    Not thread safe on its own; RTLTCPClient serializes readers around it.
    """

    def __init__(self, sock):
        self._sock    = sock
        self._scratch = np.empty(0, dtype=np.uint8)
        self.sample_count = 0       # pairs delivered so far

    def read_raw(self, out: np.ndarray) -> np.ndarray:
        """Fill ``out`` with raw byte pairs. Raises ShortRead if the stream ends first."""
        pairs = _as_pairs(out)
        if not out.flags.c_contiguous:
            raise InvalidArgument("Raw I/Q buffer must be C-contiguous")
        recv_into_exactly(self._sock, out, what="I/Q samples")
        self.sample_count += pairs.shape[0]
        return out

    def read_complex(self, out: np.ndarray) -> np.ndarray:
        """Read ``len(out)`` pairs and store them normalized into ``out``."""
        if out.ndim != 1 or not np.iscomplexobj(out):
            raise InvalidArgument(f"Output buffer must be a 1-D complex array, got {out.dtype}{out.shape}")
        count = out.shape[0]
        needed = count * BYTES_PER_SAMPLE
        if self._scratch.size < needed:
            self._scratch = np.empty(needed, dtype=np.uint8)
        raw = self._scratch[:needed]
        self.read_raw(raw)
        return iq_to_complex(raw, out)
