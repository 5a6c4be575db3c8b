"""Control client and session for one rtl_tcp connection."""

import logging
import socket
import threading
from typing import Iterator, Optional

import numpy as np

from .commands import Opcode, encode_command, opcode_name
from .common import DEFAULT_BLOCK_SIZE, log
from .errors import InvalidArgument, ProtocolMismatch, TransportError, WriteFailed
from .models import DongleInfo
from .samples import SampleDecoder, complex_buffer


def _flag(state: bool) -> int:
    return 1 if state else 0


class RTLTCPClient:
    """
    Owns a connected rtl_tcp socket and the DongleInfo read from it.

    Commands may be sent from one thread while another drains samples.
    Writers are serialized against each other, and so are readers, so a
    5-byte command or a sample block is never interleaved with another.
    Every setter returns the client so calls can be chained. Nothing is
    ever read back for a command: rtl_tcp has no acknowledgement.

    After any transport failure the session is marked unusable and further
    commands or reads raise TransportError without touching the socket.
    """

    def __init__(self, sock, info: DongleInfo, logger: Optional[logging.Logger] = None):
        self._sock        = sock
        self.info         = info
        self.log          = logger or log
        self._write_lock  = threading.Lock()
        self._read_lock   = threading.Lock()
        self._decoder     = SampleDecoder(sock)
        self._usable      = True
        self._closed      = False
        self.command_count = 0
        self.protocol_error: Optional[ProtocolMismatch] = None

    # ── lifecycle ─────────────────────────────────────────────────────────

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def usable(self) -> bool:
        return self._usable and not self._closed

    @property
    def sample_count(self) -> int:
        return self._decoder.sample_count

    def close(self):
        """Close the socket. Also unblocks a reader waiting in another thread."""
        if self._closed:
            return
        self._closed = True
        self._usable = False
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            self.log.debug(f"Socket shutdown: {e}")
        self._sock.close()
        self.log.info("rtl_tcp connection closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _check_usable(self):
        if self._closed:
            raise TransportError("connection is closed")
        if not self._usable:
            raise TransportError("connection is no longer usable")

    # ── commands ──────────────────────────────────────────────────────────

    def _execute(self, opcode: int, parameter: int) -> "RTLTCPClient":
        frame = encode_command(opcode, parameter)
        with self._write_lock:
            self._check_usable()
            self.log.debug(f"TX: {opcode_name(opcode)} {parameter}")
            try:
                self._sock.sendall(frame)
            except OSError as e:
                # Wire position is unknown now, the connection cannot be reused
                self._usable = False
                raise WriteFailed(opcode, parameter, e) from e
            self.command_count += 1
        return self

    def set_center_freq(self, freq_hz: int) -> "RTLTCPClient":
        """Set the center frequency in Hz."""
        return self._execute(Opcode.SET_FREQUENCY, int(freq_hz))

    def set_sample_rate(self, rate_hz: int) -> "RTLTCPClient":
        """Set the sample rate in Hz."""
        return self._execute(Opcode.SET_SAMPLE_RATE, int(rate_hz))

    def set_gain_mode(self, manual: bool) -> "RTLTCPClient":
        """True selects manual gain (required before set_gain), False automatic."""
        return self._execute(Opcode.SET_GAIN_MODE, _flag(manual))

    def set_gain(self, gain_tenths_db: int) -> "RTLTCPClient":
        """Set tuner gain in tenths of dB (197 => 19.7 dB)."""
        return self._execute(Opcode.SET_GAIN, int(gain_tenths_db))

    def set_gain_db(self, gain_db: float) -> "RTLTCPClient":
        return self.set_gain(int(round(gain_db * 10)))

    def set_freq_correction(self, ppm: int) -> "RTLTCPClient":
        """Set frequency correction in ppm, may be negative."""
        return self._execute(Opcode.SET_FREQ_CORRECTION, int(ppm))

    def set_if_gain(self, stage: int, gain: int) -> "RTLTCPClient":
        """Set gain of one tuner IF stage, gain in tenths of dB."""
        parameter = ((int(stage) & 0xFFFF) << 16) | (int(gain) & 0xFFFF)
        return self._execute(Opcode.SET_IF_GAIN, parameter)

    def set_test_mode(self, enabled: bool) -> "RTLTCPClient":
        """Enable the RTL2832 test mode (counter instead of samples)."""
        return self._execute(Opcode.SET_TEST_MODE, _flag(enabled))

    def set_agc_mode(self, enabled: bool) -> "RTLTCPClient":
        """Enable the RTL2832 digital AGC."""
        return self._execute(Opcode.SET_AGC_MODE, _flag(enabled))

    def set_direct_sampling(self, mode) -> "RTLTCPClient":
        """
        Direct sampling: False/0 off, True/1 I-branch, 2 Q-branch.
        Needed for HF reception on dongles with the direct sampling mod.
        """
        return self._execute(Opcode.SET_DIRECT_SAMPLING, int(mode))

    def set_offset_tuning(self, enabled: bool) -> "RTLTCPClient":
        return self._execute(Opcode.SET_OFFSET_TUNING, _flag(enabled))

    def set_rtl_xtal_freq(self, freq_hz: int) -> "RTLTCPClient":
        """Set the RTL2832 crystal frequency in Hz."""
        return self._execute(Opcode.SET_RTL_XTAL, int(freq_hz))

    def set_tuner_xtal_freq(self, freq_hz: int) -> "RTLTCPClient":
        """Set the tuner crystal frequency in Hz."""
        return self._execute(Opcode.SET_TUNER_XTAL, int(freq_hz))

    def set_gain_by_index(self, index: int) -> "RTLTCPClient":
        """Select a gain step by index, must be within 0..info.gain_count."""
        if not 0 <= index <= self.info.gain_count:
            raise InvalidArgument(
                f"invalid gain index: {index} (gain count {self.info.gain_count})"
            )
        return self._execute(Opcode.SET_GAIN_BY_INDEX, int(index))

    # ── samples ───────────────────────────────────────────────────────────

    def _read(self, fn, out: np.ndarray) -> np.ndarray:
        with self._read_lock:
            self._check_usable()
            try:
                return fn(out)
            except TransportError:
                self._usable = False
                raise

    def read_raw_samples(self, out: np.ndarray) -> np.ndarray:
        """
        Fill ``out`` (uint8, shape (N, 2) or (2N,)) with raw I/Q bytes.
        Blocks until all pairs arrive; raises ShortRead otherwise.
        """
        return self._read(self._decoder.read_raw, out)

    def read_samples(self, count: Optional[int] = None,
                     out: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Read I/Q pairs normalized to complex values in [-1, 1].
        Pass ``out`` to reuse a buffer across calls; otherwise ``count``
        samples are allocated.
        """
        if out is None:
            if count is None:
                raise InvalidArgument("read_samples needs either count or out")
            out = complex_buffer(count)
        return self._read(self._decoder.read_complex, out)

    def iter_samples(self, block_size: int = DEFAULT_BLOCK_SIZE,
                     out: Optional[np.ndarray] = None) -> Iterator[np.ndarray]:
        """
        Yield successive sample blocks. Ends by raising the error that stops
        the stream (ShortRead when the server goes away).
        The same buffer is yielded every time; copy it to keep a block.
        """
        if out is None:
            if block_size < 1:
                raise InvalidArgument(f"block_size must be at least 1, got {block_size}")
            out = complex_buffer(block_size)
        elif out.size == 0:
            raise InvalidArgument("iter_samples needs a non-empty output buffer")
        return self._iter_blocks(out)

    def _iter_blocks(self, out: np.ndarray) -> Iterator[np.ndarray]:
        while True:
            yield self.read_samples(out=out)
